"""
Dr.Predict — Health Routes

Health check та стан рушія прогнозування.
"""

from fastapi import APIRouter, Depends

from dr_predict import __version__
from dr_predict.lifecycle import ModelLifecycleManager, ModelState
from ..dependencies import get_manager
from ..models import HealthResponse

router = APIRouter(tags=["Health"])


_STATUS = {
    ModelState.READY: "ok",
    ModelState.FAILED: "failed",
}


@router.get("/health", response_model=HealthResponse)
async def health_check(
    manager: ModelLifecycleManager = Depends(get_manager)
) -> HealthResponse:
    """
    Перевірка стану сервера.

    Повертає:
    - ok: модель опублікована
    - starting: дані завантажуються або модель навчається
    - failed: ініціалізація завершилась помилкою (див. engine.error)
    """
    return HealthResponse(
        status=_STATUS.get(manager.state, "starting"),
        version=__version__,
        engine=manager.status(),
    )
