"""
Dr.Predict — Prediction Routes

Endpoints для прогнозування умов.
"""

import time
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends

from dr_predict.lifecycle import ModelLifecycleManager
from dr_predict.neural_network import ConditionPredictor
from ..dependencies import get_manager, get_predictor
from ..models import (
    PREDICT_EXAMPLE,
    ConditionListResponse,
    ConditionProbability,
    ErrorResponse,
    PredictResponse,
)

router = APIRouter(tags=["Prediction"])


@router.post(
    "/predict",
    response_model=PredictResponse,
    responses={503: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
def predict_conditions(
    payload: Dict[str, Any] = Body(..., examples=[PREDICT_EXAMPLE]),
    predictor: ConditionPredictor = Depends(get_predictor)
) -> PredictResponse:
    """
    Прогноз умов за симптомами та вітальними показниками.

    Тіло запиту:
    - features: клінічні поля (fever, cough, fatigue, difficultyBreathing,
      age, gender, bloodPressure, cholesterolLevel)
    - threshold: мінімальна ймовірність (за замовчуванням default_threshold)

    Поки модель не опублікована, повертає 503 (NOT_READY) навіть
    для некоректного тіла. Валідацію полів робить предиктор.
    """
    start_time = time.time()

    result = predictor.predict(payload.get("features"), payload.get("threshold"))

    elapsed_ms = (time.time() - start_time) * 1000

    return PredictResponse(
        predictions=[
            ConditionProbability(condition=c, probability=p, rank=i + 1)
            for i, (c, p) in enumerate(result)
        ],
        threshold=result.threshold,
        model_version=result.model_version,
        processing_time_ms=elapsed_ms,
    )


@router.get(
    "/conditions",
    response_model=ConditionListResponse,
    responses={503: {"model": ErrorResponse}},
)
async def list_conditions(
    manager: ModelLifecycleManager = Depends(get_manager)
) -> ConditionListResponse:
    """Словник умов опублікованої моделі (порядок = індекси виходу)"""
    bundle = manager.acquire()
    return ConditionListResponse(
        conditions=list(bundle.conditions),
        count=bundle.n_conditions,
        model_version=bundle.version,
    )
