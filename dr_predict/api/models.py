"""
Dr.Predict — API Models

Pydantic моделі для відповідей API.

Тіло POST /predict валідує сам предиктор (через ClinicalInput),
щоб стан NOT_READY мав пріоритет над помилками полів.
"""

from typing import Any, Dict, List

from pydantic import BaseModel, Field


# ============================================================
# Prediction Models
# ============================================================

# Низькі пороги (наприклад 0.04) допустимі для скринінгу і можуть
# повернути більшу частину словника умов
PREDICT_EXAMPLE: Dict[str, Any] = {
    "features": {
        "fever": True,
        "cough": True,
        "fatigue": False,
        "difficultyBreathing": False,
        "age": 35,
        "gender": "Male",
        "bloodPressure": 120
    },
    "threshold": 0.04
}


class ConditionProbability(BaseModel):
    """Одна умова з ймовірністю"""
    condition: str
    probability: float = Field(..., ge=0, le=1)
    rank: int


class PredictResponse(BaseModel):
    """Ранжований список умов"""
    predictions: List[ConditionProbability]
    threshold: float
    model_version: int
    processing_time_ms: float


class ConditionListResponse(BaseModel):
    """Опублікований словник умов"""
    conditions: List[str]
    count: int
    model_version: int


# ============================================================
# Service Models
# ============================================================

class HealthResponse(BaseModel):
    """Health check response"""
    status: str = "ok"
    version: str = "1.0.0"
    engine: Dict[str, Any] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Помилка"""
    error: str
    message: str
    details: Dict[str, Any] = Field(default_factory=dict)
