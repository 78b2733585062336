"""
Dr.Predict — Схема клінічних даних для інференсу

Pydantic модель запиту: ті самі імена полів, що й у записах датасету,
тому FeatureEncoder кодує її так само, як рядок CSV.
"""

import math
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Level(str, Enum):
    """Категоріальний рівень показника"""
    HIGH = "High"
    NORMAL = "Normal"
    LOW = "Low"


MAX_BLOOD_PRESSURE = 300.0


class ClinicalInput(BaseModel):
    """
    Клінічні дані пацієнта для прогнозу.

    Приклад:
        features = ClinicalInput(
            fever=True,
            cough=True,
            age=35,
            gender="Male",
            blood_pressure=120
        )
    """
    model_config = ConfigDict(
        populate_by_name=True,
        frozen=True,
        extra="ignore",
        json_schema_extra={
            "example": {
                "fever": True,
                "cough": True,
                "fatigue": False,
                "difficultyBreathing": False,
                "age": 35,
                "gender": "Male",
                "bloodPressure": 120
            }
        }
    )

    # Симптоми
    fever: bool = False
    cough: bool = False
    fatigue: bool = False
    difficulty_breathing: bool = Field(default=False, alias="difficultyBreathing")

    # Профіль пацієнта
    age: int = Field(..., ge=0, le=130, description="Вік, роки")
    gender: str = Field(..., min_length=1, max_length=32, description="Стать")
    blood_pressure: Union[float, Level] = Field(
        ...,
        alias="bloodPressure",
        description="Систолічний тиск (мм рт. ст.) або категорія High/Normal/Low"
    )
    cholesterol_level: Optional[Level] = Field(default=None, alias="cholesterolLevel")

    @field_validator("gender")
    @classmethod
    def strip_gender(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("gender must not be blank")
        return v

    @field_validator("blood_pressure", mode="before")
    @classmethod
    def parse_blood_pressure(cls, v):
        """Число в [0, 300] або категорія (без урахування регістру)"""
        if isinstance(v, bool):
            raise ValueError("blood pressure must be a number or High/Normal/Low")
        if isinstance(v, Level):
            return v
        if isinstance(v, str):
            for level in Level:
                if v.strip().lower() == level.value.lower():
                    return level
            try:
                v = float(v)
            except ValueError:
                raise ValueError("blood pressure must be a number or High/Normal/Low") from None
        if isinstance(v, (int, float)):
            if not math.isfinite(v) or not 0 <= v <= MAX_BLOOD_PRESSURE:
                raise ValueError(f"blood pressure must be within 0..{MAX_BLOOD_PRESSURE:g}")
            return float(v)
        raise ValueError("blood pressure must be a number or High/Normal/Low")

    @field_validator("cholesterol_level", mode="before")
    @classmethod
    def parse_level(cls, v):
        if isinstance(v, str):
            for level in Level:
                if v.strip().lower() == level.value.lower():
                    return level
        return v
