"""
Dr.Predict — Схеми даних

Pydantic моделі вхідних клінічних даних.
"""

from .clinical import ClinicalInput, Level, MAX_BLOOD_PRESSURE

__all__ = [
    "ClinicalInput",
    "Level",
    "MAX_BLOOD_PRESSURE",
]
