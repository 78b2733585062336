"""
Dr.Predict — Прогнозування умов

ConditionPredictor обслуговує один запит: кодування → нормалізація
опублікованими статистиками → один forward pass → фільтр за порогом
→ сортування.

Про пороги: класи в датасеті погано розділяються, тому операційно
використовувались дуже низькі пороги (наприклад 0.04). Такий поріг може
повернути більшу частину словника — це компроміс точності, а не помилка.
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple, TYPE_CHECKING

import numpy as np
import torch
from pydantic import ValidationError

from dr_predict.config import PredictorConfig
from dr_predict.exceptions import InvalidInputError
from dr_predict.schemas import ClinicalInput

if TYPE_CHECKING:
    from dr_predict.lifecycle import ModelLifecycleManager


@dataclass
class PredictionResult:
    """Впорядкований список (condition, probability), probability ∈ [0, 1]"""
    predictions: List[Tuple[str, float]]
    threshold: float
    model_version: int = 0

    @property
    def conditions(self) -> List[str]:
        return [c for c, _ in self.predictions]

    @property
    def probabilities(self) -> List[float]:
        return [p for _, p in self.predictions]

    @property
    def top_condition(self) -> Optional[str]:
        return self.predictions[0][0] if self.predictions else None

    def get_top_n(self, n: int = 5) -> List[Tuple[str, float]]:
        return self.predictions[:n]

    def __len__(self) -> int:
        return len(self.predictions)

    def __iter__(self) -> Iterator[Tuple[str, float]]:
        return iter(self.predictions)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "predictions": [
                {"condition": c, "probability": p} for c, p in self.predictions
            ],
            "threshold": self.threshold,
            "model_version": self.model_version,
        }


def rank_conditions(
    probabilities: Sequence[float],
    conditions: Sequence[str],
    threshold: float
) -> List[Tuple[str, float]]:
    """
    Відфільтрувати p >= threshold та відсортувати за спаданням p;
    рівні ймовірності — за зростанням індексу у словнику.
    """
    if len(probabilities) != len(conditions):
        raise ValueError(
            f"{len(probabilities)} probabilities for {len(conditions)} conditions"
        )
    kept = [
        (idx, min(max(float(p), 0.0), 1.0))
        for idx, p in enumerate(probabilities)
        if p >= threshold
    ]
    kept.sort(key=lambda item: (-item[1], item[0]))
    return [(conditions[idx], p) for idx, p in kept]


class ConditionPredictor:
    """
    Прогнозування умов за клінічними даними.

    Кожен виклик бере знімок опублікованого бандла і працює тільки з ним,
    тому паралельні виклики безпечні без блокувань.

    Приклад використання:
        predictor = ConditionPredictor(manager)

        result = predictor.predict(
            {"fever": True, "cough": True, "age": 35,
             "gender": "Male", "bloodPressure": 120},
            threshold=0.04
        )

        for condition, probability in result:
            print(f"  {condition}: {probability:.2%}")
    """

    def __init__(
        self,
        manager: "ModelLifecycleManager",
        config: Optional[PredictorConfig] = None
    ):
        """
        Args:
            manager: Менеджер життєвого циклу (джерело бандла)
            config: Параметри інференсу
        """
        self.manager = manager
        self.config = config or PredictorConfig()

    def predict(self, raw_input: Any, threshold: Optional[float] = None) -> PredictionResult:
        """
        Спрогнозувати умови.

        Args:
            raw_input: ClinicalInput або словник з тими ж полями
            threshold: Мінімальна ймовірність (None = default_threshold)

        Returns:
            PredictionResult

        Raises:
            NotReadyError: модель ще не опублікована
            InvalidInputError: некоректні вхідні дані або поріг
            EncodingError: strict кодування не змогло розібрати поле
        """
        # Спочатку стан: до публікації завжди NotReadyError
        bundle = self.manager.acquire()

        threshold = self._validate_threshold(threshold)
        clinical = self._validate_input(raw_input)

        vector = bundle.encoder.encode(clinical, strict=self.config.strict_inference)
        normalized = bundle.stats.apply(vector)

        device = next(bundle.model.parameters()).device
        with torch.no_grad():
            x = torch.as_tensor(normalized, dtype=torch.float32, device=device).unsqueeze(0)
            probabilities = bundle.model.predict_proba(x).squeeze(0).cpu().numpy()

        return PredictionResult(
            predictions=rank_conditions(probabilities, bundle.conditions, threshold),
            threshold=threshold,
            model_version=bundle.version,
        )

    def predict_all(self, raw_input: Any) -> PredictionResult:
        """Всі умови словника, відсортовані за ймовірністю"""
        return self.predict(raw_input, threshold=0.0)

    def _validate_threshold(self, threshold: Optional[float]) -> float:
        if threshold is None:
            return self.config.default_threshold
        if isinstance(threshold, bool) or not isinstance(threshold, (int, float, np.floating)):
            raise InvalidInputError(f"Threshold must be a number, got {type(threshold).__name__}")
        if not math.isfinite(threshold):
            raise InvalidInputError(f"Threshold must be finite, got {threshold}")
        return float(threshold)

    @staticmethod
    def _validate_input(raw_input: Any) -> ClinicalInput:
        if isinstance(raw_input, ClinicalInput):
            return raw_input
        if not isinstance(raw_input, Mapping):
            raise InvalidInputError(
                f"Expected clinical fields as a mapping, got {type(raw_input).__name__}"
            )
        try:
            return ClinicalInput.model_validate(dict(raw_input))
        except ValidationError as e:
            errors = [
                {
                    "field": ".".join(str(part) for part in err["loc"]),
                    "message": err["msg"],
                }
                for err in e.errors()
            ]
            raise InvalidInputError("Invalid clinical input", errors=errors) from None

    def __repr__(self) -> str:
        return f"ConditionPredictor(state={self.manager.state.value}, default_threshold={self.config.default_threshold})"
