"""
Dr.Predict — Z-score нормалізація ознак

Статистики (mean, std) обчислюються один раз на навчальній матриці
і далі тільки застосовуються, ніколи не перераховуються на інференсі.
"""

from dataclasses import dataclass
from typing import Any, Dict

import numpy as np

from dr_predict.exceptions import DegenerateDatasetError


@dataclass(frozen=True)
class NormalizationStats:
    """
    Середні та стандартні відхилення по кожній ознаці.

    Масиви read-only: один екземпляр спільно читають усі запити.
    """
    mean: np.ndarray
    std: np.ndarray
    epsilon: float = 1e-6

    def __post_init__(self):
        mean = np.array(self.mean, dtype=np.float64).reshape(-1)
        std = np.array(self.std, dtype=np.float64).reshape(-1)
        if mean.shape != std.shape:
            raise ValueError(f"mean {mean.shape} and std {std.shape} shapes differ")
        if self.epsilon <= 0:
            raise ValueError("epsilon must be positive")
        mean.setflags(write=False)
        std.setflags(write=False)
        object.__setattr__(self, "mean", mean)
        object.__setattr__(self, "std", std)

    @property
    def n_features(self) -> int:
        return self.mean.shape[0]

    @property
    def scale(self) -> np.ndarray:
        """max(std, epsilon): нульове std не призводить до ділення на нуль"""
        return np.maximum(self.std, self.epsilon)

    def _check(self, x: np.ndarray) -> np.ndarray:
        x = np.asarray(x, dtype=np.float64)
        if x.shape[-1] != self.n_features:
            raise ValueError(
                f"Expected {self.n_features} features, got {x.shape[-1]}"
            )
        return x

    def apply(self, x: np.ndarray) -> np.ndarray:
        """(x - mean) / max(std, epsilon) — для вектора (F,) або матриці (N, F)"""
        x = self._check(x)
        return ((x - self.mean) / self.scale).astype(np.float32)

    def inverse(self, x: np.ndarray) -> np.ndarray:
        """Обернене перетворення: x * max(std, epsilon) + mean"""
        x = self._check(x)
        return (x * self.scale + self.mean).astype(np.float32)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mean": self.mean.tolist(),
            "std": self.std.tolist(),
            "epsilon": self.epsilon,
        }


class Normalizer:
    """
    Обчислення статистик нормалізації.

    Приклад:
        stats = Normalizer(epsilon=1e-6).fit(train_matrix)
        x_norm = stats.apply(vector)
    """

    def __init__(self, epsilon: float = 1e-6):
        self.epsilon = epsilon

    def fit(self, matrix: np.ndarray) -> NormalizationStats:
        """
        Середнє та популяційне std (ddof=0) по колонках.

        Args:
            matrix: Навчальна матриця (N, F)
        """
        matrix = np.asarray(matrix, dtype=np.float64)
        if matrix.ndim != 2:
            raise ValueError(f"Expected a 2-D feature matrix, got shape {matrix.shape}")
        if matrix.shape[0] == 0:
            raise DegenerateDatasetError("Cannot fit normalization on an empty feature matrix")

        return NormalizationStats(
            mean=matrix.mean(axis=0),
            std=matrix.std(axis=0),
            epsilon=self.epsilon,
        )
