"""
Dr.Predict — Бандл моделі

Незмінний набір усього, що потрібно для інференсу: модель, словник умов,
статистики нормалізації та енкодер (контракт порядку ознак).
Публікується тільки цілком; окремі поля ніколи не оновлюються.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Tuple

from dr_predict.encoding import ConditionVocabulary, FeatureEncoder, FeatureSchema
from dr_predict.neural_network import ConditionNN, NormalizationStats


@dataclass(frozen=True)
class ModelBundle:
    """Узгоджений набір (модель, словник, статистики, схема)"""
    model: ConditionNN
    vocabulary: ConditionVocabulary
    stats: NormalizationStats
    encoder: FeatureEncoder
    version: int
    trained_at: datetime = field(default_factory=datetime.now)
    training_summary: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        n_features = self.encoder.n_features
        if self.model.n_features != n_features or self.stats.n_features != n_features:
            raise ValueError(
                f"Feature dimension mismatch: encoder={n_features}, "
                f"stats={self.stats.n_features}, model={self.model.n_features}"
            )
        if self.model.n_conditions != self.vocabulary.size:
            raise ValueError(
                f"Label dimension mismatch: vocabulary={self.vocabulary.size}, "
                f"model={self.model.n_conditions}"
            )
        if not self.vocabulary.is_frozen:
            raise ValueError("Vocabulary must be frozen before publication")

        self.model.eval()
        for param in self.model.parameters():
            param.requires_grad_(False)

        # Кеш підписів: порядок = індекси виходу моделі
        object.__setattr__(self, "_conditions", tuple(self.vocabulary.to_list()))

    @property
    def schema(self) -> FeatureSchema:
        return self.encoder.schema

    @property
    def feature_names(self) -> List[str]:
        return self.encoder.feature_names

    @property
    def conditions(self) -> Tuple[str, ...]:
        return self._conditions

    @property
    def n_features(self) -> int:
        return self.encoder.n_features

    @property
    def n_conditions(self) -> int:
        return self.vocabulary.size

    def describe(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "trained_at": self.trained_at.isoformat(),
            "schema_version": self.schema.version,
            "features": self.feature_names,
            "n_conditions": self.n_conditions,
            "training": self.training_summary,
        }
