"""
Dr.Predict — Підготовка навчальних даних

Один прохід по записах: фільтр негативних випадків, кодування ознак,
побудова словника умов та матриці індикаторів. Фільтр застосовується
тут один раз, тому енкодер і словник завжди бачать ті самі рядки.
"""

from dataclasses import dataclass
from typing import Any, Iterable, Optional

import numpy as np

from dr_predict.config import EncodingConfig
from dr_predict.exceptions import DegenerateDatasetError, EncodingError
from .feature_encoder import FeatureEncoder, read_field
from .feature_schema import FeatureSchema
from .label_vocabulary import (
    ConditionVocabulary,
    build_indicator_row,
    build_vocabulary,
    is_negative_outcome,
    split_labels,
)


@dataclass
class TrainingData:
    """Закодований навчальний набір"""
    features: np.ndarray        # (N, F)
    labels: np.ndarray          # (N, L)
    vocabulary: ConditionVocabulary
    schema: FeatureSchema

    # Статистика підготовки
    n_records: int = 0
    n_negative: int = 0
    n_unlabeled: int = 0
    n_skipped: int = 0

    @property
    def n_samples(self) -> int:
        return self.features.shape[0]

    @property
    def n_features(self) -> int:
        return self.features.shape[1]

    @property
    def n_conditions(self) -> int:
        return self.vocabulary.size

    def check_trainable(self) -> None:
        """DegenerateDatasetError, якщо на цих даних модель не навчити"""
        if self.n_samples == 0:
            raise DegenerateDatasetError(
                "Feature matrix is empty: no positive, labelled records to train on",
                details=self.summary()
            )
        if self.n_conditions == 0:
            raise DegenerateDatasetError(
                "Label vocabulary is empty: dataset has no positive cases",
                details=self.summary()
            )

    def summary(self) -> dict:
        return {
            "records": self.n_records,
            "samples": self.n_samples,
            "features": self.n_features,
            "conditions": self.n_conditions,
            "negative_excluded": self.n_negative,
            "unlabeled_excluded": self.n_unlabeled,
            "invalid_skipped": self.n_skipped,
        }


def prepare_training_data(
    records: Iterable[Any],
    encoder: Optional[FeatureEncoder] = None,
    config: Optional[EncodingConfig] = None,
    verbose: bool = False
) -> TrainingData:
    """
    Підготувати матриці ознак та міток.

    Політика: multi-label; негативні записи виключаються і з ознак,
    і з міток. Записи без жодної мітки теж виключаються.

    Strict енкодер: некоректний запис пропускається (skip_invalid_rows=True)
    або зупиняє підготовку з EncodingError.

    Args:
        records: Сирі записи
        encoder: FeatureEncoder (за замовчуванням — з config)
        config: Параметри кодування
        verbose: Друкувати попередження про пропущені рядки

    Returns:
        TrainingData
    """
    config = config or (encoder.config if encoder else EncodingConfig())
    encoder = encoder or FeatureEncoder(config=config)

    kept_records = []
    rows = []
    n_records = n_negative = n_unlabeled = n_skipped = 0

    for i, record in enumerate(records):
        n_records += 1

        if is_negative_outcome(record, config.outcome_field, config.negative_outcome):
            n_negative += 1
            continue

        if not split_labels(read_field(record, config.label_field), config.label_delimiter):
            n_unlabeled += 1
            continue

        try:
            vector = encoder.encode(record)
        except EncodingError as e:
            if not config.skip_invalid_rows:
                e.details["record_index"] = i
                raise
            n_skipped += 1
            if verbose:
                print(f"   ⚠️ Skipping record {i}: {e.message}")
            continue

        kept_records.append(record)
        rows.append(vector)

    vocabulary = build_vocabulary(
        kept_records,
        label_field=config.label_field,
        delimiter=config.label_delimiter,
        outcome_field=config.outcome_field,
        negative_outcome=config.negative_outcome,
    )

    if rows:
        features = np.stack(rows)
        labels = np.stack([
            build_indicator_row(r, vocabulary, config.label_field, config.label_delimiter)
            for r in kept_records
        ])
    else:
        features = np.zeros((0, encoder.n_features), dtype=np.float32)
        labels = np.zeros((0, vocabulary.size), dtype=np.float32)

    return TrainingData(
        features=features,
        labels=labels,
        vocabulary=vocabulary,
        schema=encoder.schema,
        n_records=n_records,
        n_negative=n_negative,
        n_unlabeled=n_unlabeled,
        n_skipped=n_skipped,
    )
