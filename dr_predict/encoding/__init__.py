"""
Dr.Predict — Модуль кодування (encoding)

Векторизація клінічних записів та міток умов для подачі в Neural Network.

Компоненти:
- CSVDatasetLoader / InMemoryDatasetLoader: Джерела сирих записів
- FeatureSchema: Версіонований перелік ознак
- FeatureEncoder: Кодування запису у вектор ознак
- ConditionVocabulary: Словник умов (condition ↔ index)
- prepare_training_data: Матриці ознак та індикаторів для навчання

Приклад використання:
    from dr_predict.encoding import (
        CSVDatasetLoader,
        FeatureEncoder,
        prepare_training_data,
    )

    loader = CSVDatasetLoader("data/Disease_symptom_and_patient_profile_dataset.csv")
    encoder = FeatureEncoder()

    data = prepare_training_data(loader, encoder)
    print(data.features.shape, data.labels.shape)
    print(data.vocabulary.conditions[:5])
"""

from .data_loader import (
    RawRecord,
    DatasetLoader,
    CSVDatasetLoader,
    InMemoryDatasetLoader,
    canonical_field_name,
)
from .feature_schema import (
    FeatureKind,
    FeatureSpec,
    FeatureSchema,
    FEATURE_SCHEMA_V1,
    FEATURE_SCHEMA_V2,
    get_schema,
)
from .feature_encoder import FeatureEncoder, read_field
from .label_vocabulary import (
    ConditionVocabulary,
    build_vocabulary,
    build_indicator_row,
    split_labels,
    is_negative_outcome,
)
from .dataset import TrainingData, prepare_training_data


__all__ = [
    "RawRecord",
    "DatasetLoader",
    "CSVDatasetLoader",
    "InMemoryDatasetLoader",
    "canonical_field_name",
    "FeatureKind",
    "FeatureSpec",
    "FeatureSchema",
    "FEATURE_SCHEMA_V1",
    "FEATURE_SCHEMA_V2",
    "get_schema",
    "FeatureEncoder",
    "read_field",
    "ConditionVocabulary",
    "build_vocabulary",
    "build_indicator_row",
    "split_labels",
    "is_negative_outcome",
    "TrainingData",
    "prepare_training_data",
]
