"""
Dr.Predict — Модуль нейронної мережі (Neural Network)

Multi-label класифікатор умов за клінічними ознаками.

Компоненти:
- Normalizer / NormalizationStats: Z-score нормалізація ознак
- ConditionNN: Архітектура мережі (PyTorch)
- MultiLabelTrainer: Навчання моделі
- ConditionPredictor: Інференс (ранжування умов)

Приклад використання:
    from dr_predict.encoding import FeatureEncoder, prepare_training_data
    from dr_predict.neural_network import Normalizer, MultiLabelTrainer

    # === НАВЧАННЯ ===
    data = prepare_training_data(records, FeatureEncoder())
    stats = Normalizer().fit(data.features)

    trainer = MultiLabelTrainer(data.n_features, data.n_conditions)
    history = trainer.train(stats.apply(data.features), data.labels)

    # === ІНФЕРЕНС ===
    # через ModelLifecycleManager + ConditionPredictor (див. dr_predict.lifecycle)
"""

from .normalizer import Normalizer, NormalizationStats
from .model import ConditionNN
from .trainer import MultiLabelTrainer, MultiLabelDataset, TrainingHistory, oversample_minority
from .predictor import ConditionPredictor, PredictionResult, rank_conditions


__all__ = [
    # Normalization
    "Normalizer",
    "NormalizationStats",

    # Model
    "ConditionNN",

    # Trainer
    "MultiLabelTrainer",
    "MultiLabelDataset",
    "TrainingHistory",
    "oversample_minority",

    # Predictor
    "ConditionPredictor",
    "PredictionResult",
    "rank_conditions",
]
