"""
Dr.Predict — Налаштування системи

Всі параметри рушія прогнозування зібрані в dataclass-и для:
- Типізації та валідації
- Легкого доступу через config.training.early_stopping_patience
- Серіалізації в YAML
"""

from dataclasses import dataclass, field
from typing import List, Optional


# =============================================================================
# ENCODING CONFIGURATION
# =============================================================================

@dataclass
class EncodingConfig:
    """Параметри кодування записів у вектори ознак"""

    # Версія схеми ознак (1 = оригінальні 7 ознак, 2 = + холестерин)
    schema_version: int = 1

    # Артеріальний тиск: >= high → +1, < low → -1
    high_bp_threshold: float = 120.0
    low_bp_threshold: float = 80.0

    # Стать, що кодується як 1.0
    positive_gender: str = "Male"

    # Поля датасету
    label_field: str = "disease"
    label_delimiter: str = ","
    outcome_field: str = "outcome_variable"
    negative_outcome: str = "Negative"

    # Строгий режим: помилка замість значення за замовчуванням
    strict_encoding: bool = False
    # У строгому режимі: True = пропустити рядок, False = зупинити батч
    skip_invalid_rows: bool = True

    def __post_init__(self):
        if self.low_bp_threshold > self.high_bp_threshold:
            raise ValueError(
                f"low_bp_threshold ({self.low_bp_threshold}) must not exceed "
                f"high_bp_threshold ({self.high_bp_threshold})"
            )


# =============================================================================
# TRAINING CONFIGURATION
# =============================================================================

@dataclass
class TrainingConfig:
    """Параметри навчання multilabel NN"""

    # Архітектура
    hidden_dims: List[int] = field(default_factory=lambda: [128, 64, 32])
    dropout: float = 0.0

    # Навчання
    learning_rate: float = 1e-3
    batch_size: int = 32
    training_epochs_cap: int = 50

    # Early stopping
    early_stopping_patience: int = 10
    min_delta: float = 0.0
    validation_split_fraction: float = 0.1

    # Нормалізація
    normalization_epsilon: float = 1e-6

    # Балансування класів (синтетичні приклади з шумом)
    oversample_minority: bool = False
    oversample_noise: float = 0.1

    seed: Optional[int] = 42

    def __post_init__(self):
        if not 0.0 <= self.validation_split_fraction < 1.0:
            raise ValueError("validation_split_fraction must be in [0, 1)")
        if self.training_epochs_cap < 1:
            raise ValueError("training_epochs_cap must be >= 1")
        if self.early_stopping_patience < 1:
            raise ValueError("early_stopping_patience must be >= 1")
        if self.batch_size < 1:
            raise ValueError("batch_size must be >= 1")
        if self.normalization_epsilon <= 0:
            raise ValueError("normalization_epsilon must be positive")


# =============================================================================
# PREDICTOR CONFIGURATION
# =============================================================================

@dataclass
class PredictorConfig:
    """
    Параметри інференсу.

    default_threshold = 0.5 для загального використання. Низькі пороги
    (розгорнутий сервіс використовував 0.04) допустимі для скринінгу:
    класи погано розділяються, тому такий поріг може повернути майже
    весь словник умов.
    """
    default_threshold: float = 0.5
    strict_inference: bool = True


# =============================================================================
# LIFECYCLE CONFIGURATION
# =============================================================================

@dataclass
class LifecycleConfig:
    """Параметри менеджера життєвого циклу моделі"""
    dataset_path: str = "data/Disease_symptom_and_patient_profile_dataset.csv"

    # Секунди; None = без обмеження
    training_timeout: Optional[float] = 300.0

    verbose: bool = True


# =============================================================================
# MAIN CONFIGURATION
# =============================================================================

@dataclass
class DrPredictConfig:
    """
    Головна конфігурація Dr.Predict

    Приклад використання:
        config = DrPredictConfig()
        print(config.encoding.high_bp_threshold)  # 120.0
        print(config.training.early_stopping_patience)  # 10
    """

    version: str = "1.0.0"
    project_name: str = "Dr.Predict"

    encoding: EncodingConfig = field(default_factory=EncodingConfig)
    training: TrainingConfig = field(default_factory=TrainingConfig)
    predictor: PredictorConfig = field(default_factory=PredictorConfig)
    lifecycle: LifecycleConfig = field(default_factory=LifecycleConfig)


def get_default_config() -> DrPredictConfig:
    """Отримати конфігурацію за замовчуванням"""
    return DrPredictConfig()
