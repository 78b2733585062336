"""Dr.Predict — Модуль конфігурації"""
from .settings import (
    DrPredictConfig,
    get_default_config,
    EncodingConfig,
    TrainingConfig,
    PredictorConfig,
    LifecycleConfig,
)
from .loader import save_config, load_config, save_yaml, load_yaml, config_from_dict

__all__ = [
    "DrPredictConfig",
    "get_default_config",
    "EncodingConfig",
    "TrainingConfig",
    "PredictorConfig",
    "LifecycleConfig",
    "save_config",
    "load_config",
    "save_yaml",
    "load_yaml",
    "config_from_dict",
]
