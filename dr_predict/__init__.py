"""
Dr.Predict — Прогнозування умов за симптомами та вітальними показниками

Архітектура: Feature Encoder + Normalizer + Multilabel NN + Lifecycle Manager

Модулі:
- config: Конфігурація системи
- encoding: Завантаження датасету, кодування ознак, словник умов
- neural_network: Нормалізація, модель, навчання, прогнозування
- lifecycle: Фонове навчання та публікація бандла моделі
- schemas: Pydantic схеми вхідних даних
- api: REST API для інференсу
"""

__version__ = "1.0.0"

from .config import DrPredictConfig, get_default_config
