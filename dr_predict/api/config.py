"""
Dr.Predict — API Configuration

Налаштування FastAPI сервера та рушія прогнозування.
"""

import os
from dataclasses import dataclass, field

from dr_predict.config import DrPredictConfig, load_config


@dataclass
class APIConfig:
    """Конфігурація API сервера"""

    # Сервер
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False

    # CORS
    cors_origins: list = field(default_factory=lambda: ["*"])

    # API
    api_prefix: str = "/api/v1"
    api_title: str = "Dr.Predict API"
    api_description: str = "Прогнозування умов за симптомами та вітальними показниками"

    # Конфігурація рушія
    engine: DrPredictConfig = field(default_factory=DrPredictConfig)

    @classmethod
    def from_env(cls) -> "APIConfig":
        """Створити конфігурацію з environment variables"""
        config_path = os.getenv("DR_PREDICT_CONFIG")
        engine = load_config(config_path) if config_path else DrPredictConfig()

        if os.getenv("DATASET_PATH"):
            engine.lifecycle.dataset_path = os.environ["DATASET_PATH"]
        if os.getenv("TRAINING_TIMEOUT"):
            timeout = os.environ["TRAINING_TIMEOUT"]
            engine.lifecycle.training_timeout = None if timeout.lower() == "none" else float(timeout)
        if os.getenv("DEFAULT_THRESHOLD"):
            engine.predictor.default_threshold = float(os.environ["DEFAULT_THRESHOLD"])

        return cls(
            host=os.getenv("API_HOST", "0.0.0.0"),
            port=int(os.getenv("API_PORT", "8000")),
            debug=os.getenv("API_DEBUG", "false").lower() == "true",
            engine=engine,
        )
