"""
Dr.Predict — REST API

FastAPI сервер для прогнозування умов.

Запуск:
    uvicorn dr_predict.api.app:app --host 0.0.0.0 --port 8000
"""

from .config import APIConfig

__all__ = ['APIConfig']
