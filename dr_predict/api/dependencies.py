"""
Dr.Predict — API Dependencies

Dependency Injection для FastAPI: менеджер моделі та предиктор
зберігаються в app.state при створенні додатку.
"""

from fastapi import Request

from dr_predict.lifecycle import ModelLifecycleManager
from dr_predict.neural_network import ConditionPredictor


def get_manager(request: Request) -> ModelLifecycleManager:
    """Dependency: менеджер життєвого циклу моделі"""
    return request.app.state.manager


def get_predictor(request: Request) -> ConditionPredictor:
    """Dependency: предиктор"""
    return request.app.state.predictor
