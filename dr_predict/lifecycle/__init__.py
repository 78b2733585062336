"""
Dr.Predict — Життєвий цикл моделі

Компоненти:
- ModelBundle: Незмінний набір модель + словник + статистики + енкодер
- ModelLifecycleManager: Стан UNINITIALIZED → LOADING → TRAINING → READY / FAILED,
  фонове навчання та атомарна публікація бандла
"""

from .bundle import ModelBundle
from .manager import LifecycleSnapshot, ModelLifecycleManager, ModelState


__all__ = [
    "ModelBundle",
    "LifecycleSnapshot",
    "ModelLifecycleManager",
    "ModelState",
]
