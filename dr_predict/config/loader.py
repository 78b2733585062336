"""Dr.Predict — Завантаження конфігурації"""
import yaml
from pathlib import Path
from dataclasses import asdict, fields
from typing import Any, Dict

from .settings import (
    DrPredictConfig,
    EncodingConfig,
    TrainingConfig,
    PredictorConfig,
    LifecycleConfig,
)


_SECTIONS = {
    "encoding": EncodingConfig,
    "training": TrainingConfig,
    "predictor": PredictorConfig,
    "lifecycle": LifecycleConfig,
}


def _build_section(cls, data: Dict[str, Any]):
    known = {f.name for f in fields(cls)}
    unknown = set(data) - known
    if unknown:
        raise ValueError(f"Unknown {cls.__name__} options: {sorted(unknown)}")
    return cls(**data)


def config_from_dict(data: Dict[str, Any]) -> DrPredictConfig:
    """Зібрати DrPredictConfig зі словника (наприклад, з YAML)"""
    data = dict(data or {})
    kwargs = {}
    for name, cls in _SECTIONS.items():
        kwargs[name] = _build_section(cls, data.pop(name, None) or {})
    return DrPredictConfig(**data, **kwargs)


def save_yaml(config: DrPredictConfig, path: str) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(asdict(config), f, default_flow_style=False)


def load_yaml(path: str) -> dict:
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def save_config(config: DrPredictConfig, path: str) -> None:
    save_yaml(config, path)


def load_config(path: str) -> DrPredictConfig:
    return config_from_dict(load_yaml(path))
