"""
Тести для модуля config

Запуск: pytest tests/test_config.py -v
"""

import pytest

from dr_predict.config import (
    DrPredictConfig,
    TrainingConfig,
    config_from_dict,
    get_default_config,
    load_config,
    save_config,
)


def test_defaults():
    """Тест значень за замовчуванням"""
    config = get_default_config()

    assert config.encoding.high_bp_threshold == 120.0
    assert config.encoding.low_bp_threshold == 80.0
    assert config.predictor.default_threshold == 0.5
    assert config.training.hidden_dims == [128, 64, 32]
    assert config.training.training_epochs_cap == 50
    assert config.training.early_stopping_patience == 10
    assert config.training.validation_split_fraction == 0.1
    assert config.lifecycle.training_timeout == 300.0


def test_yaml_round_trip(tmp_path):
    """Тест збереження та завантаження YAML"""
    config = DrPredictConfig()
    config.training.hidden_dims = [64, 32]
    config.predictor.default_threshold = 0.04
    config.lifecycle.training_timeout = None

    path = tmp_path / "config" / "dr_predict.yaml"
    save_config(config, str(path))
    loaded = load_config(str(path))

    assert loaded == config
    print(f"✓ Saved and loaded: {path}")


def test_partial_dict():
    """Тест: відсутні секції беруться за замовчуванням"""
    config = config_from_dict({"training": {"batch_size": 16}})

    assert config.training.batch_size == 16
    assert config.training.training_epochs_cap == 50
    assert config.encoding.positive_gender == "Male"


def test_unknown_option():
    """Тест: невідомий параметр → ValueError"""
    with pytest.raises(ValueError):
        config_from_dict({"training": {"epochs": 10}})


@pytest.mark.parametrize("kwargs", [
    {"validation_split_fraction": 1.0},
    {"training_epochs_cap": 0},
    {"early_stopping_patience": 0},
    {"normalization_epsilon": 0.0},
])
def test_training_validation(kwargs):
    """Тест валідації параметрів навчання"""
    with pytest.raises(ValueError):
        TrainingConfig(**kwargs)


def test_api_config_from_env(monkeypatch, tmp_path):
    """Тест конфігурації API з environment variables"""
    from dr_predict.api import APIConfig

    monkeypatch.delenv("DR_PREDICT_CONFIG", raising=False)
    monkeypatch.setenv("DATASET_PATH", str(tmp_path / "data.csv"))
    monkeypatch.setenv("API_PORT", "9000")
    monkeypatch.setenv("DEFAULT_THRESHOLD", "0.04")
    monkeypatch.setenv("TRAINING_TIMEOUT", "none")

    config = APIConfig.from_env()

    assert config.port == 9000
    assert config.engine.lifecycle.dataset_path == str(tmp_path / "data.csv")
    assert config.engine.predictor.default_threshold == 0.04
    assert config.engine.lifecycle.training_timeout is None
