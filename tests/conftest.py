"""
Спільні fixtures для тестів Dr.Predict
"""

import pytest

from dr_predict.config import DrPredictConfig


CSV_HEADER = (
    "Disease,Fever,Cough,Fatigue,Difficulty Breathing,Age,Gender,"
    "Blood Pressure,Cholesterol Level,Outcome Variable"
)

CSV_ROWS = [
    "Influenza,Yes,Yes,Yes,No,19,Female,Low,Normal,Positive",
    "Common Cold,No,Yes,Yes,No,25,Female,Normal,Normal,Negative",
    "Eczema,Yes,No,Yes,No,25,Female,Normal,Normal,Positive",
    "Asthma,Yes,Yes,No,Yes,25,Male,Normal,Normal,Positive",
    "Asthma,No,Yes,Yes,No,25,Male,Normal,Normal,Negative",
    "Stroke,Yes,No,Yes,No,25,Female,Normal,Normal,Positive",
    "Influenza,Yes,Yes,Yes,Yes,28,Female,High,High,Positive",
    "Hyperthyroidism,No,Yes,No,No,28,Female,Normal,Normal,Positive",
]


def make_record(disease, fever="Yes", cough="Yes", fatigue="No", breathing="No",
                age="30", gender="Male", bp="Normal", cholesterol="Normal",
                outcome="Positive"):
    """Запис у форматі рядка датасету (заголовки як у CSV)"""
    return {
        "Disease": disease,
        "Fever": fever,
        "Cough": cough,
        "Fatigue": fatigue,
        "Difficulty Breathing": breathing,
        "Age": age,
        "Gender": gender,
        "Blood Pressure": bp,
        "Cholesterol Level": cholesterol,
        "Outcome Variable": outcome,
    }


@pytest.fixture
def csv_path(tmp_path):
    """Маленький CSV датасет"""
    path = tmp_path / "dataset.csv"
    path.write_text("\n".join([CSV_HEADER] + CSV_ROWS) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def records():
    """Записи з кількома умовами та негативним випадком"""
    return [
        make_record("Flu", age="30", bp="118"),
        make_record("COVID-19", age="45", gender="Female", bp="130"),
        make_record("Flu, Asthma", fever="No", breathing="Yes", age="52", bp="High"),
        make_record("Migraine", fever="No", cough="No", fatigue="Yes", age="28", bp="75"),
        make_record("Flu", age="33", outcome="Negative"),
    ]


@pytest.fixture
def fast_config():
    """Конфігурація для швидких тестів: мало епох, без таймауту, без виводу"""
    config = DrPredictConfig()
    config.training.training_epochs_cap = 20
    config.training.early_stopping_patience = 5
    config.training.batch_size = 8
    config.lifecycle.training_timeout = None
    config.lifecycle.verbose = False
    return config


@pytest.fixture
def ready_manager(records, fast_config):
    """Менеджер з опублікованою моделлю"""
    from dr_predict.encoding import InMemoryDatasetLoader
    from dr_predict.lifecycle import ModelLifecycleManager

    manager = ModelLifecycleManager(InMemoryDatasetLoader(records), fast_config)
    assert manager.run(), manager.error
    return manager


@pytest.fixture
def record_factory():
    """Фабрика записів у форматі датасету"""
    return make_record
