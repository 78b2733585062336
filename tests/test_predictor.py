"""
Тести для ConditionPredictor

Запуск: pytest tests/test_predictor.py -v
"""

import math

import numpy as np
import pytest
import torch

from dr_predict.exceptions import InvalidInputError, NotReadyError


PATIENT = {"fever": True, "cough": True, "age": 35, "gender": "Male", "bloodPressure": 120}


class StaticManager:
    """Менеджер-заглушка з фіксованим бандлом"""

    def __init__(self, bundle):
        self.bundle = bundle

    def acquire(self):
        return self.bundle


def _flat_bundle(conditions):
    """Бандл, модель якого дає 0.5 для кожної умови"""
    from dr_predict.encoding import ConditionVocabulary, FeatureEncoder
    from dr_predict.lifecycle import ModelBundle
    from dr_predict.neural_network import ConditionNN, NormalizationStats

    encoder = FeatureEncoder()
    model = ConditionNN(n_features=encoder.n_features, n_conditions=len(conditions))
    with torch.no_grad():
        model.output_layer.weight.zero_()
        model.output_layer.bias.zero_()

    return ModelBundle(
        model=model,
        vocabulary=ConditionVocabulary.from_list(conditions),
        stats=NormalizationStats(mean=np.zeros(encoder.n_features), std=np.ones(encoder.n_features)),
        encoder=encoder,
        version=1,
    )


def test_predict_before_ready():
    """Тест: до публікації моделі — завжди NotReadyError"""
    from dr_predict.lifecycle import ModelLifecycleManager
    from dr_predict.neural_network import ConditionPredictor

    predictor = ConditionPredictor(ModelLifecycleManager())

    with pytest.raises(NotReadyError) as exc_info:
        predictor.predict(PATIENT)
    assert exc_info.value.code == "NOT_READY"
    assert exc_info.value.state == "uninitialized"

    # Навіть для некоректного запиту
    with pytest.raises(NotReadyError):
        predictor.predict({"age": -5}, threshold="bad")


def test_predict_after_failure(fast_config, record_factory):
    """Тест: після невдалої ініціалізації NotReadyError містить причину"""
    from dr_predict.encoding import InMemoryDatasetLoader
    from dr_predict.lifecycle import ModelLifecycleManager
    from dr_predict.neural_network import ConditionPredictor

    manager = ModelLifecycleManager(
        InMemoryDatasetLoader([record_factory("Flu", outcome="Negative")]),
        fast_config
    )
    assert not manager.run()

    with pytest.raises(NotReadyError) as exc_info:
        ConditionPredictor(manager).predict(PATIENT)
    assert exc_info.value.state == "failed"
    assert "DEGENERATE_DATASET" in exc_info.value.cause


def test_threshold_zero_returns_all_with_tie_break():
    """Тест: поріг 0.0 → всі умови; рівні ймовірності за індексом словника"""
    from dr_predict.neural_network import ConditionPredictor

    conditions = ["Flu", "Asthma", "COVID-19", "Migraine"]
    predictor = ConditionPredictor(StaticManager(_flat_bundle(conditions)))

    result = predictor.predict(PATIENT, threshold=0.0)

    assert result.conditions == conditions
    assert all(p == pytest.approx(0.5) for p in result.probabilities)
    assert result.model_version == 1


def test_threshold_above_one_returns_empty():
    """Тест: поріг 1.01 → порожній результат"""
    from dr_predict.neural_network import ConditionPredictor

    predictor = ConditionPredictor(StaticManager(_flat_bundle(["Flu", "Asthma"])))
    result = predictor.predict(PATIENT, threshold=1.01)

    assert len(result) == 0
    assert result.top_condition is None


def test_default_threshold():
    """Тест: без порогу використовується default_threshold"""
    from dr_predict.config import PredictorConfig
    from dr_predict.neural_network import ConditionPredictor

    bundle = _flat_bundle(["Flu", "Asthma"])

    assert len(ConditionPredictor(StaticManager(bundle)).predict(PATIENT)) == 2
    strict = ConditionPredictor(StaticManager(bundle), PredictorConfig(default_threshold=0.6))
    assert len(strict.predict(PATIENT)) == 0


@pytest.mark.parametrize("threshold", ["0.5", True, math.nan, math.inf])
def test_invalid_threshold(threshold):
    """Тест: нечисловий або нескінченний поріг → InvalidInputError"""
    from dr_predict.neural_network import ConditionPredictor

    predictor = ConditionPredictor(StaticManager(_flat_bundle(["Flu"])))

    with pytest.raises(InvalidInputError):
        predictor.predict(PATIENT, threshold=threshold)


@pytest.mark.parametrize("payload,field", [
    ({"fever": True, "gender": "Male", "bloodPressure": 120}, "age"),
    ({**PATIENT, "age": -1}, "age"),
    ({**PATIENT, "bloodPressure": "very high"}, "bloodPressure"),
    ({**PATIENT, "bloodPressure": 500}, "bloodPressure"),
    ({**PATIENT, "gender": "   "}, "gender"),
])
def test_invalid_input(payload, field):
    """Тест: відсутні або некоректні поля → InvalidInputError зі списком помилок"""
    from dr_predict.neural_network import ConditionPredictor

    predictor = ConditionPredictor(StaticManager(_flat_bundle(["Flu"])))

    with pytest.raises(InvalidInputError) as exc_info:
        predictor.predict(payload)

    fields = [err["field"] for err in exc_info.value.errors]
    assert field in fields
    assert exc_info.value.code == "INVALID_INPUT"


def test_input_not_mapping():
    """Тест: вхід не словник → InvalidInputError"""
    from dr_predict.neural_network import ConditionPredictor

    predictor = ConditionPredictor(StaticManager(_flat_bundle(["Flu"])))

    with pytest.raises(InvalidInputError):
        predictor.predict(None)


def test_snake_case_and_categories():
    """Тест: snake_case імена та категоріальний тиск приймаються"""
    from dr_predict.neural_network import ConditionPredictor

    predictor = ConditionPredictor(StaticManager(_flat_bundle(["Flu"])))
    result = predictor.predict({
        "fever": True,
        "difficulty_breathing": True,
        "age": 40,
        "gender": "Female",
        "blood_pressure": "low",
    }, threshold=0.0)

    assert result.conditions == ["Flu"]


def test_two_patient_scenario(fast_config, record_factory):
    """Тест сценарію: Flu та COVID-19 → обидві умови, відсортовані за спаданням"""
    from dr_predict.encoding import InMemoryDatasetLoader
    from dr_predict.lifecycle import ModelLifecycleManager
    from dr_predict.neural_network import ConditionPredictor

    loader = InMemoryDatasetLoader([
        record_factory("Flu", fever="Yes", cough="Yes", age="30", gender="Male", bp="118"),
        record_factory("COVID-19", fever="Yes", cough="Yes", age="45", gender="Female", bp="130"),
    ])
    manager = ModelLifecycleManager(loader, fast_config)
    assert manager.run(), manager.error

    result = ConditionPredictor(manager).predict(PATIENT, threshold=0.0)

    assert sorted(result.conditions) == ["COVID-19", "Flu"]
    assert all(0.0 <= p <= 1.0 for p in result.probabilities)
    assert result.probabilities == sorted(result.probabilities, reverse=True)

    print(f"✓ Prediction: {result.predictions}")


def test_predict_with_trained_model(ready_manager):
    """Тест: навчена модель, результат обмежений словником"""
    from dr_predict.neural_network import ConditionPredictor

    predictor = ConditionPredictor(ready_manager)
    result = predictor.predict_all(PATIENT)

    assert set(result.conditions) == set(ready_manager.acquire().conditions)
    assert result.to_dict()["threshold"] == 0.0
