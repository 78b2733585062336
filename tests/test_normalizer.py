"""
Тести для нормалізації ознак

Запуск: pytest tests/test_normalizer.py -v
"""

import numpy as np
import pytest

from dr_predict.exceptions import DegenerateDatasetError


def test_zero_mean_unit_variance():
    """Тест: нормалізовані колонки мають ~0 середнє та ~1 дисперсію"""
    from dr_predict.neural_network import Normalizer

    rng = np.random.default_rng(0)
    matrix = rng.normal(loc=[5.0, -3.0, 40.0], scale=[2.0, 0.5, 12.0], size=(200, 3))

    stats = Normalizer().fit(matrix)
    normalized = stats.apply(matrix)

    np.testing.assert_allclose(normalized.mean(axis=0), 0.0, atol=1e-5)
    np.testing.assert_allclose(normalized.std(axis=0), 1.0, atol=1e-4)

    print(f"✓ Mean: {stats.mean}, std: {stats.std}")


def test_constant_column_epsilon():
    """Тест: константна колонка не дає ділення на нуль"""
    from dr_predict.neural_network import Normalizer

    matrix = np.array([[1.0, 7.0], [3.0, 7.0], [5.0, 7.0]])
    stats = Normalizer(epsilon=1e-6).fit(matrix)
    normalized = stats.apply(matrix)

    assert stats.std[1] == 0.0
    assert np.isfinite(normalized).all()
    np.testing.assert_array_equal(normalized[:, 1], 0.0)


def test_round_trip():
    """Тест: кодування → нормалізація → обернене перетворення відновлює вектор"""
    from dr_predict.encoding import FeatureEncoder
    from dr_predict.neural_network import Normalizer

    encoder = FeatureEncoder()
    rows = [
        {"fever": "Yes", "cough": "No", "fatigue": "Yes", "difficulty_breathing": "No",
         "age": "30", "gender": "Male", "blood_pressure": "High"},
        {"fever": "No", "cough": "Yes", "fatigue": "Yes", "difficulty_breathing": "Yes",
         "age": "62", "gender": "Female", "blood_pressure": "Low"},
        {"fever": "Yes", "cough": "Yes", "fatigue": "No", "difficulty_breathing": "No",
         "age": "45", "gender": "Male", "blood_pressure": "Normal"},
    ]
    matrix = encoder.encode_many(rows)

    stats = Normalizer().fit(matrix)
    vector = matrix[1]

    np.testing.assert_allclose(stats.inverse(stats.apply(vector)), vector, atol=1e-4)


def test_stats_read_only():
    """Тест: статистики не можна змінити"""
    from dr_predict.neural_network import Normalizer

    stats = Normalizer().fit(np.array([[1.0, 2.0], [3.0, 4.0]]))

    with pytest.raises(ValueError):
        stats.mean[0] = 10.0


def test_feature_count_mismatch():
    """Тест: вектор іншої довжини → ValueError"""
    from dr_predict.neural_network import Normalizer

    stats = Normalizer().fit(np.ones((4, 3)))

    with pytest.raises(ValueError):
        stats.apply(np.ones(5))


def test_empty_matrix():
    """Тест: порожня матриця → DegenerateDatasetError"""
    from dr_predict.neural_network import Normalizer

    with pytest.raises(DegenerateDatasetError):
        Normalizer().fit(np.zeros((0, 7)))

    with pytest.raises(ValueError):
        Normalizer().fit(np.zeros(7))
