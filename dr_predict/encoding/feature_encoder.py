"""
Dr.Predict — Кодування клінічних записів

Перетворює сирий запис (рядок датасету або запит на інференс)
у вектор ознак фіксованої довжини за схемою FeatureSchema.
"""

import math
from dataclasses import replace
from typing import Any, Iterable, List, Mapping, Optional

import numpy as np

from dr_predict.config import EncodingConfig
from dr_predict.exceptions import EncodingError
from .feature_schema import FeatureKind, FeatureSchema, FeatureSpec, get_schema


_AFFIRMATIVE = {"yes", "y", "true", "1", "positive"}
_NEGATORY = {"no", "n", "false", "0", "negative"}
_LEVELS = {"high": 1.0, "normal": 0.0, "low": -1.0}


class _Malformed(Exception):
    """Внутрішній сигнал: значення не вдалося розібрати"""


def read_field(source: Any, name: str) -> Any:
    """
    Прочитати поле з запису.

    Працює і для словника (RawRecord), і для об'єкта з атрибутами
    (наприклад ClinicalInput), якщо вони мають однакові імена полів.
    """
    if isinstance(source, Mapping):
        return source.get(name)
    return getattr(source, name, None)


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str) and not value.strip():
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return False


def _to_number(value: Any) -> float:
    if isinstance(value, bool):
        raise _Malformed()
    if isinstance(value, (int, float, np.integer, np.floating)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            raise _Malformed() from None
    else:
        raise _Malformed()
    if not math.isfinite(number):
        raise _Malformed()
    return number


class FeatureEncoder:
    """
    Кодувальник записів у вектори ознак.

    Правила (порядок задає схема):
    - BINARY: так → 1.0, інакше 0.0
    - INTEGER: ціле значення, відсутнє/нерозбірне → 0
    - GENDER: positive_gender → 1.0, інакше 0.0
    - BLOOD_PRESSURE: >= high → +1.0, < low → -1.0, інакше 0.0;
      категорії датасету High/Normal/Low → +1 / 0 / -1
    - LEVEL: High/Normal/Low → +1 / 0 / -1

    Lenient режим підставляє значення за замовчуванням замість
    некоректних полів. Strict режим кидає EncodingError.

    Приклад використання:
        encoder = FeatureEncoder()
        vector = encoder.encode({
            "fever": "Yes", "cough": "No", "fatigue": "Yes",
            "difficulty_breathing": "No", "age": "30",
            "gender": "Male", "blood_pressure": "High",
        })
        # array([1., 0., 1., 0., 30., 1., 1.], dtype=float32)
    """

    def __init__(
        self,
        schema: Optional[FeatureSchema] = None,
        config: Optional[EncodingConfig] = None,
        strict: Optional[bool] = None
    ):
        """
        Args:
            schema: Схема ознак (за замовчуванням — з config.schema_version)
            config: Параметри кодування
            strict: Перевизначити config.strict_encoding
        """
        # Власна копія: опублікований енкодер не залежить від змін конфігурації
        self.config = replace(config) if config else EncodingConfig()
        self.schema = schema or get_schema(self.config.schema_version)
        self.strict = self.config.strict_encoding if strict is None else strict

    @property
    def n_features(self) -> int:
        """Розмірність вектора ознак F"""
        return self.schema.size

    @property
    def feature_names(self) -> List[str]:
        return self.schema.names

    def encode(self, source: Any, strict: Optional[bool] = None) -> np.ndarray:
        """
        Закодувати один запис.

        Args:
            source: RawRecord або об'єкт з тими ж полями
            strict: Перевизначити режим для цього виклику

        Returns:
            Вектор shape (F,), float32
        """
        strict = self.strict if strict is None else strict
        vector = np.zeros(self.n_features, dtype=np.float32)

        for i, spec in enumerate(self.schema):
            vector[i] = self._encode_feature(spec, read_field(source, spec.name), strict)

        return vector

    def encode_many(self, sources: Iterable[Any], strict: Optional[bool] = None) -> np.ndarray:
        """Закодувати послідовність записів у матрицю (N, F)"""
        rows = [self.encode(s, strict=strict) for s in sources]
        if not rows:
            return np.zeros((0, self.n_features), dtype=np.float32)
        return np.stack(rows)

    def _encode_feature(self, spec: FeatureSpec, value: Any, strict: bool) -> float:
        if _is_missing(value):
            if strict:
                raise EncodingError(f"Missing value for '{spec.name}'", field=spec.name, value=value)
            return 0.0

        try:
            return self._apply_rule(spec.kind, value)
        except _Malformed:
            if strict:
                raise EncodingError(
                    f"Malformed value for '{spec.name}': {value!r}",
                    field=spec.name,
                    value=value
                ) from None
            return 0.0

    def _apply_rule(self, kind: FeatureKind, value: Any) -> float:
        if kind == FeatureKind.BINARY:
            return self._encode_binary(value)
        if kind == FeatureKind.INTEGER:
            number = _to_number(value)
            if number < 0:
                raise _Malformed()
            return float(int(number))
        if kind == FeatureKind.GENDER:
            if not isinstance(value, str):
                raise _Malformed()
            return 1.0 if value.strip().casefold() == self.config.positive_gender.casefold() else 0.0
        if kind == FeatureKind.BLOOD_PRESSURE:
            return self._encode_blood_pressure(value)
        if kind == FeatureKind.LEVEL:
            if not isinstance(value, str) or value.strip().lower() not in _LEVELS:
                raise _Malformed()
            return _LEVELS[value.strip().lower()]
        raise ValueError(f"Unknown feature kind: {kind}")

    @staticmethod
    def _encode_binary(value: Any) -> float:
        if isinstance(value, (bool, np.bool_)):
            return 1.0 if value else 0.0
        if isinstance(value, str):
            token = value.strip().lower()
            if token in _AFFIRMATIVE:
                return 1.0
            if token in _NEGATORY:
                return 0.0
            raise _Malformed()
        number = _to_number(value)
        if number not in (0.0, 1.0):
            raise _Malformed()
        return number

    def _encode_blood_pressure(self, value: Any) -> float:
        if isinstance(value, str) and value.strip().lower() in _LEVELS:
            return _LEVELS[value.strip().lower()]

        # Числове значення (систолічний тиск)
        pressure = _to_number(value)
        if pressure < 0:
            raise _Malformed()
        if pressure >= self.config.high_bp_threshold:
            return 1.0
        if pressure < self.config.low_bp_threshold:
            return -1.0
        return 0.0

    def __repr__(self) -> str:
        return (
            f"FeatureEncoder(schema=v{self.schema.version}, "
            f"features={self.n_features}, strict={self.strict})"
        )
