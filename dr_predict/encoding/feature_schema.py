"""
Dr.Predict — Схема ознак

Явний версіонований перелік ознак. Порядок у схемі = порядок компонент
вектора ознак; він спільний для енкодера, нормалізатора та моделі.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, List, Tuple


class FeatureKind(str, Enum):
    """Правило кодування ознаки"""
    BINARY = "binary"           # так/ні → 1.0 / 0.0
    INTEGER = "integer"         # ціле число, за замовчуванням 0
    GENDER = "gender"           # виділена категорія → 1.0, інакше 0.0
    BLOOD_PRESSURE = "blood_pressure"   # поріг або категорія → +1 / 0 / -1
    LEVEL = "level"             # High / Normal / Low → +1 / 0 / -1


@dataclass(frozen=True)
class FeatureSpec:
    """Одна ознака: ім'я поля сирого запису та правило кодування"""
    name: str
    kind: FeatureKind
    description: str = ""


@dataclass(frozen=True)
class FeatureSchema:
    """Впорядкований набір ознак з номером версії"""
    version: int
    features: Tuple[FeatureSpec, ...]

    def __post_init__(self):
        names = [f.name for f in self.features]
        if len(names) != len(set(names)):
            raise ValueError(f"Duplicate feature names in schema v{self.version}")

    @property
    def names(self) -> List[str]:
        return [f.name for f in self.features]

    @property
    def size(self) -> int:
        return len(self.features)

    def __len__(self) -> int:
        return self.size

    def __iter__(self) -> Iterator[FeatureSpec]:
        return iter(self.features)

    def __repr__(self) -> str:
        return f"FeatureSchema(v{self.version}, features={self.names})"


_SYMPTOMS = (
    FeatureSpec("fever", FeatureKind.BINARY, "Гарячка"),
    FeatureSpec("cough", FeatureKind.BINARY, "Кашель"),
    FeatureSpec("fatigue", FeatureKind.BINARY, "Втома"),
    FeatureSpec("difficulty_breathing", FeatureKind.BINARY, "Утруднене дихання"),
)

FEATURE_SCHEMA_V1 = FeatureSchema(
    version=1,
    features=_SYMPTOMS + (
        FeatureSpec("age", FeatureKind.INTEGER, "Вік, роки"),
        FeatureSpec("gender", FeatureKind.GENDER, "Стать"),
        FeatureSpec("blood_pressure", FeatureKind.BLOOD_PRESSURE, "Артеріальний тиск"),
    ),
)

FEATURE_SCHEMA_V2 = FeatureSchema(
    version=2,
    features=FEATURE_SCHEMA_V1.features + (
        FeatureSpec("cholesterol_level", FeatureKind.LEVEL, "Рівень холестерину"),
    ),
)

SCHEMAS: Dict[int, FeatureSchema] = {
    FEATURE_SCHEMA_V1.version: FEATURE_SCHEMA_V1,
    FEATURE_SCHEMA_V2.version: FEATURE_SCHEMA_V2,
}


def get_schema(version: int) -> FeatureSchema:
    """Отримати схему за номером версії"""
    try:
        return SCHEMAS[version]
    except KeyError:
        raise ValueError(
            f"Unknown feature schema version: {version}. Available: {sorted(SCHEMAS)}"
        ) from None
