"""
Dr.Predict — Завантаження датасету

Читає табличний датасет клінічних випадків (Disease Symptom and Patient
Profile Dataset) та віддає записи у вигляді незмінних словників.

Структура CSV:
    Disease,Fever,Cough,Fatigue,Difficulty Breathing,Age,Gender,
    Blood Pressure,Cholesterol Level,Outcome Variable

Заголовки нормалізуються у snake_case:
    "Difficulty Breathing" → "difficulty_breathing"
"""

from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterable, Iterator, List, Mapping, Optional, Sequence

import pandas as pd

from dr_predict.exceptions import DataLoadError


# Один запис датасету: незмінний словник {поле: сире значення}
RawRecord = Mapping[str, Any]


def canonical_field_name(column: str) -> str:
    """Назва колонки → snake_case ім'я поля"""
    return "_".join(str(column).strip().lower().replace("-", " ").split())


def freeze_record(data: Mapping[str, Any]) -> RawRecord:
    """Створити незмінний запис з канонічними іменами полів"""
    return MappingProxyType({canonical_field_name(k): v for k, v in data.items()})


class DatasetLoader:
    """
    Базовий завантажувач: скінченна впорядкована послідовність RawRecord.

    Підкласи реалізують load(). Помилки читання та пошкоджені рядки
    повідомляються через DataLoadError, рядки ніколи не відкидаються мовчки.
    """

    source: str = "unknown"

    def load(self) -> List[RawRecord]:
        raise NotImplementedError

    def __iter__(self) -> Iterator[RawRecord]:
        return iter(self.load())


class CSVDatasetLoader(DatasetLoader):
    """
    Завантажувач CSV датасету.

    Приклад використання:
        loader = CSVDatasetLoader("data/Disease_symptom_and_patient_profile_dataset.csv")
        for record in loader:
            print(record["disease"], record["fever"])
    """

    def __init__(
        self,
        path: str,
        required_fields: Optional[Sequence[str]] = None
    ):
        """
        Args:
            path: Шлях до CSV файлу
            required_fields: Поля (snake_case), які мають бути серед колонок
        """
        self.path = Path(path)
        self.source = str(self.path)
        self.required_fields = [canonical_field_name(f) for f in (required_fields or [])]

    def _read_frame(self) -> pd.DataFrame:
        if not self.path.exists():
            raise DataLoadError(f"Dataset file not found: {self.path}", source=self.source)

        try:
            # Всі значення як рядки: розбір полів робить енкодер
            return pd.read_csv(
                self.path,
                dtype=str,
                engine="python",
                keep_default_na=False,
                skipinitialspace=True,
            )
        except pd.errors.EmptyDataError as e:
            raise DataLoadError(f"Dataset file is empty: {self.path}", source=self.source) from e
        except pd.errors.ParserError as e:
            raise DataLoadError(f"Malformed CSV: {e}", source=self.source) from e
        except (OSError, UnicodeDecodeError) as e:
            raise DataLoadError(f"Cannot read dataset: {e}", source=self.source) from e

    def load(self) -> List[RawRecord]:
        """Прочитати всі записи у порядку файлу"""
        df = self._read_frame()

        columns = [canonical_field_name(c) for c in df.columns]
        duplicates = sorted({c for c in columns if columns.count(c) > 1})
        if duplicates:
            raise DataLoadError(
                f"Duplicate columns after normalization: {duplicates}",
                source=self.source
            )
        df.columns = columns

        missing = [f for f in self.required_fields if f not in df.columns]
        if missing:
            raise DataLoadError(
                f"Missing required columns: {missing}",
                source=self.source,
                details={"columns": columns}
            )

        # З keep_default_na=False NaN буває тільки у рядках із нестачею полів
        incomplete = df.isna().any(axis=1)
        if incomplete.any():
            first = int(incomplete.to_numpy().nonzero()[0][0])
            raise DataLoadError(
                f"Row {first + 2} has fewer fields than the header",
                source=self.source,
                row=first + 2
            )

        return [freeze_record(row) for row in df.to_dict(orient="records")]

    def __repr__(self) -> str:
        return f"CSVDatasetLoader(path='{self.path}')"


class InMemoryDatasetLoader(DatasetLoader):
    """
    Завантажувач з готової послідовності словників (тести, інші джерела).

    Приклад:
        loader = InMemoryDatasetLoader([
            {"Disease": "Flu", "Fever": "Yes", "Age": 30, ...},
        ])
    """

    def __init__(self, records: Iterable[Mapping[str, Any]], source: str = "memory"):
        self._records = list(records)
        self.source = source

    def load(self) -> List[RawRecord]:
        result = []
        for i, record in enumerate(self._records):
            if not isinstance(record, Mapping):
                raise DataLoadError(
                    f"Record {i} is {type(record).__name__}, expected a mapping",
                    source=self.source,
                    row=i
                )
            result.append(freeze_record(record))
        return result

    def __len__(self) -> int:
        return len(self._records)

    def __repr__(self) -> str:
        return f"InMemoryDatasetLoader(records={len(self._records)})"
