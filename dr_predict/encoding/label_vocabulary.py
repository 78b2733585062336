"""
Dr.Predict — Словник умов (діагнозів)

Відображення назв умов у індекси виходу моделі та навпаки.
Порядок = порядок першої появи в навчальних даних; він є контрактом
між рядками-індикаторами при навчанні та підписами результатів інференсу.
"""

from typing import Any, Dict, Iterable, List, Optional

import numpy as np

from .feature_encoder import read_field


class ConditionVocabulary:
    """
    Словник умов: condition ↔ index

    Приклад використання:
        vocab = build_vocabulary(records)

        idx = vocab.index_of("Influenza")
        name = vocab.condition_at(0)
        print(vocab.size)
    """

    def __init__(self):
        self._condition_to_idx: Dict[str, int] = {}
        self._conditions: List[str] = []
        self._frozen: bool = False

    @classmethod
    def from_list(cls, conditions: Iterable[str]) -> "ConditionVocabulary":
        """Створити заморожений словник із впорядкованого списку"""
        vocab = cls()
        for condition in conditions:
            vocab.add(condition)
        vocab.freeze()
        return vocab

    def add(self, condition: str) -> int:
        """
        Додати умову до словника.

        Returns:
            Індекс умови (існуючий, якщо вона вже є)
        """
        if self._frozen:
            raise RuntimeError("Vocabulary is frozen. Cannot add new conditions.")

        condition = condition.strip()
        if not condition:
            raise ValueError("Condition name must not be empty")

        if condition in self._condition_to_idx:
            return self._condition_to_idx[condition]

        idx = len(self._conditions)
        self._condition_to_idx[condition] = idx
        self._conditions.append(condition)
        return idx

    def freeze(self) -> None:
        """Заморозити словник (після навчання змінювати не можна)"""
        self._frozen = True

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    def index_of(self, condition: str) -> Optional[int]:
        return self._condition_to_idx.get(condition.strip())

    def condition_at(self, index: int) -> str:
        return self._conditions[index]

    @property
    def size(self) -> int:
        return len(self._conditions)

    @property
    def conditions(self) -> List[str]:
        """Копія списку умов у порядку індексів"""
        return list(self._conditions)

    def to_list(self) -> List[str]:
        return self.conditions

    def __len__(self) -> int:
        return self.size

    def __contains__(self, condition: str) -> bool:
        return condition.strip() in self._condition_to_idx

    def __iter__(self):
        return iter(self.conditions)

    def __repr__(self) -> str:
        return f"ConditionVocabulary(size={self.size}, frozen={self._frozen})"


def split_labels(value: Any, delimiter: str = ",") -> List[str]:
    """
    Розібрати поле міток у список назв.

    Приймає рядок з роздільником ("Flu, Asthma") або список/кортеж назв.
    Порожні фрагменти ігноруються, порядок зберігається.
    """
    if value is None:
        return []
    if isinstance(value, str):
        parts = value.split(delimiter)
    elif isinstance(value, (list, tuple)):
        parts = [str(v) for v in value]
    else:
        parts = [str(value)]
    return [p.strip() for p in parts if p and p.strip()]


def is_negative_outcome(
    record: Any,
    outcome_field: str = "outcome_variable",
    negative_outcome: str = "Negative"
) -> bool:
    """Чи позначено запис як негативний випадок (умова відсутня)"""
    outcome = read_field(record, outcome_field)
    if not isinstance(outcome, str):
        return False
    return outcome.strip().casefold() == negative_outcome.casefold()


def build_vocabulary(
    records: Iterable[Any],
    label_field: str = "disease",
    delimiter: str = ",",
    outcome_field: str = "outcome_variable",
    negative_outcome: str = "Negative"
) -> ConditionVocabulary:
    """
    Побудувати словник з усіх міток навчальних записів.

    Негативні записи пропускаються. Порядок — порядок першої появи.

    Returns:
        Заморожений ConditionVocabulary
    """
    vocab = ConditionVocabulary()

    for record in records:
        if is_negative_outcome(record, outcome_field, negative_outcome):
            continue
        for condition in split_labels(read_field(record, label_field), delimiter):
            vocab.add(condition)

    vocab.freeze()
    return vocab


def build_indicator_row(
    record: Any,
    vocabulary: ConditionVocabulary,
    label_field: str = "disease",
    delimiter: str = ","
) -> np.ndarray:
    """
    Рядок-індикатор {0, 1} довжини L: позиція i = 1, якщо vocabulary[i]
    серед міток запису.
    """
    row = np.zeros(vocabulary.size, dtype=np.float32)
    for condition in split_labels(read_field(record, label_field), delimiter):
        idx = vocabulary.index_of(condition)
        if idx is not None:
            row[idx] = 1.0
    return row
