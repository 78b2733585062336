"""
Dr.Predict — Ієрархія винятків

Кожна категорія помилок рушія прогнозування має свій тип
та структуровану інформацію для API-відповідей.
"""

from typing import Any, Dict, Optional


class PredictionEngineError(Exception):
    """Базовий виняток рушія прогнозування"""

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Словник для тіла API-відповіді"""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details
        }


class DataLoadError(PredictionEngineError):
    """Джерело даних недоступне або пошкоджене"""

    def __init__(
        self,
        message: str,
        source: str = "unknown",
        row: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        extra = {"source": source}
        if row is not None:
            extra["row"] = row
        super().__init__(
            message=message,
            code="DATA_LOAD_ERROR",
            details={**extra, **(details or {})}
        )
        self.source = source
        self.row = row


class EncodingError(PredictionEngineError):
    """Некоректне поле запису (тільки в strict режимі)"""

    def __init__(
        self,
        message: str,
        field: str = "unknown",
        value: Any = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="ENCODING_ERROR",
            details={"field": field, "value": repr(value), **(details or {})}
        )
        self.field = field
        self.value = value


class DegenerateDatasetError(PredictionEngineError):
    """Порожній словник умов або порожня матриця ознак"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            code="DEGENERATE_DATASET",
            details=details
        )


class TrainingTimeoutError(PredictionEngineError):
    """Навчання не вклалося у відведений час"""

    def __init__(
        self,
        message: str,
        timeout: Optional[float] = None,
        epoch: Optional[int] = None
    ):
        super().__init__(
            message=message,
            code="TRAINING_TIMEOUT",
            details={"timeout_seconds": timeout, "epoch": epoch}
        )
        self.timeout = timeout
        self.epoch = epoch


class NotReadyError(PredictionEngineError):
    """Модель ще не опублікована (або ініціалізація завершилась помилкою)"""

    def __init__(
        self,
        message: str,
        state: str = "uninitialized",
        cause: Optional[str] = None
    ):
        super().__init__(
            message=message,
            code="NOT_READY",
            details={"state": state, "cause": cause}
        )
        self.state = state
        self.cause = cause


class InvalidInputError(PredictionEngineError):
    """Запит без обов'язкових полів або зі значеннями поза діапазоном"""

    def __init__(
        self,
        message: str,
        errors: Optional[list] = None
    ):
        super().__init__(
            message=message,
            code="INVALID_INPUT",
            details={"errors": errors or []}
        )
        self.errors = errors or []
