"""
Dr.Predict — Менеджер життєвого циклу моделі

Стани:
    UNINITIALIZED → LOADING → TRAINING → READY
                        ↘         ↘
                          FAILED (потрібен явний retrain)

Стан, бандл та помилка зберігаються в одному незмінному знімку
LifecycleSnapshot. Кожен перехід замінює знімок цілком, тому читач
ніколи не бачить модель, навчену під один словник, разом з іншим словником.
"""

import threading
import time
import traceback
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from dr_predict.config import DrPredictConfig
from dr_predict.encoding import (
    CSVDatasetLoader,
    DatasetLoader,
    FeatureEncoder,
    prepare_training_data,
)
from dr_predict.exceptions import NotReadyError, PredictionEngineError, TrainingTimeoutError
from dr_predict.neural_network import MultiLabelTrainer, Normalizer
from .bundle import ModelBundle


class ModelState(str, Enum):
    """Стан рушія прогнозування"""
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    TRAINING = "training"
    READY = "ready"
    FAILED = "failed"


@dataclass(frozen=True)
class LifecycleSnapshot:
    """Атомарно опублікований стан менеджера"""
    state: ModelState
    bundle: Optional[ModelBundle] = None
    error: Optional[str] = None
    # Помилка останнього retrain, якщо попередній бандл лишився в роботі
    last_error: Optional[str] = None
    updated_at: datetime = field(default_factory=datetime.now)


class ModelLifecycleManager:
    """
    Менеджер моделі: один раз завантажує дані, навчає модель та публікує бандл.

    Приклад використання:
        manager = ModelLifecycleManager(config=config)
        manager.start()                    # не блокує, навчання у фоні

        if manager.wait_until_ready(timeout=600):
            bundle = manager.acquire()
        else:
            print(manager.status())
    """

    def __init__(
        self,
        loader: Optional[DatasetLoader] = None,
        config: Optional[DrPredictConfig] = None
    ):
        """
        Args:
            loader: Джерело записів (за замовчуванням CSV з config.lifecycle.dataset_path)
            config: Конфігурація системи
        """
        self.config = config or DrPredictConfig()
        self.loader = loader
        self.verbose = self.config.lifecycle.verbose

        self._snapshot = LifecycleSnapshot(state=ModelState.UNINITIALIZED)
        self._lock = threading.Lock()
        self._job_running = False
        self._worker: Optional[threading.Thread] = None
        self._settled = threading.Event()
        self._version = 0

    # =========================================================================
    # READ SIDE
    # =========================================================================

    @property
    def snapshot(self) -> LifecycleSnapshot:
        return self._snapshot

    @property
    def state(self) -> ModelState:
        return self._snapshot.state

    @property
    def is_ready(self) -> bool:
        return self._snapshot.state == ModelState.READY

    @property
    def error(self) -> Optional[str]:
        return self._snapshot.error

    @property
    def is_running(self) -> bool:
        return self._job_running

    def acquire(self) -> ModelBundle:
        """
        Знімок опублікованого бандла для одного запиту.

        Raises:
            NotReadyError: бандл ще не опублікований або ініціалізація впала
        """
        snapshot = self._snapshot
        if snapshot.state == ModelState.READY and snapshot.bundle is not None:
            return snapshot.bundle

        if snapshot.state == ModelState.FAILED:
            raise NotReadyError(
                f"Prediction engine failed to initialize: {snapshot.error}",
                state=snapshot.state.value,
                cause=snapshot.error
            )
        raise NotReadyError(
            f"Prediction model is not ready (state: {snapshot.state.value})",
            state=snapshot.state.value
        )

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        """
        Блокувати до READY або FAILED.

        Returns:
            True, якщо модель готова
        """
        if self.is_ready:
            return True
        self._settled.wait(timeout)
        return self.is_ready

    def status(self) -> Dict[str, Any]:
        """Стан для health check"""
        snapshot = self._snapshot
        bundle = snapshot.bundle
        return {
            "state": snapshot.state.value,
            "model_version": bundle.version if bundle else None,
            "n_features": bundle.n_features if bundle else None,
            "n_conditions": bundle.n_conditions if bundle else None,
            "trained_at": bundle.trained_at.isoformat() if bundle else None,
            "error": snapshot.error,
            "last_error": snapshot.last_error,
            "job_running": self._job_running,
            "updated_at": snapshot.updated_at.isoformat(),
        }

    # =========================================================================
    # WRITE SIDE
    # =========================================================================

    def start(self) -> threading.Thread:
        """
        Запустити завантаження та навчання у фоновому потоці.

        Повертається одразу; до READY всі запити отримують NotReadyError.
        """
        self._require_uninitialized()
        return self._launch(self.loader, background=True)

    def run(self) -> bool:
        """Виконати весь цикл синхронно. Returns: True, якщо READY"""
        self._require_uninitialized()
        self._launch(self.loader, background=False)
        return self.is_ready

    def _require_uninitialized(self):
        if self.state != ModelState.UNINITIALIZED:
            raise RuntimeError(
                f"Manager already started (state '{self.state.value}'); use retrain()"
            )

    def retrain(
        self,
        loader: Optional[DatasetLoader] = None,
        background: bool = True
    ) -> Optional[threading.Thread]:
        """
        Явне перенавчання з READY або FAILED.

        З READY старий бандл обслуговує запити, доки новий не буде
        опублікований цілком. Невдале перенавчання лишає старий бандл
        і записує last_error.
        """
        if self.state not in (ModelState.READY, ModelState.FAILED):
            raise RuntimeError(f"Cannot retrain from state '{self.state.value}'")
        if loader is not None:
            self.loader = loader
        return self._launch(self.loader, background=background)

    def _launch(self, loader: Optional[DatasetLoader], background: bool) -> Optional[threading.Thread]:
        with self._lock:
            if self._job_running:
                raise RuntimeError("A load/train job is already running")
            self._job_running = True
            if not self.is_ready:
                self._settled.clear()

        if not background:
            self._run_job(loader)
            return None

        self._worker = threading.Thread(
            target=self._run_job,
            args=(loader,),
            name="dr-predict-training",
            daemon=True
        )
        self._worker.start()
        return self._worker

    def _publish(self, **changes):
        """Замінити знімок цілком"""
        with self._lock:
            current = self._snapshot
            values = {
                "state": current.state,
                "bundle": current.bundle,
                "error": current.error,
                "last_error": current.last_error,
            }
            values.update(changes)
            self._snapshot = LifecycleSnapshot(**values)

    def _run_job(self, loader: Optional[DatasetLoader]):
        retraining = self.is_ready
        started = time.monotonic()

        try:
            bundle = self._build_bundle(loader, retraining)
            self._publish(state=ModelState.READY, bundle=bundle, error=None, last_error=None)
            if self.verbose:
                print(f"✅ Model v{bundle.version} ready: {bundle.n_conditions} conditions, "
                      f"{bundle.n_features} features ({time.monotonic() - started:.1f}s)")

        except Exception as e:
            message = self._describe_error(e)
            if retraining:
                # Попередній бандл продовжує працювати
                self._publish(last_error=message)
            else:
                self._publish(state=ModelState.FAILED, bundle=None, error=message)
            if self.verbose:
                print(f"❌ Model initialization failed: {message}")
                if not isinstance(e, PredictionEngineError):
                    traceback.print_exc()

        finally:
            with self._lock:
                self._job_running = False
            self._settled.set()

    @staticmethod
    def _describe_error(e: Exception) -> str:
        if isinstance(e, PredictionEngineError):
            return f"{e.code}: {e.message}"
        return f"{type(e).__name__}: {e}"

    def _default_loader(self, encoder: FeatureEncoder) -> DatasetLoader:
        encoding = self.config.encoding
        return CSVDatasetLoader(
            self.config.lifecycle.dataset_path,
            required_fields=encoder.feature_names + [encoding.label_field]
        )

    def _build_bundle(self, loader: Optional[DatasetLoader], retraining: bool) -> ModelBundle:
        """Завантаження → кодування → нормалізація → навчання"""
        encoder = FeatureEncoder(config=self.config.encoding)
        loader = loader or self._default_loader(encoder)

        # 1. Дані
        if not retraining:
            self._publish(state=ModelState.LOADING)
        if self.verbose:
            print(f"📦 Loading dataset from {loader.source}...")
        records = loader.load()
        if self.verbose:
            print(f"   ✅ {len(records)} records")

        # 2. Кодування та навчання
        if not retraining:
            self._publish(state=ModelState.TRAINING)

        timeout = self.config.lifecycle.training_timeout
        deadline = time.monotonic() + timeout if timeout is not None else None

        data = prepare_training_data(records, encoder, self.config.encoding, verbose=self.verbose)
        data.check_trainable()
        if self.verbose:
            print(f"   ✅ Encoded: {data.summary()}")

        stats = Normalizer(epsilon=self.config.training.normalization_epsilon).fit(data.features)

        trainer = MultiLabelTrainer(
            n_features=data.n_features,
            n_conditions=data.n_conditions,
            config=self.config.training,
            verbose=self.verbose
        )
        try:
            history = trainer.train(stats.apply(data.features), data.labels, deadline=deadline)
        except TrainingTimeoutError as e:
            e.timeout = timeout
            e.details["timeout_seconds"] = timeout
            raise

        with self._lock:
            self._version += 1
            version = self._version

        return ModelBundle(
            model=trainer.model,
            vocabulary=data.vocabulary,
            stats=stats,
            encoder=encoder,
            version=version,
            training_summary={**history.summary(), **data.summary()},
        )

    def __repr__(self) -> str:
        return f"ModelLifecycleManager(state={self.state.value}, version={self._version})"
