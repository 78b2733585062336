"""
Dr.Predict — Навчання нейронної мережі

Trainer для навчання ConditionNN на нормалізованих ознаках
та матриці індикаторів умов.
Підтримує:
- Hold-out валідацію та early stopping за val loss
- Балансування рідкісних умов синтетичними прикладами
- Кооперативний таймаут (deadline)
"""

import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import numpy as np
import torch
import torch.nn as nn
import torch.optim as optim
from torch.utils.data import DataLoader, Dataset
from tqdm import tqdm

from dr_predict.config import TrainingConfig
from dr_predict.exceptions import DegenerateDatasetError, TrainingTimeoutError
from .model import ConditionNN


class MultiLabelDataset(Dataset):
    """
    Dataset для навчання.

    Кожен приклад: (feature_vector, indicator_row)
    """

    def __init__(self, features: np.ndarray, labels: np.ndarray):
        self.features = torch.as_tensor(features, dtype=torch.float32)
        self.labels = torch.as_tensor(labels, dtype=torch.float32)

    def __len__(self) -> int:
        return self.features.shape[0]

    def __getitem__(self, idx: int) -> Tuple[torch.Tensor, torch.Tensor]:
        return self.features[idx], self.labels[idx]


@dataclass
class TrainingHistory:
    """Історія навчання по епохах"""
    train_loss: List[float] = field(default_factory=list)
    val_loss: List[float] = field(default_factory=list)
    train_acc: List[float] = field(default_factory=list)
    val_acc: List[float] = field(default_factory=list)

    # "val_loss" або "train_loss", якщо валідаційна частина порожня
    monitor: str = "val_loss"
    best_epoch: int = 0
    best_loss: float = float("inf")
    stopped_early: bool = False
    n_train: int = 0
    n_val: int = 0

    @property
    def epochs_run(self) -> int:
        return len(self.train_loss)

    def summary(self) -> Dict[str, object]:
        return {
            "epochs_run": self.epochs_run,
            "best_epoch": self.best_epoch,
            "best_loss": self.best_loss,
            "monitor": self.monitor,
            "stopped_early": self.stopped_early,
            "train_samples": self.n_train,
            "val_samples": self.n_val,
        }


def oversample_minority(
    features: np.ndarray,
    labels: np.ndarray,
    noise: float = 0.1,
    rng: Optional[np.random.Generator] = None
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Догенерувати приклади для рідкісних умов.

    Для кожної умови з кількістю прикладів меншою за максимальну
    випадково повторює її рядки з рівномірним шумом [-noise, noise]
    на ознаках, доки кількість не зрівняється з максимальною.
    """
    rng = rng or np.random.default_rng()
    counts = labels.sum(axis=0)
    if labels.shape[0] == 0 or counts.max() == 0:
        return features, labels

    target = int(counts.max())
    extra_features = [features]
    extra_labels = [labels]

    for j, count in enumerate(counts.astype(int)):
        if count == 0 or count >= target:
            continue
        rows = np.flatnonzero(labels[:, j] > 0)
        picked = rng.choice(rows, size=target - count, replace=True)
        jitter = rng.uniform(-noise, noise, size=(len(picked), features.shape[1]))
        extra_features.append((features[picked] + jitter).astype(np.float32))
        extra_labels.append(labels[picked])

    return np.concatenate(extra_features), np.concatenate(extra_labels)


class MultiLabelTrainer:
    """
    Trainer для ConditionNN.

    Приклад використання:
        trainer = MultiLabelTrainer(n_features=7, n_conditions=116)
        history = trainer.train(normalized_features, indicator_matrix)

        model = trainer.model   # навчена модель в eval режимі
    """

    def __init__(
        self,
        n_features: int,
        n_conditions: int,
        config: Optional[TrainingConfig] = None,
        device: Optional[str] = None,
        verbose: bool = True
    ):
        """
        Args:
            n_features: Кількість ознак F
            n_conditions: Кількість умов L
            config: Конфігурація навчання
            device: 'cuda' або 'cpu'
            verbose: Виводити прогрес
        """
        if n_features < 1:
            raise DegenerateDatasetError("Cannot train with zero features")
        if n_conditions < 1:
            raise DegenerateDatasetError("Cannot train with an empty label vocabulary")

        self.n_features = n_features
        self.n_conditions = n_conditions
        self.config = config or TrainingConfig()
        self.verbose = verbose

        if device is None:
            device = 'cuda' if torch.cuda.is_available() else 'cpu'
        self.device = torch.device(device)

        # Сід діє тільки на ініціалізацію ваг, глобальний RNG відновлюється
        with torch.random.fork_rng(devices=[]):
            if self.config.seed is not None:
                torch.manual_seed(self.config.seed)
            self.model = ConditionNN(
                n_features=n_features,
                n_conditions=n_conditions,
                hidden_dims=self.config.hidden_dims,
                dropout=self.config.dropout
            )
        self.model.to(self.device)

        self.optimizer = None
        self.criterion = None
        self._best_state: Optional[Dict[str, torch.Tensor]] = None

        if self.verbose:
            print(f"MultiLabelTrainer initialized on {self.device}")
            print(f"Model: {self.model.count_parameters():,} parameters")

    def _setup_training(self):
        """Налаштувати optimizer та criterion"""
        self.optimizer = optim.Adam(self.model.parameters(), lr=self.config.learning_rate)
        # Бінарна втрата по кожній мітці, усереднена по мітках і прикладах
        self.criterion = nn.BCEWithLogitsLoss()

    def _validate_inputs(self, features: np.ndarray, labels: np.ndarray):
        if features.ndim != 2 or features.shape[0] == 0:
            raise DegenerateDatasetError(
                f"Feature matrix is empty (shape {features.shape})"
            )
        if labels.ndim != 2 or labels.shape[1] == 0:
            raise DegenerateDatasetError(
                f"Indicator matrix has no label columns (shape {labels.shape})"
            )
        if features.shape[0] != labels.shape[0]:
            raise ValueError(
                f"Features ({features.shape[0]}) and labels ({labels.shape[0]}) row counts differ"
            )
        if features.shape[1] != self.n_features or labels.shape[1] != self.n_conditions:
            raise ValueError(
                f"Expected ({self.n_features}, {self.n_conditions}) columns, "
                f"got ({features.shape[1]}, {labels.shape[1]})"
            )

    def _split(
        self,
        features: np.ndarray,
        labels: np.ndarray,
        rng: np.random.Generator
    ) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
        """Hold-out: останні validation_split_fraction перемішаних рядків"""
        n_samples = features.shape[0]
        n_val = int(round(n_samples * self.config.validation_split_fraction))
        if n_samples - n_val < 1:
            n_val = 0

        indices = rng.permutation(n_samples)
        train_idx, val_idx = indices[:n_samples - n_val], indices[n_samples - n_val:]
        return features[train_idx], labels[train_idx], features[val_idx], labels[val_idx]

    def train(
        self,
        features: np.ndarray,
        labels: np.ndarray,
        deadline: Optional[float] = None
    ) -> TrainingHistory:
        """
        Навчити модель.

        Args:
            features: Нормалізована матриця ознак (N, F)
            labels: Матриця індикаторів (N, L)
            deadline: time.monotonic() момент, після якого навчання зупиняється
                      з TrainingTimeoutError

        Returns:
            TrainingHistory
        """
        features = np.asarray(features, dtype=np.float32)
        labels = np.asarray(labels, dtype=np.float32)
        self._validate_inputs(features, labels)

        self._setup_training()
        rng = np.random.default_rng(self.config.seed)

        x_train, y_train, x_val, y_val = self._split(features, labels, rng)
        if self.config.oversample_minority:
            x_train, y_train = oversample_minority(
                x_train, y_train, noise=self.config.oversample_noise, rng=rng
            )

        generator = None
        if self.config.seed is not None:
            generator = torch.Generator().manual_seed(self.config.seed)

        train_loader = DataLoader(
            MultiLabelDataset(x_train, y_train),
            batch_size=self.config.batch_size,
            shuffle=True,
            generator=generator,
            num_workers=0
        )

        history = TrainingHistory(n_train=len(x_train), n_val=len(x_val))
        if len(x_val) > 0:
            monitor_loader = DataLoader(
                MultiLabelDataset(x_val, y_val),
                batch_size=self.config.batch_size,
                shuffle=False
            )
        else:
            # Замало даних для hold-out: стежимо за втратою на навчальній частині
            history.monitor = "train_loss"
            monitor_loader = DataLoader(
                MultiLabelDataset(x_train, y_train),
                batch_size=self.config.batch_size,
                shuffle=False
            )

        if self.verbose:
            print(f"Training: {history.n_train} samples, validation: {history.n_val} samples "
                  f"(monitor: {history.monitor})")

        epochs_without_improvement = 0
        epochs = tqdm(
            range(self.config.training_epochs_cap),
            desc="Training",
            disable=not self.verbose
        )

        for epoch in epochs:
            train_loss, train_acc = self._train_epoch(train_loader, deadline, epoch)
            val_loss, val_acc = self._evaluate(monitor_loader)

            history.train_loss.append(train_loss)
            history.train_acc.append(train_acc)
            history.val_loss.append(val_loss)
            history.val_acc.append(val_acc)

            if val_loss < history.best_loss - self.config.min_delta:
                history.best_loss = val_loss
                history.best_epoch = epoch + 1
                epochs_without_improvement = 0
                self._save_best_model()
            else:
                epochs_without_improvement += 1

            epochs.set_postfix(loss=f"{train_loss:.4f}", val=f"{val_loss:.4f}")

            if epochs_without_improvement >= self.config.early_stopping_patience:
                history.stopped_early = True
                if self.verbose:
                    print(f"Early stopping at epoch {epoch + 1}")
                break

        self._load_best_model()
        self.model.eval()

        if self.verbose:
            print("Training complete")

        return history

    def _check_deadline(self, deadline: Optional[float], epoch: int):
        if deadline is not None and time.monotonic() > deadline:
            raise TrainingTimeoutError(
                f"Training exceeded its time budget at epoch {epoch + 1}",
                epoch=epoch + 1
            )

    def _train_epoch(
        self,
        loader: DataLoader,
        deadline: Optional[float],
        epoch: int
    ) -> Tuple[float, float]:
        """Одна епоха навчання"""
        self.model.train()
        total_loss = 0.0
        correct = 0.0
        total = 0

        for features, targets in loader:
            self._check_deadline(deadline, epoch)

            features = features.to(self.device)
            targets = targets.to(self.device)

            self.optimizer.zero_grad()

            logits = self.model(features)
            loss = self.criterion(logits, targets)

            loss.backward()
            self.optimizer.step()

            total_loss += loss.item() * features.size(0)
            correct += self._binary_accuracy(logits, targets) * features.size(0)
            total += features.size(0)

        return total_loss / total, correct / total

    def _evaluate(self, loader: DataLoader) -> Tuple[float, float]:
        """Втрата та бінарна точність без оновлення ваг"""
        self.model.eval()
        total_loss = 0.0
        correct = 0.0
        total = 0

        with torch.no_grad():
            for features, targets in loader:
                features = features.to(self.device)
                targets = targets.to(self.device)

                logits = self.model(features)
                loss = self.criterion(logits, targets)

                total_loss += loss.item() * features.size(0)
                correct += self._binary_accuracy(logits, targets) * features.size(0)
                total += features.size(0)

        return total_loss / total, correct / total

    @staticmethod
    def _binary_accuracy(logits: torch.Tensor, targets: torch.Tensor) -> float:
        predicted = (torch.sigmoid(logits) >= 0.5).float()
        return predicted.eq(targets).float().mean().item()

    def _save_best_model(self):
        """Зберегти найкращі ваги у пам'яті"""
        self._best_state = {
            k: v.detach().clone() for k, v in self.model.state_dict().items()
        }

    def _load_best_model(self):
        """Відновити найкращі ваги"""
        if self._best_state is not None:
            self.model.load_state_dict(self._best_state)

    def predict_proba(self, features: np.ndarray) -> np.ndarray:
        """Ймовірності для нормалізованої матриці (N, F)"""
        self.model.eval()
        with torch.no_grad():
            x = torch.as_tensor(np.asarray(features, dtype=np.float32), device=self.device)
            return self.model.predict_proba(x).cpu().numpy()

    def __repr__(self) -> str:
        return f"MultiLabelTrainer(model={self.model.count_parameters():,} params, device={self.device})"
