"""
Dr.Predict — Архітектура нейронної мережі

Multi-label класифікатор умов за вектором ознак.

Архітектура:
- Input: нормалізований вектор ознак (F)
- Hidden layers: FC 128 → 64 → 32 з ReLU
- Output: логіт для кожної умови (L); sigmoid дає незалежні ймовірності
"""

import torch
import torch.nn as nn
from typing import List, Optional


class ConditionNN(nn.Module):
    """
    Нейронна мережа для multi-label прогнозування умов.

    Виходи незалежні: кожна ймовірність у [0, 1], сума не обов'язково 1.

    Приклад:
        model = ConditionNN(n_features=7, n_conditions=116)

        logits = model(torch.randn(batch_size, 7))   # (batch_size, 116)
        probs = model.predict_proba(x)                # sigmoid
    """

    def __init__(
        self,
        n_features: int,
        n_conditions: int,
        hidden_dims: Optional[List[int]] = None,
        dropout: float = 0.0
    ):
        """
        Args:
            n_features: Розмір входу F
            n_conditions: Розмір виходу L
            hidden_dims: Розміри прихованих шарів
            dropout: Dropout rate (0 = без dropout)
        """
        super().__init__()

        if n_features < 1 or n_conditions < 1:
            raise ValueError(
                f"Model dimensions must be positive, got features={n_features}, "
                f"conditions={n_conditions}"
            )

        self.n_features = n_features
        self.n_conditions = n_conditions
        self.hidden_dims = list(hidden_dims) if hidden_dims else [128, 64, 32]
        self.dropout = dropout

        layers = []
        in_dim = n_features

        for out_dim in self.hidden_dims:
            layers.append(nn.Linear(in_dim, out_dim))
            layers.append(nn.ReLU())
            if dropout > 0:
                layers.append(nn.Dropout(dropout))
            in_dim = out_dim

        self.hidden_layers = nn.Sequential(*layers)
        self.output_layer = nn.Linear(in_dim, n_conditions)

        self._init_weights()

    def _init_weights(self):
        """Xavier ініціалізація"""
        for module in self.modules():
            if isinstance(module, nn.Linear):
                nn.init.xavier_uniform_(module.weight)
                if module.bias is not None:
                    nn.init.zeros_(module.bias)

    def forward(self, features: torch.Tensor) -> torch.Tensor:
        """
        Args:
            features: shape (batch, n_features)

        Returns:
            Логіти shape (batch, n_conditions)
        """
        return self.output_layer(self.hidden_layers(features))

    def predict_proba(self, features: torch.Tensor) -> torch.Tensor:
        """Поелементна sigmoid над логітами"""
        return torch.sigmoid(self.forward(features))

    def count_parameters(self) -> int:
        return sum(p.numel() for p in self.parameters())

    def __repr__(self) -> str:
        return (
            f"ConditionNN(\n"
            f"  features={self.n_features}, conditions={self.n_conditions},\n"
            f"  hidden={self.hidden_dims}, dropout={self.dropout}\n"
            f"  params={self.count_parameters():,}\n"
            f")"
        )
