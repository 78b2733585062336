#!/usr/bin/env python3
"""
Dr.Predict — Навчання моделі з консолі

Завантажує датасет, навчає модель синхронно та показує прогнози
для кількох тестових пацієнтів.

Запуск:
    python scripts/train_model.py
    python scripts/train_model.py --dataset data/my.csv --epochs 100
    python scripts/train_model.py --config config.yaml --threshold 0.04
"""

import argparse
import json
import sys
from pathlib import Path

# Додаємо корінь проекту до path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from dr_predict.config import get_default_config, load_config
from dr_predict.exceptions import PredictionEngineError
from dr_predict.lifecycle import ModelLifecycleManager
from dr_predict.neural_network import ConditionPredictor


SAMPLE_PATIENTS = [
    {
        "fever": True, "cough": True, "fatigue": True, "difficultyBreathing": False,
        "age": 30, "gender": "Male", "bloodPressure": 125,
    },
    {
        "fever": False, "cough": True, "fatigue": False, "difficultyBreathing": True,
        "age": 55, "gender": "Female", "bloodPressure": "High",
    },
    {
        "fever": False, "cough": False, "fatigue": True, "difficultyBreathing": False,
        "age": 42, "gender": "Female", "bloodPressure": 75,
    },
]


def main():
    parser = argparse.ArgumentParser(description='Dr.Predict — навчання моделі')
    parser.add_argument('--config', help='YAML конфігурація')
    parser.add_argument('--dataset', help='Шлях до CSV датасету')
    parser.add_argument('--epochs', type=int, help='Максимум епох')
    parser.add_argument('--timeout', type=float, help='Тайм-аут навчання (секунди)')
    parser.add_argument('--threshold', type=float, default=0.04, help='Поріг для тестових прогнозів')
    parser.add_argument('--summary', help='Зберегти опис моделі в JSON')

    args = parser.parse_args()

    config = load_config(args.config) if args.config else get_default_config()
    if args.dataset:
        config.lifecycle.dataset_path = args.dataset
    if args.epochs:
        config.training.training_epochs_cap = args.epochs
    if args.timeout:
        config.lifecycle.training_timeout = args.timeout

    print("=" * 70)
    print("Dr.Predict — НАВЧАННЯ МОДЕЛІ")
    print("=" * 70)
    print(f"\n📁 Датасет: {config.lifecycle.dataset_path}")
    print(f"⚙️ Шари: {config.training.hidden_dims}, епох ≤ {config.training.training_epochs_cap}, "
          f"patience {config.training.early_stopping_patience}")

    manager = ModelLifecycleManager(config=config)
    if not manager.run():
        print(f"\n❌ Навчання не вдалося: {manager.error}")
        sys.exit(1)

    bundle = manager.acquire()
    description = bundle.describe()

    print("\n" + "=" * 70)
    print("📊 МОДЕЛЬ")
    print("=" * 70)
    print(f"   Версія: {bundle.version}")
    print(f"   Ознаки: {bundle.feature_names}")
    print(f"   Умов: {bundle.n_conditions}")
    print(f"   {bundle.model}")

    predictor = ConditionPredictor(manager, config.predictor)

    print("\n" + "=" * 70)
    print(f"🔮 ТЕСТОВІ ПРОГНОЗИ (threshold={args.threshold})")
    print("=" * 70)

    for i, patient in enumerate(SAMPLE_PATIENTS, 1):
        print(f"\n👤 Пацієнт {i}: {patient}")
        try:
            result = predictor.predict(patient, threshold=args.threshold)
        except PredictionEngineError as e:
            print(f"   ❌ {e.code}: {e.message}")
            continue

        if not result.predictions:
            print("   (немає умов вище порогу)")
        for condition, probability in result.get_top_n(5):
            print(f"   {condition:30s} {probability:.2%}")

    if args.summary:
        with open(args.summary, 'w', encoding='utf-8') as f:
            json.dump(description, f, ensure_ascii=False, indent=2)
        print(f"\n💾 Опис моделі збережено: {args.summary}")

    print("\n✅ Готово!")


if __name__ == "__main__":
    main()
