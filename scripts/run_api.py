#!/usr/bin/env python3
"""
Dr.Predict — Запуск API сервера

Запуск:
    python scripts/run_api.py
    python scripts/run_api.py --port 8080
    python scripts/run_api.py --dataset data/Disease_symptom_and_patient_profile_dataset.csv
"""

import argparse
import os
import sys
from pathlib import Path

import uvicorn

# Додаємо корінь проекту до path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


def main():
    parser = argparse.ArgumentParser(description='Dr.Predict API Server')
    parser.add_argument('--host', default=os.getenv('API_HOST', '0.0.0.0'), help='Host (default: 0.0.0.0)')
    parser.add_argument('--port', type=int, default=int(os.getenv('API_PORT', '8000')), help='Port (default: 8000)')
    parser.add_argument('--dataset', help='CSV датасет (перекриває DATASET_PATH)')
    parser.add_argument('--config', help='YAML конфігурація (перекриває DR_PREDICT_CONFIG)')
    parser.add_argument('--reload', action='store_true', help='Enable auto-reload')

    args = parser.parse_args()

    # Додаток читає налаштування з environment при імпорті
    if args.dataset:
        os.environ['DATASET_PATH'] = args.dataset
    if args.config:
        os.environ['DR_PREDICT_CONFIG'] = args.config
    os.environ['API_HOST'] = args.host
    os.environ['API_PORT'] = str(args.port)

    print("=" * 60)
    print("🏥 Dr.Predict — API Server")
    print("=" * 60)
    print(f"   Host: {args.host}")
    print(f"   Port: {args.port}")
    print(f"   Dataset: {os.getenv('DATASET_PATH', '(default)')}")
    print(f"   Reload: {args.reload}")
    print("=" * 60)

    # Один воркер: модель навчається в пам'яті процесу
    uvicorn.run(
        "dr_predict.api.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        workers=1,
        log_level="info",
    )


if __name__ == "__main__":
    main()
