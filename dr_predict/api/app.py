"""
Dr.Predict — FastAPI Application

Головний файл FastAPI додатку.

Запуск:
    uvicorn dr_predict.api.app:app --host 0.0.0.0 --port 8000

    або:

    python scripts/run_api.py
"""

import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from dr_predict import __version__
from dr_predict.exceptions import (
    EncodingError,
    InvalidInputError,
    NotReadyError,
    PredictionEngineError,
)
from dr_predict.lifecycle import ModelLifecycleManager, ModelState
from dr_predict.neural_network import ConditionPredictor
from .config import APIConfig
from .routes import health_router, predict_router


def create_app(
    manager: Optional[ModelLifecycleManager] = None,
    api_config: Optional[APIConfig] = None
) -> FastAPI:
    """
    Створити FastAPI додаток.

    Args:
        manager: Готовий менеджер моделі (за замовчуванням будується з конфігурації)
        api_config: Конфігурація API (за замовчуванням з environment variables)
    """
    config = api_config or APIConfig.from_env()
    manager = manager or ModelLifecycleManager(config=config.engine)
    predictor = ConditionPredictor(manager, config.engine.predictor)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Lifecycle — запуск навчання при старті.

        Навчання йде у фоновому потоці, сервер відповідає одразу
        (503 до публікації моделі).
        """
        print("=" * 60)
        print("🏥 Dr.Predict API Starting...")
        print("=" * 60)

        if manager.state == ModelState.UNINITIALIZED:
            manager.start()
            print("🧠 Training started in background")
        else:
            print(f"ℹ️ Engine state: {manager.state.value}")

        print(f"📍 Swagger UI: http://{config.host}:{config.port}/docs")
        print("=" * 60)

        yield

        print("🛑 Dr.Predict API Stopping...")

    app = FastAPI(
        title=config.api_title,
        description=config.api_description,
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    app.state.manager = manager
    app.state.predictor = predictor
    app.state.api_config = config

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Middleware для логування запитів
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start_time = time.time()

        response = await call_next(request)

        process_time = time.time() - start_time

        # Логуємо тільки API запити
        if request.url.path.startswith("/api"):
            print(f"📨 {request.method} {request.url.path} → {response.status_code} ({process_time*1000:.1f}ms)")

        return response

    @app.exception_handler(NotReadyError)
    async def not_ready_handler(request: Request, exc: NotReadyError):
        return JSONResponse(status_code=503, content=exc.to_dict())

    @app.exception_handler(InvalidInputError)
    @app.exception_handler(EncodingError)
    async def invalid_input_handler(request: Request, exc: PredictionEngineError):
        return JSONResponse(status_code=422, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = [
            {"field": ".".join(str(part) for part in err["loc"]), "message": err["msg"]}
            for err in exc.errors()
        ]
        return JSONResponse(
            status_code=422,
            content=InvalidInputError("Invalid request body", errors=errors).to_dict()
        )

    # Глобальний обробник помилок
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        print(f"❌ Error: {exc}")
        return JSONResponse(
            status_code=500,
            content={
                "error": "INTERNAL_ERROR",
                "message": "Internal server error",
                "details": {"exception": str(exc)} if config.debug else {}
            }
        )

    # Підключаємо роутери
    app.include_router(health_router)
    app.include_router(predict_router, prefix=config.api_prefix)

    return app


app = create_app()
