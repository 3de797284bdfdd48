import logging
import os
import time
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import Settings, get_settings
from routers import ai, articles, auth, journal, plants
from services.ai_service import AIService
from services.seed_data import seed_store
from services.store import PlantPalStore, build_store
from services.uploads import UPLOAD_URL_PREFIX

logger = logging.getLogger("plantpal")


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[PlantPalStore] = None,
    ai_service: Optional[AIService] = None,
) -> FastAPI:
    settings = settings or get_settings()
    _configure_logging(settings.log_level)

    app = FastAPI(title="PlantPal API")

    # 起動時間の記録（/ping 用）
    app.state.started_at = time.time()
    app.state.settings = settings
    app.state.store = store or build_store(settings)
    app.state.ai = ai_service or AIService(settings.openai_api_key, model=settings.openai_model)

    seed_store(app.state.store, demo=settings.seed_demo_data)

    # --- CORS設定（本番は CORS_ORIGINS で絞る）---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def _log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        logger.info(
            "%s %s -> %d (%.1f ms)",
            request.method,
            request.url.path,
            response.status_code,
            (time.perf_counter() - started) * 1000,
        )
        return response

    # --- エラーは {message, detail} に揃える（クライアントは message を読む）---
    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": str(exc.detail), "detail": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError):
        logger.info("request validation failed on %s: %s", request.url.path, exc.errors())
        return JSONResponse(
            status_code=400,
            content={"message": "Missing or invalid fields.", "detail": jsonable_errors(exc)},
        )

    # --- ルーター ---
    app.include_router(auth.router)
    app.include_router(plants.router)
    app.include_router(journal.router)
    app.include_router(articles.router)
    app.include_router(ai.router)

    os.makedirs(settings.upload_dir, exist_ok=True)
    app.mount(UPLOAD_URL_PREFIX, StaticFiles(directory=settings.upload_dir), name="uploads")

    # --- 超軽量エンドポイント（ストア/AIに触らない） ---
    @app.get("/ping", include_in_schema=False)
    def ping():
        return {
            "ok": True,
            "service": "plantpal-backend",
            "ts": datetime.now(timezone.utc).isoformat(),
            "uptime_sec": round(time.time() - app.state.started_at, 2),
            "store_backend": settings.store_backend,
        }

    return app


def jsonable_errors(exc: RequestValidationError) -> list:
    # ctx に例外オブジェクトが入ることがあるので文字列化しておく
    return [
        {"loc": list(err.get("loc", ())), "msg": str(err.get("msg", "")), "type": err.get("type", "")}
        for err in exc.errors()
    ]


app = create_app()


if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)
