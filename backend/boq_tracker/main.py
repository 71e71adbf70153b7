from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from boq_tracker.core.config import settings
from boq_tracker.core.logging import configure_logging, logger
from boq_tracker.api.router import api_router

def create_app() -> FastAPI:
    configure_logging(settings.ENV, settings.LOG_LEVEL)
    app = FastAPI(title="BOQ / KPI Progress Engine", version="0.1.0")

    origins = [o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins or ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/healthz")
    def healthz():
        return {"status": "ok"}

    app.include_router(api_router)
    logger.info("app_started", env=settings.ENV)
    return app

app = create_app()
