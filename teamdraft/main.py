import uvicorn
from fastapi import FastAPI

from teamdraft.api.routes.bracket import router as bracket_router
from teamdraft.api.routes.draft import router as draft_router
from teamdraft.api.routes.events import router as events_router
from teamdraft.api.routes.health import router as health_router
from teamdraft.api.routes.scheduling import router as scheduling_router
from teamdraft.api.routes.tournaments import router as tournaments_router
from teamdraft.core.config import get_settings
from teamdraft.core.logging import configure_logging


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level, app_env=settings.app_env)

    app = FastAPI(
        title="Teamdraft API",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.include_router(health_router)
    app.include_router(tournaments_router)
    app.include_router(draft_router)
    app.include_router(bracket_router)
    app.include_router(scheduling_router)
    app.include_router(events_router)
    return app


app = create_app()


def run() -> None:
    settings = get_settings()
    uvicorn.run(
        "teamdraft.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.app_env == "dev",
    )


if __name__ == "__main__":
    run()
