from fastapi import FastAPI

from .config import MatchSettings, get_settings
from .directory import DirectoryClient
from .logs import configure_logging
from .middleware import RequestLoggingMiddleware
from .oracle import OracleClient
from .routes import router
from .services import MatchmakingOrchestrator


def create_app(
    settings: MatchSettings | None = None,
    orchestrator: MatchmakingOrchestrator | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    if orchestrator is None:
        orchestrator = MatchmakingOrchestrator(
            settings,
            directory=DirectoryClient(settings),
            oracle=OracleClient(settings),
        )

    app = FastAPI(title="Match Service")
    app.state.settings = settings
    app.state.orchestrator = orchestrator

    app.add_middleware(RequestLoggingMiddleware)
    app.include_router(router)

    @app.get("/health")
    async def health():
        return {
            "status": "ok",
            "service": "match-service",
            "oracle_enabled": settings.oracle_enabled,
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
