"""FastAPI application entry point — health endpoints and worker lifecycle."""

import asyncio
from contextlib import asynccontextmanager
from functools import partial

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from followup.core.config import settings
from followup.core.logging import get_logger, setup_logging
from followup.ingestion.loop import ApplicationState
from followup.ingestion.worker import start_workers, watch_worker


def create_app(run_workers: bool = True, state: ApplicationState | None = None) -> FastAPI:
    """
    Build the service app.

    With run_workers=False the health endpoints are served without any
    ingestion workers; tests drive the state flags directly.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup and shutdown lifecycle hooks."""
        setup_logging(settings.LOG_LEVEL, json_logs=settings.APP_ENV != "development")
        logger = get_logger("startup")
        logger.info("Application starting", env=settings.APP_ENV, workers=settings.WORKER_COUNT)

        tasks: list[asyncio.Task] = []
        if run_workers:
            tasks = start_workers(app.state.application, settings)
            for task in tasks:
                task.add_done_callback(partial(watch_worker, app.state.application))
            app.state.application.initialized = True

        yield

        logger.info("Application shutting down")
        app.state.application.running = False
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    app = FastAPI(
        title="Follow-up Plan Intake",
        description="Classifies, validates and routes employer follow-up plans",
        version=settings.APP_VERSION,
        lifespan=lifespan,
    )
    app.state.application = state or ApplicationState()

    @app.get("/is_alive", tags=["Health"], response_class=PlainTextResponse)
    async def is_alive(request: Request) -> PlainTextResponse:
        if request.app.state.application.running:
            return PlainTextResponse("I'm alive")
        return PlainTextResponse("I'm dead x_x", status_code=500)

    @app.get("/is_ready", tags=["Health"], response_class=PlainTextResponse)
    async def is_ready(request: Request) -> PlainTextResponse:
        state = request.app.state.application
        if state.initialized and state.running:
            return PlainTextResponse("I'm ready")
        return PlainTextResponse("Please wait! I'm not ready :(", status_code=500)

    return app


def run() -> None:
    uvicorn.run(create_app(), host="0.0.0.0", port=settings.APPLICATION_PORT)


if __name__ == "__main__":
    run()
