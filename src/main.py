"""todotasks - serverless todo-task API."""

import logging

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from src.core.logging import configure_logfire, instrument_fastapi
from src.interface.task_router import router as task_router


logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """Build the FastAPI application served by the API Lambda."""
    app = FastAPI(
        title="todotasks",
        description="Todo task API with event recording and email notification",
        version="0.1.0",
    )

    # Instrument FastAPI with Logfire
    instrument_fastapi(app)

    # Register routers
    app.include_router(task_router)

    @app.get("/health")
    async def health_check() -> JSONResponse:
        """Health check endpoint."""
        return JSONResponse(content={"status": "healthy"}, status_code=200)

    return app


configure_logfire()
app = create_app()
