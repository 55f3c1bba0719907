"""FastAPI application factory."""

import logging

from fastapi import FastAPI

from progress_widgets.api.widgets import router as widgets_router
from progress_widgets.app_logging import configure_logging
from progress_widgets.containers import AppContainer


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    app = FastAPI(title="Progress Widgets")
    app.state.container = container
    app.include_router(widgets_router)
    logger.info(
        "Serving %s widgets in %s",
        len(container.widget_service.configs),
        container.settings.environment,
    )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app
