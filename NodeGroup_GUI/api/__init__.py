"""FastAPI application factory."""

from fastapi import FastAPI

from NodeGroup_GUI.api.health import router as health_router
from NodeGroup_GUI.api.node_groups import router as node_groups_router
from NodeGroup_GUI.exception_handlers import add_exception_handlers
from NodeGroup_GUI.logger import logger
from NodeGroup_GUI.version import APP_VERSION


def create_app() -> FastAPI:
    app = FastAPI(title="NodeGroup-GUI", version=APP_VERSION)

    app.include_router(health_router)
    app.include_router(node_groups_router)
    add_exception_handlers(app)

    logger.info("FastAPI app initialized")
    return app
