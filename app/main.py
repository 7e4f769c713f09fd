# app/main.py
from contextlib import asynccontextmanager

from fastapi import FastAPI
import uvicorn

from app.api import include_routers
from app.data.database import Database
from app.services.notification_service import NotificationService
from app.services.view_cache import ViewCache
from app.utils.logging import get_logger

logger = get_logger(__name__)


def create_app(
    database: Database | None = None,
    notifier: NotificationService | None = None,
    view_cache: ViewCache | None = None,
) -> FastAPI:
    """
    Uchwyt do bazy tworzony przy starcie i zamykany przy shutdown.
    Zaleznosci mozna podac z zewnatrz (testy).
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.database = database or Database()
        app.state.notifier = notifier or NotificationService()
        app.state.view_cache = view_cache or ViewCache()

        logger.info("Initializing database...")
        app.state.database.create_all()
        try:
            yield
        finally:
            app.state.database.dispose()

    app = FastAPI(
        title="Restaurant POS",
        version="1.0.0",
        lifespan=lifespan,
    )

    return include_routers(app)


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
