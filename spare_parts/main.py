"""
Application entry point for the spare parts inventory.

The UI talks to a single SparePartsApp through ``invoke(channel, payload)``.
Run ``python -m spare_parts.main`` to initialize the database and print
the registered channels.
"""
from pathlib import Path
from typing import Any, Optional

from sqlalchemy import Engine
from sqlalchemy.orm import Session, sessionmaker

from spare_parts.api import api_router
from spare_parts.api.router import ChannelRouter
from spare_parts.core import database
from spare_parts.core.config import settings
from spare_parts.core.database import check_db_connection, close_db, get_db_context, init_db
from spare_parts.core.security import SessionContext
from spare_parts.logging_config import get_logger, log_startup_banner, setup_logging
from spare_parts.schemas.common import OperationResult
from spare_parts.seed import ensure_categories, seed_database

logger = get_logger("main")


class SparePartsApp:
    """
    One desktop process: one database, one signed-in user.

    Args:
        engine: Engine to use instead of the configured one
        router: Channel router to dispatch through; defaults to all handlers
        seed: Whether to load demo data on startup; defaults to SEED_DEMO_DATA
        log_dir: Where to write log files; defaults to LOG_DIR
    """

    def __init__(
        self,
        engine: Optional[Engine] = None,
        router: Optional[ChannelRouter] = None,
        seed: Optional[bool] = None,
        log_dir: Optional[Path] = None,
    ):
        self.engine = engine
        self.router = router or api_router
        self.seed = settings.seed_demo_data if seed is None else seed
        self.log_dir = log_dir
        self.ctx = SessionContext()
        self.session_factory: Optional[sessionmaker[Session]] = None
        self.started = False

    def startup(self) -> None:
        """Configure logging, create the schema and load default data."""
        if self.started:
            return

        root_logger = setup_logging(log_dir=self.log_dir)
        log_startup_banner(root_logger, self.log_dir)
        logger.info(f"Starting {settings.app_name} v{settings.app_version}")

        try:
            if self.engine is None:
                self.engine = database.get_engine()
                self.session_factory = database.get_session_factory()
            else:
                self.session_factory = sessionmaker(
                    bind=self.engine,
                    expire_on_commit=False,
                    autocommit=False,
                    autoflush=False
                )

            logger.info("Initializing database...")
            init_db(self.engine)

            with get_db_context(self.session_factory) as db:
                if self.seed:
                    seed_database(db)
                ensure_categories(db)
        except Exception as e:
            logger.error(f"Initialization error: {e}", exc_info=True)
            raise

        self.started = True
        logger.info(f"Initialization complete, {len(self.router.channels)} channels registered")

    def invoke(self, channel: str, payload: Any = None) -> Any:
        """
        Call a handler by channel name.

        Each call runs in its own database session. Failures come back as
        result objects; this never raises once the app has started.
        """
        if not self.started:
            raise RuntimeError("Application has not been started")

        logger.debug(f"invoke {channel}")
        try:
            with get_db_context(self.session_factory) as db:
                return self.router.dispatch(channel, db, self.ctx, payload)
        except Exception as e:
            logger.critical(f"{channel} failed outside its handler: {e}", exc_info=True)
            return OperationResult.failure("Internal error")

    def health(self) -> dict:
        return {
            "status": "healthy" if self.engine is not None and check_db_connection(self.engine) else "unavailable",
            "version": settings.app_version,
        }

    def shutdown(self) -> None:
        """Forget the signed-in user and release database connections."""
        logger.info("Shutting down application...")
        self.ctx.clear()
        if self.engine is not None and self.engine is not database.engine:
            self.engine.dispose()
        close_db()
        self.engine = None
        self.session_factory = None
        self.started = False
        logger.info("Application shutdown complete")


def create_app(**kwargs) -> SparePartsApp:
    """Build and start an application instance."""
    app = SparePartsApp(**kwargs)
    app.startup()
    return app


if __name__ == "__main__":
    application = create_app()
    try:
        for name in application.router.channels:
            print(name)
    finally:
        application.shutdown()
