from sqlalchemy import create_engine, text
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi import Request

# Base class for models
Base = declarative_base()


class Database:
    """
    Handle to the backing store.

    Built once at startup from the configured URL and passed to whatever
    needs a connection (the FastAPI app, the CLI, tests). Owns the engine
    and the session factory.
    """

    def __init__(self, url: str):
        self.url = url
        self.engine = create_engine(url, **self._engine_options(url))
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    @staticmethod
    def _engine_options(url: str) -> dict:
        if url.startswith("sqlite"):
            options = {"connect_args": {"check_same_thread": False}}
            # In-memory databases only live as long as their single connection
            if url in ("sqlite://", "sqlite:///:memory:"):
                options["poolclass"] = StaticPool
            return options

        # Connection pooling for server databases
        return {
            "pool_size": 10,
            "max_overflow": 20,
            "pool_pre_ping": True,
        }

    def create_all(self) -> None:
        """Create all tables registered on the declarative base."""
        # Make sure every model is registered before creating tables
        from foodtruck_pos.models import user, catalog, sale  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    def drop_all(self) -> None:
        Base.metadata.drop_all(bind=self.engine)

    def ping(self) -> None:
        """Run a trivial query; raises if the store is unreachable."""
        with self.engine.connect() as conn:
            conn.execute(text("SELECT 1"))

    def session(self):
        return self.SessionLocal()

    def dispose(self) -> None:
        self.engine.dispose()


def get_db(request: Request):
    """
    Dependency to get database session.
    Yields a session from the application's store handle and closes it after use.
    """
    db = request.app.state.database.session()
    try:
        yield db
    finally:
        db.close()
