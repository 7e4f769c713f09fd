# app/data/database.py
import time
from contextlib import contextmanager
from typing import Callable, Iterator

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.exc import OperationalError, TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from app.domain.errors import TransactionTimeoutError
from app.utils.settings import DATABASE_URL, TX_MAX_WAIT_SECONDS
from app.utils.logging import get_logger

logger = get_logger(__name__)

Base = declarative_base()


class Deadline:
    """
    Limit czasu wykonania transakcji.
    Sprawdzany po kazdym round-tripie do bazy, przekroczenie = rollback.
    """

    def __init__(self, seconds: float, clock: Callable[[], float] = time.monotonic):
        self.seconds = seconds
        self.clock = clock
        self.started = clock()

    @property
    def elapsed(self) -> float:
        return self.clock() - self.started

    def check(self, stage: str = "") -> None:
        if self.elapsed > self.seconds:
            raise TransactionTimeoutError(
                f"Przekroczono limit transakcji {self.seconds}s ({stage or 'commit'})"
            )


class Database:
    """
    Jawny uchwyt do bazy: engine + fabryka sesji.
    Tworzony przy starcie aplikacji, zamykany przy shutdown (brak globalnego klienta).
    """

    def __init__(self, url: str | None = None, pool_timeout: float | None = None, echo: bool = False):
        self.url = url or DATABASE_URL
        self.pool_timeout = TX_MAX_WAIT_SECONDS if pool_timeout is None else pool_timeout

        kwargs = {"echo": echo, "future": True}
        if self.url.startswith("sqlite"):
            kwargs["connect_args"] = {"check_same_thread": False}
            if self.url in ("sqlite://", "sqlite:///:memory:"):
                # baza w pamieci zyje tylko na jednym polaczeniu
                kwargs["poolclass"] = StaticPool
        else:
            kwargs["pool_pre_ping"] = True
            kwargs["pool_timeout"] = self.pool_timeout

        self.engine = create_engine(self.url, **kwargs)
        self.SessionLocal = sessionmaker(
            bind=self.engine,
            autoflush=False,
            expire_on_commit=False,
        )

    def create_all(self) -> None:
        # rejestracja wszystkich modeli w Base.metadata
        import app.data.models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)
        logger.info(f"Tables ready: {sorted(Base.metadata.tables.keys())}")

    def dispose(self) -> None:
        self.engine.dispose()
        logger.info("Database engine disposed")

    def session(self) -> Session:
        return self.SessionLocal()

    @contextmanager
    def transaction(
        self,
        max_wait: float | None = None,
        timeout: float | None = None,
    ) -> Iterator[tuple[Session, Deadline]]:
        """
        Transakcja all-or-nothing z limitem oczekiwania na polaczenie
        i limitem czasu wykonania. Kazdy wyjatek w bloku -> rollback.
        """
        max_wait = self.pool_timeout if max_wait is None else max_wait
        timeout = float("inf") if timeout is None else timeout

        session = self.SessionLocal()
        requested = time.monotonic()
        try:
            try:
                connection = session.connection()
            except PoolTimeoutError as e:
                raise TransactionTimeoutError(
                    f"Brak wolnego polaczenia z baza po {max_wait}s"
                ) from e

            waited = time.monotonic() - requested
            if waited > max_wait:
                raise TransactionTimeoutError(
                    f"Oczekiwanie na polaczenie trwalo {waited:.2f}s (limit {max_wait}s)"
                )

            if connection.dialect.name == "postgresql" and 0 < timeout != float("inf"):
                connection.execute(text(f"SET LOCAL statement_timeout = {int(timeout * 1000)}"))

            deadline = Deadline(timeout)
            yield session, deadline

            deadline.check("commit")
            session.commit()
        except OperationalError as e:
            session.rollback()
            # 57014 = query_canceled (statement_timeout)
            if getattr(e.orig, "pgcode", None) == "57014":
                raise TransactionTimeoutError(f"Przekroczono limit transakcji {timeout}s") from e
            raise
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_db(request: Request) -> Iterator[Session]:
    db = get_database(request).session()
    try:
        yield db
    finally:
        db.close()
