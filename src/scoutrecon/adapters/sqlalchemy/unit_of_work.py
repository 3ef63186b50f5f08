"""SQLAlchemy-backed unit of work for scouting data."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Literal

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from scoutrecon.adapters.sqlalchemy.mappings import start_mappers
from scoutrecon.adapters.sqlalchemy.migrations import upgrade_head
from scoutrecon.adapters.sqlalchemy.repositories import (
    SqlAlchemyOfficialMatchRepository,
    SqlAlchemyScoutingRecordRepository,
    SqlAlchemyValidationResultRepository,
)
from scoutrecon.config import get_database_config
from scoutrecon.domain.ports.unit_of_work import ScoutingRepositories

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine

log = getLogger(__name__)


class StartupError(RuntimeError):
    """The database adapter is used before ``startup()`` or configured twice."""


@dataclass(frozen=True, slots=True)
class _Database:
    engine: Engine
    sessions: sessionmaker[Session]


@dataclass(slots=True)
class _Active:
    database: _Database | None = None

    def require(self) -> _Database:
        if self.database is None:
            raise StartupError(
                "Database not started; call "
                "scoutrecon.adapters.sqlalchemy.unit_of_work.startup() first."
            )
        return self.database


_ACTIVE = _Active()


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Bind the adapter to a database, bringing its schema up to date.

    Without ``engine`` or ``database_uri`` the configured database is used.
    A second call raises unless ``force`` is set, in which case a replaced
    engine is disposed.
    """

    previous = _ACTIVE.database
    if previous is not None and not force:
        raise StartupError("Database already started. Pass force=True to reconfigure.")

    bound = engine or create_engine(database_uri or get_database_config().uri, future=True)
    if previous is not None and previous.engine is not bound:
        previous.engine.dispose()
    start_mappers()
    upgrade_head(engine=bound)
    _ACTIVE.database = _Database(
        engine=bound,
        sessions=sessionmaker(bind=bound, expire_on_commit=False),
    )
    log.info(f"Scouting database ready at {bound.url.render_as_string(hide_password=True)}")


def configured_engine() -> Engine | None:
    return None if _ACTIVE.database is None else _ACTIVE.database.engine


def is_started() -> bool:
    return _ACTIVE.database is not None


def shutdown() -> None:
    if _ACTIVE.database is not None:
        _ACTIVE.database.engine.dispose()
    _ACTIVE.database = None


class SqlAlchemyUnitOfWork:
    """One session, one transaction; leaving the block on an exception rolls back."""

    def __init__(self) -> None:
        self._sessions = _ACTIVE.require().sessions
        self._session: Session | None = None
        self._repositories: ScoutingRepositories | None = None

    def __enter__(self) -> SqlAlchemyUnitOfWork:
        if self._session is not None:
            raise StartupError("Unit of work is already open")
        session = self._sessions()
        self._session = session
        self._repositories = ScoutingRepositories(
            records=SqlAlchemyScoutingRecordRepository(session),
            results=SqlAlchemyValidationResultRepository(session),
            official_matches=SqlAlchemyOfficialMatchRepository(session),
        )
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        session = self.session
        try:
            if exc_type is not None:
                session.rollback()
        finally:
            session.close()
            self._session = None
            self._repositories = None
        return False

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work is not open")
        return self._session

    @property
    def repositories(self) -> ScoutingRepositories:
        if self._repositories is None:
            raise StartupError("Unit of work is not open")
        return self._repositories


if TYPE_CHECKING:
    from scoutrecon.domain.ports.unit_of_work import ScoutingUnitOfWork

    _uow_check: ScoutingUnitOfWork = SqlAlchemyUnitOfWork()
