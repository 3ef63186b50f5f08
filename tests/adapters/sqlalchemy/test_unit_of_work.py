from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine

from scoutrecon.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)
from tests.helpers.records import make_record

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy.engine import Engine


@pytest.fixture(autouse=True)
def reset_unit_of_work_state() -> Iterator[None]:
    shutdown()
    yield
    shutdown()


def test_sqlalchemy_unit_of_work_requires_startup() -> None:
    assert not is_started()
    with pytest.raises(StartupError):
        SqlAlchemyUnitOfWork()


def test_startup_requires_force_for_reconfiguration() -> None:
    engine_a = create_engine("sqlite+pysqlite:///:memory:", future=True)
    engine_b = create_engine("sqlite+pysqlite:///:memory:", future=True)

    startup(engine=engine_a, force=True)

    with pytest.raises(StartupError):
        startup(engine=engine_b)

    startup(engine=engine_b, force=True)
    assert configured_engine() is engine_b


def test_unit_of_work_persists_committed_records(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)
    record = make_record(auto_coral_place_l1_count=2)

    with SqlAlchemyUnitOfWork() as uow:
        uow.repositories.records.add(record)
        uow.commit()

    with SqlAlchemyUnitOfWork() as uow:
        stored = uow.repositories.records.get(record.id)

    assert stored is not None
    assert stored.auto_coral_place_l1_count == 2


def test_exception_rolls_back_uncommitted_work(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)
    record = make_record()

    with pytest.raises(RuntimeError, match="boom"), SqlAlchemyUnitOfWork() as uow:
        uow.repositories.records.add(record)
        uow.session.flush()
        raise RuntimeError("boom")

    with SqlAlchemyUnitOfWork() as uow:
        assert uow.repositories.records.list_all() == []


def test_repositories_unavailable_outside_block(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)
    uow = SqlAlchemyUnitOfWork()

    with pytest.raises(StartupError):
        _ = uow.repositories
