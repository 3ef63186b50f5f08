"""Alembic migrations bundled with the SQLAlchemy adapter.

The ``[tool.alembic]`` table in pyproject.toml points the ``alembic`` command
at this directory during development; at runtime the scripts are always loaded
from the installed package.
"""

from __future__ import annotations

from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING, Final

from alembic import command
from alembic.config import Config

from scoutrecon.config import get_database_config

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

SCRIPTS_DIR: Final[Path] = Path(__file__).resolve().parent
HEAD: Final[str] = "head"

log = getLogger(__name__)


def alembic_config(database_uri: str | None = None) -> Config:
    config = Config()
    config.set_main_option("script_location", str(SCRIPTS_DIR))
    if database_uri is not None:
        config.set_main_option("sqlalchemy.url", database_uri)
    return config


def upgrade_head(*, engine: Engine | None = None, database_uri: str | None = None) -> None:
    """Bring the schema to the latest revision.

    With an ``engine`` the upgrade runs on one of its connections (required for
    in-memory SQLite, where every new connection is a fresh database).
    """

    if engine is None:
        command.upgrade(alembic_config(database_uri or get_database_config().uri), HEAD)
        return
    config = alembic_config()
    with engine.begin() as connection:
        config.attributes["connection"] = connection
        command.upgrade(config, HEAD)
    log.debug("Schema upgraded to head")
