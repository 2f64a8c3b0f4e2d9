"""Alembic migration environment for the users, posts and comments tables.

Online only: migrations run over the same async engine the app builds
from INKWELL_DATABASE_URL. `alembic upgrade --sql` is not supported.
"""

import asyncio
from logging.config import fileConfig

from alembic import context

from inkwell.config import get_settings
from inkwell.db.engine import build_engine
from inkwell.db.models import Base

if context.config.config_file_name is not None:
    fileConfig(context.config.config_file_name)


def _migrate(connection) -> None:
    context.configure(connection=connection, target_metadata=Base.metadata)
    with context.begin_transaction():
        context.run_migrations()


async def _upgrade() -> None:
    engine = build_engine(get_settings())
    try:
        async with engine.connect() as conn:
            await conn.run_sync(_migrate)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    raise SystemExit("inkwell migrations need a live database; drop --sql")

asyncio.run(_upgrade())
