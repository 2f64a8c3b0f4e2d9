"""Alembic migration scripts."""

from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config
from alembic.script import ScriptDirectory

import inkwell.db

MIGRATIONS = Path(inkwell.db.__file__).parent / "migrations"


@pytest.fixture()
def alembic_cfg():
    cfg = Config()
    cfg.set_main_option("script_location", str(MIGRATIONS))
    return cfg


def test_single_initial_revision(alembic_cfg):
    scripts = ScriptDirectory.from_config(alembic_cfg)
    assert scripts.get_heads() == ["3f1c2a9d7b40"]
    assert scripts.get_revision("head").down_revision is None


def test_offline_sql_generation_refused(alembic_cfg):
    with pytest.raises(SystemExit, match="live database"):
        command.upgrade(alembic_cfg, "head", sql=True)
