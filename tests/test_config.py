"""Tests for settings path resolution."""

from pathlib import Path

from storyloom.config import BASE_DIR, Settings


def test_relative_paths_resolve_under_backend():
    settings = Settings(DATABASE_PATH="database/test.db", NOVEL_CONFIG_PATH="config/novel.config.json")

    assert settings.DATABASE_PATH == str((BASE_DIR / "database/test.db").resolve())
    assert settings.NOVEL_CONFIG_PATH == str((BASE_DIR / "config/novel.config.json").resolve())


def test_memory_database_name_is_treated_as_a_file(tmp_path):
    settings = Settings(DATABASE_PATH=":memory:")

    assert Path(settings.DATABASE_PATH).is_absolute()
    assert Path(settings.DATABASE_PATH).name == ":memory:"


def test_absolute_paths_are_kept(tmp_path):
    db_path = str(tmp_path / "storyloom.db")

    assert Settings(DATABASE_PATH=db_path).DATABASE_PATH == db_path
