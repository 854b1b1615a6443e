"""
Smoke tests for the key -> text storage adapters (memory, JSON file, SQLite).
"""
from __future__ import annotations

import sys
from pathlib import Path

import pytest
from sqlalchemy import inspect

# Garante que o pacote clinic seja importável durante os testes locais
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from clinic.core import config as core_config  # noqa: E402
from clinic.db import models  # noqa: E402
from clinic.db import session as db_session  # noqa: E402
from clinic.repositories.json_storage import JsonTextStore  # noqa: E402
from clinic.repositories.sql_repository import SQLTextStore  # noqa: E402
from clinic.repositories.text_store import (  # noqa: E402
    MemoryTextStore,
    StorageError,
    build_text_store,
)


@pytest.fixture()
def temp_db(tmp_path, monkeypatch):
    """Configura um SQLite temporário e garante teardown completo para não deixar o arquivo bloqueado no Windows."""
    db_file = tmp_path / "test.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{db_file}")
    # limpa caches para forçar re-leitura de envs
    core_config.get_settings.cache_clear()
    db_session.get_engine.cache_clear()

    engine = db_session.get_engine()

    yield db_file

    models.Base.metadata.drop_all(bind=engine)
    engine.dispose()
    db_session.get_engine.cache_clear()
    core_config.get_settings.cache_clear()


def test_memory_store_get_set():
    store = MemoryTextStore({"patients": "1|Ana|30|||\n"})
    assert store.get("patients") == "1|Ana|30|||\n"
    assert store.get("doctors") is None
    store.set("doctors", "")
    assert store.get("doctors") == ""


def test_json_store_round_trip(tmp_path):
    path = tmp_path / "nested" / "data.json"
    store = JsonTextStore(path)
    assert store.get("patients") is None
    store.set("patients", "1|Ana|30|F|Rua|555\n")
    store.set("doctors", "1|Lima|50|M|x\n")
    reopened = JsonTextStore(path)
    assert reopened.get("patients") == "1|Ana|30|F|Rua|555\n"
    assert reopened.get("doctors") == "1|Lima|50|M|x\n"


def test_json_store_ignores_non_text_values(tmp_path):
    path = tmp_path / "data.json"
    path.write_text('{"patients": 3}', encoding="utf-8")
    assert JsonTextStore(path).get("patients") is None


@pytest.mark.parametrize("content", ["{not json", "[1, 2]"])
def test_json_store_rejects_unreadable_documents(tmp_path, content):
    path = tmp_path / "data.json"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(StorageError):
        JsonTextStore(path).get("patients")


def test_sql_store_upserts(temp_db):
    store = SQLTextStore()
    assert store.get("appointments") is None
    store.set("appointments", "1|1|1|mon||scheduled\n")
    store.set("appointments", "1|1|1|mon||done\n")
    assert store.get("appointments") == "1|1|1|mon||done\n"


def test_build_text_store_follows_settings(tmp_path, monkeypatch):
    monkeypatch.setenv("CLINIC_STORAGE", "json")
    monkeypatch.setenv("CLINIC_DATA_FILE", str(tmp_path / "clinic.json"))
    core_config.get_settings.cache_clear()
    try:
        store = build_text_store()
        assert isinstance(store, JsonTextStore)
        assert store.path == tmp_path / "clinic.json"

        monkeypatch.setenv("CLINIC_STORAGE", "memory")
        core_config.get_settings.cache_clear()
        assert isinstance(build_text_store(), MemoryTextStore)

        monkeypatch.setenv("CLINIC_STORAGE", "sql")
        core_config.get_settings.cache_clear()
        assert isinstance(build_text_store(), SQLTextStore)
    finally:
        core_config.get_settings.cache_clear()


def test_engine_creates_text_blob_table(temp_db):
    engine = db_session.get_engine()
    assert "text_blobs" in inspect(engine).get_table_names()


def test_engine_requires_database_url(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    core_config.get_settings.cache_clear()
    db_session.get_engine.cache_clear()
    try:
        with pytest.raises(RuntimeError):
            db_session.get_engine()
    finally:
        db_session.get_engine.cache_clear()
        core_config.get_settings.cache_clear()
