"""Shared pytest fixtures for release notes tests."""

from __future__ import annotations

import copy
import json
from pathlib import Path
import socket
from typing import Any, Callable, Dict

import pytest

FIXTURE_DIR = Path(__file__).resolve().parent / "fixtures"

EXAMPLE_RECORD: Dict[str, Any] = {
    "key": "X-1",
    "fields": {
        "summary": "Fix crash",
        "updated": "2023-01-01T10:00:00.000+0000",
        "fixVersions": [{"name": "1.0"}],
        "issuetype": {"name": "Bug", "iconUrl": "u1"},
        "reporter": {"displayName": "Ann", "avatarUrls": {"16x16": "u2"}},
        "priority": {"name": "High", "iconUrl": "u3"},
    },
}


@pytest.fixture(scope="session", autouse=True)
def block_network() -> None:
    """Prevent network access during the entire test session."""

    original_socket = socket.socket
    original_create_connection = socket.create_connection

    def _guard(*args: object, **kwargs: object) -> socket.socket:  # type: ignore[override]
        raise RuntimeError("Network access is disabled during tests.")

    socket.socket = _guard  # type: ignore[assignment]
    socket.create_connection = _guard  # type: ignore[assignment]

    try:
        yield
    finally:
        socket.socket = original_socket
        socket.create_connection = original_create_connection


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the shared fixtures directory."""

    return FIXTURE_DIR


@pytest.fixture
def load_json() -> Callable[[str | Path], Dict[str, Any]]:
    """Helper fixture to load JSON fixtures by filename."""

    def _loader(path: str | Path) -> Dict[str, Any]:
        file_path = Path(path)
        if not file_path.is_absolute():
            file_path = FIXTURE_DIR / file_path
        with file_path.open("r", encoding="utf-8") as handle:
            return json.load(handle)

    return _loader


@pytest.fixture
def make_record() -> Callable[..., Dict[str, Any]]:
    """Build a valid raw issue record, overriding top-level or ``fields`` values.

    Passing ``None`` for a field removes it from the record.
    """

    def _factory(key: str = "X-1", **fields: Any) -> Dict[str, Any]:
        record = copy.deepcopy(EXAMPLE_RECORD)
        record["key"] = key
        for name, value in fields.items():
            if value is None:
                record["fields"].pop(name, None)
            else:
                record["fields"][name] = value
        return record

    return _factory


@pytest.fixture
def example_record(make_record) -> Dict[str, Any]:
    return make_record()
