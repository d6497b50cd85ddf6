from __future__ import annotations

import os

# keep the import-time event log out of the working tree
os.environ.setdefault("EVENTS_LOG", "")

import pytest
from fastapi.testclient import TestClient

import app as board
from core.metrics import MetricsLogger


@pytest.fixture
def events_path(tmp_path):
    return tmp_path / "events.jsonl"


@pytest.fixture(autouse=True)
def fresh_board(monkeypatch, events_path):
    """Every test starts with no store and its own event log."""
    board.slot.reset()
    monkeypatch.setattr(board, "metrics", MetricsLogger(str(events_path)))
    monkeypatch.setattr(board, "ESCAPE_HTML", False)
    monkeypatch.setattr(board, "SEED_PAGE", "hello-world")
    yield
    board.slot.reset()


@pytest.fixture
def client():
    """Client with the lifespan running, so the seed page exists."""
    with TestClient(board.app) as c:
        yield c


@pytest.fixture
def bare_client():
    """Client without lifespan: the store stays uninitialized until a write."""
    return TestClient(board.app)
