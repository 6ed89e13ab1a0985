"""Shared pytest configuration and fixtures for the esdump test suite.

This module provides:
- Isolated config and log directories for every test session
- A scripted transport standing in for the search backend
- Test markers
"""
import json
import os
import sys
import tempfile
from pathlib import Path

import pytest


# Add src/ to path so test modules can import the esdump package
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))


class ScriptedTransport:
    """Replays canned (status, body) answers and records every request.

    ``pits`` maps index name to the answer for opening its snapshot;
    ``searches`` is the queue of answers for search requests. Bodies that
    are not strings are JSON encoded. An exception instance in either place
    is raised instead of answered.
    """

    def __init__(self, pits=None, searches=None, close_status=200):
        self.pits = dict(pits or {})
        self.searches = list(searches or [])
        self.close_status = close_status
        self.opened = []
        self.search_bodies = []
        self.closed_pits = []
        self.closed = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.closed = True

    @staticmethod
    def _answer(answer):
        from esdump.utils.transport import TransportResponse

        if isinstance(answer, BaseException):
            raise answer
        status, body = answer
        if not isinstance(body, str):
            body = json.dumps(body)
        return TransportResponse(status=status, body=body)

    def open_point_in_time(self, index, keep_alive, timeout=None):
        self.opened.append((index, keep_alive, timeout))
        return self._answer(self.pits[index])

    def search(self, body, timeout=None, index=None):
        self.search_bodies.append(json.loads(json.dumps(body)))
        return self._answer(self.searches.pop(0))

    def close_point_in_time(self, pit_id, timeout=None, index=None):
        self.closed_pits.append(pit_id)
        return self._answer((self.close_status, {"succeeded": True, "num_freed": 1}))


def pit(pit_id="pit-0"):
    return 200, {"id": pit_id}


def page(sorts, pit_id="pit-1", sources=None):
    """Search answer with one hit per sort value (None gives an empty sort)"""
    hits = []
    for i, sort in enumerate(sorts):
        source = sources[i] if sources else {"n": sort}
        hits.append({
            "_index": "ignored",
            "_id": str(i),
            "_source": source,
            "sort": [] if sort is None else [sort],
        })
    return 200, {"pit_id": pit_id, "took": 1, "hits": {"hits": hits}}


@pytest.fixture
def scripted_transport():
    """Factory for ScriptedTransport instances"""
    return ScriptedTransport


@pytest.fixture
def pit_answer():
    return pit


@pytest.fixture
def page_answer():
    return page


@pytest.fixture
def temp_dir(tmp_path):
    """Provide a temporary directory for test files."""
    return tmp_path


@pytest.fixture
def config_dir(tmp_path, mocker):
    """Point the config store at a fresh directory"""
    mocker.patch("platform.system", return_value="Linux")
    mocker.patch.dict(os.environ, {"XDG_CONFIG_HOME": str(tmp_path)})
    return tmp_path / "esdump"


@pytest.fixture
def fake_keyring(mocker):
    """In-memory replacement for the OS keyring"""
    secrets = {}

    def set_password(service, name, value):
        secrets[(service, name)] = value

    def get_password(service, name):
        return secrets.get((service, name))

    def delete_password(service, name):
        secrets.pop((service, name), None)

    mocker.patch("keyring.set_password", side_effect=set_password)
    mocker.patch("keyring.get_password", side_effect=get_password)
    mocker.patch("keyring.delete_password", side_effect=delete_password)
    return secrets


def pytest_configure(config):
    """Isolate user directories and register custom markers."""
    sandbox = tempfile.mkdtemp(prefix="esdump-tests-")
    os.environ["XDG_CONFIG_HOME"] = os.path.join(sandbox, "config")
    os.environ["XDG_STATE_HOME"] = os.path.join(sandbox, "state")
    for name in ("ESDUMP_URL", "ESDUMP_USERNAME", "ESDUMP_PASSWORD",
                 "ESDUMP_API_KEY", "ESDUMP_INSECURE", "ESDUMP_TIMEOUT",
                 "ESDUMP_LOG_DIR"):
        os.environ.pop(name, None)

    config.addinivalue_line(
        "markers", "unit: mark test as a unit test (fast, isolated)"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test (slower)"
    )


def pytest_collection_modifyitems(config, items):
    """Auto-mark tests based on their location."""
    for item in items:
        if "integration" not in item.nodeid:
            item.add_marker(pytest.mark.unit)
