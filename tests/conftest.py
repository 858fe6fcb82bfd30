"""Root conftest for all tests.

Shared fixtures: a knowledge store over the packaged documents, a writable
copy of the documents for corruption cases, and an application/test client.
"""

import shutil

import pytest
from fastapi.testclient import TestClient

from duracube_mcp.config.settings import DEFAULT_KNOWLEDGE_DIR, Settings
from duracube_mcp.knowledge.store import KnowledgeStore
from duracube_mcp.server.app import create_app
from duracube_mcp.server.dispatch import ServerInfo


@pytest.fixture
def store() -> KnowledgeStore:
    """Fresh store over the documents shipped with the package."""
    return KnowledgeStore(DEFAULT_KNOWLEDGE_DIR)


@pytest.fixture
def knowledge_dir(tmp_path):
    """Writable copy of the packaged knowledge documents."""
    target = tmp_path / "knowledge"
    shutil.copytree(DEFAULT_KNOWLEDGE_DIR, target)
    return target


@pytest.fixture
def tmp_store(knowledge_dir) -> KnowledgeStore:
    """Store over the writable copy, for tests that break documents."""
    return KnowledgeStore(knowledge_dir)


@pytest.fixture
def server_info() -> ServerInfo:
    return ServerInfo(name="duracube-contract-mcp", version="1.0.0", protocol_version="2024-11-05")


@pytest.fixture
def test_settings() -> Settings:
    return Settings(PRELOAD_KNOWLEDGE=False, SSE_KEEPALIVE_SECONDS=0.01)


@pytest.fixture
def client(store, test_settings):
    """Test client over the packaged documents."""
    with TestClient(create_app(store=store, app_settings=test_settings)) as test_client:
        yield test_client


@pytest.fixture
def tmp_client(tmp_store, test_settings):
    """Test client over the writable copy of the documents."""
    with TestClient(create_app(store=tmp_store, app_settings=test_settings)) as test_client:
        yield test_client
