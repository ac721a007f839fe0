"""
Shared fixtures: a fresh app per test, backed by a temp videos dir.
"""

import pytest
from fastapi.testclient import TestClient

from dataup.app import create_app
from dataup.blobstore import FileBlobStore, MemoryBlobStore
from dataup.config import Settings
from dataup.registry import VideoRegistry


@pytest.fixture
def settings(tmp_path):
    return Settings(videos_dir=tmp_path / "videos", purge_on_start=True)


@pytest.fixture
def registry():
    return VideoRegistry()


@pytest.fixture
def file_store(tmp_path):
    return FileBlobStore(tmp_path / "blobs")


@pytest.fixture
def memory_store():
    return MemoryBlobStore()


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c
