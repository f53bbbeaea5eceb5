"""Shared fixtures for registry, placement and API tests."""

from pathlib import Path

import pytest
import requests

from armodel_db import ARModelConfig, ARModelDB
from armodel_db.object_store import http_bucket
from armodel_db.registry import JSONModelRegistry

GLB_BYTES = b"glTF\x02\x00\x00\x00\x0c\x00\x00\x00"

BUCKET_ENDPOINT = "https://storage.example.test"
BUCKET_PUBLIC = "https://cdn.example.test/models"


@pytest.fixture
def registry_path(tmp_path):
    return tmp_path / "data" / "models.json"


@pytest.fixture
def registry(registry_path):
    return JSONModelRegistry(registry_path)


@pytest.fixture
def local_config(tmp_path, registry_path):
    return ARModelConfig(
        base_url="https://ar.example.test",
        registry_path=str(registry_path),
        public_root=str(tmp_path / "public"),
    )


@pytest.fixture
def db(local_config):
    return ARModelDB.from_config(local_config)


@pytest.fixture
def staged_glb(tmp_path):
    """A staged upload as the API would leave it in the temp dir."""
    path = tmp_path / "staged-upload.glb"
    path.write_bytes(GLB_BYTES)
    return path


@pytest.fixture
def remote_config(tmp_path, registry_path):
    return ARModelConfig(
        base_url="https://ar.example.test",
        storage_mode="remote",
        registry_path=str(registry_path),
        bucket_endpoint=BUCKET_ENDPOINT,
        bucket_name="assets",
        bucket_token="secret-token",
        bucket_public_url=BUCKET_PUBLIC,
    )


class FakeBucket:
    """
    Stand-in for the bucket's HTTP API.

    Keys whose prefix appears in `failing_prefixes` answer with a
    connection error.
    """

    def __init__(self):
        self.objects = {}
        self.calls = []
        self.failing_prefixes = set()

    def put(self, url, data=None, headers=None, timeout=None):
        self.calls.append({"url": url, "headers": headers, "timeout": timeout})
        key = url.split("/assets/", 1)[1]
        if any(key.startswith(p) for p in self.failing_prefixes):
            raise requests.ConnectionError(f"bucket unreachable for {key}")
        self.objects[key] = data
        return FakeResponse(200)

    def get(self, url, timeout=None):
        key = url[len(BUCKET_PUBLIC) + 1:]
        if key not in self.objects:
            return FakeResponse(404)
        return FakeResponse(200, self.objects[key])


class FakeResponse:
    def __init__(self, status_code, content=b""):
        self.status_code = status_code
        self.content = content
        self.text = ""

    @property
    def ok(self):
        return 200 <= self.status_code < 300

    def raise_for_status(self):
        if not self.ok:
            raise requests.HTTPError(f"HTTP {self.status_code}", response=self)


@pytest.fixture
def fake_bucket(monkeypatch):
    bucket = FakeBucket()
    monkeypatch.setattr(http_bucket.requests, "put", bucket.put)
    monkeypatch.setattr(http_bucket.requests, "get", bucket.get)
    return bucket


@pytest.fixture
def remote_db(remote_config, fake_bucket):
    return ARModelDB.from_config(remote_config)


def stored_files(root: Path, prefix: str):
    folder = Path(root) / prefix
    if not folder.exists():
        return []
    return sorted(p.name for p in folder.iterdir())
