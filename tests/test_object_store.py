"""Tests for local and remote object stores, upload staging and placement."""

import io
import tempfile

import pytest

from armodel_db.errors import RemoteStorageError, StorageError
from armodel_db.object_store import (
    HTTPBucketObjectStore,
    LocalFSObjectStore,
    ObjectStoreConfig,
)
from armodel_db.placement import place_upload
from armodel_db.utils.paths import build_upload_key, content_type_for, safe_filename
from armodel_db.utils.temp import remove_temp_file, stage_upload

from .conftest import BUCKET_ENDPOINT, BUCKET_PUBLIC, GLB_BYTES


@pytest.fixture
def local_store(tmp_path):
    return LocalFSObjectStore(ObjectStoreConfig(base_path=str(tmp_path / "public")))


@pytest.fixture
def bucket_store(fake_bucket):
    return HTTPBucketObjectStore(ObjectStoreConfig(
        base_path=BUCKET_ENDPOINT,
        bucket="assets",
        public_url=BUCKET_PUBLIC,
        token="secret-token",
        timeout=5,
    ))


class TestKeys:
    """Key building and content types."""

    def test_upload_key(self):
        assert build_upload_key("cube.glb", 1700000000000) == "uploads/1700000000000-cube.glb"

    def test_upload_key_strips_directories(self):
        assert safe_filename("../../etc/cube.glb") == "cube.glb"
        assert safe_filename("C:\\models\\cube.glb") == "cube.glb"
        assert safe_filename("") == "upload.bin"

    def test_content_types(self):
        assert content_type_for("a/b/model.GLB") == "model/gltf-binary"
        assert content_type_for("scene.gltf") == "model/gltf+json"
        assert content_type_for("qr-model_1.png") == "image/png"
        assert content_type_for("notes.obj") == "application/octet-stream"


class TestLocalFSObjectStore:
    """Local placement."""

    def test_save_and_open(self, local_store):
        local_store.save_bytes("qr-codes/qr-model_1.png", b"png", "image/png")
        with local_store.open("qr-codes/qr-model_1.png") as f:
            assert f.read() == b"png"

    def test_save_file_copies(self, local_store, staged_glb):
        local_store.save_file("uploads/1-cube.glb", staged_glb, "model/gltf-binary")
        assert staged_glb.exists()
        with local_store.open("uploads/1-cube.glb") as f:
            assert f.read() == GLB_BYTES

    def test_public_url_is_relative(self, local_store):
        assert local_store.public_url("uploads/1-cube.glb") == "/uploads/1-cube.glb"

    def test_rejects_traversal(self, local_store):
        with pytest.raises(ValueError):
            local_store.open("uploads/../../secret.txt")

    def test_open_missing(self, local_store):
        with pytest.raises(FileNotFoundError):
            local_store.open("uploads/missing.glb")

    def test_rejects_traversal_on_write(self, local_store, tmp_path):
        with pytest.raises(ValueError):
            local_store.save_bytes("../escaped.png", b"x")
        assert not (tmp_path / "escaped.png").exists()


class TestHTTPBucketObjectStore:
    """Remote placement against a fake bucket."""

    def test_put_with_token(self, bucket_store, fake_bucket):
        bucket_store.save_bytes("uploads/1-cube.glb", GLB_BYTES, "model/gltf-binary")

        call = fake_bucket.calls[0]
        assert call["url"] == f"{BUCKET_ENDPOINT}/assets/uploads/1-cube.glb"
        assert call["headers"]["Authorization"] == "Bearer secret-token"
        assert call["headers"]["Content-Type"] == "model/gltf-binary"
        assert call["timeout"] == 5
        assert fake_bucket.objects["uploads/1-cube.glb"] == GLB_BYTES

    def test_public_url(self, bucket_store):
        assert bucket_store.public_url("/uploads/1-cube.glb") == f"{BUCKET_PUBLIC}/uploads/1-cube.glb"

    def test_failure_raises(self, bucket_store, fake_bucket):
        fake_bucket.failing_prefixes.add("uploads/")
        with pytest.raises(RemoteStorageError):
            bucket_store.save_bytes("uploads/1-cube.glb", GLB_BYTES, "model/gltf-binary")

    def test_remote_error_is_storage_error(self):
        assert issubclass(RemoteStorageError, StorageError)

    def test_open_round_trip(self, bucket_store):
        bucket_store.save_bytes("qr-codes/qr-model_1.png", b"png", "image/png")
        assert bucket_store.open("qr-codes/qr-model_1.png").read() == b"png"

    def test_open_missing(self, bucket_store):
        with pytest.raises(FileNotFoundError):
            bucket_store.open("uploads/missing.glb")

    def test_requires_bucket(self):
        with pytest.raises(ValueError):
            HTTPBucketObjectStore(ObjectStoreConfig(base_path=BUCKET_ENDPOINT, public_url=BUCKET_PUBLIC))


class TestPlaceUpload:
    """Placement removes the staged file in every case."""

    def test_local_placement(self, local_store, staged_glb, tmp_path):
        placed = place_upload(local_store, staged_glb, "cube.glb", stamp_ms=42)

        assert placed.key == "uploads/42-cube.glb"
        assert placed.url == "/uploads/42-cube.glb"
        assert placed.content_type == "model/gltf-binary"
        assert (tmp_path / "public" / "uploads" / "42-cube.glb").read_bytes() == GLB_BYTES
        assert not staged_glb.exists()

    def test_remote_placement(self, bucket_store, staged_glb):
        placed = place_upload(bucket_store, staged_glb, "cube.glb", stamp_ms=42)

        assert placed.url == f"{BUCKET_PUBLIC}/uploads/42-cube.glb"
        assert not staged_glb.exists()

    def test_remote_failure_propagates_and_cleans_up(self, bucket_store, fake_bucket, staged_glb):
        fake_bucket.failing_prefixes.add("uploads/")
        with pytest.raises(RemoteStorageError):
            place_upload(bucket_store, staged_glb, "cube.glb")
        assert not staged_glb.exists()


class BrokenStream:
    """Upload stream that fails after handing out one chunk."""

    def __init__(self):
        self.reads = 0

    def read(self, size=-1):
        self.reads += 1
        if self.reads > 1:
            raise OSError("client disconnected")
        return GLB_BYTES


class TestStageUpload:
    """Staging an incoming upload to a temp file."""

    @pytest.fixture(autouse=True)
    def temp_dir(self, tmp_path, monkeypatch):
        staging = tmp_path / "staging"
        staging.mkdir()
        monkeypatch.setattr(tempfile, "tempdir", str(staging))
        return staging

    def test_stage_keeps_extension(self, temp_dir):
        staged = stage_upload(io.BytesIO(GLB_BYTES), "cube.glb")

        assert staged.parent == temp_dir
        assert staged.suffix == ".glb"
        assert staged.read_bytes() == GLB_BYTES

        remove_temp_file(staged)
        assert not staged.exists()

    def test_failed_copy_leaves_nothing_behind(self, temp_dir):
        with pytest.raises(OSError, match="client disconnected"):
            stage_upload(BrokenStream(), "cube.glb")
        assert list(temp_dir.iterdir()) == []

    def test_remove_missing_is_quiet(self, temp_dir):
        remove_temp_file(temp_dir / "gone.glb")
        remove_temp_file(None)
