"""Tests for upload orchestration and configuration."""

import re

import pytest

from armodel_db import ARModelConfig, ARModelDB, load_config
from armodel_db.errors import RecordNotFound, RemoteStorageError, UploadValidationError
from armodel_db.object_store import HTTPBucketObjectStore, LocalFSObjectStore

from .conftest import BUCKET_PUBLIC, GLB_BYTES, stored_files


def _ingest(db, staged, name="Cube", description=None, filename="cube.glb"):
    return db.ingest_upload(
        name=name,
        description=description,
        temp_path=staged,
        original_filename=filename,
    )


class TestConfig:

    def test_defaults(self, monkeypatch):
        for var in ("ARMODEL_BASE_URL", "NEXT_PUBLIC_BASE_URL", "ARMODEL_STORAGE_MODE",
                    "ARMODEL_ENV", "ARMODEL_ENABLE_LOGGING"):
            monkeypatch.delenv(var, raising=False)
        cfg = load_config()
        assert cfg.base_url == "http://localhost:8000"
        assert cfg.storage_mode == "local"
        assert not cfg.is_development
        assert cfg.enable_logging is False

    def test_env_overrides(self, monkeypatch):
        monkeypatch.delenv("ARMODEL_BASE_URL", raising=False)
        monkeypatch.setenv("NEXT_PUBLIC_BASE_URL", "https://legacy.example.test/")
        monkeypatch.setenv("ARMODEL_STORAGE_MODE", "REMOTE")
        monkeypatch.setenv("ARMODEL_BUCKET_TIMEOUT", "12.5")
        monkeypatch.setenv("ARMODEL_ENV", "development")
        monkeypatch.setenv("ARMODEL_ENABLE_LOGGING", "yes")

        cfg = load_config()
        assert cfg.base_url == "https://legacy.example.test"
        assert cfg.storage_mode == "remote"
        assert cfg.bucket_timeout == 12.5
        assert cfg.is_development
        assert cfg.enable_logging is True

    def test_remote_requires_bucket(self, tmp_path):
        cfg = ARModelConfig(storage_mode="remote", registry_path=str(tmp_path / "m.json"))
        with pytest.raises(ValueError, match="ARMODEL_BUCKET_ENDPOINT"):
            ARModelDB.from_config(cfg)

    def test_unknown_mode(self):
        with pytest.raises(ValueError):
            ARModelConfig(storage_mode="ftp").validate()

    def test_strategy_selected_once(self, db, remote_db):
        assert isinstance(db.object_store, LocalFSObjectStore)
        assert isinstance(remote_db.object_store, HTTPBucketObjectStore)


class TestIngestUpload:

    def test_complete_record(self, db, staged_glb, local_config):
        record = _ingest(db, staged_glb)

        assert re.fullmatch(r"model_\d+", record.id)
        assert record.name == "Cube"
        assert record.description is None
        assert re.fullmatch(r"/uploads/\d+-cube\.glb", record.asset_url)
        assert record.link_code_url == f"/qr-codes/qr-{record.id}.png"
        assert db.get_model(record.id) == record

        public = local_config.public_root
        assert stored_files(public, "uploads") == [record.asset_url.rsplit("/", 1)[1]]
        assert stored_files(public, "qr-codes") == [f"qr-{record.id}.png"]
        assert not staged_glb.exists()

    def test_name_is_trimmed_and_blank_description_is_null(self, db, staged_glb):
        record = _ingest(db, staged_glb, name="  Cube  ", description="")
        assert record.name == "Cube"
        assert record.description is None

    def test_missing_name(self, db, staged_glb):
        with pytest.raises(UploadValidationError):
            _ingest(db, staged_glb, name="   ")
        assert db.list_models() == []
        assert not staged_glb.exists()

    def test_missing_file(self, db):
        with pytest.raises(UploadValidationError):
            _ingest(db, None)
        assert db.list_models() == []

    def test_sequential_uploads(self, db, tmp_path):
        ids = []
        for i in range(2):
            staged = tmp_path / f"staged-{i}.glb"
            staged.write_bytes(GLB_BYTES)
            ids.append(_ingest(db, staged, name=f"Model {i}").id)

        assert ids == ["model_1", "model_2"]
        assert [r.id for r in db.list_models()] == ["model_2", "model_1"]

    def test_get_unknown(self, db):
        with pytest.raises(RecordNotFound):
            db.get_model("model_404")

    def test_read_object(self, db, staged_glb):
        record = _ingest(db, staged_glb)
        assert db.read_object(record.asset_url.lstrip("/")) == GLB_BYTES


class TestRemoteIngest:

    def test_remote_urls(self, remote_db, fake_bucket, staged_glb):
        record = _ingest(remote_db, staged_glb)

        assert record.asset_url.startswith(f"{BUCKET_PUBLIC}/uploads/")
        assert record.link_code_url == f"{BUCKET_PUBLIC}/qr-codes/qr-{record.id}.png"
        assert not staged_glb.exists()

    def test_asset_failure_aborts(self, remote_db, fake_bucket, staged_glb):
        fake_bucket.failing_prefixes.add("uploads/")

        with pytest.raises(RemoteStorageError):
            _ingest(remote_db, staged_glb)
        assert remote_db.list_models() == []
        assert not staged_glb.exists()

    def test_link_code_failure_uses_inline_image(self, remote_db, fake_bucket, staged_glb):
        fake_bucket.failing_prefixes.add("qr-codes/")

        record = _ingest(remote_db, staged_glb)
        assert record.link_code_url.startswith("data:image/png;base64,")
        assert remote_db.get_model(record.id).link_code_url == record.link_code_url
