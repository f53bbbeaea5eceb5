"""
Global configuration settings for the AR model backend.

This module centralizes configuration for:

    - the registry document location
    - placement strategy selection (local disk vs remote bucket)
    - remote bucket credentials
    - the public base URL used to build viewer links
    - feature flags (logging, development tracebacks)

It provides:
    ARModelConfig  – structured config object
    load_config()  – load from environment variables or defaults
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from typing import Optional


DEFAULT_BASE_URL = "http://localhost:8000"

STORAGE_LOCAL = "local"
STORAGE_REMOTE = "remote"


@dataclass
class ARModelConfig:
    """
    Canonical configuration for the armodel_db subsystem.

    Attributes
    ----------
    base_url:
        Browser-facing origin used to build viewer URLs encoded in link
        codes (``{base_url}/ar/{id}``).

    storage_mode:
        Placement strategy: "local" or "remote".

    registry_path:
        Path of the JSON document holding every model record.

    public_root:
        Directory served for local placement (``uploads/`` and
        ``qr-codes/`` live underneath it).

    bucket_endpoint, bucket_name, bucket_token, bucket_public_url:
        Remote object-storage settings. Only read when storage_mode is
        "remote".

    bucket_timeout:
        Seconds to wait on a single remote storage request.

    environment:
        "development" exposes tracebacks in server error responses.

    enable_logging:
        Whether to configure root logging at INFO level on startup.
    """

    base_url: str = DEFAULT_BASE_URL
    storage_mode: str = STORAGE_LOCAL

    registry_path: str = "./data/models.json"
    public_root: str = "./public"

    bucket_endpoint: Optional[str] = None
    bucket_name: Optional[str] = None
    bucket_token: Optional[str] = None
    bucket_public_url: Optional[str] = None
    bucket_timeout: float = 60.0

    environment: str = "production"
    enable_logging: bool = False

    @property
    def is_development(self) -> bool:
        return self.environment.strip().lower() == "development"

    def validate(self) -> None:
        """
        Raise ValueError if the configuration cannot select a placement
        strategy.
        """
        if self.storage_mode not in (STORAGE_LOCAL, STORAGE_REMOTE):
            raise ValueError(
                f"Unknown storage mode {self.storage_mode!r} "
                f"(expected '{STORAGE_LOCAL}' or '{STORAGE_REMOTE}')"
            )

        if self.storage_mode == STORAGE_REMOTE:
            missing = [
                name
                for name, value in (
                    ("ARMODEL_BUCKET_ENDPOINT", self.bucket_endpoint),
                    ("ARMODEL_BUCKET_NAME", self.bucket_name),
                    ("ARMODEL_BUCKET_PUBLIC_URL", self.bucket_public_url),
                )
                if not value
            ]
            if missing:
                raise ValueError(
                    "Remote storage mode requires: " + ", ".join(missing)
                )


def load_config() -> ARModelConfig:
    """
    Load ARModelConfig from environment variables, falling back to defaults.

    Recognized variables:
        ARMODEL_BASE_URL           (falls back to NEXT_PUBLIC_BASE_URL)
        ARMODEL_STORAGE_MODE       (local|remote)
        ARMODEL_REGISTRY_PATH      (file path)
        ARMODEL_PUBLIC_ROOT        (directory path)
        ARMODEL_BUCKET_ENDPOINT    (URL)
        ARMODEL_BUCKET_NAME
        ARMODEL_BUCKET_TOKEN
        ARMODEL_BUCKET_PUBLIC_URL  (URL)
        ARMODEL_BUCKET_TIMEOUT     (seconds)
        ARMODEL_ENV                ("development" / "production")
        ARMODEL_ENABLE_LOGGING     ("true" / "false" / "1" / "0")

    Returns
    -------
    ARModelConfig
    """

    def _env_flag(name: str, default: bool) -> bool:
        val = os.getenv(name)
        if val is None:
            return default
        return val.strip().lower() in ("1", "true", "yes", "on")

    def _env_float(name: str, default: float) -> float:
        val = os.getenv(name)
        if val is None or not val.strip():
            return default
        try:
            return float(val)
        except ValueError:
            raise ValueError(f"{name} must be a number, got {val!r}")

    base_url = (
        os.getenv("ARMODEL_BASE_URL")
        or os.getenv("NEXT_PUBLIC_BASE_URL")
        or DEFAULT_BASE_URL
    )

    return ARModelConfig(
        base_url=base_url.rstrip("/"),
        storage_mode=os.getenv("ARMODEL_STORAGE_MODE", STORAGE_LOCAL).strip().lower(),

        registry_path=os.getenv(
            "ARMODEL_REGISTRY_PATH",
            "./data/models.json"
        ),
        public_root=os.getenv(
            "ARMODEL_PUBLIC_ROOT",
            "./public"
        ),

        bucket_endpoint=os.getenv("ARMODEL_BUCKET_ENDPOINT"),
        bucket_name=os.getenv("ARMODEL_BUCKET_NAME"),
        bucket_token=os.getenv("ARMODEL_BUCKET_TOKEN"),
        bucket_public_url=os.getenv("ARMODEL_BUCKET_PUBLIC_URL"),
        bucket_timeout=_env_float("ARMODEL_BUCKET_TIMEOUT", 60.0),

        environment=os.getenv("ARMODEL_ENV", "production"),
        enable_logging=_env_flag(
            "ARMODEL_ENABLE_LOGGING",
            default=False
        ),
    )
