"""
armodel_db

Top-level package for the AR model registry and asset pipeline.

Submodules include:
    - registry/      model records and the JSON record store
    - object_store/  local and remote placement backends
    - placement      upload placement
    - linkcode       QR link-code generation
    - core           ARModelDB façade (upload orchestration, reads)
    - utils/

This root package exports the façade and the config loader for convenience.
"""

from .config import ARModelConfig, load_config
from .core import ARModelDB

__all__ = [
    "ARModelConfig",
    "ARModelDB",
    "load_config",
]

__version__ = "0.1.0"
