"""
armodel_db.utils

Lightweight utility helpers shared across the armodel_db stack.

This package aggregates:

    - temp:      staging and cleanup of uploaded temp files
    - paths:     object-store key builders and content-type table
    - json_io:   safe JSON read/write helpers

All public symbols from these modules are re-exported for convenience.
"""

from . import temp
from . import paths
from . import json_io

# Re-export all public symbols from the submodules
from .temp import *        # noqa: F401,F403
from .paths import *       # noqa: F401,F403
from .json_io import *     # noqa: F401,F403

__all__ = (
    temp.__all__
    + paths.__all__
    + json_io.__all__
)
