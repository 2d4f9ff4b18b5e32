"""
medspec - MEDS design specifications from UI screenshots.

Turns the JSON a vision model extracts from a screenshot into a validated,
UX-enriched design specification.
"""

from __future__ import annotations

from ._version import get_version
from .core import ir
from .core.errors import ConfigError, MedspecError, ModelOutputError, PersistenceError, RulebookError
from .core.pipeline import PipelineResult, run_pipeline

__version__ = get_version()

__all__ = [
    "__version__",
    "ir",
    "run_pipeline",
    "PipelineResult",
    "MedspecError",
    "RulebookError",
    "ConfigError",
    "ModelOutputError",
    "PersistenceError",
]
