"""Execution context handed to bundle builders, transforms and config synthesizers."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path


@dataclass(slots=True)
class Runtime:
    """Opaque to the configuration engine; passed through unchanged."""

    root: Path
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger("multibundle"))


__all__ = ["Runtime"]
