"""crate_release — упорядоченная публикация крейтов workspace в реестр."""

from __future__ import annotations

from .core import *  # noqa: F401,F403
from .core import __all__ as _core_all

__all__ = ["core", *_core_all]
