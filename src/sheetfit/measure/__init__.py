"""Text-measurement collaborators for the sizing engine."""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Any

from .._optional_deps import import_extra

if TYPE_CHECKING:
    from ..sizing.protocols import TextMeasurer
    from .pillow_measure import PillowTextMeasurer

__all__ = ["PillowTextMeasurer", "get_default_text_measurer"]

_DEFAULT_MEASURER: TextMeasurer | None = None
_LOCK_DEFAULT_MEASURER = threading.Lock()


def _load_pillow_measurer_class() -> Any:
    return import_extra(
        ".pillow_measure",
        extra="pillow",
        feature="Pillow text measurement",
        package=__name__,
    ).PillowTextMeasurer


def get_default_text_measurer() -> TextMeasurer:
    """Process-wide :class:`PillowTextMeasurer`, created on first use."""
    global _DEFAULT_MEASURER
    if _DEFAULT_MEASURER is None:
        with _LOCK_DEFAULT_MEASURER:
            if _DEFAULT_MEASURER is None:
                _DEFAULT_MEASURER = _load_pillow_measurer_class()()
    return _DEFAULT_MEASURER


def __getattr__(name: str) -> Any:
    if name == "PillowTextMeasurer":
        cls = _load_pillow_measurer_class()
        globals()[name] = cls
        return cls
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
