"""
Base classes for component renderers.

A renderer turns a validated block's ``data`` object into displayable output.
Two shapes are supported:
  - BaseComponentRenderer:  class-based renderer bound to one component uid
  - CallableRenderer:       adapter wrapping a plain ``data -> html`` function

The composer wraps every outcome (rendered, invalid, unavailable, error) in a
ComponentRenderPayload, which is the contract with the presentation layer.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List

logger = logging.getLogger("quart.app")


class RendererRegistrationError(ValueError):
    """Raised when a renderer cannot be registered (bad uid or not callable)."""


# ---------------------------------------------------------------------------
# Render status
# ---------------------------------------------------------------------------

class RenderStatus(Enum):
    """Outcome of resolving one protocol block."""
    RENDERED = "rendered"        # Renderer produced output
    INVALID = "invalid"          # Unknown uid or missing required fields
    UNAVAILABLE = "unavailable"  # Valid data, but no renderer is wired up
    ERROR = "error"              # Renderer raised while rendering


# ---------------------------------------------------------------------------
# Component render payload
# ---------------------------------------------------------------------------

@dataclass
class ComponentRenderPayload:
    """
    Standardized output for one resolved block.

    ``html`` always holds something displayable: the renderer output for
    RENDERED, or a flagged notice for the other statuses.
    """

    uid: str
    """Which component the block referenced."""

    status: RenderStatus = RenderStatus.RENDERED

    html: str = ""
    """Rendered markup, or the error/unavailable notice."""

    errors: List[str] = field(default_factory=list)
    """Validation or render errors (empty when RENDERED)."""

    data: Dict[str, Any] = field(default_factory=dict)
    """The block's data, passed through unchanged (extra fields included)."""

    @property
    def ok(self) -> bool:
        return self.status is RenderStatus.RENDERED

    def to_api_dict(self) -> Dict[str, Any]:
        return {
            "uid": self.uid,
            "status": self.status.value,
            "html": self.html,
            "errors": list(self.errors),
            "data": self.data,
        }


# ---------------------------------------------------------------------------
# Renderers
# ---------------------------------------------------------------------------

class BaseComponentRenderer(ABC):
    """
    Base class for component renderers.

    Subclasses must implement:
        component_id  — the registry uid this renderer displays
        render()      — turn the block's data into markup
    """

    @property
    @abstractmethod
    def component_id(self) -> str:
        """Registry uid (e.g., 'NBAGameScore')."""

    @abstractmethod
    def render(self, data: Dict[str, Any]) -> str:
        """
        Render validated block data.

        Args:
            data: The block's ``data`` object. Required fields are guaranteed
                  present; optional and undeclared fields may or may not be.

        Returns:
            Displayable markup.
        """

    def __call__(self, data: Dict[str, Any]) -> str:
        return self.render(data)


class CallableRenderer(BaseComponentRenderer):
    """Adapter for registering a plain function as a renderer."""

    def __init__(self, uid: str, func: Callable[[Dict[str, Any]], Any]):
        if not callable(func):
            raise RendererRegistrationError(f"Renderer for '{uid}' is not callable")
        self._uid = uid
        self._func = func

    @property
    def component_id(self) -> str:
        return self._uid

    def render(self, data: Dict[str, Any]) -> str:
        return str(self._func(data))

    def __repr__(self) -> str:
        name = getattr(self._func, "__qualname__", repr(self._func))
        return f"CallableRenderer({self._uid!r}, {name})"
