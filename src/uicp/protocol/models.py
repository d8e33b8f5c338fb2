"""
Data models for the embedded-block protocol.

ComponentBlock and ValidationResult are ephemeral values produced per render
pass. TextSegment and ComponentSegment form the ordered display output of one
message.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Union

from uicp.components.base import ComponentRenderPayload


@dataclass(frozen=True)
class ComponentBlock:
    """A parsed ``{"uid": ..., "data": {...}}`` block."""

    uid: str
    data: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {"uid": self.uid, "data": self.data}


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    errors: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class ExtractionResult:
    """Output of extract_blocks()."""

    blocks: List[ComponentBlock]
    """Successfully parsed blocks, in source order."""

    content_with_placeholders: str
    """Input text with each parsed block replaced by its placeholder token."""

    incomplete: bool = False
    """True when a trailing unclosed block was cut off."""


@dataclass(frozen=True)
class TextSegment:
    text: str
    key: str = "text-0"

    kind = "text"

    def to_api_dict(self) -> Dict[str, Any]:
        return {"type": self.kind, "key": self.key, "content": self.text}


@dataclass(frozen=True)
class ComponentSegment:
    payload: ComponentRenderPayload
    block: ComponentBlock
    key: str = "component-0"

    kind = "component"

    def to_api_dict(self) -> Dict[str, Any]:
        return {"type": self.kind, "key": self.key, "content": self.payload.to_api_dict()}


ContentSegment = Union[TextSegment, ComponentSegment]
