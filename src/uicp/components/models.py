"""
Data models for the component registry.

ComponentDefinition wraps one entry of the registry document: the component's
identifier, category, description, input schema and example payload.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional

logger = logging.getLogger("quart.app")


@dataclass(frozen=True)
class ComponentDefinition:
    """
    A component definition loaded from the registry document.

    Instances are created once by DefinitionRegistry and never mutated.
    Identity is the ``uid``.
    """

    uid: str
    """Unique identifier (e.g., 'NBAGameScore')."""

    type: str = "general"
    """Category tag used for discovery filtering (e.g., 'sports', 'news')."""

    description: str = ""
    """Short description of what the component displays."""

    inputs: Mapping[str, Dict[str, Any]] = field(default_factory=dict)
    """
    Input schema keyed by field name, in declaration order. Each value holds
    ``required`` plus free-form metadata such as ``type`` and ``description``.
    """

    example: Dict[str, Any] = field(default_factory=dict)
    """Example ``data`` payload for this component."""

    @classmethod
    def from_entry(cls, entry: Dict[str, Any]) -> Optional["ComponentDefinition"]:
        """Build a definition from a raw registry entry, or None if unusable."""
        uid = entry.get("uid")
        if not isinstance(uid, str) or not uid:
            logger.warning(f"Registry entry missing 'uid', skipping: {entry!r:.120}")
            return None

        inputs = entry.get("inputs") or {}
        if not isinstance(inputs, dict):
            logger.warning(f"Component '{uid}': 'inputs' is not an object, treating as empty")
            inputs = {}

        return cls(
            uid=uid,
            type=entry.get("type", "general"),
            description=entry.get("description", ""),
            inputs=MappingProxyType(
                {name: dict(spec or {}) for name, spec in inputs.items()}
            ),
            example=dict(entry.get("example") or {}),
        )

    def required_fields(self) -> List[str]:
        """Names of required inputs, in declaration order."""
        return [
            name for name, spec in self.inputs.items()
            if spec.get("required", False)
        ]

    def to_api_dict(self) -> Dict[str, Any]:
        """Serialize for tool and REST responses."""
        return {
            "uid": self.uid,
            "type": self.type,
            "description": self.description,
            "inputs": {name: dict(spec) for name, spec in self.inputs.items()},
            "example": dict(self.example),
        }
