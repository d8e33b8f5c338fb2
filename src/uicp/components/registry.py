"""
Definition Registry: the static catalog of protocol components.

Mirrors the component-manager loading pattern:
- Singleton via get_definition_registry()
- Loaded once from a JSON document (version tag + component list)
- Read-only after construction

Document layout::

    {
      "version": "1.0.0",
      "components": [
        {"uid": "...", "type": "...", "description": "...",
         "inputs": {"field": {"required": true, "type": "string"}},
         "example": {...}}
      ]
    }
"""

import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Optional, Tuple

from uicp.components.models import ComponentDefinition
from uicp.core.config import APP_CONFIG

logger = logging.getLogger("quart.app")

# ---------------------------------------------------------------------------
# Singleton
# ---------------------------------------------------------------------------

_registry_instance: Optional["DefinitionRegistry"] = None


def get_definition_registry(definitions_path: Optional[Path] = None) -> "DefinitionRegistry":
    """
    Get or create the singleton DefinitionRegistry.

    On first call, loads the registry document. Subsequent calls return the
    cached instance.
    """
    global _registry_instance
    if _registry_instance is None:
        _registry_instance = DefinitionRegistry.from_file(
            definitions_path or APP_CONFIG.DEFINITIONS_PATH
        )
    return _registry_instance


def reset_definition_registry() -> None:
    """Reset the singleton (for testing)."""
    global _registry_instance
    _registry_instance = None


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

class DefinitionRegistry:
    """
    Immutable catalog of ComponentDefinition objects keyed by uid.

    Duplicate uids in the source are dropped (the first entry wins) so that
    identifiers stay globally unique.
    """

    def __init__(self, components: Iterable[ComponentDefinition], version: str = "1.0.0"):
        by_uid: Dict[str, ComponentDefinition] = {}
        for comp in components:
            if comp.uid in by_uid:
                logger.warning(f"Duplicate component uid '{comp.uid}' in registry, keeping the first")
                continue
            by_uid[comp.uid] = comp

        self._version = version
        self._components: Tuple[ComponentDefinition, ...] = tuple(by_uid.values())
        self._by_uid = MappingProxyType(by_uid)

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "DefinitionRegistry":
        """Build a registry from an already-parsed registry document."""
        entries = document.get("components", [])
        if not isinstance(entries, list):
            logger.error("Registry document 'components' is not a list, using empty registry")
            entries = []

        components = []
        for entry in entries:
            if not isinstance(entry, dict):
                logger.warning(f"Registry entry is not an object, skipping: {entry!r:.120}")
                continue
            comp = ComponentDefinition.from_entry(entry)
            if comp is not None:
                components.append(comp)

        return cls(components, version=str(document.get("version", "1.0.0")))

    @classmethod
    def from_file(cls, path: Path) -> "DefinitionRegistry":
        """Load the registry document from disk; fall back to an empty registry."""
        path = Path(path)
        if not path.exists():
            logger.error(f"Component definitions not found at {path}. Using empty registry.")
            return cls([], version="0.0.0")

        try:
            with open(path, "r", encoding="utf-8") as f:
                document = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.error(f"Failed to load component definitions from {path}: {e}")
            return cls([], version="0.0.0")

        if not isinstance(document, dict):
            logger.error(f"Component definitions at {path} must be a JSON object")
            return cls([], version="0.0.0")

        registry = cls.from_document(document)
        logger.info(
            f"Loaded component registry v{registry.version} with "
            f"{len(registry)} component(s): {', '.join(registry.uids())}"
        )
        return registry

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def version(self) -> str:
        return self._version

    def get(self, uid: str) -> Optional[ComponentDefinition]:
        """Get a definition by uid."""
        return self._by_uid.get(uid)

    def all(self) -> Tuple[ComponentDefinition, ...]:
        """All definitions in document order."""
        return self._components

    def uids(self) -> List[str]:
        return [c.uid for c in self._components]

    def types(self) -> List[str]:
        """Distinct category tags, in order of first appearance."""
        seen: Dict[str, None] = {}
        for comp in self._components:
            seen.setdefault(comp.type, None)
        return list(seen)

    def by_type(self, component_type: str) -> List[ComponentDefinition]:
        return [c for c in self._components if c.type == component_type]

    def __contains__(self, uid: object) -> bool:
        return uid in self._by_uid

    def __len__(self) -> int:
        return len(self._components)
