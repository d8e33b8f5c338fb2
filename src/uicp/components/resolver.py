"""
Component Resolver: maps registry uids to renderer capabilities.

Mirrors the component-manager handler loading:
- Singleton via get_component_resolver()
- Built-in renderers wired on first use
- Auto-discovery of late-bound renderers from APP_CONFIG.RENDERER_PLUGIN_DIR
- Runtime registration via register()

The resolver is deliberately independent of the DefinitionRegistry: a uid can
be valid schema-wise and still have no renderer (surfaced as "unavailable").
All access to the mapping is serialised by a lock so registration from one
request cannot corrupt lookups in another.
"""

import importlib.util
import inspect
import logging
import sys
import threading
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from uicp.components.base import (
    BaseComponentRenderer,
    CallableRenderer,
    RendererRegistrationError,
)
from uicp.core.config import APP_CONFIG

logger = logging.getLogger("quart.app")

RendererLike = Union[BaseComponentRenderer, Callable[[Dict[str, Any]], Any]]

# ---------------------------------------------------------------------------
# Singleton
# ---------------------------------------------------------------------------

_resolver_instance: Optional["ComponentResolver"] = None
_resolver_lock = threading.Lock()


def get_component_resolver() -> "ComponentResolver":
    """
    Get or create the singleton ComponentResolver.

    On first call, registers built-in renderers (if enabled) and any plugin
    renderers found in the configured plugin directory.
    """
    global _resolver_instance
    with _resolver_lock:
        if _resolver_instance is None:
            resolver = ComponentResolver()
            if APP_CONFIG.LOAD_BUILTIN_RENDERERS:
                resolver.load_builtin()
            resolver.load_renderers_from_directory(APP_CONFIG.RENDERER_PLUGIN_DIR)
            _resolver_instance = resolver
        return _resolver_instance


def reset_component_resolver() -> None:
    """Reset the singleton (for testing or hot-reload)."""
    global _resolver_instance
    with _resolver_lock:
        _resolver_instance = None


# ---------------------------------------------------------------------------
# Resolver
# ---------------------------------------------------------------------------

class ComponentResolver:
    """Concurrency-safe uid → renderer map."""

    def __init__(self, renderers: Optional[Dict[str, RendererLike]] = None):
        self._lock = threading.RLock()
        self._renderers: Dict[str, BaseComponentRenderer] = {}
        for uid, renderer in (renderers or {}).items():
            self.register(uid, renderer)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def register(self, uid: str, renderer: RendererLike) -> None:
        """
        Insert or overwrite the renderer for ``uid``.

        Accepts a BaseComponentRenderer or any callable taking the block's
        data dict. Plain callables are wrapped in CallableRenderer.
        """
        if not isinstance(uid, str) or not uid:
            raise RendererRegistrationError("Renderer uid must be a non-empty string")

        if not isinstance(renderer, BaseComponentRenderer):
            renderer = CallableRenderer(uid, renderer)

        with self._lock:
            replaced = uid in self._renderers
            self._renderers[uid] = renderer

        logger.info(f"{'Replaced' if replaced else 'Registered'} renderer for component '{uid}'")

    def get(self, uid: str) -> Optional[BaseComponentRenderer]:
        """Renderer for ``uid``, or None if nothing is registered."""
        with self._lock:
            return self._renderers.get(uid)

    def is_registered(self, uid: str) -> bool:
        with self._lock:
            return uid in self._renderers

    def registered_ids(self) -> List[str]:
        """All uids that currently have a renderer, in registration order."""
        with self._lock:
            return list(self._renderers)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load_builtin(self) -> int:
        """Register the bundled HTML renderers. Returns how many were added."""
        from uicp.components.builtin.nba_game_score import NBAGameScoreRenderer
        from uicp.components.builtin.news_article_preview import NewsArticlePreviewRenderer

        builtin = [NBAGameScoreRenderer(), NewsArticlePreviewRenderer()]
        for renderer in builtin:
            self.register(renderer.component_id, renderer)
        return len(builtin)

    def load_renderers_from_directory(self, directory: Path) -> int:
        """
        Import every ``*.py`` file in ``directory`` and register each
        BaseComponentRenderer subclass it defines.

        Broken plugin files are logged and skipped. Returns the number of
        renderers registered.
        """
        directory = Path(directory)
        if not directory.is_dir():
            logger.debug(f"Renderer plugin directory {directory} does not exist, skipping")
            return 0

        count = 0
        for plugin_path in sorted(directory.glob("*.py")):
            if plugin_path.name.startswith("_"):
                continue
            for renderer in self._load_plugin(plugin_path):
                self.register(renderer.component_id, renderer)
                count += 1

        logger.info(f"Loaded {count} plugin renderer(s) from {directory}")
        return count

    def _load_plugin(self, plugin_path: Path) -> List[BaseComponentRenderer]:
        """Import a plugin file and instantiate its renderer classes."""
        module_name = f"uicp_renderer_plugin_{plugin_path.stem}"

        try:
            spec = importlib.util.spec_from_file_location(module_name, plugin_path)
            if spec is None or spec.loader is None:
                logger.error(f"Cannot create module spec for renderer plugin {plugin_path}")
                return []

            module = importlib.util.module_from_spec(spec)
            sys.modules[module_name] = module
            spec.loader.exec_module(module)

            renderers = []
            for _, obj in inspect.getmembers(module, inspect.isclass):
                if (
                    issubclass(obj, BaseComponentRenderer)
                    and not inspect.isabstract(obj)
                    and obj is not CallableRenderer
                    and obj.__module__ == module_name
                ):
                    renderers.append(obj())

            if not renderers:
                logger.warning(f"No BaseComponentRenderer subclass found in {plugin_path}")
            return renderers

        except Exception as e:
            logger.error(f"Failed to load renderer plugin {plugin_path}: {e}")
            return []
