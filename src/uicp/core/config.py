# src/uicp/core/config.py
import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str = "true") -> bool:
    return os.environ.get(name, default).lower() == "true"


class AppConfig:
    """
    Holds static configuration settings for the protocol core.
    These values are read once at import time and rarely change during runtime.
    """
    # --- Protocol ---
    FENCE_TAG = "uicp" # Tag that follows the opening fence marker of a protocol block.
    TRUNCATE_INCOMPLETE_BLOCKS = _env_flag('UICP_TRUNCATE_INCOMPLETE') # If True, text is cut at an opened-but-unclosed block so half-written protocol syntax is never displayed.

    # --- Registry & Renderers ---
    DEFINITIONS_PATH = Path(
        os.environ.get(
            'UICP_DEFINITIONS_PATH',
            str(Path(__file__).resolve().parent.parent / "components" / "definitions.json"),
        )
    ) # Static registry document (version tag + component definitions).
    LOAD_BUILTIN_RENDERERS = _env_flag('UICP_LOAD_BUILTIN_RENDERERS') # If True, the resolver wires the bundled HTML renderers on first use.
    RENDERER_PLUGIN_DIR = Path(
        os.environ.get('UICP_RENDERER_DIR', str(Path.home() / ".uicp" / "renderers"))
    ) # Directory scanned for late-bound renderer modules (*.py).

    # --- Server ---
    API_HOST = os.environ.get('UICP_HOST', '127.0.0.1')
    API_PORT = int(os.environ.get('UICP_PORT', '5060'))
    LOG_LEVEL = os.environ.get('UICP_LOG_LEVEL', 'INFO').upper()


APP_CONFIG = AppConfig()
