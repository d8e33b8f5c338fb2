"""
Block Extractor.

Scans agent text for fenced protocol blocks, parses their JSON bodies and
replaces each parsed block with a positional placeholder token. The output
is then cut at the first opening marker that was not replaced (a block the
stream is still writing, or one that never parsed), so a renderer never
shows half-written protocol syntax.

The extractor is a pure function over the whole buffer; nothing is carried
between calls.
"""

import json
import logging
import re
from typing import Any, Dict, Optional

from uicp.core.config import APP_CONFIG
from uicp.protocol.models import ComponentBlock, ExtractionResult

logger = logging.getLogger("quart.app")

# ---------------------------------------------------------------------------
# Grammar
# ---------------------------------------------------------------------------

FENCE = "```"
OPEN_MARKER = f"{FENCE}{APP_CONFIG.FENCE_TAG}"

_BLOCK_RE = re.compile(rf"{re.escape(OPEN_MARKER)}\s*\n(.*?){re.escape(FENCE)}", re.DOTALL)

# Shortest trailing fragment of OPEN_MARKER treated as a block being opened
# ("```u"). A bare "```" may close an ordinary code block and is kept.
_MIN_PARTIAL_MARKER = len(FENCE) + 1

# ---------------------------------------------------------------------------
# Placeholders
# ---------------------------------------------------------------------------

# Private-use code points delimit placeholder tokens. They are stripped from
# surrounding text before substitution, so literal content can never be
# mistaken for a placeholder.
_PH_OPEN = "\ue000"
_PH_CLOSE = "\ue001"

PLACEHOLDER_SPLIT_PATTERN = re.compile(f"({_PH_OPEN}UICP_BLOCK_\\d+{_PH_CLOSE})")
PLACEHOLDER_PATTERN = re.compile(f"^{_PH_OPEN}UICP_BLOCK_(\\d+){_PH_CLOSE}$")


def placeholder_for(index: int) -> str:
    """Placeholder token for the block at ``index``."""
    return f"{_PH_OPEN}UICP_BLOCK_{index}{_PH_CLOSE}"


def placeholder_index(part: str) -> Optional[int]:
    """Block index if ``part`` is exactly a placeholder token, else None."""
    match = PLACEHOLDER_PATTERN.match(part)
    return int(match.group(1)) if match else None


def _scrub(text: str) -> str:
    return text.replace(_PH_OPEN, "").replace(_PH_CLOSE, "")


# ---------------------------------------------------------------------------
# Extraction
# ---------------------------------------------------------------------------

def _parse_block(body: str) -> Optional[ComponentBlock]:
    """Parse one fenced body; None when it is not a usable protocol block."""
    try:
        parsed = json.loads(body.strip())
    except json.JSONDecodeError as e:
        logger.warning(f"[UICP] Failed to parse UICP block: {e}")
        return None

    if not isinstance(parsed, dict):
        logger.debug("[UICP] Block body is not a JSON object, leaving as text")
        return None

    uid = parsed.get("uid")
    data = parsed.get("data")
    if not isinstance(uid, str) or not uid or not isinstance(data, dict):
        logger.debug("[UICP] Block lacks a 'uid' string or 'data' object, leaving as text")
        return None

    return ComponentBlock(uid=uid, data=data)


def _incomplete_start(content: str) -> Optional[int]:
    """Offset of the first opening marker left in ``content``, or of a partial one at its end."""
    index = content.find(OPEN_MARKER)
    if index != -1:
        return index

    for length in range(len(OPEN_MARKER) - 1, _MIN_PARTIAL_MARKER - 1, -1):
        if content.endswith(OPEN_MARKER[:length]):
            return len(content) - length
    return None


def extract_blocks(text: str, truncate_incomplete: Optional[bool] = None) -> ExtractionResult:
    """
    Extract protocol blocks from ``text``.

    Args:
        text: Full accumulated message text (possibly still streaming).
        truncate_incomplete: Cut the output at the first opening marker that
            survives substitution. Defaults to
            APP_CONFIG.TRUNCATE_INCOMPLETE_BLOCKS. Pass False for fully
            buffered text where a leftover marker is just literal content.

    Returns:
        ExtractionResult with the parsed blocks (source order) and the text
        with each parsed block replaced by placeholder_for(i). Blocks with bad
        JSON or without uid/data are not replaced; while streaming they cannot
        be told apart from a block still being written, so truncation hides
        them together with everything after them.
    """
    if truncate_incomplete is None:
        truncate_incomplete = APP_CONFIG.TRUNCATE_INCOMPLETE_BLOCKS

    blocks = []
    pieces = []
    cursor = 0

    for match in _BLOCK_RE.finditer(text):
        block = _parse_block(match.group(1))
        if block is None:
            continue
        pieces.append(_scrub(text[cursor:match.start()]))
        pieces.append(placeholder_for(len(blocks)))
        blocks.append(block)
        cursor = match.end()

    # Without parsed blocks there are no placeholders to protect.
    content = "".join(pieces) + _scrub(text[cursor:]) if blocks else text

    incomplete = False
    if truncate_incomplete:
        start = _incomplete_start(content)
        if start is not None:
            content = content[:start].rstrip()
            incomplete = True

    return ExtractionResult(
        blocks=blocks,
        content_with_placeholders=content,
        incomplete=incomplete,
    )


def has_blocks(text: str) -> bool:
    """True if ``text`` contains an opening marker (complete or not)."""
    return OPEN_MARKER in text


def format_block(uid: str, data: Dict[str, Any]) -> str:
    """
    Serialize ``{uid, data}`` as a protocol block string.

    Backticks can only occur inside JSON strings, so they are written as
    ``\\u0060`` escapes; a value containing a fence cannot end the block early.

    Raises TypeError if ``data`` is not JSON-serializable.
    """
    body = json.dumps({"uid": uid, "data": data}, indent=2, ensure_ascii=False)
    body = body.replace("`", "\\u0060")
    return f"{OPEN_MARKER}\n{body}\n{FENCE}"
