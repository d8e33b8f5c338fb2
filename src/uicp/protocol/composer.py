"""
Content Composer.

Turns a message's text into an ordered list of display segments: plain text
interleaved with resolved components. Each placeholder left by the extractor
is validated and handed to its renderer; failures become flagged notices in
place of the component so that bad data ("invalid") and a missing
integration ("unavailable") stay distinguishable. Raw block JSON is never
shown.

The composer keeps no state between calls. Streaming callers re-run it over
the full accumulated text on every tick.
"""

import logging
from html import escape
from typing import List, Optional

from uicp.components.base import ComponentRenderPayload, RenderStatus
from uicp.components.registry import DefinitionRegistry, get_definition_registry
from uicp.components.resolver import ComponentResolver, get_component_resolver
from uicp.protocol.extractor import (
    PLACEHOLDER_SPLIT_PATTERN,
    extract_blocks,
    placeholder_index,
)
from uicp.protocol.models import ComponentBlock, ComponentSegment, ContentSegment, TextSegment
from uicp.protocol.validator import validate_block

logger = logging.getLogger("quart.app")

# ---------------------------------------------------------------------------
# Notices
# ---------------------------------------------------------------------------

def _invalid_notice(errors: List[str]) -> str:
    items = "".join(f"<li>{escape(err)}</li>" for err in errors)
    return (
        '<div class="uicp-notice uicp-notice--invalid" role="alert">'
        '<p class="uicp-notice__title">Invalid UICP Component</p>'
        f'<ul class="uicp-notice__errors">{items}</ul>'
        "</div>"
    )


def _unavailable_notice(uid: str) -> str:
    return (
        '<div class="uicp-notice uicp-notice--unavailable" role="status">'
        f'<p class="uicp-notice__title">Component Not Available: {escape(uid)}</p>'
        '<p class="uicp-notice__detail">No renderer is registered for this component.</p>'
        "</div>"
    )


def _error_notice(uid: str) -> str:
    return (
        '<div class="uicp-notice uicp-notice--error" role="alert">'
        f'<p class="uicp-notice__title">Component Failed to Render: {escape(uid)}</p>'
        "</div>"
    )


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

def render_block(
    block: ComponentBlock,
    registry: Optional[DefinitionRegistry] = None,
    resolver: Optional[ComponentResolver] = None,
) -> ComponentRenderPayload:
    """Validate one block and render it, or build the matching notice."""
    if resolver is None:
        resolver = get_component_resolver()

    result = validate_block(block, registry)
    if not result.valid:
        return ComponentRenderPayload(
            uid=block.uid,
            status=RenderStatus.INVALID,
            html=_invalid_notice(result.errors),
            errors=list(result.errors),
            data=block.data,
        )

    renderer = resolver.get(block.uid)
    if renderer is None:
        logger.debug(f"[UICP] No renderer registered for component '{block.uid}'")
        return ComponentRenderPayload(
            uid=block.uid,
            status=RenderStatus.UNAVAILABLE,
            html=_unavailable_notice(block.uid),
            errors=[f"No renderer registered for component: {block.uid}"],
            data=block.data,
        )

    try:
        html = renderer.render(block.data)
    except Exception as e:
        logger.error(f"[UICP] Renderer for '{block.uid}' failed: {e}", exc_info=True)
        return ComponentRenderPayload(
            uid=block.uid,
            status=RenderStatus.ERROR,
            html=_error_notice(block.uid),
            errors=[f"Renderer error: {e}"],
            data=block.data,
        )

    return ComponentRenderPayload(uid=block.uid, html=html, data=block.data)


# ---------------------------------------------------------------------------
# Composition
# ---------------------------------------------------------------------------

def compose_segments(
    text: str,
    registry: Optional[DefinitionRegistry] = None,
    resolver: Optional[ComponentResolver] = None,
    truncate_incomplete: Optional[bool] = None,
) -> List[ContentSegment]:
    """
    Build the ordered display segments for ``text``.

    Args:
        text: Full accumulated message text.
        registry: Definitions used for validation (default: singleton).
        resolver: Renderer map (default: singleton).
        truncate_incomplete: Forwarded to extract_blocks().

    Returns:
        TextSegment / ComponentSegment list in source order. Text parts keep
        their original whitespace; whitespace-only parts are dropped.
    """
    if registry is None:
        registry = get_definition_registry()

    extraction = extract_blocks(text, truncate_incomplete=truncate_incomplete)

    if not extraction.blocks:
        visible = extraction.content_with_placeholders
        if visible == text:
            return [TextSegment(text=text)]
        return [TextSegment(text=visible)] if visible.strip() else []

    segments: List[ContentSegment] = []
    parts = PLACEHOLDER_SPLIT_PATTERN.split(extraction.content_with_placeholders)

    for index, part in enumerate(parts):
        block_index = placeholder_index(part)
        if block_index is not None:
            if block_index >= len(extraction.blocks):
                continue
            block = extraction.blocks[block_index]
            segments.append(
                ComponentSegment(
                    payload=render_block(block, registry, resolver),
                    block=block,
                    key=f"component-{block_index}",
                )
            )
        elif part.strip():
            segments.append(TextSegment(text=part, key=f"text-{index}"))

    return segments
