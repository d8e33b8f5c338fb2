# src/uicp/api/uicp_routes.py
import logging
from typing import Optional

from pydantic import BaseModel, Field, ValidationError
from quart import Blueprint, jsonify, request

from uicp.components.resolver import get_component_resolver
from uicp.protocol.composer import compose_segments
from uicp.protocol.extractor import has_blocks
from uicp.tools.component_tools import construct_component, discover_components
from uicp.tools.instructions import get_protocol_instructions

uicp_bp = Blueprint('uicp', __name__, url_prefix='/api/v1/uicp')
logger = logging.getLogger("quart.app")


class RenderRequest(BaseModel):
    content: str = Field(default="", max_length=1_000_000)
    truncate_incomplete: Optional[bool] = None


class ConstructRequest(BaseModel):
    uid: str = Field(..., min_length=1)
    data: dict = Field(default_factory=dict)


async def _json_body() -> dict:
    data = await request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


@uicp_bp.route('/components', methods=['GET'])
async def list_components():
    """Discover component definitions, optionally filtered by ?component_type= or ?uid=."""
    payload = discover_components(
        component_type=request.args.get('component_type') or None,
        uid=request.args.get('uid') or None,
    )
    return jsonify(payload), (200 if payload["success"] else 404)


@uicp_bp.route('/components/construct', methods=['POST'])
async def construct():
    """Validate component data and return the protocol block string."""
    try:
        body = ConstructRequest(**(await _json_body()))
    except ValidationError as e:
        logger.warning(f"Construct request validation error: {e}")
        return jsonify({"success": False, "error": "Invalid request", "details": e.errors(include_url=False)}), 400

    payload = construct_component(body.uid, body.data)
    return jsonify(payload), (200 if payload["success"] else 400)


@uicp_bp.route('/render', methods=['POST'])
async def render():
    """Compose display segments for (possibly partial) message content."""
    try:
        body = RenderRequest(**(await _json_body()))
    except ValidationError as e:
        logger.warning(f"Render request validation error: {e}")
        return jsonify({"success": False, "error": "Invalid request", "details": e.errors(include_url=False)}), 400

    segments = compose_segments(body.content, truncate_incomplete=body.truncate_incomplete)
    return jsonify({
        "success": True,
        "has_blocks": has_blocks(body.content),
        "segments": [s.to_api_dict() for s in segments],
    })


@uicp_bp.route('/renderers', methods=['GET'])
async def list_renderers():
    """Identifiers that currently have a renderer wired up."""
    return jsonify({"success": True, "renderers": get_component_resolver().registered_ids()})


@uicp_bp.route('/instructions', methods=['GET'])
async def instructions():
    """System-prompt workflow text for agents."""
    return jsonify({"success": True, "instructions": get_protocol_instructions()})
