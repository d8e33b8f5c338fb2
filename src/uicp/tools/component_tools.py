"""
Discovery & Construction tools.

Two operations the agent calls through its tool-invocation mechanism:

  get_ui_components   → discover_components()
      List registry entries, optionally filtered by uid or category.

  create_ui_component → construct_component()
      Check a data object against a component's required fields and return
      the protocol block string to paste verbatim into the response.

Both always return a JSON-serializable payload dict with a ``success`` flag;
failures carry enough detail (known types, known uids, missing fields,
schema) for the agent to correct itself and retry.
"""

import logging
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, ValidationError

from uicp.components.registry import DefinitionRegistry, get_definition_registry
from uicp.protocol.extractor import format_block

logger = logging.getLogger("quart.app")

GET_UI_COMPONENTS = "get_ui_components"
CREATE_UI_COMPONENT = "create_ui_component"

# ---------------------------------------------------------------------------
# Tool argument models
# ---------------------------------------------------------------------------

class DiscoverComponentsInput(BaseModel):
    component_type: Optional[str] = Field(
        default=None,
        description='Filter by component type (e.g., "sports", "chart", "news")',
    )
    uid: Optional[str] = Field(
        default=None,
        description="Get a specific component by its unique identifier",
    )


class CreateComponentInput(BaseModel):
    uid: str = Field(
        ...,
        min_length=1,
        description='The unique identifier of the component (e.g., "NBAGameScore")',
    )
    data: Dict[str, Any] = Field(
        ...,
        description="The data object containing all required and optional fields for the component",
    )


def _invalid_arguments(tool_name: str, error: ValidationError) -> Dict[str, Any]:
    logger.warning(f"{tool_name}: invalid arguments: {error}")
    return {
        "success": False,
        "error": "Invalid arguments",
        "details": error.errors(include_url=False),
    }


# ---------------------------------------------------------------------------
# Discover
# ---------------------------------------------------------------------------

def discover_components(
    component_type: Optional[str] = None,
    uid: Optional[str] = None,
    registry: Optional[DefinitionRegistry] = None,
) -> Dict[str, Any]:
    """
    List component definitions.

    A ``uid`` filter takes precedence over ``component_type``. When nothing
    matches, the failure payload lists every category tag in the registry.
    """
    try:
        args = DiscoverComponentsInput(component_type=component_type, uid=uid)
    except ValidationError as e:
        return _invalid_arguments(GET_UI_COMPONENTS, e)

    if registry is None:
        registry = get_definition_registry()

    if args.uid:
        component = registry.get(args.uid)
        components = [component] if component else []
    elif args.component_type:
        components = registry.by_type(args.component_type)
    else:
        components = list(registry.all())

    if not components:
        if args.uid:
            message = f"No component found with UID: {args.uid}"
        elif args.component_type:
            message = f"No components found with type: {args.component_type}"
        else:
            message = "No components available"
        logger.info(f"{GET_UI_COMPONENTS}: {message}")
        return {
            "success": False,
            "message": message,
            "available_types": registry.types(),
        }

    return {
        "success": True,
        "version": registry.version,
        "components": [c.to_api_dict() for c in components],
        "usage": {
            "instructions": (
                f"Use the {CREATE_UI_COMPONENT} tool to generate a UICP block "
                "with the component data"
            ),
            "format": "UICP blocks are code blocks with ```uicp prefix containing JSON with uid and data",
        },
    }


# ---------------------------------------------------------------------------
# Construct
# ---------------------------------------------------------------------------

def construct_component(
    uid: str,
    data: Dict[str, Any],
    registry: Optional[DefinitionRegistry] = None,
) -> Dict[str, Any]:
    """
    Validate ``data`` against the required fields of ``uid`` and serialize
    it as a protocol block.

    Only required-field presence is checked; extra fields are kept.
    """
    try:
        args = CreateComponentInput(uid=uid, data=data)
    except ValidationError as e:
        return _invalid_arguments(CREATE_UI_COMPONENT, e)

    if registry is None:
        registry = get_definition_registry()

    component = registry.get(args.uid)
    if component is None:
        logger.info(f"{CREATE_UI_COMPONENT}: unknown component UID '{args.uid}'")
        return {
            "success": False,
            "error": f"Unknown component UID: {args.uid}",
            "available_components": registry.uids(),
        }

    missing_fields = [name for name in component.required_fields() if name not in args.data]
    if missing_fields:
        logger.info(
            f"{CREATE_UI_COMPONENT}: '{args.uid}' missing required fields: "
            f"{', '.join(missing_fields)}"
        )
        return {
            "success": False,
            "error": "Missing required fields",
            "missing_fields": missing_fields,
            "component_schema": component.to_api_dict()["inputs"],
        }

    try:
        block = format_block(args.uid, args.data)
    except (TypeError, ValueError) as e:
        return {
            "success": False,
            "error": f"Component data is not JSON-serializable: {e}",
        }

    return {
        "success": True,
        "message": f"Successfully created {component.type} component: {args.uid}",
        "uicp_block": block,
        "instructions": {
            "usage": "Include the uicp_block string directly in your response text",
            "note": "The UICP block will be automatically parsed and rendered as a visual component",
        },
    }
