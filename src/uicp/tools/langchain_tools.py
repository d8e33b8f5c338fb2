"""
LangChain bindings for the discovery and construction tools.

Wraps discover_components() and construct_component() as StructuredTool
objects so a tool-calling agent can use them alongside its other tools.
Each tool returns its payload serialized as JSON.
"""

import json
import logging
from typing import Any, Dict, List, Optional

from langchain_core.tools import StructuredTool

from uicp.components.registry import DefinitionRegistry
from uicp.tools.component_tools import (
    CREATE_UI_COMPONENT,
    GET_UI_COMPONENTS,
    CreateComponentInput,
    DiscoverComponentsInput,
    construct_component,
    discover_components,
)

logger = logging.getLogger("quart.app")

GET_UI_COMPONENTS_DESCRIPTION = (
    "Discover available UI components that can be used in responses. "
    "Use this tool to find out what custom UI components are available, their input "
    "schemas, and examples. This is useful when you want to display rich, interactive "
    "content like sports scores, charts, or other visual elements."
)

CREATE_UI_COMPONENT_DESCRIPTION = (
    "Create a UICP (User Interface Context Protocol) block for rendering a custom UI "
    "component. This tool validates the component data against the schema and returns "
    "a formatted code block that will be parsed and rendered as a rich UI component in "
    f"the chat interface. Always use this tool after discovering components with {GET_UI_COMPONENTS}."
)


def get_uicp_langchain_tools(registry: Optional[DefinitionRegistry] = None) -> List[StructuredTool]:
    """
    Create the get_ui_components and create_ui_component tools.

    Args:
        registry: Registry to bind the tools to (default: singleton, resolved
                  at call time).
    """

    def _get_ui_components(
        component_type: Optional[str] = None,
        uid: Optional[str] = None,
    ) -> str:
        payload = discover_components(component_type=component_type, uid=uid, registry=registry)
        return json.dumps(payload, ensure_ascii=False)

    def _create_ui_component(uid: str, data: Dict[str, Any]) -> str:
        payload = construct_component(uid=uid, data=data, registry=registry)
        return json.dumps(payload, ensure_ascii=False)

    tools = [
        StructuredTool.from_function(
            func=_get_ui_components,
            name=GET_UI_COMPONENTS,
            description=GET_UI_COMPONENTS_DESCRIPTION,
            args_schema=DiscoverComponentsInput,
        ),
        StructuredTool.from_function(
            func=_create_ui_component,
            name=CREATE_UI_COMPONENT,
            description=CREATE_UI_COMPONENT_DESCRIPTION,
            args_schema=CreateComponentInput,
        ),
    ]

    logger.info(f"Created {len(tools)} UICP LangChain tool(s): {', '.join(t.name for t in tools)}")
    return tools
