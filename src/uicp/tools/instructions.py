"""
System-prompt guidance for agents that emit protocol blocks.

get_protocol_instructions() returns the workflow text to inject into the
agent's system prompt: discover components first, construct a block with the
construction tool, paste the returned block verbatim, and always finish with
a text answer.
"""

from typing import Optional

from uicp.components.registry import DefinitionRegistry, get_definition_registry
from uicp.tools.component_tools import CREATE_UI_COMPONENT, GET_UI_COMPONENTS

_INSTRUCTIONS_TEMPLATE = """\
UICP (User Interface Context Protocol) - MANDATORY WORKFLOW:

RULE: Before preparing ANY response, call {discover} to check for visual components.

STEP 1 (MANDATORY): Call {discover}
        - Filter by type ({types}) or leave empty to see all
STEP 2 (IF NEEDED): Use other tools to gather information
STEP 3 (IF COMPONENT AVAILABLE): Call {construct} with:
        * uid: the component identifier ({uids})
        * data: object with all required fields from the schema
        This returns a "uicp_block" string
STEP 4 (MANDATORY): Write your final text response
        - If you created a component, paste the ENTIRE uicp_block in your response
        - Tool calls alone are not enough: always answer with text
"""


def get_protocol_instructions(registry: Optional[DefinitionRegistry] = None) -> str:
    """Workflow text for the system prompt, or empty string if no components exist."""
    if registry is None:
        registry = get_definition_registry()

    if not len(registry):
        return ""

    return _INSTRUCTIONS_TEMPLATE.format(
        discover=GET_UI_COMPONENTS,
        construct=CREATE_UI_COMPONENT,
        types=", ".join(f'"{t}"' for t in registry.types()),
        uids=", ".join(f'"{u}"' for u in registry.uids()),
    )
