"""Validator: checks a block's uid and required fields against the registry."""

from typing import Optional

from uicp.components.registry import DefinitionRegistry, get_definition_registry
from uicp.protocol.models import ComponentBlock, ValidationResult


def validate_block(
    block: ComponentBlock,
    registry: Optional[DefinitionRegistry] = None,
) -> ValidationResult:
    """
    Validate a block against its component definition.

    An unknown uid yields exactly one error and no field checks. Otherwise
    one error is reported per missing required field, in schema order.
    Undeclared fields in ``data`` are allowed.
    """
    if registry is None:
        registry = get_definition_registry()

    component = registry.get(block.uid)
    if component is None:
        return ValidationResult(valid=False, errors=[f"Unknown component UID: {block.uid}"])

    errors = [
        f"Missing required field: {name}"
        for name in component.required_fields()
        if name not in block.data
    ]
    return ValidationResult(valid=not errors, errors=errors)
