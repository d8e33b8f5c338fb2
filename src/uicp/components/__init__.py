"""
Component registry and renderer resolution.

Two independent halves:
  - DefinitionRegistry: static catalog of component uids and input schemas,
    loaded once from definitions.json
  - ComponentResolver: runtime uid → renderer map, with built-in renderers,
    plugin discovery and late registration

Usage::

    from uicp.components.registry import get_definition_registry
    from uicp.components.resolver import get_component_resolver

    registry = get_definition_registry()
    resolver = get_component_resolver()
    resolver.register("LineChart", my_line_chart_renderer)
"""
