"""
Built-in HTML renderers.

Each module defines one BaseComponentRenderer subclass for a registry uid.
They are wired into the ComponentResolver at startup when
APP_CONFIG.LOAD_BUILTIN_RENDERERS is set.
"""
