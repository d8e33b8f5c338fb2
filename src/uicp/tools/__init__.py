"""
Agent-facing tools: component discovery, block construction, LangChain
bindings and system-prompt guidance.
"""
