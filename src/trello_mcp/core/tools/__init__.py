"""
Tool modules for trello-mcp.

Each module declares a TOOLS tuple of ToolSpec entries; modules whose name
starts with an underscore hold shared helpers and are not scanned.
"""
