"""
MCP tool implementations.

Tools are organized by domain:
- convert - Parsing and pitch/degree conversion
- export - Chord resolution, interpretation and MIDI export
"""

from chuk_mcp_chords.tools.convert import register_convert_tools
from chuk_mcp_chords.tools.export import register_export_tools

__all__ = [
    "register_convert_tools",
    "register_export_tools",
]
