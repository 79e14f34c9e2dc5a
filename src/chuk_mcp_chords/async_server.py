#!/usr/bin/env python3
"""
Async Chord MCP Server using chuk-mcp-server

This server provides MCP tools for working with compact chord-progression
notation: chord symbols, roman-numeral degrees and rhythm markers grouped
into measures.

The server provides tools for:
- Parsing notation and converting between pitch names and roman numerals
- Resolving single chord symbols to notes
- Interpreting scores into timed note lists
- Compiling scores to Score IR and MIDI files
"""

import logging
import os
from pathlib import Path

from chuk_mcp_server import ChukMCPServer

from chuk_mcp_chords.tools import register_convert_tools, register_export_tools

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Create the MCP server instance
mcp = ChukMCPServer("chuk-mcp-chords")

# Paths - use standard project structure
BASE_PATH = Path.cwd()
OUTPUT_DIR = Path(os.environ.get("CHUK_CHORDS_OUTPUT_DIR", BASE_PATH / "output"))

# Register all tools
convert_tools = register_convert_tools(mcp)
export_tools = register_export_tools(mcp, OUTPUT_DIR)

# Export tool functions for direct access
chord_parse = convert_tools["chord_parse"]
chord_convert = convert_tools["chord_convert"]

chord_resolve = export_tools["chord_resolve"]
chord_interpret = export_tools["chord_interpret"]
chord_export_midi = export_tools["chord_export_midi"]
chord_compile_ir = export_tools["chord_compile_ir"]

logger.info("CHUK Chords MCP Server initialized")
logger.info(f"  Output dir: {OUTPUT_DIR}")
