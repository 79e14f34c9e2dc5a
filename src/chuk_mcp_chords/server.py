#!/usr/bin/env python3
"""
Entry point for the CHUK Chords MCP Server.

Serves the chord notation tools (chord_parse, chord_convert,
chord_resolve, chord_interpret, chord_export_midi, chord_compile_ir)
over stdio or http. MIDI files from chord_export_midi are written to
./output unless --output-dir says otherwise.
"""

import argparse
import asyncio
import logging
import os
from collections.abc import Sequence

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Read by async_server when it is first imported
OUTPUT_DIR_ENV = "CHUK_CHORDS_OUTPUT_DIR"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chuk-mcp-chords", description="MCP server for chord-progression notation"
    )
    parser.add_argument(
        "--transport",
        choices=["stdio", "http"],
        default="stdio",
        help="Transport mode (default: stdio)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="HTTP port (only for http transport)",
    )
    parser.add_argument(
        "--output-dir",
        help="Directory for exported MIDI files (default: ./output)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging (includes the interpreter trace)",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    """Parse arguments, then start the server on the chosen transport."""
    args = build_parser().parse_args(argv)

    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)
    if args.output_dir:
        os.environ[OUTPUT_DIR_ENV] = args.output_dir

    # The server registers its tools on import, so configure first
    from chuk_mcp_chords.async_server import OUTPUT_DIR, mcp

    logger.info(f"MIDI output: {OUTPUT_DIR}")
    if args.transport == "stdio":
        logger.info("Serving chord tools over stdio")
        asyncio.run(mcp.run_stdio())
    else:
        logger.info(f"Serving chord tools over http on port {args.port}")
        asyncio.run(mcp.run_http(port=args.port))


if __name__ == "__main__":
    main()
