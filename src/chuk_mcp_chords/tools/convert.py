"""
Notation tools - MCP tools for parsing and converting chord notation.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from chuk_mcp_chords.constants import ConvertTarget, ErrorMessages
from chuk_mcp_chords.core.pitch import PitchClass
from chuk_mcp_chords.formats import get_format
from chuk_mcp_chords.notation import ChordNode, Comment, as_degree, as_pitch, render_node
from chuk_mcp_chords.notation.ast import Score

if TYPE_CHECKING:
    from chuk_mcp_server import ChukMCPServer

logger = logging.getLogger(__name__)


def describe_score(score: Score) -> list[dict[str, Any]]:
    """JSON-friendly outline of a parsed score."""
    outline: list[dict[str, Any]] = []
    for item in score.items:
        if isinstance(item, Comment):
            outline.append({"comment": item.text})
            continue
        outline.append(
            {
                "nodes": [render_node(node) for node in item.nodes],
                "chords": sum(1 for node in item.nodes if isinstance(node, ChordNode)),
                "hard_break": item.hard_break,
            }
        )
    return outline


def convert_score(score: Score, target: ConvertTarget | None, tonic: str | None) -> Score:
    """Rewrite keys to the target form, in place."""
    if target is None:
        return score
    if tonic is None:
        raise ValueError(f"A tonic is required to convert to {target.value}")
    pitch = PitchClass.parse(tonic)
    if target == ConvertTarget.PITCH:
        return as_pitch(score, pitch)
    return as_degree(score, pitch)


def register_convert_tools(mcp: ChukMCPServer) -> dict[str, Any]:
    """
    Register notation tools with the MCP server.

    Args:
        mcp: The MCP server instance

    Returns:
        Dictionary of registered tool functions
    """
    tools: dict[str, Any] = {}

    @mcp.tool  # type: ignore[arg-type]
    async def chord_parse(text: str, dialect: str = "rechord") -> str:
        """
        Parse chord notation and show its structure.

        Args:
            text: Chord notation, e.g. "C | Am F G"
            dialect: Input dialect ('rechord' or 'sexp')

        Returns:
            JSON string with the measure outline and canonical rendering

        Example:
            chord_parse(text="C | Am7 = F G7/B")
        """
        try:
            fmt = get_format(dialect)
            score = fmt.parse(text)
            return json.dumps(
                {
                    "status": "success",
                    "measures": len(score.measures()),
                    "items": describe_score(score),
                    "rendered": fmt.render(score),
                }
            )
        except Exception as e:
            logger.exception("Failed to parse notation")
            return json.dumps({"status": "error", "message": str(e)})

    tools["chord_parse"] = chord_parse

    @mcp.tool  # type: ignore[arg-type]
    async def chord_convert(
        text: str,
        as_pitch: str | None = None,
        as_degree: str | None = None,
        dialect: str = "rechord",
        output_dialect: str | None = None,
    ) -> str:
        """
        Convert chord notation between pitch names and roman numerals.

        Give at most one of as_pitch / as_degree. Without either the
        text is only re-rendered (useful for dialect conversion).

        Args:
            text: Chord notation
            as_pitch: Tonic to resolve roman numerals against (e.g. "D")
            as_degree: Tonic to express pitches relative to (e.g. "C")
            dialect: Input dialect ('rechord' or 'sexp')
            output_dialect: Output dialect (defaults to the input dialect)

        Returns:
            JSON string with the converted text

        Example:
            chord_convert(text="C | Am F G", as_degree="C")
        """
        try:
            if as_pitch is not None and as_degree is not None:
                return json.dumps(
                    {"status": "error", "message": ErrorMessages.CONFLICTING_TARGETS}
                )
            target, tonic = None, None
            if as_pitch is not None:
                target, tonic = ConvertTarget.PITCH, as_pitch
            elif as_degree is not None:
                target, tonic = ConvertTarget.DEGREE, as_degree

            score = convert_score(get_format(dialect).parse(text), target, tonic)
            output = get_format(output_dialect or dialect).render(score)
            return json.dumps(
                {
                    "status": "success",
                    "text": output,
                    "target": target.value if target else None,
                    "tonic": tonic,
                }
            )
        except Exception as e:
            logger.exception("Failed to convert notation")
            return json.dumps({"status": "error", "message": str(e)})

    tools["chord_convert"] = chord_convert

    return tools
