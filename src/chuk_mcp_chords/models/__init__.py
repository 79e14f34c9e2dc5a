"""
Pydantic models for export configuration.
"""

from chuk_mcp_chords.models.settings import ExportSettings, load_settings

__all__ = ["ExportSettings", "load_settings"]
