"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use MARKWEAVE_ prefix (e.g., MARKWEAVE_UNTERMINATED_FENCE=error).

Settings can also be loaded from a .env file in the project root.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use MARKWEAVE_ prefix.

    Examples:
        MARKWEAVE_UNTERMINATED_FENCE=error
        MARKWEAVE_STRIP_ORDERED_LABELS=true
        MARKWEAVE_BULLET_GLYPH="- "
    """

    model_config = SettingsConfigDict(
        env_prefix="MARKWEAVE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Segmenter configuration
    fence_marker: str = Field(
        default="```",
        description="Marker that opens and closes a fenced code block (matched on trimmed lines)",
    )

    unterminated_fence: Literal["flush", "error"] = Field(
        default="flush",
        description="Policy for a code fence still open at end of input: flush as a code block or raise",
    )

    strip_ordered_labels: bool = Field(
        default=False,
        description="Remove numeric labels ('1. ') from ordered list items in both dialects",
    )

    # Slide extraction configuration
    bullet_glyph: str = Field(
        default="• ",
        description="Glyph that replaces '*' and '-' bullet markers inside slide content",
    )

    # Rendering configuration
    pygments_style: str = Field(
        default="default",
        description="Pygments style used to highlight fenced code blocks in HTML output",
    )

    # CLI behaviour
    debug_mode: bool = Field(
        default=False,
        description="Enable debug output during conversion",
    )

    strict_mode: bool = Field(
        default=False,
        description="Strict mode: treat unterminated fences and empty results as errors",
    )

    def fence_is(self, line: str) -> bool:
        """
        Check whether a source line is a code fence.

        Args:
            line: Raw source line

        Returns:
            True if the trimmed line starts with the fence marker

        Example:
            >>> AppSettings().fence_is("   ```python")
            True
        """
        return line.strip().startswith(self.fence_marker)

    def fenceLanguage_extract(self, line: str) -> str | None:
        """
        Extract the info string that follows an opening fence.

        Args:
            line: Fence line (e.g. "```python")

        Returns:
            Language name, or None if the fence carries no info string

        Example:
            >>> AppSettings().fenceLanguage_extract("```python")
            'python'
        """
        info = line.strip()[len(self.fence_marker):].strip()
        if not info:
            return None
        return info.split()[0]


# Singleton instance - import this in your code
appsettings = AppSettings()
