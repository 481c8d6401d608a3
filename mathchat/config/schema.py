from __future__ import annotations

from typing import List, Literal

from pydantic import BaseModel, Field, field_validator


class SegmenterConfig(BaseModel):
    """Notation settings for splitting answers into text and math."""

    escape_substitutes: List[str] = Field(
        default_factory=lambda: ["¥", "￥"],
        description="Characters typed in place of a backslash on some keyboard layouts.",
    )
    named_commands: List[str] = Field(
        default_factory=lambda: ["ce", "mathrm", "text"],
        description="Commands recognised in the '(\\cmd{...})' named-expression form.",
    )
    chemistry_commands: List[str] = Field(default_factory=lambda: ["ce"])

    @field_validator("escape_substitutes")
    @classmethod
    def single_non_backslash_chars(cls, value: List[str]) -> List[str]:
        """Substitutes must be single characters other than the backslash itself."""
        for char in value:
            if len(char) != 1:
                raise ValueError(f"escape substitute must be one character, got {char!r}")
            if char == "\\":
                raise ValueError("the backslash cannot be its own substitute")
        return value

    @field_validator("named_commands")
    @classmethod
    def non_empty_alpha_commands(cls, value: List[str]) -> List[str]:
        """Command names are bare letters, without the leading backslash."""
        if not value:
            raise ValueError("named_commands must not be empty")
        for name in value:
            if not name.isalpha():
                raise ValueError(f"invalid command name: {name!r}")
        return value


class RenderConfig(BaseModel):
    """Typesetting backend and presentation options."""

    backend: Literal["matplotlib", "mathjax"] = "matplotlib"
    fontsize: int = Field(14, ge=6, le=72)
    dpi: int = Field(150, ge=50, le=600)
    image_format: Literal["png", "svg"] = "png"
    promote_long_inline: bool = False
    long_formula_threshold: int = Field(50, ge=1)
    error_label: str = Field("LaTeX Error", description="Prefix for error marker tooltips.")


class LoggingConfig(BaseModel):
    """Controls for logging output and format."""

    level: str = Field("INFO")
    json_output: bool = Field(False, alias="json")

    model_config = {"populate_by_name": True}


class Settings(BaseModel):
    """Top-level configuration aggregating all sub-settings."""

    segmenter: SegmenterConfig = Field(default_factory=SegmenterConfig)
    render: RenderConfig = Field(default_factory=RenderConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
