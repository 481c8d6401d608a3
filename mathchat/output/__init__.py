"""Output layer: typesetting, segment rendering, and page wrapping."""

from .renderer import AnswerRenderer, SegmentRenderer
from .typesetter import (
    BaseTypesetter,
    MathJaxTypesetter,
    MatplotlibTypesetter,
    TypesetResult,
    get_typesetter,
)
from .page import wrap_page, get_theme

__all__ = [
    "AnswerRenderer",
    "SegmentRenderer",
    "BaseTypesetter",
    "MathJaxTypesetter",
    "MatplotlibTypesetter",
    "TypesetResult",
    "get_typesetter",
    "wrap_page",
    "get_theme",
]
