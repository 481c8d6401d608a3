"""
Core data structures for mathchat.

These dataclasses define the contract between the segmenter and the renderer.
"""

from dataclasses import dataclass, field
from typing import Optional, List
from enum import Enum, auto


class SegmentKind(Enum):
    """Classification categories for answer segments."""

    PLAIN_TEXT = auto()
    INLINE_MATH = auto()
    BLOCK_MATH = auto()


class ColorScheme(Enum):
    """Which side of the conversation an answer is rendered for."""

    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class Segment:
    """
    One classified, ordered unit of answer content.

    For math kinds `content` holds the expression with delimiters stripped and
    `original_match` the untouched delimited slice, so a failed render can show
    exactly what the user was sent.
    """

    kind: SegmentKind
    content: str
    original_match: Optional[str] = None
    command: Optional[str] = None  # Named-form command; chemistry commands are typeset as \ce markup

    @property
    def is_math(self) -> bool:
        return self.kind is not SegmentKind.PLAIN_TEXT

    @property
    def source_text(self) -> str:
        """The slice of normalized input this segment was built from."""
        if self.is_math and self.original_match is not None:
            return self.original_match
        return self.content

    def to_dict(self) -> dict:
        data = {"kind": self.kind.name.lower(), "content": self.content}
        if self.original_match is not None:
            data["original_match"] = self.original_match
        if self.command is not None:
            data["command"] = self.command
        return data


@dataclass
class RenderedNode:
    """Rendered output for a single segment."""

    segment: Segment
    html: str
    block: bool = False
    failed: bool = False
    error_message: Optional[str] = None


@dataclass
class RenderedAnswer:
    """
    A whole answer after segmentation and rendering.

    Nodes are in segment order; failed nodes carry an error marker instead of
    typeset math.
    """

    nodes: List[RenderedNode] = field(default_factory=list)
    color_scheme: ColorScheme = ColorScheme.ASSISTANT

    @property
    def html(self) -> str:
        return "".join(node.html for node in self.nodes)

    @property
    def failures(self) -> List[RenderedNode]:
        return [node for node in self.nodes if node.failed]
