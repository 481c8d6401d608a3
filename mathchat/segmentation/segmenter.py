"""
Mixed-mode markup segmenter.

Splits raw answer text into plain text, inline math and block math segments.

Recognised notations, in priority order at any given position:

    \\[ ... \\]          block, may span lines
    $$ ... $$          block, may span lines
    \\( ... \\)          inline, single line
    $ ... $            inline, single line, non-empty
    (\\cmd{...})        inline named expression, cmd from a whitelist

Block forms are tried before inline forms because `$` is a prefix of `$$`;
all closing delimiters are matched lazily so `$a$ and $b$` yields two
expressions.
"""

import re
from typing import Iterable, List, Optional, Sequence

from ..models import Segment, SegmentKind

DEFAULT_ESCAPE_SUBSTITUTES = ("¥", "￥")
DEFAULT_NAMED_COMMANDS = ("ce", "mathrm", "text")

BLOCK_BRACKET = r"(?P<bracket>\\\[[\s\S]*?\\\])"
BLOCK_DOLLARS = r"(?P<dollars>\$\$[\s\S]*?\$\$)"
INLINE_PAREN = r"(?P<paren>\\\([^\n\r]*?\\\))"
INLINE_DOLLAR = r"(?P<dollar>\$[^$\n\r]+?\$)"
NAMED_TEMPLATE = r"(?P<named>\([ \t]*\\(?P<command>{commands})\{{[^}}\n\r]*\}}[ \t]*\))"


def build_pattern(named_commands: Iterable[str]) -> re.Pattern:
    """
    Compile the ordered alternation used to find math candidates.

    The named-expression alternative is built from `named_commands` so the
    scanner and the classifier share one whitelist.
    """
    # Longest first so no command shadows another that extends it
    commands = sorted(set(named_commands), key=lambda name: (-len(name), name))
    alternatives = [BLOCK_BRACKET, BLOCK_DOLLARS, INLINE_PAREN, INLINE_DOLLAR]
    if commands:
        alternatives.append(
            NAMED_TEMPLATE.format(commands="|".join(re.escape(c) for c in commands))
        )
    return re.compile("|".join(alternatives))


class Segmenter:
    """
    Partition answer text into an ordered list of Segments.

    Total: any input yields a list, at worst a single PLAIN_TEXT segment.
    Instances hold only immutable configuration and can be shared.

    Usage:
        segmenter = Segmenter()
        for seg in segmenter.segment(r"Energy: $E = mc^2$"):
            print(seg.kind, seg.content)
    """

    def __init__(
        self,
        escape_substitutes: Sequence[str] = DEFAULT_ESCAPE_SUBSTITUTES,
        named_commands: Sequence[str] = DEFAULT_NAMED_COMMANDS,
    ):
        """
        Initialize the segmenter.

        Args:
            escape_substitutes: Characters rewritten to a backslash before
                matching (keyboard layouts that type a yen sign for `\\`)
            named_commands: Whitelist for the `(\\cmd{...})` form
        """
        if "\\" in escape_substitutes:
            raise ValueError("the backslash cannot be its own substitute")
        self.escape_substitutes = tuple(escape_substitutes)
        self.named_commands = tuple(named_commands)
        self._pattern = build_pattern(self.named_commands)

    @classmethod
    def from_config(cls, config) -> "Segmenter":
        """Build from a SegmenterConfig."""
        return cls(
            escape_substitutes=config.escape_substitutes,
            named_commands=config.named_commands,
        )

    @property
    def pattern(self) -> re.Pattern:
        return self._pattern

    def normalize(self, text: str) -> str:
        """Replace every backslash substitute with a literal backslash."""
        for char in self.escape_substitutes:
            text = text.replace(char, "\\")
        return text

    def segment(self, raw: str) -> List[Segment]:
        """
        Segment raw answer text.

        Args:
            raw: Answer text as received from the model

        Returns:
            Ordered, non-overlapping segments. Whitespace-only gaps between
            matches produce no segment.
        """
        if not raw:
            return []

        text = self.normalize(raw)
        segments: List[Segment] = []
        cursor = 0

        for match in self._pattern.finditer(text):
            start, end = match.span()
            if start > cursor:
                self._append_text(segments, text[cursor:start])
            segments.append(self._classify(match))
            cursor = end

        if cursor < len(text):
            self._append_text(segments, text[cursor:])

        return [seg for seg in segments if seg.content.strip()]

    def _append_text(self, segments: List[Segment], chunk: str) -> None:
        segments.append(Segment(SegmentKind.PLAIN_TEXT, chunk))

    def _classify(self, match: "re.Match") -> Segment:
        """Turn one regex match into a Segment, degrading empty math to text."""
        original = match.group(0)
        command: Optional[str] = None

        if match.group("bracket") is not None or match.group("dollars") is not None:
            kind = SegmentKind.BLOCK_MATH
            content = original[2:-2].strip()
        elif match.group("paren") is not None:
            kind = SegmentKind.INLINE_MATH
            content = original[2:-2].strip()
        elif match.group("dollar") is not None:
            kind = SegmentKind.INLINE_MATH
            content = original[1:-1].strip()
        else:
            # Named form: drop only the outer parentheses, keep \cmd{...}
            kind = SegmentKind.INLINE_MATH
            content = original[1:-1].strip()
            command = match.group("command")

        if kind is SegmentKind.INLINE_MATH and ("\n" in content or "\r" in content):
            return Segment(SegmentKind.PLAIN_TEXT, original)
        if not content:
            return Segment(SegmentKind.PLAIN_TEXT, original)

        return Segment(kind, content, original_match=original, command=command)


_default_segmenter = Segmenter()


def normalize(text: str) -> str:
    """Normalize with the default backslash substitutes."""
    return _default_segmenter.normalize(text)


def segment(raw: str) -> List[Segment]:
    """Segment text with the default configuration."""
    return _default_segmenter.segment(raw)


def reconstruct(segments: Iterable[Segment]) -> str:
    """
    Concatenate the source slices of `segments`.

    Equals the normalized input minus any whitespace-only gaps.
    """
    return "".join(seg.source_text for seg in segments)
