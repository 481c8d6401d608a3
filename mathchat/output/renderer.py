"""
Segment rendering for chat answers.

Renders text through markdown and math through a typesetter, turning every
math failure into a visible marker so one bad expression never blanks the
rest of an answer.
"""

from typing import Callable, List, Optional, Sequence, Union
import html

from markdown_it import MarkdownIt

from ..models import ColorScheme, RenderedAnswer, RenderedNode, Segment, SegmentKind
from ..segmentation import Segmenter
from ..utils.errors import TypesetError, format_error_for_user
from ..utils.logging import StructlogFailureSink, get_logger
from .page import get_theme
from .typesetter import BaseTypesetter, TypesetResult, get_typesetter, typesetter_from_config

logger = get_logger(__name__)

LogSink = Callable[[str, str], None]

# Content that reads badly on a single line
MULTILINE_INDICATORS = (
    "\\begin{",
    "\\end{",
    "\\\\",
    "\\sum",
    "\\int",
    "\\prod",
    "\\matrix",
    "\\pmatrix",
    "\\bmatrix",
)


def resolve_scheme(color_scheme: Union[ColorScheme, str]) -> ColorScheme:
    """Coerce a scheme name, falling back to the assistant palette."""
    try:
        return ColorScheme(color_scheme)
    except ValueError:
        logger.warning("unknown_color_scheme", color_scheme=color_scheme)
        return ColorScheme.ASSISTANT


def build_markdown() -> MarkdownIt:
    """Markdown pipeline for plain text segments (CommonMark + tables, strikethrough)."""
    return MarkdownIt("commonmark", {"html": False}).enable("table").enable("strikethrough")


class SegmentRenderer:
    """
    Render one Segment at a time.

    Stateless between calls: the typesetter, markdown pipeline and log sink
    are fixed at construction.

    Usage:
        renderer = SegmentRenderer(typesetter=get_typesetter("mathjax"))
        node = renderer.render(segment, ColorScheme.ASSISTANT)
    """

    def __init__(
        self,
        typesetter: Optional[BaseTypesetter] = None,
        log_sink: Optional[LogSink] = None,
        error_label: str = "LaTeX Error",
        promote_long_inline: bool = False,
        long_formula_threshold: int = 50,
        chemistry_commands: Sequence[str] = ("ce",),
        markdown: Optional[MarkdownIt] = None,
    ):
        """
        Initialize renderer.

        Args:
            typesetter: Math backend (matplotlib mathtext if None)
            log_sink: Called as sink(description, content) for each failure
            error_label: Localizable prefix for error marker tooltips
            promote_long_inline: Typeset long or multi-line inline math in
                display mode
            long_formula_threshold: Length at which inline math counts as long
            chemistry_commands: Named-form commands typeset as chemistry markup
            markdown: Markdown pipeline for plain text
        """
        self.typesetter = typesetter or get_typesetter("matplotlib")
        self.log_sink = log_sink or StructlogFailureSink()
        self.error_label = error_label
        self.promote_long_inline = promote_long_inline
        self.long_formula_threshold = long_formula_threshold
        self.chemistry_commands = tuple(chemistry_commands)
        self.markdown = markdown or build_markdown()

    @classmethod
    def from_settings(cls, settings, log_sink: Optional[LogSink] = None) -> "SegmentRenderer":
        """Build from a Settings object."""
        render = settings.render
        return cls(
            typesetter=typesetter_from_config(render),
            log_sink=log_sink,
            error_label=render.error_label,
            promote_long_inline=render.promote_long_inline,
            long_formula_threshold=render.long_formula_threshold,
            chemistry_commands=settings.segmenter.chemistry_commands,
        )

    def render(
        self,
        segment: Segment,
        color_scheme: Union[ColorScheme, str] = ColorScheme.ASSISTANT,
    ) -> Optional[RenderedNode]:
        """
        Render a segment to HTML.

        Returns None for empty content. Never raises: math failures come
        back as a node with `failed=True` showing the original markup, and an
        unknown colour scheme falls back to the assistant palette.
        """
        if not segment.content or not segment.content.strip():
            return None

        if segment.kind is SegmentKind.PLAIN_TEXT:
            return self._render_text(segment)

        theme = get_theme(resolve_scheme(color_scheme))
        display = segment.kind is SegmentKind.BLOCK_MATH or self.should_promote(segment)
        chemistry = segment.command is not None and segment.command in self.chemistry_commands

        try:
            result = self.typesetter.typeset(
                segment.content,
                display=display,
                color=theme["math_color"],
                chemistry=chemistry,
            )
        except Exception as e:
            error = TypesetError.from_exception(
                e, expression=segment.content, context=self.typesetter.name
            )
            result = TypesetResult.failure(error, backend=self.typesetter.name)

        if result.success:
            return RenderedNode(segment, self._wrap_math(result.output, display), block=display)

        error = result.error
        if error is None:
            error = TypesetError("Typesetting failed", expression=segment.content)
        return self._render_failure(segment, error, display, theme)

    def should_promote(self, segment: Segment) -> bool:
        """Check whether inline math should be shown in display mode."""
        if not self.promote_long_inline or segment.kind is not SegmentKind.INLINE_MATH:
            return False
        content = segment.content
        if len(content) >= self.long_formula_threshold:
            return True
        return any(indicator in content for indicator in MULTILINE_INDICATORS)

    def _render_text(self, segment: Segment) -> RenderedNode:
        content = segment.content
        block = "\n" in content.strip()
        try:
            if block:
                rendered = self.markdown.render(content)
            else:
                rendered = self.markdown.renderInline(content)
        except Exception:
            logger.exception("markdown_failed", content=content)
            rendered = html.escape(content)
        return RenderedNode(segment, rendered, block=block)

    def _wrap_math(self, output: str, display: bool) -> str:
        if display:
            return (
                '<div class="latex-block-container" '
                'style="display: flex; justify-content: center;">'
                f"{output}</div>"
            )
        return (
            '<span class="latex-inline-container" '
            'style="white-space: nowrap; display: inline-block; vertical-align: middle;">'
            f"{output}</span>"
        )

    def _render_failure(
        self, segment: Segment, error: TypesetError, display: bool, theme: dict
    ) -> RenderedNode:
        """Log the failure and build a marker showing the original markup."""
        message = format_error_for_user(error)
        description = f"{segment.kind.name.lower()} render failed: {message}"
        try:
            self.log_sink(description, segment.content)
        except Exception:
            logger.exception("log_sink_failed", description=description)

        original = segment.original_match or segment.content
        tag = "div" if display else "span"
        style = f"color: {theme['error_text']}; background: {theme['error_bg']};"
        if not display:
            style += " white-space: nowrap; display: inline-block;"
        title = html.escape(f"{self.error_label}: {error.user_message}", quote=True)

        marker = (
            f'<{tag} class="latex-error {theme["error_class"]}" '
            f'style="{style}" title="{title}">{html.escape(original)}</{tag}>'
        )
        return RenderedNode(
            segment, marker, block=display, failed=True, error_message=error.user_message
        )


class AnswerRenderer:
    """
    Segment and render whole answers.

    Each segment is rendered independently; a failed segment yields an error
    marker and the remaining segments render normally.
    """

    def __init__(
        self,
        segmenter: Optional[Segmenter] = None,
        segment_renderer: Optional[SegmentRenderer] = None,
    ):
        self.segmenter = segmenter or Segmenter()
        self.segment_renderer = segment_renderer or SegmentRenderer()

    @classmethod
    def from_settings(cls, settings, log_sink: Optional[LogSink] = None) -> "AnswerRenderer":
        """Build segmenter and renderer from a Settings object."""
        return cls(
            segmenter=Segmenter.from_config(settings.segmenter),
            segment_renderer=SegmentRenderer.from_settings(settings, log_sink=log_sink),
        )

    def render_segments(
        self,
        segments: List[Segment],
        color_scheme: Union[ColorScheme, str] = ColorScheme.ASSISTANT,
    ) -> RenderedAnswer:
        """Render already-segmented content in order."""
        scheme = resolve_scheme(color_scheme)
        answer = RenderedAnswer(color_scheme=scheme)
        for segment in segments:
            node = self.segment_renderer.render(segment, scheme)
            if node is not None:
                answer.nodes.append(node)
        return answer

    def render_answer(
        self,
        raw: str,
        color_scheme: Union[ColorScheme, str] = ColorScheme.ASSISTANT,
    ) -> RenderedAnswer:
        """
        Segment and render raw answer text.

        Args:
            raw: Answer text as received
            color_scheme: 'user' or 'assistant' palette

        Returns:
            RenderedAnswer with one node per non-empty segment
        """
        segments = self.segmenter.segment(raw)
        answer = self.render_segments(segments, color_scheme)
        logger.debug(
            "answer_rendered",
            segments=len(segments),
            failures=len(answer.failures),
            backend=self.segment_renderer.typesetter.name,
        )
        return answer
