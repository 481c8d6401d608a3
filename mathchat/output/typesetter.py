"""
Typesetting backends and common result types.

All typesetters inherit from BaseTypesetter and return TypesetResult; a
malformed expression is reported as a failed result, never raised.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Optional, Type
import base64
import html
import io
import re

from ..utils.errors import TypesetError, UnsupportedBackendError, check_brace_balance

CE_PATTERN = re.compile(r"\\ce\{([^{}]*)\}")
TEXT_PATTERN = re.compile(r"\\text\{([^{}]*)\}")
# Element symbol or closing bracket followed by a count, e.g. H2, (OH)2
ATOM_COUNT = re.compile(r"(?<=[A-Za-z)\]])(\d+)")


@dataclass
class TypesetResult:
    """
    Result from a typesetting attempt.

    Either `output` (HTML for the typeset expression) or `error` is set.
    """

    success: bool
    output: Optional[str] = None
    error: Optional[TypesetError] = None
    backend: str = ""

    @property
    def error_message(self) -> Optional[str]:
        return self.error.user_message if self.error else None

    @classmethod
    def failure(cls, error: TypesetError, backend: str = "") -> "TypesetResult":
        """Create a failed result."""
        return cls(success=False, error=error, backend=backend)

    @classmethod
    def from_output(cls, output: str, backend: str = "") -> "TypesetResult":
        """Create a successful result from rendered output."""
        return cls(success=True, output=output, backend=backend)


def chemistry_to_latex(expression: str) -> str:
    r"""
    Rewrite \ce{...} and \text{...} into plain math commands.

    `\ce{H2SO4}` becomes `\mathrm{H_{2}SO_{4}}`, reaction arrows become
    `\rightarrow` / `\rightleftharpoons`. Used for engines without mhchem.
    """

    def convert_ce(match):
        body = match.group(1).strip()
        body = body.replace("<->", r" \rightleftharpoons ").replace("->", r" \rightarrow ")
        body = ATOM_COUNT.sub(r"_{\1}", body)
        body = " ".join(body.split()).replace(" ", r"\ ")
        return rf"\mathrm{{{body}}}"

    return text_to_mathrm(CE_PATTERN.sub(convert_ce, expression))


def text_to_mathrm(expression: str) -> str:
    r"""Rewrite `\text{a b}` as `\mathrm{a\ b}`."""

    def convert_text(match):
        body = match.group(1).replace(" ", r"\ ")
        return rf"\mathrm{{{body}}}"

    return TEXT_PATTERN.sub(convert_text, expression)


class BaseTypesetter(ABC):
    """
    Abstract base class for math typesetting backends.

    Subclasses implement _typeset() and may override prepare().
    """

    # Human-readable name for this backend
    name: str = "BaseTypesetter"

    def typeset(
        self,
        expression: str,
        display: bool = False,
        color: Optional[str] = None,
        chemistry: bool = False,
    ) -> TypesetResult:
        """
        Typeset an expression.

        Args:
            expression: LaTeX math without delimiters
            display: Block (display) mode instead of inline mode
            color: Optional CSS colour for the glyphs
            chemistry: Expression is chemistry markup such as `\\ce{H2O}`

        Returns:
            TypesetResult with HTML output or the failure reason
        """
        try:
            check_brace_balance(expression)
            output = self._typeset(self.prepare(expression, chemistry), display, color)
        except TypesetError as e:
            return TypesetResult.failure(e, backend=self.name)
        except ValueError as e:
            error = TypesetError.from_exception(e, expression=expression, context=self.name)
            return TypesetResult.failure(error, backend=self.name)
        return TypesetResult.from_output(output, backend=self.name)

    def prepare(self, expression: str, chemistry: bool = False) -> str:
        """Adapt an expression to what the engine understands."""
        return expression

    @abstractmethod
    def _typeset(self, expression: str, display: bool, color: Optional[str]) -> str:
        """Render `expression` to HTML, raising ValueError or TypesetError on failure."""
        pass


class MatplotlibTypesetter(BaseTypesetter):
    """
    Render math with matplotlib's mathtext into an embedded image.

    Usage:
        typesetter = MatplotlibTypesetter(fontsize=14)
        result = typesetter.typeset(r"E = mc^2")
        if result.success:
            html_img = result.output
    """

    name = "matplotlib"

    MIME_TYPES = {"png": "image/png", "svg": "image/svg+xml"}

    def __init__(self, fontsize: int = 14, dpi: int = 150, image_format: str = "png"):
        """
        Initialize typesetter.

        Args:
            fontsize: Font size in points for inline math; display math is 20% larger
            dpi: Resolution for raster output
            image_format: 'png' or 'svg'
        """
        if image_format not in self.MIME_TYPES:
            raise UnsupportedBackendError(
                f"{self.name}/{image_format}", available=sorted(self.MIME_TYPES)
            )
        self.fontsize = fontsize
        self.dpi = dpi
        self.image_format = image_format

    def prepare(self, expression: str, chemistry: bool = False) -> str:
        # mathtext has no mhchem and is single-line
        if chemistry:
            expression = chemistry_to_latex(expression)
        else:
            expression = text_to_mathrm(expression)
        return " ".join(expression.split())

    def _typeset(self, expression: str, display: bool, color: Optional[str]) -> str:
        from matplotlib import mathtext
        from matplotlib.font_manager import FontProperties

        size = self.fontsize * 1.2 if display else self.fontsize
        buf = io.BytesIO()
        mathtext.math_to_image(
            f"${expression}$",
            buf,
            prop=FontProperties(size=size),
            dpi=self.dpi,
            format=self.image_format,
            color=color or "black",
        )

        data = base64.b64encode(buf.getvalue()).decode("ascii")
        mime = self.MIME_TYPES[self.image_format]
        alt = html.escape(expression, quote=True)
        return f'<img class="latex-math" alt="{alt}" src="data:{mime};base64,{data}">'


class MathJaxTypesetter(BaseTypesetter):
    """
    Emit delimited LaTeX for client-side MathJax.

    Only the brace check can fail here; MathJax reports anything else in the
    browser.
    """

    name = "mathjax"

    def _typeset(self, expression: str, display: bool, color: Optional[str]) -> str:
        escaped = html.escape(expression, quote=False)
        if display:
            return f"\\[{escaped}\\]"
        return f"\\({escaped}\\)"


TYPESETTERS: Dict[str, Type[BaseTypesetter]] = {
    MatplotlibTypesetter.name: MatplotlibTypesetter,
    MathJaxTypesetter.name: MathJaxTypesetter,
}


def get_typesetter(backend: str = "matplotlib", **options) -> BaseTypesetter:
    """
    Create a typesetter by backend name.

    Options are passed to the backend constructor (ignored by MathJax).

    Raises:
        UnsupportedBackendError: If the backend name is unknown
    """
    try:
        typesetter_cls = TYPESETTERS[backend]
    except KeyError:
        raise UnsupportedBackendError(backend, available=sorted(TYPESETTERS))
    if typesetter_cls is MathJaxTypesetter:
        return typesetter_cls()
    return typesetter_cls(**options)


def typesetter_from_config(config) -> BaseTypesetter:
    """Build the typesetter described by a RenderConfig."""
    return get_typesetter(
        config.backend,
        fontsize=config.fontsize,
        dpi=config.dpi,
        image_format=config.image_format,
    )
