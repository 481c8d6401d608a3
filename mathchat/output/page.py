"""
Colour palettes and the HTML page wrapper for rendered answers.

The two palettes distinguish the user's messages (dark background) from the
assistant's (light background), matching the surrounding chat UI.
"""

from typing import Dict, Union
import html

from ..models import ColorScheme


# MathJax config is only emitted for the mathjax backend
MATHJAX_SCRIPT = """
    <script>
        MathJax = {
            tex: {
                inlineMath: [['\\\\(', '\\\\)']],
                displayMath: [['\\\\[', '\\\\]']],
                processEscapes: true
            },
            loader: {load: ['[tex]/mhchem']},
            svg: {fontCache: 'global'}
        };
    </script>
    <script id="MathJax-script" async
        src="https://cdn.jsdelivr.net/npm/mathjax@3/es5/tex-svg.js">
    </script>
"""

PAGE_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <title>{title}</title>
    <style>
        body {{
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
            font-size: 15px;
            line-height: 1.6;
            margin: 0;
            padding: 16px;
            background: {bg_color};
            color: {text_color};
            overflow-wrap: break-word;
        }}
        a {{
            color: {link_color};
        }}
        code {{
            font-family: monospace;
            background: {code_bg};
            padding: 1px 5px;
            border-radius: 4px;
        }}
        table {{
            border-collapse: collapse;
        }}
        th, td {{
            border-bottom: 1px solid {border_color};
            padding: 6px 12px;
        }}
        .latex-block-container {{
            display: flex;
            justify-content: center;
            margin: 1.5em 0;
            overflow-x: auto;
        }}
        .latex-inline-container {{
            display: inline-block;
            white-space: nowrap;
            vertical-align: middle;
        }}
        .latex-error {{
            color: {error_text};
            background: {error_bg};
            border-radius: 4px;
            padding: 0 4px;
            font-family: monospace;
        }}
    </style>
    {mathjax}
</head>
<body>
    <div class="answer answer--{scheme}">
        {content}
    </div>
</body>
</html>
"""

# Colour themes
USER_THEME = {
    "bg_color": "#2563eb",
    "text_color": "#ffffff",
    "math_color": "#ffffff",
    "link_color": "#bfdbfe",
    "code_bg": "rgba(255, 255, 255, 0.15)",
    "border_color": "rgba(255, 255, 255, 0.2)",
    "error_text": "#fecaca",
    "error_bg": "#b91c1c",
    "error_class": "latex-error--dark",
}

ASSISTANT_THEME = {
    "bg_color": "#ffffff",
    "text_color": "#111827",
    "math_color": "#111827",
    "link_color": "#2563eb",
    "code_bg": "#f3f4f6",
    "border_color": "#e5e7eb",
    "error_text": "#b91c1c",
    "error_bg": "#fef2f2",
    "error_class": "latex-error--light",
}

THEMES = {
    ColorScheme.USER: USER_THEME,
    ColorScheme.ASSISTANT: ASSISTANT_THEME,
}


def get_theme(color_scheme: Union[ColorScheme, str]) -> Dict[str, str]:
    """Return the palette for a colour scheme ('user' or 'assistant')."""
    return THEMES[ColorScheme(color_scheme)]


def wrap_page(
    fragment: str,
    color_scheme: Union[ColorScheme, str] = ColorScheme.ASSISTANT,
    include_mathjax: bool = False,
    title: str = "Answer",
) -> str:
    """
    Wrap a rendered answer fragment in a complete HTML document.

    Args:
        fragment: HTML produced by the answer renderer
        color_scheme: Palette to apply
        include_mathjax: Load MathJax (needed for the mathjax backend)
        title: Document title

    Returns:
        Complete HTML document
    """
    scheme = ColorScheme(color_scheme)
    theme = {k: v for k, v in THEMES[scheme].items() if k != "error_class"}
    return PAGE_TEMPLATE.format(
        title=html.escape(title),
        mathjax=MATHJAX_SCRIPT if include_mathjax else "",
        scheme=scheme.value,
        content=fragment,
        **theme,
    )
