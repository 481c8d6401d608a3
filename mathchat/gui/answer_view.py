"""
Answer viewer widget for PyQt6.

Shows a rendered answer page in QtWebEngine, falling back to a rich-text
label if WebEngine is not available.
"""

from typing import Optional
import sys

# Try to import PyQt6 WebEngine
try:
    from PyQt6.QtWebEngineWidgets import QWebEngineView

    WEBENGINE_AVAILABLE = True
except ImportError:
    WEBENGINE_AVAILABLE = False
    QWebEngineView = None

from PyQt6.QtWidgets import (
    QApplication,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QPlainTextEdit,
    QPushButton,
    QScrollArea,
    QFrame,
    QVBoxLayout,
    QWidget,
)
from PyQt6.QtCore import Qt, pyqtSignal

from ..config import Settings
from ..models import ColorScheme
from ..output import AnswerRenderer, wrap_page


class AnswerView(QWidget):
    """
    Widget for displaying a rendered answer.

    Uses QWebEngineView if available, falls back to a QLabel with rich text.
    """

    # Signal emitted with the number of failed math segments after each render
    rendered = pyqtSignal(int)

    def __init__(self, parent=None, settings: Optional[Settings] = None):
        super().__init__(parent)

        self.settings = settings or Settings()
        self.renderer = AnswerRenderer.from_settings(self.settings)
        self.color_scheme = ColorScheme.ASSISTANT
        self._use_webengine = WEBENGINE_AVAILABLE

        self._init_ui()

    def _init_ui(self):
        """Initialize the UI."""
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        if self._use_webengine:
            self.web_view = QWebEngineView()
            layout.addWidget(self.web_view)
        else:
            scroll = QScrollArea()
            scroll.setWidgetResizable(True)
            scroll.setFrameShape(QFrame.Shape.NoFrame)

            self.fallback_label = QLabel()
            self.fallback_label.setWordWrap(True)
            self.fallback_label.setTextFormat(Qt.TextFormat.RichText)
            self.fallback_label.setAlignment(Qt.AlignmentFlag.AlignTop)

            scroll.setWidget(self.fallback_label)
            layout.addWidget(scroll)

    def display_answer(self, text: str):
        """Segment, render and show an answer."""
        answer = self.renderer.render_answer(text, self.color_scheme)
        if self._use_webengine:
            page = wrap_page(
                answer.html,
                self.color_scheme,
                include_mathjax=self.settings.render.backend == "mathjax",
            )
            self.web_view.setHtml(page)
        else:
            self.fallback_label.setText(answer.html)
        self.rendered.emit(len(answer.failures))

    def set_color_scheme(self, scheme: ColorScheme):
        """Switch between the user and assistant palettes."""
        self.color_scheme = scheme

    def clear(self):
        """Clear the display."""
        if self._use_webengine:
            self.web_view.setHtml("")
        else:
            self.fallback_label.clear()

    @property
    def using_webengine(self) -> bool:
        """Check if using WebEngine rendering."""
        return self._use_webengine


class AnswerWindow(QMainWindow):
    """Main window: answer text on top, rendered view below."""

    def __init__(self, settings: Optional[Settings] = None, initial_text: str = ""):
        super().__init__()
        self.setWindowTitle("mathchat")
        self.resize(900, 700)

        central = QWidget()
        layout = QVBoxLayout(central)

        self.input_edit = QPlainTextEdit()
        self.input_edit.setPlaceholderText(r"Paste an answer, e.g. The area is $\pi r^2$.")
        self.input_edit.setPlainText(initial_text)
        layout.addWidget(self.input_edit, 1)

        controls = QHBoxLayout()
        self.render_btn = QPushButton("Render")
        self.render_btn.clicked.connect(self._on_render)
        controls.addWidget(self.render_btn)

        self.scheme_btn = QPushButton("User Colors")
        self.scheme_btn.setCheckable(True)
        self.scheme_btn.toggled.connect(self._on_toggle_scheme)
        controls.addWidget(self.scheme_btn)

        controls.addStretch()
        self.status_label = QLabel()
        controls.addWidget(self.status_label)
        layout.addLayout(controls)

        self.answer_view = AnswerView(settings=settings)
        self.answer_view.rendered.connect(self._on_rendered)
        layout.addWidget(self.answer_view, 2)

        self.setCentralWidget(central)

        if initial_text:
            self._on_render()

    def _on_render(self):
        self.answer_view.display_answer(self.input_edit.toPlainText())

    def _on_toggle_scheme(self, checked: bool):
        self.answer_view.set_color_scheme(ColorScheme.USER if checked else ColorScheme.ASSISTANT)
        self.scheme_btn.setText("Assistant Colors" if checked else "User Colors")
        self._on_render()

    def _on_rendered(self, failures: int):
        if failures:
            self.status_label.setText(f"{failures} expression(s) could not be typeset")
        else:
            self.status_label.setText("")


def run_app(settings: Optional[Settings] = None, initial_text: str = "") -> int:
    """Launch the viewer and block until it is closed."""
    app = QApplication.instance() or QApplication(sys.argv)
    window = AnswerWindow(settings=settings, initial_text=initial_text)
    window.show()
    return app.exec()
