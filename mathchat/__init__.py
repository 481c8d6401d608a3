"""mathchat: segment and render math-heavy tutoring answers."""

__version__ = "0.1.0"
