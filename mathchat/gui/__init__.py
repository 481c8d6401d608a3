"""Desktop viewer for rendered answers (PyQt6)."""
