"""Text rendering of the focus-mode views for terminal front ends."""

from focuswise.shell.overlay import render_history, render_overlay, render_report

__all__ = ["render_history", "render_overlay", "render_report"]
