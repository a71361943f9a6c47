"""focuswise -- Camera-based focus monitoring for timed study sessions.

This package implements the focus-mode widget of the CareerWise dashboard:
a timed session samples one webcam frame per second, asks a presence
classifier whether the user is at the screen, keeps running focus
accounting, and archives an immutable report when the session ends.
"""

__version__ = "0.1.0"
