"""HTTP front end module for focuswise.

Serves the focus-mode widget to the browser dashboard: session lifecycle
routes, the live snapshot the overlay polls, a camera preview, and the
report history.
"""
