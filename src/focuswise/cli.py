"""Command-line interface for focuswise.

Provides the main entry point for running a focus session in the
terminal, browsing or clearing the report history, starting the HTTP
server, or testing the camera.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import signal
import sys
from pathlib import Path

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="focuswise",
        description="Camera-based focus sessions with archived reports",
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=None,
        help="Path to YAML configuration file (default: config/focuswise.yaml)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    session_parser = subparsers.add_parser("session", help="Run a timed focus session")
    session_parser.add_argument(
        "-m", "--minutes", type=str, required=True,
        help="Session length in minutes (presets: 10, 25, 45)",
    )
    session_parser.add_argument(
        "--minimized", action="store_true",
        help="Show only the time left while the session runs",
    )

    reports_parser = subparsers.add_parser("reports", help="Show focus session history")
    reports_parser.add_argument(
        "--clear", action="store_true",
        help="Delete all focus reports",
    )
    reports_parser.add_argument(
        "-y", "--yes", action="store_true",
        help="Do not ask for confirmation when clearing",
    )

    subparsers.add_parser("serve", help="Start the focus session HTTP server")
    subparsers.add_parser("capture-test", help="Test webcam capture and presence detection (saves a frame)")

    return parser.parse_args(argv)


async def _run_session(settings, args) -> int:
    """Run one focus session with a live status line."""
    from focuswise.bootstrap import build_widget
    from focuswise.domain.models import SessionState
    from focuswise.session.state import FocusSessionError
    from focuswise.shell.overlay import render_overlay, render_report

    widget = build_widget(settings)

    def show(snapshot) -> None:
        if snapshot.state is SessionState.RUNNING:
            print("\r" + render_overlay(snapshot).ljust(72), end="", flush=True)

    async def end_quietly() -> None:
        try:
            await widget.end()
        except FocusSessionError as e:
            logger.debug("End request ignored: %s", e)

    try:
        await widget.open()
        print("Loading AI models...")
        try:
            await widget.start_minutes(args.minutes)
        except FocusSessionError as e:
            print(f"Error: {e}")
            return 1

        if args.minimized:
            widget.toggle_minimized()
        widget.add_listener(show)

        loop = asyncio.get_running_loop()
        try:
            loop.add_signal_handler(signal.SIGINT, lambda: asyncio.ensure_future(end_quietly()))
        except NotImplementedError:
            logger.debug("Signal handlers unavailable; Ctrl+C will abort without a report")

        print("Focus session running. Press Ctrl+C to end early.")
        report = await widget.wait_finished()
        print()
        if report is not None:
            print(render_report(report))
        warning = widget.snapshot().warning
        if warning:
            print(f"\nWarning: {warning}")
        return 0
    finally:
        await widget.teardown()


def _show_reports(settings, args) -> int:
    """Print the report history, or clear it after confirmation."""
    from focuswise.archive.store import ArchiveError
    from focuswise.bootstrap import build_archive
    from focuswise.shell.overlay import render_history

    archive = build_archive(settings)

    if args.clear:
        if not args.yes:
            answer = input(
                "Are you sure you want to delete all focus reports? "
                "This action cannot be undone. [y/N] "
            )
            if answer.strip().lower() not in ("y", "yes"):
                print("Cancelled.")
                return 0
        try:
            archive.clear_all()
        except ArchiveError as e:
            print(f"Error: {e}")
            return 1
        print("Focus session history cleared.")
        return 0

    print(render_history(archive.list()))
    return 0


async def _capture_test(settings) -> int:
    """Capture a single frame, run presence detection, and save the frame."""
    import cv2

    from focuswise.bootstrap import build_capture, build_classifier
    from focuswise.capture.base import CaptureError
    from focuswise.classifier.base import ClassifierLoadError, DetectionError

    capture = build_capture(settings)
    classifier = build_classifier(settings)

    try:
        await classifier.load()
    except ClassifierLoadError as e:
        print(f"Error loading {classifier.name} classifier: {e}")
        return 1

    try:
        async with capture:
            frame = await capture.capture_frame()
    except CaptureError as e:
        print(f"Error: {e}")
        return 1

    outfile = "capture_test.png"
    cv2.imwrite(outfile, frame.image)
    print(f"Saved frame to {outfile} ({frame.image.shape[1]}x{frame.image.shape[0]})")

    try:
        detection = await classifier.detect(frame)
    except DetectionError as e:
        print(f"Detection failed: {e}")
        return 1
    print(f"Face present: {detection.present}")
    return 0


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the focuswise CLI."""
    args = parse_args(argv)

    if args.command is None:
        parse_args(["--help"])
        return

    from focuswise.config.settings import load_settings
    from focuswise.utils.logging import setup_logging

    settings = load_settings(args.config)

    if args.verbose:
        settings.logging.level = "DEBUG"

    setup_logging(settings.logging)

    status = 0
    if args.command == "session":
        logger.info("Starting focus session (%s minutes)", args.minutes)
        status = asyncio.run(_run_session(settings, args))

    elif args.command == "reports":
        status = _show_reports(settings, args)

    elif args.command == "serve":
        logger.info("Starting focus server")
        import uvicorn

        from focuswise.server.app import create_app

        app = create_app(settings=settings)
        uvicorn.run(app, host=settings.server.host, port=settings.server.port)

    elif args.command == "capture-test":
        logger.info("Running capture test")
        status = asyncio.run(_capture_test(settings))

    if status:
        sys.exit(status)


if __name__ == "__main__":
    main()
