"""Application entry point.

This module provides the main() function that parses the command line,
assembles the image sequence and runs the viewer window.

Usage:
    sv [<options>] <image file> ...

    # Or as a module:
    python -m SequenceViewer.app -watch image.pfm

    # Or from Python:
    from SequenceViewer import main
    main(["sv", "-keep", "image.png"])
"""

import logging
import sys

from .core.config import format_help, parse_command_line
from .core.constants import EXIT_FAILURE, EXIT_NO_INPUT, EXIT_OK, EXIT_USAGE, PROGRAM_NAME, VERSION
from .core.errors import HelpRequested, NoInputError, UsageError, VersionRequested
from .core.sequence import assemble_sequence
from .logging_setup import setup_logging

log = logging.getLogger(__name__)


def run_viewer(options, sequence, argv) -> int:
    """Open the viewer window for ``sequence`` and run the Qt event loop.

    Args:
        options: ResolvedOptions from the command line
        sequence: ImageSequence to browse
        argv: Arguments for QApplication

    Returns:
        Exit code from QApplication.exec()
    """
    from PySide6.QtWidgets import QApplication
    from .core.session import ViewSession
    from .core.watch import ReloadChannel, WatchController
    from .ui.viewer import QtRenderer

    app = QApplication.instance() or QApplication(argv)
    app.setApplicationName(PROGRAM_NAME)
    app.setApplicationVersion(VERSION)

    renderer = QtRenderer(keep=options.config.keep)
    watcher = None
    if options.config.watch:
        watcher = WatchController(ReloadChannel(notify=renderer.notify_reload))

    session = ViewSession(options.config, sequence, renderer, watcher=watcher)
    renderer.index_source = lambda: session.index
    renderer.on_reload(session.process_pending)
    app.aboutToQuit.connect(session.close)

    session.start()
    try:
        return app.exec()
    finally:
        session.close()


def main(argv=None) -> int:
    """Run the ``sv`` command.

    Args:
        argv: Command-line arguments including the program name
            (defaults to sys.argv)

    Returns:
        Exit code: 0 on normal exit (also after -help/-version), 2 on a usage
        error, 10 if no image file was given, 1 if startup failed.
    """
    if argv is None:
        argv = sys.argv
    setup_logging()

    try:
        options = parse_command_line(argv[1:])
    except HelpRequested:
        print(format_help())
        return EXIT_OK
    except VersionRequested:
        print(f"{PROGRAM_NAME} is part of SequenceViewer version {VERSION}")
        return EXIT_OK
    except NoInputError as e:
        log.error("%s", e)
        print(format_help())
        return EXIT_NO_INPUT
    except UsageError as e:
        log.error("%s", e)
        print(f"usage: {PROGRAM_NAME} [<options>] <image file> ...  (see -help)", file=sys.stderr)
        return EXIT_USAGE

    if options.debug:
        setup_logging(debug=True)
    log.debug("Configuration: %s", options.config)

    try:
        sequence = assemble_sequence(options.files)
        return run_viewer(options, sequence, argv)
    except Exception as e:
        log.debug("Startup failed", exc_info=True)
        log.error("An unexpected error occurred: %s", e)
        return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
