#!/usr/bin/env python3
"""
Polybar title module: prints the label of the active X11 window on every focus change.
"""
from PolybarTitle.config_loader import ConfigLoader, ConfigValidationError
from PolybarTitle.renderer import TemplateRenderer
from PolybarTitle.window_monitor import WindowMonitor
from PolybarTitle.x11_query import X11Connection
import logging
import os
import sys

LOG_LEVEL_ENV = "POLYBAR_TITLE_LOG"
CRASH_MESSAGE = "PolyBar title module crashed!"


def setup_logging():
    """Log to stderr; the level comes from POLYBAR_TITLE_LOG, default ERROR."""
    level_name = os.environ.get(LOG_LEVEL_ENV)
    level = logging.ERROR
    if level_name:
        level = logging.getLevelName(level_name.upper())
        if not isinstance(level, int):
            level = logging.DEBUG
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def load_config(argv):
    """Load the config file named on the command line, or search the default locations."""
    if len(argv) > 1:
        return ConfigLoader([argv[1]]).load()
    return ConfigLoader().load_or_default()


def run(argv):
    logging.debug("Parsing config")
    config = load_config(argv)

    logging.debug("Compiling output template")
    renderer = TemplateRenderer(config.template)

    monitor = WindowMonitor(
        None,
        config.resolver,
        renderer,
        connect=lambda: X11Connection.connect(config.display_name),
    )
    try:
        monitor.run()
    finally:
        monitor.close()


def main(argv=None):
    """Main application entry point."""
    setup_logging()
    if argv is None:
        argv = sys.argv

    try:
        run(argv)
    except KeyboardInterrupt:
        logging.info("Shutting down...")
        return 130
    except (FileNotFoundError, ConfigValidationError) as e:
        logging.error(f"Configuration Error: {e}")
    except Exception as e:
        logging.error(f"{e}", exc_info=logging.getLogger().isEnabledFor(logging.DEBUG))

    print(CRASH_MESSAGE, flush=True)
    return 1


if __name__ == "__main__":
    sys.exit(main())
