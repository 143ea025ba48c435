#!/usr/bin/env python3
"""
findimagedupes - Web API Server
===============================
A small JSON API for fingerprinting images and scanning directories for
visually similar images.

Run with: python -m findimagedupes serve
Or: findimagedupes-server

Options:
    -q, --quiet     Quiet mode - suppress all output except errors
    -v, --verbose   Verbose mode - show all Flask request logs
    -p, --port      Port to run on (default: 5000)
"""

import argparse
import logging

from flask import Flask

from .api import api
from .user_config import get_user_config
from .scanner.dependencies import set_pixel_limit


# Logging levels
LOG_QUIET = 0    # No output except errors
LOG_MINIMAL = 1  # Startup info only (default)
LOG_VERBOSE = 2  # All Flask request logs


def create_app(log_level: int = LOG_MINIMAL) -> Flask:
    """
    Create and configure the Flask application.

    Args:
        log_level: Logging verbosity level

    Returns:
        Configured Flask app instance
    """
    app = Flask(__name__)

    # Configure logging based on level
    if log_level < LOG_VERBOSE:
        # Suppress Flask's default request logging
        log = logging.getLogger('werkzeug')
        log.setLevel(logging.ERROR if log_level == LOG_QUIET else logging.WARNING)

    set_pixel_limit(get_user_config().max_image_pixels)

    # Register routes
    app.register_blueprint(api)

    return app


def suppress_flask_banner():
    """Suppress Flask's development server banner and startup messages."""
    try:
        import flask.cli
        flask.cli.show_server_banner = lambda *args, **kwargs: None
    except (ImportError, AttributeError):
        pass

    logging.getLogger('werkzeug').setLevel(logging.ERROR)


def main(argv=None):
    """Main entry point for the API server."""
    parser = argparse.ArgumentParser(
        prog='findimagedupes-server',
        description='findimagedupes - web API server',
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument(
        '-q', '--quiet',
        action='store_true',
        help='Quiet mode - suppress all output except errors'
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Verbose mode - show all Flask request logs'
    )
    parser.add_argument(
        '-p', '--port',
        type=int,
        default=5000,
        help='Port to run the server on (default: 5000)'
    )

    args = parser.parse_args(argv)

    # Determine log level
    if args.quiet:
        log_level = LOG_QUIET
    elif args.verbose:
        log_level = LOG_VERBOSE
    else:
        log_level = LOG_MINIMAL

    logging.basicConfig(
        level=logging.WARNING if log_level == LOG_QUIET else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )

    url = f'http://localhost:{args.port}'

    if log_level >= LOG_MINIMAL:
        print()
        print("  findimagedupes API")
        print(f"  Server running at: {url}")
        print("  Press Ctrl+C to stop")
        print()

    # Suppress Flask banner for non-verbose modes
    if log_level < LOG_VERBOSE:
        suppress_flask_banner()

    app = create_app(log_level)

    try:
        app.run(
            host='127.0.0.1',
            port=args.port,
            debug=False,
            threaded=True,
            use_reloader=False
        )
    except KeyboardInterrupt:
        if log_level >= LOG_MINIMAL:
            print("\n  Server stopped\n")


if __name__ == '__main__':
    main()
