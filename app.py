#!/usr/bin/env python3
#USE VENV: source venv/bin/activate
"""
Run script for the marketplace order service
"""

import argparse
import os
import sys
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from marketplace import create_app, notifier  # noqa: E402
from marketplace.build import build_database  # noqa: E402
from marketplace.logger import get_logger  # noqa: E402

# Note: SECRET_KEY and default user credentials come from the environment.
# Run 'python generate_env.py' to create a .env file with secure values.

logger = get_logger("marketplace.run")


def parse_arguments():
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(description='Marketplace Order Service')
    parser.add_argument('--build-only', action='store_true',
                        help='Build database tables and critical data only, then exit without starting the server')
    parser.add_argument('--enable-debug-data', action='store_true', default=True,
                        help='Enable debug data insertion (default: enabled if flag not present)')
    parser.add_argument('--no-debug-data', action='store_false', dest='enable_debug_data',
                        help='Disable debug data insertion')

    return parser.parse_args()


if __name__ == '__main__':
    args = parse_arguments()

    logger.debug("Starting Marketplace Order Service...")

    app = create_app()

    # Critical data is ALWAYS checked and inserted regardless of flags
    build_database(
        enable_debug_data=args.enable_debug_data and not args.build_only,
        app=app,
    )

    if args.build_only:
        logger.debug("Build completed. Exiting without starting web server.")
        sys.exit(0)

    # FLASK_DEBUG: Enable/disable debug mode (default: False for security)
    debug_mode = os.environ.get('FLASK_DEBUG', 'False').lower() in ('true', '1', 'yes', 'on')

    # USE_RELOADER: Enable/disable auto-reloader (default: False in production)
    use_reloader = os.environ.get('USE_RELOADER', 'False').lower() in ('true', '1', 'yes', 'on')

    host = os.environ.get('FLASK_HOST', '127.0.0.1')
    port = int(os.environ.get('FLASK_PORT', '5000'))

    if debug_mode:
        logger.warning("DEBUG MODE ENABLED - Do not use in production!")

    logger.info(f"Starting server on {host}:{port} (debug={debug_mode}, reloader={use_reloader})")
    try:
        app.run(debug=debug_mode, host=host, port=port, use_reloader=use_reloader)
    finally:
        notifier.shutdown(app)
