"""
Run the dashboard HTTP API under uvicorn
"""

import argparse
import logging

import uvicorn

from archaea.api.app import create_app
from archaea.core.context import ApplicationContext

logger = logging.getLogger("archaea.cli.serve")

COMMANDS = {
    'api': 'Serve the JSON API',
}


def setup_parser(parser: argparse.ArgumentParser) -> None:
    subparsers = parser.add_subparsers(dest='command', help='Serve command')
    api_parser = subparsers.add_parser('api', help=COMMANDS['api'])
    api_parser.add_argument('--host', type=str, help='Bind address (default from api.host)')
    api_parser.add_argument('--port', type=int, help='Port (default from api.port)')


def run_command(args: argparse.Namespace, context: ApplicationContext) -> int:
    if args.command != 'api':
        logger.error(f"Unknown command: {args.command}")
        return 1

    host = args.host or context.get('api.host', '127.0.0.1')
    port = args.port or int(context.get('api.port', 8000))
    logger.info(f"Serving API on {host}:{port}")
    uvicorn.run(create_app(context), host=host, port=port, log_config=None)
    return 0
