"""
Database commands for the archaea dashboard
"""

import argparse
import logging

from archaea.cli import emit_json
from archaea.core.context import ApplicationContext

logger = logging.getLogger("archaea.cli.db")

COMMANDS = {
    'test': 'Check that the database is reachable',
}


def setup_parser(parser: argparse.ArgumentParser) -> None:
    subparsers = parser.add_subparsers(dest='command', help='Database command')
    subparsers.add_parser('test', help=COMMANDS['test'])


def run_command(args: argparse.Namespace, context: ApplicationContext) -> int:
    if args.command != 'test':
        logger.error(f"Unknown command: {args.command}")
        return 1

    db_config = context.config_manager.get_db_config()
    target = f"{db_config.get('host')}:{db_config.get('port')}/{db_config.get('database')}"
    ok = context.db.test_connection()

    if args.json:
        emit_json({'database': target, 'connected': ok})
    elif ok:
        print(f"Connected to {target}")
    else:
        print(f"Could not connect to {target}")
    return 0 if ok else 1
