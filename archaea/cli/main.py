# archaea/cli/main.py
import argparse
import sys
import logging
from typing import List, Optional

from archaea import __version__
from archaea.cli import COMMAND_GROUPS, get_commands, load_group
from archaea.core.context import ApplicationContext
from archaea.core.logging_config import LoggingManager
from archaea.error_handlers import cli_error_handler


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='archaea',
                                     description='Archaea novel fold and curation dashboard')

    # Global options
    parser.add_argument('--config', type=str, help='Path to configuration file')
    parser.add_argument('-v', '--verbose', action='count', default=0,
                        help='Increase verbosity (can be used multiple times)')
    parser.add_argument('--log-file', type=str,
                        help='Log to file in addition to stderr')
    parser.add_argument('--log-dir', type=str,
                        help='Directory for log files')
    parser.add_argument('--json', action='store_true',
                        help='Output results as JSON')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')

    subparsers = parser.add_subparsers(dest='group', help='Command group')
    for group, description in COMMAND_GROUPS.items():
        group_parser = subparsers.add_parser(group, help=description)
        load_group(group).setup_parser(group_parser)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Parse arguments and run one command

    Returns:
        Process exit code
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.group:
        parser.print_help()
        return 1
    if not getattr(args, 'command', None):
        commands = ', '.join(get_commands(args.group))
        print(f"archaea {args.group}: choose a command ({commands})", file=sys.stderr)
        return 1

    log_level = min(50, 30 - (args.verbose * 10))  # 0=WARNING, 1=INFO, 2=DEBUG

    logger = LoggingManager.configure(
        log_file=args.log_file,
        log_dir=args.log_dir,
        component="archaea",
        level=log_level
    )
    logger.info(f"archaea {args.group} {args.command} - log level: {logging.getLevelName(log_level)}")

    with ApplicationContext(args.config) as context:
        return load_group(args.group).run_command(args, context)


@cli_error_handler
def console_main() -> None:
    sys.exit(main())


if __name__ == "__main__":
    console_main()
