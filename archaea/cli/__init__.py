"""
Command-line interface for the archaea dashboard.

Commands are organized in groups; each group module defines COMMANDS,
setup_parser(parser) and run_command(args, context).
"""

import json
import logging
from importlib import import_module
from typing import Any, Dict, Iterable, List, Sequence

__all__ = ['COMMAND_GROUPS', 'get_command_groups', 'get_commands', 'load_group',
           'emit_json', 'print_table']

# Define command groups and their descriptions
COMMAND_GROUPS = {
    'novel': 'Novel fold clusters and cross-tier hits',
    'curation': 'Curation queue and decisions',
    'stats': 'Dashboard statistics',
    'organisms': 'Target organisms',
    'export': 'Export listings to CSV',
    'db': 'Database connectivity',
    'serve': 'Run the HTTP API',
}

# Logger for CLI operations
logger = logging.getLogger("archaea.cli")


def get_command_groups() -> Dict[str, str]:
    """Return all available command groups and their descriptions"""
    return COMMAND_GROUPS


def load_group(group: str):
    """Import the module implementing a command group"""
    return import_module(f"archaea.cli.{group}")


def get_commands(group: str) -> Dict[str, str]:
    """Return all commands available in a specific group"""
    module = load_group(group)
    if not hasattr(module, 'COMMANDS'):
        logger.warning(f"Command group '{group}' does not define a COMMANDS dictionary")
        return {}
    return module.COMMANDS


def emit_json(data: Any) -> None:
    print(json.dumps(data, indent=2, default=str))


def _cell(value: Any) -> str:
    if value is None:
        return '-'
    if isinstance(value, float):
        return f"{value:.2f}"
    return str(value)


def print_table(rows: Iterable[Dict[str, Any]], columns: Sequence[str]) -> None:
    """Print dict rows as a fixed-width text table"""
    cells: List[List[str]] = [[_cell(row.get(c)) for c in columns] for row in rows]
    widths = [max([len(c)] + [len(r[i]) for r in cells]) for i, c in enumerate(columns)]
    print("  ".join(c.ljust(w) for c, w in zip(columns, widths)))
    print("  ".join('-' * w for w in widths))
    for r in cells:
        print("  ".join(v.ljust(w) for v, w in zip(r, widths)))
