"""
Dashboard statistics command
"""

import argparse
import logging

from archaea.cli import emit_json, print_table
from archaea.core.context import ApplicationContext
from archaea.landscape.service import LandscapeService
from archaea.stats.service import DashboardStatsService

logger = logging.getLogger("archaea.cli.stats")

COMMANDS = {
    'summary': 'Global dashboard counts',
    'progress': 'Curation progress by category and status',
    'domains': 'Domain landscape: T-groups, judges and Pfam coverage',
    'clustering': 'Sequence and structure clustering analysis',
}


def setup_parser(parser: argparse.ArgumentParser) -> None:
    subparsers = parser.add_subparsers(dest='command', help='Stats command')
    for name, description in COMMANDS.items():
        subparsers.add_parser(name, help=description)


def run_command(args: argparse.Namespace, context: ApplicationContext) -> int:
    if args.command not in COMMANDS:
        logger.error(f"Unknown command: {args.command}")
        return 1

    if args.command == 'domains':
        return _domains(args, LandscapeService(context))
    if args.command == 'clustering':
        return _clustering(args, LandscapeService(context))

    stats = DashboardStatsService(context).get_stats().to_dict()

    if args.command == 'progress':
        if args.json:
            emit_json(stats['progress'])
        else:
            print_table(stats['progress'], ['novelty_category', 'priority_category',
                                            'curation_status', 'count', 'novel_fold_count'])
        return 0

    if args.json:
        emit_json(stats)
        return 0

    for key, value in stats['stats'].items():
        if isinstance(value, dict):
            print(f"{key.replace('_', ' ')}:")
            for sub_key, count in value.items():
                print(f"    {sub_key:<20} {count}")
        else:
            print(f"{key.replace('_', ' '):<24} {value}")
    return 0


def _domains(args: argparse.Namespace, service: LandscapeService) -> int:
    landscape = service.get_domain_landscape().to_dict()
    if args.json:
        emit_json(landscape)
        return 0
    for key in ('total_domains', 'proteins_with_domains', 'unique_tgroups',
                'multi_domain_proteins', 'novel_pfam_families'):
        print(f"{key.replace('_', ' '):<24} {landscape[key]}")
    print()
    print_table(landscape['tgroup_distribution'],
                ['t_group', 't_group_name', 'count', 'ecod_pfam', 'novel_pfam', 'no_pfam'])
    return 0


def _clustering(args: argparse.Namespace, service: LandscapeService) -> int:
    analysis = service.get_clustering_analysis().to_dict()
    if args.json:
        emit_json(analysis)
        return 0
    print_table(analysis['summary'],
                ['type', 'method', 'clusters', 'members', 'singletons', 'largest', 'pending'])
    cross = analysis['cross_comparison']
    print(f"\nRescued by structure: {cross['rescued_by_structure']} of {cross['total']} proteins")
    return 0
