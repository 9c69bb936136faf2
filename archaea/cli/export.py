"""
CSV export commands
"""

import argparse
import logging

from archaea.cli.curation import add_queue_filters, queue_filters_from_args
from archaea.core.context import ApplicationContext
from archaea.curation.workflow import CurationWorkflow
from archaea.export import cluster_listing_frame, cluster_members_frame, queue_frame, write_frame
from archaea.models.novelty import ClusterFilters
from archaea.novelty.service import NoveltyService

logger = logging.getLogger("archaea.cli.export")

# Define commands in this group
COMMANDS = {
    'clusters': 'Export every cluster of a tier',
    'members': 'Export the members of one cluster',
    'queue': 'Export the review queue',
}


def setup_parser(parser: argparse.ArgumentParser) -> None:
    """Set up the argument parser for export commands"""
    subparsers = parser.add_subparsers(dest='command', help='Export command')

    clusters_parser = subparsers.add_parser('clusters', help=COMMANDS['clusters'])
    clusters_parser.add_argument('--tier', type=int, choices=[1, 2], default=1, help='Cluster tier')
    clusters_parser.add_argument('--min-size', type=int, help='Minimum cluster size')
    clusters_parser.add_argument('--cross-phylum', action='store_true', default=None,
                                 help='Only cross-phylum clusters')
    clusters_parser.add_argument('--phylum', type=str, help='Phylum substring')
    clusters_parser.add_argument('--sort', type=str, help='Sort key')
    clusters_parser.add_argument('--order', type=str, choices=['asc', 'desc'], help='Sort order')
    clusters_parser.add_argument('-o', '--output', type=str, default='-',
                                 help="Output CSV file ('-' for stdout)")

    members_parser = subparsers.add_parser('members', help=COMMANDS['members'])
    members_parser.add_argument('cluster_id', type=str, help='T1_C<n> or T2_C<n>')
    members_parser.add_argument('-o', '--output', type=str, default='-',
                                help="Output CSV file ('-' for stdout)")

    queue_parser = subparsers.add_parser('queue', help=COMMANDS['queue'])
    add_queue_filters(queue_parser)
    queue_parser.add_argument('-o', '--output', type=str, default='-',
                              help="Output CSV file ('-' for stdout)")


def run_command(args: argparse.Namespace, context: ApplicationContext) -> int:
    """Run the specified export command"""
    if args.command == 'clusters':
        filters = ClusterFilters(min_size=args.min_size, cross_phylum=args.cross_phylum,
                                 phylum=args.phylum)
        df = cluster_listing_frame(NoveltyService(context), args.tier, filters,
                                   sort=args.sort, order=args.order)
    elif args.command == 'members':
        df = cluster_members_frame(NoveltyService(context), args.cluster_id)
    elif args.command == 'queue':
        df = queue_frame(CurationWorkflow(context), queue_filters_from_args(args),
                         sort=args.sort, order=args.order)
    else:
        logger.error(f"Unknown command: {args.command}")
        return 1

    destination = write_frame(df, args.output)
    logger.info(f"Exported {len(df)} rows to {destination}")
    return 0
