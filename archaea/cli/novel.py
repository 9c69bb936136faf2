"""
Novel fold commands for the archaea dashboard
"""

import argparse
import logging

from archaea.cli import emit_json, print_table
from archaea.core.context import ApplicationContext
from archaea.models.novelty import ClusterFilters
from archaea.novelty.service import NoveltyService

logger = logging.getLogger("archaea.cli.novel")

# Define commands in this group
COMMANDS = {
    'list': 'List Tier 1 or Tier 2 clusters',
    'show': 'Show one cluster with members and edges',
    'overview': 'Global counts for both tiers',
    'hits': 'Cross-tier hits for a protein or domain',
}

LIST_COLUMNS = ['cluster_id', 'cluster_size', 'phylum_count', 'cross_phylum', 'avg_plddt', 'phyla']
HIT_COLUMNS = ['tier1_protein_id', 'tier1_cluster_id', 'tier2_protein_id', 'tier2_domain_num',
               'tier2_cluster_id', 'alntmscore', 'evalue']


def setup_parser(parser: argparse.ArgumentParser) -> None:
    """Set up the argument parser for novel fold commands"""
    subparsers = parser.add_subparsers(dest='command', help='Novel fold command')

    list_parser = subparsers.add_parser('list', help=COMMANDS['list'])
    list_parser.add_argument('--tier', type=int, choices=[1, 2], default=1,
                             help='1 = dark proteins, 2 = orphan domains')
    list_parser.add_argument('--min-size', type=int, help='Minimum cluster size')
    phylum_group = list_parser.add_mutually_exclusive_group()
    phylum_group.add_argument('--cross-phylum', dest='cross_phylum', action='store_true', default=None,
                              help='Only clusters spanning more than one phylum')
    phylum_group.add_argument('--single-phylum', dest='cross_phylum', action='store_false',
                              help='Only clusters within one phylum')
    list_parser.add_argument('--phylum', type=str, help='Phylum substring (case-insensitive)')
    list_parser.add_argument('--sort', type=str, help='Sort key (default cluster_size)')
    list_parser.add_argument('--order', type=str, choices=['asc', 'desc'], help='Sort order')
    list_parser.add_argument('--limit', type=int, help='Page size')
    list_parser.add_argument('--offset', type=int, default=0, help='Page offset')

    show_parser = subparsers.add_parser('show', help=COMMANDS['show'])
    show_parser.add_argument('cluster_id', type=str, help='T1_C<n> or T2_C<n>')

    subparsers.add_parser('overview', help=COMMANDS['overview'])

    hits_parser = subparsers.add_parser('hits', help=COMMANDS['hits'])
    hits_parser.add_argument('protein_id', type=str, help='Protein ID')
    hits_parser.add_argument('--domain', type=int, help='Domain number (Tier 2 side)')
    hits_parser.add_argument('--tier2', action='store_true',
                             help='Treat the protein as the Tier 2 side')


def run_command(args: argparse.Namespace, context: ApplicationContext) -> int:
    """Run the specified novel fold command"""
    service = NoveltyService(context)

    if args.command == 'list':
        return _list_clusters(args, service)
    elif args.command == 'show':
        return _show_cluster(args, service)
    elif args.command == 'overview':
        return _overview(args, service)
    elif args.command == 'hits':
        return _hits(args, service)
    else:
        logger.error(f"Unknown command: {args.command}")
        return 1


def _list_clusters(args: argparse.Namespace, service: NoveltyService) -> int:
    filters = ClusterFilters(min_size=args.min_size, cross_phylum=args.cross_phylum,
                             phylum=args.phylum)
    page = service.list_clusters(args.tier, filters, sort=args.sort, order=args.order,
                                 limit=args.limit, offset=args.offset)
    if args.json:
        emit_json(page.to_dict())
        return 0
    print_table((c.to_dict() for c in page.items), LIST_COLUMNS)
    print(f"\nShowing {len(page.items)} of {page.total} Tier {args.tier} clusters "
          f"(offset {page.offset})")
    return 0


def _show_cluster(args: argparse.Namespace, service: NoveltyService) -> int:
    detail = service.get_cluster_detail(args.cluster_id)
    if args.json:
        emit_json(detail.to_dict())
        return 0

    summary = detail.cluster
    print(f"Cluster {summary.cluster_id} (Tier {detail.tier})")
    print(f"  Size:          {summary.cluster_size}")
    print(f"  Cross-phylum:  {summary.cross_phylum} ({summary.phylum_count} phyla: {summary.phyla or '-'})")
    print(f"  Genomes:       {summary.genome_count}")
    if summary.avg_plddt is not None:
        print(f"  pLDDT:         avg {summary.avg_plddt:.1f}, "
              f"min {summary.min_plddt:.1f}, max {summary.max_plddt:.1f}")
    if summary.protein_count is not None:
        print(f"  Proteins:      {summary.protein_count}")
    print(f"  Edges:         {len(detail.edges)}")
    print(f"  Cross-tier:    {len(detail.cross_tier_hits)} hits")
    print()
    columns = ['protein_id', 'mean_plddt', 'phylum', 'genome_accession']
    if detail.tier == 2:
        columns.insert(1, 'domain_num')
    print_table((m.to_dict() for m in detail.members), columns)
    return 0


def _overview(args: argparse.Namespace, service: NoveltyService) -> int:
    overview = service.overview_stats().to_dict()
    if args.json:
        emit_json(overview)
        return 0
    for key, value in overview.items():
        print(f"{key.replace('_', ' '):<24} {value}")
    return 0


def _hits(args: argparse.Namespace, service: NoveltyService) -> int:
    if args.domain is not None:
        hits = service.cross_tier_hits_for_domain(args.protein_id, args.domain)
    elif args.tier2:
        hits = service.cross_tier_hits_for_tier2_protein(args.protein_id)
    else:
        hits = service.cross_tier_hits_for_protein(args.protein_id)

    if args.json:
        emit_json([h.to_dict() for h in hits])
        return 0
    if not hits:
        print(f"No cross-tier hits for {args.protein_id}")
        return 0
    print_table((h.to_dict() for h in hits), HIT_COLUMNS)
    return 0
