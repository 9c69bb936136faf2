"""
Target organism commands for the archaea dashboard
"""

import argparse
import logging

from archaea.cli import emit_json, print_table
from archaea.core.context import ApplicationContext
from archaea.models.organism import OrganismFilters
from archaea.organisms.service import OrganismService

logger = logging.getLogger("archaea.cli.organisms")

COMMANDS = {
    'list': 'List target organisms with their aggregate counts',
    'show': 'Show one organism with breakdowns and top proteins',
}

LIST_COLUMNS = ['id', 'organism_name', 'phylum', 'protein_count', 'proteins_with_structures',
                'domain_count', 'novel_fold_count', 'avg_plddt', 'curation_pending']


def setup_parser(parser: argparse.ArgumentParser) -> None:
    subparsers = parser.add_subparsers(dest='command', help='Organism command')

    list_parser = subparsers.add_parser('list', help=COMMANDS['list'])
    list_parser.add_argument('--phylum', type=str, help='Exact phylum')
    list_parser.add_argument('--major-group', type=str, help='Exact major group')
    list_parser.add_argument('--sort', type=str, help='Sort key (default protein_count)')
    list_parser.add_argument('--order', type=str, choices=['asc', 'desc'], help='Sort order')

    show_parser = subparsers.add_parser('show', help=COMMANDS['show'])
    show_parser.add_argument('organism_id', type=str, help='target_classes id')


def run_command(args: argparse.Namespace, context: ApplicationContext) -> int:
    service = OrganismService(context)

    if args.command == 'list':
        listing = service.list_organisms(
            OrganismFilters(phylum=args.phylum, major_group=args.major_group),
            sort=args.sort, order=args.order,
        )
        if args.json:
            emit_json(listing.to_dict())
            return 0
        print_table((o.to_dict() for o in listing.organisms), LIST_COLUMNS)
        print(f"\n{listing.total} organisms")
        return 0

    if args.command == 'show':
        detail = service.get_organism_detail(args.organism_id)
        if args.json:
            emit_json(detail.to_dict())
            return 0
        organism = detail.organism
        print(f"{organism.organism_name or organism.class_name} (id {organism.id})")
        print(f"  Phylum:       {organism.phylum or '-'} / {organism.major_group or '-'}")
        print(f"  Proteins:     {organism.actual_protein_count} "
              f"({organism.proteins_with_structures} with structures)")
        print(f"  Domains:      {organism.domain_count} on {organism.proteins_with_domains} proteins")
        print(f"  Novel folds:  {organism.novel_fold_count} clusters")
        print("  pLDDT:        " + ", ".join(f"{e.value} {e.count}" for e in detail.quality_distribution))
        print()
        print_table((p.to_dict() for p in detail.top_proteins),
                    ['protein_id', 'source', 'mean_plddt', 'quality_score', 'curation_status'])
        return 0

    logger.error(f"Unknown command: {args.command}")
    return 1
