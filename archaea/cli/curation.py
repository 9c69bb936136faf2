"""
Curation commands for the archaea dashboard
"""

import argparse
import logging
from typing import Optional

from archaea.cli import emit_json, print_table
from archaea.core.context import ApplicationContext
from archaea.curation.workflow import CurationWorkflow, VALID_DECISIONS
from archaea.models.curation import DecisionRequest, QueueFilters, ECOD_GROUP_FIELDS

logger = logging.getLogger("archaea.cli.curation")

# Define commands in this group
COMMANDS = {
    'queue': 'Show the review queue',
    'show': 'Show a curation candidate',
    'decide': 'Submit a curation decision',
    'history': 'Show the decision history of a protein',
}

QUEUE_COLUMNS = ['protein_id', 'curation_status', 'novelty_category', 'priority_category',
                 'priority_rank', 'mean_plddt', 'phylum']
HISTORY_COLUMNS = ['created_at', 'curator_name', 'decision_type', 'previous_status', 'new_status',
                   'notes']


def ecod_group(value: str) -> Optional[int]:
    """argparse type: an ECOD group id, or 'null' to clear the stored value"""
    if value.lower() in ('null', 'none'):
        return None
    try:
        return int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected an integer or 'null', got {value!r}")


def add_queue_filters(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('--novelty', type=str, help='Novelty category or all')
    parser.add_argument('--priority', type=str, help='Priority category or all')
    parser.add_argument('--status', type=str, default='pending',
                        help='Curation status or all (default pending)')
    parser.add_argument('--has-structure', dest='has_structure', action='store_true', default=None,
                        help='Only candidates with a predicted structure')
    parser.add_argument('--taxonomy', type=str, help='Taxonomy class (exact match)')
    parser.add_argument('--sort', type=str, help='priority_rank (default) or protein_id')
    parser.add_argument('--order', type=str, choices=['asc', 'desc'], help='Sort order')


def queue_filters_from_args(args: argparse.Namespace) -> QueueFilters:
    return QueueFilters(novelty=args.novelty, priority=args.priority, status=args.status,
                        has_structure=args.has_structure, taxonomy=args.taxonomy)


def setup_parser(parser: argparse.ArgumentParser) -> None:
    """Set up the argument parser for curation commands"""
    subparsers = parser.add_subparsers(dest='command', help='Curation command')

    queue_parser = subparsers.add_parser('queue', help=COMMANDS['queue'])
    add_queue_filters(queue_parser)
    queue_parser.add_argument('--limit', type=int, help='Page size')
    queue_parser.add_argument('--offset', type=int, default=0, help='Page offset')

    show_parser = subparsers.add_parser('show', help=COMMANDS['show'])
    show_parser.add_argument('protein_id', type=str, help='Protein ID')

    decide_parser = subparsers.add_parser('decide', help=COMMANDS['decide'])
    decide_parser.add_argument('protein_id', type=str, help='Protein ID')
    decide_parser.add_argument('decision_type', type=str, choices=VALID_DECISIONS,
                               help='Decision to record')
    decide_parser.add_argument('--curator', type=str, required=True, help='Curator name')
    # Omitted groups keep the stored value; 'null' clears it
    for name in ECOD_GROUP_FIELDS:
        flag = '--' + name.replace('ecod_', '').replace('_', '-')
        decide_parser.add_argument(flag, dest=name, type=ecod_group, default=argparse.SUPPRESS,
                                   help=f"ECOD {name.split('_')[1].upper()}-group id or null")
    decide_parser.add_argument('--novel-fold', dest='is_novel_fold', action='store_true', default=None,
                               help='Mark the protein as a novel fold')
    decide_parser.add_argument('--novel-topology', dest='is_novel_topology', action='store_true',
                               default=None, help='Mark the protein as a novel topology')
    decide_parser.add_argument('--confidence', dest='confidence_level', type=int,
                               help='Confidence level (1-5)')
    decide_parser.add_argument('--notes', type=str, help='Free-text curator notes')

    history_parser = subparsers.add_parser('history', help=COMMANDS['history'])
    history_parser.add_argument('protein_id', type=str, help='Protein ID')
    history_parser.add_argument('--limit', type=int, default=100, help='Maximum rows')


def run_command(args: argparse.Namespace, context: ApplicationContext) -> int:
    """Run the specified curation command"""
    workflow = CurationWorkflow(context)

    if args.command == 'queue':
        return _show_queue(args, workflow)
    elif args.command == 'show':
        return _show_candidate(args, workflow)
    elif args.command == 'decide':
        return _decide(args, workflow)
    elif args.command == 'history':
        return _history(args, workflow)
    else:
        logger.error(f"Unknown command: {args.command}")
        return 1


def _show_queue(args: argparse.Namespace, workflow: CurationWorkflow) -> int:
    page = workflow.list_queue(queue_filters_from_args(args), sort=args.sort, order=args.order,
                               limit=args.limit, offset=args.offset)
    if args.json:
        emit_json(page.to_dict())
        return 0
    print_table((i.to_dict() for i in page.items), QUEUE_COLUMNS)
    print(f"\nShowing {len(page.items)} of {page.total} candidates (offset {page.offset})")
    return 0


def _show_candidate(args: argparse.Namespace, workflow: CurationWorkflow) -> int:
    candidate = workflow.get_candidate(args.protein_id).to_dict()
    if args.json:
        emit_json(candidate)
        return 0
    for key, value in candidate.items():
        if value is not None:
            print(f"{key:<24} {value}")
    return 0


def _decide(args: argparse.Namespace, workflow: CurationWorkflow) -> int:
    groups = {name: getattr(args, name) for name in ECOD_GROUP_FIELDS if hasattr(args, name)}
    request = DecisionRequest(
        protein_id=args.protein_id,
        curator=args.curator,
        decision_type=args.decision_type,
        is_novel_fold=args.is_novel_fold,
        is_novel_topology=args.is_novel_topology,
        confidence_level=args.confidence_level,
        notes=args.notes,
        **groups
    )
    result = workflow.submit_decision(request)

    if args.json:
        emit_json(result.to_response())
        return 0
    print(f"{result.protein_id}: {result.previous_status} -> {result.new_status}")
    if result.next_protein:
        print(f"Next pending protein: {result.next_protein}")
    return 0


def _history(args: argparse.Namespace, workflow: CurationWorkflow) -> int:
    decisions = workflow.get_decision_history(args.protein_id, limit=args.limit)
    if args.json:
        emit_json([d.to_dict() for d in decisions])
        return 0
    if not decisions:
        print(f"No decisions recorded for {args.protein_id}")
        return 0
    print_table((d.to_dict() for d in decisions), HISTORY_COLUMNS)
    return 0
