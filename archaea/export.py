#!/usr/bin/env python3
"""
CSV export of cluster listings, cluster members and the curation queue
"""
import os
import sys
import logging
from dataclasses import fields
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

import pandas as pd

from archaea.curation.workflow import CurationWorkflow
from archaea.models.curation import QueueFilters, QueueItem
from archaea.models.novelty import (
    ClusterFilters, ClusterSummary, Tier1Member, Tier2Member, parse_cluster_tier,
    TIER_DARK_PROTEIN
)
from archaea.novelty.service import NoveltyService, validate_tier

logger = logging.getLogger("archaea.export")

TIER1_SUMMARY_COLUMNS = ['cluster_id', 'tier', 'cluster_size', 'cross_phylum', 'phylum_count',
                         'genome_count', 'phyla', 'min_plddt', 'max_plddt', 'avg_plddt', 'avg_length']
TIER2_SUMMARY_COLUMNS = [f.name for f in fields(ClusterSummary) if f.name != 'avg_length']

# Rows fetched per listing request while exporting
EXPORT_PAGE_SIZE = 200


def records_to_frame(records: Iterable[Dict[str, Any]], columns: List[str]) -> pd.DataFrame:
    """DataFrame with a fixed column order, also when there are no records"""
    return pd.DataFrame(list(records), columns=columns)


def write_frame(df: pd.DataFrame, output: str) -> str:
    """Write df as CSV to output ('-' for stdout)

    Returns:
        Where the data went
    """
    if output == '-':
        df.to_csv(sys.stdout, index=False)
        return '<stdout>'
    directory = os.path.dirname(os.path.abspath(output))
    os.makedirs(directory, exist_ok=True)
    df.to_csv(output, index=False)
    logger.info(f"Wrote {len(df)} rows to {output}")
    return output


def _collect_pages(fetch: Callable[[int], Tuple[List[Any], int]]) -> List[Any]:
    """Walk a paginated listing until every row has been read"""
    rows: List[Any] = []
    offset = 0
    while True:
        items, total = fetch(offset)
        rows.extend(items)
        offset += len(items)
        if not items or offset >= total:
            return rows


def cluster_listing_frame(service: NoveltyService, tier: Any,
                          filters: Optional[ClusterFilters] = None,
                          sort: Optional[str] = None, order: Optional[str] = None) -> pd.DataFrame:
    """Every cluster of a tier matching filters, as a DataFrame"""
    tier = validate_tier(tier)

    def fetch(offset: int):
        page = service.list_clusters(tier, filters, sort=sort, order=order,
                                     limit=EXPORT_PAGE_SIZE, offset=offset)
        return page.items, page.total

    summaries = _collect_pages(fetch)
    columns = TIER1_SUMMARY_COLUMNS if tier == TIER_DARK_PROTEIN else TIER2_SUMMARY_COLUMNS
    return records_to_frame((s.to_dict() for s in summaries), columns)


def cluster_members_frame(service: NoveltyService, cluster_id: str) -> pd.DataFrame:
    """Members of one cluster as a DataFrame

    Raises:
        InvalidArgumentError: If cluster_id is malformed
        ClusterNotFoundError: If the cluster has no members
    """
    tier = parse_cluster_tier(cluster_id)
    detail = service.get_cluster_detail(cluster_id)
    member_type = Tier1Member if tier == TIER_DARK_PROTEIN else Tier2Member
    columns = [f.name for f in fields(member_type)]
    return records_to_frame((m.to_dict() for m in detail.members), columns)


def queue_frame(workflow: CurationWorkflow, filters: Optional[QueueFilters] = None,
                sort: Optional[str] = None, order: Optional[str] = None) -> pd.DataFrame:
    """Every queue item matching filters as a DataFrame"""

    def fetch(offset: int):
        page = workflow.list_queue(filters, sort=sort, order=order,
                                   limit=EXPORT_PAGE_SIZE, offset=offset)
        return page.items, page.total

    items = _collect_pages(fetch)
    return records_to_frame((i.to_dict() for i in items), [f.name for f in fields(QueueItem)])
