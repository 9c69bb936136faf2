#!/usr/bin/env python3
"""
Novelty service: cluster summaries, listings and cross-tier links
"""
import logging
from typing import List, Optional, Any

from archaea.core.context import ApplicationContext
from archaea.db.repositories.novelty_repository import NoveltyRepository, SORT_OPTIONS
from archaea.db.sql import parse_pagination
from archaea.exceptions import InvalidArgumentError
from archaea.models.base import to_count
from archaea.models.novelty import (
    ClusterSummary, ClusterDetail, ClusterFilters, ClusterPage, CrossTierHit,
    NoveltyOverview, parse_cluster_tier, TIER_DARK_PROTEIN, TIER_ORPHAN_DOMAIN
)
from .summary import summarize_tier1_members, summarize_tier2_members

TIER_NAMES = {TIER_DARK_PROTEIN: 'dark protein', TIER_ORPHAN_DOMAIN: 'orphan domain'}


def validate_tier(tier: Any) -> int:
    """Coerce a tier argument to 1 or 2

    Raises:
        InvalidArgumentError: For anything else
    """
    try:
        value = int(tier)
    except (TypeError, ValueError):
        value = None
    if value not in TIER_NAMES:
        raise InvalidArgumentError(f"Invalid tier: {tier!r}. Expected 1 or 2.", {"tier": tier})
    return value


class NoveltyService:
    """Service for the two-tier novel fold model"""

    def __init__(self, context: ApplicationContext,
                 repository: Optional[NoveltyRepository] = None):
        self.context = context
        self.repository = repository or NoveltyRepository(context.db)
        self.logger = logging.getLogger("archaea.novelty")

    def _require_tier(self, cluster_id: str, expected: int) -> None:
        tier = parse_cluster_tier(cluster_id)
        if tier != expected:
            raise InvalidArgumentError(
                f"{cluster_id} is a Tier {tier} cluster, not Tier {expected}",
                {"cluster_id": cluster_id, "tier": tier}
            )

    def summarize_tier1_cluster(self, cluster_id: str) -> ClusterSummary:
        """Summary of a Tier 1 (dark protein) cluster

        Raises:
            InvalidArgumentError: If cluster_id is not a T1_C<n> id
            ClusterNotFoundError: If the cluster has no members
        """
        self._require_tier(cluster_id, TIER_DARK_PROTEIN)
        return summarize_tier1_members(cluster_id, self.repository.get_tier1_members(cluster_id))

    def summarize_tier2_cluster(self, cluster_id: str) -> ClusterSummary:
        """Summary of a Tier 2 (orphan domain) cluster

        Raises:
            InvalidArgumentError: If cluster_id is not a T2_C<n> id
            ClusterNotFoundError: If the cluster has no members
        """
        self._require_tier(cluster_id, TIER_ORPHAN_DOMAIN)
        return summarize_tier2_members(cluster_id, self.repository.get_tier2_members(cluster_id))

    def summarize_cluster(self, cluster_id: str) -> ClusterSummary:
        """Summary of either tier, chosen by the id prefix"""
        if parse_cluster_tier(cluster_id) == TIER_DARK_PROTEIN:
            return self.summarize_tier1_cluster(cluster_id)
        return self.summarize_tier2_cluster(cluster_id)

    def get_cluster_detail(self, cluster_id: str) -> ClusterDetail:
        """Summary, members, intra-cluster edges, phylum distribution and cross-tier hits

        Raises:
            InvalidArgumentError: If cluster_id is malformed
            ClusterNotFoundError: If the cluster has no members
        """
        tier = parse_cluster_tier(cluster_id)
        self.logger.debug(f"Loading {TIER_NAMES[tier]} cluster {cluster_id}")

        if tier == TIER_DARK_PROTEIN:
            members = self.repository.get_tier1_members(cluster_id)
            summary = summarize_tier1_members(cluster_id, members)
            edges = self.repository.get_tier1_edges(cluster_id)
            hits = self.repository.get_hits_for_tier1_proteins([m.protein_id for m in members])
        else:
            members = self.repository.get_tier2_members(cluster_id)
            summary = summarize_tier2_members(cluster_id, members)
            edges = self.repository.get_tier2_edges([m.edge_key for m in members])
            hits = self.repository.get_hits_for_tier2_cluster(cluster_id)

        return ClusterDetail(
            tier=tier,
            cluster=summary,
            members=members,
            edges=edges,
            phylum_distribution=self.repository.get_phylum_distribution(tier, cluster_id),
            cross_tier_hits=hits,
        )

    def list_clusters(self, tier: Any, filters: Optional[ClusterFilters] = None,
                      sort: Optional[str] = None, order: Optional[str] = None,
                      limit: Any = None, offset: Any = None) -> ClusterPage:
        """One page of cluster summaries for a tier

        Unknown sort keys fall back to cluster_size DESC.
        """
        tier = validate_tier(tier)
        page = parse_pagination(
            limit, offset,
            default_limit=self.context.get('pagination.default_limit', 50),
            max_limit=self.context.get('pagination.max_limit', 200),
        )
        sort_spec = SORT_OPTIONS[tier].resolve(sort, order)
        if sort and sort != sort_spec.key:
            self.logger.debug(f"Unknown sort key {sort!r}, using {sort_spec.key}")

        items, total = self.repository.list_clusters(tier, filters or ClusterFilters(), sort_spec, page)
        return ClusterPage(items=items, total=total, limit=page.limit, offset=page.offset)

    def cross_tier_hits_for_protein(self, protein_id: str) -> List[CrossTierHit]:
        """Hits where protein_id is the Tier 1 side"""
        return self.repository.get_hits_for_tier1_proteins([protein_id])

    def cross_tier_hits_for_domain(self, protein_id: str, domain_num: int) -> List[CrossTierHit]:
        """Hits where the given domain is the Tier 2 side"""
        return self.repository.get_hits_for_tier2([protein_id], domain_num=int(domain_num))

    def cross_tier_hits_for_tier2_protein(self, protein_id: str) -> List[CrossTierHit]:
        """Hits where any domain of protein_id is the Tier 2 side"""
        return self.repository.get_hits_for_tier2([protein_id])

    def overview_stats(self) -> NoveltyOverview:
        """Global counts for both tiers"""
        threshold = int(self.context.get('novelty.pan_phylum_min_phyla', 5))
        row = self.repository.get_overview_counts(threshold)
        return NoveltyOverview(**{name: to_count(row.get(name))
                                  for name in NoveltyOverview.__dataclass_fields__})
