#!/usr/bin/env python3
"""
Cluster summary aggregation

Pure functions over membership rows; no database access. Aggregates skip
missing values and are None when every value is missing, never zero.
"""
from typing import Iterable, List, Optional, Sequence

from archaea.exceptions import ClusterNotFoundError
from archaea.models.novelty import (
    Tier1Member, Tier2Member, ClusterSummary, TIER_DARK_PROTEIN, TIER_ORPHAN_DOMAIN
)


def _present(values: Iterable[Optional[float]]) -> List[float]:
    return [v for v in values if v is not None]


def mean_or_none(values: Iterable[Optional[float]]) -> Optional[float]:
    present = _present(values)
    if not present:
        return None
    return sum(present) / len(present)


def min_or_none(values: Iterable[Optional[float]]) -> Optional[float]:
    present = _present(values)
    return min(present) if present else None


def max_or_none(values: Iterable[Optional[float]]) -> Optional[float]:
    present = _present(values)
    return max(present) if present else None


def distinct(values: Iterable[Optional[str]]) -> List[str]:
    """Sorted distinct non-empty values"""
    return sorted({v for v in values if v})


def _check_members(cluster_id: str, members: Sequence, tier: int) -> None:
    if not members:
        raise ClusterNotFoundError(f"Cluster not found: {cluster_id}",
                                   {"cluster_id": cluster_id, "tier": tier})


def summarize_tier1_members(cluster_id: str, members: Sequence[Tier1Member]) -> ClusterSummary:
    """Summarize a Tier 1 (dark protein) cluster from its member rows

    Args:
        cluster_id: Cluster ID the members belong to
        members: Every membership row of the cluster

    Returns:
        ClusterSummary with tier 1 fields

    Raises:
        ClusterNotFoundError: If members is empty
    """
    _check_members(cluster_id, members, TIER_DARK_PROTEIN)
    phyla = distinct(m.phylum for m in members)
    plddt = [m.mean_plddt for m in members]
    return ClusterSummary(
        cluster_id=cluster_id,
        tier=TIER_DARK_PROTEIN,
        cluster_size=len(members),
        cross_phylum=len(phyla) > 1,
        phylum_count=len(phyla),
        genome_count=len(distinct(m.genome_accession for m in members)),
        phyla=', '.join(phyla),
        min_plddt=min_or_none(plddt),
        max_plddt=max_or_none(plddt),
        avg_plddt=mean_or_none(plddt),
        avg_length=mean_or_none(m.seq_length for m in members),
    )


def summarize_tier2_members(cluster_id: str, members: Sequence[Tier2Member]) -> ClusterSummary:
    """Summarize a Tier 2 (orphan domain) cluster from its member rows

    Same shape as Tier 1 at domain granularity, plus the distinct owning
    protein count and the DPAM probability / DALI z-score averages.

    Raises:
        ClusterNotFoundError: If members is empty
    """
    _check_members(cluster_id, members, TIER_ORPHAN_DOMAIN)
    phyla = distinct(m.phylum for m in members)
    plddt = [m.mean_plddt for m in members]
    return ClusterSummary(
        cluster_id=cluster_id,
        tier=TIER_ORPHAN_DOMAIN,
        cluster_size=len(members),
        cross_phylum=len(phyla) > 1,
        phylum_count=len(phyla),
        genome_count=len(distinct(m.genome_accession for m in members)),
        phyla=', '.join(phyla),
        min_plddt=min_or_none(plddt),
        max_plddt=max_or_none(plddt),
        avg_plddt=mean_or_none(plddt),
        protein_count=len({m.protein_id for m in members}),
        domain_count=len(members),
        avg_dpam_prob=mean_or_none(m.dpam_prob for m in members),
        avg_dali_zscore=mean_or_none(m.dali_zscore for m in members),
    )
