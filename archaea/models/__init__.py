"""
Data models for the archaea dashboard
"""
from .novelty import (
    Tier1Member, Tier2Member, ClusterSummary, ClusterEdge, PhylumCount,
    CrossTierHit, ClusterDetail, ClusterFilters, ClusterPage, NoveltyOverview,
    parse_cluster_tier, domain_edge_key, TIER_DARK_PROTEIN, TIER_ORPHAN_DOMAIN
)
from .curation import (
    CurationStatus, DecisionType, NoveltyCategory, UNSET,
    DecisionRequest, DecisionResult, CurationCandidate, CurationDecision,
    QueueFilters, QueueItem, QueuePage, CurationProgress
)
from .protein import (
    Domain, DomainPfamHit, ProteinDetail, ProteinSummary, ProteinFilters,
    ProteinReport, StructuralCluster, StructuralClusterMember, StructuralClusterFilters
)
from .stats import DashboardStats
from .organism import (
    Organism, OrganismFilters, OrganismListing, OrganismDetail, OrganismProtein,
    OrganismNovelFoldProtein
)
from .landscape import (
    CountEntry, PfamCoverage, TGroupCount, DomainLandscape, ClusterSet, ClusterSetSummary,
    SizeBin, CrossComparison, EcodNovelty, TopStructuralCluster, ClusteringAnalysis
)

__all__ = [
    # Novelty
    'Tier1Member', 'Tier2Member', 'ClusterSummary', 'ClusterEdge', 'PhylumCount',
    'CrossTierHit', 'ClusterDetail', 'ClusterFilters', 'ClusterPage', 'NoveltyOverview',
    'parse_cluster_tier', 'domain_edge_key', 'TIER_DARK_PROTEIN', 'TIER_ORPHAN_DOMAIN',

    # Curation
    'CurationStatus', 'DecisionType', 'NoveltyCategory', 'UNSET',
    'DecisionRequest', 'DecisionResult', 'CurationCandidate', 'CurationDecision',
    'QueueFilters', 'QueueItem', 'QueuePage', 'CurationProgress',

    # Proteins and legacy clusters
    'Domain', 'DomainPfamHit', 'ProteinDetail', 'ProteinSummary', 'ProteinFilters',
    'ProteinReport', 'StructuralCluster', 'StructuralClusterMember', 'StructuralClusterFilters',

    'DashboardStats',

    # Organisms and landscape
    'Organism', 'OrganismFilters', 'OrganismListing', 'OrganismDetail', 'OrganismProtein',
    'OrganismNovelFoldProtein', 'CountEntry', 'PfamCoverage', 'TGroupCount', 'DomainLandscape',
    'ClusterSet', 'ClusterSetSummary', 'SizeBin', 'CrossComparison', 'EcodNovelty',
    'TopStructuralCluster', 'ClusteringAnalysis',
]
