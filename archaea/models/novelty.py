#!/usr/bin/env python3
"""
Novel fold models for the archaea dashboard

Tier 1 clusters group whole proteins with no domain assignments; Tier 2
clusters group low-confidence domains with no Pfam match. Cross-tier hits
link the two.
"""
import re
from dataclasses import dataclass, field, asdict
from typing import Optional, List, Dict, Any

from archaea.exceptions import InvalidArgumentError
from .base import to_float, to_int, to_count, to_bool, to_str

CLUSTER_ID_RE = re.compile(r'^T([12])_C\d+$')

TIER_DARK_PROTEIN = 1
TIER_ORPHAN_DOMAIN = 2


def parse_cluster_tier(cluster_id: Optional[str]) -> int:
    """Return the tier encoded in a T1_C<n> / T2_C<n> id

    Raises:
        InvalidArgumentError: If the id is malformed
    """
    match = CLUSTER_ID_RE.match(cluster_id or '')
    if not match:
        raise InvalidArgumentError(
            "Invalid cluster ID format. Expected T1_CXXXX or T2_CXXXX.",
            {"cluster_id": cluster_id}
        )
    return int(match.group(1))


def domain_edge_key(protein_id: str, domain_num: int) -> str:
    """Domain identifier used by the Tier 2 edge table (pipes become underscores)"""
    return f"{str(protein_id).replace('|', '_')}_{domain_num}"


@dataclass
class Tier1Member:
    """Dark protein belonging to a Tier 1 cluster"""
    cluster_id: str
    protein_id: str
    db_protein_id: Optional[int] = None
    mean_plddt: Optional[float] = None
    seq_length: Optional[int] = None
    phylum: Optional[str] = None
    major_group: Optional[str] = None
    organism: Optional[str] = None
    genome_accession: Optional[str] = None

    @classmethod
    def from_db_row(cls, row: Dict[str, Any]) -> 'Tier1Member':
        return cls(
            cluster_id=str(row['cluster_id']),
            protein_id=str(row['protein_id']),
            db_protein_id=to_int(row.get('db_protein_id')),
            mean_plddt=to_float(row.get('mean_plddt')),
            seq_length=to_int(row.get('seq_length')),
            phylum=to_str(row.get('phylum')),
            major_group=to_str(row.get('major_group')),
            organism=to_str(row.get('organism')),
            genome_accession=to_str(row.get('genome_accession')),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class Tier2Member:
    """Orphan domain belonging to a Tier 2 cluster"""
    cluster_id: str
    protein_id: str
    domain_num: int
    domain_id: Optional[str] = None
    domain_range: Optional[str] = None
    dpam_prob: Optional[float] = None
    dali_zscore: Optional[float] = None
    mean_plddt: Optional[float] = None
    phylum: Optional[str] = None
    genome_accession: Optional[str] = None

    @property
    def edge_key(self) -> str:
        return domain_edge_key(self.protein_id, self.domain_num)

    @classmethod
    def from_db_row(cls, row: Dict[str, Any]) -> 'Tier2Member':
        return cls(
            cluster_id=str(row['cluster_id']),
            protein_id=str(row['protein_id']),
            domain_num=to_int(row['domain_num']),
            domain_id=to_str(row.get('domain_id')),
            domain_range=to_str(row.get('domain_range')),
            dpam_prob=to_float(row.get('dpam_prob')),
            dali_zscore=to_float(row.get('dali_zscore')),
            mean_plddt=to_float(row.get('mean_plddt')),
            phylum=to_str(row.get('phylum')),
            genome_accession=to_str(row.get('genome_accession')),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ClusterSummary:
    """Aggregate view of one novel fold cluster

    Tier 2 summaries additionally carry protein/domain counts and the
    DPAM / DALI averages; for Tier 1 those stay None.
    """
    cluster_id: str
    tier: int
    cluster_size: int
    cross_phylum: bool
    phylum_count: int
    genome_count: int
    phyla: str
    min_plddt: Optional[float] = None
    max_plddt: Optional[float] = None
    avg_plddt: Optional[float] = None
    avg_length: Optional[float] = None
    protein_count: Optional[int] = None
    domain_count: Optional[int] = None
    avg_dpam_prob: Optional[float] = None
    avg_dali_zscore: Optional[float] = None

    @classmethod
    def from_db_row(cls, row: Dict[str, Any], tier: int) -> 'ClusterSummary':
        """Build from an aggregated listing row"""
        return cls(
            cluster_id=str(row['cluster_id']),
            tier=tier,
            cluster_size=to_count(row.get('cluster_size')),
            cross_phylum=bool(to_bool(row.get('cross_phylum'))),
            phylum_count=to_count(row.get('phylum_count')),
            genome_count=to_count(row.get('genome_count')),
            phyla=row.get('phyla') or '',
            min_plddt=to_float(row.get('min_plddt')),
            max_plddt=to_float(row.get('max_plddt')),
            avg_plddt=to_float(row.get('avg_plddt')),
            avg_length=to_float(row.get('avg_length')),
            protein_count=to_int(row.get('protein_count')) if tier == TIER_ORPHAN_DOMAIN else None,
            domain_count=to_int(row.get('domain_count')) if tier == TIER_ORPHAN_DOMAIN else None,
            avg_dpam_prob=to_float(row.get('avg_dpam_prob')),
            avg_dali_zscore=to_float(row.get('avg_dali_zscore')),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        if self.tier == TIER_DARK_PROTEIN:
            for key in ('protein_count', 'domain_count', 'avg_dpam_prob', 'avg_dali_zscore'):
                data.pop(key)
        return data


@dataclass
class ClusterEdge:
    """Foldseek edge between two members of the same cluster"""
    query: str
    target: str
    fident: Optional[float] = None
    alnlen: Optional[int] = None
    evalue: Optional[float] = None
    bits: Optional[float] = None
    lddt: Optional[float] = None
    prob: Optional[float] = None
    alntmscore: Optional[float] = None
    qtmscore: Optional[float] = None
    ttmscore: Optional[float] = None

    @classmethod
    def from_db_row(cls, row: Dict[str, Any]) -> 'ClusterEdge':
        return cls(
            query=str(row['query']),
            target=str(row['target']),
            fident=to_float(row.get('fident')),
            alnlen=to_int(row.get('alnlen')),
            evalue=to_float(row.get('evalue')),
            bits=to_float(row.get('bits')),
            lddt=to_float(row.get('lddt')),
            prob=to_float(row.get('prob')),
            alntmscore=to_float(row.get('alntmscore')),
            qtmscore=to_float(row.get('qtmscore')),
            ttmscore=to_float(row.get('ttmscore')),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v is not None or k in ('query', 'target')}


@dataclass
class PhylumCount:
    phylum: Optional[str]
    count: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class CrossTierHit:
    """Structural similarity between a dark protein and an orphan domain"""
    tier1_protein_id: str
    tier2_protein_id: str
    tier2_domain_num: int
    fident: Optional[float] = None
    alnlen: Optional[int] = None
    evalue: Optional[float] = None
    alntmscore: Optional[float] = None
    tier1_cluster_id: Optional[str] = None
    tier1_cluster_size: Optional[int] = None
    tier2_cluster_id: Optional[str] = None
    tier2_cluster_size: Optional[int] = None

    @classmethod
    def from_db_row(cls, row: Dict[str, Any]) -> 'CrossTierHit':
        return cls(
            tier1_protein_id=str(row['tier1_protein_id']),
            tier2_protein_id=str(row['tier2_protein_id']),
            tier2_domain_num=to_int(row['tier2_domain_num']),
            fident=to_float(row.get('fident')),
            alnlen=to_int(row.get('alnlen')),
            evalue=to_float(row.get('evalue')),
            alntmscore=to_float(row.get('alntmscore')),
            tier1_cluster_id=to_str(row.get('tier1_cluster_id')),
            tier1_cluster_size=to_int(row.get('tier1_cluster_size')),
            tier2_cluster_id=to_str(row.get('tier2_cluster_id')),
            tier2_cluster_size=to_int(row.get('tier2_cluster_size')),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ClusterDetail:
    """Everything the detail page shows for one cluster"""
    tier: int
    cluster: ClusterSummary
    members: List[Any] = field(default_factory=list)
    edges: List[ClusterEdge] = field(default_factory=list)
    phylum_distribution: List[PhylumCount] = field(default_factory=list)
    cross_tier_hits: List[CrossTierHit] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'tier': self.tier,
            'cluster': self.cluster.to_dict(),
            'members': [m.to_dict() for m in self.members],
            'edges': [e.to_dict() for e in self.edges],
            'phylum_distribution': [p.to_dict() for p in self.phylum_distribution],
            'cross_tier_hits': [h.to_dict() for h in self.cross_tier_hits],
        }


@dataclass
class ClusterFilters:
    """Listing filters shared by both tiers"""
    min_size: Optional[int] = None
    cross_phylum: Optional[bool] = None
    phylum: Optional[str] = None


@dataclass
class ClusterPage:
    items: List[ClusterSummary]
    total: int
    limit: int
    offset: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            'items': [c.to_dict() for c in self.items],
            'total': self.total,
            'limit': self.limit,
            'offset': self.offset,
        }


@dataclass
class NoveltyOverview:
    """Global counts for both tiers"""
    tier1_clusters: int = 0
    tier1_proteins: int = 0
    tier1_multi_member: int = 0
    tier1_singletons: int = 0
    tier1_cross_phylum: int = 0
    tier2_clusters: int = 0
    tier2_domains: int = 0
    tier2_proteins: int = 0
    tier2_cross_phylum: int = 0
    tier2_pan_phylum: int = 0
    cross_tier_hits: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
