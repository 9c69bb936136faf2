#!/usr/bin/env python3
"""
Domain landscape and clustering analysis models
"""
from dataclasses import dataclass, field, asdict
from typing import Optional, List, Dict, Any

from .base import to_count, to_int, to_str


@dataclass
class CountEntry:
    """One value of a breakdown and how often it occurs"""
    value: Optional[str]
    count: int

    @classmethod
    def from_db_row(cls, row: Dict[str, Any]) -> 'CountEntry':
        return cls(value=to_str(row.get('key')), count=to_count(row.get('count')))

    def to_dict(self, label: str = 'value') -> Dict[str, Any]:
        return {label: self.value, 'count': self.count}


@dataclass
class PfamCoverage:
    """Domains split by whether their Pfam hits are known to ECOD"""
    ecod_pfam: int = 0
    novel_pfam: int = 0
    no_pfam: int = 0

    @classmethod
    def from_db_row(cls, row: Dict[str, Any]) -> 'PfamCoverage':
        return cls(
            ecod_pfam=to_count(row.get('ecod_pfam')),
            novel_pfam=to_count(row.get('novel_pfam')),
            no_pfam=to_count(row.get('no_pfam')),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class TGroupCount:
    """Domain count for one ECOD T-group with its Pfam split"""
    t_group: str
    count: int
    t_group_name: Optional[str] = None
    pfam: PfamCoverage = field(default_factory=PfamCoverage)

    @classmethod
    def from_db_row(cls, row: Dict[str, Any]) -> 'TGroupCount':
        return cls(
            t_group=str(row['t_group']),
            count=to_count(row.get('count')),
            t_group_name=to_str(row.get('t_group_name')),
            pfam=PfamCoverage.from_db_row(row),
        )

    def to_dict(self) -> Dict[str, Any]:
        result = {'t_group': self.t_group, 't_group_name': self.t_group_name, 'count': self.count}
        result.update(self.pfam.to_dict())
        return result


@dataclass
class DomainLandscape:
    total_domains: int = 0
    proteins_with_domains: int = 0
    unique_tgroups: int = 0
    multi_domain_proteins: int = 0
    novel_pfam_families: int = 0
    tgroup_distribution: List[TGroupCount] = field(default_factory=list)
    judge_breakdown: List[CountEntry] = field(default_factory=list)
    pfam_coverage: PfamCoverage = field(default_factory=PfamCoverage)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'total_domains': self.total_domains,
            'proteins_with_domains': self.proteins_with_domains,
            'unique_tgroups': self.unique_tgroups,
            'multi_domain_proteins': self.multi_domain_proteins,
            'novel_pfam_families': self.novel_pfam_families,
            'tgroup_distribution': [t.to_dict() for t in self.tgroup_distribution],
            'judge_breakdown': [j.to_dict('judge') for j in self.judge_breakdown],
            'pfam_coverage': self.pfam_coverage.to_dict(),
        }


@dataclass(frozen=True)
class ClusterSet:
    """One clustering run over proteins or domains

    ``table`` is None while the run has not been loaded yet.
    """
    type: str
    label: str
    method: str
    table: Optional[str] = None

    @property
    def pending(self) -> bool:
        return self.table is None


CLUSTER_SETS = [
    ClusterSet('protein_seq', 'Protein Sequence', 'MMseqs2', 'protein_seq_clusters'),
    ClusterSet('protein_struct', 'Protein Structure', 'Foldseek', 'protein_struct_clusters'),
    ClusterSet('domain_seq', 'Domain Sequence', 'MMseqs2', 'domain_seq_clusters'),
    ClusterSet('domain_struct', 'Domain Structure', 'Foldseek'),
]

# Cluster size bins in display order
SIZE_BINS = ['1', '2-5', '6-20', '21-100', '100+']


@dataclass
class ClusterSetSummary:
    cluster_set: ClusterSet
    clusters: int = 0
    members: int = 0
    singletons: int = 0
    largest: int = 0

    @classmethod
    def from_db_row(cls, cluster_set: ClusterSet, row: Dict[str, Any]) -> 'ClusterSetSummary':
        return cls(
            cluster_set=cluster_set,
            clusters=to_count(row.get('clusters')),
            members=to_count(row.get('members')),
            singletons=to_count(row.get('singletons')),
            largest=to_count(row.get('largest')),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.cluster_set.type,
            'label': self.cluster_set.label,
            'method': self.cluster_set.method,
            'clusters': self.clusters,
            'members': self.members,
            'singletons': self.singletons,
            'largest': self.largest,
            'pending': self.cluster_set.pending,
        }


@dataclass
class SizeBin:
    bin: str
    clusters: int = 0
    members: int = 0

    @classmethod
    def from_db_row(cls, row: Dict[str, Any]) -> 'SizeBin':
        return cls(bin=str(row['bin']), clusters=to_count(row.get('clusters')),
                   members=to_count(row.get('members')))

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class CrossComparison:
    """Proteins placed by both sequence and structure clustering"""
    both_clustered: int = 0
    rescued_by_structure: int = 0
    both_singleton: int = 0
    seq_only: int = 0

    @classmethod
    def from_db_row(cls, row: Dict[str, Any]) -> 'CrossComparison':
        return cls(
            both_clustered=to_count(row.get('both_clustered')),
            rescued_by_structure=to_count(row.get('rescued_by_structure')),
            both_singleton=to_count(row.get('both_singleton')),
            seq_only=to_count(row.get('seq_only')),
        )

    @property
    def total(self) -> int:
        return self.both_clustered + self.rescued_by_structure + self.both_singleton + self.seq_only

    def to_dict(self) -> Dict[str, Any]:
        result = asdict(self)
        result['total'] = self.total
        return result


@dataclass
class EcodNovelty:
    """Sequence cluster members with and without an ECOD member in their cluster"""
    has_ecod: int = 0
    novel: int = 0

    @classmethod
    def from_db_row(cls, row: Dict[str, Any]) -> 'EcodNovelty':
        return cls(has_ecod=to_count(row.get('has_ecod')), novel=to_count(row.get('novel')))

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class TopStructuralCluster:
    cluster_id: str
    cluster_size: Optional[int] = None
    cluster_rep: Optional[str] = None
    n_classes: int = 0
    classes: Optional[str] = None

    @classmethod
    def from_db_row(cls, row: Dict[str, Any]) -> 'TopStructuralCluster':
        return cls(
            cluster_id=str(row['cluster_id']),
            cluster_size=to_int(row.get('cluster_size')),
            cluster_rep=to_str(row.get('cluster_rep')),
            n_classes=to_count(row.get('n_classes')),
            classes=to_str(row.get('classes')),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ClusteringAnalysis:
    summary: List[ClusterSetSummary] = field(default_factory=list)
    size_distributions: Dict[str, List[SizeBin]] = field(default_factory=dict)
    cross_comparison: CrossComparison = field(default_factory=CrossComparison)
    ecod_novelty: EcodNovelty = field(default_factory=EcodNovelty)
    top_structural_clusters: List[TopStructuralCluster] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'summary': [s.to_dict() for s in self.summary],
            'size_distributions': {
                name: [b.to_dict() for b in bins] for name, bins in self.size_distributions.items()
            },
            'cross_comparison': self.cross_comparison.to_dict(),
            'ecod_novelty': self.ecod_novelty.to_dict(),
            'top_structural_clusters': [c.to_dict() for c in self.top_structural_clusters],
        }
