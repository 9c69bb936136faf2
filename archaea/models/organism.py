#!/usr/bin/env python3
"""
Target organism (target_classes) models
"""
from dataclasses import dataclass, field, fields, asdict
from typing import Optional, List, Dict, Any

from .base import to_float, to_int, to_count, to_bool, to_str
from .landscape import CountEntry

# pLDDT buckets from most to least confident, with their lower bounds
QUALITY_BUCKETS = [
    ('very_high', 90),
    ('confident', 70),
    ('low', 50),
    ('very_low', None),
]


@dataclass
class OrganismFilters:
    """Exact-match filters for the organism listing"""
    phylum: Optional[str] = None
    major_group: Optional[str] = None


@dataclass
class Organism:
    """One target organism with its aggregate protein, domain and curation counts"""
    id: int
    class_name: Optional[str] = None
    organism_name: Optional[str] = None
    phylum: Optional[str] = None
    major_group: Optional[str] = None
    genome_accession: Optional[str] = None
    tax_id: Optional[int] = None
    source_category: Optional[str] = None
    completeness: Optional[float] = None
    contamination: Optional[float] = None
    quality_tier: Optional[str] = None
    protein_count: Optional[int] = None
    actual_protein_count: int = 0
    proteins_with_structures: int = 0
    proteins_with_pae: int = 0
    domain_count: int = 0
    proteins_with_domains: int = 0
    good_domains: int = 0
    novel_fold_count: int = 0
    avg_plddt: Optional[float] = None
    avg_quality_score: Optional[float] = None
    curation_pending: int = 0
    curation_classified: int = 0
    curation_total: int = 0

    @classmethod
    def from_db_row(cls, row: Dict[str, Any]) -> 'Organism':
        """Build from a listing or detail row; aggregates absent from the row are zero"""
        counts = {f.name: to_count(row.get(f.name)) for f in fields(cls)
                  if f.type is int and f.name != 'id'}
        return cls(
            id=to_int(row['id']),
            class_name=to_str(row.get('class_name')),
            organism_name=to_str(row.get('organism_name')),
            phylum=to_str(row.get('phylum')),
            major_group=to_str(row.get('major_group')),
            genome_accession=to_str(row.get('genome_accession')),
            tax_id=to_int(row.get('tax_id')),
            source_category=to_str(row.get('source_category')),
            completeness=to_float(row.get('completeness')),
            contamination=to_float(row.get('contamination')),
            quality_tier=to_str(row.get('quality_tier')),
            protein_count=to_int(row.get('protein_count')),
            avg_plddt=to_float(row.get('avg_plddt')),
            avg_quality_score=to_float(row.get('avg_quality_score')),
            **counts,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class OrganismListing:
    organisms: List[Organism] = field(default_factory=list)
    phyla: List[CountEntry] = field(default_factory=list)
    major_groups: List[CountEntry] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.organisms)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'organisms': [o.to_dict() for o in self.organisms],
            'total': self.total,
            'filters': {
                'phyla': [p.to_dict() for p in self.phyla],
                'major_groups': [g.to_dict() for g in self.major_groups],
            },
        }


@dataclass
class OrganismProtein:
    """Protein of an organism ranked by structure quality"""
    protein_id: str
    source: Optional[str] = None
    sequence_length: Optional[int] = None
    has_structure: Optional[bool] = None
    mean_plddt: Optional[float] = None
    quality_score: Optional[float] = None
    af3_quality_category: Optional[str] = None
    novelty_category: Optional[str] = None
    curation_status: Optional[str] = None
    is_novel_fold: Optional[bool] = None

    @classmethod
    def from_db_row(cls, row: Dict[str, Any]) -> 'OrganismProtein':
        return cls(
            protein_id=str(row['protein_id']),
            source=to_str(row.get('source')),
            sequence_length=to_int(row.get('sequence_length')),
            has_structure=to_bool(row.get('has_structure')),
            mean_plddt=to_float(row.get('mean_plddt')),
            quality_score=to_float(row.get('quality_score')),
            af3_quality_category=to_str(row.get('af3_quality_category')),
            novelty_category=to_str(row.get('novelty_category')),
            curation_status=to_str(row.get('curation_status')),
            is_novel_fold=to_bool(row.get('is_novel_fold')),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class OrganismNovelFoldProtein:
    """Tier 1 membership of one of the organism's proteins"""
    protein_id: str
    cluster_id: str
    cluster_size: Optional[int] = None
    mean_plddt: Optional[float] = None
    phylum: Optional[str] = None
    num_phyla: int = 0

    @classmethod
    def from_db_row(cls, row: Dict[str, Any]) -> 'OrganismNovelFoldProtein':
        return cls(
            protein_id=str(row['protein_id']),
            cluster_id=str(row['cluster_id']),
            cluster_size=to_int(row.get('cluster_size')),
            mean_plddt=to_float(row.get('mean_plddt')),
            phylum=to_str(row.get('phylum')),
            num_phyla=to_count(row.get('num_phyla')),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class OrganismDetail:
    organism: Organism
    novelty_breakdown: List[CountEntry] = field(default_factory=list)
    source_breakdown: List[CountEntry] = field(default_factory=list)
    judge_breakdown: List[CountEntry] = field(default_factory=list)
    quality_distribution: List[CountEntry] = field(default_factory=list)
    curation_breakdown: List[CountEntry] = field(default_factory=list)
    top_proteins: List[OrganismProtein] = field(default_factory=list)
    novel_fold_proteins: List[OrganismNovelFoldProtein] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'organism': self.organism.to_dict(),
            'novelty_breakdown': [e.to_dict('category') for e in self.novelty_breakdown],
            'source_breakdown': [e.to_dict('source') for e in self.source_breakdown],
            'judge_breakdown': [e.to_dict('judge') for e in self.judge_breakdown],
            'quality_distribution': [e.to_dict('bucket') for e in self.quality_distribution],
            'curation_breakdown': [e.to_dict('status') for e in self.curation_breakdown],
            'top_proteins': [p.to_dict() for p in self.top_proteins],
            'novel_fold_proteins': [p.to_dict() for p in self.novel_fold_proteins],
        }
