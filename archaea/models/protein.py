#!/usr/bin/env python3
"""
Protein, domain and legacy structural cluster models
"""
from dataclasses import dataclass, field, fields, asdict
from typing import Optional, List, Dict, Any

from archaea.utils.provenance import provenance_label
from .base import to_float, to_int, to_count, to_bool, to_str


@dataclass
class DomainPfamHit:
    """Pfam hit against one DPAM domain"""
    domain_id: int
    pfam_acc: str
    e_value: Optional[float] = None
    bit_score: Optional[float] = None
    query_start: Optional[int] = None
    query_end: Optional[int] = None

    @classmethod
    def from_db_row(cls, row: Dict[str, Any]) -> 'DomainPfamHit':
        return cls(
            domain_id=to_int(row['domain_id']),
            pfam_acc=str(row['pfam_acc']),
            e_value=to_float(row.get('e_value')),
            bit_score=to_float(row.get('bit_score')),
            query_start=to_int(row.get('query_start')),
            query_end=to_int(row.get('query_end')),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class Domain:
    """DPAM domain of a protein"""
    id: int
    protein_id: str
    domain_num: int
    range: Optional[str] = None
    t_group: Optional[str] = None
    judge: Optional[str] = None
    dpam_prob: Optional[float] = None
    hh_prob: Optional[float] = None
    pfam_hits: List[DomainPfamHit] = field(default_factory=list)

    @classmethod
    def from_db_row(cls, row: Dict[str, Any]) -> 'Domain':
        return cls(
            id=to_int(row['id']),
            protein_id=str(row['protein_id']),
            domain_num=to_int(row['domain_num']),
            range=to_str(row.get('range')),
            t_group=to_str(row.get('t_group')),
            judge=to_str(row.get('judge')),
            dpam_prob=to_float(row.get('dpam_prob')),
            hh_prob=to_float(row.get('hh_prob')),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['pfam_hits'] = [h.to_dict() for h in self.pfam_hits]
        return data


@dataclass
class ProteinDetail:
    """Row of v_protein_detail: protein, taxonomy, quality and candidate fields"""
    protein_id: str
    protein_table_id: Optional[int] = None
    uniprot_acc: Optional[str] = None
    uniparc_id: Optional[str] = None
    sequence_length: Optional[int] = None
    source: Optional[str] = None
    cif_file: Optional[str] = None
    pae_file: Optional[str] = None
    has_structure: Optional[bool] = None
    has_pae: Optional[bool] = None
    sequence: Optional[str] = None
    class_name: Optional[str] = None
    phylum: Optional[str] = None
    major_group: Optional[str] = None
    organism_name: Optional[str] = None
    genome_accession: Optional[str] = None
    mean_plddt: Optional[float] = None
    ptm: Optional[float] = None
    quality_score: Optional[float] = None
    af3_quality_category: Optional[str] = None
    fraction_disordered: Optional[float] = None
    helix_fraction: Optional[float] = None
    sheet_fraction: Optional[float] = None
    coil_fraction: Optional[float] = None
    ss_category: Optional[str] = None
    rg: Optional[float] = None
    rg_expected: Optional[float] = None
    rg_ratio: Optional[float] = None
    rg_category: Optional[str] = None
    novelty_category: Optional[str] = None
    priority_category: Optional[str] = None
    priority_rank: Optional[int] = None
    curation_status: Optional[str] = None
    structural_cluster_id: Optional[int] = None
    structural_cluster_rep: Optional[str] = None
    structural_cluster_size: Optional[int] = None
    is_novel_fold: Optional[bool] = None
    is_novel_topology: Optional[bool] = None
    ecod_x_group: Optional[int] = None
    ecod_h_group: Optional[int] = None
    ecod_t_group: Optional[int] = None
    ecod_f_group: Optional[int] = None
    curator_notes: Optional[str] = None
    actual_cluster_size: Optional[int] = None
    is_representative: Optional[bool] = None

    _INT_FIELDS = ('protein_table_id', 'sequence_length', 'priority_rank', 'structural_cluster_id',
                   'structural_cluster_size', 'ecod_x_group', 'ecod_h_group', 'ecod_t_group',
                   'ecod_f_group', 'actual_cluster_size')
    _FLOAT_FIELDS = ('mean_plddt', 'ptm', 'quality_score', 'fraction_disordered', 'helix_fraction',
                     'sheet_fraction', 'coil_fraction', 'rg', 'rg_expected', 'rg_ratio')
    _BOOL_FIELDS = ('has_structure', 'has_pae', 'is_novel_fold', 'is_novel_topology',
                    'is_representative')

    @classmethod
    def from_db_row(cls, row: Dict[str, Any]) -> 'ProteinDetail':
        """Build from a view row; columns the view adds later are ignored"""
        values = {}
        for f in fields(cls):
            value = row.get(f.name)
            if f.name in cls._INT_FIELDS:
                value = to_int(value)
            elif f.name in cls._FLOAT_FIELDS:
                value = to_float(value)
            elif f.name in cls._BOOL_FIELDS:
                value = to_bool(value)
            else:
                value = to_str(value)
            values[f.name] = value
        return cls(**values)

    @property
    def provenance(self) -> Optional[str]:
        if self.source is None:
            return None
        return provenance_label(self.source, self.cif_file)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['provenance'] = self.provenance
        return data


@dataclass
class ProteinSummary:
    """Row of the protein browser listing"""
    protein_id: str
    uniprot_acc: Optional[str] = None
    sequence_length: Optional[int] = None
    source: Optional[str] = None
    has_structure: Optional[bool] = None
    cif_file: Optional[str] = None
    class_name: Optional[str] = None
    phylum: Optional[str] = None
    mean_plddt: Optional[float] = None
    quality_score: Optional[float] = None
    af3_quality_category: Optional[str] = None
    ss_category: Optional[str] = None
    domain_count: int = 0

    @classmethod
    def from_db_row(cls, row: Dict[str, Any]) -> 'ProteinSummary':
        return cls(
            protein_id=str(row['protein_id']),
            uniprot_acc=to_str(row.get('uniprot_acc')),
            sequence_length=to_int(row.get('sequence_length')),
            source=to_str(row.get('source')),
            has_structure=to_bool(row.get('has_structure')),
            cif_file=to_str(row.get('cif_file')),
            class_name=to_str(row.get('class_name')),
            phylum=to_str(row.get('phylum')),
            mean_plddt=to_float(row.get('mean_plddt')),
            quality_score=to_float(row.get('quality_score')),
            af3_quality_category=to_str(row.get('af3_quality_category')),
            ss_category=to_str(row.get('ss_category')),
            domain_count=to_count(row.get('domain_count')),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ProteinFilters:
    source: Optional[str] = None
    has_structure: Optional[bool] = None
    has_domains: Optional[bool] = None
    search: Optional[str] = None
    phylum: Optional[str] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None


@dataclass
class StructuralClusterMember:
    """Member of a legacy structural cluster"""
    protein_id: str
    is_representative: bool = False
    uniprot_acc: Optional[str] = None
    sequence_length: Optional[int] = None
    source: Optional[str] = None
    cif_file: Optional[str] = None
    mean_plddt: Optional[float] = None
    quality_score: Optional[float] = None
    af3_quality_category: Optional[str] = None
    novelty_category: Optional[str] = None
    curation_status: Optional[str] = None
    phylum: Optional[str] = None

    @classmethod
    def from_db_row(cls, row: Dict[str, Any]) -> 'StructuralClusterMember':
        return cls(
            protein_id=str(row['protein_id']),
            is_representative=bool(to_bool(row.get('is_representative'))),
            uniprot_acc=to_str(row.get('uniprot_acc')),
            sequence_length=to_int(row.get('sequence_length')),
            source=to_str(row.get('source')),
            cif_file=to_str(row.get('cif_file')),
            mean_plddt=to_float(row.get('mean_plddt')),
            quality_score=to_float(row.get('quality_score')),
            af3_quality_category=to_str(row.get('af3_quality_category')),
            novelty_category=to_str(row.get('novelty_category')),
            curation_status=to_str(row.get('curation_status')),
            phylum=to_str(row.get('phylum')),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class StructuralCluster:
    """Row of v_cluster_summary"""
    cluster_id: int
    cluster_rep_id: Optional[str] = None
    cluster_size: int = 0
    clustering_method: Optional[str] = None
    tm_threshold: Optional[float] = None
    member_count: int = 0
    avg_plddt: Optional[float] = None
    avg_quality_score: Optional[float] = None
    dark_count: int = 0
    pending_count: int = 0

    @classmethod
    def from_db_row(cls, row: Dict[str, Any]) -> 'StructuralCluster':
        return cls(
            cluster_id=to_int(row['cluster_id']),
            cluster_rep_id=to_str(row.get('cluster_rep_id')),
            cluster_size=to_count(row.get('cluster_size')),
            clustering_method=to_str(row.get('clustering_method')),
            tm_threshold=to_float(row.get('tm_threshold')),
            member_count=to_count(row.get('member_count')),
            avg_plddt=to_float(row.get('avg_plddt')),
            avg_quality_score=to_float(row.get('avg_quality_score')),
            dark_count=to_count(row.get('dark_count')),
            pending_count=to_count(row.get('pending_count')),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class StructuralClusterFilters:
    min_size: int = 1
    has_dark: bool = False
    has_pending: bool = False
    search: Optional[str] = None


@dataclass
class ProteinReport:
    """Protein detail page: protein, its domains and its structural cluster mates"""
    protein: ProteinDetail
    domains: List[Domain] = field(default_factory=list)
    cluster_members: List[StructuralClusterMember] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'protein': self.protein.to_dict(),
            'domains': [d.to_dict() for d in self.domains],
            'cluster_members': [m.to_dict() for m in self.cluster_members],
        }
