#!/usr/bin/env python3
"""
Curation models for the archaea dashboard
Candidates, audited decisions and the review queue
"""
from dataclasses import dataclass, field, asdict
from datetime import datetime
from enum import Enum
from typing import Optional, List, Dict, Any

from .base import to_float, to_int, to_bool, to_str, isoformat


class CurationStatus(Enum):
    """Curation status of a candidate protein"""
    PENDING = "pending"
    IN_REVIEW = "in_review"              # never produced by a decision
    CLASSIFIED = "classified"
    DEFERRED = "deferred"
    REJECTED = "rejected"
    NEEDS_REANALYSIS = "needs_reanalysis"  # administrative only


class DecisionType(Enum):
    """Decision a curator can submit"""
    APPROVE = "approve"
    CLASSIFY = "classify"
    FLAG_NOVEL = "flag_novel"
    DEFER = "defer"
    REJECT = "reject"
    SKIP = "skip"


class NoveltyCategory(Enum):
    """Per-candidate novelty label assigned by the offline classification"""
    DARK = "dark"
    SEQUENCE_ORPHAN = "sequence-orphan"
    DIVERGENT = "divergent"
    KNOWN = "known"


class _Unset:
    """Marker for a request field that was not sent at all"""

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()

ECOD_GROUP_FIELDS = ('ecod_x_group', 'ecod_h_group', 'ecod_t_group', 'ecod_f_group')


@dataclass
class DecisionRequest:
    """A curator's decision as submitted

    ECOD group fields default to UNSET: an UNSET field leaves the stored
    value alone, an explicit None clears it.
    """
    protein_id: str
    curator: str
    decision_type: str
    ecod_x_group: Any = UNSET
    ecod_h_group: Any = UNSET
    ecod_t_group: Any = UNSET
    ecod_f_group: Any = UNSET
    is_novel_fold: Optional[bool] = None
    is_novel_topology: Optional[bool] = None
    confidence_level: Optional[int] = None
    notes: Optional[str] = None

    def supplied_ecod_groups(self) -> Dict[str, Optional[int]]:
        """ECOD group fields the caller actually sent (None included)"""
        return {name: getattr(self, name) for name in ECOD_GROUP_FIELDS
                if getattr(self, name) is not UNSET}

    def audit_ecod_groups(self) -> Dict[str, Optional[int]]:
        """ECOD group values for the audit row; unsent fields record as NULL"""
        return {name: (None if getattr(self, name) is UNSET else getattr(self, name))
                for name in ECOD_GROUP_FIELDS}


@dataclass
class DecisionResult:
    """Outcome of a committed decision"""
    protein_id: str
    decision_type: str
    previous_status: str
    new_status: str
    next_protein: Optional[str] = None

    def to_response(self) -> Dict[str, Any]:
        response = {
            'success': True,
            'protein_id': self.protein_id,
            'new_status': self.new_status,
        }
        if self.next_protein:
            response['next_protein'] = self.next_protein
        return response


@dataclass
class CurationCandidate:
    """One protein eligible for curation"""
    protein_id: str
    curation_status: str
    id: Optional[int] = None
    novelty_category: Optional[str] = None
    priority_category: Optional[str] = None
    priority_rank: Optional[int] = None
    structural_cluster_id: Optional[int] = None
    structural_cluster_rep: Optional[str] = None
    structural_cluster_size: Optional[int] = None
    ecod_x_group: Optional[int] = None
    ecod_h_group: Optional[int] = None
    ecod_t_group: Optional[int] = None
    ecod_f_group: Optional[int] = None
    is_novel_fold: Optional[bool] = None
    is_novel_topology: Optional[bool] = None
    curator_notes: Optional[str] = None
    assigned_curator: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    classified_at: Optional[datetime] = None

    @classmethod
    def from_db_row(cls, row: Dict[str, Any]) -> 'CurationCandidate':
        return cls(
            id=to_int(row.get('id')),
            protein_id=str(row['protein_id']),
            curation_status=str(row['curation_status']),
            novelty_category=to_str(row.get('novelty_category')),
            priority_category=to_str(row.get('priority_category')),
            priority_rank=to_int(row.get('priority_rank')),
            structural_cluster_id=to_int(row.get('structural_cluster_id')),
            structural_cluster_rep=to_str(row.get('structural_cluster_rep')),
            structural_cluster_size=to_int(row.get('structural_cluster_size')),
            ecod_x_group=to_int(row.get('ecod_x_group')),
            ecod_h_group=to_int(row.get('ecod_h_group')),
            ecod_t_group=to_int(row.get('ecod_t_group')),
            ecod_f_group=to_int(row.get('ecod_f_group')),
            is_novel_fold=to_bool(row.get('is_novel_fold')),
            is_novel_topology=to_bool(row.get('is_novel_topology')),
            curator_notes=to_str(row.get('curator_notes')),
            assigned_curator=to_str(row.get('assigned_curator')),
            reviewed_at=row.get('reviewed_at'),
            classified_at=row.get('classified_at'),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['reviewed_at'] = isoformat(self.reviewed_at)
        data['classified_at'] = isoformat(self.classified_at)
        return data


@dataclass
class CurationDecision:
    """Audit row; written once per submitted decision, never changed"""
    protein_id: str
    curator_name: str
    decision_type: str
    previous_status: Optional[str]
    new_status: str
    id: Optional[int] = None
    ecod_x_group: Optional[int] = None
    ecod_h_group: Optional[int] = None
    ecod_t_group: Optional[int] = None
    ecod_f_group: Optional[int] = None
    is_novel_fold: Optional[bool] = None
    is_novel_topology: Optional[bool] = None
    confidence_level: Optional[int] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_db_row(cls, row: Dict[str, Any]) -> 'CurationDecision':
        return cls(
            id=to_int(row.get('id')),
            protein_id=str(row['protein_id']),
            curator_name=str(row['curator_name']),
            decision_type=str(row['decision_type']),
            previous_status=to_str(row.get('previous_status')),
            new_status=str(row['new_status']),
            ecod_x_group=to_int(row.get('ecod_x_group')),
            ecod_h_group=to_int(row.get('ecod_h_group')),
            ecod_t_group=to_int(row.get('ecod_t_group')),
            ecod_f_group=to_int(row.get('ecod_f_group')),
            is_novel_fold=to_bool(row.get('is_novel_fold')),
            is_novel_topology=to_bool(row.get('is_novel_topology')),
            confidence_level=to_int(row.get('confidence_level')),
            notes=to_str(row.get('notes')),
            created_at=row.get('created_at'),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['created_at'] = isoformat(self.created_at)
        return data


@dataclass
class QueueFilters:
    """Filters for the review queue; status 'all' disables the status filter"""
    novelty: Optional[str] = None
    priority: Optional[str] = None
    status: Optional[str] = CurationStatus.PENDING.value
    has_structure: Optional[bool] = None
    taxonomy: Optional[str] = None

    def active(self) -> Dict[str, Any]:
        """Filters as echoed back to the client"""
        echoed = {
            'novelty': self.novelty if self.novelty not in (None, 'all') else None,
            'priority': self.priority if self.priority not in (None, 'all') else None,
            'status': self.status if self.status not in (None, 'all') else None,
            'has_structure': self.has_structure,
            'taxonomy': self.taxonomy,
        }
        return {k: v for k, v in echoed.items() if v is not None}


@dataclass
class QueueItem:
    """Row of v_curation_queue_full"""
    protein_id: str
    curation_status: str
    novelty_category: Optional[str] = None
    priority_category: Optional[str] = None
    priority_rank: Optional[int] = None
    structural_cluster_id: Optional[int] = None
    structural_cluster_size: Optional[int] = None
    is_novel_fold: Optional[bool] = None
    assigned_curator: Optional[str] = None
    uniprot_acc: Optional[str] = None
    sequence_length: Optional[int] = None
    source: Optional[str] = None
    has_structure: Optional[bool] = None
    mean_plddt: Optional[float] = None
    ptm: Optional[float] = None
    quality_score: Optional[float] = None
    af3_quality_category: Optional[str] = None
    taxonomy_class: Optional[str] = None
    phylum: Optional[str] = None
    major_group: Optional[str] = None

    @classmethod
    def from_db_row(cls, row: Dict[str, Any]) -> 'QueueItem':
        return cls(
            protein_id=str(row['protein_id']),
            curation_status=str(row['curation_status']),
            novelty_category=to_str(row.get('novelty_category')),
            priority_category=to_str(row.get('priority_category')),
            priority_rank=to_int(row.get('priority_rank')),
            structural_cluster_id=to_int(row.get('structural_cluster_id')),
            structural_cluster_size=to_int(row.get('structural_cluster_size')),
            is_novel_fold=to_bool(row.get('is_novel_fold')),
            assigned_curator=to_str(row.get('assigned_curator')),
            uniprot_acc=to_str(row.get('uniprot_acc')),
            sequence_length=to_int(row.get('sequence_length')),
            source=to_str(row.get('source')),
            has_structure=to_bool(row.get('has_structure')),
            mean_plddt=to_float(row.get('mean_plddt')),
            ptm=to_float(row.get('ptm')),
            quality_score=to_float(row.get('quality_score')),
            af3_quality_category=to_str(row.get('af3_quality_category')),
            taxonomy_class=to_str(row.get('taxonomy_class')),
            phylum=to_str(row.get('phylum')),
            major_group=to_str(row.get('major_group')),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class QueuePage:
    items: List[QueueItem]
    total: int
    limit: int
    offset: int
    filters: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'items': [i.to_dict() for i in self.items],
            'total': self.total,
            'limit': self.limit,
            'offset': self.offset,
            'filters': self.filters,
        }


@dataclass
class CurationProgress:
    """Row of v_curation_progress"""
    novelty_category: Optional[str]
    priority_category: Optional[str]
    curation_status: Optional[str]
    count: int = 0
    novel_fold_count: int = 0

    @classmethod
    def from_db_row(cls, row: Dict[str, Any]) -> 'CurationProgress':
        return cls(
            novelty_category=to_str(row.get('novelty_category')),
            priority_category=to_str(row.get('priority_category')),
            curation_status=to_str(row.get('curation_status')),
            count=to_int(row.get('count')) or 0,
            novel_fold_count=to_int(row.get('novel_fold_count')) or 0,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
