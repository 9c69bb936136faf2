#!/usr/bin/env python3
"""
Dashboard statistics model
"""
from dataclasses import dataclass, field
from typing import Dict, List, Any

from .curation import CurationStatus, NoveltyCategory, CurationProgress


def empty_status_breakdown() -> Dict[str, int]:
    return {status.value: 0 for status in CurationStatus}


def empty_novelty_breakdown() -> Dict[str, int]:
    return {category.value: 0 for category in NoveltyCategory}


@dataclass
class DashboardStats:
    """Global counts shown on the dashboard landing page

    status_breakdown and novelty_breakdown always carry every known key.
    """
    total_proteins: int = 0
    with_structure: int = 0
    with_quality_metrics: int = 0
    total_domains: int = 0
    proteins_with_domains: int = 0
    total_clusters: int = 0
    curation_candidates: int = 0
    novel_fold_clusters: int = 0
    novel_fold_proteins: int = 0
    novel_domain_clusters: int = 0
    novel_domain_count: int = 0
    status_breakdown: Dict[str, int] = field(default_factory=empty_status_breakdown)
    novelty_breakdown: Dict[str, int] = field(default_factory=empty_novelty_breakdown)
    source_breakdown: Dict[str, int] = field(default_factory=dict)
    domain_judge_breakdown: Dict[str, int] = field(default_factory=dict)
    progress: List[CurationProgress] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        stats = {
            'total_proteins': self.total_proteins,
            'with_structure': self.with_structure,
            'with_quality_metrics': self.with_quality_metrics,
            'total_domains': self.total_domains,
            'proteins_with_domains': self.proteins_with_domains,
            'total_clusters': self.total_clusters,
            'curation_candidates': self.curation_candidates,
            'novel_fold_clusters': self.novel_fold_clusters,
            'novel_fold_proteins': self.novel_fold_proteins,
            'novel_domain_clusters': self.novel_domain_clusters,
            'novel_domain_count': self.novel_domain_count,
            'status_breakdown': dict(self.status_breakdown),
            'novelty_breakdown': dict(self.novelty_breakdown),
            'source_breakdown': dict(self.source_breakdown),
            'domain_judge_breakdown': dict(self.domain_judge_breakdown),
        }
        return {'stats': stats, 'progress': [p.to_dict() for p in self.progress]}
