#!/usr/bin/env python3
"""
Domain landscape and clustering analysis
"""
import logging
from typing import List, Optional

from archaea.core.context import ApplicationContext
from archaea.db.repositories.landscape_repository import LandscapeRepository
from archaea.models.base import to_count
from archaea.models.landscape import (
    ClusterSetSummary, ClusteringAnalysis, DomainLandscape, SizeBin, CLUSTER_SETS, SIZE_BINS
)


class LandscapeService:
    """Whole-dataset views of domains and of the clustering runs"""

    def __init__(self, context: ApplicationContext,
                 repository: Optional[LandscapeRepository] = None):
        self.context = context
        self.repository = repository or LandscapeRepository(
            context.db, reference_schema=context.get('database.reference_schema', 'ecod_rep')
        )
        self.logger = logging.getLogger("archaea.landscape")

    def get_domain_landscape(self) -> DomainLandscape:
        repo = self.repository
        counts = repo.get_domain_counts()
        return DomainLandscape(
            total_domains=to_count(counts.get('total_domains')),
            proteins_with_domains=to_count(counts.get('proteins_with_domains')),
            unique_tgroups=to_count(counts.get('unique_tgroups')),
            multi_domain_proteins=to_count(counts.get('multi_domain_proteins')),
            novel_pfam_families=repo.get_novel_pfam_family_count(),
            tgroup_distribution=repo.get_tgroup_distribution(),
            judge_breakdown=repo.get_judge_breakdown(),
            pfam_coverage=repo.get_pfam_coverage(),
        )

    def get_clustering_analysis(self) -> ClusteringAnalysis:
        """Summary, size bins and cross-run comparison of the clustering runs

        Runs that are not loaded yet appear in the summary as pending with
        zero counts and have no size distribution.
        """
        analysis = ClusteringAnalysis(
            cross_comparison=self.repository.get_cross_comparison(),
            ecod_novelty=self.repository.get_ecod_novelty(),
            top_structural_clusters=self.repository.get_top_structural_clusters(),
        )
        for cluster_set in CLUSTER_SETS:
            if cluster_set.pending:
                analysis.summary.append(ClusterSetSummary(cluster_set=cluster_set))
                continue
            analysis.summary.append(self.repository.get_cluster_set_summary(cluster_set))
            analysis.size_distributions[cluster_set.type] = self._all_bins(
                self.repository.get_size_distribution(cluster_set)
            )
        return analysis

    @staticmethod
    def _all_bins(bins: List[SizeBin]) -> List[SizeBin]:
        """Every size bin in ascending order, zero-filled"""
        by_name = {b.bin: b for b in bins}
        return [by_name.get(name, SizeBin(bin=name)) for name in SIZE_BINS]
