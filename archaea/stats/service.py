#!/usr/bin/env python3
"""
Dashboard statistics service
"""
import logging
from typing import Optional

from archaea.core.context import ApplicationContext
from archaea.db.repositories.curation_repository import CurationRepository
from archaea.db.repositories.stats_repository import StatsRepository
from archaea.models.base import to_count
from archaea.models.stats import DashboardStats


class DashboardStatsService:
    """Collects the global counts shown on the dashboard landing page"""

    def __init__(self, context: ApplicationContext,
                 repository: Optional[StatsRepository] = None,
                 curation_repository: Optional[CurationRepository] = None):
        self.context = context
        self.repository = repository or StatsRepository(context.db)
        self.curation_repository = curation_repository or CurationRepository(context.db)
        self.logger = logging.getLogger("archaea.stats")

    def get_stats(self) -> DashboardStats:
        """Gather every count; read only"""
        repo = self.repository
        proteins = repo.get_protein_counts()
        domains = repo.get_domain_counts()
        tier1 = repo.get_member_counts('novel_fold_clusters')
        tier2 = repo.get_member_counts('novel_domain_clusters')

        stats = DashboardStats(
            total_proteins=to_count(proteins.get('total')),
            with_structure=to_count(proteins.get('with_structure')),
            with_quality_metrics=to_count(proteins.get('with_quality')),
            total_domains=to_count(domains.get('total_domains')),
            proteins_with_domains=to_count(domains.get('proteins_with_domains')),
            total_clusters=repo.get_table_count('structural_clusters'),
            curation_candidates=repo.get_table_count('curation_candidates'),
            novel_fold_clusters=to_count(tier1.get('clusters')),
            novel_fold_proteins=to_count(tier1.get('members')),
            novel_domain_clusters=to_count(tier2.get('clusters')),
            novel_domain_count=to_count(tier2.get('members')),
        )

        # Unknown statuses / categories are not reported
        for row in repo.get_breakdown('curation_candidates', 'curation_status'):
            if row['key'] in stats.status_breakdown:
                stats.status_breakdown[row['key']] = to_count(row['count'])
        for row in repo.get_breakdown('curation_candidates', 'novelty_category'):
            if row['key'] in stats.novelty_breakdown:
                stats.novelty_breakdown[row['key']] = to_count(row['count'])

        for row in repo.get_breakdown('target_proteins', 'source'):
            stats.source_breakdown[row['key'] or 'NULL'] = to_count(row['count'])
        for row in repo.get_breakdown('domains', 'judge'):
            stats.domain_judge_breakdown[row['key'] or 'NULL'] = to_count(row['count'])

        stats.progress = self.curation_repository.get_progress()
        self.logger.debug(f"Dashboard stats: {stats.total_proteins} proteins, "
                          f"{stats.curation_candidates} candidates")
        return stats
