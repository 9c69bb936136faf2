#!/usr/bin/env python3
"""
Target organism listing and per-organism detail
"""
import logging
from typing import Any, Dict, List, Optional

from archaea.core.context import ApplicationContext
from archaea.db.repositories.organism_repository import OrganismRepository, ORGANISM_SORT
from archaea.exceptions import InvalidArgumentError, OrganismNotFoundError
from archaea.models.landscape import CountEntry
from archaea.models.organism import OrganismDetail, OrganismFilters, OrganismListing, QUALITY_BUCKETS


def parse_organism_id(organism_id: Any) -> int:
    """Integer organism id

    Raises:
        InvalidArgumentError: If organism_id is not an integer
    """
    if isinstance(organism_id, bool):
        raise InvalidArgumentError("Invalid organism ID", {"organism_id": organism_id})
    try:
        return int(str(organism_id).strip())
    except (TypeError, ValueError):
        raise InvalidArgumentError("Invalid organism ID", {"organism_id": organism_id})


class OrganismService:
    """Read-only access to the target organisms"""

    def __init__(self, context: ApplicationContext,
                 repository: Optional[OrganismRepository] = None):
        self.context = context
        self.repository = repository or OrganismRepository(context.db)
        self.logger = logging.getLogger("archaea.organisms")

    def list_organisms(self, filters: Optional[OrganismFilters] = None,
                       sort: Optional[str] = None, order: Optional[str] = None) -> OrganismListing:
        """Every matching organism plus the values offered as filters

        The organism set is small, so the listing is not paginated.
        """
        organisms = self.repository.list_organisms(filters or OrganismFilters(),
                                                   ORGANISM_SORT.resolve(sort, order))
        return OrganismListing(
            organisms=organisms,
            phyla=self.repository.get_filter_options('phylum'),
            major_groups=self.repository.get_filter_options('major_group'),
        )

    def get_organism_detail(self, organism_id: Any) -> OrganismDetail:
        """Organism with its breakdowns, best proteins and novel fold members

        Raises:
            InvalidArgumentError: If organism_id is not an integer
            OrganismNotFoundError: If the organism does not exist
        """
        numeric_id = parse_organism_id(organism_id)
        organism = self.repository.get_organism(numeric_id)
        if organism is None:
            raise OrganismNotFoundError("Organism not found", {"organism_id": numeric_id})

        repo = self.repository
        return OrganismDetail(
            organism=organism,
            novelty_breakdown=repo.get_novelty_breakdown(numeric_id),
            source_breakdown=repo.get_source_breakdown(numeric_id),
            judge_breakdown=repo.get_judge_breakdown(numeric_id),
            quality_distribution=self._all_buckets(repo.get_quality_distribution(numeric_id)),
            curation_breakdown=repo.get_curation_breakdown(numeric_id),
            top_proteins=repo.get_top_proteins(numeric_id),
            novel_fold_proteins=repo.get_novel_fold_proteins(numeric_id),
        )

    @staticmethod
    def _all_buckets(entries: List[CountEntry]) -> List[CountEntry]:
        """Every pLDDT bucket in confidence order, zero where the organism has none"""
        counts: Dict[Optional[str], int] = {e.value: e.count for e in entries}
        return [CountEntry(value=name, count=counts.get(name, 0)) for name, _ in QUALITY_BUCKETS]
