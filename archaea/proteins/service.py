#!/usr/bin/env python3
"""
Protein and legacy structural cluster lookups
"""
import logging
from typing import Any, List, Optional

from archaea.core.context import ApplicationContext
from archaea.db.repositories.protein_repository import (
    ProteinRepository, PROTEIN_SORT, STRUCTURAL_CLUSTER_SORT, MAX_DETAIL_CLUSTER_MEMBERS
)
from archaea.db.sql import Page, parse_pagination
from archaea.exceptions import ProteinNotFoundError, NotFoundError, InvalidArgumentError
from archaea.models.protein import (
    Domain, ProteinReport, ProteinFilters, StructuralClusterMember, StructuralClusterFilters
)


class ProteinService:
    """Read-only access to proteins, domains and structural clusters"""

    def __init__(self, context: ApplicationContext,
                 repository: Optional[ProteinRepository] = None):
        self.context = context
        self.repository = repository or ProteinRepository(context.db)
        self.logger = logging.getLogger("archaea.proteins")

    def _page(self, limit: Any, offset: Any) -> Page:
        return parse_pagination(
            limit, offset,
            default_limit=self.context.get('pagination.default_limit', 50),
            max_limit=self.context.get('pagination.max_limit', 200),
        )

    def get_protein_report(self, protein_id: str) -> ProteinReport:
        """Protein detail with domains and structural cluster mates

        Raises:
            ProteinNotFoundError: If the protein does not exist
        """
        if not protein_id:
            raise InvalidArgumentError("Protein ID is required")
        protein = self.repository.get_detail(protein_id)
        if protein is None:
            raise ProteinNotFoundError("Protein not found", {"protein_id": protein_id})

        members: List[StructuralClusterMember] = []
        if protein.structural_cluster_id is not None:
            members = self.repository.get_structural_cluster_members(
                protein.structural_cluster_id, limit=MAX_DETAIL_CLUSTER_MEMBERS
            )
        return ProteinReport(protein=protein,
                             domains=self.repository.get_domains(protein_id),
                             cluster_members=members)

    def get_domains(self, protein_id: str) -> List[Domain]:
        return self.repository.get_domains(protein_id)

    def list_proteins(self, filters: Optional[ProteinFilters] = None, sort: Optional[str] = None,
                      order: Optional[str] = None, limit: Any = None, offset: Any = None):
        """One page of the protein browser

        Returns:
            Tuple of (proteins, total, page)
        """
        page = self._page(limit, offset)
        items, total = self.repository.list_proteins(
            filters or ProteinFilters(), PROTEIN_SORT.resolve(sort, order), page
        )
        return items, total, page

    def list_structural_clusters(self, filters: Optional[StructuralClusterFilters] = None,
                                 sort: Optional[str] = None, order: Optional[str] = None,
                                 limit: Any = None, offset: Any = None):
        """One page of legacy structural clusters

        Returns:
            Tuple of (clusters, total, page)
        """
        page = self._page(limit, offset)
        items, total = self.repository.list_structural_clusters(
            filters or StructuralClusterFilters(), STRUCTURAL_CLUSTER_SORT.resolve(sort, order), page
        )
        return items, total, page

    def get_structural_cluster(self, cluster_id: Any):
        """Cluster row and all of its members

        Raises:
            InvalidArgumentError: If cluster_id is not an integer
            NotFoundError: If the cluster does not exist
        """
        try:
            numeric_id = int(cluster_id)
        except (TypeError, ValueError):
            raise InvalidArgumentError("Invalid cluster ID", {"cluster_id": cluster_id})
        cluster = self.repository.get_structural_cluster(numeric_id)
        if cluster is None:
            raise NotFoundError("Cluster not found", {"cluster_id": numeric_id})
        return cluster, self.repository.get_structural_cluster_members(numeric_id)
