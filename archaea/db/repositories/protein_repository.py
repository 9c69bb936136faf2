# archaea/db/repositories/protein_repository.py
#!/usr/bin/env python3
"""
Protein repository for the archaea dashboard
Handles proteins, their DPAM domains and the legacy structural clusters
"""
import logging
from typing import List, Dict, Any, Optional, Tuple

from archaea.db.manager import DBManager
from archaea.db.sql import Page, SortOptions, SortSpec, like_pattern
from archaea.models.protein import (
    Domain, DomainPfamHit, ProteinDetail, ProteinSummary, ProteinFilters,
    StructuralCluster, StructuralClusterMember, StructuralClusterFilters
)

PROTEIN_SORT = SortOptions(
    columns={
        'protein_id': 'tp.protein_id',
        'sequence_length': 'tp.sequence_length',
        'source': 'tp.source',
        'mean_plddt': 'sqm.mean_plddt',
        'quality_score': 'sqm.quality_score',
        'domain_count': 'COALESCE(d.domain_count, 0)',
    },
    default_key='protein_id',
    default_descending=False,
    tiebreak='tp.protein_id ASC',
    overrides={'protein_id': 'tp.protein_id {direction}'},
)

STRUCTURAL_CLUSTER_SORT = SortOptions(
    columns={
        'cluster_size': 'cluster_size',
        'member_count': 'member_count',
        'avg_plddt': 'avg_plddt',
        'avg_quality_score': 'avg_quality_score',
        'dark_count': 'dark_count',
        'pending_count': 'pending_count',
        'cluster_rep_id': 'cluster_rep_id',
    },
    default_key='cluster_size',
    default_descending=True,
    tiebreak='cluster_id ASC',
)

# Members returned with a protein's detail page
MAX_DETAIL_CLUSTER_MEMBERS = 100


class ProteinRepository:
    """Repository for protein data"""

    def __init__(self, db_manager: DBManager):
        """Initialize repository

        Args:
            db_manager: Database manager instance
        """
        self.db = db_manager
        self.logger = logging.getLogger("archaea.db.protein_repository")

    def get_detail(self, protein_id: str) -> Optional[ProteinDetail]:
        """Get protein by ID from v_protein_detail

        Args:
            protein_id: Protein ID

        Returns:
            ProteinDetail if found, None otherwise
        """
        query = f"SELECT * FROM {self.db.table('v_protein_detail')} WHERE protein_id = %s"
        rows = self.db.execute_dict_query(query, (protein_id,))
        if not rows:
            return None
        return ProteinDetail.from_db_row(rows[0])

    def get_domains(self, protein_id: str) -> List[Domain]:
        """Get DPAM domains of a protein with their Pfam hits attached"""
        domains_query = f"""
        SELECT id, protein_id, domain_num, range, t_group, judge, dpam_prob, hh_prob
        FROM {self.db.table('domains')}
        WHERE protein_id = %s
        ORDER BY domain_num
        """
        pfam_query = f"""
        SELECT dph.domain_id, dph.pfam_acc,
               dph.sequence_evalue AS e_value,
               dph.sequence_score AS bit_score,
               dph.ali_from AS query_start,
               dph.ali_to AS query_end
        FROM {self.db.table('domain_pfam_hits')} dph
        JOIN {self.db.table('domains')} d ON dph.domain_id = d.id
        WHERE d.protein_id = %s
        ORDER BY d.domain_num, dph.sequence_evalue ASC NULLS LAST
        """
        domains = [Domain.from_db_row(row)
                   for row in self.db.execute_dict_query(domains_query, (protein_id,))]

        hits_by_domain: Dict[int, List[DomainPfamHit]] = {}
        for row in self.db.execute_dict_query(pfam_query, (protein_id,)):
            hit = DomainPfamHit.from_db_row(row)
            hits_by_domain.setdefault(hit.domain_id, []).append(hit)

        for domain in domains:
            domain.pfam_hits = hits_by_domain.get(domain.id, [])
        return domains

    def _filter_clause(self, filters: ProteinFilters) -> Tuple[str, List[Any]]:
        conditions = []
        params: List[Any] = []
        if filters.source:
            conditions.append("tp.source = %s")
            params.append(filters.source)
        if filters.has_structure is not None:
            conditions.append("tp.has_structure = %s")
            params.append(bool(filters.has_structure))
        if filters.has_domains is True:
            conditions.append("d.domain_count > 0")
        elif filters.has_domains is False:
            conditions.append("(d.domain_count IS NULL OR d.domain_count = 0)")
        if filters.search:
            conditions.append("(tp.protein_id ILIKE %s OR tp.uniprot_acc ILIKE %s)")
            pattern = like_pattern(filters.search)
            params.extend([pattern, pattern])
        if filters.phylum:
            conditions.append("tc.phylum = %s")
            params.append(filters.phylum)
        if filters.min_length is not None:
            conditions.append("tp.sequence_length >= %s")
            params.append(int(filters.min_length))
        if filters.max_length is not None:
            conditions.append("tp.sequence_length <= %s")
            params.append(int(filters.max_length))
        where = f"WHERE {' AND '.join(conditions)}" if conditions else ""
        return where, params

    def list_proteins(self, filters: ProteinFilters, sort: SortSpec,
                      page: Page) -> Tuple[List[ProteinSummary], int]:
        """Get one page of the protein browser and the filtered total"""
        where, params = self._filter_clause(filters)
        joins = f"""
        FROM {self.db.table('target_proteins')} tp
        LEFT JOIN {self.db.table('target_classes')} tc ON tp.target_class_id = tc.id
        LEFT JOIN {self.db.table('structure_quality_metrics')} sqm ON tp.protein_id = sqm.protein_id
        LEFT JOIN (
            SELECT protein_id, COUNT(*) AS domain_count
            FROM {self.db.table('domains')}
            GROUP BY protein_id
        ) d ON tp.protein_id = d.protein_id
        """
        count_rows = self.db.execute_dict_query(
            f"SELECT COUNT(*) AS total {joins} {where}", tuple(params)
        )
        total = int(count_rows[0]['total']) if count_rows else 0

        query = f"""
        SELECT tp.protein_id, tp.uniprot_acc, tp.sequence_length, tp.source,
               tp.has_structure, tp.cif_file, tc.class_name, tc.phylum,
               sqm.mean_plddt, sqm.quality_score, sqm.af3_quality_category, sqm.ss_category,
               COALESCE(d.domain_count, 0)::int AS domain_count
        {joins}
        {where}
        ORDER BY {sort.clause}
        LIMIT %s OFFSET %s
        """
        rows = self.db.execute_dict_query(query, tuple(params + [page.limit, page.offset]))
        return [ProteinSummary.from_db_row(row) for row in rows], total

    # ------------------------------------------------------------------
    # Legacy structural clusters
    # ------------------------------------------------------------------

    def get_structural_cluster(self, cluster_id: int) -> Optional[StructuralCluster]:
        query = f"SELECT * FROM {self.db.table('v_cluster_summary')} WHERE cluster_id = %s"
        rows = self.db.execute_dict_query(query, (cluster_id,))
        return StructuralCluster.from_db_row(rows[0]) if rows else None

    def get_structural_cluster_members(self, cluster_id: int,
                                       limit: Optional[int] = None) -> List[StructuralClusterMember]:
        """Members of a structural cluster, representative first then by quality"""
        limit_clause = "LIMIT %s" if limit else ""
        query = f"""
        SELECT scm.protein_id, tp.uniprot_acc, tp.sequence_length, tp.source, tp.cif_file,
               scm.is_representative, sqm.mean_plddt, sqm.quality_score,
               sqm.af3_quality_category, cc.novelty_category, cc.curation_status, tc.phylum
        FROM {self.db.table('structural_cluster_members')} scm
        JOIN {self.db.table('target_proteins')} tp ON scm.protein_id = tp.protein_id
        LEFT JOIN {self.db.table('target_classes')} tc ON tp.target_class_id = tc.id
        LEFT JOIN {self.db.table('structure_quality_metrics')} sqm ON scm.protein_id = sqm.protein_id
        LEFT JOIN {self.db.table('curation_candidates')} cc ON scm.protein_id = cc.protein_id
        WHERE scm.cluster_id = %s
        ORDER BY scm.is_representative DESC, sqm.quality_score DESC NULLS LAST, scm.protein_id
        {limit_clause}
        """
        params = (cluster_id, limit) if limit else (cluster_id,)
        rows = self.db.execute_dict_query(query, params)
        return [StructuralClusterMember.from_db_row(row) for row in rows]

    def list_structural_clusters(self, filters: StructuralClusterFilters, sort: SortSpec,
                                 page: Page) -> Tuple[List[StructuralCluster], int]:
        """Get one page of v_cluster_summary and the filtered total"""
        conditions = ["cluster_size >= %s"]
        params: List[Any] = [int(filters.min_size or 1)]
        if filters.has_dark:
            conditions.append("dark_count > 0")
        if filters.has_pending:
            conditions.append("pending_count > 0")
        if filters.search:
            conditions.append("cluster_rep_id ILIKE %s")
            params.append(like_pattern(filters.search))
        where = f"WHERE {' AND '.join(conditions)}"
        view = self.db.table('v_cluster_summary')

        count_rows = self.db.execute_dict_query(
            f"SELECT COUNT(*) AS total FROM {view} {where}", tuple(params)
        )
        total = int(count_rows[0]['total']) if count_rows else 0

        query = f"""
        SELECT * FROM {view}
        {where}
        ORDER BY {sort.clause}
        LIMIT %s OFFSET %s
        """
        rows = self.db.execute_dict_query(query, tuple(params + [page.limit, page.offset]))
        return [StructuralCluster.from_db_row(row) for row in rows], total
