# archaea/db/repositories/novelty_repository.py
#!/usr/bin/env python3
"""
Novelty repository for the archaea dashboard
SQL for Tier 1 (dark protein) and Tier 2 (orphan domain) clusters
"""
import logging
from typing import List, Dict, Any, Optional, Tuple

from archaea.db.manager import DBManager
from archaea.db.sql import Page, SortOptions, SortSpec, like_pattern
from archaea.models.novelty import (
    Tier1Member, Tier2Member, ClusterSummary, ClusterEdge, PhylumCount,
    CrossTierHit, ClusterFilters, TIER_DARK_PROTEIN, TIER_ORPHAN_DOMAIN
)

# Numeric part of T<n>_C<m>, so that T1_C10 sorts after T1_C9
CLUSTER_NUMBER = "CAST(substring(cluster_id FROM 5) AS integer)"

TIER1_SORT = SortOptions(
    columns={
        'cluster_size': 'cluster_size',
        'avg_plddt': 'avg_plddt',
        'phylum_count': 'phylum_count',
        'genome_count': 'genome_count',
        'avg_length': 'avg_length',
        'cluster_id': CLUSTER_NUMBER,
    },
    default_key='cluster_size',
    default_descending=True,
    tiebreak=f"{CLUSTER_NUMBER} ASC",
)

TIER2_SORT = SortOptions(
    columns={
        'cluster_size': 'cluster_size',
        'avg_plddt': 'avg_plddt',
        'phylum_count': 'phylum_count',
        'genome_count': 'genome_count',
        'protein_count': 'protein_count',
        'avg_dpam_prob': 'avg_dpam_prob',
        'avg_dali_zscore': 'avg_dali_zscore',
        'cluster_id': CLUSTER_NUMBER,
    },
    default_key='cluster_size',
    default_descending=True,
    tiebreak=f"{CLUSTER_NUMBER} ASC",
)

SORT_OPTIONS = {TIER_DARK_PROTEIN: TIER1_SORT, TIER_ORPHAN_DOMAIN: TIER2_SORT}


class NoveltyRepository:
    """Repository for novel fold cluster data"""

    MEMBER_TABLES = {
        TIER_DARK_PROTEIN: 'novel_fold_clusters',
        TIER_ORPHAN_DOMAIN: 'novel_domain_clusters',
    }

    def __init__(self, db_manager: DBManager):
        """Initialize repository

        Args:
            db_manager: Database manager instance
        """
        self.db = db_manager
        self.logger = logging.getLogger("archaea.db.novelty_repository")

    def _member_table(self, tier: int) -> str:
        return self.db.table(self.MEMBER_TABLES[tier])

    # ------------------------------------------------------------------
    # Members
    # ------------------------------------------------------------------

    def get_tier1_members(self, cluster_id: str) -> List[Tier1Member]:
        """Get dark proteins of a Tier 1 cluster, best pLDDT first"""
        query = f"""
        SELECT cluster_id, protein_id, db_protein_id, mean_plddt, seq_length,
               phylum, major_group, organism, genome_accession
        FROM {self._member_table(TIER_DARK_PROTEIN)}
        WHERE cluster_id = %s
        ORDER BY mean_plddt DESC NULLS LAST, protein_id
        """
        rows = self.db.execute_dict_query(query, (cluster_id,))
        return [Tier1Member.from_db_row(row) for row in rows]

    def get_tier2_members(self, cluster_id: str) -> List[Tier2Member]:
        """Get orphan domains of a Tier 2 cluster, best pLDDT first"""
        query = f"""
        SELECT cluster_id, protein_id, domain_num, domain_id, domain_range,
               dpam_prob, dali_zscore, mean_plddt, phylum, genome_accession
        FROM {self._member_table(TIER_ORPHAN_DOMAIN)}
        WHERE cluster_id = %s
        ORDER BY mean_plddt DESC NULLS LAST, protein_id, domain_num
        """
        rows = self.db.execute_dict_query(query, (cluster_id,))
        return [Tier2Member.from_db_row(row) for row in rows]

    # ------------------------------------------------------------------
    # Edges and distributions
    # ------------------------------------------------------------------

    def get_tier1_edges(self, cluster_id: str) -> List[ClusterEdge]:
        """Get Foldseek edges with both ends inside a Tier 1 cluster"""
        members = self._member_table(TIER_DARK_PROTEIN)
        query = f"""
        SELECT e.query_protein_id AS query, e.target_protein_id AS target,
               e.fident, e.alnlen, e.evalue, e.bits, e.lddt, e.prob
        FROM {self.db.table('novel_fold_edges')} e
        WHERE e.query_protein_id IN (SELECT protein_id FROM {members} WHERE cluster_id = %(cluster_id)s)
          AND e.target_protein_id IN (SELECT protein_id FROM {members} WHERE cluster_id = %(cluster_id)s)
        ORDER BY e.evalue ASC NULLS LAST, e.query_protein_id, e.target_protein_id
        """
        rows = self.db.execute_dict_query(query, {'cluster_id': cluster_id})
        return [ClusterEdge.from_db_row(row) for row in rows]

    def get_tier2_edges(self, domain_keys: List[str]) -> List[ClusterEdge]:
        """Get Foldseek edges with both ends among the given domain keys

        Args:
            domain_keys: Keys in the edge table format (see domain_edge_key)
        """
        if not domain_keys:
            return []
        query = f"""
        SELECT e.query_domain AS query, e.target_domain AS target,
               e.fident, e.alnlen, e.evalue, e.bits, e.alntmscore, e.qtmscore, e.ttmscore
        FROM {self.db.table('novel_domain_edges')} e
        WHERE e.query_domain = ANY(%(keys)s)
          AND e.target_domain = ANY(%(keys)s)
        ORDER BY e.evalue ASC NULLS LAST, e.query_domain, e.target_domain
        """
        rows = self.db.execute_dict_query(query, {'keys': list(domain_keys)})
        return [ClusterEdge.from_db_row(row) for row in rows]

    def get_phylum_distribution(self, tier: int, cluster_id: str) -> List[PhylumCount]:
        """Member count per phylum, largest first"""
        query = f"""
        SELECT phylum, COUNT(*) AS count
        FROM {self._member_table(tier)}
        WHERE cluster_id = %s
        GROUP BY phylum
        ORDER BY count DESC, phylum NULLS LAST
        """
        rows = self.db.execute_dict_query(query, (cluster_id,))
        return [PhylumCount(phylum=row['phylum'], count=int(row['count'])) for row in rows]

    # ------------------------------------------------------------------
    # Cross-tier hits
    # ------------------------------------------------------------------

    def _cluster_sizes(self, tier: int) -> str:
        return (f"(SELECT cluster_id, COUNT(*) AS cluster_size "
                f"FROM {self._member_table(tier)} GROUP BY cluster_id)")

    def get_hits_for_tier1_proteins(self, protein_ids: List[str]) -> List[CrossTierHit]:
        """Hits whose Tier 1 side is one of protein_ids, with Tier 2 cluster info

        Domains that did not cluster keep the hit with null cluster fields.
        """
        if not protein_ids:
            return []
        query = f"""
        SELECT ct.tier1_protein_id, ct.tier2_protein_id, ct.tier2_domain_num,
               ndc.cluster_id AS tier2_cluster_id, sz.cluster_size AS tier2_cluster_size,
               ct.fident, ct.alnlen, ct.evalue, ct.alntmscore
        FROM {self.db.table('novel_cross_tier_hits')} ct
        LEFT JOIN {self._member_table(TIER_ORPHAN_DOMAIN)} ndc
          ON ct.tier2_protein_id = ndc.protein_id AND ct.tier2_domain_num = ndc.domain_num
        LEFT JOIN {self._cluster_sizes(TIER_ORPHAN_DOMAIN)} sz
          ON sz.cluster_id = ndc.cluster_id
        WHERE ct.tier1_protein_id = ANY(%s)
        ORDER BY ct.alntmscore DESC NULLS LAST, ct.tier1_protein_id, ct.tier2_protein_id, ct.tier2_domain_num
        """
        rows = self.db.execute_dict_query(query, (list(protein_ids),))
        return [CrossTierHit.from_db_row(row) for row in rows]

    def get_hits_for_tier2(self, protein_ids: List[str],
                           domain_num: Optional[int] = None) -> List[CrossTierHit]:
        """Hits whose Tier 2 side belongs to protein_ids, with Tier 1 cluster info

        Args:
            protein_ids: Owning proteins of the Tier 2 domains
            domain_num: Restrict to one domain (only meaningful for a single protein)
        """
        if not protein_ids:
            return []
        params: List[Any] = [list(protein_ids)]
        domain_clause = ""
        if domain_num is not None:
            domain_clause = "AND ct.tier2_domain_num = %s"
            params.append(domain_num)
        query = f"""
        SELECT ct.tier1_protein_id, ct.tier2_protein_id, ct.tier2_domain_num,
               nfc.cluster_id AS tier1_cluster_id, sz.cluster_size AS tier1_cluster_size,
               ct.fident, ct.alnlen, ct.evalue, ct.alntmscore
        FROM {self.db.table('novel_cross_tier_hits')} ct
        LEFT JOIN {self._member_table(TIER_DARK_PROTEIN)} nfc
          ON ct.tier1_protein_id = nfc.protein_id
        LEFT JOIN {self._cluster_sizes(TIER_DARK_PROTEIN)} sz
          ON sz.cluster_id = nfc.cluster_id
        WHERE ct.tier2_protein_id = ANY(%s) {domain_clause}
        ORDER BY ct.alntmscore DESC NULLS LAST, ct.tier1_protein_id, ct.tier2_protein_id, ct.tier2_domain_num
        """
        rows = self.db.execute_dict_query(query, tuple(params))
        return [CrossTierHit.from_db_row(row) for row in rows]

    def get_hits_for_tier2_cluster(self, cluster_id: str) -> List[CrossTierHit]:
        """Hits whose Tier 2 domain is a member of cluster_id"""
        query = f"""
        SELECT ct.tier1_protein_id, ct.tier2_protein_id, ct.tier2_domain_num,
               nfc.cluster_id AS tier1_cluster_id, sz.cluster_size AS tier1_cluster_size,
               ct.fident, ct.alnlen, ct.evalue, ct.alntmscore
        FROM {self.db.table('novel_cross_tier_hits')} ct
        JOIN {self._member_table(TIER_ORPHAN_DOMAIN)} m
          ON ct.tier2_protein_id = m.protein_id AND ct.tier2_domain_num = m.domain_num
        LEFT JOIN {self._member_table(TIER_DARK_PROTEIN)} nfc
          ON ct.tier1_protein_id = nfc.protein_id
        LEFT JOIN {self._cluster_sizes(TIER_DARK_PROTEIN)} sz
          ON sz.cluster_id = nfc.cluster_id
        WHERE m.cluster_id = %s
        ORDER BY ct.alntmscore DESC NULLS LAST, ct.tier1_protein_id, ct.tier2_protein_id, ct.tier2_domain_num
        """
        rows = self.db.execute_dict_query(query, (cluster_id,))
        return [CrossTierHit.from_db_row(row) for row in rows]

    # ------------------------------------------------------------------
    # Listings
    # ------------------------------------------------------------------

    def _summary_sql(self, tier: int) -> str:
        """Per-cluster aggregation over raw membership rows

        Empty phylum and genome strings count as missing, as in novelty.summary.
        """
        table = self._member_table(tier)
        common = """
            cluster_id,
            COUNT(*) AS cluster_size,
            COUNT(DISTINCT NULLIF(phylum, '')) AS phylum_count,
            COUNT(DISTINCT NULLIF(phylum, '')) > 1 AS cross_phylum,
            COUNT(DISTINCT NULLIF(genome_accession, '')) AS genome_count,
            COALESCE(string_agg(DISTINCT NULLIF(phylum, ''), ', ' ORDER BY NULLIF(phylum, '')), '') AS phyla,
            MIN(mean_plddt) AS min_plddt,
            MAX(mean_plddt) AS max_plddt,
            AVG(mean_plddt) AS avg_plddt"""
        if tier == TIER_DARK_PROTEIN:
            extra = """,
            AVG(seq_length) AS avg_length"""
        else:
            extra = """,
            COUNT(DISTINCT protein_id) AS protein_count,
            COUNT(*) AS domain_count,
            AVG(dpam_prob) AS avg_dpam_prob,
            AVG(dali_zscore) AS avg_dali_zscore"""
        return f"SELECT {common}{extra}\n        FROM {table}\n        GROUP BY cluster_id"

    def _filter_clause(self, tier: int, filters: ClusterFilters) -> Tuple[str, List[Any]]:
        conditions = []
        params: List[Any] = []
        if filters.min_size is not None and filters.min_size > 1:
            conditions.append("cluster_size >= %s")
            params.append(int(filters.min_size))
        if filters.cross_phylum is not None:
            conditions.append("cross_phylum = %s")
            params.append(bool(filters.cross_phylum))
        if filters.phylum:
            # Matched per member row, never against the joined phyla string
            conditions.append(
                f"cluster_id IN (SELECT cluster_id FROM {self._member_table(tier)} "
                f"WHERE phylum ILIKE %s)"
            )
            params.append(like_pattern(filters.phylum))
        where = f"WHERE {' AND '.join(conditions)}" if conditions else ""
        return where, params

    def list_clusters(self, tier: int, filters: ClusterFilters, sort: SortSpec,
                      page: Page) -> Tuple[List[ClusterSummary], int]:
        """Get one page of cluster summaries and the filtered total

        Args:
            tier: TIER_DARK_PROTEIN or TIER_ORPHAN_DOMAIN
            filters: Listing filters
            sort: Resolved sort from SORT_OPTIONS[tier]
            page: Validated pagination

        Returns:
            Tuple of (summaries, total matching clusters)
        """
        summary = self._summary_sql(tier)
        where, params = self._filter_clause(tier, filters)

        count_query = f"""
        WITH summary AS ({summary})
        SELECT COUNT(*) AS total FROM summary {where}
        """
        count_rows = self.db.execute_dict_query(count_query, tuple(params))
        total = int(count_rows[0]['total']) if count_rows else 0

        data_query = f"""
        WITH summary AS ({summary})
        SELECT * FROM summary {where}
        ORDER BY {sort.clause}
        LIMIT %s OFFSET %s
        """
        rows = self.db.execute_dict_query(data_query, tuple(params + [page.limit, page.offset]))
        return [ClusterSummary.from_db_row(row, tier) for row in rows], total

    # ------------------------------------------------------------------
    # Overview
    # ------------------------------------------------------------------

    def get_overview_counts(self, pan_phylum_min_phyla: int) -> Dict[str, Any]:
        """Global counts for both tiers and the cross-tier hit table"""
        tier1 = self._summary_sql(TIER_DARK_PROTEIN)
        tier2 = self._summary_sql(TIER_ORPHAN_DOMAIN)
        query = f"""
        WITH t1 AS ({tier1}), t2 AS ({tier2})
        SELECT
            (SELECT COUNT(*) FROM t1) AS tier1_clusters,
            (SELECT COALESCE(SUM(cluster_size), 0) FROM t1) AS tier1_proteins,
            (SELECT COUNT(*) FROM t1 WHERE cluster_size > 1) AS tier1_multi_member,
            (SELECT COUNT(*) FROM t1 WHERE cluster_size = 1) AS tier1_singletons,
            (SELECT COUNT(*) FROM t1 WHERE cross_phylum) AS tier1_cross_phylum,
            (SELECT COUNT(*) FROM t2) AS tier2_clusters,
            (SELECT COALESCE(SUM(cluster_size), 0) FROM t2) AS tier2_domains,
            (SELECT COUNT(DISTINCT protein_id) FROM {self._member_table(TIER_ORPHAN_DOMAIN)}) AS tier2_proteins,
            (SELECT COUNT(*) FROM t2 WHERE cross_phylum) AS tier2_cross_phylum,
            (SELECT COUNT(*) FROM t2 WHERE phylum_count >= %s) AS tier2_pan_phylum,
            (SELECT COUNT(*) FROM {self.db.table('novel_cross_tier_hits')}) AS cross_tier_hits
        """
        rows = self.db.execute_dict_query(query, (int(pan_phylum_min_phyla),))
        return rows[0] if rows else {}
