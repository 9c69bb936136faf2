#!/usr/bin/env python3
"""
Organism repository for the archaea dashboard
Per-organism aggregates over target_classes and everything hanging off it
"""
import logging
from typing import List, Any, Optional

from archaea.db.manager import DBManager
from archaea.db.sql import SortOptions, SortSpec
from archaea.models.landscape import CountEntry
from archaea.models.organism import (
    Organism, OrganismFilters, OrganismProtein, OrganismNovelFoldProtein, QUALITY_BUCKETS
)

ORGANISM_SORT = SortOptions(
    columns={
        'organism_name': 'tc.organism_name',
        'protein_count': 'tc.protein_count',
        'proteins_with_structures': 'COALESCE(ps.proteins_with_structures, 0)',
        'proteins_with_domains': 'COALESCE(ds.proteins_with_domains, 0)',
        'domain_count': 'COALESCE(ds.domain_count, 0)',
        'novel_fold_count': 'COALESCE(ns.novel_fold_count, 0)',
        'avg_plddt': 'qs.avg_plddt',
        'completeness': 'tc.completeness',
        'curation_pending': 'COALESCE(cs.curation_pending, 0)',
    },
    default_key='protein_count',
    default_descending=True,
    tiebreak='tc.id ASC',
)

# Columns of target_classes offered as listing filters
FILTER_COLUMNS = ('phylum', 'major_group')

# Proteins shown on an organism's detail page
MAX_TOP_PROTEINS = 20


class OrganismRepository:
    """Repository for target organisms"""

    def __init__(self, db_manager: DBManager):
        self.db = db_manager
        self.logger = logging.getLogger("archaea.db.organism_repository")

    def _aggregates_sql(self) -> str:
        """CTEs with one row per target_class_id, joined once onto target_classes"""
        proteins = self.db.table('target_proteins')
        return f"""
        WITH protein_stats AS (
            SELECT tp.target_class_id,
                   COUNT(*) AS actual_protein_count,
                   COUNT(*) FILTER (WHERE tp.has_structure = TRUE) AS proteins_with_structures,
                   COUNT(*) FILTER (WHERE tp.has_pae = TRUE) AS proteins_with_pae
            FROM {proteins} tp
            GROUP BY tp.target_class_id
        ),
        quality_stats AS (
            SELECT tp.target_class_id,
                   ROUND(AVG(sqm.mean_plddt)::numeric, 1) AS avg_plddt,
                   ROUND(AVG(sqm.quality_score)::numeric, 2) AS avg_quality_score
            FROM {proteins} tp
            JOIN {self.db.table('structure_quality_metrics')} sqm ON sqm.protein_id = tp.protein_id
            GROUP BY tp.target_class_id
        ),
        domain_stats AS (
            SELECT tp.target_class_id,
                   COUNT(*) AS domain_count,
                   COUNT(DISTINCT d.protein_id) AS proteins_with_domains,
                   COUNT(*) FILTER (WHERE d.judge = 'good_domain') AS good_domains
            FROM {self.db.table('domains')} d
            JOIN {proteins} tp ON d.protein_id = tp.protein_id
            GROUP BY tp.target_class_id
        ),
        curation_stats AS (
            SELECT tp.target_class_id,
                   COUNT(*) AS curation_total,
                   COUNT(*) FILTER (WHERE cc.curation_status = 'pending') AS curation_pending,
                   COUNT(*) FILTER (WHERE cc.curation_status = 'classified') AS curation_classified
            FROM {self.db.table('curation_candidates')} cc
            JOIN {proteins} tp ON cc.protein_id = tp.protein_id
            GROUP BY tp.target_class_id
        ),
        novel_stats AS (
            SELECT tp.target_class_id,
                   COUNT(DISTINCT nfc.cluster_id) AS novel_fold_count
            FROM {self.db.table('novel_fold_clusters')} nfc
            JOIN {proteins} tp ON nfc.protein_id = tp.protein_id
            GROUP BY tp.target_class_id
        )
        SELECT tc.id, tc.class_name, tc.organism_name, tc.phylum, tc.major_group,
               tc.genome_accession, tc.tax_id, tc.source_category, tc.completeness,
               tc.contamination, tc.quality_tier, tc.protein_count,
               COALESCE(ps.actual_protein_count, 0) AS actual_protein_count,
               COALESCE(ps.proteins_with_structures, 0) AS proteins_with_structures,
               COALESCE(ps.proteins_with_pae, 0) AS proteins_with_pae,
               COALESCE(ds.domain_count, 0) AS domain_count,
               COALESCE(ds.proteins_with_domains, 0) AS proteins_with_domains,
               COALESCE(ds.good_domains, 0) AS good_domains,
               COALESCE(ns.novel_fold_count, 0) AS novel_fold_count,
               qs.avg_plddt, qs.avg_quality_score,
               COALESCE(cs.curation_pending, 0) AS curation_pending,
               COALESCE(cs.curation_classified, 0) AS curation_classified,
               COALESCE(cs.curation_total, 0) AS curation_total
        FROM {self.db.table('target_classes')} tc
        LEFT JOIN protein_stats ps ON ps.target_class_id = tc.id
        LEFT JOIN quality_stats qs ON qs.target_class_id = tc.id
        LEFT JOIN domain_stats ds ON ds.target_class_id = tc.id
        LEFT JOIN curation_stats cs ON cs.target_class_id = tc.id
        LEFT JOIN novel_stats ns ON ns.target_class_id = tc.id
        """

    def list_organisms(self, filters: OrganismFilters, sort: SortSpec) -> List[Organism]:
        """All organisms matching the exact-match filters, in sort order"""
        where = []
        params: List[Any] = []
        for column in FILTER_COLUMNS:
            value = getattr(filters, column)
            if value:
                where.append(f"tc.{column} = %s")
                params.append(value)

        query = self._aggregates_sql()
        if where:
            query += " WHERE " + " AND ".join(where)
        query += f" ORDER BY {sort.clause}"

        rows = self.db.execute_dict_query(query, tuple(params))
        return [Organism.from_db_row(row) for row in rows]

    def get_filter_options(self, column: str) -> List[CountEntry]:
        """Distinct non-null values of a filter column with organism counts, largest first"""
        if column not in FILTER_COLUMNS:
            raise ValueError(f"Not an organism filter column: {column!r}")
        query = f"""
        SELECT {column} AS key, COUNT(*) AS count
        FROM {self.db.table('target_classes')}
        WHERE {column} IS NOT NULL
        GROUP BY {column}
        ORDER BY count DESC, {column}
        """
        return [CountEntry.from_db_row(row) for row in self.db.execute_dict_query(query)]

    def get_organism(self, organism_id: int) -> Optional[Organism]:
        """One organism with the same aggregates as the listing

        Returns:
            Organism if found, None otherwise
        """
        query = self._aggregates_sql() + " WHERE tc.id = %s"
        rows = self.db.execute_dict_query(query, (organism_id,))
        if not rows:
            return None
        return Organism.from_db_row(rows[0])

    def _counts(self, query: str, organism_id: int) -> List[CountEntry]:
        rows = self.db.execute_dict_query(query, (organism_id,))
        return [CountEntry.from_db_row(row) for row in rows]

    def get_novelty_breakdown(self, organism_id: int) -> List[CountEntry]:
        """Proteins per novelty category; proteins without a candidate row are 'uncategorized'"""
        return self._counts(f"""
        SELECT COALESCE(cc.novelty_category, 'uncategorized') AS key, COUNT(*) AS count
        FROM {self.db.table('target_proteins')} tp
        LEFT JOIN {self.db.table('curation_candidates')} cc ON cc.protein_id = tp.protein_id
        WHERE tp.target_class_id = %s
        GROUP BY 1
        ORDER BY count DESC
        """, organism_id)

    def get_source_breakdown(self, organism_id: int) -> List[CountEntry]:
        return self._counts(f"""
        SELECT source AS key, COUNT(*) AS count
        FROM {self.db.table('target_proteins')}
        WHERE target_class_id = %s
        GROUP BY source
        ORDER BY count DESC
        """, organism_id)

    def get_judge_breakdown(self, organism_id: int) -> List[CountEntry]:
        return self._counts(f"""
        SELECT d.judge AS key, COUNT(*) AS count
        FROM {self.db.table('domains')} d
        JOIN {self.db.table('target_proteins')} tp ON d.protein_id = tp.protein_id
        WHERE tp.target_class_id = %s
        GROUP BY d.judge
        ORDER BY count DESC
        """, organism_id)

    def get_quality_distribution(self, organism_id: int) -> List[CountEntry]:
        """Proteins per pLDDT bucket; proteins without a mean pLDDT are left out"""
        cases = " ".join(f"WHEN sqm.mean_plddt >= {bound} THEN '{name}'"
                         for name, bound in QUALITY_BUCKETS if bound is not None)
        fallback = QUALITY_BUCKETS[-1][0]
        return self._counts(f"""
        SELECT CASE {cases} ELSE '{fallback}' END AS key, COUNT(*) AS count
        FROM {self.db.table('structure_quality_metrics')} sqm
        JOIN {self.db.table('target_proteins')} tp ON sqm.protein_id = tp.protein_id
        WHERE tp.target_class_id = %s AND sqm.mean_plddt IS NOT NULL
        GROUP BY 1
        """, organism_id)

    def get_curation_breakdown(self, organism_id: int) -> List[CountEntry]:
        return self._counts(f"""
        SELECT cc.curation_status AS key, COUNT(*) AS count
        FROM {self.db.table('curation_candidates')} cc
        JOIN {self.db.table('target_proteins')} tp ON cc.protein_id = tp.protein_id
        WHERE tp.target_class_id = %s
        GROUP BY cc.curation_status
        ORDER BY count DESC
        """, organism_id)

    def get_top_proteins(self, organism_id: int, limit: int = MAX_TOP_PROTEINS) -> List[OrganismProtein]:
        """Best-scoring proteins of an organism; unscored proteins sort last"""
        query = f"""
        SELECT tp.protein_id, tp.source, tp.sequence_length, tp.has_structure,
               sqm.mean_plddt, sqm.quality_score, sqm.af3_quality_category,
               cc.novelty_category, cc.curation_status, cc.is_novel_fold
        FROM {self.db.table('target_proteins')} tp
        LEFT JOIN {self.db.table('structure_quality_metrics')} sqm ON sqm.protein_id = tp.protein_id
        LEFT JOIN {self.db.table('curation_candidates')} cc ON cc.protein_id = tp.protein_id
        WHERE tp.target_class_id = %s
        ORDER BY sqm.quality_score DESC NULLS LAST, tp.protein_id ASC
        LIMIT %s
        """
        rows = self.db.execute_dict_query(query, (organism_id, limit))
        return [OrganismProtein.from_db_row(row) for row in rows]

    def get_novel_fold_proteins(self, organism_id: int) -> List[OrganismNovelFoldProtein]:
        """Tier 1 members from this organism with the phylum spread of their cluster

        Empty phylum strings count as missing, as in novelty.summary.
        """
        tier1 = self.db.table('novel_fold_clusters')
        query = f"""
        WITH cluster_phyla AS (
            SELECT cluster_id, COUNT(DISTINCT NULLIF(phylum, '')) AS num_phyla
            FROM {tier1}
            GROUP BY cluster_id
        )
        SELECT nfc.protein_id, nfc.cluster_id, nfc.cluster_size, nfc.mean_plddt, nfc.phylum,
               COALESCE(cp.num_phyla, 0) AS num_phyla
        FROM {tier1} nfc
        JOIN {self.db.table('target_proteins')} tp ON nfc.protein_id = tp.protein_id
        LEFT JOIN cluster_phyla cp ON cp.cluster_id = nfc.cluster_id
        WHERE tp.target_class_id = %s
        ORDER BY nfc.cluster_size DESC NULLS LAST, nfc.cluster_id, nfc.protein_id
        """
        rows = self.db.execute_dict_query(query, (organism_id,))
        return [OrganismNovelFoldProtein.from_db_row(row) for row in rows]
