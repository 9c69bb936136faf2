#!/usr/bin/env python3
"""
Landscape repository for the archaea dashboard
Domain T-group/Pfam landscape and the four clustering runs
"""
import logging
from typing import List, Dict, Any

from archaea.db.manager import DBManager
from archaea.models.landscape import (
    CountEntry, PfamCoverage, TGroupCount, ClusterSet, ClusterSetSummary, SizeBin,
    CrossComparison, EcodNovelty, TopStructuralCluster, CLUSTER_SETS
)

# T-groups shown on the domain landscape
MAX_TGROUPS = 30

# Structural clusters shown on the clustering page
MAX_TOP_STRUCTURAL_CLUSTERS = 20

CLUSTER_TABLES = {s.table for s in CLUSTER_SETS if s.table is not None}

SIZE_BIN_SQL = """
CASE WHEN cluster_size = 1 THEN '1'
     WHEN cluster_size <= 5 THEN '2-5'
     WHEN cluster_size <= 20 THEN '6-20'
     WHEN cluster_size <= 100 THEN '21-100'
     ELSE '100+' END
"""


class LandscapeRepository:
    """Repository for domain landscape and clustering statistics"""

    def __init__(self, db_manager: DBManager, reference_schema: str = 'ecod_rep'):
        """Initialize repository

        Args:
            db_manager: Database manager instance
            reference_schema: Schema holding the ECOD reference hierarchy
        """
        self.db = db_manager
        self.reference_schema = reference_schema
        self.logger = logging.getLogger("archaea.db.landscape_repository")

    def _one(self, query: str) -> Dict[str, Any]:
        rows = self.db.execute_dict_query(query)
        return rows[0] if rows else {}

    def get_domain_counts(self) -> Dict[str, Any]:
        domains = self.db.table('domains')
        return self._one(f"""
        SELECT COUNT(*) AS total_domains,
               COUNT(DISTINCT protein_id) AS proteins_with_domains,
               COUNT(DISTINCT t_group) AS unique_tgroups,
               (SELECT COUNT(*) FROM (
                   SELECT protein_id FROM {domains} GROUP BY protein_id HAVING COUNT(*) > 1
               ) multi) AS multi_domain_proteins
        FROM {domains}
        """)

    def get_novel_pfam_family_count(self) -> int:
        """Distinct Pfam families hit only by domains classed as novel"""
        row = self._one(f"""
        SELECT COUNT(DISTINCT dph.pfam_acc) AS count
        FROM {self.db.table('domain_pfam_hits')} dph
        JOIN {self.db.table('mv_domain_pfam_class')} dc ON dph.domain_id = dc.domain_id
        WHERE dc.pfam_class = 'novel'
        """)
        return int(row.get('count') or 0)

    def get_tgroup_distribution(self, limit: int = MAX_TGROUPS) -> List[TGroupCount]:
        """Most populated T-groups with the reference name where ECOD has one"""
        query = f"""
        SELECT dc.t_group, c.name AS t_group_name, COUNT(*) AS count,
               COUNT(*) FILTER (WHERE dc.pfam_class = 'ecod') AS ecod_pfam,
               COUNT(*) FILTER (WHERE dc.pfam_class = 'novel') AS novel_pfam,
               COUNT(*) FILTER (WHERE dc.pfam_class = 'none') AS no_pfam
        FROM {self.db.table('mv_domain_pfam_class')} dc
        LEFT JOIN {self.db.table('cluster', schema=self.reference_schema)} c
               ON dc.t_group = c.id AND c.type = 'T'
        WHERE dc.t_group IS NOT NULL
        GROUP BY dc.t_group, c.name
        ORDER BY count DESC, dc.t_group
        LIMIT %s
        """
        rows = self.db.execute_dict_query(query, (limit,))
        return [TGroupCount.from_db_row(row) for row in rows]

    def get_judge_breakdown(self) -> List[CountEntry]:
        rows = self.db.execute_dict_query(f"""
        SELECT judge AS key, COUNT(*) AS count
        FROM {self.db.table('domains')}
        GROUP BY judge
        ORDER BY count DESC
        """)
        return [CountEntry.from_db_row(row) for row in rows]

    def get_pfam_coverage(self) -> PfamCoverage:
        return PfamCoverage.from_db_row(self._one(f"""
        SELECT COUNT(*) FILTER (WHERE pfam_class = 'ecod') AS ecod_pfam,
               COUNT(*) FILTER (WHERE pfam_class = 'novel') AS novel_pfam,
               COUNT(*) FILTER (WHERE pfam_class = 'none') AS no_pfam
        FROM {self.db.table('mv_domain_pfam_class')}
        """))

    def _cluster_table(self, cluster_set: ClusterSet) -> str:
        if cluster_set.table not in CLUSTER_TABLES:
            raise ValueError(f"No cluster table for {cluster_set.type!r}")
        return self.db.table(cluster_set.table)

    def get_cluster_set_summary(self, cluster_set: ClusterSet) -> ClusterSetSummary:
        """Cluster and member counts of one loaded clustering run"""
        return ClusterSetSummary.from_db_row(cluster_set, self._one(f"""
        SELECT COUNT(DISTINCT cluster_id) AS clusters,
               COUNT(*) AS members,
               COUNT(*) FILTER (WHERE cluster_size = 1) AS singletons,
               MAX(cluster_size) AS largest
        FROM {self._cluster_table(cluster_set)}
        """))

    def get_size_distribution(self, cluster_set: ClusterSet) -> List[SizeBin]:
        """Clusters and members per size bin; empty bins are absent"""
        rows = self.db.execute_dict_query(f"""
        SELECT {SIZE_BIN_SQL} AS bin,
               COUNT(DISTINCT cluster_id) AS clusters,
               COUNT(*) AS members
        FROM {self._cluster_table(cluster_set)}
        GROUP BY 1
        """)
        return [SizeBin.from_db_row(row) for row in rows]

    def get_cross_comparison(self) -> CrossComparison:
        """Proteins in both the sequence and structure runs, by singleton status in each"""
        return CrossComparison.from_db_row(self._one(f"""
        SELECT COUNT(*) FILTER (WHERE psc.cluster_size > 1 AND pxc.cluster_size > 1) AS both_clustered,
               COUNT(*) FILTER (WHERE psc.cluster_size = 1 AND pxc.cluster_size > 1) AS rescued_by_structure,
               COUNT(*) FILTER (WHERE psc.cluster_size = 1 AND pxc.cluster_size = 1) AS both_singleton,
               COUNT(*) FILTER (WHERE psc.cluster_size > 1 AND pxc.cluster_size = 1) AS seq_only
        FROM {self.db.table('protein_seq_clusters')} psc
        JOIN {self.db.table('protein_struct_clusters')} pxc ON psc.protein_id = pxc.protein_id
        """))

    def get_ecod_novelty(self) -> EcodNovelty:
        return EcodNovelty.from_db_row(self._one(f"""
        SELECT COUNT(*) FILTER (WHERE has_ecod_member) AS has_ecod,
               COUNT(*) FILTER (WHERE NOT has_ecod_member) AS novel
        FROM {self.db.table('protein_seq_clusters')}
        """))

    def get_top_structural_clusters(self, limit: int = MAX_TOP_STRUCTURAL_CLUSTERS) -> List[TopStructuralCluster]:
        """Largest structure clusters with the organisms they span"""
        query = f"""
        SELECT pxc.cluster_id, pxc.cluster_size, pxc.cluster_rep,
               COUNT(DISTINCT tc.id) AS n_classes,
               string_agg(DISTINCT tc.class_name, ', ' ORDER BY tc.class_name) AS classes
        FROM {self.db.table('protein_struct_clusters')} pxc
        JOIN {self.db.table('target_proteins')} tp ON tp.protein_id = pxc.protein_id
        JOIN {self.db.table('target_classes')} tc ON tc.id = tp.target_class_id
        GROUP BY pxc.cluster_id, pxc.cluster_size, pxc.cluster_rep
        ORDER BY pxc.cluster_size DESC, pxc.cluster_id
        LIMIT %s
        """
        rows = self.db.execute_dict_query(query, (limit,))
        return [TopStructuralCluster.from_db_row(row) for row in rows]
