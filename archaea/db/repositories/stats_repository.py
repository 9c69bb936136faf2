# archaea/db/repositories/stats_repository.py
#!/usr/bin/env python3
"""
Statistics repository for the archaea dashboard
Read-only counts over the whole schema
"""
import logging
from typing import List, Dict, Any

from archaea.db.manager import DBManager, IDENTIFIER_RE


class StatsRepository:
    """Repository for dashboard-wide counts"""

    def __init__(self, db_manager: DBManager):
        self.db = db_manager
        self.logger = logging.getLogger("archaea.db.stats_repository")

    def _one(self, query: str) -> Dict[str, Any]:
        rows = self.db.execute_dict_query(query)
        return rows[0] if rows else {}

    def get_protein_counts(self) -> Dict[str, Any]:
        return self._one(f"""
        SELECT COUNT(*) AS total,
               COUNT(*) FILTER (WHERE has_structure = TRUE) AS with_structure,
               COUNT(*) FILTER (WHERE protein_id IN (
                   SELECT protein_id FROM {self.db.table('structure_quality_metrics')}
               )) AS with_quality
        FROM {self.db.table('target_proteins')}
        """)

    def get_domain_counts(self) -> Dict[str, Any]:
        return self._one(f"""
        SELECT COUNT(*) AS total_domains,
               COUNT(DISTINCT protein_id) AS proteins_with_domains
        FROM {self.db.table('domains')}
        """)

    def get_table_count(self, table: str) -> int:
        """Row count of a table named in code"""
        row = self._one(f"SELECT COUNT(*) AS count FROM {self.db.table(table)}")
        return int(row.get('count') or 0)

    def get_member_counts(self, table: str) -> Dict[str, Any]:
        """Distinct clusters and member rows of a novel fold membership table"""
        return self._one(f"""
        SELECT COUNT(DISTINCT cluster_id) AS clusters, COUNT(*) AS members
        FROM {self.db.table(table)}
        """)

    def get_breakdown(self, table: str, column: str) -> List[Dict[str, Any]]:
        """Row count per value of column, largest first

        Both table and column are fixed by the caller's code.
        """
        if not IDENTIFIER_RE.match(column):
            raise ValueError(f"Invalid column identifier: {column!r}")
        query = f"""
        SELECT {column} AS key, COUNT(*) AS count
        FROM {self.db.table(table)}
        GROUP BY {column}
        ORDER BY count DESC
        """
        return self.db.execute_dict_query(query)
