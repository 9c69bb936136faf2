# archaea/db/repositories/curation_repository.py
#!/usr/bin/env python3
"""
Curation repository for the archaea dashboard
Candidate reads and writes, the append-only decision audit and the queue view

Methods taking a ``cursor`` run inside a transaction opened by the caller
(DBManager.transaction); the others borrow their own pooled connection.
"""
import logging
from typing import List, Dict, Any, Optional, Tuple

from archaea.db.manager import DBManager, TransactionCursor
from archaea.db.sql import Page, SortOptions, SortSpec
from archaea.models.curation import (
    CurationCandidate, CurationDecision, CurationProgress, QueueFilters, QueueItem,
    CurationStatus, ECOD_GROUP_FIELDS
)

PRIORITY_ORDER = "priority_category ASC NULLS LAST, priority_rank ASC NULLS LAST"

QUEUE_SORT = SortOptions(
    columns={
        'priority_rank': 'priority_rank',
        'quality_score': 'quality_score',
        'mean_plddt': 'mean_plddt',
        'ptm': 'ptm',
        'sequence_length': 'sequence_length',
        'structural_cluster_size': 'structural_cluster_size',
        'protein_id': 'protein_id',
    },
    default_key='priority_rank',
    default_descending=False,
    tiebreak=f"{PRIORITY_ORDER}, protein_id ASC",
    overrides={
        'priority_rank': ("priority_category {direction} NULLS LAST, "
                          "priority_rank {direction} NULLS LAST, protein_id ASC"),
        'protein_id': "protein_id {direction}",
    },
)

CANDIDATE_COLUMNS = """
    id, protein_id, novelty_category, priority_category, priority_rank, curation_status,
    structural_cluster_id, structural_cluster_rep, structural_cluster_size,
    ecod_x_group, ecod_h_group, ecod_t_group, ecod_f_group,
    is_novel_fold, is_novel_topology, curator_notes, assigned_curator,
    reviewed_at, classified_at
"""


class CurationRepository:
    """Repository for curation candidates and decisions"""

    def __init__(self, db_manager: DBManager):
        """Initialize repository

        Args:
            db_manager: Database manager instance
        """
        self.db = db_manager
        self.logger = logging.getLogger("archaea.db.curation_repository")

    # ------------------------------------------------------------------
    # Transactional operations
    # ------------------------------------------------------------------

    def get_candidate_for_update(self, cursor: TransactionCursor, protein_id: str,
                                 lock: bool = True) -> Optional[CurationCandidate]:
        """Read a candidate inside a transaction

        Args:
            cursor: Transaction cursor
            protein_id: Protein ID
            lock: Take a row lock held until the transaction ends

        Returns:
            Candidate if found, None otherwise
        """
        query = f"""
        SELECT {CANDIDATE_COLUMNS}
        FROM {self.db.table('curation_candidates')}
        WHERE protein_id = %s
        {"FOR UPDATE" if lock else ""}
        """
        row = cursor.execute(query, (protein_id,)).fetchone()
        return CurationCandidate.from_db_row(row) if row else None

    def insert_decision(self, cursor: TransactionCursor, decision: CurationDecision) -> Optional[int]:
        """Append one audit row

        Returns:
            ID of the new audit row
        """
        query = f"""
        INSERT INTO {self.db.table('curation_decisions')} (
            protein_id, curator_name, decision_type,
            previous_status, new_status,
            ecod_x_group, ecod_h_group, ecod_t_group, ecod_f_group,
            is_novel_fold, is_novel_topology,
            confidence_level, notes
        ) VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
        RETURNING id
        """
        params = (
            decision.protein_id, decision.curator_name, decision.decision_type,
            decision.previous_status, decision.new_status,
            decision.ecod_x_group, decision.ecod_h_group, decision.ecod_t_group, decision.ecod_f_group,
            decision.is_novel_fold, decision.is_novel_topology,
            decision.confidence_level, decision.notes,
        )
        row = cursor.execute(query, params).fetchone()
        return row['id'] if row else None

    def update_candidate(self, cursor: TransactionCursor, protein_id: str, new_status: str,
                         mark_novel_fold: bool = False,
                         ecod_groups: Optional[Dict[str, Optional[int]]] = None,
                         notes: Optional[str] = None) -> int:
        """Apply a decision to the candidate row

        Args:
            cursor: Transaction cursor
            protein_id: Protein ID
            new_status: Status to set
            mark_novel_fold: Set is_novel_fold = TRUE
            ecod_groups: ECOD group columns to overwrite (None values clear the column)
            notes: Replaces curator_notes when non-empty

        Returns:
            Number of rows updated
        """
        assignments = ["curation_status = %s", "reviewed_at = CURRENT_TIMESTAMP"]
        params: List[Any] = [new_status]

        if new_status == CurationStatus.CLASSIFIED.value:
            assignments.append("classified_at = CURRENT_TIMESTAMP")
        if mark_novel_fold:
            assignments.append("is_novel_fold = TRUE")
        for column in ECOD_GROUP_FIELDS:
            if ecod_groups and column in ecod_groups:
                assignments.append(f"{column} = %s")
                params.append(ecod_groups[column])
        if notes:
            assignments.append("curator_notes = %s")
            params.append(notes)

        params.append(protein_id)
        query = f"""
        UPDATE {self.db.table('curation_candidates')}
        SET {', '.join(assignments)}
        WHERE protein_id = %s
        """
        return cursor.execute(query, tuple(params)).rowcount

    def next_pending_protein(self, cursor: TransactionCursor, exclude_protein_id: str) -> Optional[str]:
        """Best pending candidate with a structure, other than exclude_protein_id"""
        query = f"""
        SELECT protein_id
        FROM {self.db.table('v_curation_queue_full')}
        WHERE curation_status = %s
          AND has_structure = TRUE
          AND protein_id <> %s
        ORDER BY priority_rank ASC NULLS LAST, quality_score DESC NULLS LAST, protein_id ASC
        LIMIT 1
        """
        row = cursor.execute(query, (CurationStatus.PENDING.value, exclude_protein_id)).fetchone()
        return row['protein_id'] if row else None

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_candidate(self, protein_id: str) -> Optional[CurationCandidate]:
        """Get candidate by protein ID"""
        query = f"""
        SELECT {CANDIDATE_COLUMNS}
        FROM {self.db.table('curation_candidates')}
        WHERE protein_id = %s
        """
        rows = self.db.execute_dict_query(query, (protein_id,))
        return CurationCandidate.from_db_row(rows[0]) if rows else None

    def get_decisions(self, protein_id: str, limit: int = 100) -> List[CurationDecision]:
        """Audit rows for a protein, newest first"""
        query = f"""
        SELECT id, protein_id, curator_name, decision_type, previous_status, new_status,
               ecod_x_group, ecod_h_group, ecod_t_group, ecod_f_group,
               is_novel_fold, is_novel_topology, confidence_level, notes, created_at
        FROM {self.db.table('curation_decisions')}
        WHERE protein_id = %s
        ORDER BY created_at DESC NULLS LAST, id DESC
        LIMIT %s
        """
        rows = self.db.execute_dict_query(query, (protein_id, limit))
        return [CurationDecision.from_db_row(row) for row in rows]

    def _queue_filter_clause(self, filters: QueueFilters) -> Tuple[str, List[Any]]:
        conditions = []
        params: List[Any] = []
        if filters.novelty and filters.novelty != 'all':
            conditions.append("novelty_category = %s")
            params.append(filters.novelty)
        if filters.priority and filters.priority != 'all':
            conditions.append("priority_category = %s")
            params.append(filters.priority)
        if filters.status and filters.status != 'all':
            conditions.append("curation_status = %s")
            params.append(filters.status)
        if filters.has_structure is not None:
            conditions.append("has_structure = %s")
            params.append(bool(filters.has_structure))
        if filters.taxonomy:
            conditions.append("taxonomy_class = %s")
            params.append(filters.taxonomy)
        where = f"WHERE {' AND '.join(conditions)}" if conditions else ""
        return where, params

    def list_queue(self, filters: QueueFilters, sort: SortSpec,
                   page: Page) -> Tuple[List[QueueItem], int]:
        """Get one page of the review queue and the filtered total"""
        view = self.db.table('v_curation_queue_full')
        where, params = self._queue_filter_clause(filters)

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
        return [QueueItem.from_db_row(row) for row in rows], total

    def get_progress(self) -> List[CurationProgress]:
        """Rows of v_curation_progress"""
        query = f"""
        SELECT * FROM {self.db.table('v_curation_progress')}
        ORDER BY novelty_category, priority_category, curation_status
        """
        return [CurationProgress.from_db_row(row) for row in self.db.execute_dict_query(query)]
