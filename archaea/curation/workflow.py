#!/usr/bin/env python3
"""
Curation workflow for the archaea dashboard

Every decision maps to exactly one resulting status through DECISION_TO_STATUS,
whatever the candidate's current state. A decision is applied in a single
transaction: the candidate row is read (and locked), one audit row is
appended, the candidate is updated unless the decision is a skip, and the
next pending protein is picked. Any failure rolls the whole thing back.
"""
import logging
from typing import Dict, List, Optional, Any

from archaea.core.context import ApplicationContext
from archaea.db.repositories.curation_repository import CurationRepository, QUEUE_SORT
from archaea.db.sql import parse_pagination
from archaea.exceptions import (
    CandidateNotFoundError, ConflictError, InvalidArgumentError
)
from archaea.models.curation import (
    CurationStatus, DecisionType, DecisionRequest, DecisionResult,
    CurationCandidate, CurationDecision, QueueFilters, QueuePage
)

DECISION_TO_STATUS: Dict[DecisionType, CurationStatus] = {
    DecisionType.APPROVE: CurationStatus.CLASSIFIED,
    DecisionType.CLASSIFY: CurationStatus.CLASSIFIED,
    DecisionType.FLAG_NOVEL: CurationStatus.CLASSIFIED,
    DecisionType.DEFER: CurationStatus.DEFERRED,
    DecisionType.REJECT: CurationStatus.REJECTED,
    DecisionType.SKIP: CurationStatus.PENDING,
}

VALID_DECISIONS = [d.value for d in DecisionType]
VALID_STATUSES = [s.value for s in CurationStatus]


def resulting_status(decision_type: DecisionType) -> CurationStatus:
    """Status a candidate ends up in after decision_type"""
    return DECISION_TO_STATUS[decision_type]


def parse_decision_type(value: Any) -> DecisionType:
    """
    Raises:
        InvalidArgumentError: If value is not one of the six decision types
    """
    try:
        return DecisionType(value)
    except ValueError:
        raise InvalidArgumentError(
            f"Invalid decision_type. Must be one of: {', '.join(VALID_DECISIONS)}",
            {"decision_type": value}
        )


class CurationWorkflow:
    """Applies curator decisions and serves the review queue

    Candidate status is always read from the database; nothing is cached
    between calls.
    """

    def __init__(self, context: ApplicationContext,
                 repository: Optional[CurationRepository] = None):
        self.context = context
        self.db = context.db
        self.repository = repository or CurationRepository(self.db)
        self.logger = logging.getLogger("archaea.curation")

    def _validate(self, request: DecisionRequest) -> DecisionType:
        if not request.protein_id:
            raise InvalidArgumentError("protein_id is required")
        if not request.curator:
            raise InvalidArgumentError("curator name is required", {"protein_id": request.protein_id})
        return parse_decision_type(request.decision_type)

    def submit_decision(self, request: DecisionRequest) -> DecisionResult:
        """Record a curator decision and advance the candidate

        Args:
            request: Decision as submitted by the curator

        Returns:
            DecisionResult with the new status and an advisory next protein

        Raises:
            InvalidArgumentError: Missing protein/curator or unknown decision type
            CandidateNotFoundError: No curation candidate for the protein
            ConflictError: Candidate row disappeared before the update
            StoreUnavailableError: Connection or transaction failure
        """
        decision_type = self._validate(request)
        new_status = resulting_status(decision_type).value
        mark_novel_fold = decision_type is DecisionType.FLAG_NOVEL or request.is_novel_fold is True

        timeout_ms = self.context.get('curation.transaction_timeout_ms', 5000)
        lock = bool(self.context.get('curation.lock_candidate_row', True))

        with self.db.transaction(timeout_ms=timeout_ms) as cursor:
            candidate = self.repository.get_candidate_for_update(cursor, request.protein_id, lock=lock)
            if candidate is None:
                raise CandidateNotFoundError(
                    "Protein not found in curation candidates",
                    {"protein_id": request.protein_id}
                )
            previous_status = candidate.curation_status

            audit = CurationDecision(
                protein_id=request.protein_id,
                curator_name=request.curator,
                decision_type=decision_type.value,
                previous_status=previous_status,
                new_status=new_status,
                is_novel_fold=True if mark_novel_fold else request.is_novel_fold,
                is_novel_topology=request.is_novel_topology,
                confidence_level=request.confidence_level,
                notes=request.notes or None,
                **request.audit_ecod_groups()
            )
            self.repository.insert_decision(cursor, audit)

            if decision_type is not DecisionType.SKIP:
                updated = self.repository.update_candidate(
                    cursor, request.protein_id, new_status,
                    mark_novel_fold=mark_novel_fold,
                    ecod_groups=request.supplied_ecod_groups(),
                    notes=request.notes,
                )
                if updated != 1:
                    raise ConflictError(
                        f"Candidate {request.protein_id} changed during the decision",
                        {"protein_id": request.protein_id, "rows": updated}
                    )

            next_protein = self.repository.next_pending_protein(cursor, request.protein_id)

        self.logger.info(
            f"{request.curator} {decision_type.value} {request.protein_id}: "
            f"{previous_status} -> {new_status}"
        )
        return DecisionResult(
            protein_id=request.protein_id,
            decision_type=decision_type.value,
            previous_status=previous_status,
            new_status=new_status,
            next_protein=next_protein,
        )

    def get_candidate(self, protein_id: str) -> CurationCandidate:
        """
        Raises:
            CandidateNotFoundError: If the protein has no candidate row
        """
        candidate = self.repository.get_candidate(protein_id)
        if candidate is None:
            raise CandidateNotFoundError("Protein not found in curation candidates",
                                         {"protein_id": protein_id})
        return candidate

    def get_decision_history(self, protein_id: str, limit: int = 100) -> List[CurationDecision]:
        """Audit rows for a protein, newest first"""
        return self.repository.get_decisions(protein_id, limit=limit)

    def list_queue(self, filters: Optional[QueueFilters] = None, sort: Optional[str] = None,
                   order: Optional[str] = None, limit: Any = None, offset: Any = None) -> QueuePage:
        """One page of the review queue

        The default order is priority bucket then rank within the bucket.

        Raises:
            InvalidArgumentError: If the status filter is not a known status or 'all'
        """
        filters = filters or QueueFilters()
        if filters.status and filters.status != 'all' and filters.status not in VALID_STATUSES:
            raise InvalidArgumentError(
                f"Invalid status. Must be 'all' or one of: {', '.join(VALID_STATUSES)}",
                {"status": filters.status}
            )
        page = parse_pagination(
            limit, offset,
            default_limit=self.context.get('pagination.default_limit', 50),
            max_limit=self.context.get('pagination.max_limit', 200),
        )
        sort_spec = QUEUE_SORT.resolve(sort, order)
        items, total = self.repository.list_queue(filters, sort_spec, page)
        return QueuePage(items=items, total=total, limit=page.limit, offset=page.offset,
                         filters=filters.active())
