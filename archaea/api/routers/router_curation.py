from typing import Optional

from fastapi import APIRouter, Depends, Query

from archaea.api.dependencies import get_curation_workflow
from archaea.api.schemas import DecisionBody, DecisionResponse
from archaea.curation.workflow import CurationWorkflow
from archaea.models.curation import QueueFilters

router_curation = APIRouter()


@router_curation.get("/queue")
def curation_queue(
    novelty: Optional[str] = Query(None),
    priority: Optional[str] = Query(None),
    status: str = Query("pending", description="Curation status, or 'all'"),
    has_structure: Optional[bool] = Query(None),
    taxonomy: Optional[str] = Query(None, description="Exact taxonomy class"),
    sort: Optional[str] = Query(None),
    order: Optional[str] = Query(None),
    limit: Optional[int] = Query(None),
    offset: Optional[int] = Query(None),
    workflow: CurationWorkflow = Depends(get_curation_workflow),
):
    filters = QueueFilters(novelty=novelty, priority=priority, status=status,
                           has_structure=has_structure, taxonomy=taxonomy)
    return workflow.list_queue(filters, sort=sort, order=order, limit=limit, offset=offset).to_dict()


@router_curation.post("/decide", response_model=DecisionResponse, response_model_exclude_none=True)
def submit_decision(body: DecisionBody, workflow: CurationWorkflow = Depends(get_curation_workflow)):
    return workflow.submit_decision(body.to_request()).to_response()


@router_curation.get("/candidates/{protein_id}")
def get_candidate(protein_id: str, workflow: CurationWorkflow = Depends(get_curation_workflow)):
    return workflow.get_candidate(protein_id).to_dict()


@router_curation.get("/candidates/{protein_id}/history")
def decision_history(protein_id: str,
                     limit: int = Query(100, ge=1, le=1000),
                     workflow: CurationWorkflow = Depends(get_curation_workflow)):
    decisions = workflow.get_decision_history(protein_id, limit=limit)
    return {"protein_id": protein_id, "decisions": [d.to_dict() for d in decisions],
            "total": len(decisions)}
