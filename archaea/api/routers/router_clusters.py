from typing import Optional

from fastapi import APIRouter, Depends, Query

from archaea.api.dependencies import get_protein_service
from archaea.models.protein import StructuralClusterFilters
from archaea.proteins.service import ProteinService

router_clusters = APIRouter()


@router_clusters.get("")
def list_clusters(
    min_size: int = Query(1, ge=1),
    has_dark: bool = Query(False),
    has_pending: bool = Query(False),
    search: Optional[str] = Query(None, description="Substring of the representative ID"),
    sort: Optional[str] = Query(None),
    order: Optional[str] = Query(None),
    limit: Optional[int] = Query(None),
    offset: Optional[int] = Query(None),
    service: ProteinService = Depends(get_protein_service),
):
    filters = StructuralClusterFilters(min_size=min_size, has_dark=has_dark,
                                       has_pending=has_pending, search=search or None)
    items, total, page = service.list_structural_clusters(filters, sort=sort, order=order,
                                                          limit=limit, offset=offset)
    return {"items": [c.to_dict() for c in items], "total": total,
            "limit": page.limit, "offset": page.offset}


@router_clusters.get("/{cluster_id}")
def get_cluster(cluster_id: str, service: ProteinService = Depends(get_protein_service)):
    cluster, members = service.get_structural_cluster(cluster_id)
    return {"cluster": cluster.to_dict(), "members": [m.to_dict() for m in members]}
