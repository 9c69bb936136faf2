from typing import Optional

from fastapi import APIRouter, Depends, Query

from archaea.api.dependencies import get_organism_service
from archaea.models.organism import OrganismFilters
from archaea.organisms.service import OrganismService

router_organisms = APIRouter()


@router_organisms.get("")
def list_organisms(
    phylum: Optional[str] = Query(None, description="Exact phylum"),
    major_group: Optional[str] = Query(None, description="Exact major group"),
    sort: Optional[str] = Query(None),
    order: Optional[str] = Query(None),
    service: OrganismService = Depends(get_organism_service),
):
    filters = OrganismFilters(phylum=phylum or None, major_group=major_group or None)
    return service.list_organisms(filters, sort=sort, order=order).to_dict()


@router_organisms.get("/{organism_id}")
def get_organism(organism_id: str, service: OrganismService = Depends(get_organism_service)):
    return service.get_organism_detail(organism_id).to_dict()
