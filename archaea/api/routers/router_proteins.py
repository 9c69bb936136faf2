from typing import Optional

from fastapi import APIRouter, Depends, Query

from archaea.api.dependencies import get_protein_service
from archaea.models.protein import ProteinFilters
from archaea.proteins.service import ProteinService

router_proteins = APIRouter()


@router_proteins.get("")
def list_proteins(
    source: Optional[str] = Query(None),
    has_structure: Optional[bool] = Query(None),
    has_domains: Optional[bool] = Query(None),
    search: Optional[str] = Query(None, description="Substring of protein ID or UniProt accession"),
    phylum: Optional[str] = Query(None),
    min_length: Optional[int] = Query(None, ge=0),
    max_length: Optional[int] = Query(None, ge=0),
    sort: Optional[str] = Query(None),
    order: Optional[str] = Query(None),
    limit: Optional[int] = Query(None),
    offset: Optional[int] = Query(None),
    service: ProteinService = Depends(get_protein_service),
):
    filters = ProteinFilters(source=source, has_structure=has_structure, has_domains=has_domains,
                             search=search or None, phylum=phylum,
                             min_length=min_length, max_length=max_length)
    items, total, page = service.list_proteins(filters, sort=sort, order=order,
                                               limit=limit, offset=offset)
    return {"items": [p.to_dict() for p in items], "total": total,
            "limit": page.limit, "offset": page.offset}


@router_proteins.get("/{protein_id}")
def get_protein(protein_id: str, service: ProteinService = Depends(get_protein_service)):
    return service.get_protein_report(protein_id).to_dict()


@router_proteins.get("/{protein_id}/domains")
def get_protein_domains(protein_id: str, service: ProteinService = Depends(get_protein_service)):
    domains = service.get_domains(protein_id)
    return {"protein_id": protein_id, "domains": [d.to_dict() for d in domains],
            "total": len(domains)}
