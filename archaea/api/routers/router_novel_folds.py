from typing import Optional

from fastapi import APIRouter, Depends, Query

from archaea.api.dependencies import get_novelty_service
from archaea.models.novelty import ClusterFilters, TIER_ORPHAN_DOMAIN
from archaea.novelty.service import NoveltyService, validate_tier

router_novel_folds = APIRouter()


@router_novel_folds.get("/novel-folds")
def list_novel_folds(
    tier: int = Query(1, description="1 for dark protein clusters, 2 for orphan domain clusters"),
    min_size: Optional[int] = Query(None, ge=1),
    cross_phylum: Optional[bool] = Query(None),
    phylum: Optional[str] = Query(None, description="Case-insensitive phylum substring"),
    sort: Optional[str] = Query(None),
    order: Optional[str] = Query(None),
    limit: Optional[int] = Query(None),
    offset: Optional[int] = Query(None),
    service: NoveltyService = Depends(get_novelty_service),
):
    filters = ClusterFilters(min_size=min_size, cross_phylum=cross_phylum, phylum=phylum or None)
    page = service.list_clusters(tier, filters, sort=sort, order=order, limit=limit, offset=offset)
    return {"tier": tier, **page.to_dict()}


@router_novel_folds.get("/novel-folds/overview")
def novelty_overview(service: NoveltyService = Depends(get_novelty_service)):
    return service.overview_stats().to_dict()


@router_novel_folds.get("/novel-folds/{cluster_id}")
def get_novel_fold(cluster_id: str, service: NoveltyService = Depends(get_novelty_service)):
    return service.get_cluster_detail(cluster_id).to_dict()


@router_novel_folds.get("/cross-tier/proteins/{protein_id}")
def cross_tier_for_protein(
    protein_id: str,
    side: int = Query(1, description="Tier the protein is on (1 or 2)"),
    service: NoveltyService = Depends(get_novelty_service),
):
    if validate_tier(side) == TIER_ORPHAN_DOMAIN:
        hits = service.cross_tier_hits_for_tier2_protein(protein_id)
    else:
        hits = service.cross_tier_hits_for_protein(protein_id)
    return {"protein_id": protein_id, "hits": [h.to_dict() for h in hits], "total": len(hits)}


@router_novel_folds.get("/cross-tier/domains/{protein_id}/{domain_num}")
def cross_tier_for_domain(protein_id: str, domain_num: int,
                          service: NoveltyService = Depends(get_novelty_service)):
    hits = service.cross_tier_hits_for_domain(protein_id, domain_num)
    return {"protein_id": protein_id, "domain_num": domain_num,
            "hits": [h.to_dict() for h in hits], "total": len(hits)}
