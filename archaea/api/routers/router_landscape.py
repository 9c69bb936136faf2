from fastapi import APIRouter, Depends

from archaea.api.dependencies import get_landscape_service
from archaea.landscape.service import LandscapeService

router_landscape = APIRouter()


@router_landscape.get("/domains")
def domain_landscape(service: LandscapeService = Depends(get_landscape_service)):
    return service.get_domain_landscape().to_dict()


@router_landscape.get("/clustering")
def clustering_analysis(service: LandscapeService = Depends(get_landscape_service)):
    return service.get_clustering_analysis().to_dict()
