# archaea/api/dependencies.py
"""
Request-scoped service construction; the context itself lives on app.state
"""
from fastapi import Depends, Request

from archaea.core.context import ApplicationContext
from archaea.curation.workflow import CurationWorkflow
from archaea.landscape.service import LandscapeService
from archaea.novelty.service import NoveltyService
from archaea.organisms.service import OrganismService
from archaea.proteins.service import ProteinService
from archaea.stats.service import DashboardStatsService


def get_context(request: Request) -> ApplicationContext:
    return request.app.state.context


def get_novelty_service(context: ApplicationContext = Depends(get_context)) -> NoveltyService:
    return NoveltyService(context)


def get_curation_workflow(context: ApplicationContext = Depends(get_context)) -> CurationWorkflow:
    return CurationWorkflow(context)


def get_protein_service(context: ApplicationContext = Depends(get_context)) -> ProteinService:
    return ProteinService(context)


def get_stats_service(context: ApplicationContext = Depends(get_context)) -> DashboardStatsService:
    return DashboardStatsService(context)


def get_organism_service(context: ApplicationContext = Depends(get_context)) -> OrganismService:
    return OrganismService(context)


def get_landscape_service(context: ApplicationContext = Depends(get_context)) -> LandscapeService:
    return LandscapeService(context)
