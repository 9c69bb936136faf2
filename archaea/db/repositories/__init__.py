"""
Repositories: all SQL for the archaea dashboard lives here
"""
from .novelty_repository import NoveltyRepository
from .curation_repository import CurationRepository
from .protein_repository import ProteinRepository
from .stats_repository import StatsRepository
from .organism_repository import OrganismRepository
from .landscape_repository import LandscapeRepository

__all__ = ['NoveltyRepository', 'CurationRepository', 'ProteinRepository', 'StatsRepository',
           'OrganismRepository', 'LandscapeRepository']
