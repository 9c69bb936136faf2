"""
Target organisms and their per-genome aggregates
"""
from .service import OrganismService

__all__ = ['OrganismService']
