"""
Domain landscape and clustering analysis
"""
from .service import LandscapeService

__all__ = ['LandscapeService']
