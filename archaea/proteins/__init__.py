"""
Proteins, domains and legacy structural clusters
"""
from .service import ProteinService

__all__ = ['ProteinService']
