#!/usr/bin/env python3
"""
Archaea novel fold dashboard

Two-tier novel fold clusters, cross-tier structural links and the curation
workflow for archaeal proteins, backed by PostgreSQL.
"""

__version__ = '0.1.0'
__author__ = 'ECOD Team'
__license__ = 'MIT'

# Import core modules for easier access
from .core.context import ApplicationContext
from .exceptions import ArchaeaError
from .error_handlers import handle_exceptions

# Make key classes available at package level
__all__ = ['ApplicationContext', 'ArchaeaError', 'handle_exceptions']
