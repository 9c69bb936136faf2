#!/usr/bin/env python3
"""
Exception hierarchy for the archaea dashboard.
All custom exceptions should inherit from ArchaeaError.
"""
from typing import Dict, Any, Optional


class ArchaeaError(Exception):
    """Base exception for all archaea-related errors"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """Initialize with error message and optional details

        Args:
            message: Error message
            details: Optional details dictionary with context
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ConfigurationError(ArchaeaError):
    """Error related to configuration issues"""
    pass


class DatabaseError(ArchaeaError):
    """Base class for database-related errors"""
    pass


class StoreUnavailableError(DatabaseError):
    """Connection or transaction failure; the whole operation is safe to retry"""
    pass


class QueryError(DatabaseError):
    """Error executing a database query"""
    pass


class NotFoundError(ArchaeaError):
    """Referenced protein, cluster or domain does not exist"""
    pass


class ClusterNotFoundError(NotFoundError):
    """Cluster id has no members in its tier table"""
    pass


class ProteinNotFoundError(NotFoundError):
    """Protein id is not present in the protein table"""
    pass


class CandidateNotFoundError(NotFoundError):
    """Protein has no curation candidate row"""
    pass


class OrganismNotFoundError(NotFoundError):
    """Target organism id is not present in target_classes"""
    pass


class InvalidArgumentError(ArchaeaError):
    """Malformed id, unknown decision type or missing required field"""
    pass


class ConflictError(ArchaeaError):
    """Concurrent modification of the same curation candidate"""
    pass
