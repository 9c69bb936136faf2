"""
Database access layer for the archaea dashboard
"""
from .manager import DBManager, TransactionCursor
from .sql import Page, SortOptions, SortSpec, parse_pagination

__all__ = ['DBManager', 'TransactionCursor', 'Page', 'SortOptions', 'SortSpec', 'parse_pagination']
