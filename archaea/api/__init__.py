"""
HTTP surface of the archaea dashboard
"""
from .app import create_app

__all__ = ['create_app']
