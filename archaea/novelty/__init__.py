"""
Two-tier novel fold model
"""
from .summary import summarize_tier1_members, summarize_tier2_members
from .service import NoveltyService

__all__ = ['NoveltyService', 'summarize_tier1_members', 'summarize_tier2_members']
