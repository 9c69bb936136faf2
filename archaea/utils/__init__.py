#!/usr/bin/env python3
"""
Archaea Dashboard Utilities Module
"""
from .provenance import provenance_label, PATH_LABELS

__all__ = ['provenance_label', 'PATH_LABELS']
