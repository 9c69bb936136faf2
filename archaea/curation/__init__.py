"""
Curation workflow: decisions, audit trail and review queue
"""
from .workflow import CurationWorkflow, DECISION_TO_STATUS, resulting_status

__all__ = ['CurationWorkflow', 'DECISION_TO_STATUS', 'resulting_status']
