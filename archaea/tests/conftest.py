#!/usr/bin/env python3
"""
Shared fixtures for the archaea dashboard tests

Nothing here touches PostgreSQL: services get an ApplicationContext whose
database manager is either a MagicMock or the in-memory curation store
below, which keeps the transactional behaviour the workflow relies on.
"""

import copy
import os
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Dict, List, Optional
from unittest.mock import MagicMock

import pytest

from archaea.config import ConfigManager
from archaea.core.context import ApplicationContext
from archaea.models.curation import CurationCandidate, CurationDecision, CurationStatus
from archaea.models.novelty import Tier1Member, Tier2Member


class InMemoryCurationStore:
    """Candidate rows and audit rows kept in dictionaries

    transaction() snapshots both tables and restores them if the block
    raises, so partially applied decisions never survive a failure.
    """

    def __init__(self):
        self.candidates: Dict[str, Dict[str, Any]] = {}
        self.decisions: List[Dict[str, Any]] = []
        self.commits = 0
        self.rollbacks = 0
        self.timeouts: List[Optional[int]] = []
        self.closed = False

    def add_candidate(self, protein_id: str, status: str = 'pending', priority_rank: int = 1,
                      has_structure: bool = True, quality_score: float = 0.5, **fields) -> None:
        row = {
            'id': len(self.candidates) + 1,
            'protein_id': protein_id,
            'curation_status': status,
            'priority_rank': priority_rank,
            'priority_category': 'high',
            'novelty_category': 'dark',
            'has_structure': has_structure,
            'quality_score': quality_score,
            'ecod_x_group': None,
            'ecod_h_group': None,
            'ecod_t_group': None,
            'ecod_f_group': None,
            'is_novel_fold': False,
            'curator_notes': None,
            'reviewed_at': None,
            'classified_at': None,
        }
        row.update(fields)
        self.candidates[protein_id] = row

    def close(self) -> None:
        self.closed = True

    @contextmanager
    def transaction(self, timeout_ms: Optional[int] = None):
        self.timeouts.append(timeout_ms)
        snapshot = copy.deepcopy((self.candidates, self.decisions))
        try:
            yield self
        except BaseException:
            self.candidates, self.decisions = snapshot
            self.rollbacks += 1
            raise
        self.commits += 1


class InMemoryCurationRepository:
    """Same interface as CurationRepository, backed by InMemoryCurationStore"""

    def __init__(self, store: InMemoryCurationStore):
        self.store = store
        self.update_result: Optional[int] = None

    def get_candidate_for_update(self, cursor, protein_id, lock=True):
        row = self.store.candidates.get(protein_id)
        return CurationCandidate.from_db_row(row) if row else None

    def insert_decision(self, cursor, decision: CurationDecision):
        row = decision.to_dict()
        row['id'] = len(self.store.decisions) + 1
        row['created_at'] = datetime.now()
        self.store.decisions.append(row)
        return row['id']

    def update_candidate(self, cursor, protein_id, new_status, mark_novel_fold=False,
                         ecod_groups=None, notes=None):
        if self.update_result is not None:
            return self.update_result
        row = self.store.candidates.get(protein_id)
        if row is None:
            return 0
        now = datetime.now()
        row['curation_status'] = new_status
        row['reviewed_at'] = now
        if new_status == CurationStatus.CLASSIFIED.value:
            row['classified_at'] = now
        if mark_novel_fold:
            row['is_novel_fold'] = True
        for column, value in (ecod_groups or {}).items():
            row[column] = value
        if notes:
            row['curator_notes'] = notes
        return 1

    def next_pending_protein(self, cursor, exclude_protein_id):
        pending = [
            row for row in self.store.candidates.values()
            if row['curation_status'] == CurationStatus.PENDING.value
            and row['has_structure'] and row['protein_id'] != exclude_protein_id
        ]
        pending.sort(key=lambda r: (r['priority_rank'], -r['quality_score'], r['protein_id']))
        return pending[0]['protein_id'] if pending else None

    def get_candidate(self, protein_id):
        return self.get_candidate_for_update(None, protein_id, lock=False)

    def get_decisions(self, protein_id, limit=100):
        rows = [d for d in reversed(self.store.decisions) if d['protein_id'] == protein_id]
        return [CurationDecision.from_db_row(d) for d in rows[:limit]]


@pytest.fixture
def config_manager(monkeypatch):
    """Configuration from defaults only, isolated from the caller's environment"""
    for key in list(ConfigManager.LEGACY_DB_ENV):
        monkeypatch.delenv(key, raising=False)
    for key in list(os.environ):
        if key.startswith(ConfigManager.ENV_PREFIX):
            monkeypatch.delenv(key, raising=False)
    return ConfigManager()


@pytest.fixture
def mock_db():
    db = MagicMock()
    db.table.side_effect = lambda name, schema=None: f"{schema or 'archaea'}.{name}"
    return db


@pytest.fixture
def context(config_manager, mock_db):
    return ApplicationContext(config_manager=config_manager, db_manager=mock_db)


@pytest.fixture
def curation_store():
    return InMemoryCurationStore()


@pytest.fixture
def curation_context(config_manager, curation_store):
    return ApplicationContext(config_manager=config_manager, db_manager=curation_store)


@pytest.fixture
def curation_repository(curation_store):
    return InMemoryCurationRepository(curation_store)


@pytest.fixture
def tier1_members():
    """T1_C7: pLDDT {95, null, 80} over two phyla"""
    return [
        Tier1Member(cluster_id='T1_C7', protein_id='A1', mean_plddt=95.0, seq_length=120,
                    phylum='Euryarchaeota', genome_accession='GCA_1'),
        Tier1Member(cluster_id='T1_C7', protein_id='A2', mean_plddt=None, seq_length=140,
                    phylum='Euryarchaeota', genome_accession='GCA_1'),
        Tier1Member(cluster_id='T1_C7', protein_id='A3', mean_plddt=80.0, seq_length=None,
                    phylum='Thaumarchaeota', genome_accession='GCA_2'),
    ]


@pytest.fixture
def tier2_members():
    return [
        Tier2Member(cluster_id='T2_C3', protein_id='B1', domain_num=1, dpam_prob=0.4,
                    dali_zscore=3.0, mean_plddt=70.0, phylum='Asgardarchaeota',
                    genome_accession='GCA_9'),
        Tier2Member(cluster_id='T2_C3', protein_id='B1', domain_num=2, dpam_prob=0.6,
                    dali_zscore=None, mean_plddt=90.0, phylum='Asgardarchaeota',
                    genome_accession='GCA_9'),
        Tier2Member(cluster_id='T2_C3', protein_id='B|2', domain_num=1, dpam_prob=None,
                    dali_zscore=5.0, mean_plddt=None, phylum=None, genome_accession='GCA_10'),
    ]
