#!/usr/bin/env python3
"""
Tests for the curation workflow: transitions, audit rows and atomicity

Runs against the in-memory store from conftest, whose transaction() restores
both tables when the block raises.
"""

from unittest.mock import Mock

import pytest

from archaea.curation.workflow import (
    CurationWorkflow, DECISION_TO_STATUS, resulting_status, parse_decision_type
)
from archaea.exceptions import (
    CandidateNotFoundError, ConflictError, InvalidArgumentError, QueryError
)
from archaea.models.curation import (
    CurationStatus, DecisionRequest, DecisionType, QueueFilters, UNSET
)


@pytest.fixture
def workflow(curation_context, curation_repository):
    return CurationWorkflow(curation_context, repository=curation_repository)


def decide(workflow, protein_id, decision_type, curator='alice', **kwargs):
    return workflow.submit_decision(
        DecisionRequest(protein_id=protein_id, curator=curator, decision_type=decision_type, **kwargs)
    )


class TestTransitionTable:

    def test_every_decision_has_a_status(self):
        assert set(DECISION_TO_STATUS) == set(DecisionType)

    @pytest.mark.parametrize('decision, status', [
        ('approve', 'classified'),
        ('classify', 'classified'),
        ('flag_novel', 'classified'),
        ('defer', 'deferred'),
        ('reject', 'rejected'),
        ('skip', 'pending'),
    ])
    def test_resulting_status(self, decision, status):
        assert resulting_status(parse_decision_type(decision)).value == status

    def test_unknown_decision(self):
        with pytest.raises(InvalidArgumentError):
            parse_decision_type('promote')

    @pytest.mark.parametrize('start', [s.value for s in CurationStatus])
    def test_transition_ignores_current_status(self, workflow, curation_store, start):
        """Decisions apply from any state, including terminal ones"""
        curation_store.add_candidate('P1', status=start)
        result = decide(workflow, 'P1', 'defer')
        assert result.previous_status == start
        assert curation_store.candidates['P1']['curation_status'] == 'deferred'


class TestSubmitDecision:

    def test_approve_advances_to_next_best_pending(self, workflow, curation_store):
        curation_store.add_candidate('P1', priority_rank=5)
        curation_store.add_candidate('P2', priority_rank=2)

        result = decide(workflow, 'P1', 'approve')

        assert result.new_status == 'classified'
        assert result.next_protein == 'P2'
        assert curation_store.candidates['P1']['curation_status'] == 'classified'
        assert curation_store.candidates['P1']['classified_at'] is not None
        assert len(curation_store.decisions) == 1
        audit = curation_store.decisions[0]
        assert audit['previous_status'] == 'pending'
        assert audit['new_status'] == 'classified'
        assert audit['curator_name'] == 'alice'
        assert curation_store.commits == 1

    def test_skip_leaves_candidate_untouched(self, workflow, curation_store):
        curation_store.add_candidate('P1')
        before = dict(curation_store.candidates['P1'])

        result = decide(workflow, 'P1', 'skip')

        assert result.new_status == 'pending'
        assert curation_store.candidates['P1'] == before
        assert curation_store.candidates['P1']['classified_at'] is None
        # Still audited
        assert [d['decision_type'] for d in curation_store.decisions] == ['skip']

    def test_skip_on_non_pending_records_pending(self, workflow, curation_store):
        curation_store.add_candidate('P1', status='deferred')

        result = decide(workflow, 'P1', 'skip')

        assert result.previous_status == 'deferred'
        assert result.new_status == 'pending'
        assert curation_store.candidates['P1']['curation_status'] == 'deferred'

    def test_flag_novel_marks_fold(self, workflow, curation_store):
        curation_store.add_candidate('P1')

        decide(workflow, 'P1', 'flag_novel', notes='no hit anywhere')

        row = curation_store.candidates['P1']
        assert row['is_novel_fold'] is True
        assert row['curation_status'] == 'classified'
        assert row['curator_notes'] == 'no hit anywhere'
        assert curation_store.decisions[0]['is_novel_fold'] is True

    def test_defer_does_not_set_classified_at(self, workflow, curation_store):
        curation_store.add_candidate('P1')
        decide(workflow, 'P1', 'defer')
        assert curation_store.candidates['P1']['classified_at'] is None
        assert curation_store.candidates['P1']['reviewed_at'] is not None

    def test_next_protein_excludes_current_and_requires_structure(self, workflow, curation_store):
        curation_store.add_candidate('P1', priority_rank=1)
        curation_store.add_candidate('P2', priority_rank=1, has_structure=False)
        curation_store.add_candidate('P3', priority_rank=9)

        # P1 stays pending after a skip but is still not offered again
        result = decide(workflow, 'P1', 'skip')

        assert result.next_protein == 'P3'

    def test_no_next_protein(self, workflow, curation_store):
        curation_store.add_candidate('P1')
        result = decide(workflow, 'P1', 'reject')
        assert result.next_protein is None
        assert 'next_protein' not in result.to_response()

    def test_transaction_timeout_from_config(self, workflow, curation_store):
        curation_store.add_candidate('P1')
        decide(workflow, 'P1', 'approve')
        assert curation_store.timeouts == [5000]


class TestEcodGroups:

    def test_absent_fields_keep_stored_values(self, workflow, curation_store):
        curation_store.add_candidate('P1', ecod_x_group=101, ecod_h_group=101)

        decide(workflow, 'P1', 'classify', ecod_h_group=202)

        row = curation_store.candidates['P1']
        assert row['ecod_x_group'] == 101
        assert row['ecod_h_group'] == 202

    def test_explicit_null_clears_value(self, workflow, curation_store):
        curation_store.add_candidate('P1', ecod_x_group=101)

        decide(workflow, 'P1', 'classify', ecod_x_group=None)

        assert curation_store.candidates['P1']['ecod_x_group'] is None

    def test_audit_records_unsent_groups_as_null(self, workflow, curation_store):
        curation_store.add_candidate('P1')

        decide(workflow, 'P1', 'classify', ecod_t_group=7, confidence_level=4)

        audit = curation_store.decisions[0]
        assert audit['ecod_t_group'] == 7
        assert audit['ecod_x_group'] is None
        assert audit['confidence_level'] == 4

    def test_supplied_groups_keep_absent_and_null_apart(self):
        request = DecisionRequest(protein_id='P1', curator='bob', decision_type='classify',
                                  ecod_x_group=None, ecod_h_group=12)
        assert request.supplied_ecod_groups() == {'ecod_x_group': None, 'ecod_h_group': 12}
        assert request.ecod_t_group is UNSET

class TestValidationAndFailures:

    @pytest.mark.parametrize('kwargs', [
        {'protein_id': '', 'curator': 'alice', 'decision_type': 'approve'},
        {'protein_id': 'P1', 'curator': '', 'decision_type': 'approve'},
        {'protein_id': 'P1', 'curator': 'alice', 'decision_type': 'promote'},
    ])
    def test_invalid_request_never_opens_transaction(self, workflow, curation_store, kwargs):
        curation_store.add_candidate('P1')
        with pytest.raises(InvalidArgumentError):
            workflow.submit_decision(DecisionRequest(**kwargs))
        assert curation_store.timeouts == []
        assert curation_store.decisions == []

    def test_unknown_candidate(self, workflow, curation_store):
        with pytest.raises(CandidateNotFoundError):
            decide(workflow, 'NOPE', 'approve')
        assert curation_store.decisions == []

    def test_failed_update_rolls_back_audit_row(self, workflow, curation_store, curation_repository):
        curation_store.add_candidate('P1')
        curation_repository.update_candidate = Mock(side_effect=QueryError("update failed"))

        with pytest.raises(QueryError):
            decide(workflow, 'P1', 'approve')

        assert curation_store.decisions == []
        assert curation_store.candidates['P1']['curation_status'] == 'pending'
        assert curation_store.rollbacks == 1
        assert curation_store.commits == 0

    def test_vanished_row_is_a_conflict(self, workflow, curation_store, curation_repository):
        curation_store.add_candidate('P1')
        curation_repository.update_result = 0

        with pytest.raises(ConflictError):
            decide(workflow, 'P1', 'approve')

        assert curation_store.decisions == []

    def test_failed_next_lookup_rolls_back_everything(self, workflow, curation_store,
                                                      curation_repository):
        curation_store.add_candidate('P1')
        curation_repository.next_pending_protein = Mock(side_effect=QueryError("timeout"))

        with pytest.raises(QueryError):
            decide(workflow, 'P1', 'defer')

        assert curation_store.candidates['P1']['curation_status'] == 'pending'
        assert curation_store.decisions == []


class TestReads:

    def test_history_newest_first(self, workflow, curation_store):
        curation_store.add_candidate('P1')
        decide(workflow, 'P1', 'defer')
        decide(workflow, 'P1', 'approve', curator='bob')

        history = workflow.get_decision_history('P1')

        assert [d.decision_type for d in history] == ['approve', 'defer']
        assert history[0].previous_status == 'deferred'

    def test_get_candidate_missing(self, workflow):
        with pytest.raises(CandidateNotFoundError):
            workflow.get_candidate('NOPE')

    def test_queue_rejects_unknown_status(self, curation_context):
        repository = Mock()
        workflow = CurationWorkflow(curation_context, repository=repository)
        with pytest.raises(InvalidArgumentError):
            workflow.list_queue(QueueFilters(status='archived'))
        repository.list_queue.assert_not_called()

    def test_queue_default_order_and_echoed_filters(self, curation_context):
        repository = Mock()
        repository.list_queue.return_value = ([], 0)
        workflow = CurationWorkflow(curation_context, repository=repository)

        page = workflow.list_queue(QueueFilters(status='all', novelty='dark'), limit='abc')

        filters, sort_spec, pg = repository.list_queue.call_args[0]
        assert sort_spec.key == 'priority_rank'
        assert sort_spec.clause.startswith('priority_category ASC NULLS LAST')
        assert pg.limit == 50
        assert page.filters == {'novelty': 'dark'}


class TestDecisionSequences:
    """Audit and queue guarantees over mixed runs of decisions"""

    SEQUENCES = [
        [('P1', 'approve'), ('P2', 'defer'), ('P3', 'reject')],
        [('P1', 'skip'), ('P1', 'skip'), ('P1', 'skip')],
        [('P1', 'skip'), ('P2', 'classify'), ('P1', 'skip'), ('P3', 'flag_novel')],
        [('P2', 'defer'), ('P2', 'skip'), ('P2', 'skip'), ('P2', 'approve'), ('P2', 'skip')],
        [('P3', 'reject'), ('P1', 'defer'), ('P3', 'approve'), ('P1', 'skip'), ('P2', 'skip')],
    ]

    @pytest.fixture
    def counted_workflow(self, workflow, curation_repository, curation_store, monkeypatch):
        for rank, protein_id in enumerate(['P1', 'P2', 'P3'], start=1):
            curation_store.add_candidate(protein_id, priority_rank=rank)
        monkeypatch.setattr(curation_repository, 'update_candidate',
                            Mock(wraps=curation_repository.update_candidate))
        return workflow

    @pytest.mark.parametrize('sequence', SEQUENCES)
    def test_audit_rows_cover_every_transition(self, counted_workflow, curation_repository,
                                               curation_store, sequence):
        for protein_id, decision_type in sequence:
            decide(counted_workflow, protein_id, decision_type)

        transitions = curation_repository.update_candidate.call_count
        skips = sum(1 for _, decision_type in sequence if decision_type == 'skip')
        assert len(curation_store.decisions) == len(sequence)
        assert len(curation_store.decisions) >= transitions
        assert len(curation_store.decisions) - transitions == skips
        assert (len(curation_store.decisions) == transitions) == (skips == 0)

    @pytest.mark.parametrize('sequence', SEQUENCES)
    def test_skip_never_changes_status(self, counted_workflow, curation_store, sequence):
        for protein_id, decision_type in sequence:
            before = dict(curation_store.candidates[protein_id])
            decide(counted_workflow, protein_id, decision_type)
            if decision_type == 'skip':
                assert curation_store.candidates[protein_id] == before

    @pytest.mark.parametrize('sequence', SEQUENCES)
    def test_next_protein_is_never_the_decided_one(self, counted_workflow, curation_store, sequence):
        for protein_id, decision_type in sequence:
            result = decide(counted_workflow, protein_id, decision_type)
            assert result.next_protein != protein_id
            if result.next_protein is not None:
                assert curation_store.candidates[result.next_protein]['curation_status'] == 'pending'
