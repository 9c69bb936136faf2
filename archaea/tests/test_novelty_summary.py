#!/usr/bin/env python3
"""
Tests for archaea.novelty.summary cluster aggregation
"""

import pytest

from archaea.exceptions import ClusterNotFoundError, NotFoundError
from archaea.models.novelty import Tier1Member
from archaea.novelty.summary import (
    mean_or_none, min_or_none, max_or_none, distinct,
    summarize_tier1_members, summarize_tier2_members
)


class TestAggregateHelpers:
    """Missing values are skipped, never counted as zero"""

    def test_mean_skips_missing(self):
        assert mean_or_none([95.0, None, 80.0]) == pytest.approx(87.5)

    def test_all_missing_is_none(self):
        assert mean_or_none([None, None]) is None
        assert min_or_none([None]) is None
        assert max_or_none([]) is None

    def test_min_max(self):
        assert min_or_none([3.0, None, 1.5]) == 1.5
        assert max_or_none([3.0, None, 1.5]) == 3.0

    def test_distinct_drops_empty_values(self):
        assert distinct(['b', None, 'a', '', 'b']) == ['a', 'b']


class TestTier1Summary:

    def test_mixed_quality_cluster(self, tier1_members):
        """pLDDT {95, null, 80} over Euryarchaeota and Thaumarchaeota"""
        summary = summarize_tier1_members('T1_C7', tier1_members)

        assert summary.cluster_id == 'T1_C7'
        assert summary.tier == 1
        assert summary.cluster_size == 3
        assert summary.avg_plddt == pytest.approx(87.5)
        assert summary.min_plddt == 80.0
        assert summary.max_plddt == 95.0
        assert summary.cross_phylum is True
        assert summary.phylum_count == 2
        assert summary.genome_count == 2
        assert summary.phyla == 'Euryarchaeota, Thaumarchaeota'
        assert summary.avg_length == pytest.approx(130.0)

    def test_all_quality_missing(self):
        members = [
            Tier1Member(cluster_id='T1_C1', protein_id='X1', phylum='Crenarchaeota'),
            Tier1Member(cluster_id='T1_C1', protein_id='X2', phylum='Crenarchaeota'),
        ]
        summary = summarize_tier1_members('T1_C1', members)

        assert summary.avg_plddt is None
        assert summary.min_plddt is None
        assert summary.max_plddt is None
        assert summary.cross_phylum is False
        assert summary.phylum_count == 1

    def test_singleton(self):
        members = [Tier1Member(cluster_id='T1_C2', protein_id='S1', mean_plddt=72.0)]
        summary = summarize_tier1_members('T1_C2', members)

        assert summary.cluster_size == 1
        assert summary.avg_plddt == summary.min_plddt == summary.max_plddt == 72.0
        assert summary.phylum_count == 0
        assert summary.cross_phylum is False
        assert summary.phyla == ''

    def test_tier1_dict_has_no_tier2_fields(self, tier1_members):
        data = summarize_tier1_members('T1_C7', tier1_members).to_dict()
        assert 'protein_count' not in data
        assert 'avg_dpam_prob' not in data
        assert data['avg_plddt'] == pytest.approx(87.5)

    def test_empty_cluster_is_not_found(self):
        with pytest.raises(ClusterNotFoundError) as excinfo:
            summarize_tier1_members('T1_C404', [])
        assert excinfo.value.details['cluster_id'] == 'T1_C404'


class TestTier2Summary:

    def test_domain_granularity(self, tier2_members):
        summary = summarize_tier2_members('T2_C3', tier2_members)

        assert summary.tier == 2
        assert summary.cluster_size == 3
        assert summary.domain_count == 3
        # Two domains come from B1
        assert summary.protein_count == 2
        assert summary.avg_plddt == pytest.approx(80.0)
        assert summary.avg_dpam_prob == pytest.approx(0.5)
        assert summary.avg_dali_zscore == pytest.approx(4.0)
        assert summary.phylum_count == 1
        assert summary.cross_phylum is False
        assert summary.genome_count == 2
        assert summary.avg_length is None

    def test_empty_cluster_is_not_found(self):
        """A stale cluster id yields NotFound, not an empty summary"""
        with pytest.raises(NotFoundError):
            summarize_tier2_members('T2_C999', [])
