#!/usr/bin/env python3
"""
Tests for CSV export of listings
"""

from unittest.mock import Mock

import pandas as pd
import pytest

from archaea.curation.workflow import CurationWorkflow
from archaea.exceptions import InvalidArgumentError
from archaea.export import (
    EXPORT_PAGE_SIZE, TIER1_SUMMARY_COLUMNS, cluster_listing_frame, cluster_members_frame,
    queue_frame, write_frame
)
from archaea.models.curation import QueueItem, QueuePage
from archaea.models.novelty import ClusterDetail, ClusterPage, ClusterSummary
from archaea.novelty.service import NoveltyService
from archaea.novelty.summary import summarize_tier2_members


def make_summary(n):
    return ClusterSummary(cluster_id=f'T1_C{n}', tier=1, cluster_size=2, cross_phylum=False,
                          phylum_count=1, genome_count=1, phyla='Euryarchaeota')


class TestClusterListing:

    def test_walks_every_page(self):
        service = Mock(spec=NoveltyService)
        first = [make_summary(i) for i in range(EXPORT_PAGE_SIZE)]
        second = [make_summary(EXPORT_PAGE_SIZE)]
        service.list_clusters.side_effect = [
            ClusterPage(items=first, total=EXPORT_PAGE_SIZE + 1, limit=EXPORT_PAGE_SIZE, offset=0),
            ClusterPage(items=second, total=EXPORT_PAGE_SIZE + 1, limit=EXPORT_PAGE_SIZE,
                        offset=EXPORT_PAGE_SIZE),
        ]

        df = cluster_listing_frame(service, 1)

        assert len(df) == EXPORT_PAGE_SIZE + 1
        assert list(df.columns) == TIER1_SUMMARY_COLUMNS
        assert service.list_clusters.call_args_list[1][1]['offset'] == EXPORT_PAGE_SIZE

    def test_empty_listing_keeps_header(self):
        service = Mock(spec=NoveltyService)
        service.list_clusters.return_value = ClusterPage(items=[], total=0, limit=200, offset=0)

        df = cluster_listing_frame(service, 2)

        assert df.empty
        assert 'protein_count' in df.columns

    def test_invalid_tier(self):
        with pytest.raises(InvalidArgumentError):
            cluster_listing_frame(Mock(spec=NoveltyService), 'x')


class TestMembersAndQueue:

    def test_tier2_members(self, tier2_members):
        service = Mock(spec=NoveltyService)
        service.get_cluster_detail.return_value = ClusterDetail(
            tier=2, cluster=summarize_tier2_members('T2_C3', tier2_members), members=tier2_members
        )

        df = cluster_members_frame(service, 'T2_C3')

        assert list(df['domain_num']) == [1, 2, 1]
        assert 'dpam_prob' in df.columns

    def test_queue(self):
        workflow = Mock(spec=CurationWorkflow)
        workflow.list_queue.return_value = QueuePage(
            items=[QueueItem(protein_id='P1', curation_status='pending', priority_rank=1)],
            total=1, limit=200, offset=0
        )

        df = queue_frame(workflow)

        assert df.loc[0, 'protein_id'] == 'P1'
        assert workflow.list_queue.call_count == 1


class TestWriteFrame:

    def test_writes_file_and_creates_directory(self, tmp_path):
        output = tmp_path / 'nested' / 'clusters.csv'
        df = pd.DataFrame([{'cluster_id': 'T1_C1', 'cluster_size': 3}])

        assert write_frame(df, str(output)) == str(output)

        assert output.read_text().splitlines() == ['cluster_id,cluster_size', 'T1_C1,3']

    def test_stdout(self, capsys):
        write_frame(pd.DataFrame([{'a': 1}]), '-')
        assert capsys.readouterr().out.splitlines() == ['a', '1']
