#!/usr/bin/env python3
"""
Tests for the organism, domain landscape and clustering services
"""

from unittest.mock import Mock

import pytest

from archaea.db.repositories.landscape_repository import LandscapeRepository
from archaea.db.repositories.organism_repository import OrganismRepository, ORGANISM_SORT
from archaea.exceptions import InvalidArgumentError, OrganismNotFoundError
from archaea.landscape.service import LandscapeService
from archaea.models.landscape import (
    ClusterSetSummary, CountEntry, CrossComparison, EcodNovelty, PfamCoverage, SizeBin,
    TopStructuralCluster
)
from archaea.models.organism import Organism, OrganismFilters
from archaea.organisms.service import OrganismService, parse_organism_id


class TestOrganismService:

    @pytest.fixture
    def repository(self):
        repo = Mock(spec=OrganismRepository)
        repo.get_organism.return_value = Organism(id=7, organism_name='Haloferax volcanii')
        for name in ('get_novelty_breakdown', 'get_source_breakdown', 'get_judge_breakdown',
                     'get_curation_breakdown', 'get_top_proteins', 'get_novel_fold_proteins'):
            getattr(repo, name).return_value = []
        repo.get_quality_distribution.return_value = [CountEntry('confident', 12),
                                                      CountEntry('very_high', 30)]
        repo.get_filter_options.side_effect = lambda column: {
            'phylum': [CountEntry('Euryarchaeota', 30), CountEntry('Thermoproteota', 20)],
            'major_group': [CountEntry('DPANN', 8)],
        }[column]
        return repo

    @pytest.fixture
    def service(self, context, repository):
        return OrganismService(context, repository=repository)

    def test_listing_with_filter_options(self, service, repository):
        repository.list_organisms.return_value = [Organism(id=7), Organism(id=3)]

        listing = service.list_organisms(OrganismFilters(phylum='Euryarchaeota'),
                                         sort='avg_plddt', order='asc').to_dict()

        filters, sort_spec = repository.list_organisms.call_args[0]
        assert filters.phylum == 'Euryarchaeota'
        assert sort_spec.clause.startswith('qs.avg_plddt ASC')
        assert listing['total'] == 2
        assert listing['filters']['phyla'][0] == {'value': 'Euryarchaeota', 'count': 30}
        assert listing['filters']['major_groups'] == [{'value': 'DPANN', 'count': 8}]

    def test_unknown_sort_uses_protein_count(self, service, repository):
        repository.list_organisms.return_value = []
        service.list_organisms(sort='tax_id; DROP')
        sort_spec = repository.list_organisms.call_args[0][1]
        assert sort_spec.key == ORGANISM_SORT.default_key
        assert sort_spec.descending is True

    def test_detail_fills_every_quality_bucket(self, service, repository):
        detail = service.get_organism_detail('7').to_dict()

        repository.get_organism.assert_called_once_with(7)
        assert detail['organism']['organism_name'] == 'Haloferax volcanii'
        assert detail['quality_distribution'] == [
            {'bucket': 'very_high', 'count': 30},
            {'bucket': 'confident', 'count': 12},
            {'bucket': 'low', 'count': 0},
            {'bucket': 'very_low', 'count': 0},
        ]

    def test_missing_organism(self, service, repository):
        repository.get_organism.return_value = None
        with pytest.raises(OrganismNotFoundError):
            service.get_organism_detail(404)
        repository.get_top_proteins.assert_not_called()

    @pytest.mark.parametrize("raw", ['abc', '', None, '7.5', True])
    def test_bad_organism_id(self, raw):
        with pytest.raises(InvalidArgumentError):
            parse_organism_id(raw)

    def test_organism_id_with_whitespace(self):
        assert parse_organism_id(' 12 ') == 12


class TestLandscapeService:

    @pytest.fixture
    def repository(self):
        repo = Mock(spec=LandscapeRepository)
        repo.get_domain_counts.return_value = {'total_domains': '2000', 'proteins_with_domains': 700,
                                               'unique_tgroups': 150, 'multi_domain_proteins': None}
        repo.get_novel_pfam_family_count.return_value = 17
        repo.get_tgroup_distribution.return_value = []
        repo.get_judge_breakdown.return_value = [CountEntry('good_domain', 1500), CountEntry(None, 500)]
        repo.get_pfam_coverage.return_value = PfamCoverage(ecod_pfam=900, novel_pfam=100, no_pfam=1000)

        repo.get_cluster_set_summary.side_effect = lambda cluster_set: ClusterSetSummary(
            cluster_set=cluster_set, clusters=10, members=40, singletons=4, largest=12)
        repo.get_size_distribution.return_value = [SizeBin('6-20', 1, 12), SizeBin('1', 4, 4)]
        repo.get_cross_comparison.return_value = CrossComparison(both_clustered=30, rescued_by_structure=4,
                                                                 both_singleton=5, seq_only=1)
        repo.get_ecod_novelty.return_value = EcodNovelty(has_ecod=25, novel=15)
        repo.get_top_structural_clusters.return_value = [
            TopStructuralCluster(cluster_id='S1', cluster_size=12, n_classes=3, classes='a, b, c')
        ]
        return repo

    @pytest.fixture
    def service(self, context, repository):
        return LandscapeService(context, repository=repository)

    def test_reference_schema_from_config(self, context):
        assert LandscapeService(context).repository.reference_schema == 'ecod_rep'

    def test_domain_landscape(self, service):
        landscape = service.get_domain_landscape().to_dict()

        assert landscape['total_domains'] == 2000
        assert landscape['multi_domain_proteins'] == 0
        assert landscape['novel_pfam_families'] == 17
        assert landscape['judge_breakdown'][1] == {'judge': None, 'count': 500}
        assert landscape['pfam_coverage'] == {'ecod_pfam': 900, 'novel_pfam': 100, 'no_pfam': 1000}

    def test_pending_run_is_summarized_but_not_queried(self, service, repository):
        analysis = service.get_clustering_analysis().to_dict()

        assert [s['type'] for s in analysis['summary']] == [
            'protein_seq', 'protein_struct', 'domain_seq', 'domain_struct']
        pending = analysis['summary'][3]
        assert pending['pending'] is True
        assert pending['clusters'] == 0
        assert repository.get_cluster_set_summary.call_count == 3
        assert set(analysis['size_distributions']) == {'protein_seq', 'protein_struct', 'domain_seq'}

    def test_size_bins_are_ordered_and_zero_filled(self, service):
        bins = service.get_clustering_analysis().to_dict()['size_distributions']['protein_seq']
        assert bins == [
            {'bin': '1', 'clusters': 4, 'members': 4},
            {'bin': '2-5', 'clusters': 0, 'members': 0},
            {'bin': '6-20', 'clusters': 1, 'members': 12},
            {'bin': '21-100', 'clusters': 0, 'members': 0},
            {'bin': '100+', 'clusters': 0, 'members': 0},
        ]

    def test_cross_comparison_and_novelty(self, service):
        analysis = service.get_clustering_analysis().to_dict()
        assert analysis['cross_comparison']['total'] == 40
        assert analysis['ecod_novelty'] == {'has_ecod': 25, 'novel': 15}
        assert analysis['top_structural_clusters'][0]['n_classes'] == 3
