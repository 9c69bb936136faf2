#!/usr/bin/env python3
"""
Tests for the FastAPI layer: routing, parameter parsing and error bodies
"""

from unittest.mock import Mock, patch

import pytest
from fastapi.testclient import TestClient

from archaea.api import create_app
from archaea.api.dependencies import (
    get_curation_workflow, get_landscape_service, get_novelty_service, get_organism_service,
    get_protein_service, get_stats_service
)
from archaea.core.context import ApplicationContext
from archaea.curation.workflow import CurationWorkflow
from archaea.exceptions import (
    ClusterNotFoundError, ConfigurationError, InvalidArgumentError, StoreUnavailableError
)
from archaea.landscape.service import LandscapeService
from archaea.models.landscape import ClusteringAnalysis, DomainLandscape
from archaea.models.organism import Organism, OrganismDetail, OrganismListing
from archaea.models.novelty import ClusterPage, ClusterSummary, NoveltyOverview
from archaea.models.stats import DashboardStats
from archaea.novelty.service import NoveltyService
from archaea.organisms.service import OrganismService
from archaea.proteins.service import ProteinService
from archaea.stats.service import DashboardStatsService


@pytest.fixture
def app(context):
    return create_app(context)


@pytest.fixture
def novelty_service():
    return Mock(spec=NoveltyService)


@pytest.fixture
def client(app, novelty_service):
    app.dependency_overrides[get_novelty_service] = lambda: novelty_service
    return TestClient(app, raise_server_exceptions=False)


class TestNovelFolds:

    def test_listing(self, client, novelty_service):
        summary = ClusterSummary(cluster_id='T1_C7', tier=1, cluster_size=3, cross_phylum=True,
                                 phylum_count=2, genome_count=2, phyla='Euryarchaeota, Thaumarchaeota',
                                 avg_plddt=87.5)
        novelty_service.list_clusters.return_value = ClusterPage(items=[summary], total=1,
                                                                 limit=50, offset=0)

        response = client.get('/api/novel-folds', params={'tier': 1, 'cross_phylum': 'true',
                                                          'phylum': 'eury', 'sort': 'avg_plddt'})

        assert response.status_code == 200
        body = response.json()
        assert body['tier'] == 1
        assert body['total'] == 1
        assert body['items'][0]['avg_plddt'] == 87.5
        assert 'protein_count' not in body['items'][0]
        args, kwargs = novelty_service.list_clusters.call_args
        assert args[1].cross_phylum is True
        assert args[1].phylum == 'eury'
        assert kwargs['sort'] == 'avg_plddt'

    def test_invalid_tier_from_service(self, client, novelty_service):
        novelty_service.list_clusters.side_effect = InvalidArgumentError("Invalid tier: 3. Expected 1 or 2.")

        response = client.get('/api/novel-folds', params={'tier': 3})

        assert response.status_code == 400
        assert response.json() == {'error': 'Invalid argument',
                                   'message': 'Invalid tier: 3. Expected 1 or 2.'}

    def test_unparseable_parameter(self, client):
        response = client.get('/api/novel-folds', params={'tier': 'dark'})
        assert response.status_code == 400
        assert response.json()['error'] == 'Invalid argument'

    def test_missing_cluster(self, client, novelty_service):
        novelty_service.get_cluster_detail.side_effect = ClusterNotFoundError("Cluster not found: T2_C9")

        response = client.get('/api/novel-folds/T2_C9')

        assert response.status_code == 404
        assert response.json()['message'] == 'Cluster not found: T2_C9'

    def test_overview(self, client, novelty_service):
        novelty_service.overview_stats.return_value = NoveltyOverview(tier1_clusters=4)
        response = client.get('/api/novel-folds/overview')
        assert response.status_code == 200
        assert response.json()['tier1_clusters'] == 4

    def test_cross_tier_tier2_side(self, client, novelty_service):
        novelty_service.cross_tier_hits_for_tier2_protein.return_value = []

        response = client.get('/api/cross-tier/proteins/B1', params={'side': 2})

        assert response.json() == {'protein_id': 'B1', 'hits': [], 'total': 0}
        novelty_service.cross_tier_hits_for_protein.assert_not_called()

    def test_cross_tier_bad_side(self, client, novelty_service):
        response = client.get('/api/cross-tier/proteins/B1', params={'side': 3})

        assert response.status_code == 400
        novelty_service.cross_tier_hits_for_protein.assert_not_called()
        novelty_service.cross_tier_hits_for_tier2_protein.assert_not_called()

    def test_store_unavailable(self, client, novelty_service):
        novelty_service.overview_stats.side_effect = StoreUnavailableError("pool exhausted")
        response = client.get('/api/novel-folds/overview')
        assert response.status_code == 503
        assert response.json()['error'] == 'Store unavailable'

    def test_unexpected_error(self, client, novelty_service):
        novelty_service.overview_stats.side_effect = RuntimeError("boom")
        response = client.get('/api/novel-folds/overview')
        assert response.status_code == 500
        assert response.json() == {'error': 'Internal error', 'message': 'boom'}


class TestCuration:

    @pytest.fixture
    def curation_client(self, app, curation_context, curation_repository):
        workflow = CurationWorkflow(curation_context, repository=curation_repository)
        app.dependency_overrides[get_curation_workflow] = lambda: workflow
        return TestClient(app, raise_server_exceptions=False)

    def test_decide(self, curation_client, curation_store):
        curation_store.add_candidate('P1', priority_rank=5)
        curation_store.add_candidate('P2', priority_rank=2)

        response = curation_client.post('/api/curation/decide', json={
            'protein_id': 'P1', 'curator': 'alice', 'decision_type': 'approve',
        })

        assert response.status_code == 200
        assert response.json() == {'success': True, 'protein_id': 'P1',
                                   'new_status': 'classified', 'next_protein': 'P2'}

    def test_decide_without_next_protein(self, curation_client, curation_store):
        curation_store.add_candidate('P1')
        response = curation_client.post('/api/curation/decide', json={
            'protein_id': 'P1', 'curator': 'alice', 'decision_type': 'skip',
        })
        assert response.json() == {'success': True, 'protein_id': 'P1', 'new_status': 'pending'}

    def test_null_and_absent_groups(self, curation_client, curation_store):
        curation_store.add_candidate('P1', ecod_x_group=1, ecod_h_group=2)

        curation_client.post('/api/curation/decide', json={
            'protein_id': 'P1', 'curator': 'alice', 'decision_type': 'classify',
            'ecod_x_group': None,
        })

        row = curation_store.candidates['P1']
        assert row['ecod_x_group'] is None
        assert row['ecod_h_group'] == 2

    @pytest.mark.parametrize('body', [
        {'curator': 'alice', 'decision_type': 'approve'},
        {'protein_id': 'P1', 'decision_type': 'approve'},
        {'protein_id': 'P1', 'curator': 'alice', 'decision_type': 'promote'},
        {'protein_id': 'P1', 'curator': 'alice', 'decision_type': 'approve',
         'confidence_level': 'very'},
    ])
    def test_invalid_bodies(self, curation_client, curation_store, body):
        curation_store.add_candidate('P1')
        response = curation_client.post('/api/curation/decide', json=body)
        assert response.status_code == 400
        assert curation_store.decisions == []

    def test_unknown_candidate(self, curation_client):
        response = curation_client.post('/api/curation/decide', json={
            'protein_id': 'NOPE', 'curator': 'alice', 'decision_type': 'approve',
        })
        assert response.status_code == 404
        assert response.json()['message'] == 'Protein not found in curation candidates'

    def test_history(self, curation_client, curation_store):
        curation_store.add_candidate('P1')
        curation_client.post('/api/curation/decide', json={
            'protein_id': 'P1', 'curator': 'alice', 'decision_type': 'defer',
        })

        body = curation_client.get('/api/curation/candidates/P1/history').json()

        assert body['total'] == 1
        assert body['decisions'][0]['new_status'] == 'deferred'

    def test_queue_bad_status(self, curation_client):
        response = curation_client.get('/api/curation/queue', params={'status': 'archived'})
        assert response.status_code == 400


class TestOtherRoutes:

    def test_stats(self, app):
        service = Mock(spec=DashboardStatsService)
        service.get_stats.return_value = DashboardStats(total_proteins=10)
        app.dependency_overrides[get_stats_service] = lambda: service

        body = TestClient(app).get('/api/stats').json()

        assert body['stats']['total_proteins'] == 10
        assert body['stats']['status_breakdown']['pending'] == 0

    def test_health(self, app, mock_db):
        mock_db.test_connection.return_value = False
        body = TestClient(app).get('/api/health').json()
        assert body == {'status': 'degraded', 'database': False}

    def test_structural_cluster_bad_id(self, app, context):
        app.dependency_overrides[get_protein_service] = lambda: ProteinService(context, repository=Mock())
        response = TestClient(app).get('/api/clusters/abc')
        assert response.status_code == 400

    def test_protein_listing(self, app):
        service = Mock(spec=ProteinService)
        page = Mock(limit=10, offset=20)
        service.list_proteins.return_value = ([], 0, page)
        app.dependency_overrides[get_protein_service] = lambda: service

        body = TestClient(app).get('/api/proteins', params={'limit': 10, 'offset': 20}).json()

        assert body == {'items': [], 'total': 0, 'limit': 10, 'offset': 20}


class TestOrganismsAndLandscape:

    @pytest.fixture
    def organism_service(self, app):
        service = Mock(spec=OrganismService)
        app.dependency_overrides[get_organism_service] = lambda: service
        return service

    def test_organism_listing(self, app, organism_service):
        organism_service.list_organisms.return_value = OrganismListing(organisms=[Organism(id=3)])

        response = TestClient(app).get('/api/organisms', params={'phylum': 'Euryarchaeota',
                                                                  'sort': 'domain_count'})

        assert response.status_code == 200
        body = response.json()
        assert body['total'] == 1
        assert body['filters'] == {'phyla': [], 'major_groups': []}
        args, kwargs = organism_service.list_organisms.call_args
        assert args[0].phylum == 'Euryarchaeota'
        assert args[0].major_group is None
        assert kwargs['sort'] == 'domain_count'

    def test_organism_detail(self, app, organism_service):
        organism_service.get_organism_detail.return_value = OrganismDetail(organism=Organism(id=3))
        body = TestClient(app).get('/api/organisms/3').json()
        organism_service.get_organism_detail.assert_called_once_with('3')
        assert body['organism']['id'] == 3
        assert body['top_proteins'] == []

    def test_organism_errors(self, app, context):
        app.dependency_overrides[get_organism_service] = lambda: OrganismService(
            context, repository=Mock(**{'get_organism.return_value': None}))
        client = TestClient(app)

        assert client.get('/api/organisms/abc').status_code == 400
        response = client.get('/api/organisms/99')
        assert response.status_code == 404
        assert response.json() == {'error': 'Not found', 'message': 'Organism not found'}

    def test_domain_landscape(self, app):
        service = Mock(spec=LandscapeService)
        service.get_domain_landscape.return_value = DomainLandscape(total_domains=5)
        app.dependency_overrides[get_landscape_service] = lambda: service

        body = TestClient(app).get('/api/domains').json()

        assert body['total_domains'] == 5
        assert body['pfam_coverage'] == {'ecod_pfam': 0, 'novel_pfam': 0, 'no_pfam': 0}

    def test_clustering_store_down(self, app):
        service = Mock(spec=LandscapeService)
        service.get_clustering_analysis.side_effect = StoreUnavailableError("Connection pool exhausted")
        app.dependency_overrides[get_landscape_service] = lambda: service

        response = TestClient(app, raise_server_exceptions=False).get('/api/clustering')

        assert response.status_code == 503

    def test_clustering(self, app):
        service = Mock(spec=LandscapeService)
        service.get_clustering_analysis.return_value = ClusteringAnalysis()
        app.dependency_overrides[get_landscape_service] = lambda: service

        body = TestClient(app).get('/api/clustering').json()

        assert body['cross_comparison']['total'] == 0
        assert body['summary'] == []


class TestStartup:

    def test_missing_password_fails_before_serving(self, config_manager):
        with pytest.raises(ConfigurationError):
            create_app(ApplicationContext(config_manager=config_manager))

    def test_unreachable_database_fails_before_serving(self, config_manager):
        context = ApplicationContext(config_manager=config_manager)
        with patch('archaea.core.context.DBManager',
                   side_effect=StoreUnavailableError("Failed to open database pool")):
            with pytest.raises(StoreUnavailableError):
                create_app(context)
