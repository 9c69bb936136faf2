#!/usr/bin/env python3
"""
Tests for pagination parsing and the sort allow-lists
"""

import pytest

from archaea.db.repositories.curation_repository import QUEUE_SORT
from archaea.db.repositories.novelty_repository import TIER1_SORT, TIER2_SORT
from archaea.db.repositories.protein_repository import PROTEIN_SORT, STRUCTURAL_CLUSTER_SORT
from archaea.db.sql import SortOptions, parse_pagination, like_pattern


class TestPagination:

    def test_defaults(self):
        page = parse_pagination()
        assert (page.limit, page.offset) == (50, 0)

    @pytest.mark.parametrize('limit, offset, expected', [
        ('25', '10', (25, 10)),
        (0, 0, (1, 0)),
        (-5, -5, (1, 0)),
        (10_000, 3, (200, 3)),
        ('ten', 'x', (50, 0)),
        ('', None, (50, 0)),
    ])
    def test_clamping(self, limit, offset, expected):
        page = parse_pagination(limit, offset)
        assert (page.limit, page.offset) == expected

    def test_custom_bounds(self):
        page = parse_pagination(None, None, default_limit=20, max_limit=30)
        assert page.limit == 20
        assert parse_pagination(100, 0, default_limit=20, max_limit=30).limit == 30


class TestSortOptions:

    @pytest.fixture
    def options(self):
        return SortOptions(columns={'size': 'cluster_size', 'name': 'cluster_name'},
                           default_key='size', default_descending=True, tiebreak='id ASC')

    def test_default(self, options):
        spec = options.resolve()
        assert spec.key == 'size'
        assert spec.clause == 'cluster_size DESC NULLS LAST, id ASC'

    def test_explicit_key_and_order(self, options):
        spec = options.resolve('name', 'asc')
        assert spec.clause == 'cluster_name ASC NULLS LAST, id ASC'
        assert spec.descending is False

    def test_known_key_without_order_uses_default_direction(self, options):
        assert options.resolve('name').descending is True

    @pytest.mark.parametrize('key', ['id; DROP TABLE x', 'cluster_size', 'SIZE', ''])
    def test_unknown_key_falls_back_silently(self, options, key):
        spec = options.resolve(key, 'asc')
        assert spec.key == 'size'
        assert spec.descending is True
        assert 'DROP' not in spec.clause

    def test_default_must_be_allowed(self):
        with pytest.raises(ValueError):
            SortOptions(columns={'a': 'a'}, default_key='b')

    def test_cluster_id_sorts_numerically(self):
        for options in (TIER1_SORT, TIER2_SORT):
            assert 'CAST' in options.resolve('cluster_id', 'asc').clause

    def test_tier2_only_keys(self):
        assert TIER2_SORT.resolve('avg_dpam_prob').key == 'avg_dpam_prob'
        assert TIER1_SORT.resolve('avg_dpam_prob').key == 'cluster_size'

    def test_queue_priority_override(self):
        spec = QUEUE_SORT.resolve('priority_rank', 'desc')
        assert spec.clause == ('priority_category DESC NULLS LAST, '
                               'priority_rank DESC NULLS LAST, protein_id ASC')

    def test_every_listing_has_a_valid_default(self):
        for options in (TIER1_SORT, TIER2_SORT, QUEUE_SORT, PROTEIN_SORT, STRUCTURAL_CLUSTER_SORT):
            assert options.resolve().key == options.default_key


class TestLikePattern:

    def test_wildcards_escaped(self):
        assert like_pattern('Eury') == '%Eury%'
        assert like_pattern('50%_a') == '%50\\%\\_a%'
