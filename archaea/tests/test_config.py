#!/usr/bin/env python3
"""
Tests for ConfigManager loading, overrides and validation
"""

import json

import pytest
import yaml

from archaea.config import ConfigManager
from archaea.config.schema import ConfigSchema
from archaea.exceptions import ConfigurationError


class TestDefaults:

    def test_defaults_loaded(self, config_manager):
        assert config_manager.get('pagination.default_limit') == 50
        assert config_manager.get('pagination.max_limit') == 200
        assert config_manager.get('novelty.pan_phylum_min_phyla') == 5
        assert config_manager.get('curation.transaction_timeout_ms') == 5000
        assert config_manager.errors == []

    def test_missing_key_default(self, config_manager):
        assert config_manager.get('no.such.key', 'fallback') == 'fallback'
        assert config_manager.get('pagination.default_limit.deeper') is None

    def test_sections_are_copies(self, config_manager):
        section = config_manager.get_db_config()
        section['host'] = 'elsewhere'
        assert config_manager.get('database.host') != 'elsewhere'


class TestFileLoading:

    def test_yaml_file_and_local_override(self, tmp_path, config_manager):
        path = tmp_path / 'archaea.yml'
        path.write_text(yaml.safe_dump({'database': {'host': 'db1', 'password': 'pw'},
                                        'pagination': {'default_limit': 25}}))
        (tmp_path / 'archaea.local.yml').write_text(yaml.safe_dump({'database': {'host': 'db2'}}))

        manager = ConfigManager(str(path))

        assert manager.get('database.host') == 'db2'
        assert manager.get('database.password') == 'pw'
        # Untouched defaults survive the merge
        assert manager.get('database.schema') == 'archaea'
        assert manager.get('pagination.default_limit') == 25

    def test_json_file(self, tmp_path, config_manager):
        path = tmp_path / 'archaea.json'
        path.write_text(json.dumps({'api': {'port': 9000}}))
        assert ConfigManager(str(path)).get('api.port') == 9000

    def test_missing_file(self, tmp_path, config_manager):
        with pytest.raises(ConfigurationError):
            ConfigManager(str(tmp_path / 'nope.yml'))

    def test_unparseable_file(self, tmp_path, config_manager):
        path = tmp_path / 'broken.yml'
        path.write_text("database: [unclosed")
        with pytest.raises(ConfigurationError):
            ConfigManager(str(path))

    def test_non_mapping_file(self, tmp_path, config_manager):
        path = tmp_path / 'list.yml'
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigurationError):
            ConfigManager(str(path))


class TestEnvironment:

    def test_prefixed_override(self, monkeypatch, config_manager):
        monkeypatch.setenv('ARCHAEA_DATABASE__PORT', '6543')
        monkeypatch.setenv('ARCHAEA_CURATION__LOCK_CANDIDATE_ROW', 'false')
        manager = ConfigManager()
        assert manager.get('database.port') == 6543
        assert manager.get('curation.lock_candidate_row') is False

    def test_password_stays_string(self, monkeypatch, config_manager):
        monkeypatch.setenv('ARCHAEA_DATABASE__PASSWORD', '12345')
        assert ConfigManager().get('database.password') == '12345'

    def test_bare_database_variables(self, monkeypatch, config_manager):
        monkeypatch.setenv('DB_HOST', 'pg.internal')
        monkeypatch.setenv('DB_PASSWORD', '007')
        db = ConfigManager().get_db_config()
        assert db['host'] == 'pg.internal'
        assert db['password'] == '007'


class TestSchema:

    def test_wrong_type_reported(self):
        errors = ConfigSchema.validate({'database': {'host': 'h', 'port': 'x', 'database': 'd',
                                                     'user': 'u', 'schema': 's'}})
        assert any('database.port' in e for e in errors)

    def test_bool_is_not_a_port(self):
        errors = ConfigSchema.validate({'database': {'host': 'h', 'port': True, 'database': 'd',
                                                     'user': 'u', 'schema': 's'}})
        assert errors

    def test_missing_required_section(self):
        assert ConfigSchema.validate({}) == ["Missing required configuration section: database"]

    def test_default_limit_above_max(self):
        errors = ConfigSchema.validate({'database': {'host': 'h', 'port': 1, 'database': 'd',
                                                     'user': 'u', 'schema': 's'},
                                        'pagination': {'default_limit': 500, 'max_limit': 200}})
        assert errors == ["pagination.default_limit must be between 1 and 200, got 500"]
