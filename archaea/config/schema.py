#!/usr/bin/env python3
"""
Configuration schema definition for validation
"""
from typing import Dict, Any, List


class ConfigSchema:
    """Configuration schema for validation"""

    SCHEMA = {
        'database': {
            'host': {'type': str, 'required': True},
            'port': {'type': int, 'required': True},
            'database': {'type': str, 'required': True},
            'user': {'type': str, 'required': True},
            'password': {'type': str, 'required': False},
            'schema': {'type': str, 'required': True},
            'reference_schema': {'type': str, 'required': False},
            'min_connections': {'type': int, 'required': False},
            'max_connections': {'type': int, 'required': False},
            'connect_timeout': {'type': int, 'required': False},
            'slow_query_ms': {'type': int, 'required': False},
            'pool_timeout_ms': {'type': int, 'required': False},
        },
        'novelty': {
            'pan_phylum_min_phyla': {'type': int, 'required': False},
        },
        'curation': {
            'transaction_timeout_ms': {'type': int, 'required': False},
            'lock_candidate_row': {'type': bool, 'required': False},
        },
        'pagination': {
            'default_limit': {'type': int, 'required': False},
            'max_limit': {'type': int, 'required': False},
        },
        'api': {
            'host': {'type': str, 'required': False},
            'port': {'type': int, 'required': False},
            'cors_origins': {'type': list, 'required': False},
        },
        'logging': {
            'level': {'type': str, 'required': False},
            'format': {'type': str, 'required': False},
            'log_dir': {'type': str, 'required': False},
        },
    }

    @classmethod
    def validate(cls, config: Dict[str, Any]) -> List[str]:
        """Validate configuration against schema

        Args:
            config: Configuration to validate

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        for section, fields in cls.SCHEMA.items():
            if any(props.get('required', False) for props in fields.values()):
                if section not in config:
                    errors.append(f"Missing required configuration section: {section}")
                    continue

            if section not in config:
                continue

            section_config = config[section]
            if not isinstance(section_config, dict):
                errors.append(f"Configuration section {section} must be a mapping")
                continue

            for field, props in fields.items():
                if props.get('required', False) and field not in section_config:
                    errors.append(f"Missing required configuration field: {section}.{field}")
                    continue

                if field in section_config and 'type' in props:
                    expected_type = props['type']
                    value = section_config[field]
                    # bool is an int subclass; do not let True pass as a port
                    if expected_type is int and isinstance(value, bool):
                        ok = False
                    else:
                        ok = isinstance(value, expected_type)
                    if not ok:
                        errors.append(
                            f"Invalid type for {section}.{field}: expected {expected_type.__name__}, "
                            f"got {type(value).__name__}"
                        )

        errors.extend(cls._check_limits(config.get('pagination')))
        return errors

    @staticmethod
    def _check_limits(pagination: Any) -> List[str]:
        if not isinstance(pagination, dict):
            return []
        default_limit = pagination.get('default_limit')
        max_limit = pagination.get('max_limit')
        if not isinstance(default_limit, int) or not isinstance(max_limit, int):
            return []
        if max_limit < 1:
            return [f"pagination.max_limit must be at least 1, got {max_limit}"]
        if not 1 <= default_limit <= max_limit:
            return [f"pagination.default_limit must be between 1 and {max_limit}, got {default_limit}"]
        return []
