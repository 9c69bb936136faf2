#!/usr/bin/env python3
"""
Default configuration values for the archaea dashboard
"""

DEFAULT_CONFIG = {
    'database': {
        'database': 'ecod_protein',
        'host': 'dione',
        'port': 45000,
        'user': 'ecod',
        'schema': 'archaea',
        'reference_schema': 'ecod_rep',
        'min_connections': 1,
        'max_connections': 40,
        'pool_timeout_ms': 1000,
        'connect_timeout': 2,
        'slow_query_ms': 100,
    },
    'novelty': {
        'pan_phylum_min_phyla': 5,
    },
    'curation': {
        'transaction_timeout_ms': 5000,
        'lock_candidate_row': True,
    },
    'pagination': {
        'default_limit': 50,
        'max_limit': 200,
    },
    'api': {
        'host': '127.0.0.1',
        'port': 8000,
        'cors_origins': ['*'],
    },
    'logging': {
        'level': 'INFO',
        'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    },
}
