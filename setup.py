#!/usr/bin/env python3
"""
Setup script for pyArchaea
"""

from setuptools import setup, find_packages

setup(
    name="pyarchaea",
    version="0.1.0",
    description="Novel-fold exploration and curation dashboard for archaeal protein domains",
    author="RD Schaeffer",
    author_email="dustin.schaeffer@gmail.com",
    packages=find_packages(include=["archaea", "archaea.*"]),
    install_requires=[
        "psycopg2-binary>=2.9.3",
        "pyyaml>=6.0",
        "pandas>=1.4.0",
        "fastapi>=0.100.0",
        "uvicorn>=0.22.0",
        "pydantic>=2.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "httpx>=0.24.0",
        ],
    },
    entry_points={
        'console_scripts': [
            'archaea=archaea.cli.main:console_main',
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Science/Research",
        "Topic :: Scientific/Engineering :: Bio-Informatics",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
    python_requires=">=3.9",
)
