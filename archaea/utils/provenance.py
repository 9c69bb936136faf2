#!/usr/bin/env python3
"""
Provenance labels for predicted structures

The structure path records which prediction batch produced a model; the
label shown to curators is derived from it, falling back to the protein's
source.
"""
from typing import Optional

# Checked in order; first substring found in the structure path wins
PATH_LABELS = (
    ('dpam_afdb_batched', 'AFDB v6 (HGD)'),
    ('dpam_tier1_batched', 'AF3 Tier 1'),
    ('dpam_tier2_batched', 'AF3 Tier 2'),
    ('dpam_tier3_batched', 'AF3 Tier 3'),
    ('dpam_gap_batched', 'AF3 Gap'),
    ('af3_tier1', 'AF3 Tier 1'),
)


def provenance_label(source: str, cif_file: Optional[str]) -> str:
    """Label for a protein's structure

    Args:
        source: Protein source (e.g. 'AFDB', 'AF3')
        cif_file: Path of the structure file, if any

    Returns:
        Human readable provenance label
    """
    if not cif_file:
        return source
    for marker, label in PATH_LABELS:
        if marker in cif_file:
            return label
    if source == 'AFDB':
        return 'AFDB v6'
    return source
