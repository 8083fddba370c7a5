"""
RDKit interoperability helpers for inchigen.
"""

from .molecule_utils import (
    smiles_to_mol,
    molecule_from_rdkit,
    molecule_from_smiles,
    generate_inchi_batch
)

__all__ = [
    'smiles_to_mol',
    'molecule_from_rdkit',
    'molecule_from_smiles',
    'generate_inchi_batch'
]
