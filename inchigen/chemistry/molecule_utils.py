"""
chemistry/molecule_utils.py

Utility functions for getting molecules in and InChIs out.

The generation API works on the package's own Molecule graph. These helpers
build that graph from RDKit molecules or SMILES strings, and run generation
over a batch of molecules, collecting identifiers and failures into one
summary.
"""

import logging
from typing import Any, Dict, List, Optional

try:
    from rdkit import Chem
    RDKIT_AVAILABLE = True
except ImportError:
    RDKIT_AVAILABLE = False

from ..errors import InChIGenerationError
from ..molecule import (
    AROMATIC,
    CIS,
    DOUBLE,
    SINGLE,
    TRANS,
    TRIPLE,
    Atom,
    AtomParity,
    Bond,
    BondStereo,
    Molecule,
)


logger = logging.getLogger(__name__)


# =============================================================================
# RDKit -> Molecule
# =============================================================================

def smiles_to_mol(smiles: str, sanitize: bool = True) -> Optional[Any]:
    """
    Convert SMILES string to RDKit Mol object.

    Args:
        smiles: SMILES representation
        sanitize: Whether to perform sanitization (default: True)

    Returns:
        RDKit Mol object if successful, None if parsing fails

    Example:
        >>> mol = smiles_to_mol("CCO")
        >>> mol is not None
        True
        >>> smiles_to_mol("C(C)(C)(C)(C)C") is None  # Invalid valence
        True
    """
    if not RDKIT_AVAILABLE:
        logger.error("RDKit not available")
        return None

    if not smiles or not smiles.strip():
        logger.warning("Empty SMILES string provided")
        return None

    mol = Chem.MolFromSmiles(smiles, sanitize=sanitize)
    if mol is None:
        logger.warning(f"Failed to parse SMILES '{smiles}'")
    return mol


def _bond_order(bond: Any) -> str:
    bond_type = bond.GetBondType()
    if bond_type == Chem.BondType.DOUBLE:
        return DOUBLE
    if bond_type == Chem.BondType.TRIPLE:
        return TRIPLE
    if bond_type == Chem.BondType.AROMATIC:
        return AROMATIC
    if bond_type == Chem.BondType.SINGLE:
        return SINGLE
    # Dative, zero-order, ... are passed through and rejected by the translator
    return str(bond_type)


def _spin_multiplicity(atom: Any) -> Optional[int]:
    radicals = atom.GetNumRadicalElectrons()
    if radicals == 0:
        return None
    # One unpaired electron is a doublet; two are read as a triplet
    return min(radicals, 2) + 1


def _atom_parity(atom: Any, with_hs: Any) -> Optional[AtomParity]:
    """
    Parity of a tetrahedral stereocentre, relative to bond order.

    `with_hs` is the molecule after Chem.AddHs, so a centre with an implicit
    hydrogen has four neighbours there. The added hydrogen has no id in the
    Molecule and is written as the centre's own id.
    """
    index = atom.GetIdx()
    heavy_count = atom.GetOwningMol().GetNumAtoms()
    centre = with_hs.GetAtomWithIdx(index)
    tag = centre.GetChiralTag()
    if tag not in (Chem.ChiralType.CHI_TETRAHEDRAL_CW, Chem.ChiralType.CHI_TETRAHEDRAL_CCW):
        return None

    neighbours = [bond.GetOtherAtomIdx(index) for bond in centre.GetBonds()]
    if len(neighbours) != 4:
        return None
    added = [i for i in neighbours if i >= heavy_count]
    if len(added) > 1:
        return None

    return AtomParity(
        atom_refs4=tuple(f"a{(index if i >= heavy_count else i) + 1}" for i in neighbours),
        value=1.0 if tag == Chem.ChiralType.CHI_TETRAHEDRAL_CW else -1.0
    )


def _bond_stereo(bond: Any) -> Optional[BondStereo]:
    stereo = bond.GetStereo()
    stereo_atoms = list(bond.GetStereoAtoms())
    if len(stereo_atoms) != 2:
        return None

    # Legacy perception sets the stereo atoms to the highest ranked
    # neighbours, so Z/E read as cis/trans of those atoms
    if stereo in (Chem.BondStereo.STEREOCIS, Chem.BondStereo.STEREOZ):
        content = CIS
    elif stereo in (Chem.BondStereo.STEREOTRANS, Chem.BondStereo.STEREOE):
        content = TRANS
    else:
        return None

    x, y = stereo_atoms
    a, b = bond.GetBeginAtomIdx(), bond.GetEndAtomIdx()
    return BondStereo(
        atom_refs4=tuple(f"a{i + 1}" for i in (x, a, b, y)),
        content=content
    )


def molecule_from_rdkit(mol: Any, molecule_id: str, name: Optional[str] = None) -> Molecule:
    """
    Build a Molecule from an RDKit Mol.

    Atoms get ids a1..aN in RDKit index order. Hydrogen counts are written
    explicitly (graph hydrogens included), so the engine does not have to
    guess them. Coordinates are taken from the first conformer, as 3-D or
    2-D depending on the conformer.

    Args:
        mol: RDKit Mol object
        molecule_id: Identifier for the new Molecule
        name: Optional human-readable name

    Returns:
        Molecule

    Raises:
        ValueError: If mol is None
    """
    if mol is None:
        raise ValueError(f"Cannot build molecule {molecule_id} from None")

    conformer = mol.GetConformer() if mol.GetNumConformers() else None
    with_hs = Chem.AddHs(mol)

    atoms: List[Atom] = []
    for atom in mol.GetAtoms():
        i = atom.GetIdx()
        xyz3 = xy2 = None
        if conformer is not None:
            position = conformer.GetAtomPosition(i)
            if conformer.Is3D():
                xyz3 = (position.x, position.y, position.z)
            else:
                xy2 = (position.x, position.y)

        atoms.append(Atom(
            atom_id=f"a{i + 1}",
            element_type=atom.GetSymbol(),
            xyz3=xyz3,
            xy2=xy2,
            formal_charge=atom.GetFormalCharge(),
            spin_multiplicity=_spin_multiplicity(atom),
            isotope_number=atom.GetIsotope() or None,
            hydrogen_count=atom.GetTotalNumHs(includeNeighbors=True),
            atom_parity=_atom_parity(atom, with_hs)
        ))

    bonds: List[Bond] = []
    for bond in mol.GetBonds():
        bonds.append(Bond(
            atom_refs2=(f"a{bond.GetBeginAtomIdx() + 1}", f"a{bond.GetEndAtomIdx() + 1}"),
            order=_bond_order(bond),
            bond_stereo=_bond_stereo(bond)
        ))

    return Molecule(molecule_id=molecule_id, atoms=tuple(atoms), bonds=tuple(bonds), name=name)


def molecule_from_smiles(
    smiles: str,
    molecule_id: str,
    kekulize: bool = True,
    name: Optional[str] = None
) -> Molecule:
    """
    Parse a SMILES string into a Molecule.

    Args:
        smiles: SMILES representation
        molecule_id: Identifier for the new Molecule
        kekulize: Write aromatic rings as alternating single/double bonds
        name: Optional human-readable name

    Raises:
        ValueError: If the SMILES cannot be parsed

    Example:
        >>> ethanol = molecule_from_smiles("CCO", "MOL_001")
        >>> [atom.hydrogen_count for atom in ethanol.atoms]
        [3, 2, 1]
    """
    mol = smiles_to_mol(smiles)
    if mol is None:
        raise ValueError(f"Failed to parse SMILES: {smiles}")
    if kekulize:
        mol = Chem.Mol(mol)
        Chem.Kekulize(mol, clearAromaticFlags=True)
    return molecule_from_rdkit(mol, molecule_id, name=name)


# =============================================================================
# Batch Operations
# =============================================================================

def generate_inchi_batch(
    molecules: List[Molecule],
    factory: Any,
    options: Any = None
) -> Dict[str, Any]:
    """
    Generate InChIs for a batch of molecules and return summary statistics.

    One session is used per molecule. Failures of individual molecules
    (unsupported bond orders, rejected structures, fatal translation errors)
    are recorded in the summary instead of stopping the batch.

    Args:
        molecules: List of Molecule objects
        factory: InChIGeneratorFactory providing the sessions
        options: InChI options in any form the factory accepts

    Returns:
        Dictionary with statistics:
        {
            'total': int,
            'acceptable': int,
            'failed': int,
            'inchis': Dict[str, str],   # molecule_id -> InChI
            'errors': Dict[str, str]    # molecule_id -> error message
        }

    Raises:
        InvalidOptionError: If options cannot be resolved (before any
                            molecule is processed)
    """
    results: Dict[str, Any] = {
        'total': len(molecules),
        'acceptable': 0,
        'failed': 0,
        'inchis': {},
        'errors': {}
    }

    sessions = [factory.get_inchi_generator(molecule, options) for molecule in molecules]

    for molecule, session in zip(molecules, sessions):
        try:
            if session.is_acceptable():
                results['acceptable'] += 1
                results['inchis'][molecule.molecule_id] = session.get_inchi()
                continue
            error = session.get_message() or f"InChI returned {session.get_return_status()}"
        except InChIGenerationError as e:
            error = e.message

        results['failed'] += 1
        results['errors'][molecule.molecule_id] = error
        logger.info(f"InChI generation failed for molecule_id={molecule.molecule_id}: {error}")

    logger.info(
        f"Batch complete: {results['acceptable']}/{results['total']} acceptable"
    )
    return results
