"""
engine/rdkit_engine.py

InChI engine backed by RDKit's bindings to the IUPAC InChI library.

The structural input is rebuilt as an RDKit molecule and handed to
rdinchi.MolToInchi, which returns the raw status, identifier, message, log
and AuxInfo of the InChI library.

Mapping Notes:
    - implicit_h == IMPLICIT_H_UNKNOWN leaves RDKit free to add implicit
      hydrogens from its valence model; any other value is fixed with
      SetNumExplicitHs + SetNoImplicit
    - Radical classes become radical electron counts (DOUBLET 1, SINGLET
      and TRIPLET 2)
    - 3-D inputs take their stereo from the coordinates; otherwise 0-D
      elements become chiral tags and double-bond stereo
    - A tetrahedral element that lists its centre as a neighbour means the
      centre's implicit hydrogen; that hydrogen is added as a real atom so
      the element becomes a chiral tag over four bonded atoms
    - Other tetrahedral elements whose neighbours are not exactly the four
      bonded atoms of the centre cannot be expressed as a chiral tag and
      are dropped (logged at DEBUG)
    - D and T are written as hydrogen isotopes; any other symbol RDKit does
      not know gives an ERROR result naming the unknown elements
"""

import logging
from typing import List, Optional, Sequence

# RDKit imports - InChI support is an optional part of RDKit builds
try:
    from rdkit import Chem
    from rdkit.Chem import rdinchi
    from rdkit.Geometry import Point3D
    RDKIT_AVAILABLE = True
except ImportError:
    RDKIT_AVAILABLE = False
    logging.getLogger(__name__).warning(
        "RDKit with InChI support not available - RDKitInChIEngine will be unavailable"
    )

from .base_engine import InChIEngine
from ..errors import EngineError, EngineUnavailableError
from ..result import GenerationResult, ReturnStatus
from ..structural_input import (
    IMPLICIT_H_UNKNOWN,
    BondType,
    CoordinateRegime,
    Parity,
    Radical,
    Stereo0D,
    StereoType,
    StructuralInput,
)


logger = logging.getLogger(__name__)

_RADICAL_ELECTRONS = {
    Radical.NONE: 0,
    Radical.SINGLET: 2,
    Radical.DOUBLET: 1,
    Radical.TRIPLET: 2,
}

# Symbols the InChI library accepts for hydrogen isotopes
_HYDROGEN_ISOTOPES = {
    "D": 2,
    "T": 3,
}


def _permutation_is_odd(order: Sequence[int]) -> bool:
    """True when reordering 0..n-1 into `order` takes an odd number of swaps."""
    inversions = 0
    for i in range(len(order)):
        for j in range(i + 1, len(order)):
            if order[i] > order[j]:
                inversions += 1
    return inversions % 2 == 1


class RDKitInChIEngine(InChIEngine):
    """
    InChI engine using rdkit.Chem.rdinchi.

    Usage:
        >>> engine = RDKitInChIEngine()
        >>> result = engine.compute(structural_input)
        >>> result.return_status
        <ReturnStatus.OKAY: 0>
    """

    name = "rdkit"

    def is_available(self) -> bool:
        return RDKIT_AVAILABLE

    def compute(self, structural_input: StructuralInput) -> GenerationResult:
        """
        Build an RDKit molecule from the input and run the InChI library.

        Raises:
            EngineUnavailableError: If RDKit (with InChI) is not installed
            EngineError: If RDKit rejects the input or the library call fails
        """
        if not RDKIT_AVAILABLE:
            raise EngineUnavailableError("Unable to load InChI support from RDKit")

        # The InChI library reports unknown elements as an ERROR status;
        # RDKit would refuse to build the molecule at all
        unknown = self._unknown_elements(structural_input)
        if unknown:
            message = f"Unknown element(s): {', '.join(unknown)}"
            logger.error(f"{self.name}: InChI returned {ReturnStatus.ERROR}: {message}")
            return GenerationResult(return_status=ReturnStatus.ERROR, message=message)

        mol = self._build_mol(structural_input)
        options = structural_input.options.to_option_string()

        try:
            inchi, retcode, message, log, aux_info = rdinchi.MolToInchi(mol, options)
        except Exception as e:
            logger.error(f"{self.name}: InChI library call failed: {e}", exc_info=True)
            raise EngineError(f"InChI library call failed: {e}") from e

        status = ReturnStatus.from_code(retcode)
        if status == ReturnStatus.WARNING:
            logger.warning(f"{self.name}: InChI warning: {message}")
        elif not status.is_acceptable():
            logger.error(f"{self.name}: InChI returned {status}: {message}")

        return GenerationResult(
            return_status=status,
            inchi=inchi,
            aux_info=aux_info,
            message=message,
            log=log
        )

    def inchi_to_key(self, inchi: str) -> Optional[str]:
        if not RDKIT_AVAILABLE:
            raise EngineUnavailableError("Unable to load InChI support from RDKit")
        return rdinchi.InchiToInchiKey(inchi) or None

    # -------------------------------------------------------------------------
    # StructuralInput -> RDKit
    # -------------------------------------------------------------------------

    def _unknown_elements(self, structural_input: StructuralInput) -> List[str]:
        """Element symbols RDKit cannot place, in first-seen order."""
        unknown: List[str] = []
        for engine_atom in structural_input.atoms:
            symbol = engine_atom.element
            if symbol in _HYDROGEN_ISOTOPES or symbol in unknown:
                continue
            try:
                Chem.Atom(symbol)
            except (RuntimeError, ValueError):
                unknown.append(symbol)
        return unknown

    def _build_mol(self, structural_input: StructuralInput):
        mol = Chem.RWMol()

        # Step 1: Atoms
        # -------------
        for engine_atom in structural_input.atoms:
            isotope = engine_atom.isotopic_mass
            if engine_atom.element in _HYDROGEN_ISOTOPES:
                atom = Chem.Atom(1)
                if isotope is None:
                    isotope = _HYDROGEN_ISOTOPES[engine_atom.element]
            else:
                atom = Chem.Atom(engine_atom.element)

            atom.SetFormalCharge(engine_atom.charge)
            if isotope is not None:
                atom.SetIsotope(isotope)
            if engine_atom.radical is not None:
                atom.SetNumRadicalElectrons(_RADICAL_ELECTRONS[engine_atom.radical])
            if engine_atom.implicit_h != IMPLICIT_H_UNKNOWN:
                atom.SetNumExplicitHs(engine_atom.implicit_h)
                atom.SetNoImplicit(True)
            mol.AddAtom(atom)

        # Step 2: Bonds
        # -------------
        for engine_bond in structural_input.bonds:
            try:
                mol.AddBond(engine_bond.atom_a, engine_bond.atom_b, self._bond_type(engine_bond.bond_type))
            except RuntimeError as e:
                raise EngineError(
                    f"RDKit rejected bond {engine_bond.atom_a}-{engine_bond.atom_b}: {e}"
                ) from e
            if engine_bond.bond_type == BondType.ALTERN:
                bond = mol.GetBondBetweenAtoms(engine_bond.atom_a, engine_bond.atom_b)
                bond.SetIsAromatic(True)
                bond.GetBeginAtom().SetIsAromatic(True)
                bond.GetEndAtom().SetIsAromatic(True)

        # Step 3: Coordinates
        # -------------------
        if structural_input.regime != CoordinateRegime.NONE and structural_input.atoms:
            conformer = Chem.Conformer(len(structural_input.atoms))
            for i, engine_atom in enumerate(structural_input.atoms):
                conformer.SetAtomPosition(i, Point3D(engine_atom.x, engine_atom.y, engine_atom.z))
            conformer.Set3D(structural_input.regime == CoordinateRegime.THREE_D)
            mol.AddConformer(conformer, assignId=True)

        # Step 4: Valence model
        # ---------------------
        failed = Chem.SanitizeMol(mol, catchErrors=True)
        if failed != Chem.SanitizeFlags.SANITIZE_NONE:
            # Let the InChI library report on the structure instead
            logger.warning(f"{self.name}: RDKit sanitization stopped at {failed}")
            mol.UpdatePropertyCache(strict=False)
            Chem.GetSymmSSSR(mol)

        # Step 5: Stereo
        # --------------
        if structural_input.regime == CoordinateRegime.THREE_D:
            if structural_input.stereo:
                logger.debug(f"{self.name}: 3-D coordinates present, 0-D stereo taken from geometry")
            Chem.AssignStereochemistryFrom3D(mol)
        else:
            added_hydrogens = False
            for element in structural_input.stereo:
                if element.stereo_type == StereoType.TETRAHEDRAL:
                    if self._materialise_implicit_h(mol, element) is not None:
                        added_hydrogens = True
                    self._apply_tetrahedral(mol, element)
                else:
                    self._apply_double_bond(mol, element)
            if added_hydrogens:
                mol.UpdatePropertyCache(strict=False)
                Chem.GetSymmSSSR(mol)

        return mol.GetMol()

    def _bond_type(self, bond_type: BondType):
        return {
            BondType.SINGLE: Chem.BondType.SINGLE,
            BondType.DOUBLE: Chem.BondType.DOUBLE,
            BondType.TRIPLE: Chem.BondType.TRIPLE,
            BondType.ALTERN: Chem.BondType.AROMATIC,
        }[bond_type]

    def _materialise_implicit_h(self, mol, element: Stereo0D) -> Optional[int]:
        """
        Turn the implicit hydrogen a centre lists as its own neighbour into
        a real atom, so the element can be written as a chiral tag.

        Returns:
            Index of the added hydrogen, or None when nothing was added
        """
        if element.parity not in (Parity.EVEN, Parity.ODD):
            return None
        if element.central_atom not in element.neighbors:
            return None

        center = mol.GetAtomWithIdx(element.central_atom)
        if center.GetDegree() != 3 or center.GetTotalNumHs() < 1:
            return None

        h_index = mol.AddAtom(Chem.Atom(1))
        mol.AddBond(element.central_atom, h_index, Chem.BondType.SINGLE)
        # Implicit counts are recomputed later; fixed counts lose one here
        if center.GetNumExplicitHs() > 0:
            center.SetNumExplicitHs(center.GetNumExplicitHs() - 1)
        return h_index

    def _apply_tetrahedral(self, mol, element: Stereo0D) -> None:
        if element.parity not in (Parity.EVEN, Parity.ODD):
            return

        center = mol.GetAtomWithIdx(element.central_atom)
        bonded: List[int] = [bond.GetOtherAtomIdx(element.central_atom) for bond in center.GetBonds()]
        neighbors = list(element.neighbors)
        if element.central_atom in neighbors:
            # The implicit hydrogen stands in for the centre; once
            # materialised it is the bonded atom the centre itself lacks
            hydrogens = [
                idx for idx in bonded
                if idx not in neighbors and mol.GetAtomWithIdx(idx).GetAtomicNum() == 1
            ]
            if len(hydrogens) == 1:
                neighbors[neighbors.index(element.central_atom)] = hydrogens[0]
        if len(bonded) != 4 or sorted(bonded) != sorted(neighbors):
            logger.debug(
                f"{self.name}: tetrahedral element on atom {element.central_atom} does not "
                f"match its bonded neighbours {bonded}, dropped"
            )
            return

        # EVEN: neighbours 1..3 clockwise seen from neighbour 0. RDKit's CW
        # tag means the same relative to bond order, so an odd reordering
        # flips the sense.
        permutation = [bonded.index(n) for n in neighbors]
        clockwise = (element.parity == Parity.EVEN) != _permutation_is_odd(permutation)
        center.SetChiralTag(
            Chem.ChiralType.CHI_TETRAHEDRAL_CW if clockwise
            else Chem.ChiralType.CHI_TETRAHEDRAL_CCW
        )

    def _apply_double_bond(self, mol, element: Stereo0D) -> None:
        if element.parity not in (Parity.EVEN, Parity.ODD):
            return

        x, a, b, y = element.neighbors
        bond = mol.GetBondBetweenAtoms(a, b)
        if (
            bond is None
            or bond.GetBondType() != Chem.BondType.DOUBLE
            or mol.GetBondBetweenAtoms(x, a) is None
            or mol.GetBondBetweenAtoms(b, y) is None
        ):
            logger.debug(f"{self.name}: double-bond element {element.neighbors} does not match bonds, dropped")
            return

        if bond.GetBeginAtomIdx() == a:
            bond.SetStereoAtoms(x, y)
        else:
            bond.SetStereoAtoms(y, x)
        bond.SetStereo(
            Chem.BondStereo.STEREOCIS if element.parity == Parity.ODD
            else Chem.BondStereo.STEREOTRANS
        )
