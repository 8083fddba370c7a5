"""
translator/structure_translator.py

Conversion of a Molecule into the position-indexed input of an InChI engine.

The translator is stateless: every call to translate() builds a new
StructuralInput from scratch and keeps nothing afterwards. The order of the
steps below matters, because stereo elements are emitted in a fixed order
that the engine relies on for tie-breaking near-symmetric centres.

Translation Flow:
    Molecule → neighbour table → coordinate regime → atoms → atom parities
             → bonds → bond stereo → StructuralInput
                          ↓
               unsupported order
                          ↓
                    EarlyProblem

Outcomes other than a complete input:
    - Fatal: unsupported spin multiplicity, negative implicit hydrogen count.
      Raised as TranslationError subclasses, never caught here.
    - Early problem: unrecognised bond order. Translation stops and the
      caller gets an EarlyProblem instead of calling the engine.
    - Silent omission: missing spin multiplicity or isotope, stereo
      descriptors whose atoms cannot be resolved. Logged at DEBUG only.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from ..errors import NegativeImplicitHydrogenError, UnsupportedSpinMultiplicityError
from ..molecule import Atom, Bond, CoordinateType, Molecule
from ..options import GenerationConfig, ProcessingOption
from ..structural_input import (
    IMPLICIT_H_UNKNOWN,
    BondType,
    CoordinateRegime,
    EngineAtom,
    EngineBond,
    Parity,
    Radical,
    Stereo0D,
    StructuralInput,
)


logger = logging.getLogger(__name__)

_RADICALS = {
    0: Radical.NONE,
    1: Radical.SINGLET,
    2: Radical.DOUBLET,
    3: Radical.TRIPLET,
}


class ProblemKind(Enum):
    """Conditions that stop translation before the engine is called."""
    BOND_ORDER = "unsupported bond order"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class EarlyProblem:
    """
    A structural problem found during translation.

    Attributes:
        kind: What went wrong
        detail: Human-readable description naming the offending item
        bond_index: Position of the offending bond, when the problem is a bond
    """
    kind: ProblemKind
    detail: str
    bond_index: Optional[int] = None

    def __str__(self) -> str:
        return f"{self.kind}: {self.detail}"


class StructureTranslator:
    """
    Builds a StructuralInput from a Molecule.

    Usage:
        >>> translator = StructureTranslator()
        >>> structural_input, problem = translator.translate(molecule, GenerationConfig())
        >>> if problem is None:
        ...     result = engine.compute(structural_input)
    """

    def translate(
        self,
        molecule: Molecule,
        config: Optional[GenerationConfig] = None
    ) -> Tuple[StructuralInput, Optional[EarlyProblem]]:
        """
        Convert a molecule into engine input.

        Args:
            molecule: Graph to convert; never modified
            config: Options; defaults to GenerationConfig()

        Returns:
            (structural_input, problem). When problem is not None the input is
            incomplete and must not be passed to an engine.

        Raises:
            UnsupportedSpinMultiplicityError: Spin multiplicity outside 0..3
            NegativeImplicitHydrogenError: Explicit hydrogen total smaller than
                                           the number of bonded hydrogen atoms
        """
        if config is None:
            config = GenerationConfig()

        atoms = molecule.atoms
        structural_input = StructuralInput(options=config.inchi_options)

        # Step 1: Neighbour table (ordinal -> neighbour ordinals)
        # -------------------------------------------------------
        neighbours = self._build_neighbour_table(molecule)

        # Step 2: Coordinate regime, decided once for the whole molecule
        # ---------------------------------------------------------------
        regime = self._select_regime(atoms)
        structural_input.regime = regime

        # Step 3: Atoms, in traversal order
        # ---------------------------------
        for i, atom in enumerate(atoms):
            hydrogen_neighbours = sum(1 for j in neighbours[i] if atoms[j].is_hydrogen())
            structural_input.add_atom(
                self._convert_atom(atom, regime, hydrogen_neighbours)
            )

        # Step 4: Tetrahedral stereo from atom parities
        # ---------------------------------------------
        for i, atom in enumerate(atoms):
            element = self._convert_atom_parity(molecule, i, atom)
            if element is not None:
                structural_input.add_stereo(element)

        # Step 5: Bonds
        # -------------
        if config.uses(ProcessingOption.USE_BONDS):
            for bond_index, bond in enumerate(molecule.bonds):
                bond_type = self._classify_order(bond.order)
                if bond_type is None:
                    problem = EarlyProblem(
                        kind=ProblemKind.BOND_ORDER,
                        detail=f"bond {bond.atom_refs2[0]}-{bond.atom_refs2[1]} has order {bond.order!r}",
                        bond_index=bond_index
                    )
                    logger.warning(
                        f"Unsupported bond order {bond.order!r} in {molecule.molecule_id}; "
                        f"InChI generation stopped before the engine call"
                    )
                    return structural_input, problem

                structural_input.add_bond(EngineBond(
                    atom_a=molecule.atom_index(bond.atom_refs2[0]),
                    atom_b=molecule.atom_index(bond.atom_refs2[1]),
                    bond_type=bond_type
                ))
        else:
            logger.debug(f"Bonds omitted for {molecule.molecule_id} (USE_BONDS not set)")

        # Step 6: Double-bond stereo
        # --------------------------
        for bond in molecule.bonds:
            element = self._convert_bond_stereo(molecule, bond)
            if element is not None:
                structural_input.add_stereo(element)

        logger.debug(
            f"Translated {molecule.molecule_id}: {len(structural_input.atoms)} atoms, "
            f"{len(structural_input.bonds)} bonds, {len(structural_input.stereo)} stereo elements, "
            f"regime={regime.value}"
        )
        return structural_input, None

    # -------------------------------------------------------------------------
    # Steps
    # -------------------------------------------------------------------------

    def _build_neighbour_table(self, molecule: Molecule) -> List[List[int]]:
        neighbours: List[List[int]] = [[] for _ in molecule.atoms]
        for bond in molecule.bonds:
            a = molecule.atom_index(bond.atom_refs2[0])
            b = molecule.atom_index(bond.atom_refs2[1])
            neighbours[a].append(b)
            neighbours[b].append(a)
        return neighbours

    def _select_regime(self, atoms: Tuple[Atom, ...]) -> CoordinateRegime:
        """
        All atoms 3-D, else all atoms 2-D, else no coordinates.

        A single atom without 3-D coordinates demotes the whole molecule.
        """
        if all(atom.has_coordinates(CoordinateType.CARTESIAN) for atom in atoms):
            return CoordinateRegime.THREE_D
        if all(atom.has_coordinates(CoordinateType.TWOD) for atom in atoms):
            return CoordinateRegime.TWO_D
        return CoordinateRegime.NONE

    def _convert_atom(
        self,
        atom: Atom,
        regime: CoordinateRegime,
        hydrogen_neighbours: int
    ) -> EngineAtom:
        if regime == CoordinateRegime.THREE_D:
            x, y, z = atom.xyz3
        elif regime == CoordinateRegime.TWO_D:
            x, y = atom.xy2
            z = 0.0
        else:
            x = y = z = 0.0

        engine_atom = EngineAtom(x=float(x), y=float(y), z=float(z), element=atom.element_type)

        if atom.formal_charge != 0:
            engine_atom.charge = atom.formal_charge

        if atom.spin_multiplicity is not None:
            radical = _RADICALS.get(atom.spin_multiplicity)
            if radical is None:
                raise UnsupportedSpinMultiplicityError(
                    f"Failed to generate InChI: Unsupported spin multiplicity: {atom.spin_multiplicity}",
                    details={'atom_id': atom.atom_id}
                )
            engine_atom.radical = radical

        if atom.isotope_number is not None:
            engine_atom.isotopic_mass = atom.isotope_number

        # hydrogen_count is the total; the engine wants only the hydrogens
        # that are not atoms of the graph
        if atom.hydrogen_count is None:
            engine_atom.implicit_h = IMPLICIT_H_UNKNOWN
        else:
            implicit_h = atom.hydrogen_count - hydrogen_neighbours
            if implicit_h < 0:
                raise NegativeImplicitHydrogenError(
                    f"Negative implicit hydrogen count: {atom.atom_id}",
                    details={
                        'atom_id': atom.atom_id,
                        'hydrogen_count': atom.hydrogen_count,
                        'hydrogen_neighbours': hydrogen_neighbours,
                    }
                )
            engine_atom.implicit_h = implicit_h

        return engine_atom

    def _convert_atom_parity(
        self,
        molecule: Molecule,
        index: int,
        atom: Atom
    ) -> Optional[Stereo0D]:
        if atom.atom_parity is None:
            return None

        refs = atom.atom_parity.resolve(molecule)
        if refs is None:
            logger.debug(
                f"Skipping atom parity on {atom.atom_id}: references "
                f"{atom.atom_parity.atom_refs4!r} do not resolve"
            )
            return None

        value = atom.atom_parity.value
        if value > 0:
            parity = Parity.EVEN
        elif value < 0:
            parity = Parity.ODD
        else:
            parity = Parity.UNKNOWN

        neighbors = tuple(molecule.atom_index(ref.atom_id) for ref in refs)
        return Stereo0D.tetrahedral(central_atom=index, neighbors=neighbors, parity=parity)

    def _classify_order(self, order: Optional[str]) -> Optional[BondType]:
        """Map a bond order code to a BondType; None if unrecognised."""
        if order is None or Bond.is_single(order):
            return BondType.SINGLE
        if Bond.is_double(order):
            return BondType.DOUBLE
        if Bond.is_triple(order):
            return BondType.TRIPLE
        if Bond.is_aromatic(order):
            return BondType.ALTERN
        return None

    def _convert_bond_stereo(self, molecule: Molecule, bond: Bond) -> Optional[Stereo0D]:
        stereo = bond.bond_stereo
        if stereo is None or stereo.atom_refs4 is None:
            return None

        indices = [molecule.atom_index(ref) for ref in stereo.atom_refs4]
        resolved = [i for i in indices if i is not None]
        if len(resolved) != 4 or len(indices) != 4:
            logger.debug(
                f"Skipping bond stereo on {bond.atom_refs2!r}: "
                f"{len(resolved)} of {stereo.atom_refs4!r} resolved"
            )
            return None

        if stereo.is_cis():
            parity = Parity.ODD
        elif stereo.is_trans():
            parity = Parity.EVEN
        else:
            logger.debug(f"Skipping bond stereo on {bond.atom_refs2!r}: content {stereo.content!r}")
            return None

        return Stereo0D.double_bond(neighbors=tuple(resolved), parity=parity)


def translate(
    molecule: Molecule,
    config: Optional[GenerationConfig] = None
) -> Tuple[StructuralInput, Optional[EarlyProblem]]:
    """Module-level shortcut for StructureTranslator().translate()."""
    return StructureTranslator().translate(molecule, config)
