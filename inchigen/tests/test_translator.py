"""
tests/test_translator.py

Unit tests for StructureTranslator.

Tests cover:
1. Coordinate regime selection (all-or-nothing)
2. Per-atom conversion (charge, radical, isotope, implicit hydrogens)
3. Tetrahedral and double-bond 0-D stereo
4. Bond conversion and the unsupported-order hard stop
5. Emission order of stereo elements
"""

import pytest

from inchigen.errors import NegativeImplicitHydrogenError, UnsupportedSpinMultiplicityError
from inchigen.molecule import CIS, DOUBLE, SINGLE, TRANS, Atom, AtomParity, Bond, BondStereo, Molecule
from inchigen.options import GenerationConfig, InchiOption
from inchigen.structural_input import (
    IMPLICIT_H_UNKNOWN,
    BondType,
    CoordinateRegime,
    Parity,
    Radical,
    StereoType,
)
from inchigen.translator import ProblemKind, StructureTranslator, translate
from inchigen.tests.fakes import (
    bromochlorofluoromethane,
    bromochlorofluoromethane_implicit_h,
    but_2_ene,
    l_alanine,
    methane,
    with_bad_bond_order,
)


def _two_atoms(first: Atom, second: Atom) -> Molecule:
    return Molecule("M", atoms=(first, second), bonds=(Bond(("a1", "a2"), SINGLE),))


class TestCoordinateRegime:
    """Test suite for coordinate regime selection."""

    def setup_method(self):
        """Create translator before each test."""
        self.translator = StructureTranslator()

    def test_all_3d_used_verbatim(self):
        """Test that 3-D coordinates are copied when every atom has them."""
        structural_input, _ = self.translator.translate(l_alanine())
        assert structural_input.regime == CoordinateRegime.THREE_D
        first = structural_input.atoms[0]
        assert (first.x, first.y, first.z) == (-0.358, 0.819, 20.655)

    def test_one_missing_3d_demotes_to_2d(self):
        """Test that a single atom without xyz3 switches the molecule to 2-D."""
        molecule = _two_atoms(
            Atom("a1", "C", xyz3=(1.0, 2.0, 3.0), xy2=(1.0, 2.0)),
            Atom("a2", "O", xy2=(4.0, 5.0))
        )
        structural_input, _ = self.translator.translate(molecule)
        assert structural_input.regime == CoordinateRegime.TWO_D
        assert [(a.x, a.y, a.z) for a in structural_input.atoms] == [(1.0, 2.0, 0.0), (4.0, 5.0, 0.0)]

    def test_partial_coordinates_give_none(self):
        """Test that mixed coordinates zero every atom."""
        molecule = _two_atoms(
            Atom("a1", "C", xyz3=(1.0, 2.0, 3.0)),
            Atom("a2", "O", xy2=(4.0, 5.0))
        )
        structural_input, _ = self.translator.translate(molecule)
        assert structural_input.regime == CoordinateRegime.NONE
        assert all((a.x, a.y, a.z) == (0.0, 0.0, 0.0) for a in structural_input.atoms)


class TestAtomConversion:
    """Test suite for per-atom conversion."""

    def setup_method(self):
        """Create translator before each test."""
        self.translator = StructureTranslator()

    def test_alanine_scenario(self, alanine):
        """Test the six-atom alanine graph: atoms, hydrogens and bonds in input order."""
        structural_input, problem = self.translator.translate(alanine)

        assert problem is None
        assert [a.element for a in structural_input.atoms] == ["C", "C", "N", "C", "O", "O"]
        assert [a.implicit_h for a in structural_input.atoms] == [1, 0, 2, 3, 0, 1]
        assert len(structural_input.bonds) == 5
        assert structural_input.bonds[3].bond_type == BondType.DOUBLE
        assert (structural_input.bonds[1].atom_a, structural_input.bonds[1].atom_b) == (0, 2)

    def test_single_carbon_has_unknown_hydrogens(self, single_carbon):
        """Test that an atom without a hydrogen count gets the sentinel."""
        structural_input, _ = self.translator.translate(single_carbon)
        assert structural_input.atoms[0].implicit_h == IMPLICIT_H_UNKNOWN
        assert structural_input.atoms[0].radical is None

    def test_bonded_hydrogens_subtracted(self):
        """Test implicit = total - number of bonded hydrogen atoms."""
        molecule = Molecule(
            "M",
            atoms=(Atom("a1", "C", hydrogen_count=4), Atom("a2", "H"), Atom("a3", "H")),
            bonds=(Bond(("a1", "a2")), Bond(("a3", "a1")))
        )
        structural_input, _ = self.translator.translate(molecule)
        assert structural_input.atoms[0].implicit_h == 2
        assert structural_input.atoms[1].implicit_h == IMPLICIT_H_UNKNOWN

    def test_zero_remaining_hydrogens(self):
        """Test that a total equal to the bonded hydrogens gives zero."""
        structural_input, _ = self.translator.translate(bromochlorofluoromethane(1))
        assert structural_input.atoms[0].implicit_h == 0

    def test_negative_implicit_hydrogens_fatal(self):
        """Test that a total below the bonded hydrogen count raises."""
        molecule = _two_atoms(Atom("a1", "C", hydrogen_count=0), Atom("a2", "H"))
        with pytest.raises(NegativeImplicitHydrogenError, match="Negative implicit hydrogen count: a1"):
            self.translator.translate(molecule)

    def test_charge_and_isotope(self):
        """Test that non-zero charge and isotope are copied."""
        molecule = Molecule("M", atoms=(
            Atom("a1", "N", formal_charge=1, hydrogen_count=4),
            Atom("a2", "C", isotope_number=13),
        ))
        structural_input, _ = self.translator.translate(molecule)
        assert structural_input.atoms[0].charge == 1
        assert structural_input.atoms[0].isotopic_mass is None
        assert structural_input.atoms[1].isotopic_mass == 13
        assert structural_input.atoms[1].charge == 0

    @pytest.mark.parametrize("multiplicity,radical", [
        (0, Radical.NONE),
        (1, Radical.SINGLET),
        (2, Radical.DOUBLET),
        (3, Radical.TRIPLET),
    ])
    def test_spin_multiplicity_mapping(self, multiplicity, radical):
        """Test spin multiplicity 0..3 map to radical classes."""
        molecule = Molecule("M", atoms=(Atom("a1", "C", spin_multiplicity=multiplicity),))
        structural_input, _ = self.translator.translate(molecule)
        assert structural_input.atoms[0].radical == radical

    def test_unsupported_spin_multiplicity_fatal(self):
        """Test that multiplicity outside 0..3 raises."""
        molecule = Molecule("M", atoms=(Atom("a1", "C", spin_multiplicity=4),))
        with pytest.raises(UnsupportedSpinMultiplicityError, match="Unsupported spin multiplicity: 4"):
            self.translator.translate(molecule)

    def test_element_copied_verbatim(self):
        """Test that the element symbol is not normalised."""
        molecule = Molecule("M", atoms=(Atom("a1", "Xx"),))
        structural_input, _ = self.translator.translate(molecule)
        assert structural_input.atoms[0].element == "Xx"

    def test_options_carried(self):
        """Test that the InChI options end up on the structural input."""
        config = GenerationConfig.build("-SNon")
        structural_input, _ = self.translator.translate(methane(), config)
        assert InchiOption.SNON in structural_input.options


class TestTetrahedralStereo:
    """Test suite for atom parity conversion."""

    def setup_method(self):
        """Create translator before each test."""
        self.translator = StructureTranslator()

    def test_positive_parity_is_even(self):
        """Test that a positive parity value emits an even element."""
        structural_input, _ = self.translator.translate(bromochlorofluoromethane(1))
        assert len(structural_input.stereo) == 1
        element = structural_input.stereo[0]
        assert element.stereo_type == StereoType.TETRAHEDRAL
        assert element.parity == Parity.EVEN
        assert element.central_atom == 0
        assert element.neighbors == (4, 1, 2, 3)

    def test_negative_parity_is_odd(self):
        """Test that a negative parity value emits an odd element."""
        structural_input, _ = self.translator.translate(bromochlorofluoromethane(-1))
        assert structural_input.stereo[0].parity == Parity.ODD

    def test_zero_parity_is_unknown(self):
        """Test that a zero parity value emits an unknown element."""
        structural_input, _ = self.translator.translate(bromochlorofluoromethane(0))
        assert structural_input.stereo[0].parity == Parity.UNKNOWN

    def test_centre_as_implicit_hydrogen_ref(self):
        """Test that a parity naming its own centre keeps the centre index."""
        structural_input, problem = self.translator.translate(bromochlorofluoromethane_implicit_h(1))
        assert problem is None
        element = structural_input.stereo[0]
        assert element.central_atom == 0
        assert element.neighbors == (1, 2, 3, 0)
        assert element.parity == Parity.EVEN
        assert structural_input.atoms[0].implicit_h == 1

    def test_unresolved_refs_skipped(self):
        """Test that a parity naming a missing atom emits nothing."""
        molecule = Molecule("M", atoms=(
            Atom("a1", "C", atom_parity=AtomParity(("a2", "a3", "a4", "a5"), 1)),
            Atom("a2", "F"),
        ))
        structural_input, problem = self.translator.translate(molecule)
        assert problem is None
        assert structural_input.stereo == []


class TestBondConversion:
    """Test suite for bonds and double-bond stereo."""

    def setup_method(self):
        """Create translator before each test."""
        self.translator = StructureTranslator()

    def test_cis_is_odd(self):
        """Test that a cis descriptor emits one odd double-bond element."""
        structural_input, _ = self.translator.translate(but_2_ene(CIS))
        assert len(structural_input.stereo) == 1
        element = structural_input.stereo[0]
        assert element.stereo_type == StereoType.DOUBLE_BOND
        assert element.parity == Parity.ODD
        assert element.neighbors == (0, 1, 2, 3)
        assert element.central_atom is None

    def test_trans_is_even(self):
        """Test that a trans descriptor emits an even element."""
        structural_input, _ = self.translator.translate(but_2_ene(TRANS))
        assert structural_input.stereo[0].parity == Parity.EVEN

    def test_three_resolved_refs_skipped(self):
        """Test that a descriptor resolving only three atoms emits nothing."""
        structural_input, _ = self.translator.translate(but_2_ene(CIS, refs=("a1", "a2", "a3", "a9")))
        assert structural_input.stereo == []

    def test_short_descriptor_skipped(self):
        """Test that a descriptor naming three atoms emits nothing."""
        structural_input, _ = self.translator.translate(but_2_ene(CIS, refs=("a1", "a2", "a3")))
        assert structural_input.stereo == []

    def test_unknown_content_skipped(self):
        """Test that a content code other than C/T emits nothing."""
        structural_input, _ = self.translator.translate(but_2_ene("E"))
        assert structural_input.stereo == []

    def test_missing_order_is_single(self):
        """Test that a bond without an order is single."""
        structural_input, _ = self.translator.translate(bromochlorofluoromethane(1))
        assert all(b.bond_type == BondType.SINGLE for b in structural_input.bonds)

    def test_order_codes(self):
        """Test letter codes and the aromatic code."""
        molecule = Molecule(
            "M",
            atoms=tuple(Atom(f"a{i}", "C") for i in range(1, 5)),
            bonds=(Bond(("a1", "a2"), "S"), Bond(("a2", "a3"), "T"), Bond(("a3", "a4"), "A"))
        )
        structural_input, _ = self.translator.translate(molecule)
        assert [b.bond_type for b in structural_input.bonds] == [
            BondType.SINGLE, BondType.TRIPLE, BondType.ALTERN
        ]

    def test_bad_order_stops_translation(self):
        """Test that an unknown order returns an early problem naming the bond."""
        structural_input, problem = self.translator.translate(with_bad_bond_order())
        assert problem is not None
        assert problem.kind == ProblemKind.BOND_ORDER
        assert problem.bond_index == 3
        assert "'5'" in problem.detail
        assert len(structural_input.bonds) == 3

    def test_bonds_omitted_without_use_bonds(self):
        """Test that no bonds are converted when USE_BONDS is off."""
        config = GenerationConfig.build(processing_options=[])
        structural_input, problem = self.translator.translate(with_bad_bond_order(), config)
        assert problem is None
        assert structural_input.bonds == []


class TestDeterminism:
    """Test suite for output order and statelessness."""

    def test_tetrahedral_before_double_bond(self):
        """Test that atom parities are emitted before bond stereo."""
        molecule = Molecule(
            "M",
            atoms=(
                Atom("a1", "C", hydrogen_count=3),
                Atom("a2", "C", hydrogen_count=1),
                Atom("a3", "C", hydrogen_count=1),
                Atom("a4", "C", hydrogen_count=0,
                     atom_parity=AtomParity(("a3", "a5", "a6", "a7"), -1)),
                Atom("a5", "F"),
                Atom("a6", "Cl"),
                Atom("a7", "Br"),
            ),
            bonds=(
                Bond(("a1", "a2"), SINGLE),
                Bond(("a2", "a3"), DOUBLE, bond_stereo=BondStereo(("a1", "a2", "a3", "a4"), TRANS)),
                Bond(("a3", "a4"), SINGLE),
                Bond(("a4", "a5"), SINGLE),
                Bond(("a4", "a6"), SINGLE),
                Bond(("a4", "a7"), SINGLE),
            )
        )
        structural_input, _ = translate(molecule)
        assert [e.stereo_type for e in structural_input.stereo] == [
            StereoType.TETRAHEDRAL, StereoType.DOUBLE_BOND
        ]

    def test_repeated_translation_identical(self):
        """Test that translating twice gives equal inputs."""
        translator = StructureTranslator()
        first, _ = translator.translate(l_alanine())
        second, _ = translator.translate(l_alanine())
        assert first == second
        assert first is not second
