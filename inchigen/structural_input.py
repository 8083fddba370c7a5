"""
structural_input.py

Records handed to an InChI engine.

A StructuralInput is the position-indexed form of a molecule: engine atom i
is graph atom i, bonds and stereo elements refer to atoms by that index.
This mirrors the inchi_Input structure of the InChI C API closely enough
that an engine adapter can copy it field by field.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .options import InchiOptions


# implicit_h value meaning "let the engine work it out"
IMPLICIT_H_UNKNOWN = -1


class CoordinateRegime(Enum):
    """Which coordinates were copied into the engine atoms."""
    THREE_D = "3d"
    TWO_D = "2d"
    NONE = "none"


class Radical(Enum):
    """InChI radical classes, keyed by spin multiplicity."""
    NONE = 0
    SINGLET = 1
    DOUBLET = 2
    TRIPLET = 3


class BondType(Enum):
    """InChI bond types. ALTERN is the aromatic/delocalised bond."""
    SINGLE = 1
    DOUBLE = 2
    TRIPLE = 3
    ALTERN = 4


class StereoType(Enum):
    TETRAHEDRAL = "tetrahedral"
    DOUBLE_BOND = "double_bond"


class Parity(Enum):
    """
    0-D parity values as defined by the InChI API.

    For a tetrahedral element with neighbours (W, X, Y, Z), EVEN means X, Y, Z
    appear clockwise when viewed from W. For a double bond X-A=B-Y, EVEN means
    X and Y are trans, ODD means cis.
    """
    NONE = 0
    ODD = 1
    EVEN = 2
    UNKNOWN = 4


@dataclass
class EngineAtom:
    """
    One atom as the engine sees it.

    Attributes:
        x, y, z: Coordinates (all zero when no coordinates are used)
        element: Element symbol
        charge: Formal charge; 0 means unset
        radical: Radical class, None when the spin multiplicity is unknown
        isotopic_mass: Isotopic mass number, None when not set
        implicit_h: Implicit hydrogens, or IMPLICIT_H_UNKNOWN
    """
    x: float
    y: float
    z: float
    element: str
    charge: int = 0
    radical: Optional[Radical] = None
    isotopic_mass: Optional[int] = None
    implicit_h: int = IMPLICIT_H_UNKNOWN

    def to_dict(self) -> Dict[str, Any]:
        return {
            'x': self.x,
            'y': self.y,
            'z': self.z,
            'element': self.element,
            'charge': self.charge,
            'radical': self.radical.name if self.radical is not None else None,
            'isotopic_mass': self.isotopic_mass,
            'implicit_h': self.implicit_h,
        }


@dataclass(frozen=True)
class EngineBond:
    atom_a: int
    atom_b: int
    bond_type: BondType

    def to_dict(self) -> Dict[str, Any]:
        return {'atoms': [self.atom_a, self.atom_b], 'bond_type': self.bond_type.name}


@dataclass(frozen=True)
class Stereo0D:
    """
    Coordinate-free stereo element.

    Attributes:
        stereo_type: TETRAHEDRAL or DOUBLE_BOND
        neighbors: Four engine atom indices, in descriptor order
        parity: Parity relative to that order
        central_atom: Stereocentre index for tetrahedral elements, None for
                      double bonds
    """
    stereo_type: StereoType
    neighbors: Tuple[int, int, int, int]
    parity: Parity
    central_atom: Optional[int] = None

    @classmethod
    def tetrahedral(
        cls,
        central_atom: int,
        neighbors: Tuple[int, int, int, int],
        parity: Parity
    ) -> 'Stereo0D':
        return cls(
            stereo_type=StereoType.TETRAHEDRAL,
            neighbors=tuple(neighbors),
            parity=parity,
            central_atom=central_atom
        )

    @classmethod
    def double_bond(cls, neighbors: Tuple[int, int, int, int], parity: Parity) -> 'Stereo0D':
        return cls(
            stereo_type=StereoType.DOUBLE_BOND,
            neighbors=tuple(neighbors),
            parity=parity
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'stereo_type': self.stereo_type.value,
            'central_atom': self.central_atom,
            'neighbors': list(self.neighbors),
            'parity': self.parity.name,
        }


@dataclass
class StructuralInput:
    """
    Complete engine input for one molecule.

    Built incrementally by the translator: atoms first, then tetrahedral
    stereo, then bonds, then double-bond stereo. Nothing else appends to it.
    """

    options: InchiOptions = field(default_factory=InchiOptions)
    regime: CoordinateRegime = CoordinateRegime.NONE
    atoms: List[EngineAtom] = field(default_factory=list)
    bonds: List[EngineBond] = field(default_factory=list)
    stereo: List[Stereo0D] = field(default_factory=list)

    def add_atom(self, atom: EngineAtom) -> int:
        """Append an atom and return its engine index."""
        self.atoms.append(atom)
        return len(self.atoms) - 1

    def add_bond(self, bond: EngineBond) -> None:
        self.bonds.append(bond)

    def add_stereo(self, element: Stereo0D) -> None:
        self.stereo.append(element)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'options': self.options.to_option_string(),
            'regime': self.regime.value,
            'atoms': [atom.to_dict() for atom in self.atoms],
            'bonds': [bond.to_dict() for bond in self.bonds],
            'stereo': [element.to_dict() for element in self.stereo],
        }
