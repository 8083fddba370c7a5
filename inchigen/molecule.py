"""
molecule.py

Molecular graph model consumed by the InChI translator.

This module provides immutable containers for atoms, bonds and their stereo
descriptors. Atoms are referenced by id strings (CML style), bonds name their
two endpoints by id, and stereo descriptors name four atoms by id. The
translator only ever reads these objects.

Absent values are represented as None rather than as accessors that fail:
an atom without a spin multiplicity has spin_multiplicity=None, an atom with
no hydrogen count attribute has hydrogen_count=None (which is distinct from
an explicit count of zero).
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Dict, Any, List, Tuple


# Bond order codes as written in CML documents
SINGLE = "1"
SINGLE_S = "S"
DOUBLE = "2"
DOUBLE_D = "D"
TRIPLE = "3"
TRIPLE_T = "T"
AROMATIC = "A"

# Bond stereo content codes
CIS = "C"
TRANS = "T"

HYDROGEN = "H"


class CoordinateType(Enum):
    """Kinds of coordinates an atom may carry."""
    CARTESIAN = "cartesian"
    TWOD = "twod"


@dataclass(frozen=True)
class AtomParity:
    """
    Tetrahedral parity of a stereocentre.

    Attributes:
        atom_refs4: Ids of the four reference atoms, in the order the parity
                    value refers to
        value: Signed parity; positive and negative values are the two
               parity classes, zero means unknown
    """
    atom_refs4: Tuple[str, ...]
    value: float

    def resolve(self, molecule: 'Molecule') -> Optional[Tuple['Atom', ...]]:
        """
        Look up the four reference atoms in a molecule.

        Returns:
            Tuple of four atoms, or None if the descriptor does not name
            exactly four atoms that all exist in the molecule
        """
        if self.atom_refs4 is None or len(self.atom_refs4) != 4:
            return None
        atoms = tuple(molecule.get_atom_by_id(ref) for ref in self.atom_refs4)
        if any(atom is None for atom in atoms):
            return None
        return atoms


@dataclass(frozen=True)
class BondStereo:
    """
    Cis/trans descriptor of a double bond.

    Attributes:
        atom_refs4: Ids of the four atoms X, A, B, Y where A=B is the double
                    bond and X, Y are the substituents being compared
        content: CIS ("C") or TRANS ("T")
    """
    atom_refs4: Optional[Tuple[str, ...]]
    content: str

    def is_cis(self) -> bool:
        return self.content == CIS

    def is_trans(self) -> bool:
        return self.content == TRANS


@dataclass(frozen=True)
class Atom:
    """
    A single atom of a molecular graph.

    Attributes:
        atom_id: Unique reference string within the molecule ("a1", "a2", ...)
        element_type: Element symbol, copied verbatim to the engine
        xyz3: Optional 3-D coordinate
        xy2: Optional 2-D coordinate
        formal_charge: Formal charge (default 0)
        spin_multiplicity: None when unset; 0..3 are meaningful
        isotope_number: Isotopic mass number, None when unset
        hydrogen_count: Total hydrogen count including explicit hydrogen
                        neighbours; None means "let the engine decide"
        atom_parity: Optional tetrahedral parity descriptor
    """

    atom_id: str
    element_type: str
    xyz3: Optional[Tuple[float, float, float]] = None
    xy2: Optional[Tuple[float, float]] = None
    formal_charge: int = 0
    spin_multiplicity: Optional[int] = None
    isotope_number: Optional[int] = None
    hydrogen_count: Optional[int] = None
    atom_parity: Optional[AtomParity] = None

    def __post_init__(self):
        if not self.atom_id or not self.atom_id.strip():
            raise ValueError("atom_id cannot be empty or whitespace")
        if not self.element_type or not self.element_type.strip():
            raise ValueError(f"atom {self.atom_id} has no element type")
        if self.xyz3 is not None and len(self.xyz3) != 3:
            raise ValueError(f"atom {self.atom_id}: xyz3 needs 3 values, got {self.xyz3!r}")
        if self.xy2 is not None and len(self.xy2) != 2:
            raise ValueError(f"atom {self.atom_id}: xy2 needs 2 values, got {self.xy2!r}")

    def has_coordinates(self, coordinate_type: CoordinateType) -> bool:
        if coordinate_type == CoordinateType.CARTESIAN:
            return self.xyz3 is not None
        return self.xy2 is not None

    def is_hydrogen(self) -> bool:
        return self.element_type == HYDROGEN

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            'atom_id': self.atom_id,
            'element_type': self.element_type,
            'formal_charge': self.formal_charge,
        }
        if self.xyz3 is not None:
            data['xyz3'] = list(self.xyz3)
        if self.xy2 is not None:
            data['xy2'] = list(self.xy2)
        if self.spin_multiplicity is not None:
            data['spin_multiplicity'] = self.spin_multiplicity
        if self.isotope_number is not None:
            data['isotope_number'] = self.isotope_number
        if self.hydrogen_count is not None:
            data['hydrogen_count'] = self.hydrogen_count
        if self.atom_parity is not None:
            data['atom_parity'] = {
                'atom_refs4': list(self.atom_parity.atom_refs4),
                'value': self.atom_parity.value,
            }
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Atom':
        parity = data.get('atom_parity')
        return cls(
            atom_id=data['atom_id'],
            element_type=data['element_type'],
            xyz3=tuple(data['xyz3']) if data.get('xyz3') is not None else None,
            xy2=tuple(data['xy2']) if data.get('xy2') is not None else None,
            formal_charge=data.get('formal_charge', 0),
            spin_multiplicity=data.get('spin_multiplicity'),
            isotope_number=data.get('isotope_number'),
            hydrogen_count=data.get('hydrogen_count'),
            atom_parity=AtomParity(
                atom_refs4=tuple(parity['atom_refs4']),
                value=parity['value']
            ) if parity else None
        )


@dataclass(frozen=True)
class Bond:
    """
    A bond between two atoms, named by id.

    Endpoint order does not matter for connectivity but is kept as given.
    The order is a CML order code; None is read as single.
    """

    atom_refs2: Tuple[str, str]
    order: Optional[str] = None
    bond_stereo: Optional[BondStereo] = None

    def __post_init__(self):
        if len(self.atom_refs2) != 2:
            raise ValueError(f"bond needs exactly 2 atom refs, got {self.atom_refs2!r}")

    @staticmethod
    def is_single(order: Optional[str]) -> bool:
        return order in (SINGLE, SINGLE_S)

    @staticmethod
    def is_double(order: Optional[str]) -> bool:
        return order in (DOUBLE, DOUBLE_D)

    @staticmethod
    def is_triple(order: Optional[str]) -> bool:
        return order in (TRIPLE, TRIPLE_T)

    @staticmethod
    def is_aromatic(order: Optional[str]) -> bool:
        return order == AROMATIC

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {'atom_refs2': list(self.atom_refs2)}
        if self.order is not None:
            data['order'] = self.order
        if self.bond_stereo is not None:
            refs = self.bond_stereo.atom_refs4
            data['bond_stereo'] = {
                'atom_refs4': list(refs) if refs is not None else None,
                'content': self.bond_stereo.content,
            }
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Bond':
        stereo = data.get('bond_stereo')
        bond_stereo = None
        if stereo:
            refs = stereo.get('atom_refs4')
            bond_stereo = BondStereo(
                atom_refs4=tuple(refs) if refs is not None else None,
                content=stereo['content']
            )
        return cls(
            atom_refs2=tuple(data['atom_refs2']),
            order=data.get('order'),
            bond_stereo=bond_stereo
        )


@dataclass(frozen=True)
class Molecule:
    """
    Immutable molecular graph.

    Holds an ordered sequence of atoms and an ordered sequence of bonds. The
    order of both sequences is significant: engine atom indices follow atom
    order, and stereo elements are emitted in atom order then bond order.

    Attributes:
        molecule_id: Unique identifier for this molecule
        atoms: Atoms in traversal order
        bonds: Bonds in traversal order
        name: Optional human-readable name
        identifiers: (convention, value) pairs attached after generation;
                     excluded from equality and hashing

    Examples:
        >>> methane = Molecule(
        ...     molecule_id="m1",
        ...     atoms=(Atom("a1", "C"),)
        ... )
        >>> methane.get_atom_by_id("a1").element_type
        'C'
    """

    molecule_id: str
    atoms: Tuple[Atom, ...] = ()
    bonds: Tuple[Bond, ...] = ()
    name: Optional[str] = None
    identifiers: List[Tuple[str, str]] = field(
        default_factory=list, compare=False, hash=False, repr=False
    )

    def __post_init__(self):
        """
        Enforce graph integrity.

        Raises:
            ValueError: If molecule_id is empty, atom ids repeat, or a bond
                        names an atom that is not part of the molecule
        """
        if not self.molecule_id or not self.molecule_id.strip():
            raise ValueError("molecule_id cannot be empty or whitespace")

        # Accept lists from callers but store tuples
        object.__setattr__(self, 'atoms', tuple(self.atoms))
        object.__setattr__(self, 'bonds', tuple(self.bonds))

        index: Dict[str, int] = {}
        for i, atom in enumerate(self.atoms):
            if atom.atom_id in index:
                raise ValueError(f"duplicate atom id {atom.atom_id!r} in {self.molecule_id}")
            index[atom.atom_id] = i
        object.__setattr__(self, '_index', index)

        for bond in self.bonds:
            for ref in bond.atom_refs2:
                if ref not in index:
                    raise ValueError(
                        f"bond {bond.atom_refs2!r} references unknown atom {ref!r} "
                        f"in {self.molecule_id}"
                    )

    def get_atom_by_id(self, atom_id: str) -> Optional[Atom]:
        i = self._index.get(atom_id)
        return self.atoms[i] if i is not None else None

    def atom_index(self, atom_id: str) -> Optional[int]:
        """Position of an atom in traversal order, or None if unknown."""
        return self._index.get(atom_id)

    def add_identifier(self, convention: str, value: str) -> None:
        self.identifiers.append((convention, value))

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert Molecule to a JSON-friendly dictionary.

        Returns:
            Dictionary with molecule_id, name, atoms, bonds and identifiers
        """
        return {
            'molecule_id': self.molecule_id,
            'name': self.name,
            'atoms': [atom.to_dict() for atom in self.atoms],
            'bonds': [bond.to_dict() for bond in self.bonds],
            'identifiers': [list(pair) for pair in self.identifiers],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Molecule':
        """
        Reconstruct Molecule from dictionary.

        Inverse of to_dict().

        Raises:
            KeyError: If molecule_id or an atom's required keys are missing
            ValueError: If the data fails validation in __post_init__
        """
        molecule = cls(
            molecule_id=data['molecule_id'],
            atoms=tuple(Atom.from_dict(a) for a in data.get('atoms', [])),
            bonds=tuple(Bond.from_dict(b) for b in data.get('bonds', [])),
            name=data.get('name')
        )
        for convention, value in data.get('identifiers', []):
            molecule.add_identifier(convention, value)
        return molecule

    def __str__(self) -> str:
        if self.name:
            return f"Molecule({self.molecule_id}: {self.name})"
        return f"Molecule({self.molecule_id})"


# =============================================================================
# Design Notes
# =============================================================================
#
# Why ids instead of object references?
# -------------------------------------
# - Stereo descriptors in CML name their atoms by id, so id lookup is needed
#   anyway
# - The translator works on ordinals (position in self.atoms); atom_index()
#   is the single mapping from id to ordinal
# - Frozen atoms with equal fields would compare equal, so identity of
#   objects is not a reliable key
#
# Why is identifiers mutable?
# ---------------------------
# - append_to_molecule() records the generated InChI on the source molecule,
#   which is the one write the generation API performs on its input
# - The field is excluded from equality and hashing so the graph identity
#   does not change when an identifier is attached
#
