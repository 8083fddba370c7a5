"""
options.py

Option handling for InChI generation.

Two kinds of options exist:

- InChI options are passed through to the InChI library (SNon, FixedH, ...).
  Callers may give them as a space-delimited string, each flag optionally
  prefixed by '-' or '/', or as a list of InchiOption members. Both forms
  resolve to one InchiOptions value.
- Processing options control what the translator copies into the engine
  input. The only one today is USE_BONDS, which is on by default.

GenerationConfig bundles both and is what the translator receives.
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, Optional, Tuple, Union

from .errors import InvalidOptionError


logger = logging.getLogger(__name__)

_TIMEOUT_PATTERN = re.compile(r"^W(\d+(?:\.\d+)?)$", re.IGNORECASE)


class InchiOption(Enum):
    """
    InChI library switches.

    The value is the switch text understood by the InChI library.
    """
    SUCF = "SUCF"
    CHIRAL_FLAG_ON = "ChiralFlagON"
    CHIRAL_FLAG_OFF = "ChiralFlagOFF"
    SNON = "SNon"
    SREL = "SRel"
    SRAC = "SRac"
    SUU = "SUU"
    SLUUD = "SLUUD"
    FIXED_H = "FixedH"
    REC_MET = "RecMet"
    AUX_NONE = "AuxNone"
    DO_NOT_ADD_H = "DoNotAddH"
    NEWPS_OFF = "NEWPSOFF"
    KET = "KET"
    T15 = "15T"
    WARN_ON_EMPTY_STRUCTURE = "WarnOnEmptyStructure"
    LARGE_MOLECULES = "LargeMolecules"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_text(cls, text: str) -> 'InchiOption':
        """
        Look up an option by its switch text, ignoring case.

        Raises:
            InvalidOptionError: If the text is not a known switch
        """
        lowered = text.lower()
        for option in cls:
            if option.value.lower() == lowered or option.name.lower() == lowered:
                return option
        raise InvalidOptionError(f"Unrecognised InChI option: {text!r}")


class ProcessingOption(Enum):
    """What the translator includes in the engine input."""
    USE_BONDS = "use_bonds"


def default_processing_options() -> FrozenSet[ProcessingOption]:
    return frozenset({ProcessingOption.USE_BONDS})


@dataclass(frozen=True)
class InchiOptions:
    """
    Normalised InChI option set.

    Attributes:
        flags: Switches in the order they were given, without duplicates
        timeout: Optional per-structure timeout in seconds (the W switch)
    """
    flags: Tuple[InchiOption, ...] = ()
    timeout: Optional[float] = None

    def __post_init__(self):
        seen = []
        for flag in self.flags:
            if not isinstance(flag, InchiOption):
                raise InvalidOptionError(
                    f"InChI options must be InchiOption members, got {type(flag).__name__}"
                )
            if flag not in seen:
                seen.append(flag)
        object.__setattr__(self, 'flags', tuple(seen))
        if self.timeout is not None and self.timeout < 0:
            raise InvalidOptionError(f"timeout cannot be negative, got {self.timeout}")

    def __contains__(self, option: InchiOption) -> bool:
        return option in self.flags

    def to_option_string(self) -> str:
        """
        Render the options in the form the InChI library expects.

        Example:
            >>> InchiOptions((InchiOption.SNON,), timeout=60).to_option_string()
            '-SNon -W60'
        """
        parts = [f"-{flag.value}" for flag in self.flags]
        if self.timeout is not None:
            seconds = int(self.timeout) if float(self.timeout).is_integer() else self.timeout
            parts.append(f"-W{seconds}")
        return " ".join(parts)


def parse_option_string(options: str) -> InchiOptions:
    """
    Parse a space-delimited InChI option string.

    Each token may be prefixed with '-' or '/'. Matching is case-insensitive.
    A token of the form W<seconds> sets the timeout.

    Args:
        options: e.g. "-SNon /FixedH W30"

    Returns:
        InchiOptions

    Raises:
        InvalidOptionError: If a token is not a recognised option
    """
    flags = []
    timeout = None
    for token in options.split():
        text = token.lstrip("-/")
        if not text:
            raise InvalidOptionError(f"Empty InChI option in {options!r}")
        match = _TIMEOUT_PATTERN.match(text)
        if match:
            timeout = float(match.group(1))
            continue
        flags.append(InchiOption.from_text(text))

    resolved = InchiOptions(flags=tuple(flags), timeout=timeout)
    logger.debug(f"Parsed InChI options {options!r} as {resolved.to_option_string()!r}")
    return resolved


def resolve_options(
    options: Union[None, str, InchiOptions, Iterable[InchiOption]]
) -> InchiOptions:
    """
    Resolve any accepted option form to InchiOptions.

    Args:
        options: None (defaults), an option string, an InchiOptions value, or
                 an iterable of InchiOption members

    Raises:
        InvalidOptionError: For unknown flags or unsupported option types
    """
    if options is None:
        return InchiOptions()
    if isinstance(options, InchiOptions):
        return options
    if isinstance(options, str):
        return parse_option_string(options)
    try:
        return InchiOptions(flags=tuple(options))
    except TypeError as e:
        raise InvalidOptionError(
            f"Unsupported options type: {type(options).__name__}"
        ) from e


@dataclass(frozen=True)
class GenerationConfig:
    """
    Everything the translator needs to know besides the molecule.

    A fresh default processing set is built for every config, so two configs
    never share a mutable default.
    """

    inchi_options: InchiOptions = field(default_factory=InchiOptions)
    processing_options: FrozenSet[ProcessingOption] = field(
        default_factory=default_processing_options
    )

    def __post_init__(self):
        if not isinstance(self.inchi_options, InchiOptions):
            raise TypeError(
                f"inchi_options must be InchiOptions, got {type(self.inchi_options).__name__}"
            )
        processing = frozenset(self.processing_options)
        for option in processing:
            if not isinstance(option, ProcessingOption):
                raise TypeError(
                    f"processing_options must contain ProcessingOption members, got {option!r}"
                )
        object.__setattr__(self, 'processing_options', processing)

    def uses(self, option: ProcessingOption) -> bool:
        return option in self.processing_options

    @classmethod
    def build(
        cls,
        options: Union[None, str, InchiOptions, Iterable[InchiOption]] = None,
        processing_options: Optional[Iterable[ProcessingOption]] = None
    ) -> 'GenerationConfig':
        """Build a config from any accepted option form."""
        inchi_options = resolve_options(options)
        if processing_options is None:
            return cls(inchi_options=inchi_options)
        return cls(inchi_options=inchi_options, processing_options=frozenset(processing_options))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'inchi_options': self.inchi_options.to_option_string(),
            'processing_options': sorted(option.value for option in self.processing_options),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GenerationConfig':
        """
        Inverse of to_dict().

        Missing keys fall back to the defaults.
        """
        processing = data.get('processing_options')
        return cls.build(
            options=data.get('inchi_options'),
            processing_options=(
                [ProcessingOption(value) for value in processing]
                if processing is not None else None
            )
        )
