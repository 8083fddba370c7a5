"""
result.py

Engine output data structures.

Design Philosophy:
-----------------
A GenerationResult is an immutable record of what the InChI engine returned
for one structural input. It is produced at most once per session and then
read any number of times, so it carries no behaviour beyond a few helpers.

The identifier string is authoritative for success: when it is missing the
generation failed, whatever the status code says.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class ReturnStatus(Enum):
    """
    Return codes of the InChI library.

    OKAY:
        Identifier generated, no messages.
    WARNING:
        Identifier generated, message explains what was noticed.
    ERROR, FATAL, UNKNOWN, BUSY:
        No usable identifier.
    EOF, SKIP:
        Batch-mode codes; no structure was processed.
    """
    SKIP = -2
    EOF = -1
    OKAY = 0
    WARNING = 1
    ERROR = 2
    FATAL = 3
    UNKNOWN = 4
    BUSY = 5

    def __str__(self) -> str:
        return self.name

    def is_acceptable(self) -> bool:
        """OKAY and WARNING mean an identifier was produced."""
        return self in (ReturnStatus.OKAY, ReturnStatus.WARNING)

    @classmethod
    def from_code(cls, code: int) -> 'ReturnStatus':
        """
        Map a raw library code to a member; unknown codes become UNKNOWN.
        """
        try:
            return cls(code)
        except ValueError:
            return cls.UNKNOWN


@dataclass(frozen=True)
class GenerationResult:
    """
    Output of one engine call.

    Attributes:
    ----------
    return_status : ReturnStatus
        Status code reported by the library.
    inchi : Optional[str]
        Identifier string, None when nothing was produced. Empty strings are
        normalised to None.
    aux_info : Optional[str]
        AuxInfo string (atom numbering, coordinates, ...).
    message : Optional[str]
        Error or warning message.
    log : Optional[str]
        Library log output.
    """

    return_status: ReturnStatus
    inchi: Optional[str] = None
    aux_info: Optional[str] = None
    message: Optional[str] = None
    log: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.return_status, ReturnStatus):
            raise TypeError(
                f"return_status must be ReturnStatus enum, got {type(self.return_status)}"
            )
        # The library reports "nothing" as an empty string
        for name in ('inchi', 'aux_info', 'message', 'log'):
            if getattr(self, name) == "":
                object.__setattr__(self, name, None)

    def has_identifier(self) -> bool:
        return self.inchi is not None

    def is_acceptable(self) -> bool:
        return self.return_status.is_acceptable()

    def to_dict(self) -> Dict[str, Any]:
        return {
            'return_status': self.return_status.name,
            'inchi': self.inchi,
            'aux_info': self.aux_info,
            'message': self.message,
            'log': self.log,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GenerationResult':
        """
        Inverse of to_dict().

        Raises:
            KeyError: If return_status is missing or not a ReturnStatus name
        """
        return cls(
            return_status=ReturnStatus[data['return_status']],
            inchi=data.get('inchi'),
            aux_info=data.get('aux_info'),
            message=data.get('message'),
            log=data.get('log')
        )

    def __str__(self) -> str:
        if self.inchi:
            return f"GenerationResult({self.return_status}: {self.inchi})"
        return f"GenerationResult({self.return_status})"
