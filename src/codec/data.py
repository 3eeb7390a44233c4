"""Data structures for TLV blocks and NDEF records."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, List, Optional, TypeVar

from .exceptions import NDEFError
from .prefixes import uri_prefix

T = TypeVar('T')


@dataclass
class DecodeResult(Generic[T]):
    """Best-effort decode value with an optional diagnostic.

    Decoders never raise on malformed input; they return whatever could be
    recovered and set ``error`` to the problem they hit. Callers that want
    strict behaviour call ``unwrap()``.
    """
    value: T
    error: Optional[NDEFError] = None
    consumed: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value, raising the diagnostic if there is one."""
        if self.error is not None:
            raise self.error
        return self.value


class TLVKind(Enum):
    """TLV block types found in a Type 2 data area."""
    NULL = 'Null'
    LOCK_CONTROL = 'Lock Control'
    MEMORY_CONTROL = 'Memory Control'
    NDEF_MESSAGE = 'NDEF Message'
    PROPRIETARY = 'Proprietary'
    TERMINATOR = 'Terminator'
    INVALID = 'Invalid'


@dataclass
class TLVEntry:
    """Single TLV block located at ``offset`` in the scanned buffer."""
    offset: int
    tag: int
    kind: TLVKind
    value: bytes = b''
    length: Optional[int] = None  # declared length, None for 1-byte blocks
    error: Optional[NDEFError] = None

    @property
    def truncated(self) -> bool:
        return self.error is not None


@dataclass(frozen=True)
class RecordFlags:
    """NDEF record header flags."""
    mb: bool = False
    me: bool = False
    cf: bool = False
    sr: bool = True
    il: bool = False

    MB = 0x80
    ME = 0x40
    CF = 0x20
    SR = 0x10
    IL = 0x08
    TNF_MASK = 0x07

    @classmethod
    def from_header(cls, header: int) -> 'RecordFlags':
        return cls(
            mb=bool(header & cls.MB),
            me=bool(header & cls.ME),
            cf=bool(header & cls.CF),
            sr=bool(header & cls.SR),
            il=bool(header & cls.IL),
        )

    def header(self, tnf: int) -> int:
        """Combine flags with a TNF value into a header byte."""
        value = tnf & self.TNF_MASK
        if self.mb:
            value |= self.MB
        if self.me:
            value |= self.ME
        if self.cf:
            value |= self.CF
        if self.sr:
            value |= self.SR
        if self.il:
            value |= self.IL
        return value


# Type Name Format values
TNF_EMPTY = 0x00
TNF_WELL_KNOWN = 0x01
TNF_MEDIA = 0x02
TNF_ABSOLUTE_URI = 0x03
TNF_EXTERNAL = 0x04
TNF_UNKNOWN = 0x05
TNF_UNCHANGED = 0x06
TNF_RESERVED = 0x07

TNF_DESCRIPTIONS = (
    'Empty',
    'Well-known',
    'Media type',
    'Absolute URI',
    'External',
    'Unknown',
    'Unchanged',
    'Reserved',
)


def tnf_description(tnf: int) -> str:
    """Human readable name of a TNF value."""
    if 0 <= tnf < len(TNF_DESCRIPTIONS):
        return TNF_DESCRIPTIONS[tnf]
    return 'Invalid'


@dataclass
class NDEFRecord:
    """NDEF record as stored on the tag."""
    tnf: int
    type: bytes
    payload: bytes = b''
    id: Optional[bytes] = None
    flags: RecordFlags = field(default_factory=RecordFlags)

    @property
    def type_name(self) -> str:
        return self.type.decode('latin-1')

    def is_well_known(self, name: bytes) -> bool:
        return self.tnf == TNF_WELL_KNOWN and self.type == name


@dataclass
class NDEFMessage:
    """Ordered sequence of NDEF records."""
    records: List[NDEFRecord] = field(default_factory=list)

    def __iter__(self):
        return iter(self.records)

    def __len__(self):
        return len(self.records)

    def __getitem__(self, index):
        return self.records[index]


@dataclass
class URIRecord:
    """Decoded payload of a well-known 'U' record."""
    prefix_code: int
    suffix: str

    UNKNOWN_PREFIX = 'Unknown prefix'

    @property
    def prefix(self) -> str:
        prefix = uri_prefix(self.prefix_code)
        return self.UNKNOWN_PREFIX if prefix is None else prefix

    @property
    def known_prefix(self) -> bool:
        return uri_prefix(self.prefix_code) is not None

    @property
    def uri(self) -> str:
        return self.prefix + self.suffix


@dataclass
class TextRecord:
    """Decoded payload of a well-known 'T' record."""
    utf16: bool
    language: str
    data: bytes

    @property
    def encoding(self) -> str:
        return 'UTF-16' if self.utf16 else 'UTF-8'

    @property
    def text(self) -> str:
        if not self.utf16:
            return self.data.decode('utf-8', errors='replace')
        if self.data[:2] in (b'\xfe\xff', b'\xff\xfe'):
            return self.data.decode('utf-16', errors='replace')
        return self.data.decode('utf-16-be', errors='replace')
