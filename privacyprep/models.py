"""Data models for PrivacyPrep metadata, redaction and batch results."""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

# Directory names, one per EXIF IFD
PRIMARY = 'primary'        # 0th IFD
CAPTURE = 'capture'        # Exif IFD
LOCATION = 'location'      # GPS IFD
INTEROP = 'interop'        # Interoperability IFD
THUMBNAIL = 'thumbnail'    # 1st IFD

DIRECTORIES: Tuple[str, ...] = (PRIMARY, CAPTURE, LOCATION, INTEROP, THUMBNAIL)

# Directories shown to the user, in display order
USER_DIRECTORIES: Tuple[str, ...] = (PRIMARY, CAPTURE, LOCATION, INTEROP)

# TIFF type id -> value kind
_KINDS: Dict[int, str] = {
    1: 'unsigned', 3: 'unsigned', 4: 'unsigned',
    6: 'signed', 8: 'signed', 9: 'signed',
    5: 'rational', 10: 'srational',
    2: 'ascii', 7: 'undefined',
    11: 'float', 12: 'float',
}


@dataclass(frozen=True)
class FieldValue:
    """A typed EXIF value.

    ASCII (2) and UNDEFINED (7) values hold the exact stored bytes,
    including any NUL terminator. Every numeric type holds a tuple;
    rationals are (numerator, denominator) pairs.
    """
    type_id: int
    value: Union[bytes, Tuple]

    @property
    def kind(self) -> str:
        return _KINDS.get(self.type_id, 'unknown')

    @property
    def count(self) -> int:
        return len(self.value)

    def to_python(self):
        """Return a display-friendly Python value."""
        if self.type_id == 2:
            return self.value.rstrip(b'\x00').decode('ascii', errors='replace')
        if self.type_id == 7:
            return self.value
        if len(self.value) == 1:
            return self.value[0]
        return list(self.value)

    def display(self, max_len: int = 80) -> str:
        """Format the value as a single line of text."""
        if self.type_id == 2:
            text = self.to_python()
        elif self.type_id == 7:
            raw = self.value
            if raw and all(0x20 <= b <= 0x7E for b in raw.rstrip(b'\x00')):
                text = raw.rstrip(b'\x00').decode('ascii')
            else:
                text = raw.hex(' ')
        elif self.kind in ('rational', 'srational'):
            text = ', '.join(f'{n}/{d}' for n, d in self.value)
        else:
            text = ', '.join(str(v) for v in self.value)
        if len(text) > max_len:
            return text[:max_len - 3] + '...'
        return text


@dataclass(frozen=True)
class MetadataContainer:
    """A parsed EXIF container.

    ``directories`` maps each directory name to an ordered
    ``{tag_id: FieldValue}`` dict. Containers are treated as immutable:
    filtering always builds a new one.
    """
    directories: Dict[str, Dict[int, FieldValue]] = field(default_factory=dict)
    byte_order: str = '>'
    thumbnail: Optional[bytes] = None

    def __post_init__(self):
        for name in DIRECTORIES:
            self.directories.setdefault(name, {})

    @classmethod
    def empty(cls) -> 'MetadataContainer':
        """The skeleton container: every directory present and empty."""
        return cls(directories={name: {} for name in DIRECTORIES})

    def directory(self, name: str) -> Dict[int, FieldValue]:
        return self.directories[name]

    def is_empty(self) -> bool:
        """True when no user-facing directory holds a field."""
        return not any(self.directories[name] for name in USER_DIRECTORIES)


@dataclass(frozen=True)
class Field:
    """A single addressable metadata field, as shown to the user."""
    directory: str
    tag_id: int
    name: str
    value: FieldValue

    @property
    def key(self) -> str:
        return f'{self.directory}:{self.name}'


@dataclass(frozen=True)
class OrientationParams:
    """Clockwise rotation followed by mirroring in the rotated frame."""
    rotation: int = 0
    flip_horizontal: bool = False
    flip_vertical: bool = False

    @property
    def is_identity(self) -> bool:
        return self.rotation == 0 and not self.flip_horizontal and not self.flip_vertical

    @property
    def swaps_dimensions(self) -> bool:
        return self.rotation in (90, 270)


@dataclass
class RedactionReport:
    """Provenance record of which fields were kept and removed."""
    source_file: Optional[str]
    kept_fields: List[str] = field(default_factory=list)
    removed_fields: List[str] = field(default_factory=list)
    timestamp: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            'sourceFile': self.source_file,
            'keptFields': list(self.kept_fields),
            'removedFields': list(self.removed_fields),
            'time': self.timestamp.isoformat() if self.timestamp else None,
        }


@dataclass
class Preview:
    """What the pipeline hands back while it waits for a selection."""
    fields: List[Field]
    orientation: int
    width: int
    height: int
    source_format: str


@dataclass
class RedactionResult:
    """Output of a completed pipeline run."""
    data: bytes
    output_format: str  # "jpeg" | "png"
    fields_before: List[Field] = field(default_factory=list)
    fields_after: List[Field] = field(default_factory=list)
    reoriented: bool = False
    metadata_embedded: bool = False
    width: int = 0
    height: int = 0
    report: Optional[RedactionReport] = None


@dataclass
class FileResult:
    """Result of redacting a single file on disk."""
    source_path: Path
    output_path: Optional[Path] = None
    report_path: Optional[Path] = None
    fields_kept: int = 0
    fields_removed: int = 0
    reoriented: bool = False
    redaction_time_ms: float = 0.0
    error: Optional[str] = None


@dataclass
class BatchResult:
    """Result of a batch redaction run."""
    results: List[FileResult] = field(default_factory=list)
    total_files: int = 0
    files_cleaned: int = 0
    files_errored: int = 0
    total_time_seconds: float = 0.0
