"""PrivacyPrep -- EXIF metadata redaction for photos."""

__version__ = "1.0.0"

from privacyprep.models import (
    BatchResult,
    Field,
    FieldValue,
    FileResult,
    MetadataContainer,
    OrientationParams,
    Preview,
    RedactionReport,
    RedactionResult,
)
from privacyprep.errors import (
    EncodeUnsupportedError,
    MalformedMetadataError,
    PrivacyPrepError,
    UnreadableInputError,
    UnsupportedFieldTypeError,
)
from privacyprep.exif import decode, encode, strip_all
from privacyprep.projector import project, rebuild
from privacyprep.orientation import params_for, apply
from privacyprep.pipeline import RedactionPipeline, redact_bytes
from privacyprep.report import build_report, write_report
from privacyprep.redactor import redact_file, redact_batch

__all__ = [
    "__version__",
    "FieldValue",
    "MetadataContainer",
    "Field",
    "OrientationParams",
    "Preview",
    "RedactionReport",
    "RedactionResult",
    "FileResult",
    "BatchResult",
    "PrivacyPrepError",
    "UnreadableInputError",
    "MalformedMetadataError",
    "UnsupportedFieldTypeError",
    "EncodeUnsupportedError",
    "decode",
    "encode",
    "strip_all",
    "project",
    "rebuild",
    "params_for",
    "apply",
    "RedactionPipeline",
    "redact_bytes",
    "build_report",
    "write_report",
    "redact_file",
    "redact_batch",
]
