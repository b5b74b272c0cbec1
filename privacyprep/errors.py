"""Exception types for PrivacyPrep.

Only ``UnreadableInputError`` ever reaches callers of the redaction
pipeline; the others are raised and handled inside the codec and pipeline
so that bad metadata degrades to an empty or stripped result.
"""


class PrivacyPrepError(Exception):
    """Base class for all PrivacyPrep errors."""


class UnreadableInputError(PrivacyPrepError):
    """The carrier bytes are not a readable image."""


class MalformedMetadataError(PrivacyPrepError):
    """Structural problem in the EXIF container (header, IFD chain, offsets)."""


class UnsupportedFieldTypeError(PrivacyPrepError):
    """A single IFD entry has an invalid type, width, count or value offset."""

    def __init__(self, tag_id: int, reason: str):
        super().__init__(f'tag {tag_id}: {reason}')
        self.tag_id = tag_id
        self.reason = reason


class EncodeUnsupportedError(PrivacyPrepError):
    """The output carrier cannot hold an EXIF container."""


class PipelineStateError(PrivacyPrepError):
    """A pipeline operation was called in the wrong state."""
