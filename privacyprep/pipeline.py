"""Redaction pipeline -- one explicit state machine per input image.

    idle -> decoded -> projected -> awaiting_selection
         -> transformed -> recomposed -> encoded
    (any step) -> failed

``load()`` runs up to ``awaiting_selection`` and returns a Preview; the
caller then resumes with ``finish()`` once it has a selection map. Only
an unreadable carrier is an error; broken metadata degrades to an empty
field list and output formats without an EXIF slot degrade to stripped
output.
"""

import io
import logging
from typing import List, Optional

from PIL import Image, UnidentifiedImageError

from privacyprep.errors import PipelineStateError, UnreadableInputError
from privacyprep.exif.carrier import strip_all
from privacyprep.exif.parser import decode
from privacyprep.exif.tags import TagCatalog, get_catalog
from privacyprep.exif.writer import encode
from privacyprep.models import (
    Field, MetadataContainer, OrientationParams, Preview, RedactionResult,
)
from privacyprep.orientation import apply_to_image, oriented_size, params_for, read_orientation
from privacyprep.projector import SelectionMap, filter_fields, project, rebuild
from privacyprep.report import build_report

logger = logging.getLogger(__name__)

IDLE = 'idle'
DECODED = 'decoded'
PROJECTED = 'projected'
AWAITING_SELECTION = 'awaiting_selection'
TRANSFORMED = 'transformed'
RECOMPOSED = 'recomposed'
ENCODED = 'encoded'
FAILED = 'failed'

UNREADABLE_INPUT = 'unreadable-input'

OUTPUT_FORMATS = ('same', 'jpeg', 'png')

# Formats able to carry an EXIF container in the output
EXIF_CAPABLE_FORMATS = ('jpeg',)

DEFAULT_QUALITY = 92
MIN_QUALITY = 70
MAX_QUALITY = 100


def clamp_quality(quality) -> int:
    """Clamp a 1-100 quality setting to the range used for encoding."""
    return max(MIN_QUALITY, min(MAX_QUALITY, int(quality)))


def resolve_output_format(output_format: str, source_format: str) -> str:
    """``same`` keeps PNG as PNG and turns everything else into JPEG."""
    if output_format not in OUTPUT_FORMATS:
        raise ValueError(f'Unknown output format: {output_format!r} '
                         f'(expected one of {", ".join(OUTPUT_FORMATS)})')
    if output_format == 'same':
        return 'png' if source_format == 'png' else 'jpeg'
    return output_format


def _pixel_mode(image: Image.Image) -> Image.Image:
    """Convert to a mode whose pixels map 1:1 onto a numpy array."""
    if image.mode in ('RGB', 'RGBA', 'L', 'LA'):
        return image
    if image.mode in ('P', 'PA'):
        has_alpha = image.mode == 'PA' or 'transparency' in image.info
        return image.convert('RGBA' if has_alpha else 'RGB')
    if 'A' in image.getbands():
        return image.convert('RGBA')
    return image.convert('RGB')


def _render(image: Image.Image, output_format: str, quality: int) -> bytes:
    buf = io.BytesIO()
    if output_format == 'jpeg':
        if image.mode not in ('RGB', 'L'):
            image = image.convert('RGB')
        image.save(buf, format='JPEG', quality=quality)
    else:
        image.save(buf, format='PNG')
    return buf.getvalue()


class RedactionPipeline:
    """Redacts one image. Not shared between images or threads."""

    def __init__(self, catalog: Optional[TagCatalog] = None):
        self.catalog = catalog or get_catalog()
        self._clear()

    def _clear(self):
        self.state = IDLE
        self.failure_reason: Optional[str] = None
        self.file_name = ''
        self.source_format = ''
        self.container: Optional[MetadataContainer] = None
        self.fields: List[Field] = []
        self.orientation = 1
        self._image: Optional[Image.Image] = None

    def _require(self, *states: str):
        if self.state not in states:
            raise PipelineStateError(
                f'pipeline is {self.state}, expected {" or ".join(states)}')

    def reset(self):
        """Drop all per-image state so the instance can take a new input."""
        self._clear()

    def load(self, data: bytes, file_name: str = '') -> Preview:
        """Decode and project an image, then wait for a selection.

        Raises:
            UnreadableInputError: if ``data`` is not a readable image.
        """
        self._require(IDLE)
        self.file_name = file_name
        try:
            image = Image.open(io.BytesIO(data))
            image.load()
        except (UnidentifiedImageError, OSError, ValueError,
                Image.DecompressionBombError) as e:
            self.state = FAILED
            self.failure_reason = UNREADABLE_INPUT
            raise UnreadableInputError(
                f'Could not read {file_name or "image"}: {e}') from e

        self.source_format = (image.format or '').lower()
        self._image = image
        self.container = decode(data)
        self.state = DECODED

        self.fields = project(self.container, self.catalog)
        self.state = PROJECTED

        self.orientation = read_orientation(self.container)
        width, height = oriented_size(image.width, image.height, self.orientation)
        self.state = AWAITING_SELECTION
        logger.debug('%s: %d field(s), orientation %d, %dx%d',
                     file_name or '<bytes>', len(self.fields), self.orientation,
                     width, height)
        return Preview(fields=list(self.fields), orientation=self.orientation,
                       width=width, height=height, source_format=self.source_format)

    def fields_after(self, selection: SelectionMap) -> List[Field]:
        """Re-filter the projected fields for a selection, without re-running."""
        self._require(AWAITING_SELECTION, ENCODED)
        return filter_fields(self.fields, selection)

    def finish(self, selection: SelectionMap, output_format: str = 'same',
               quality: int = DEFAULT_QUALITY, include_report: bool = False,
               reorient: bool = True) -> RedactionResult:
        """Resume with the caller's selection and produce the output image.

        Args:
            selection: Map of field key to strip flag. Missing keys are stripped.
            output_format: ``same``, ``jpeg`` or ``png``.
            quality: 1-100, clamped to the safe encode range.
            include_report: Attach a RedactionReport to the result.
            reorient: Bake the orientation into the pixels. When False the
                pixels are left as stored and the Orientation tag may be kept.
        """
        self._require(AWAITING_SELECTION)
        fmt = resolve_output_format(output_format, self.source_format)
        quality = clamp_quality(quality)

        params = params_for(self.orientation) if reorient else OrientationParams()
        rendered = apply_to_image(_pixel_mode(self._image), params)
        reoriented = not params.is_identity
        self.state = TRANSFORMED

        filtered = None
        if fmt in EXIF_CAPABLE_FORMATS:
            filtered = rebuild(self.container, selection, reoriented, self.catalog)
            self.state = RECOMPOSED
        else:
            logger.info('%s output cannot carry EXIF; writing stripped output', fmt)

        carrier = _render(rendered, fmt, quality)
        if filtered is None:
            data = strip_all(carrier)
            embedded = False
        else:
            data = encode(filtered, carrier)
            embedded = not filtered.is_empty() and data != carrier

        report = None
        if include_report:
            report = build_report(self.file_name, selection, self.fields)

        result = RedactionResult(
            data=data,
            output_format=fmt,
            fields_before=list(self.fields),
            fields_after=filter_fields(self.fields, selection),
            reoriented=reoriented,
            metadata_embedded=embedded,
            width=rendered.width,
            height=rendered.height,
            report=report,
        )
        self._image = None
        self.state = ENCODED
        return result


def redact_bytes(data: bytes, selection: SelectionMap, file_name: str = '',
                 output_format: str = 'same', quality: int = DEFAULT_QUALITY,
                 include_report: bool = False, reorient: bool = True) -> RedactionResult:
    """Run a whole pipeline in one call.

    Raises:
        UnreadableInputError: if ``data`` is not a readable image.
    """
    pipeline = RedactionPipeline()
    pipeline.load(data, file_name)
    return pipeline.finish(selection, output_format=output_format, quality=quality,
                           include_report=include_report, reorient=reorient)
