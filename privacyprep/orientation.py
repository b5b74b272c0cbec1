"""EXIF orientation -- mapping orientation codes to pixel transforms.

The transform for a code is a clockwise rotation about the image center
followed by mirroring in the rotated frame. Doing the mirror first gives
the wrong result for codes 5 and 7.
"""

from typing import Dict, Tuple

import numpy as np
from PIL import Image

from privacyprep.models import PRIMARY, MetadataContainer, OrientationParams

ORIENTATION_TAG = 274

# 1: normal, 2: flipH, 3: rotate180, 4: flipV, 5: rot90+flipH, 6: rot90,
# 7: rot270+flipH, 8: rot270
ORIENTATION_TABLE: Dict[int, OrientationParams] = {
    1: OrientationParams(),
    2: OrientationParams(flip_horizontal=True),
    3: OrientationParams(rotation=180),
    4: OrientationParams(flip_vertical=True),
    5: OrientationParams(rotation=90, flip_horizontal=True),
    6: OrientationParams(rotation=90),
    7: OrientationParams(rotation=270, flip_horizontal=True),
    8: OrientationParams(rotation=270),
}


def normalize_code(code) -> int:
    """Return ``code`` if it is a valid orientation, else 1."""
    if isinstance(code, bool) or not isinstance(code, int):
        return 1
    return code if code in ORIENTATION_TABLE else 1


def read_orientation(container: MetadataContainer) -> int:
    """Read the Orientation tag of the primary directory (default 1)."""
    value = container.directory(PRIMARY).get(ORIENTATION_TAG)
    if value is None or value.kind != 'unsigned' or value.count != 1:
        return 1
    return normalize_code(value.value[0])


def params_for(code) -> OrientationParams:
    return ORIENTATION_TABLE[normalize_code(code)]


def oriented_size(width: int, height: int, code) -> Tuple[int, int]:
    """Display size of a ``width`` x ``height`` image with this orientation."""
    if params_for(code).swaps_dimensions:
        return height, width
    return width, height


def apply(pixels, width: int, height: int,
          params: OrientationParams) -> Tuple[np.ndarray, int, int]:
    """Remap pixels by ``params``. Returns (pixels, new_width, new_height).

    ``pixels`` may be shaped (height, width), (height, width, channels) or
    flat; the result has the same rank as the input. Sampling is an exact
    index remap, no interpolation.

    Raises:
        ValueError: if the buffer does not hold width x height pixels.
    """
    arr = np.asarray(pixels)
    flat = arr.ndim == 1
    if flat:
        if width <= 0 or height <= 0 or arr.size % (width * height):
            raise ValueError(f'buffer of {arr.size} values is not {width}x{height}')
        arr = arr.reshape(height, width, -1)
    elif arr.shape[:2] != (height, width):
        raise ValueError(f'pixel array {arr.shape} is not {width}x{height}')

    # np.rot90 with negative k rotates clockwise
    if params.rotation:
        arr = np.rot90(arr, k=-(params.rotation // 90))
    if params.flip_horizontal:
        arr = arr[:, ::-1]
    if params.flip_vertical:
        arr = arr[::-1, :]

    new_height, new_width = arr.shape[:2]
    arr = np.ascontiguousarray(arr)
    if flat:
        arr = arr.reshape(-1)
    return arr, new_width, new_height


def apply_to_image(image: Image.Image, params: OrientationParams) -> Image.Image:
    """Render a Pillow image through ``apply``.

    Expects an L, LA, RGB or RGBA image; the mode is inferred back from the
    array shape. The result is always rebuilt from pixel data, so nothing
    in the source's ``info``, such as a JPEG comment, carries over.
    """
    arr = np.asarray(image)
    if not params.is_identity:
        width, height = image.size
        arr, _, _ = apply(arr, width, height, params)
    return Image.fromarray(arr)
