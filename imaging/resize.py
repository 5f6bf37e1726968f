"""Resize stage.

Bump SEED whenever ``resize`` would produce different pixels for the same
input (resampling filter, crop policy, colour handling). Every fingerprint
passes through this stage, so a bump invalidates all outputs.
"""
from PIL import Image, ImageOps

from pipeline.errors import ResizeError

SEED = 0x5A1E_0001_C0FF_EE01

_RESAMPLE = Image.Resampling.LANCZOS


def resize(image: Image.Image, width: int, height: int, preserve_aspect: bool = True) -> Image.Image:
    """Return a new ``width`` x ``height`` image.

    With ``preserve_aspect`` the source is scaled to cover the target box and
    centre-cropped; otherwise it is stretched.
    """
    if width <= 0 or height <= 0:
        raise ResizeError(f"invalid target size {width}x{height}")
    try:
        if preserve_aspect:
            return ImageOps.fit(image, (width, height), method=_RESAMPLE, centering=(0.5, 0.5))
        return image.resize((width, height), _RESAMPLE)
    except (OSError, ValueError) as exc:
        raise ResizeError(f"failed to resize to {width}x{height}: {exc}") from exc
