"""JPEG codec stage.

Decoding applies the EXIF orientation so resized outputs are upright; the
encoder drops alpha since JPEG cannot carry it.
"""
import io

from PIL import Image, ImageOps

from models.request import JpegOptions
from pipeline.errors import DecodeError, EncodeError

SEED = 0x9E37_79B9_0000_0002


def decode(data: bytes) -> Image.Image:
    try:
        with Image.open(io.BytesIO(data), formats=["JPEG"]) as img:
            corrected = ImageOps.exif_transpose(img)
            corrected.load()
            return corrected.copy()  # detach from the buffer before closing
    except (OSError, ValueError, SyntaxError, EOFError, Image.DecompressionBombError) as exc:
        raise DecodeError(f"invalid JPEG data: {exc}") from exc


def encode(image: Image.Image, options: JpegOptions) -> bytes:
    if image.mode not in ("RGB", "L", "CMYK"):
        image = image.convert("RGB")
    buf = io.BytesIO()
    try:
        image.save(buf, format="JPEG", quality=options.quality, optimize=True)
    except (OSError, ValueError) as exc:
        raise EncodeError(f"JPEG encoding failed: {exc}") from exc
    return buf.getvalue()
