"""PNG codec stage."""
import io

from PIL import Image

from pipeline.errors import DecodeError, EncodeError

SEED = 0x9E37_79B9_0000_0003

_PNG_MODES = frozenset({"1", "L", "LA", "I", "P", "RGB", "RGBA"})


def decode(data: bytes) -> Image.Image:
    try:
        with Image.open(io.BytesIO(data), formats=["PNG"]) as img:
            img.load()
            return img.copy()
    except (OSError, ValueError, SyntaxError, EOFError, Image.DecompressionBombError) as exc:
        raise DecodeError(f"invalid PNG data: {exc}") from exc


def encode(image: Image.Image) -> bytes:
    if image.mode not in _PNG_MODES:
        image = image.convert("RGBA")
    buf = io.BytesIO()
    try:
        image.save(buf, format="PNG", optimize=True)
    except (OSError, ValueError) as exc:
        raise EncodeError(f"PNG encoding failed: {exc}") from exc
    return buf.getvalue()
