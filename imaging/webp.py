"""WebP codec stage (lossy)."""
import io

from PIL import Image

from models.request import WebpOptions
from pipeline.errors import EncodeError

SEED = 0x9E37_79B9_0000_0004


def encode(image: Image.Image, options: WebpOptions) -> bytes:
    if image.mode not in ("RGB", "RGBA"):
        image = image.convert("RGBA" if "A" in image.getbands() else "RGB")
    buf = io.BytesIO()
    try:
        image.save(buf, format="WEBP", quality=options.quality, method=4)
    except (OSError, ValueError, KeyError) as exc:
        raise EncodeError(f"WebP encoding failed: {exc}") from exc
    return buf.getvalue()
