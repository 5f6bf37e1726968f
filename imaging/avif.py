"""AVIF codec stage.

Needs a Pillow build with libavif (the official wheels from 11.3 on ship it).
"""
import io

from PIL import Image, features

from models.request import AvifOptions
from pipeline.errors import EncodeError

SEED = 0x9E37_79B9_0000_0001


def is_available() -> bool:
    return bool(features.check("avif"))


def encode(image: Image.Image, options: AvifOptions) -> bytes:
    if not is_available():
        raise EncodeError("AVIF encoding is not supported by the installed Pillow build")
    if image.mode not in ("RGB", "RGBA"):
        image = image.convert("RGBA" if "A" in image.getbands() else "RGB")
    buf = io.BytesIO()
    try:
        image.save(buf, format="AVIF", quality=options.quality, speed=options.speed)
    except (OSError, ValueError, KeyError) as exc:
        raise EncodeError(f"AVIF encoding failed: {exc}") from exc
    return buf.getvalue()
