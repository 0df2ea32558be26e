"""Pillow implementation of ImageCodec.

Images go to disk as JPEG at the configured quality (100 by default).
"""

from io import BytesIO

from PIL import Image, UnidentifiedImageError

from simple_cache.config import settings
from simple_cache.exceptions import DecodeError


class PillowImageCodec:
    """Encode ``PIL.Image.Image`` objects to JPEG and decode any format Pillow reads."""

    def __init__(self, quality: int | None = None) -> None:
        """Initialize the codec.

        Args:
            quality: JPEG quality 1-100. Defaults to settings.
        """
        self._quality = quality or settings.image_quality

    def encode(self, image: Image.Image) -> bytes:
        """Encode an image as JPEG.

        JPEG has no alpha channel, so other modes are converted to RGB.

        Raises:
            DecodeError: If Pillow cannot write the image
        """
        if image.mode not in ("RGB", "L"):
            image = image.convert("RGB")
        buf = BytesIO()
        try:
            image.save(buf, format="JPEG", quality=self._quality)
        except (OSError, ValueError) as e:
            raise DecodeError("<image>", original_error=e) from e
        return buf.getvalue()

    def decode(self, data: bytes) -> Image.Image:
        """Decode image bytes, loading pixel data eagerly.

        Raises:
            DecodeError: If the bytes are not a readable image
        """
        try:
            image = Image.open(BytesIO(data))
            image.load()
        except (UnidentifiedImageError, OSError, ValueError) as e:
            raise DecodeError("<image>", original_error=e) from e
        return image
