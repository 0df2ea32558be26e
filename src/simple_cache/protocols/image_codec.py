"""Image codec protocol.

Decoding and encoding images is not the cache's job. The cache service
hands decoded images to a codec on the way to disk and back.
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ImageCodec(Protocol):
    """Protocol for image encode/decode pairs."""

    def encode(self, image: Any) -> bytes:
        """Encode a decoded image into bytes for the disk tier.

        Args:
            image: Decoded in-memory image

        Returns:
            Encoded bytes

        Raises:
            DecodeError: If the image cannot be encoded
        """
        ...

    def decode(self, data: bytes) -> Any:
        """Decode bytes read from the disk tier.

        Args:
            data: Encoded image bytes

        Returns:
            Decoded in-memory image

        Raises:
            DecodeError: If the bytes are not a readable image
        """
        ...
