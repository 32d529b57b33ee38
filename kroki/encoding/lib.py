"""Kroki payload encoding.

Diagram sources travel in the request path: zlib-compressed, Base64
encoded, then made URL-safe by replacing ``+`` with ``-`` and ``/`` with
``_``. Padding is kept.

See: https://docs.kroki.io/kroki/setup/encode-diagram/
"""

import base64
import zlib

_URL_SAFE = str.maketrans({"+": "-", "/": "_"})
_STANDARD = str.maketrans({"-": "+", "_": "/"})


def encode_payload(specification: str) -> str:
    """Encode a diagram source for use in a Kroki URI.

    Args:
        specification: Diagram source text.

    Returns:
        URL-safe Base64 token of the zlib-compressed UTF-8 source.
    """
    compressed = zlib.compress(specification.encode("utf-8"), 9)
    return base64.b64encode(compressed).decode("ascii").translate(_URL_SAFE)


def decode_payload(token: str) -> str:
    """Recover the diagram source from an encoded token.

    Args:
        token: Token produced by :func:`encode_payload`.

    Returns:
        Original diagram source.

    Raises:
        ValueError: If the token is not valid Base64 or not a zlib stream.
    """
    try:
        compressed = base64.b64decode(token.translate(_STANDARD), validate=True)
        return zlib.decompress(compressed).decode("utf-8")
    except (ValueError, zlib.error) as e:
        raise ValueError(f"Invalid Kroki payload: {e}") from e


__all__ = ["decode_payload", "encode_payload"]
