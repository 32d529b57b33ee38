"""Kroki payload encoding (zlib + URL-safe Base64)."""

from .lib import decode_payload, encode_payload

__all__ = ["decode_payload", "encode_payload"]
