"""Tests for payload encoding."""

import base64
import zlib

import pytest

from .lib import decode_payload, encode_payload


def _compressed_bytes(token: str) -> bytes:
    """Undo the character substitution and Base64 step only."""
    return base64.b64decode(token.replace("-", "+").replace("_", "/"))


class TestEncodePayload:
    """Tests for encode_payload."""

    @pytest.mark.unit
    def test_empty_specification_golden(self):
        """The empty source has a fixed token."""
        assert encode_payload("") == "eNoDAAAAAAE="

    @pytest.mark.unit
    def test_deterministic(self):
        """Same input always gives the same token."""
        source = "digraph G { Hello -> World }"
        assert encode_payload(source) == encode_payload(source)

    @pytest.mark.unit
    def test_matches_reference_scheme(self):
        """Token equals zlib + Base64 with +/ substituted."""
        source = "A->B: hi"
        expected = (
            base64.b64encode(zlib.compress(source.encode("utf-8"), 9))
            .decode("ascii")
            .replace("+", "-")
            .replace("/", "_")
        )
        assert encode_payload(source) == expected

    @pytest.mark.unit
    def test_zlib_header_present(self):
        """Compressed bytes carry a zlib header, not a raw deflate stream."""
        assert _compressed_bytes(encode_payload("graph {}"))[:1] == b"\x78"

    @pytest.mark.unit
    def test_no_unsafe_characters(self):
        """Tokens never contain + or /."""
        # Enough varied bytes to make + and / likely in plain Base64.
        sources = [bytes(range(256)).decode("latin-1") * n for n in range(1, 20)]
        for source in sources:
            token = encode_payload(source)
            assert "+" not in token
            assert "/" not in token

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "source",
        [
            "",
            "A -> B",
            "a+b/c=d",
            "line one\nline two\r\n",
            "Ünïcödé → 図 🎨",
        ],
    )
    def test_decompresses_to_source(self, source):
        """A standard zlib decompressor reproduces the source."""
        raw = zlib.decompress(_compressed_bytes(encode_payload(source)))
        assert raw.decode("utf-8") == source


class TestDecodePayload:
    """Tests for decode_payload."""

    @pytest.mark.unit
    def test_reverses_encoding(self):
        """decode_payload undoes encode_payload."""
        source = "@startuml\nAlice -> Bob: 1+1/2\n@enduml"
        assert decode_payload(encode_payload(source)) == source

    @pytest.mark.unit
    def test_known_token(self):
        """Tokens from other encoders decode."""
        assert decode_payload("eNoDAAAAAAE=") == ""

    @pytest.mark.unit
    def test_invalid_base64(self):
        """Garbage raises ValueError."""
        with pytest.raises(ValueError, match="Invalid Kroki payload"):
            decode_payload("not base64!")

    @pytest.mark.unit
    def test_invalid_zlib(self):
        """Valid Base64 that is not zlib raises ValueError."""
        token = base64.b64encode(b"plain text").decode("ascii")
        with pytest.raises(ValueError, match="Invalid Kroki payload"):
            decode_payload(token)
