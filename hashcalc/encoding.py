from hashcalc.errors import InvalidDigestError

DIGEST_SIZE = 32
HEX_DIGEST_LENGTH = DIGEST_SIZE * 2


def to_hex(digest: bytes) -> str:
    """Render a digest as lowercase hex, two characters per byte."""
    return bytes(digest).hex()


def from_hex(text: str) -> bytes:
    """
    Parse a 64-character hex digest back to its 32 raw bytes.

    Upper-case characters are accepted; whitespace is not.
    """
    if len(text) != HEX_DIGEST_LENGTH:
        raise InvalidDigestError(
            f"expected {HEX_DIGEST_LENGTH} hex characters, got {len(text)}"
        )
    try:
        raw = bytes.fromhex(text)
    except ValueError as e:
        raise InvalidDigestError(f"not a hex digest: {text!r}") from e
    # fromhex skips spaces between byte pairs
    if len(raw) != DIGEST_SIZE:
        raise InvalidDigestError(f"not a hex digest: {text!r}")
    return raw
