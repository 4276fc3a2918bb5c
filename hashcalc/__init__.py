"""hashcalc: SHA-256 computed from scratch, with a CLI and an HTTP API."""

from hashcalc.encoding import from_hex, to_hex
from hashcalc.errors import HashcalcError, InvalidDigestError, MessageTooLargeError
from hashcalc.sha256 import digest, hexdigest, sha256_trace

__all__ = [
    "digest",
    "hexdigest",
    "sha256_trace",
    "to_hex",
    "from_hex",
    "HashcalcError",
    "InvalidDigestError",
    "MessageTooLargeError",
]

__version__ = "0.1.0"
