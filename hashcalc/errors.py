"""Exceptions raised by hashcalc."""


class HashcalcError(Exception):
    """Base class for hashcalc errors."""


class MessageTooLargeError(HashcalcError, ValueError):
    """The message bit length does not fit the 64-bit length field."""


class InvalidDigestError(HashcalcError, ValueError):
    """A hex string is not a well-formed SHA-256 digest."""
