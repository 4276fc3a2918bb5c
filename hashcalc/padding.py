import struct

from hashcalc.errors import MessageTooLargeError

BLOCK_SIZE = 64

# Largest message (in bytes) whose bit length fits in 64 bits
MAX_MESSAGE_BYTES = (1 << 61) - 1

###############################
# Padding and Splitting
###############################

def sha256_pad(message: bytes) -> bytes:
    """
    Pad the message according to the SHA-256 specification.

    A single 1 bit (0x80) is appended, then zero bytes until the length is
    56 mod 64, then the original bit length as a 64-bit big-endian integer.
    """
    if len(message) > MAX_MESSAGE_BYTES:
        raise MessageTooLargeError(
            f"message of {len(message)} bytes exceeds the 64-bit length field"
        )
    m_len = len(message) * 8  # message length in bits
    padded = bytearray(message)
    padded += b'\x80'
    padded += b'\x00' * ((56 - (len(padded) % BLOCK_SIZE)) % BLOCK_SIZE)
    padded += struct.pack('>Q', m_len)
    return bytes(padded)

def split_blocks(padded_message: bytes, block_size: int = BLOCK_SIZE) -> list[bytes]:
    """
    Split the padded message into 512-bit (64-byte) blocks.
    """
    if len(padded_message) % block_size:
        raise ValueError(
            f"padded message length {len(padded_message)} is not a multiple of {block_size}"
        )
    return [padded_message[i:i+block_size] for i in range(0, len(padded_message), block_size)]
