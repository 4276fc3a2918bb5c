import struct

from hashcalc.encoding import to_hex
from hashcalc.logger import get_logger
from hashcalc.padding import BLOCK_SIZE, sha256_pad, split_blocks

logger = get_logger(__name__)

MASK32 = 0xFFFFFFFF

# Initial hash value (first 32-bits of the fractional parts of the square roots of the first 8 primes)
H0 = (
    0x6a09e667, 0xbb67ae85, 0x3c6ef372, 0xa54ff53a,
    0x510e527f, 0x9b05688c, 0x1f83d9ab, 0x5be0cd19,
)

# SHA-256 round constants (first 32-bits of the fractional parts of the cube roots of the first 64 primes)
K = (
    0x428a2f98, 0x71374491, 0xb5c0fbcf, 0xe9b5dba5,
    0x3956c25b, 0x59f111f1, 0x923f82a4, 0xab1c5ed5,
    0xd807aa98, 0x12835b01, 0x243185be, 0x550c7dc3,
    0x72be5d74, 0x80deb1fe, 0x9bdc06a7, 0xc19bf174,
    0xe49b69c1, 0xefbe4786, 0x0fc19dc6, 0x240ca1cc,
    0x2de92c6f, 0x4a7484aa, 0x5cb0a9dc, 0x76f988da,
    0x983e5152, 0xa831c66d, 0xb00327c8, 0xbf597fc7,
    0xc6e00bf3, 0xd5a79147, 0x06ca6351, 0x14292967,
    0x27b70a85, 0x2e1b2138, 0x4d2c6dfc, 0x53380d13,
    0x650a7354, 0x766a0abb, 0x81c2c92e, 0x92722c85,
    0xa2bfe8a1, 0xa81a664b, 0xc24b8b70, 0xc76c51a3,
    0xd192e819, 0xd6990624, 0xf40e3585, 0x106aa070,
    0x19a4c116, 0x1e376c08, 0x2748774c, 0x34b0bcb5,
    0x391c0cb3, 0x4ed8aa4a, 0x5b9cca4f, 0x682e6ff3,
    0x748f82ee, 0x78a5636f, 0x84c87814, 0x8cc70208,
    0x90befffa, 0xa4506ceb, 0xbef9a3f7, 0xc67178f2,
)

#####################################
# Bitwise helpers
#####################################

def right_rotate(value: int, bits: int) -> int:
    """
    Right rotate a 32-bit integer.
    """
    return ((value >> bits) | (value << (32 - bits))) & MASK32

def small_sigma0(x: int) -> int:
    return right_rotate(x, 7) ^ right_rotate(x, 18) ^ (x >> 3)

def small_sigma1(x: int) -> int:
    return right_rotate(x, 17) ^ right_rotate(x, 19) ^ (x >> 10)

def big_sigma0(x: int) -> int:
    return right_rotate(x, 2) ^ right_rotate(x, 13) ^ right_rotate(x, 22)

def big_sigma1(x: int) -> int:
    return right_rotate(x, 6) ^ right_rotate(x, 11) ^ right_rotate(x, 25)

def ch(x: int, y: int, z: int) -> int:
    return (x & y) ^ (~x & z)

def maj(x: int, y: int, z: int) -> int:
    return (x & y) ^ (x & z) ^ (y & z)

#####################################
# Compression
#####################################

def message_schedule(block: bytes) -> list[int]:
    """
    Expand a 64-byte block into the 64-word message schedule W[0..63].
    """
    W = list(struct.unpack('>16L', block))
    for i in range(16, 64):
        W.append((small_sigma1(W[i-2]) + W[i-7] + small_sigma0(W[i-15]) + W[i-16]) & MASK32)
    return W

def sha256_compress_block(block: bytes, state: tuple[int, ...]) -> tuple[int, ...]:
    """
    Compress a single 512-bit block into the running hash state.

    Returns the new state as a tuple of 8 32-bit integers; the input state
    is left untouched.
    """
    if len(block) != BLOCK_SIZE:
        raise ValueError(f"block must be {BLOCK_SIZE} bytes, got {len(block)}")
    if len(state) != 8:
        raise ValueError(f"state must hold 8 words, got {len(state)}")

    W = message_schedule(block)
    a, b, c, d, e, f, g, h = state

    for i in range(64):
        temp1 = (h + big_sigma1(e) + ch(e, f, g) + K[i] + W[i]) & MASK32
        temp2 = (big_sigma0(a) + maj(a, b, c)) & MASK32

        h = g
        g = f
        f = e
        e = (d + temp1) & MASK32
        d = c
        c = b
        b = a
        a = (temp1 + temp2) & MASK32

    return tuple((s + v) & MASK32 for s, v in zip(state, (a, b, c, d, e, f, g, h)))

def pack_state(state: tuple[int, ...]) -> bytes:
    return struct.pack('>8I', *state)

#####################################
# Public API
#####################################

def _as_bytes(message) -> bytes:
    # bytes(int) would silently build a zero-filled buffer
    return memoryview(message).tobytes()

def digest(message: bytes) -> bytes:
    """
    Compute the 32-byte SHA-256 digest of ``message``.

    Pure function: the hash state lives only for the duration of the call,
    so concurrent callers need no coordination.
    """
    state = H0
    for block in split_blocks(sha256_pad(_as_bytes(message))):
        state = sha256_compress_block(block, state)
    return pack_state(state)

def hexdigest(message: bytes) -> str:
    """
    SHA-256 digest of ``message`` as 64 lowercase hex characters.
    """
    return to_hex(digest(message))

def sha256_trace(message: bytes) -> dict:
    """
    Hash ``message`` while recording every intermediate step.

    The returned dict is JSON-serializable: the padded message and blocks in
    hex, one entry per block with the state before and after compression,
    and the final digest.
    """
    message = _as_bytes(message)
    trace = {}
    trace["originalMessage"] = message.decode("utf-8", errors="replace")
    padded = sha256_pad(message)
    trace["padded"] = padded.hex()
    blocks = split_blocks(padded)
    trace["blocks"] = [blk.hex() for blk in blocks]

    rounds = []
    state = H0
    for index, block in enumerate(blocks):
        new_state = sha256_compress_block(block, state)
        rounds.append({
            "block": index,
            "inputState": pack_state(state).hex(),
            "outputState": pack_state(new_state).hex(),
        })
        state = new_state
    trace["rounds"] = rounds

    final_digest = pack_state(state).hex()
    trace["finalDigest"] = final_digest
    logger.debug("Traced %d block(s), digest=%s", len(blocks), final_digest)
    return trace
