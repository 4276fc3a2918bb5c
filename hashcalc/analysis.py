"""
Statistical sanity checks for the SHA-256 implementation.

Hashes random alphanumeric strings and reports collisions, how evenly the
digests fall into buckets, and how many output bits flip when the first
input character changes (avalanche effect).
"""

import random
import string
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402
from pydantic import BaseModel, Field  # noqa: E402

from hashcalc.logger import get_logger  # noqa: E402
from hashcalc.sha256 import hexdigest  # noqa: E402

logger = get_logger(__name__)


class AnalysisReport(BaseModel):
    samples: int
    collisions: int
    buckets: list[int]
    avalanche_diffs: list[int] = Field(default_factory=list)

    @property
    def avalanche_mean(self) -> float:
        if not self.avalanche_diffs:
            return 0.0
        return sum(self.avalanche_diffs) / len(self.avalanche_diffs)


def random_string(rng: random.Random, min_length: int = 120, max_length: int = 1300) -> str:
    length = rng.randint(min_length, max_length)
    return ''.join(rng.choices(string.ascii_letters + string.digits, k=length))


def bump_first_char(s: str) -> str:
    """Return ``s`` with its first character shifted by one code point (mod 128)."""
    if not s:
        return "\x01"
    return chr((ord(s[0]) + 1) % 128) + s[1:]


def bit_difference(hex_a: str, hex_b: str) -> int:
    """Hamming distance between two hex digests."""
    return bin(int(hex_a, 16) ^ int(hex_b, 16)).count("1")


def _hash_pair(s: str) -> tuple[str, str]:
    return hexdigest(s.encode()), hexdigest(bump_first_char(s).encode())


def run_analysis(
    num_samples: int = 1000,
    num_buckets: int = 64,
    seed: int | None = None,
    min_length: int = 120,
    max_length: int = 1300,
    max_workers: int | None = None,
) -> AnalysisReport:
    rng = random.Random(seed)
    strings = [random_string(rng, min_length, max_length) for _ in range(num_samples)]

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        pairs = list(executor.map(_hash_pair, strings))

    hashes = set()
    collisions = 0
    buckets = [0] * num_buckets
    avalanche_diffs = []

    for digest, mod_digest in pairs:
        # Collision
        if digest in hashes:
            collisions += 1
        else:
            hashes.add(digest)

        # Uniformity
        buckets[int(digest, 16) % num_buckets] += 1

        # Avalanche
        avalanche_diffs.append(bit_difference(digest, mod_digest))

    report = AnalysisReport(
        samples=num_samples,
        collisions=collisions,
        buckets=buckets,
        avalanche_diffs=avalanche_diffs,
    )
    logger.info("Analysis: samples=%d collisions=%d avalanche_mean=%.2f",
                report.samples, report.collisions, report.avalanche_mean)
    return report


def save_plots(report: AnalysisReport, out_dir: Path) -> list[Path]:
    """Write the uniformity and avalanche plots as PNG files into ``out_dir``."""
    out_dir.mkdir(parents=True, exist_ok=True)
    uniformity_path = out_dir / "uniformity_distribution.png"
    avalanche_path = out_dir / "avalanche_boxplot.png"

    # Uniformity Plot
    fig, ax = plt.subplots()
    ax.bar(range(len(report.buckets)), report.buckets)
    ax.set_title("Hash Output Distribution (Uniformity)")
    ax.set_xlabel("Bucket")
    ax.set_ylabel("Count")
    fig.tight_layout()
    fig.savefig(uniformity_path)
    plt.close(fig)

    # Avalanche Boxplot
    fig, ax = plt.subplots()
    ax.boxplot(report.avalanche_diffs)
    ax.set_title("Avalanche Effect - Bit Differences")
    ax.set_ylabel("Bit Differences")
    ax.grid(True)
    fig.savefig(avalanche_path)
    plt.close(fig)

    logger.info("Plots written to %s", out_dir)
    return [uniformity_path, avalanche_path]
