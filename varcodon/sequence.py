"""
Nucleotide helpers shared by the models and the codon change engine.
"""

CODON_SIZE = 3

# Placeholder for bases that lie past the end of an incomplete coding sequence
UNKNOWN_BASE = "N"

# IUPAC nucleotide codes, upper and lower case
NUCLEOTIDES = "ACGTUNRYSWKMBDHV"

_COMPLEMENT = str.maketrans(
    "ACGTUNRYSWKMBDHVacgtunryswkmbdhv",
    "TGCAANYRSWMKVHDBtgcaanyrswmkvhdb",
)


def reverse_complement(seq: str) -> str:
    """Computes the reverse complement of a nucleotide sequence, preserving case."""
    return seq.translate(_COMPLEMENT)[::-1]


def is_nucleotide_sequence(seq: str) -> bool:
    """Check that every character is an IUPAC nucleotide code."""
    return seq.upper().strip(NUCLEOTIDES) == ""


def round_to_codon(offset: int, end: bool) -> int:
    """
    Round a zero-based coding offset to a codon boundary.

    Args:
        offset: Zero-based offset into a coding sequence.
        end: If True, round up to the last base of the codon; otherwise round
            down to its first base.

    Returns:
        The rounded offset.
    """
    codon_start = (offset // CODON_SIZE) * CODON_SIZE
    if end:
        return codon_start + CODON_SIZE - 1
    return codon_start
