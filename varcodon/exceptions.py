"""
Exception types raised by varcodon.
"""


class VarCodonError(Exception):
    """Base class for all varcodon errors."""


class NoncodingTranscriptError(VarCodonError):
    """
    Raised when a codon change is requested against a transcript that has no
    coding sequence (no CDS bounds, or CDS bounds that cover no exonic bases).
    """


class CodonPaddingError(VarCodonError):
    """
    Raised when the codon window runs past the end of the coding sequence by
    something other than one incomplete codon. The transcript's CDS bounds and
    its coding sequence disagree.
    """
