from .base import (
    CodonChange,
    CodonChangeResult,
    simplify_codons,
    unknown_padding
)
from .annotator import VariantAnnotator
from .mnv import CodonChangeMnv
from .snv import CodonChangeSnv

__all__ = [
    'CodonChange',
    'CodonChangeResult',
    'simplify_codons',
    'unknown_padding',
    'VariantAnnotator',
    'CodonChangeMnv',
    'CodonChangeSnv'
]
