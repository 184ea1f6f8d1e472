__version__ = "0.1.0"

# Import key functions/classes to make them available at the package level
from .codon_change import (
    CodonChange,
    CodonChangeMnv,
    CodonChangeSnv,
    VariantAnnotator
)
from .effects import EffectType, VariantEffect, VariantEffects
from .exceptions import CodonPaddingError, NoncodingTranscriptError, VarCodonError
from .models import (
    Exon,
    Gene,
    Intergenic,
    Interval,
    Strand,
    Transcript,
    Variant,
    VariantType
)

__all__ = [
    'CodonChange',
    'CodonChangeMnv',
    'CodonChangeSnv',
    'VariantAnnotator',
    'EffectType',
    'VariantEffect',
    'VariantEffects',
    'CodonPaddingError',
    'NoncodingTranscriptError',
    'VarCodonError',
    'Exon',
    'Gene',
    'Intergenic',
    'Interval',
    'Strand',
    'Transcript',
    'Variant',
    'VariantType'
]
