"""
Shared machinery for the codon change engines.
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Tuple

from ..effects import EffectType, VariantEffect, VariantEffects
from ..exceptions import CodonPaddingError, NoncodingTranscriptError
from ..models import Transcript, Variant
from ..sequence import CODON_SIZE, UNKNOWN_BASE

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CodonChangeResult:
    """Everything one codon change computation works out for a (variant, transcript) pair."""
    cds_start: int
    cds_end: int
    codon_start_number: int
    codon_start_index: int
    codons_reference: str
    codons_alternate: str
    padding: str = ""
    net_cds_change: Optional[str] = None


def unknown_padding(deficit: int) -> str:
    """
    Placeholder bases needed to complete the last codon of an incomplete coding sequence.

    Args:
        deficit: How many bases the rounded codon window runs past the last coding base.

    Returns:
        An empty string when there is no deficit, otherwise one or two unknown bases.

    Raises:
        CodonPaddingError: If the window overruns by more than one incomplete codon.
    """
    if deficit <= 0:
        return ""
    if deficit < CODON_SIZE:
        return UNKNOWN_BASE * deficit
    raise CodonPaddingError(
        f"Sanity check failed. Number of '{UNKNOWN_BASE}' padding is {deficit}. "
        f"CDS bounds and coding sequence are inconsistent."
    )


def simplify_codons(reference: str, alternate: str, codon_number: int) -> Tuple[str, str, int]:
    """
    Drop leading codons that the reference and alternate windows share.

    Args:
        reference: Reference codons.
        alternate: Alternate codons.
        codon_number: Zero-based index of the first codon in the windows.

    Returns:
        The trimmed reference and alternate codons and the index of the first
        codon that differs.
    """
    while len(reference) >= CODON_SIZE and len(alternate) >= CODON_SIZE:
        if reference[:CODON_SIZE].upper() != alternate[:CODON_SIZE].upper():
            break
        reference = reference[CODON_SIZE:]
        alternate = alternate[CODON_SIZE:]
        codon_number += 1
    return reference, alternate, codon_number


class CodonChange(ABC):
    """
    Works out the codons a variant changes on one transcript and records the effect.

    An instance handles a single (variant, transcript) pair. The transcript is only
    read; all per-call state lives in the returned :class:`CodonChangeResult`.
    """

    # Stop after the first exon that yields a change
    return_now: bool = False
    # Whether the alternate codons are built from the variant's net change on the CDS
    require_net_cds_change: bool = False

    def __init__(self, variant: Variant, transcript: Transcript, variant_effects: VariantEffects):
        self.variant = variant
        self.transcript = transcript
        self.variant_effects = variant_effects

    @staticmethod
    def factory(variant: Variant, transcript: Transcript, variant_effects: VariantEffects) -> 'CodonChange':
        """Pick the engine for a variant: the single-base path for SNVs, the general one otherwise."""
        # avoid circular imports
        from .mnv import CodonChangeMnv
        from .snv import CodonChangeSnv

        if variant.is_snv:
            return CodonChangeSnv(variant, transcript, variant_effects)
        return CodonChangeMnv(variant, transcript, variant_effects)

    def change_codon(self) -> Optional[VariantEffect]:
        """
        Compute the codon change and record a generic CODON_CHANGE effect.

        Returns:
            The recorded effect, or None if the variant misses the transcript's coding bases.

        Raises:
            NoncodingTranscriptError: If the transcript has no exons or no coding sequence.
            CodonPaddingError: If the transcript's CDS bounds and coding sequence disagree.
        """
        self._check_transcript()
        result = self.codons_old_new()
        if result is None:
            _logger.debug(f"{self.variant} does not change any codon of {self.transcript.transcript_id}")
            return None

        # Generic, low priority: downstream classifiers may override it
        effect = VariantEffect(
            transcript_id=self.transcript.transcript_id,
            effect_type=EffectType.CODON_CHANGE,
            generic_low_priority=True,
            variant_id=self.variant.variant_id,
            codon_number=result.codon_start_number,
            codon_index=result.codon_start_index,
            codons_reference=result.codons_reference,
            codons_alternate=result.codons_alternate,
            transcript=self.transcript,
        )
        self.variant_effects.add(effect)
        return effect

    def _check_transcript(self) -> None:
        if not self.transcript.exons:
            raise NoncodingTranscriptError(f"Transcript {self.transcript.transcript_id} has no exons")
        if not self.transcript.is_coding or not self.transcript.coding_sequence:
            raise NoncodingTranscriptError(
                f"Transcript {self.transcript.transcript_id} has no coding sequence"
            )

    @abstractmethod
    def codons_old_new(self) -> Optional[CodonChangeResult]:
        """Work out the reference and alternate codons, or None if no codon is touched."""

    def net_cds_change(self) -> str:
        """The alternate allele as it reads on the transcript's strand."""
        return self.variant.net_change_stranded(self.transcript.is_strand_plus())
