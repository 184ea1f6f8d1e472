"""
Runs the codon change engines over many transcripts and variants.
"""
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List, Optional

from ..effects import VariantEffect, VariantEffects
from ..models import Transcript, Variant
from .base import CodonChange

_logger = logging.getLogger(__name__)


class VariantAnnotator:
    """Annotates variants against a set of transcripts, collecting effects into one sink."""

    def __init__(self, variant_effects: Optional[VariantEffects] = None):
        """Initialize with the collector effects are written into.

        Args:
            variant_effects: Shared effect collector. A new one is created if None.
        """
        self.variant_effects = variant_effects if variant_effects is not None else VariantEffects()

    def annotate_pair(self, variant: Variant, transcript: Transcript) -> Optional[VariantEffect]:
        """Run the codon change engine for one pair, skipping transcripts it cannot apply to."""
        if not transcript.intersects(variant.position):
            return None
        if not transcript.is_coding:
            _logger.debug(f"Skipping non-coding transcript {transcript.transcript_id} for {variant}")
            return None
        return CodonChange.factory(variant, transcript, self.variant_effects).change_codon()

    def annotate(self, variant: Variant, transcripts: Iterable[Transcript]) -> List[VariantEffect]:
        """Annotate one variant against every transcript.

        Args:
            variant: The variant to annotate.
            transcripts: Candidate transcripts; those the variant misses are skipped.

        Returns:
            The effects recorded for this variant, in transcript order.
        """
        effects = []
        for transcript in transcripts:
            effect = self.annotate_pair(variant, transcript)
            if effect is not None:
                effects.append(effect)
        _logger.debug(f"{variant}: {len(effects)} codon change(s)")
        return effects

    def annotate_all(
        self,
        variants: Iterable[Variant],
        transcripts: Iterable[Transcript],
        max_workers: Optional[int] = None
    ) -> VariantEffects:
        """Annotate every (variant, transcript) pair, in parallel.

        Effects are appended in completion order. An error for any pair is re-raised
        once the pool has shut down.

        Args:
            variants: Variants to annotate.
            transcripts: Transcripts to annotate against. They are shared read-only.
            max_workers: Thread pool size (ThreadPoolExecutor default if None).

        Returns:
            The shared effect collector.
        """
        transcripts = list(transcripts)
        variants = list(variants)
        _logger.info(f"Annotating {len(variants)} variant(s) against {len(transcripts)} transcript(s)")
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = [
                executor.submit(self.annotate_pair, variant, transcript)
                for variant in variants
                for transcript in transcripts
            ]
        for future in futures:
            future.result()
        _logger.info(f"Recorded {len(self.variant_effects)} effect(s)")
        return self.variant_effects
