"""
Single-base substitution fast path.
"""
import logging
from typing import Optional

from ..models import Exon
from ..sequence import CODON_SIZE
from .base import CodonChange, CodonChangeResult, simplify_codons, unknown_padding

_logger = logging.getLogger(__name__)


class CodonChangeSnv(CodonChange):
    """
    Replaces one base of one codon.

    An SNV touches at most one exon, so the search stops at the first exon that
    yields a change. Results are identical to :class:`~varcodon.codon_change.mnv.CodonChangeMnv`.
    """

    return_now = True
    require_net_cds_change = False

    def codons_old_new(self) -> Optional[CodonChangeResult]:
        result = None
        for exon in self.transcript.exons_sorted_strand:
            if not exon.intersects(self.variant.position):
                continue
            result = self._codon_change_single(exon)
            if result is not None and self.return_now:
                break
        return result

    def _codon_change_single(self, exon: Exon) -> Optional[CodonChangeResult]:
        transcript = self.transcript
        pos = self.variant.one_based_start
        if not transcript.cds_one_based_start <= pos <= transcript.cds_one_based_end:
            return None

        offset = transcript.base_number_cds(pos, use_prev_base_if_intronic=False)
        codon_number, codon_index = divmod(offset, CODON_SIZE)
        codon_start = codon_number * CODON_SIZE

        coding_sequence = transcript.coding_sequence
        padding = unknown_padding(codon_start + CODON_SIZE - len(coding_sequence))
        codons_reference = coding_sequence[codon_start:codon_start + CODON_SIZE]
        codons_alternate = (
            codons_reference[:codon_index] + self.net_cds_change() + codons_reference[codon_index + 1:]
        )
        codons_reference += padding
        codons_alternate += padding

        codons_reference, codons_alternate, codon_number = simplify_codons(
            codons_reference, codons_alternate, codon_number
        )
        _logger.debug(
            f"{self.variant} in exon {exon} of {transcript.transcript_id}: "
            f"codon {codon_number} {codons_reference}/{codons_alternate}"
        )
        return CodonChangeResult(
            cds_start=transcript.cds_start_stranded,
            cds_end=transcript.cds_end_stranded,
            codon_start_number=codon_number,
            codon_start_index=codon_index,
            codons_reference=codons_reference,
            codons_alternate=codons_alternate,
            padding=padding,
        )
