"""
Codon changes for variants of any length (MNVs, insertions, deletions and,
as a degenerate case, SNVs).
"""
import logging
from typing import Optional

from ..sequence import CODON_SIZE, reverse_complement, round_to_codon
from .base import CodonChange, CodonChangeResult, simplify_codons, unknown_padding

_logger = logging.getLogger(__name__)


class CodonChangeMnv(CodonChange):
    """Computes the codon window spanned by a variant and rebuilds it with the alternate allele."""

    return_now = False
    require_net_cds_change = True

    def codons_old_new(self) -> Optional[CodonChangeResult]:
        transcript = self.transcript
        variant = self.variant

        if not transcript.intersects(variant.position):
            return None

        # Does it intersect the CDS?
        if variant.one_based_end < transcript.cds_one_based_start:
            return None
        if variant.one_based_start > transcript.cds_one_based_end:
            return None

        # Base numbers relative to the CDS start
        sc_start, sc_end = transcript.cds_span(variant.one_based_start, variant.one_based_end)
        codon_start_number, codon_start_index = divmod(sc_start, CODON_SIZE)

        # Nothing coding between the two ends (e.g. the variant sits in an intron)
        if sc_end < sc_start:
            return None

        # Round to codon boundaries
        sc_start3 = round_to_codon(sc_start, end=False)
        sc_end3 = round_to_codon(sc_end, end=True)
        if sc_end3 == sc_start3:
            sc_end3 += CODON_SIZE

        coding_sequence = transcript.coding_sequence
        last_offset = len(coding_sequence) - 1
        padding = unknown_padding(sc_end3 - last_offset)
        if padding:
            sc_end3 = last_offset

        codons_reference = coding_sequence[sc_start3:sc_end3 + 1]

        net_change = self.net_cds_change()
        prepend = codons_reference[:sc_start - sc_start3]
        append = codons_reference[len(codons_reference) - (sc_end3 - sc_end):] if sc_end3 > sc_end else ""
        codons_alternate = prepend + net_change + append

        codons_reference += padding
        codons_alternate += padding

        codons_reference, codons_alternate, codon_start_number = simplify_codons(
            codons_reference, codons_alternate, codon_start_number
        )
        _logger.debug(
            f"{variant} on {transcript.transcript_id}: CDS offsets {sc_start}-{sc_end}, "
            f"codon {codon_start_number} {codons_reference}/{codons_alternate}"
        )
        return CodonChangeResult(
            cds_start=transcript.cds_start_stranded,
            cds_end=transcript.cds_end_stranded,
            codon_start_number=codon_start_number,
            codon_start_index=codon_start_index,
            codons_reference=codons_reference,
            codons_alternate=codons_alternate,
            padding=padding,
            net_cds_change=net_change,
        )

    def net_cds_change(self) -> str:
        """
        The alternate allele projected onto the coding part of every exon.

        A deletion or MNV may span several exons; each exon contributes its own
        fragment, oriented on that exon's strand, in transcript order.
        """
        if self.variant.length > 1:
            fragments = []
            for exon in self.transcript.exons_sorted_strand:
                coding = self.transcript.coding_interval(exon)
                if coding is None:
                    continue
                seq = self.variant.net_change(coding)
                fragments.append(seq if exon.is_strand_plus() else reverse_complement(seq))
            return "".join(fragments)

        return super().net_cds_change()
