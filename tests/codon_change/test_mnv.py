"""Tests for the general (MNV / indel) codon change engine."""
import pytest

from varcodon.codon_change import CodonChangeMnv
from varcodon.sequence import CODON_SIZE, reverse_complement


def _result(variant, transcript):
    return CodonChangeMnv(variant, transcript, None).codons_old_new()


class TestSingleExon:
    """Codon windows on a single-exon transcript with coding sequence ATG AAA CCC TAA."""

    def test_substitution(self, plus_transcript, make_variant, variant_effects):
        effect = CodonChangeMnv(make_variant(106, "A", "G"), plus_transcript, variant_effects).change_codon()
        assert (effect.codons_reference, effect.codons_alternate) == ("AAA", "GAA")
        assert effect.codon_number == 1
        assert effect.codon_index == 0
        assert len(variant_effects) == 1

    def test_deletion_within_codon(self, plus_transcript, make_variant):
        result = _result(make_variant(107, "AA", ""), plus_transcript)
        assert (result.codons_reference, result.codons_alternate) == ("AAA", "A")
        assert result.codon_start_number == 1
        assert result.codon_start_index == 1
        assert result.net_cds_change == ""
        assert result.padding == ""

    def test_insertion(self, plus_transcript, make_variant):
        result = _result(make_variant(105, "G", "GTTT"), plus_transcript)
        # ATG is unchanged, leaving only the inserted codon
        assert (result.codons_reference, result.codons_alternate) == ("", "TTT")
        assert result.codon_start_number == 1
        assert result.codon_start_index == 2

    def test_unchanged_leading_codon_is_dropped(self, plus_transcript, make_variant):
        result = _result(make_variant(108, "AC", "AG"), plus_transcript)
        assert (result.codons_reference, result.codons_alternate) == ("CCC", "GCC")
        assert result.codon_start_number == 2
        assert result.codon_start_index == 2

    def test_deletion_starting_in_utr_is_clipped(self, plus_transcript, make_variant):
        result = _result(make_variant(101, "GGAT", "G"), plus_transcript)
        assert (result.codons_reference, result.codons_alternate) == ("ATG", "G")
        assert result.codon_start_number == 0

    def test_deletion_ending_in_utr_is_clipped(self, plus_transcript, make_variant):
        result = _result(make_variant(113, "AATT", "A"), plus_transcript)
        assert (result.codons_reference, result.codons_alternate) == ("TAA", "TA")
        assert result.codon_start_number == 3
        assert result.codon_start_index == 1

    def test_cds_bounds_are_reported_in_transcript_orientation(
        self, plus_transcript, minus_transcript, make_variant
    ):
        result = _result(make_variant(106, "A", "G"), plus_transcript)
        assert (result.cds_start, result.cds_end) == (103, 114)
        result = _result(make_variant(115, "T", "C"), minus_transcript)
        assert (result.cds_start, result.cds_end) == (118, 107)


class TestNoChange:
    """Variants that leave every codon untouched produce no effect."""

    @pytest.mark.parametrize("pos, ref, alt, sequence_id", [
        (101, "G", "T", "chr1"),       # 5' UTR
        (115, "TT", "", "chr1"),       # 3' UTR
        (106, "A", "G", "chr2"),       # other sequence
        (500, "A", "G", "chr1"),       # outside the transcript
    ])
    def test_no_effect(self, pos, ref, alt, sequence_id, plus_transcript, make_variant, variant_effects):
        variant = make_variant(pos, ref, alt, sequence_id=sequence_id)
        assert CodonChangeMnv(variant, plus_transcript, variant_effects).change_codon() is None
        assert len(variant_effects) == 0

    def test_intronic_deletion(self, spliced_transcript, make_variant, variant_effects):
        variant = make_variant(1020, "A" * 11, "A")
        assert CodonChangeMnv(variant, spliced_transcript, variant_effects).change_codon() is None
        assert len(variant_effects) == 0


class TestSplicedTranscript:
    """Variants crossing the intron of a two-exon transcript (ATG GCA GAT TCC TGA)."""

    def test_deletion_across_intron(self, spliced_transcript, make_variant):
        variant = make_variant(1009, "AG" + "N" * 100 + "AT", "A")
        result = _result(variant, spliced_transcript)
        # Offsets are CDS-relative, never genomic
        assert result.codon_start_number == 2
        assert result.codon_start_index == 2
        assert (result.codons_reference, result.codons_alternate) == ("GAT", "")
        assert result.net_cds_change == "A"

    def test_substitution_across_intron(self, spliced_transcript, make_variant):
        variant = make_variant(1010, "G" + "N" * 100 + "A", "C" + "N" * 100 + "T")
        result = _result(variant, spliced_transcript)
        # One fragment from each exon; intronic bases never reach the codons
        assert result.net_cds_change == "CT"
        assert (result.codons_reference, result.codons_alternate) == ("GAT", "CTT")
        assert result.codon_start_number == 2

    def test_substitution_in_second_exon(self, spliced_transcript, make_variant):
        result = _result(make_variant(1113, "TC", "GG"), spliced_transcript)
        assert (result.codons_reference, result.codons_alternate) == ("TCC", "GGC")
        assert result.codon_start_number == 3
        assert result.codon_start_index == 0


class TestMinusStrand:
    """The minus-strand transcript carries the same mRNA as the plus-strand one."""

    def test_substitution(self, minus_transcript, make_variant):
        result = _result(make_variant(115, "T", "C"), minus_transcript)
        assert (result.codons_reference, result.codons_alternate) == ("AAA", "GAA")
        assert result.codon_start_number == 1
        assert result.codon_start_index == 0

    def test_reference_codon_is_reverse_complement_of_genome(self, minus_transcript, make_variant):
        result = _result(make_variant(115, "T", "C"), minus_transcript)
        exon = minus_transcript.exons[0]
        assert result.codons_reference == reverse_complement(exon.sequence_between(113, 115))

    @pytest.mark.parametrize("pos, ref, alt", [
        (106, "A", "G"),
        (107, "AA", ""),
        (105, "G", "GTTT"),
        (108, "AC", "AG"),
        (101, "GGAT", ""),
        (113, "AATT", ""),
        (109, "CCC", "AGT"),
    ])
    def test_mirrored_single_exon(self, pos, ref, alt, plus_transcript, make_variant, mirror):
        flip = mirror(220)
        variant = make_variant(pos, ref, alt)
        plus = _result(variant, plus_transcript)
        minus = _result(flip.variant(variant), flip.transcript(plus_transcript))
        assert (minus.codons_reference, minus.codons_alternate) == (plus.codons_reference, plus.codons_alternate)
        assert minus.codon_start_number == plus.codon_start_number

    @pytest.mark.parametrize("pos, ref, alt", [
        (1009, "AG" + "N" * 100 + "AT", "A"),
        (1010, "G" + "N" * 100 + "A", "C" + "N" * 100 + "T"),
        (1112, "T", "C"),
        (1006, "G", "GAAA"),
        (1113, "TC", "GG"),
    ])
    def test_mirrored_spliced(self, pos, ref, alt, spliced_transcript, make_variant, mirror):
        flip = mirror(2200)
        variant = make_variant(pos, ref, alt)
        plus = _result(variant, spliced_transcript)
        minus = _result(flip.variant(variant), flip.transcript(spliced_transcript))
        assert (minus.codons_reference, minus.codons_alternate) == (plus.codons_reference, plus.codons_alternate)
        assert minus.codon_start_number == plus.codon_start_number
        assert minus.net_cds_change == plus.net_cds_change


class TestIncompleteCds:
    """Coding sequences whose length is not a multiple of three are padded with N."""

    def test_one_missing_base(self, truncated_transcript, make_variant):
        transcript = truncated_transcript("ATGAAACCCTA")
        result = _result(make_variant(11, "A", "G", sequence_id="chr2"), transcript)
        assert (result.codons_reference, result.codons_alternate) == ("TAN", "TGN")
        assert result.padding == "N"
        assert result.codon_start_number == 3

    def test_two_missing_bases(self, truncated_transcript, make_variant):
        transcript = truncated_transcript("ATGAAACCCT")
        result = _result(make_variant(10, "T", "C", sequence_id="chr2"), transcript)
        assert (result.codons_reference, result.codons_alternate) == ("TNN", "CNN")
        assert result.padding == "NN"

    def test_complete_codons_are_not_padded(self, truncated_transcript, make_variant):
        transcript = truncated_transcript("ATGAAACCCTA")
        result = _result(make_variant(4, "A", "T", sequence_id="chr2"), transcript)
        assert result.padding == ""
        assert (result.codons_reference, result.codons_alternate) == ("AAA", "TAA")


class TestInvariants:

    VARIANTS = [
        (1004, "A", "G"),
        (1005, "TG", ""),
        (1009, "AG" + "N" * 100 + "AT", "A"),
        (1010, "G" + "N" * 100 + "A", "C" + "N" * 100 + "T"),
        (1111, "A", "ACC"),
        (1115, "CTGA", "C"),
        (1116, "TGAGG", "T"),
        (1002, "TTAT", "T"),
    ]

    @pytest.mark.parametrize("pos, ref, alt", VARIANTS)
    def test_reference_window_is_whole_codons(self, pos, ref, alt, spliced_transcript, make_variant):
        result = _result(make_variant(pos, ref, alt), spliced_transcript)
        assert len(result.codons_reference) % CODON_SIZE == 0
        assert len(result.padding) < CODON_SIZE

    @pytest.mark.parametrize("pos, ref, alt", VARIANTS)
    def test_deterministic(self, pos, ref, alt, spliced_transcript, make_variant):
        variant = make_variant(pos, ref, alt)
        assert _result(variant, spliced_transcript) == _result(variant, spliced_transcript)

    def test_transcript_is_not_modified(self, spliced_transcript, make_variant):
        before = spliced_transcript.model_dump()
        coding_sequence = spliced_transcript.coding_sequence
        _result(make_variant(1009, "AG" + "N" * 100 + "AT", "A"), spliced_transcript)
        assert spliced_transcript.model_dump() == before
        assert spliced_transcript.coding_sequence == coding_sequence
