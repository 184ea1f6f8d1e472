"""Pytest configuration and fixtures for tests."""
from pathlib import Path

import pytest

from varcodon.effects import VariantEffects
from varcodon.models import Exon, Strand, Transcript, Variant
from varcodon.sequence import reverse_complement

FIXTURES_DIR = Path(__file__).parent / "fixtures"

# 2bp 5' UTR, 12bp CDS (ATG AAA CCC TAA), 6bp 3' UTR, at chr1:101-120
SINGLE_EXON_SEQUENCE = "GG" + "ATGAAACCCTAA" + "TTTTTT"

# Two exons separated by a 100bp intron; CDS reads ATG GCA GAT TCC TGA
EXON1_SEQUENCE = "TTT" + "ATGGCAG"       # chr1:1001-1010, CDS from 1004
EXON2_SEQUENCE = "ATTCCTGA" + "GG"       # chr1:1111-1120, CDS to 1118


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR


@pytest.fixture
def plus_transcript():
    """Single-exon plus-strand transcript whose coding sequence is ATGAAACCCTAA."""
    return Transcript(
        transcript_id="TX_PLUS",
        gene_id="GENE1",
        sequence_id="chr1",
        strand="+",
        cds_one_based_start=103,
        cds_one_based_end=114,
        exons=[{"one_based_start": 101, "one_based_end": 120, "sequence": SINGLE_EXON_SEQUENCE}],
    )


@pytest.fixture
def minus_transcript():
    """The same mRNA as plus_transcript, transcribed from the minus strand of chr1:101-120."""
    return Transcript(
        transcript_id="TX_MINUS",
        sequence_id="chr1",
        strand="-",
        cds_one_based_start=107,
        cds_one_based_end=118,
        exons=[{
            "one_based_start": 101,
            "one_based_end": 120,
            "sequence": reverse_complement(SINGLE_EXON_SEQUENCE),
        }],
    )


@pytest.fixture
def spliced_transcript():
    """Two-exon plus-strand transcript with a 100bp intron at chr1:1011-1110."""
    return Transcript(
        transcript_id="TX_SPLICED",
        sequence_id="chr1",
        strand="+",
        cds_one_based_start=1004,
        cds_one_based_end=1118,
        exons=[
            {"one_based_start": 1001, "one_based_end": 1010, "sequence": EXON1_SEQUENCE},
            {"one_based_start": 1111, "one_based_end": 1120, "sequence": EXON2_SEQUENCE},
        ],
    )


@pytest.fixture
def truncated_transcript():
    """Create a transcript whose CDS stops part way through its last codon."""
    def _create(coding_sequence="ATGAAACCCTA"):
        return Transcript(
            transcript_id=f"TX_TRUNC_{len(coding_sequence)}",
            sequence_id="chr2",
            strand="+",
            cds_one_based_start=1,
            cds_one_based_end=len(coding_sequence),
            exons=[{"one_based_start": 1, "one_based_end": len(coding_sequence), "sequence": coding_sequence}],
        )
    return _create


@pytest.fixture
def make_variant():
    """Create a variant from plus-strand alleles."""
    def _make_variant(pos, ref, alt, sequence_id="chr1", variant_id=None):
        return Variant.from_alleles(sequence_id, pos, ref, alt, variant_id=variant_id)
    return _make_variant


@pytest.fixture
def mirror():
    """
    Reflect transcripts and variants onto the opposite strand.

    Position p maps to length + 1 - p and every sequence is reverse complemented,
    so a mirrored transcript carries the same mRNA as its source.
    """
    class _Mirror:
        def __init__(self, length: int):
            self.length = length

        def position(self, pos: int) -> int:
            return self.length + 1 - pos

        def transcript(self, transcript: Transcript) -> Transcript:
            strand = Strand.MINUS if transcript.is_strand_plus() else Strand.PLUS
            exons = [
                Exon(
                    sequence_id=exon.sequence_id,
                    strand=strand,
                    one_based_start=self.position(exon.one_based_end),
                    one_based_end=self.position(exon.one_based_start),
                    sequence=reverse_complement(exon.sequence),
                )
                for exon in transcript.exons
            ]
            return Transcript(
                transcript_id=f"{transcript.transcript_id}_MIRROR",
                sequence_id=transcript.sequence_id,
                strand=strand,
                cds_one_based_start=self.position(transcript.cds_one_based_end),
                cds_one_based_end=self.position(transcript.cds_one_based_start),
                exons=exons,
            )

        def variant(self, variant: Variant) -> Variant:
            return Variant.from_alleles(
                variant.sequence_id,
                self.position(variant.one_based_end),
                reverse_complement(variant.reference_allele),
                reverse_complement(variant.alternate_allele),
            )

    return _Mirror


@pytest.fixture
def variant_effects():
    return VariantEffects()
