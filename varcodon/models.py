"""Genomic interval, transcript and variant models for varcodon using Pydantic."""
import logging
from enum import Enum
from typing import Any, List, Optional, Tuple

from pydantic import BaseModel, Field, PrivateAttr, field_validator, model_validator

from .sequence import is_nucleotide_sequence, reverse_complement

_logger = logging.getLogger(__name__)


class Strand(str, Enum):
    """Orientation of a feature relative to the reference sequence."""
    PLUS = '+'
    MINUS = '-'

    @classmethod
    def from_value(cls, value: Any) -> 'Strand':
        """Convert '+'/'-' or 1/-1 into a Strand."""
        if isinstance(value, Strand):
            return value
        if value in ('+', '+1', '1', 1):
            return cls.PLUS
        if value in ('-', '-1', -1):
            return cls.MINUS
        raise ValueError(f"{value!r} is not a valid strand")

    @property
    def is_plus(self) -> bool:
        return self is Strand.PLUS


class Interval(BaseModel):
    """A one-based, fully closed range on a named sequence."""
    sequence_id: str = Field(..., description="Chromosome or contig name")
    strand: Strand = Field(Strand.PLUS, description="Strand of the interval")
    one_based_start: int = Field(..., description="Start position (1-based, inclusive)")
    one_based_end: int = Field(..., description="End position (1-based, inclusive)")
    variants: List['Variant'] = Field(default_factory=list, description="Variants overlapping this interval")

    @field_validator('strand', mode='before')
    @classmethod
    def parse_strand(cls, v: Any) -> Strand:
        return Strand.from_value(v)

    @model_validator(mode='after')
    def check_coordinates(self) -> 'Interval':
        """Ensure the interval is non-empty and starts at position 1 or later."""
        if self.one_based_start < 1:
            raise ValueError(f"Start position must be >= 1, got {self.one_based_start}")
        if self.one_based_start > self.one_based_end:
            raise ValueError(
                f"Start ({self.one_based_start}) must not be greater than end ({self.one_based_end})"
            )
        return self

    def __str__(self) -> str:
        return f"{self.sequence_id}:{self.one_based_start}-{self.one_based_end}({self.strand.value})"

    @property
    def length(self) -> int:
        """Number of bases covered by this interval."""
        return self.one_based_end - self.one_based_start + 1

    def is_strand_plus(self) -> bool:
        return self.strand.is_plus

    def intersects_position(self, pos: int) -> bool:
        return self.one_based_start <= pos <= self.one_based_end

    def intersects(self, other: 'Interval') -> bool:
        """Check whether two intervals on the same sequence share at least one base."""
        return (
            self.sequence_id == other.sequence_id
            and self.one_based_start <= other.one_based_end
            and other.one_based_start <= self.one_based_end
        )

    def intersect(self, other: 'Interval') -> Optional['Interval']:
        """Return the overlapping part of two intervals, on this interval's strand."""
        if not self.intersects(other):
            return None
        return Interval(
            sequence_id=self.sequence_id,
            strand=self.strand,
            one_based_start=max(self.one_based_start, other.one_based_start),
            one_based_end=min(self.one_based_end, other.one_based_end),
        )

    def contains(self, other: 'Interval') -> bool:
        return (
            self.sequence_id == other.sequence_id
            and self.one_based_start <= other.one_based_start
            and other.one_based_end <= self.one_based_end
        )

    def add_variant(self, variant: 'Variant') -> None:
        """Attach a variant to this interval. Adding the same variant twice is a no-op."""
        if variant not in self.variants:
            self.variants.append(variant)


class Exon(Interval):
    """An exon of a transcript, carrying its plus-strand genomic sequence."""
    sequence: str = Field("", description="Plus-strand genomic bases covering the exon (optional)")
    exon_number: Optional[int] = Field(None, description="Exon number in transcript order (optional)")

    @model_validator(mode='after')
    def check_sequence(self) -> 'Exon':
        if not self.sequence:
            return self
        if len(self.sequence) != self.length:
            raise ValueError(
                f"Exon {self} spans {self.length} bases but its sequence has {len(self.sequence)}"
            )
        if not is_nucleotide_sequence(self.sequence):
            raise ValueError(f"Exon {self} sequence contains non-nucleotide characters")
        return self

    def sequence_between(self, start: int, end: int) -> str:
        """Plus-strand bases of this exon between two genomic positions (1-based, inclusive)."""
        first = max(start, self.one_based_start) - self.one_based_start
        last = min(end, self.one_based_end) - self.one_based_start
        if first > last:
            return ""
        return self.sequence[first:last + 1]


def _bounds(item: Any) -> Tuple[Optional[int], Optional[int]]:
    if isinstance(item, Interval):
        return item.one_based_start, item.one_based_end
    if isinstance(item, dict):
        return item.get('one_based_start'), item.get('one_based_end')
    return None, None


def _fill_span(values: Any, children_key: str) -> Any:
    """Default a parent's start/end to the union of its children and push
    sequence id and strand down into child dictionaries."""
    if not isinstance(values, dict):
        return values
    values = dict(values)
    children = []
    for child in values.get(children_key) or []:
        if isinstance(child, dict):
            child = dict(child)
            for key in ('sequence_id', 'strand'):
                if key in values and key not in child:
                    child[key] = values[key]
        children.append(child)
    if children:
        values[children_key] = children
    spans = [_bounds(child) for child in children]
    spans = [(start, end) for start, end in spans if start is not None and end is not None]
    if spans:
        values.setdefault('one_based_start', min(start for start, _ in spans))
        values.setdefault('one_based_end', max(end for _, end in spans))
    return values


class Transcript(Interval):
    """
    A transcript made of exons, with optional CDS bounds.

    The CDS bounds are genomic coordinates (cds_one_based_start <= cds_one_based_end)
    regardless of strand. The coding sequence is built once, at construction.
    """
    transcript_id: str = Field(..., description="Transcript ID (e.g., ENST...)")
    gene_id: Optional[str] = Field(None, description="ID of the owning gene")
    exons: List[Exon] = Field(..., description="Exons of this transcript")
    cds_one_based_start: Optional[int] = Field(None, description="Genomic start of the CDS (1-based)")
    cds_one_based_end: Optional[int] = Field(None, description="Genomic end of the CDS (1-based, inclusive)")

    _coding_sequence: Optional[str] = PrivateAttr(default=None)

    @model_validator(mode='before')
    @classmethod
    def fill_from_exons(cls, values: Any) -> Any:
        return _fill_span(values, 'exons')

    @field_validator('exons')
    @classmethod
    def validate_exons(cls, v: List[Exon]) -> List[Exon]:
        """Ensure exons are present, sorted and non-overlapping."""
        if not v:
            raise ValueError("At least one exon must be provided")

        sorted_exons = sorted(v, key=lambda exon: exon.one_based_start)
        for prev, curr in zip(sorted_exons, sorted_exons[1:]):
            if curr.one_based_start <= prev.one_based_end:
                raise ValueError(
                    f"Exons must be non-overlapping. Found overlap between {prev} and {curr}"
                )
        return sorted_exons

    @model_validator(mode='after')
    def check_structure(self) -> 'Transcript':
        for exon in self.exons:
            if exon.sequence_id != self.sequence_id or exon.strand != self.strand:
                raise ValueError(f"Exon {exon} is not on the same sequence and strand as {self.transcript_id}")
            if not self.contains(exon):
                raise ValueError(f"Exon {exon} lies outside transcript {self.transcript_id}")

        if (self.cds_one_based_start is None) != (self.cds_one_based_end is None):
            raise ValueError("CDS start and CDS end must be given together")
        if self.is_coding:
            if self.cds_one_based_start > self.cds_one_based_end:
                raise ValueError(
                    f"CDS start ({self.cds_one_based_start}) must not be greater than "
                    f"CDS end ({self.cds_one_based_end})"
                )
            for exon in self.exons:
                if self.coding_interval(exon) is not None and not exon.sequence:
                    raise ValueError(f"Exon {exon} overlaps the CDS but has no sequence")

        self._coding_sequence = self._build_coding_sequence()
        return self

    def __str__(self) -> str:
        return f"Transcript({self.transcript_id}, {super().__str__()}, exons={len(self.exons)})"

    @property
    def is_coding(self) -> bool:
        """Check if this transcript has CDS bounds."""
        return self.cds_one_based_start is not None and self.cds_one_based_end is not None

    @property
    def exons_sorted_strand(self) -> List[Exon]:
        """Exons in 5' to 3' transcript order."""
        if self.is_strand_plus():
            return list(self.exons)
        return list(reversed(self.exons))

    @property
    def cds_start_stranded(self) -> Optional[int]:
        """Genomic position of the first CDS base in transcript orientation."""
        return self.cds_one_based_start if self.is_strand_plus() else self.cds_one_based_end

    @property
    def cds_end_stranded(self) -> Optional[int]:
        """Genomic position of the last CDS base in transcript orientation."""
        return self.cds_one_based_end if self.is_strand_plus() else self.cds_one_based_start

    def coding_interval(self, exon: Exon) -> Optional[Interval]:
        """The part of an exon that falls inside the CDS, or None for UTR-only exons."""
        if not self.is_coding:
            return None
        start = max(exon.one_based_start, self.cds_one_based_start)
        end = min(exon.one_based_end, self.cds_one_based_end)
        if start > end:
            return None
        return Interval(sequence_id=exon.sequence_id, strand=exon.strand, one_based_start=start, one_based_end=end)

    def _build_coding_sequence(self) -> str:
        parts = []
        for exon in self.exons_sorted_strand:
            coding = self.coding_interval(exon)
            if coding is None:
                continue
            seq = exon.sequence_between(coding.one_based_start, coding.one_based_end)
            parts.append(seq if exon.is_strand_plus() else reverse_complement(seq))
        coding_sequence = "".join(parts)
        _logger.debug(f"Built {len(coding_sequence)}bp coding sequence for {self.transcript_id}")
        return coding_sequence

    @property
    def coding_sequence(self) -> str:
        """Exonic CDS bases, 5' to 3', reverse complemented on the minus strand."""
        if self._coding_sequence is None:
            self._coding_sequence = self._build_coding_sequence()
        return self._coding_sequence

    def base_number_cds(self, pos: int, use_prev_base_if_intronic: bool) -> int:
        """
        Convert a genomic position to a zero-based offset in the coding sequence.

        Exons are walked in transcript order, accumulating the number of coding
        bases seen so far.

        Args:
            pos: Genomic position (1-based).
            use_prev_base_if_intronic: For positions between coding exons, return the
                last coding base before the position (True) or the first one after it (False).

        Returns:
            The zero-based CDS offset. Positions past the last coding base resolve
            to the last offset (or one past it when looking for the next base).
        """
        plus = self.is_strand_plus()
        count = 0
        for exon in self.exons_sorted_strand:
            coding = self.coding_interval(exon)
            if coding is None:
                continue
            if coding.intersects_position(pos):
                if plus:
                    return count + pos - coding.one_based_start
                return count + coding.one_based_end - pos
            upstream = pos < coding.one_based_start if plus else pos > coding.one_based_end
            if upstream:
                return count - 1 if use_prev_base_if_intronic else count
            count += coding.length
        return count - 1 if use_prev_base_if_intronic else count

    def cds_offset(self, pos: int, use_prev_base_if_intronic: bool) -> int:
        """
        Like :meth:`base_number_cds`, but positions outside the CDS are clipped to
        the nearest end of the coding sequence.

        Positions before the CDS (genomically) map to offset 0 on the plus strand and
        to the last offset on the minus strand; positions after it do the opposite.
        """
        last = len(self.coding_sequence) - 1
        if pos < self.cds_one_based_start:
            return 0 if self.is_strand_plus() else last
        if pos > self.cds_one_based_end:
            return last if self.is_strand_plus() else 0
        return self.base_number_cds(pos, use_prev_base_if_intronic)

    def cds_span(self, one_based_start: int, one_based_end: int) -> Tuple[int, int]:
        """
        Map a genomic range to the (start, end) CDS offsets it affects.

        Intronic ends are pulled inwards: the 5' end resolves to the next coding
        base and the 3' end to the previous one. On the minus strand the genomic
        end is the 5' end.
        """
        if self.is_strand_plus():
            return (
                self.cds_offset(one_based_start, False),
                self.cds_offset(one_based_end, True),
            )
        return (
            self.cds_offset(one_based_end, False),
            self.cds_offset(one_based_start, True),
        )


class Gene(Interval):
    """A gene and the transcripts it owns."""
    gene_id: str = Field(..., description="Gene ID")
    gene_name: Optional[str] = Field(None, description="Gene symbol")
    transcripts: List[Transcript] = Field(default_factory=list, description="Transcripts of this gene")

    @model_validator(mode='before')
    @classmethod
    def fill_from_transcripts(cls, values: Any) -> Any:
        return _fill_span(values, 'transcripts')

    @model_validator(mode='after')
    def check_transcripts(self) -> 'Gene':
        for transcript in self.transcripts:
            if not self.contains(transcript):
                raise ValueError(f"{transcript} lies outside gene {self.gene_id}")
        return self

    @property
    def coding_transcripts(self) -> List[Transcript]:
        return [t for t in self.transcripts if t.is_coding]


class Intergenic(Interval):
    """The stretch of sequence between two neighbouring genes."""
    left_gene: Optional[Gene] = Field(None, description="Gene immediately upstream (genomically)")
    right_gene: Optional[Gene] = Field(None, description="Gene immediately downstream (genomically)")

    @classmethod
    def between(cls, left: Gene, right: Gene) -> Optional['Intergenic']:
        """
        Build the intergenic region separating two genes.

        Returns:
            The region strictly between the genes, or None if they touch or overlap.

        Raises:
            ValueError: If the genes are on different sequences.
        """
        if left.sequence_id != right.sequence_id:
            raise ValueError(f"Genes {left.gene_id} and {right.gene_id} are on different sequences")
        if left.one_based_start > right.one_based_start:
            left, right = right, left
        start = left.one_based_end + 1
        end = right.one_based_start - 1
        if start > end:
            return None
        return cls(
            sequence_id=left.sequence_id,
            one_based_start=start,
            one_based_end=end,
            left_gene=left,
            right_gene=right,
        )


class VariantType(str, Enum):
    """Variant classes derived from the reference and alternate alleles."""
    SNV = 'snv'
    MNV = 'mnv'
    INSERTION = 'ins'
    DELETION = 'del'
    MIXED = 'mixed'
    REFERENCE = 'ref'

    @classmethod
    def from_alleles(cls, ref: str, alt: str) -> 'VariantType':
        ref, alt = ref.upper(), alt.upper()
        if ref == alt:
            return cls.REFERENCE
        if len(ref) == len(alt):
            return cls.SNV if len(ref) == 1 else cls.MNV
        if len(alt) > len(ref):
            return cls.INSERTION if alt.startswith(ref) else cls.MIXED
        return cls.DELETION if ref.startswith(alt) else cls.MIXED


class Variant(BaseModel):
    """
    A genomic edit: the reference bases over `position` are replaced by the
    alternate allele. Alleles are given on the plus strand.
    """
    position: Interval = Field(..., description="Reference span of the variant")
    reference_allele: str = Field(..., description="Reference bases over the span")
    alternate_allele: str = Field("", description="Replacement bases (empty for a pure deletion)")
    variant_id: Optional[str] = Field(None, description="Variant identifier (e.g., rsID)")

    @model_validator(mode='before')
    @classmethod
    def build_position(cls, values: Any) -> Any:
        """Accept a flat record with sequence_id/one_based_start instead of a position."""
        if isinstance(values, dict) and 'position' not in values and 'one_based_start' in values:
            values = dict(values)
            start = values.pop('one_based_start')
            values['position'] = {
                'sequence_id': values.pop('sequence_id', None),
                'one_based_start': start,
                'one_based_end': start + len(values.get('reference_allele', '')) - 1,
            }
        return values

    @field_validator('reference_allele', 'alternate_allele')
    @classmethod
    def validate_allele(cls, v: str) -> str:
        v = v.strip()
        if not is_nucleotide_sequence(v):
            raise ValueError(f"Invalid allele '{v}'")
        return v

    @model_validator(mode='after')
    def check_span(self) -> 'Variant':
        if len(self.reference_allele) != self.position.length:
            raise ValueError(
                f"Reference allele '{self.reference_allele}' does not cover {self.position} "
                f"({self.position.length} bases)"
            )
        return self

    @classmethod
    def from_alleles(
        cls,
        sequence_id: str,
        one_based_start: int,
        reference_allele: str,
        alternate_allele: str,
        variant_id: Optional[str] = None
    ) -> 'Variant':
        return cls(
            sequence_id=sequence_id,
            one_based_start=one_based_start,
            reference_allele=reference_allele,
            alternate_allele=alternate_allele,
            variant_id=variant_id,
        )

    def __str__(self) -> str:
        return f"{self.sequence_id}:{self.one_based_start}{self.reference_allele}>{self.alternate_allele or '-'}"

    @property
    def sequence_id(self) -> str:
        return self.position.sequence_id

    @property
    def one_based_start(self) -> int:
        return self.position.one_based_start

    @property
    def one_based_end(self) -> int:
        return self.position.one_based_end

    @property
    def length(self) -> int:
        """Number of reference bases spanned."""
        return self.position.length

    @property
    def variant_type(self) -> VariantType:
        return VariantType.from_alleles(self.reference_allele, self.alternate_allele)

    @property
    def is_snv(self) -> bool:
        return self.variant_type == VariantType.SNV

    @property
    def is_mnv(self) -> bool:
        return self.variant_type == VariantType.MNV

    @property
    def is_ins(self) -> bool:
        return self.variant_type == VariantType.INSERTION

    @property
    def is_del(self) -> bool:
        return self.variant_type == VariantType.DELETION

    def net_change(self, anchor: Interval) -> str:
        """
        The part of the alternate allele that falls inside `anchor`, plus strand.

        Alternate bases are laid out left-aligned over the reference span, one per
        position; the last spanned position also takes any extra inserted bases,
        and positions past the end of a shorter allele are deleted.

        Args:
            anchor: An exon, the coding part of an exon, or any other interval.

        Returns:
            The projected alternate bases, or an empty string if nothing remains.
        """
        overlap = self.position.intersect(anchor)
        if overlap is None:
            return ""
        first = overlap.one_based_start - self.one_based_start
        if overlap.one_based_end == self.one_based_end:
            return self.alternate_allele[first:]
        last = overlap.one_based_end - self.one_based_start
        return self.alternate_allele[first:last + 1]

    def net_change_stranded(self, is_plus: bool) -> str:
        """The whole alternate allele, reverse complemented for minus-strand features."""
        if is_plus:
            return self.alternate_allele
        return reverse_complement(self.alternate_allele)


for _model in (Interval, Exon, Transcript, Gene, Intergenic, Variant):
    _model.model_rebuild()
