"""
Effect records produced by the codon change engine and the collector they are
written into.
"""
import logging
import threading
from enum import Enum
from typing import Iterator, List, Optional, Tuple

from pydantic import BaseModel, Field

from .models import Transcript

_logger = logging.getLogger(__name__)


class EffectType(str, Enum):
    """Effect markers. Classification beyond a generic codon change is left to downstream consumers."""
    CODON_CHANGE = 'CODON_CHANGE'


class VariantEffect(BaseModel):
    """The effect of one variant on one transcript."""
    transcript_id: str = Field(..., description="Transcript the effect was computed against")
    effect_type: EffectType = Field(..., description="Type of effect")
    generic_low_priority: bool = Field(
        False,
        description="Whether more specific effects computed downstream should replace this one"
    )
    variant_id: Optional[str] = Field(None, description="Identifier of the variant, if it has one")
    codon_number: int = Field(..., description="Zero-based index of the first affected codon")
    codon_index: int = Field(..., description="Position (0-2) of the variant start within its codon")
    codons_reference: str = Field("", description="Reference codons")
    codons_alternate: str = Field("", description="Alternate codons")
    transcript: Optional[Transcript] = Field(None, exclude=True, repr=False)

    def codon_change_str(self) -> str:
        """Render the codon change as 'reference/alternate'."""
        return f"{self.codons_reference}/{self.codons_alternate}"


class VariantEffects:
    """
    Append-only, ordered collection of effect records.

    Appends are lock-protected so one collector can be shared by engines
    evaluating different (variant, transcript) pairs on different threads.
    """

    def __init__(self) -> None:
        self._effects: List[VariantEffect] = []
        self._lock = threading.Lock()

    def add(self, effect: VariantEffect) -> None:
        with self._lock:
            self._effects.append(effect)
        _logger.debug(
            f"Recorded {effect.effect_type.value} on {effect.transcript_id}: "
            f"codon {effect.codon_number} {effect.codon_change_str()}"
        )

    @property
    def effects(self) -> Tuple[VariantEffect, ...]:
        """A snapshot of the effects recorded so far."""
        with self._lock:
            return tuple(self._effects)

    def __len__(self) -> int:
        with self._lock:
            return len(self._effects)

    def __iter__(self) -> Iterator[VariantEffect]:
        return iter(self.effects)

    def for_transcript(self, transcript_id: str) -> List[VariantEffect]:
        return [effect for effect in self.effects if effect.transcript_id == transcript_id]

    def to_list(self) -> List[VariantEffect]:
        return list(self.effects)
