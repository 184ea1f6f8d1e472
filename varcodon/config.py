"""
Handles loading and validation of transcript and variant inputs.
"""
import json
import logging
from typing import Any, List

from pydantic import TypeAdapter, ValidationError

from .models import Transcript, Variant

_logger = logging.getLogger(__name__)

_VARIANT_LIST = TypeAdapter(List[Variant])


def _read_json(path: str) -> Any:
    try:
        with open(path, 'r') as f:
            return json.load(f)
    except FileNotFoundError:
        _logger.error(f"Configuration file not found at {path}")
        raise
    except json.JSONDecodeError as e:
        _logger.error(f"Invalid JSON in configuration file: {path}")
        raise ValueError(f"Invalid JSON in {path}: {e}") from e


def load_transcript(config_path: str) -> Transcript:
    """
    Loads a transcript (exons, exon sequences and CDS bounds) from a JSON file and validates it.

    Args:
        config_path: The path to the JSON transcript file.

    Returns:
        A validated Transcript object.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is not valid JSON or fails validation.
    """
    _logger.info(f"Loading transcript from {config_path}")
    data = _read_json(config_path)
    try:
        transcript = Transcript.model_validate(data)
    except ValidationError as e:
        _logger.error("Transcript validation failed.")
        raise ValueError(f"Configuration validation failed: {e}") from e
    _logger.info(
        f"Loaded {transcript.transcript_id} with {len(transcript.exons)} exons "
        f"and a {len(transcript.coding_sequence)}bp coding sequence"
    )
    return transcript


def load_variants(variants_path: str) -> List[Variant]:
    """
    Loads a JSON list of variants.

    Each entry is either {"position": {...}, "reference_allele": ..., "alternate_allele": ...}
    or the flat form {"sequence_id": ..., "one_based_start": ..., "reference_allele": ...,
    "alternate_allele": ...}.

    Args:
        variants_path: The path to the JSON variants file.

    Returns:
        The validated variants, in file order.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is not valid JSON or fails validation.
    """
    _logger.info(f"Loading variants from {variants_path}")
    data = _read_json(variants_path)
    try:
        variants = _VARIANT_LIST.validate_python(data)
    except ValidationError as e:
        _logger.error("Variant validation failed.")
        raise ValueError(f"Configuration validation failed: {e}") from e
    _logger.info(f"Loaded {len(variants)} variants")
    return variants
