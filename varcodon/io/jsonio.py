"""
Handles generation of JSON formatted outputs.
"""
import logging
from typing import Iterable, List

from pydantic import TypeAdapter
from pydantic_core import PydanticSerializationError

from ..effects import VariantEffect

_logger = logging.getLogger(__name__)

_EFFECT_LIST = TypeAdapter(List[VariantEffect])


def generate_json_output(effects: Iterable[VariantEffect], indent: int = 2) -> str:
    """
    Generates a JSON formatted string from effect records.

    Args:
        effects: The effects to serialize, e.g. a VariantEffects collector.
        indent: The indentation level for pretty-printing the JSON.

    Returns:
        A JSON formatted string holding a list of effects.
    """
    effects = list(effects)
    _logger.info(f"Generating JSON output for {len(effects)} effects.")
    try:
        return _EFFECT_LIST.dump_json(effects, indent=indent).decode('utf-8')
    except PydanticSerializationError as e:
        _logger.error(f"Failed to serialize effects to JSON: {e}")
        raise TypeError(f"Error during JSON serialization: {e}") from e
