# json_validator.py
# Structural validator: parses the text and reports per-kind statistics.

import logging

from json_model import FormatError, JsonNumber, JsonStats, ValidationResult
from json_parser import DEPTH_LIMIT_DEFAULT, parse

logger = logging.getLogger(__name__)


def _collect(value, depth: int, stats: JsonStats) -> None:
    if depth > stats.max_depth:
        stats.max_depth = depth

    if isinstance(value, dict):
        stats.object_count += 1
        stats.total_keys += len(value)
        for child in value.values():
            _collect(child, depth + 1, stats)
    elif isinstance(value, list):
        stats.array_count += 1
        for child in value:
            _collect(child, depth + 1, stats)
    elif isinstance(value, str):
        stats.string_count += 1
    elif isinstance(value, bool):
        stats.boolean_count += 1
    elif isinstance(value, JsonNumber):
        stats.number_count += 1
    elif value is None:
        stats.null_count += 1
    else:
        raise TypeError(f"not a JSON value: {type(value).__name__}")


def collect_stats(value) -> JsonStats:
    """
    Walk a parsed value once, depth first.

    The root sits at depth 0 and every container puts its children one
    level deeper; ``max_depth`` is the deepest level any node reaches.
    ``total_keys`` counts the keys of every object, nested ones included.
    """
    stats = JsonStats()
    _collect(value, 0, stats)
    return stats


def validate_json(text: str, *, max_depth: int = DEPTH_LIMIT_DEFAULT) -> ValidationResult:
    """Validate JSON text. Malformed input yields an invalid result, never an exception."""
    try:
        value = parse(text, max_depth=max_depth)
    except FormatError as err:
        return ValidationResult.invalid(err)
    stats = collect_stats(value)
    logger.debug("valid document: %d nodes, max depth %d", stats.total_nodes, stats.max_depth)
    return ValidationResult.valid(stats)
