"""Canonical comparison keys for raw cell values."""

from decimal import Decimal, InvalidOperation
from typing import Any, Optional
import unicodedata
import regex as re

from sheet_matcher.config.models import MatchMode, NormalizationMode

NUMERIC_PATTERN = re.compile(r'^-?\d*\.?\d+$')
NON_ALPHANUMERIC = re.compile(r'[^a-z0-9]+')

# Separates per-column keys in a row key; whitespace, so no key contains it.
KEY_DELIMITER = '\x1f'


def _canonical_number(text: str) -> Optional[str]:
    """Render a decimal literal in fixed-point form without redundant zeros."""
    try:
        number = Decimal(text)
    except InvalidOperation:
        return None
    if number.is_zero():
        return '0'
    # Keeps every digit, unlike normalize() which rounds to the context precision.
    rendered = format(number, 'f')
    if '.' in rendered:
        rendered = rendered.rstrip('0').rstrip('.')
    return rendered


def _strip_accents(text: str) -> str:
    return ''.join(
        c for c in unicodedata.normalize('NFD', text)
        if unicodedata.category(c) != 'Mn'
    )


def normalize(value: Any, mode: NormalizationMode = NormalizationMode.NORMALIZED) -> str:
    """
    Map a raw cell value to its canonical comparison key.

    ``EXACT`` trims and collapses whitespace runs but keeps case.
    ``NORMALIZED`` collapses numeric literals ("007", "7.0" and "7" all become
    "7") and otherwise folds accents and case and drops everything outside
    ``[a-z0-9]``. An empty result means the value has no key.

    Args:
        value: Raw cell value
        mode: Normalization mode

    Returns:
        str: Canonical key, '' when the value carries no key
    """
    if value is None:
        return ''
    text = ' '.join(str(value).split())
    if not text:
        return ''

    if NormalizationMode(mode) is NormalizationMode.EXACT:
        return text

    if NUMERIC_PATTERN.match(text):
        number = _canonical_number(text)
        if number is not None:
            return number

    key = NON_ALPHANUMERIC.sub('', _strip_accents(text).lower())
    # A key reduced to bare digits must read the same as the number itself.
    if key.isdigit():
        return _canonical_number(key)
    return key


def key_for(value: Any, mode: MatchMode) -> str:
    """Canonical key of a value under a match mode."""
    return normalize(value, MatchMode(mode).normalization_mode)
