"""
Structured extraction of JSON payloads from free-text model responses.

Models are asked to return bare JSON but routinely wrap it in markdown fences
or surround it with commentary. ``extract_json`` recovers the first decodable
object/array, preferring the content of the first fenced block.
"""
import json
import logging
import re
from typing import Any, Iterator, Optional, Tuple

from services.errors import ExtractionFailed

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r'```(?:json|JSON)?\s*([\s\S]*?)```')

_OPENERS = {'{': '}', '[': ']'}
_EXPECT_OPENERS = {
    None: '{[',
    'object': '{',
    'array': '[',
}


def _fenced_block(text: str) -> Optional[str]:
    match = _FENCE_RE.search(text)
    if match and match.group(1).strip():
        return match.group(1).strip()
    return None


def _balanced_end(text: str, start: int) -> int:
    """
    Return the index just past the bracket that closes ``text[start]``,
    or -1 if it never closes. Brackets inside string literals are ignored.
    """
    stack = []
    in_string = False
    escaped = False

    for idx in range(start, len(text)):
        char = text[idx]
        if in_string:
            if escaped:
                escaped = False
            elif char == '\\':
                escaped = True
            elif char == '"':
                in_string = False
            continue

        if char == '"':
            in_string = True
        elif char in _OPENERS:
            stack.append(_OPENERS[char])
        elif char in '}]':
            if not stack or stack[-1] != char:
                return -1
            stack.pop()
            if not stack:
                return idx + 1
    return -1


def iter_json_spans(text: str, openers: str = '{[') -> Iterator[Tuple[int, int]]:
    """Yield ``(start, end)`` for every balanced bracket span, left to right."""
    idx = 0
    while idx < len(text):
        if text[idx] in openers:
            end = _balanced_end(text, idx)
            if end != -1:
                yield idx, end
        idx += 1


def _scan(text: str, openers: str) -> Tuple[bool, Any]:
    for start, end in iter_json_spans(text, openers):
        try:
            return True, json.loads(text[start:end])
        except ValueError:
            continue
    return False, None


def extract_json(text: str, expect: Optional[str] = None) -> Any:
    """
    Recover the first JSON value embedded in ``text``.

    Args:
        text: Raw model response
        expect: ``'object'``, ``'array'`` or ``None`` for either

    Returns:
        The decoded value

    Raises:
        ExtractionFailed: when no span decodes. Decoder errors never escape.
    """
    if expect not in _EXPECT_OPENERS:
        raise ValueError(f"expect must be 'object', 'array' or None, got {expect!r}")
    openers = _EXPECT_OPENERS[expect]

    if not text or not text.strip():
        raise ExtractionFailed('Empty response from model', raw_response=text or '')

    fenced = _fenced_block(text)
    if fenced is not None:
        found, value = _scan(fenced, openers)
        if found:
            return value

    found, value = _scan(text, openers)
    if found:
        return value

    logger.warning("No JSON %s found in model response: %r",
                   expect or 'value', text[:200])
    raise ExtractionFailed('Failed to parse AI response', raw_response=text)
