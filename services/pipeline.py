"""
The generation pipeline shared by every AI-backed endpoint:

    prompt -> completion -> extraction -> typed parse -> (fallback) -> post-process

A ``Feature`` describes one endpoint's prompt, schema and fallback; the
pipeline itself knows nothing about study plans or quizzes.
"""
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from services.errors import ExtractionFailed
from services.extraction import extract_json
from services.gemini_service import get_gemini_service

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Feature:
    """
    Configuration for one generation feature.

    Attributes:
        name: Used in log lines
        build_prompt: Called with the request params as keyword arguments
        parse: Turns the decoded JSON into the feature's typed result;
            raising ValueError/TypeError counts as an extraction failure
        expect: 'object', 'array' or None (either)
        fallback: Called with the params dict when extraction fails.
            ``None`` means the failure is surfaced to the caller.
        post_process: Applied to parsed and fallback results alike
    """
    name: str
    build_prompt: Callable[..., str]
    parse: Callable[[Any], Any]
    expect: Optional[str] = 'object'
    fallback: Optional[Callable[[dict], Any]] = None
    post_process: Optional[Callable[[Any], Any]] = None


@dataclass
class PipelineResult:
    value: Any
    used_fallback: bool = False
    raw_response: str = ''


def _decode(feature: Feature, raw: str) -> Any:
    decoded = extract_json(raw, feature.expect)
    try:
        return feature.parse(decoded)
    except (ValueError, TypeError) as e:
        # pydantic's ValidationError is a ValueError
        logger.warning("[%s] response did not match schema: %s", feature.name, e)
        raise ExtractionFailed('AI response did not match the expected format', raw_response=raw) from e


def run_feature(feature: Feature, params: dict, client=None) -> PipelineResult:
    """
    Run ``feature`` for one request.

    Upstream errors from the completion client always propagate. Extraction
    failures fall back when the feature has a fallback and propagate as
    ``ExtractionFailed`` otherwise.
    """
    client = client or get_gemini_service()
    prompt = feature.build_prompt(**params)
    raw = client.complete(prompt)

    used_fallback = False
    try:
        value = _decode(feature, raw)
    except ExtractionFailed:
        if feature.fallback is None:
            raise
        logger.warning("[%s] using fallback result; raw response: %r", feature.name, raw[:200])
        value = feature.fallback(params)
        used_fallback = True

    if feature.post_process is not None:
        value = feature.post_process(value)

    return PipelineResult(value=value, used_fallback=used_fallback, raw_response=raw)
