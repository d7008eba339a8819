"""Input parsing: structured answers, free text / JSON, or OCR text -> ParseResult.

Selection priority (first non-empty wins):
    1. explicit ``answers`` mapping
    2. ``text_input`` (JSON object first, then ``Key: value`` lines)
    3. ``ocr_text`` (``Key: value`` lines)

Nothing here raises on bad input. Unparsable values become absent fields
and show up in ``missing_fields``.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from healthprofiler.domains.lifestyle.domain_logic.models import (
    INCOMPLETE_REASON,
    REQUIRED_FIELDS,
    Answers,
    ParseResult,
)
from healthprofiler.domains.lifestyle.domain_logic.normalizer import (
    normalize_bool,
    normalize_number,
    normalize_text,
)

logger = logging.getLogger(__name__)

CONFIDENCE_FLOOR = 0.3
CONFIDENCE_CEILING = 0.98

_LINE_RE = re.compile(r"^(\w+)\s*:\s*(.+)$")
_LINE_SPLIT_RE = re.compile(r"\r?\n")


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


# ---------------------------------------------------------------------------
# Source-specific extraction
# ---------------------------------------------------------------------------

def parse_key_value_lines(text: str) -> Answers:
    """Extract answers from lines like ``Age: 42`` / ``Smoker: yes``.

    Keys are case-folded. Lines that do not look like ``key: value`` are
    skipped. Unknown keys are kept verbatim (trimmed) in ``extra``.
    """
    answers = Answers()
    for raw_line in _LINE_SPLIT_RE.split(text):
        line = raw_line.strip()
        if not line:
            continue
        match = _LINE_RE.match(line)
        if match is None:
            continue
        key = match.group(1).lower()
        raw = match.group(2).strip()

        if key == "age":
            answers.age = normalize_number(raw)
        elif key == "smoker":
            answers.smoker = normalize_bool(raw)
        elif key == "exercise":
            answers.exercise = raw.lower()
        elif key == "diet":
            answers.diet = raw.lower()
        else:
            answers.extra[key] = raw
    return answers


def answers_from_object(obj: dict[str, Any]) -> Answers:
    """Recognized fields and pass-through keys from a mapping of raw answers.

    Shared by the ``answers`` mapping and JSON text so both read a value the
    same way. A present but null ``exercise`` or ``diet`` is an empty answer.
    """
    answers = Answers(extra={k: v for k, v in obj.items() if k not in REQUIRED_FIELDS})
    if "age" in obj:
        answers.age = normalize_number(obj["age"])
    if "smoker" in obj:
        answers.smoker = normalize_bool(obj["smoker"])
    if "exercise" in obj:
        answers.exercise = normalize_text("" if obj["exercise"] is None else obj["exercise"])
    if "diet" in obj:
        answers.diet = normalize_text("" if obj["diet"] is None else obj["diet"])
    return answers


def parse_json_input(text: str) -> Answers | None:
    """Parse a JSON object of answers; ``None`` if the text is not one."""
    try:
        obj = json.loads(text)
    except (json.JSONDecodeError, ValueError):
        return None
    if not isinstance(obj, dict):
        return None
    return answers_from_object(obj)


def _select_base(
    answers: dict[str, Any] | None,
    text_input: str | None,
    ocr_text: str | None,
) -> tuple[Answers, str]:
    if answers:
        return answers_from_object(answers), "answers"
    if text_input:
        from_json = parse_json_input(text_input)
        if from_json is not None:
            return from_json, "json"
        return parse_key_value_lines(text_input), "text"
    if ocr_text:
        return parse_key_value_lines(ocr_text), "ocr"
    return Answers(), "empty"


def _renormalize(answers: Answers) -> Answers:
    """Apply the canonical coercions regardless of where the values came from."""
    return Answers(
        age=normalize_number(answers.age) if answers.age is not None else None,
        smoker=normalize_bool(answers.smoker) if answers.smoker is not None else None,
        exercise=normalize_text(answers.exercise),
        diet=normalize_text(answers.diet),
        extra=dict(answers.extra),
    )


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def parse_inputs(
    answers: dict[str, Any] | None = None,
    text_input: str | None = None,
    ocr_text: str | None = None,
) -> ParseResult:
    """Build a canonical answer set with missing-field detection and confidence.

    Args:
        answers: Structured answers (field name -> raw value).
        text_input: Free text, either a JSON object or ``Key: value`` lines.
        ocr_text: Text extracted from an image, ``Key: value`` lines.

    Returns:
        ParseResult. ``status`` is ``"incomplete_profile"`` when more than
        half of the required fields are missing.
    """
    base, source = _select_base(answers, text_input, ocr_text)
    normalized = _renormalize(base)

    missing = [name for name in REQUIRED_FIELDS if normalized.get(name) is None]
    total = len(REQUIRED_FIELDS)
    present = total - len(missing)
    confidence = _clamp(present / total, CONFIDENCE_FLOOR, CONFIDENCE_CEILING)

    logger.debug(
        "Parsed answers from %s: %d/%d required fields present", source, present, total
    )

    if len(missing) > total / 2:
        return ParseResult(
            answers=normalized,
            missing_fields=missing,
            confidence=confidence,
            status="incomplete_profile",
            reason=INCOMPLETE_REASON,
        )
    return ParseResult(
        answers=normalized,
        missing_fields=missing,
        confidence=confidence,
        status="ok",
    )
