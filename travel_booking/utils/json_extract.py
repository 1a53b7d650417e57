# utils/json_extract.py
"""
Recover a JSON value from model output that may wrap it in prose or code fences.

Strategies run once each, in order:
  1. the whole text
  2. the first array-of-objects substring, matched lazily up to the first ``}]``
  3. the first object substring, from the first ``{"`` to the last ``}``;
     when that span holds more than one value, the first balanced object

This is a best-effort scraper, not a grammar. An array of objects nested inside
an element ends strategy 2 early (the lazy match stops at the inner ``}]``) and
strategy 3 then returns the outer element instead of the list.
"""
from __future__ import annotations

import json
import logging
import re
from typing import Any

from travel_booking.utils.errors import Unparseable

logger = logging.getLogger(__name__)

MAX_EXTRACT_CHARS = 200_000

_ARRAY_OF_OBJECTS = re.compile(r"\[\s*\{[\s\S]*?\}\s*\]")
_OBJECT = re.compile(r"\{\s*\"[\s\S]*\}")
_DECODER = json.JSONDecoder()


def extract_json(text: str) -> Any:
    if not isinstance(text, str) or not text.strip():
        raise Unparseable("Empty response text")
    if len(text) > MAX_EXTRACT_CHARS:
        raise Unparseable("Response too large to parse", {"chars": len(text)})

    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass

    for label, pattern in (("array", _ARRAY_OF_OBJECTS), ("object", _OBJECT)):
        match = pattern.search(text)
        if not match:
            continue
        try:
            return json.loads(match.group(0))
        except json.JSONDecodeError:
            logger.debug("JSON %s candidate did not parse", label)
        if label == "object":
            try:
                return _DECODER.raw_decode(text, match.start())[0]
            except json.JSONDecodeError:
                logger.debug("No balanced JSON object at offset %d", match.start())

    logger.warning("No valid JSON found in response (%d chars)", len(text))
    raise Unparseable("No valid JSON found in response")
