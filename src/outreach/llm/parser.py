"""Campaign response parser for untrusted model output.

The model is asked for bare JSON but sometimes wraps it in prose or code
fences.  Parsing tries strict decoding first, then the greedy
first-``{``-to-last-``}`` span.  A result missing any required field is an
error: empty values are never substituted.
"""

from __future__ import annotations

import json
import re
from typing import Any

import structlog
from pydantic import ValidationError

from outreach.domain.errors import MalformedResponse
from outreach.domain.models import CampaignDraft

logger = structlog.get_logger()

# Greedy: first "{" through the last "}"
_BRACE_SPAN = re.compile(r"\{.*\}", re.DOTALL)


def _validate(payload: Any, raw_text: str) -> CampaignDraft:
    if not isinstance(payload, dict):
        raise MalformedResponse("response is not a JSON object", raw_text)
    try:
        return CampaignDraft.model_validate(payload)
    except ValidationError as exc:
        fields = sorted({str(err["loc"][0]) for err in exc.errors() if err["loc"]})
        raise MalformedResponse(
            f"missing or invalid fields: {', '.join(fields)}", raw_text
        ) from exc


def parse_campaign_response(raw_text: str) -> CampaignDraft:
    """Decode *raw_text* into a ``CampaignDraft``.

    Args:
        raw_text: The model's response body.

    Returns:
        The validated draft (subject, preview text, HTML and text bodies).

    Raises:
        MalformedResponse: If neither strict decoding nor brace-span
            recovery yields a JSON object, or the object lacks a required
            string field.
    """
    try:
        payload = json.loads(raw_text)
    except json.JSONDecodeError:
        match = _BRACE_SPAN.search(raw_text)
        if match is None:
            raise MalformedResponse("no JSON object found", raw_text) from None
        try:
            payload = json.loads(match.group())
        except json.JSONDecodeError as exc:
            raise MalformedResponse(f"invalid JSON: {exc.msg}", raw_text) from exc
        logger.info("campaign_response_recovered", span_length=len(match.group()))

    return _validate(payload, raw_text)
