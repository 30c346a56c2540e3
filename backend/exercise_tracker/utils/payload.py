"""Request body helpers.

Browser forms post ``application/x-www-form-urlencoded`` while scripted
clients tend to send JSON; controllers accept either through
`read_payload`.
"""

from __future__ import annotations

import json
import logging

from fastapi import Request

logger = logging.getLogger("exercise_tracker.api")


async def read_payload(request: Request) -> dict:
    """Return the request body as a flat dict of field values.

    JSON bodies must be objects; anything else (or malformed JSON) is
    treated as an empty body so field validation reports it. Uploaded
    files in multipart bodies are ignored.
    """
    content_type = request.headers.get("content-type", "").lower()
    if content_type.startswith("application/json"):
        try:
            data = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            logger.info("ignoring malformed JSON body on %s", request.url.path)
            return {}
        return data if isinstance(data, dict) else {}
    form = await request.form()
    return {k: v for k, v in form.items() if isinstance(v, str)}
