"""
Naive parsing of raw bulk responses.
"""

import json

from pydantic import BaseModel

ERRORS_MARKER = '"errors":true'


class BulkResponse(BaseModel):
    """
    A bulk response split into status and body.

    has_errors is a substring check on the raw text; a response without that
    exact marker counts as accepted even if it is malformed.
    item_error_count is informational: it is filled only when the body is
    plain JSON (not chunked) and never changes the outcome of a run.
    """

    raw: str
    status_code: int | None = None
    body: str = ""
    has_errors: bool = False
    item_error_count: int | None = None

    @classmethod
    def parse(cls, raw: str) -> "BulkResponse":
        head, _, body = raw.partition("\r\n\r\n")
        status_line = head.split("\r\n", 1)[0]

        status_code = None
        parts = status_line.split(" ", 2)
        if len(parts) >= 2 and parts[0].startswith("HTTP/") and parts[1].isdigit():
            status_code = int(parts[1])

        return cls(
            raw=raw,
            status_code=status_code,
            body=body,
            has_errors=ERRORS_MARKER in raw,
            item_error_count=_count_item_errors(body),
        )


def _count_item_errors(body: str) -> int | None:
    try:
        document = json.loads(body)
    except ValueError:
        return None

    if not isinstance(document, dict) or not isinstance(document.get("items"), list):
        return None

    count = 0
    for item in document["items"]:
        if not isinstance(item, dict):
            continue
        for outcome in item.values():
            if isinstance(outcome, dict) and "error" in outcome:
                count += 1
    return count
