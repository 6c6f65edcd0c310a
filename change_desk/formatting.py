"""
Value Formatting

Display helpers for change request payloads: list previews and the
detail rendering of structured (address) values.
"""

import json
from typing import Any, Optional

PREVIEW_LIMIT = 60
PREVIEW_KEEP = 57
ELLIPSIS = "..."
SEGMENT_DELIMITER = " | "


def preview_value(value: Optional[str]) -> Optional[str]:
    """Truncate a value for the list view.

    Values longer than 60 characters keep their first 57 characters
    followed by an ellipsis; shorter values are returned unchanged.
    """
    if value and len(value) > PREVIEW_LIMIT:
        return value[:PREVIEW_KEEP] + ELLIPSIS
    return value


def _segment_value(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def render_value(value: Optional[str]) -> str:
    """Render a payload for the detail view.

    A JSON object becomes ``key: value`` segments joined by `` | ``;
    anything that is not JSON (plain email/phone values) is returned raw.
    """
    if not value:
        return ""
    try:
        parsed = json.loads(value)
    except ValueError:
        return value

    if isinstance(parsed, dict):
        items = parsed.items()
    elif isinstance(parsed, list):
        items = enumerate(parsed)
    else:
        return value

    return SEGMENT_DELIMITER.join(
        f"{key}: {_segment_value(item)}" for key, item in items
    )
