"""
Result envelopes — the uniform success/error shape for every tool call,
plus its rendering onto the protocol's text content.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Optional

from ocimcp.errors import PERMISSION_DENIED
from ocimcp.records import Immediate, Pending, Record


@dataclass(frozen=True)
class ResultEnvelope:
    ok: bool
    payload: Any = None
    error_kind: Optional[str] = None
    message: Optional[str] = None
    tool: Optional[str] = None

    @classmethod
    def success(cls, payload: Any, tool: Optional[str] = None) -> "ResultEnvelope":
        return cls(ok=True, payload=to_payload(payload), tool=tool)

    @classmethod
    def failure(cls, error_kind: str, message: str, tool: Optional[str] = None) -> "ResultEnvelope":
        return cls(ok=False, error_kind=error_kind, message=message, tool=tool)

    def as_dict(self) -> dict:
        if self.ok:
            return {"ok": True, "payload": self.payload}
        return {"ok": False, "errorKind": self.error_kind, "message": self.message}


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------

def to_payload(obj: Any) -> Any:
    """Recursively convert an adapter result to JSON-serializable form."""
    if obj is None or isinstance(obj, (bool, int, float, str)):
        return obj
    if isinstance(obj, Immediate):
        return obj.record.to_payload()
    if isinstance(obj, Pending):
        return {
            "status": "PENDING",
            "workRequestId": obj.work_request_id,
            "message": (
                f"{obj.resource_kind} request accepted. "
                "Poll get_work_request with this workRequestId for completion."
            ),
        }
    if isinstance(obj, Record):
        return obj.to_payload()
    if isinstance(obj, bytes):
        return "<binary data omitted>"
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    if isinstance(obj, dict):
        return {str(k): to_payload(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [to_payload(item) for item in obj]
    # Fallback
    return str(obj)


# ---------------------------------------------------------------------------
# Protocol rendering
# ---------------------------------------------------------------------------

def _text(text: str) -> list[dict]:
    return [{"type": "text", "text": text}]


def render(envelope: ResultEnvelope, tool_name: Optional[str] = None) -> dict:
    """Render an envelope as ``{content: [{type, text}], isError?}``."""
    name = tool_name or envelope.tool or ""

    if envelope.ok:
        return {"content": _text(json.dumps(envelope.payload, indent=2, default=str))}

    if envelope.error_kind == PERMISSION_DENIED:
        body = {
            "error": PERMISSION_DENIED,
            "message": envelope.message,
            "tool": name,
            "mode": "read-only",
        }
        return {"content": _text(json.dumps(body, indent=2))}

    # Policy denials above are ordinary payloads; everything else is a real failure.
    return {
        "content": _text(f"Error executing tool {name}: {envelope.message}"),
        "isError": True,
    }
