"""
Operation envelope: the single response shape every tool call produces.

Success: {"content": [...], "structuredContent": {...}?}
Failure: {"isError": True, "message": str, "errors": [...]?}
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class ToolResult:
    content: List[Dict[str, Any]] = field(default_factory=list)
    structured_content: Optional[Dict[str, Any]] = None

    def to_envelope(self) -> Dict[str, Any]:
        envelope: Dict[str, Any] = {"content": list(self.content)}
        if self.structured_content is not None:
            envelope["structuredContent"] = self.structured_content
        return envelope


def text_block(text: str) -> Dict[str, Any]:
    return {"type": "text", "text": text}


def image_block(data_base64: str, mime_type: str) -> Dict[str, Any]:
    return {"type": "image", "data": data_base64, "mimeType": mime_type}


def blob_block(uri: str, data_base64: str, mime_type: str) -> Dict[str, Any]:
    return {
        "type": "resource",
        "resource": {"uri": uri, "mimeType": mime_type, "blob": data_base64},
    }


def as_result(value: Any) -> ToolResult:
    """Wrap a handler return value; strings are sent verbatim, data as indented JSON."""
    if isinstance(value, ToolResult):
        return value
    if isinstance(value, str):
        return ToolResult(content=[text_block(value)])
    return ToolResult(
        content=[text_block(json.dumps(value, indent=2, ensure_ascii=False))]
    )


def success_envelope(value: Any) -> Dict[str, Any]:
    return as_result(value).to_envelope()


def failure_envelope(
    message: str, errors: Optional[List[Dict[str, Any]]] = None
) -> Dict[str, Any]:
    envelope: Dict[str, Any] = {"isError": True, "message": message}
    if errors is not None:
        envelope["errors"] = errors
    return envelope


__all__ = [
    "ToolResult",
    "as_result",
    "blob_block",
    "failure_envelope",
    "image_block",
    "success_envelope",
    "text_block",
]
