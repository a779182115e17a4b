"""
Shared helpers for shaping Trello payloads.
"""

from typing import Any, Dict, List, Type, TypeVar

from pydantic import BaseModel

T = TypeVar("T", bound=BaseModel)


def as_list(payload: Any) -> List[Dict[str, Any]]:
    """
    Coerce a collection payload into a list of dict elements.
    Raises ValueError if the payload is not a JSON array.
    """
    if payload is None:
        return []
    if not isinstance(payload, list):
        raise ValueError("Expected a JSON array from Trello.")
    return [e for e in payload if isinstance(e, dict)]


def as_object(payload: Any) -> Dict[str, Any]:
    if not isinstance(payload, dict):
        raise ValueError("Expected a JSON object from Trello.")
    return payload


def parse_many(model: Type[T], payload: Any) -> List[T]:
    return [model.model_validate(e) for e in as_list(payload)]


def parse_one(model: Type[T], payload: Any) -> T:
    return model.model_validate(as_object(payload))
