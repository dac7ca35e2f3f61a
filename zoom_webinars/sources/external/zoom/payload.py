"""
Conditional request payload assembly.

A payload is described as an ordered sequence of FieldSpec entries and built
by folding them into a read-only mapping. A field whose value is None is left
out of the payload entirely; it never shows up as a JSON null.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from functools import reduce
from types import MappingProxyType
from typing import Any, Callable, Generic, Iterable, List, Mapping, Optional, TypeVar

from pydantic import BaseModel  # type: ignore

T = TypeVar("T")

Payload = Mapping[str, Any]

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def identity(value: Any) -> Any:
    return value


@dataclass(frozen=True)
class FieldSpec(Generic[T]):
    """One optional body field and how to encode it."""

    name: str
    value: Optional[T]
    encode: Callable[[T], Any] = identity


def add_if_present(body: Payload, name: str, value: Optional[T], encode: Callable[[T], Any] = identity) -> Payload:
    """Return body with name set to encode(value), or body itself when value is None."""
    if value is None:
        return body
    return MappingProxyType({**body, name: encode(value)})


def build_payload(fields: Iterable[FieldSpec]) -> Payload:
    """Fold field specs into an ordered, read-only payload.

    Fields keep the order they were given in.
    """
    return reduce(
        lambda body, spec: add_if_present(body, spec.name, spec.value, spec.encode),
        fields,
        MappingProxyType({}),
    )


def to_json_body(payload: Payload) -> dict:
    """Plain dict copy for the transport."""
    return dict(payload)


# ---- Encoders ----

def encode_timestamp(value: datetime) -> str:
    """Render a datetime in UTC with second precision and a Z suffix.

    Naive datetimes are read as local time.
    """
    return value.astimezone(timezone.utc).strftime(TIMESTAMP_FORMAT)


def encode_tracking_fields(fields: Mapping[str, str]) -> List[dict]:
    return [{"field": key, "value": value} for key, value in fields.items()]


def encode_model(model: BaseModel) -> dict:
    return model.model_dump(mode="json", exclude_none=True)
