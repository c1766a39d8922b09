"""
schemas.py — cross-cutting Pydantic v2 contracts shared by every router.

Defines:
  - ApiModel       (base: camelCase aliases on the wire, snake_case in Python,
                    readable straight from ORM instances)
  - to_json / to_json_list  (ORM → JSON-ready dict helpers)
"""
from __future__ import annotations

from typing import Any, Iterable, Type, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """
    Base for every request/response model.

    Wire format is camelCase (pricePerKwh, kwhCharged, ...) to match the
    browser client; populate_by_name lets server code use snake_case.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        str_strip_whitespace=True,
    )


# ---------------------------------------------------------------------------
# Serialization helpers
# ---------------------------------------------------------------------------

M = TypeVar("M", bound=ApiModel)


def to_json(model_cls: Type[M], obj: Any) -> dict:
    """Validate an ORM instance (or dict) through model_cls and dump camelCase JSON."""
    return model_cls.model_validate(obj).model_dump(mode="json", by_alias=True)


def to_json_list(model_cls: Type[M], objs: Iterable[Any]) -> list[dict]:
    return [to_json(model_cls, o) for o in objs]


__all__ = [
    "ApiModel",
    "to_json",
    "to_json_list",
]
