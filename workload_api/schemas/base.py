"""Shared schema configuration."""

import math

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema serialized with camelCase keys.

    Requests may use either the camelCase alias or the snake_case field name.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        str_strip_whitespace=True,
    )


class Pagination(CamelModel):
    """Pagination block returned alongside list results."""

    total: int
    page: int
    pages: int

    @classmethod
    def build(cls, total: int, page: int, limit: int) -> "Pagination":
        return cls(total=total, page=page, pages=math.ceil(total / limit))


class MessageResponse(BaseModel):
    """Plain confirmation message."""

    message: str
