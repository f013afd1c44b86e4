"""Shared API schema pieces."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base for API bodies: camelCase on the wire, snake_case in Python.

    Inputs accept either spelling; responses are serialized by alias.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class Pagination(ApiModel):
    page: int
    limit: int
    total: int
    total_pages: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        return cls(page=page, limit=limit, total=total, total_pages=-(-total // limit) if limit else 0)


class MessageResponse(BaseModel):
    """Body for mutations that return no resource."""

    success: bool = True
    message: str = Field(..., description="What happened")


def page_to_skip(page: int, limit: int) -> int:
    return (page - 1) * limit
