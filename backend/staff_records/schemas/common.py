"""Query-string schemas shared by several endpoints."""

from __future__ import annotations

from typing import Any

from marshmallow import EXCLUDE, Schema, fields, post_load, validate

from staff_records.services._shared.dto import PageMeta


class QuerySchema(Schema):
    """Query strings carry cache busters and such; stray keys are dropped."""

    class Meta:
        unknown = EXCLUDE


class PaginationQuerySchema(QuerySchema):
    """``?page=2&limit=50&sort=-created_at,name``.

    ``limit`` falls back to ``default_limit`` and is capped at ``max_limit``;
    ``sort`` becomes a list of tokens.
    """

    page = fields.Integer(load_default=1, validate=validate.Range(min=1))
    limit = fields.Integer(validate=validate.Range(min=1))
    sort = fields.String(load_default="")

    def __init__(self, *, default_limit: int = 20, max_limit: int = 200, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.default_limit = default_limit
        self.max_limit = max_limit

    @post_load
    def _normalize(self, data: dict[str, Any], **_: Any) -> dict[str, Any]:
        data["limit"] = min(data.get("limit", self.default_limit), self.max_limit)
        data["sort"] = [token.strip() for token in data["sort"].split(",") if token.strip()]
        return data


def meta_from(page: PageMeta) -> dict[str, int]:
    return page.as_dict()
