"""Pydantic models for the Microsoft Graph payloads used by the list store."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class GraphBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class TokenResponse(GraphBaseModel):
    access_token: str
    expires_in: int = 3600
    token_type: str = "Bearer"


class SiteResponse(GraphBaseModel):
    id: str


class GraphListItem(GraphBaseModel):
    id: str
    fields: dict[str, Any] = Field(default_factory=dict[str, Any])
    created_date_time: str | None = Field(default=None, alias="createdDateTime")
    last_modified_date_time: str | None = Field(default=None, alias="lastModifiedDateTime")


class GraphListItemsPage(GraphBaseModel):
    value: list[GraphListItem] = Field(default_factory=list["GraphListItem"])
    next_link: str | None = Field(default=None, alias="@odata.nextLink")


class CreatedItemResponse(GraphBaseModel):
    id: str


class GraphErrorDetail(GraphBaseModel):
    code: str | None = None
    message: str | None = None


class GraphErrorResponse(GraphBaseModel):
    error: GraphErrorDetail
