from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # Naive timestamps are taken to be UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class Comment(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = ""
    author: str = ""
    email: str = ""
    website: str = ""
    ip: str = ""
    user_agent: str = Field("", alias="userAgent")
    content: str = ""
    is_admin: bool = Field(False, alias="isAdmin")
    is_approved: bool = Field(True, alias="isApproved")
    pub_date: datetime = Field(default_factory=utc_now, alias="pubDate")

    @field_validator("pub_date")
    @classmethod
    def _ensure_aware(cls, v: datetime) -> datetime:
        return _as_utc(v)


class Post(BaseModel):
    """A blog post as stored in the legacy XML format.

    ``id`` is not part of the document body on read: the storage layer
    supplies it (usually from the file name).
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = ""
    title: str = ""
    slug: str = ""
    correlation_key: str = Field("", alias="correlationKey")
    author: str = ""
    meta_description: str = Field("", alias="metaDescription")
    content: str = ""
    content_type: str = Field("", alias="contentType")
    image_url: str = Field("", alias="imageUrl")
    thumbnail_url: str = Field("", alias="thumbnailUrl")
    pub_date: datetime = Field(default_factory=utc_now, alias="pubDate")
    last_modified: datetime = Field(default_factory=utc_now, alias="lastModified")
    is_published: bool = Field(True, alias="isPublished")
    is_featured: bool = Field(False, alias="isFeatured")
    categories: List[str] = Field(default_factory=list)
    comments: Optional[List[Comment]] = Field(default_factory=list)

    @field_validator("pub_date", "last_modified")
    @classmethod
    def _ensure_aware(cls, v: datetime) -> datetime:
        return _as_utc(v)
