from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MediaKind(str, Enum):
    IMAGE = "image"
    VIDEO = "video"


class ContainerStatus(str, Enum):
    UNKNOWN = "UNKNOWN"
    IN_PROGRESS = "IN_PROGRESS"
    FINISHED = "FINISHED"
    ERROR = "ERROR"
    EXPIRED = "EXPIRED"
    PUBLISHED = "PUBLISHED"

    @classmethod
    def parse(cls, value: object) -> "ContainerStatus":
        try:
            return cls(str(value or "").strip().upper())
        except ValueError:
            return cls.UNKNOWN

    @property
    def is_failure(self) -> bool:
        return self in (ContainerStatus.ERROR, ContainerStatus.EXPIRED)


@dataclass(frozen=True)
class MediaAsset:
    kind: MediaKind
    mime_type: str
    file_extension: str
    data: bytes | None = field(default=None, repr=False)
    remote_url: str | None = None

    def __post_init__(self) -> None:
        if (self.data is None) == (self.remote_url is None):
            raise ValueError("MediaAsset needs exactly one of data or remote_url")

    @property
    def is_remote(self) -> bool:
        return self.remote_url is not None

    @property
    def size(self) -> int:
        return len(self.data) if self.data is not None else 0

    @property
    def file_name(self) -> str:
        return f"upload.{self.file_extension}"


@dataclass(frozen=True)
class InstagramCredentials:
    business_account_id: str
    access_token: str = field(repr=False)


@dataclass(frozen=True)
class PublishRequest:
    credentials: InstagramCredentials
    caption: str
    media: MediaAsset

    @property
    def access_token(self) -> str:
        return self.credentials.access_token

    @property
    def business_account_id(self) -> str:
        return self.credentials.business_account_id


@dataclass
class MediaContainer:
    id: str
    status_code: ContainerStatus = ContainerStatus.UNKNOWN
    status_message: str = ""
    requires_processing: bool = True


@dataclass(frozen=True)
class PublishResult:
    post_id: str
    container_id: str


class _StrictModel(BaseModel):
    model_config = ConfigDict(extra="forbid")


class InstagramPublishPayload(_StrictModel):
    caption: str
    hashtags: list[str] = []
    media: str
    media_type: MediaKind
    access_token: str | None = Field(default=None, repr=False)
    business_account_id: str | None = None

    @field_validator("media")
    @classmethod
    def validate_media(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("Media cannot be empty")
        return value.strip()

    @field_validator("hashtags")
    @classmethod
    def validate_hashtags(cls, value: list[str]) -> list[str]:
        return [tag.strip() for tag in value if isinstance(tag, str) and tag.strip()]

    def full_caption(self) -> str:
        if not self.hashtags:
            return self.caption
        return f"{self.caption}\n\n{' '.join(self.hashtags)}"


class InstagramPublishResponse(_StrictModel):
    post_id: str
    container_id: str


class InstagramCredentialsStatus(_StrictModel):
    configured: bool
    business_account_id: str | None = None
