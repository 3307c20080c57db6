from .instagram import (
    ContainerStatus,
    InstagramCredentials,
    InstagramCredentialsStatus,
    InstagramPublishPayload,
    InstagramPublishResponse,
    MediaAsset,
    MediaContainer,
    MediaKind,
    PublishRequest,
    PublishResult,
)

__all__ = [
    "ContainerStatus", "InstagramCredentials", "InstagramCredentialsStatus",
    "InstagramPublishPayload", "InstagramPublishResponse",
    "MediaAsset", "MediaContainer", "MediaKind",
    "PublishRequest", "PublishResult",
]
