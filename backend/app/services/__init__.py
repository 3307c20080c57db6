from .instagram_errors import (
    ContainerProcessingError,
    ContainerTimeoutError,
    CredentialsNotConfiguredError,
    GraphTransportError,
    InstagramError,
    InstagramPublishingError,
    MediaInputError,
    MediaPublishError,
    MediaUploadError,
    PublishDeadlineExceeded,
)
from .publish_deadline import PublishDeadline
from .meta_graph_client import GraphClient, GraphResponse
from .media_probe import MediaProbe, MediaProbeService, decode_data_uri, encode_data_uri
from .instagram_upload import (
    DirectBinary,
    InstagramUploadService,
    ResumableSession,
    TwoPhaseContainer,
    UploadStrategy,
    UploadStrategyName,
    UrlReference,
)
from .instagram_container_poller import ContainerReadinessPoller
from .instagram_publisher import InstagramPublisher
from .instagram_publish_service import InstagramPublishService
from .instagram_credentials_service import InstagramCredentialsService

__all__ = [
    "InstagramError", "MediaInputError", "MediaUploadError", "ContainerProcessingError",
    "ContainerTimeoutError", "MediaPublishError", "GraphTransportError",
    "PublishDeadlineExceeded", "CredentialsNotConfiguredError", "InstagramPublishingError",
    "PublishDeadline", "GraphClient", "GraphResponse",
    "MediaProbe", "MediaProbeService", "decode_data_uri", "encode_data_uri",
    "UploadStrategy", "UploadStrategyName", "UrlReference", "DirectBinary",
    "ResumableSession", "TwoPhaseContainer", "InstagramUploadService",
    "ContainerReadinessPoller", "InstagramPublisher", "InstagramPublishService",
    "InstagramCredentialsService",
]
