from __future__ import annotations


class InstagramError(RuntimeError):
    """Base class for every failure raised by an Instagram publishing stage."""

    stage = "instagram"


class MediaInputError(InstagramError, ValueError):
    """Malformed media source; raised before any network call."""

    stage = "input"


class MediaUploadError(InstagramError):
    """Container creation or byte upload was rejected or lacked an identifier."""

    stage = "upload"


class ContainerProcessingError(InstagramError):
    """The platform reported ERROR or EXPIRED for a container."""

    stage = "processing"

    def __init__(self, message: str, *, status_code: str, status_text: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.status_text = status_text


class ContainerTimeoutError(InstagramError, TimeoutError):
    """The container never reached FINISHED within the poll budget."""

    stage = "processing"

    def __init__(self, message: str, *, polls: int, last_status: str = "") -> None:
        super().__init__(message)
        self.polls = polls
        self.last_status = last_status


class MediaPublishError(InstagramError):
    """The media_publish call failed or returned no post id."""

    stage = "publish"


class GraphTransportError(InstagramError):
    """The HTTP layer itself failed: network error, non-JSON body, failed poll."""

    stage = "transport"


class PublishDeadlineExceeded(InstagramError, TimeoutError):
    """The caller's deadline passed or the caller cancelled the operation."""

    stage = "deadline"


class InstagramPublishingError(RuntimeError):
    """Single outward-facing error for a failed publish attempt."""

    PREFIX = "Instagram publishing failed: "

    def __init__(self, stage_error: Exception) -> None:
        detail = str(stage_error).strip() or "An unknown error occurred."
        super().__init__(f"{self.PREFIX}{detail}")
        self.stage_error = stage_error

    @property
    def stage(self) -> str:
        return getattr(self.stage_error, "stage", "unknown")


class CredentialsNotConfiguredError(InstagramError):
    """No access token / business account id from the caller or settings."""

    stage = "credentials"
