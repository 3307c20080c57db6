from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging
from typing import Any, ClassVar, Union

from ..config import settings
from ..models.instagram import MediaAsset, MediaContainer, MediaKind, PublishRequest
from .instagram_errors import MediaInputError, MediaUploadError
from .meta_graph_client import GraphClient, GraphResponse

logger = logging.getLogger("uvicorn.error")

CREATE_CONTAINER_FAILED = "Failed to create media container."
UPLOAD_MEDIA_FAILED = "Failed to upload media file to Instagram."
START_SESSION_FAILED = "Failed to start upload session."


class UploadStrategyName(str, Enum):
    URL_REFERENCE = "url_reference"
    DIRECT_BINARY = "direct_binary"
    RESUMABLE_SESSION = "resumable_session"
    TWO_PHASE = "two_phase"


def _require_id(response: GraphResponse, fallback: str, stage: str) -> str:
    identifier = response.text("id")
    if not response.ok or not identifier:
        logger.error(
            "Instagram %s failed: HTTP %s, %s",
            stage,
            response.status_code,
            response.error_detail,
        )
        raise MediaUploadError(response.error_message or fallback)
    return identifier


def _require_upload_success(response: GraphResponse, *, accept_handle: bool = False) -> None:
    accepted = response.success_flag or (accept_handle and bool(response.text("h")))
    if not response.ok or not accepted:
        logger.error(
            "Instagram media upload failed: HTTP %s, %s",
            response.status_code,
            response.error_detail,
        )
        raise MediaUploadError(response.error_message or UPLOAD_MEDIA_FAILED)


def _container_form(request: PublishRequest, **extra: Any) -> dict[str, Any]:
    form: dict[str, Any] = {
        "caption": request.caption,
        "access_token": request.access_token,
    }
    if request.media.kind is MediaKind.VIDEO:
        form["media_type"] = settings.instagram_video_media_type
    form.update(extra)
    return form


def _media_path(request: PublishRequest) -> str:
    return f"{request.business_account_id}/media"


def _require_bytes(media: MediaAsset) -> bytes:
    if media.data is None:
        raise MediaInputError("This upload strategy needs media bytes, not a URL.")
    return media.data


@dataclass(frozen=True)
class UrlReference:
    """The platform fetches the media itself from a public URL."""

    name: ClassVar[UploadStrategyName] = UploadStrategyName.URL_REFERENCE

    def requires_processing(self, media: MediaAsset) -> bool:
        return media.kind is MediaKind.VIDEO

    def create_container(self, client: GraphClient, request: PublishRequest) -> str:
        media = request.media
        if media.remote_url is None:
            raise MediaInputError("URL-reference upload needs a remote media URL.")
        url_field = "video_url" if media.kind is MediaKind.VIDEO else "image_url"
        response = client.post_form(
            _media_path(request),
            data=_container_form(request, **{url_field: media.remote_url}),
        )
        return _require_id(response, CREATE_CONTAINER_FAILED, "container creation")


@dataclass(frozen=True)
class DirectBinary:
    """Raw image bytes posted straight to the container endpoint."""

    name: ClassVar[UploadStrategyName] = UploadStrategyName.DIRECT_BINARY

    def requires_processing(self, media: MediaAsset) -> bool:
        return False

    def create_container(self, client: GraphClient, request: PublishRequest) -> str:
        data = _require_bytes(request.media)
        response = client.post_binary(
            _media_path(request),
            body=data,
            headers={"Content-Type": request.media.mime_type},
            params={"caption": request.caption, "access_token": request.access_token},
        )
        return _require_id(response, CREATE_CONTAINER_FAILED, "container creation")


@dataclass(frozen=True)
class ResumableSession:
    """Upload session first, then a container that references the session."""

    app_id: str
    name: ClassVar[UploadStrategyName] = UploadStrategyName.RESUMABLE_SESSION

    def requires_processing(self, media: MediaAsset) -> bool:
        return True

    def create_container(self, client: GraphClient, request: PublishRequest) -> str:
        media = request.media
        data = _require_bytes(media)
        session_resp = client.post_form(
            f"{self.app_id}/uploads",
            data={
                "file_name": media.file_name,
                "file_length": str(media.size),
                "file_type": media.mime_type,
                "access_token": request.access_token,
            },
        )
        session_id = _require_id(session_resp, START_SESSION_FAILED, "upload session")
        logger.info("Instagram upload session %s opened (%s bytes)", session_id, media.size)

        upload_resp = client.post_binary(
            session_id,
            body=data,
            headers={
                "Authorization": f"OAuth {request.access_token}",
                "Content-Type": media.mime_type,
                "Content-Length": str(media.size),
                "X-Entity-Name": media.file_name,
                "X-Entity-Length": str(media.size),
                "offset": "0",
            },
        )
        _require_upload_success(upload_resp, accept_handle=True)

        container_resp = client.post_form(
            _media_path(request),
            data=_container_form(request, upload_session_id=session_id),
        )
        return _require_id(container_resp, CREATE_CONTAINER_FAILED, "container creation")


@dataclass(frozen=True)
class TwoPhaseContainer:
    """Empty container first, then the bytes posted to an address built from its id.

    Images go up as multipart form data. Videos use a resumable container and a
    raw body authorised with an OAuth header.
    """

    name: ClassVar[UploadStrategyName] = UploadStrategyName.TWO_PHASE

    def requires_processing(self, media: MediaAsset) -> bool:
        return True

    def create_container(self, client: GraphClient, request: PublishRequest) -> str:
        media = request.media
        data = _require_bytes(media)
        if media.kind is MediaKind.VIDEO:
            form = _container_form(request, upload_type="resumable", file_length=str(media.size))
        else:
            form = _container_form(request)

        container_resp = client.post_form(_media_path(request), data=form)
        container_id = _require_id(container_resp, CREATE_CONTAINER_FAILED, "container creation")
        logger.info("Instagram media container %s created, uploading %s bytes", container_id, media.size)

        if media.kind is MediaKind.VIDEO:
            upload_resp = client.post_binary(
                container_resp.text("uri") or container_id,
                body=data,
                headers={
                    "Authorization": f"OAuth {request.access_token}",
                    "offset": "0",
                    "file_size": str(media.size),
                    "Content-Type": "application/octet-stream",
                },
            )
        else:
            upload_resp = client.post_form(
                container_id,
                data={"access_token": request.access_token},
                files={"source": (media.file_name, data, media.mime_type)},
                upload=True,
            )
        _require_upload_success(upload_resp)
        return container_id


UploadStrategy = Union[UrlReference, DirectBinary, ResumableSession, TwoPhaseContainer]


class InstagramUploadService:
    """Chooses an upload strategy and turns a PublishRequest into a container."""

    @classmethod
    def select_strategy(
        cls,
        media: MediaAsset,
        *,
        image_strategy: str | None = None,
        video_strategy: str | None = None,
        app_id: str | None = None,
    ) -> UploadStrategy:
        if media.is_remote:
            return UrlReference()

        if media.kind is MediaKind.VIDEO:
            configured = video_strategy or settings.instagram_video_upload_strategy
        else:
            configured = image_strategy or settings.instagram_image_upload_strategy
        try:
            name = UploadStrategyName(configured.strip().lower())
        except ValueError as exc:
            raise MediaInputError(f"Unknown upload strategy: {configured}") from exc

        if name is UploadStrategyName.TWO_PHASE:
            return TwoPhaseContainer()
        if name is UploadStrategyName.DIRECT_BINARY:
            if media.kind is not MediaKind.IMAGE:
                raise MediaInputError("Direct binary upload only supports images.")
            return DirectBinary()
        if name is UploadStrategyName.RESUMABLE_SESSION:
            resolved_app_id = app_id or settings.meta_app_id
            if not resolved_app_id:
                raise MediaInputError("Resumable session upload requires ADP_META_APP_ID.")
            return ResumableSession(app_id=resolved_app_id)
        raise MediaInputError("URL-reference upload needs a remote media URL, not local bytes.")

    @classmethod
    def create_container(
        cls,
        client: GraphClient,
        request: PublishRequest,
        strategy: UploadStrategy,
    ) -> MediaContainer:
        container_id = strategy.create_container(client, request)
        logger.info(
            "Instagram media container %s created via %s",
            container_id,
            strategy.name.value,
        )
        return MediaContainer(
            id=container_id,
            requires_processing=strategy.requires_processing(request.media),
        )
