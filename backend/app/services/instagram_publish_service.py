from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable

import requests

from ..config import settings
from ..models.instagram import InstagramCredentials, MediaKind, PublishRequest, PublishResult
from .instagram_container_poller import ContainerReadinessPoller
from .instagram_errors import (
    InstagramError,
    InstagramPublishingError,
    MediaInputError,
    PublishDeadlineExceeded,
)
from .instagram_publisher import InstagramPublisher
from .instagram_upload import InstagramUploadService, UploadStrategy
from .media_probe import MediaProbeService
from .meta_graph_client import GraphClient
from .publish_deadline import PublishDeadline

logger = logging.getLogger("uvicorn.error")


class InstagramPublishService:
    """Publishes a caption plus one image or video to an Instagram business account.

    Stages run strictly in order: upload (container creation, plus bytes when
    the strategy needs them), readiness polling when the container has to be
    processed, then media_publish. Any stage failure is logged once here and
    re-raised as ``InstagramPublishingError``. Containers left behind by a
    failed attempt are not cleaned up; callers retry from scratch.
    """

    @classmethod
    def publish(
        cls,
        access_token: str,
        business_account_id: str,
        caption: str,
        media: str,
        media_kind: MediaKind | str,
        *,
        session: requests.Session | None = None,
        deadline: PublishDeadline | None = None,
        sleep: Callable[[float], None] | None = None,
        poller: ContainerReadinessPoller | None = None,
        image_strategy: str | None = None,
        video_strategy: str | None = None,
    ) -> PublishResult:
        deadline = deadline or PublishDeadline()
        try:
            if not access_token or not business_account_id:
                raise MediaInputError("Instagram access token and business account id are required.")
            asset = MediaProbeService.resolve(media, media_kind)
            request = PublishRequest(
                credentials=InstagramCredentials(
                    business_account_id=business_account_id,
                    access_token=access_token,
                ),
                caption=caption or "",
                media=asset,
            )
            strategy = InstagramUploadService.select_strategy(
                asset,
                image_strategy=image_strategy,
                video_strategy=video_strategy,
            )
            poller = poller or ContainerReadinessPoller(sleep=sleep)
            deadline.check()

            if session is not None:
                return cls._run(GraphClient(session=session, deadline=deadline), request, strategy, poller)
            with requests.Session() as owned_session:
                return cls._run(GraphClient(session=owned_session, deadline=deadline), request, strategy, poller)
        except InstagramError as exc:
            logger.error("Error publishing to Instagram (%s stage): %s", exc.stage, exc)
            raise InstagramPublishingError(exc) from exc
        except Exception as exc:
            logger.exception("Unexpected error publishing to Instagram")
            raise InstagramPublishingError(exc) from exc

    @classmethod
    def _run(
        cls,
        client: GraphClient,
        request: PublishRequest,
        strategy: UploadStrategy,
        poller: ContainerReadinessPoller,
    ) -> PublishResult:
        logger.info(
            "Publishing %s to Instagram account %s via %s",
            request.media.kind.value,
            request.business_account_id,
            strategy.name.value,
        )
        container = InstagramUploadService.create_container(client, request, strategy)
        if container.requires_processing:
            poller.wait_until_ready(client, container, request.access_token)
        return InstagramPublisher.publish_container(client, request, container)

    @classmethod
    async def publish_async(
        cls,
        access_token: str,
        business_account_id: str,
        caption: str,
        media: str,
        media_kind: MediaKind | str,
        *,
        timeout_seconds: float | None = None,
        deadline: PublishDeadline | None = None,
        **kwargs: Any,
    ) -> PublishResult:
        """Run ``publish`` on a worker thread, bounded by ``asyncio.wait_for``.

        ``timeout_seconds`` defaults to ``instagram_publish_deadline_seconds``
        (0 disables it). On timeout or task cancellation the shared deadline is
        cancelled so the worker stops at its next request or poll sleep, and the
        caller gets control back immediately even if a request is in flight.
        """
        if timeout_seconds is None:
            timeout_seconds = settings.instagram_publish_deadline_seconds or None
        deadline = deadline or PublishDeadline(timeout_seconds)
        call = asyncio.to_thread(
            cls.publish,
            access_token,
            business_account_id,
            caption,
            media,
            media_kind,
            deadline=deadline,
            **kwargs,
        )
        try:
            if timeout_seconds:
                return await asyncio.wait_for(call, timeout_seconds)
            return await call
        except asyncio.TimeoutError as exc:
            deadline.cancel()
            stage_error = PublishDeadlineExceeded("Publishing exceeded the caller deadline.")
            logger.error("Error publishing to Instagram (%s stage): %s", stage_error.stage, stage_error)
            raise InstagramPublishingError(stage_error) from exc
        except asyncio.CancelledError:
            deadline.cancel()
            raise
