from __future__ import annotations

import logging
from typing import Callable

from ..config import settings
from ..models.instagram import ContainerStatus, MediaContainer
from .instagram_errors import ContainerProcessingError, ContainerTimeoutError, GraphTransportError
from .meta_graph_client import GraphClient

logger = logging.getLogger("uvicorn.error")

STATUS_FAILED = "Failed to get container status."


class ContainerReadinessPoller:
    """Polls a media container until the platform finishes processing it.

    Each poll is one authenticated status read. FINISHED ends the loop,
    ERROR/EXPIRED fail it, anything else waits ``interval_seconds`` and tries
    again, up to ``max_polls`` reads in total.
    """

    def __init__(
        self,
        *,
        max_polls: int | None = None,
        interval_seconds: float | None = None,
        sleep: Callable[[float], None] | None = None,
    ) -> None:
        self.max_polls = max(max_polls or settings.instagram_publish_max_polls, 1)
        self.interval_seconds = max(
            settings.instagram_publish_poll_interval_seconds
            if interval_seconds is None
            else interval_seconds,
            0,
        )
        self._sleep = sleep

    def fetch_status(self, client: GraphClient, container: MediaContainer, access_token: str) -> MediaContainer:
        response = client.get(
            container.id,
            params={"fields": "status_code,status", "access_token": access_token},
        )
        if not response.ok:
            logger.error(
                "Instagram container %s status read failed: HTTP %s, %s",
                container.id,
                response.status_code,
                response.error_detail,
            )
            raise GraphTransportError(response.error_message or STATUS_FAILED)

        container.status_code = ContainerStatus.parse(response.payload.get("status_code"))
        container.status_message = response.text("status") or ""
        return container

    def wait_until_ready(
        self,
        client: GraphClient,
        container: MediaContainer,
        access_token: str,
    ) -> MediaContainer:
        sleep = self._sleep or client.deadline.sleep
        last_status = ""

        for attempt in range(1, self.max_polls + 1):
            self.fetch_status(client, container, access_token)
            status = container.status_code

            if status is ContainerStatus.FINISHED:
                logger.info("Instagram container %s is ready after %s poll(s)", container.id, attempt)
                return container
            if status.is_failure:
                detail = container.status_message or status.value
                raise ContainerProcessingError(
                    f"Media container processing failed with status: {detail}",
                    status_code=status.value,
                    status_text=container.status_message,
                )

            last_status = container.status_message or status.value
            if attempt < self.max_polls:
                logger.info(
                    "Instagram container %s status %s (poll %s/%s), retrying in %ss",
                    container.id,
                    status.value,
                    attempt,
                    self.max_polls,
                    self.interval_seconds,
                )
                sleep(self.interval_seconds)

        raise ContainerTimeoutError(
            "Media container processing timed out.",
            polls=self.max_polls,
            last_status=last_status,
        )
