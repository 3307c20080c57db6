from __future__ import annotations

import logging

from ..models.instagram import MediaContainer, PublishRequest, PublishResult
from .instagram_errors import MediaPublishError
from .meta_graph_client import GraphClient

logger = logging.getLogger("uvicorn.error")

PUBLISH_FAILED = "Failed to publish media container."


class InstagramPublisher:
    """Turns a ready container into a live post."""

    @classmethod
    def publish_container(
        cls,
        client: GraphClient,
        request: PublishRequest,
        container: MediaContainer,
    ) -> PublishResult:
        response = client.post_form(
            f"{request.business_account_id}/media_publish",
            data={
                "access_token": request.access_token,
                "creation_id": container.id,
            },
        )
        post_id = response.text("id")
        if not response.ok or not post_id:
            logger.error(
                "Instagram media_publish failed for container %s: HTTP %s, %s",
                container.id,
                response.status_code,
                response.error_detail,
            )
            raise MediaPublishError(response.error_message or PUBLISH_FAILED)

        logger.info("Instagram post %s published from container %s", post_id, container.id)
        return PublishResult(post_id=post_id, container_id=container.id)
