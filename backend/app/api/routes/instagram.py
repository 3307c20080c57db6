from fastapi import APIRouter, HTTPException

from ...models.instagram import (
    InstagramCredentialsStatus,
    InstagramPublishPayload,
    InstagramPublishResponse,
)
from ...services.instagram_credentials_service import InstagramCredentialsService
from ...services.instagram_errors import (
    CredentialsNotConfiguredError,
    InstagramPublishingError,
    MediaInputError,
    PublishDeadlineExceeded,
)
from ...services.instagram_publish_service import InstagramPublishService


router = APIRouter(prefix="/instagram", tags=["instagram"])


@router.post("/publish", response_model=InstagramPublishResponse)
async def publish_instagram_post(payload: InstagramPublishPayload):
    """Publish a generated ad (caption, hashtags, media) to Instagram."""
    try:
        credentials = InstagramCredentialsService.resolve(
            access_token=payload.access_token,
            business_account_id=payload.business_account_id,
        )
    except CredentialsNotConfiguredError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    try:
        result = await InstagramPublishService.publish_async(
            credentials.access_token,
            credentials.business_account_id,
            payload.full_caption(),
            payload.media,
            payload.media_type,
        )
    except InstagramPublishingError as exc:
        if isinstance(exc.stage_error, MediaInputError):
            status_code = 400
        elif isinstance(exc.stage_error, PublishDeadlineExceeded):
            status_code = 504
        else:
            status_code = 502
        raise HTTPException(status_code=status_code, detail=str(exc))

    return InstagramPublishResponse(post_id=result.post_id, container_id=result.container_id)


@router.get("/credentials/status", response_model=InstagramCredentialsStatus)
async def instagram_credentials_status():
    """Report whether fallback Instagram credentials are configured."""
    return InstagramCredentialsService.status()
