from __future__ import annotations

from ..config import settings
from ..models.instagram import InstagramCredentials, InstagramCredentialsStatus
from .instagram_errors import CredentialsNotConfiguredError

MISSING_CREDENTIALS = (
    "Instagram credentials are not configured. Please add them on the Credentials page."
)


class InstagramCredentialsService:
    """Resolves per-call Instagram credentials, falling back to settings."""

    @classmethod
    def resolve(
        cls,
        *,
        access_token: str | None = None,
        business_account_id: str | None = None,
    ) -> InstagramCredentials:
        token = (access_token or "").strip() or settings.instagram_access_token
        account_id = (business_account_id or "").strip() or settings.instagram_business_account_id
        if not token or not account_id:
            raise CredentialsNotConfiguredError(MISSING_CREDENTIALS)
        return InstagramCredentials(business_account_id=account_id, access_token=token)

    @classmethod
    def status(cls) -> InstagramCredentialsStatus:
        configured = bool(settings.instagram_access_token and settings.instagram_business_account_id)
        return InstagramCredentialsStatus(
            configured=configured,
            business_account_id=settings.instagram_business_account_id if configured else None,
        )
