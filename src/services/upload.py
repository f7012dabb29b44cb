"""
Signed parameters for direct client uploads to the media service.

The browser uploads files straight to ImageKit; the backend only hands out
the short-lived ``{token, expire, signature}`` triple the SDK computes from
the account's private key.
"""

import logging
from typing import Any, Dict, Optional

from imagekitio import ImageKit

from src.config import IK_ENDPOINT, IK_PUBLIC_KEY, IK_SECRET_KEY

logger = logging.getLogger(__name__)


class UploadAuthorizerNotConfigured(RuntimeError):
    """Raised when no private key is available to sign upload parameters."""


class UploadAuthorizer:
    """Issues upload authentication parameters from process-wide credentials."""

    def __init__(self, public_key: str, private_key: str, url_endpoint: str):
        self.public_key = public_key
        self.private_key = private_key
        self.url_endpoint = url_endpoint
        self._client: Optional[ImageKit] = None

    @property
    def client(self) -> ImageKit:
        """The SDK client, built on first use."""
        if not self.private_key:
            raise UploadAuthorizerNotConfigured("Media service private key is not set")
        if self._client is None:
            self._client = ImageKit(
                public_key=self.public_key,
                private_key=self.private_key,
                url_endpoint=self.url_endpoint,
            )
            logger.info(f"Media service client ready for {self.url_endpoint}")
        return self._client

    def get_authentication_parameters(
        self, token: str = "", expire: int = 0
    ) -> Dict[str, Any]:
        """
        Signed parameters for one client upload, as returned by the SDK.

        Args:
            token: Unique token; the SDK generates one when empty
            expire: Unix time after which the signature is rejected; the SDK
                picks a near-future time when 0

        Returns:
            dict: ``token``, ``expire`` and ``signature``

        Raises:
            UploadAuthorizerNotConfigured: If no private key is set
        """
        return self.client.get_authentication_parameters(token, expire)


upload_authorizer = UploadAuthorizer(
    public_key=IK_PUBLIC_KEY,
    private_key=IK_SECRET_KEY,
    url_endpoint=IK_ENDPOINT,
)


def get_upload_authorizer() -> UploadAuthorizer:
    return upload_authorizer
