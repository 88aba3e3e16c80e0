"""
Sanity query API client for the properties service.
"""

from typing import Any, List, Optional
from urllib.parse import quote_plus
import httpx

from shared.logging import get_logger
from shared.errors import ExternalServiceError
from ..models import QueryResponse


class SanityClient:
    """Client for pulling one content type from the Sanity query API.

    The configured base URL already ends in ``?query=``; the encoded GROQ
    query is appended to it as-is.
    """

    def __init__(
        self,
        api_base_url: str,
        content_type: str = "property",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_base_url = api_base_url
        self.content_type = content_type
        self.timeout = timeout
        self._transport = transport
        self.logger = get_logger("properties.sanity_client")

    def build_query(self) -> str:
        """GROQ query selecting every document of the content type."""
        return f'*[_type == "{self.content_type}"]'

    def build_url(self) -> str:
        return self.api_base_url + quote_plus(self.build_query())

    async def fetch_documents(self) -> Optional[List[Any]]:
        """
        Fetch the raw ``result`` array.

        Returns None when the response has no list ``result``. Raises
        ExternalServiceError on transport failures, non-200 statuses and
        bodies that are not JSON.
        """
        url = self.build_url()

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(url)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise ExternalServiceError(
                service="sanity",
                message=f"Request failed: {exc}",
                details={"reason": "transport", "url": url, "error_type": type(exc).__name__}
            ) from exc

        if response.status_code != 200:
            raise ExternalServiceError(
                service="sanity",
                message=f"Unexpected status {response.status_code}",
                details={"reason": "status", "url": url, "status_code": response.status_code}
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise ExternalServiceError(
                service="sanity",
                message=f"Failed to parse JSON: {exc}",
                details={"reason": "invalid_json", "url": url}
            ) from exc

        envelope = QueryResponse.model_validate(payload)
        self.logger.debug(
            "Sanity query completed",
            url=url,
            query_ms=envelope.ms,
            result_size=len(envelope.result) if envelope.result is not None else None,
        )
        return envelope.result
