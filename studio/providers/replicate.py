"""
Replicate prediction client - shared by the video and music providers.

Uses the async prediction API:
1. Create prediction -> get id
2. Poll until succeeded / failed / canceled or the wait budget runs out
"""
import asyncio
import logging
import time
from typing import Any, Dict, Optional

import httpx

from .exceptions import ProviderError

logger = logging.getLogger(__name__)


class ReplicateClient:
    """Thin async wrapper over the Replicate predictions endpoint."""

    BASE_URL = "https://api.replicate.com/v1"
    TERMINAL_STATES = ("succeeded", "failed", "canceled")

    def __init__(
        self,
        api_token: str,
        client: Optional[httpx.AsyncClient] = None,
        request_timeout: float = 10.0,
        poll_interval: float = 3.0,
    ):
        self.api_token = api_token
        self.poll_interval = poll_interval
        self.client = client or httpx.AsyncClient(timeout=request_timeout)

    def _get_headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Token {self.api_token}",
            "Content-Type": "application/json",
        }

    async def create_prediction(self, version: str, input: Dict[str, Any]) -> Dict[str, Any]:
        """Start a prediction. Raises ProviderError on a non-2xx response."""
        response = await self.client.post(
            f"{self.BASE_URL}/predictions",
            headers=self._get_headers(),
            json={"version": version, "input": input},
        )
        if response.status_code >= 400:
            logger.error(f"[REPLICATE] API error {response.status_code}: {response.text[:200]}")
            raise ProviderError(
                "replicate",
                f"Failed to start prediction ({response.status_code})",
                status_code=response.status_code,
            )
        return response.json()

    async def wait_for(self, prediction_id: str, max_wait: float) -> Dict[str, Any]:
        """
        Poll a prediction until it reaches a terminal state.

        Returns the last seen prediction; its status is still non-terminal when
        max_wait elapsed first. Transient poll errors are retried.
        """
        prediction: Dict[str, Any] = {"id": prediction_id, "status": "processing"}
        started = time.monotonic()

        while (
            prediction.get("status") not in self.TERMINAL_STATES
            and time.monotonic() - started < max_wait
        ):
            await asyncio.sleep(self.poll_interval)
            try:
                response = await self.client.get(
                    f"{self.BASE_URL}/predictions/{prediction_id}",
                    headers=self._get_headers(),
                )
                if response.status_code < 400:
                    prediction = response.json()
            except httpx.HTTPError as e:
                logger.debug(f"[REPLICATE] Poll error for {prediction_id}: {e}")

        return prediction

    @staticmethod
    def output_url(prediction: Dict[str, Any]) -> Optional[str]:
        output = prediction.get("output")
        if isinstance(output, list):
            return output[0] if output else None
        return output

    async def close(self):
        await self.client.aclose()
