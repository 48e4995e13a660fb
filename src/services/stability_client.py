"""HTTP client for the Stability AI image generation endpoint."""

from __future__ import annotations

import logging
from typing import Dict, Optional

import requests

from services.errors import GenerationFailed
from utils.env import get_api_url, get_http_timeout
from utils.error_handling import timed

logger = logging.getLogger(__name__)


class StabilityClient:
    """Issues a single multipart generation request. No retries."""

    def __init__(
        self,
        api_url: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.api_url = api_url or get_api_url()
        self.timeout = timeout if timeout is not None else get_http_timeout()
        self.session = session or requests.Session()

    @timed
    def generate_image(self, api_key: str, fields: Dict[str, str]) -> bytes:
        """POST the form fields and return the raw image bytes.

        Raises GenerationFailed for non-2xx answers and transport errors.
        """
        headers = {
            "Authorization": f"Bearer {api_key}",
            "Accept": "image/*",
        }
        try:
            # files= forces a multipart/form-data body
            response = self.session.post(
                self.api_url,
                headers=headers,
                files={"none": ""},
                data=fields,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.warning(
                "Generation request failed: %s",
                exc,
                extra={"event": "generation.request_error"},
            )
            raise GenerationFailed(None, str(exc)) from exc

        if not 200 <= response.status_code < 300:
            logger.warning(
                "Generation API returned %s",
                response.status_code,
                extra={"event": "generation.api_error", "status": response.status_code},
            )
            raise GenerationFailed(response.status_code, response.text)

        return response.content
