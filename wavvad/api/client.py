"""
wavvad/api/client.py
=====================
VAD Service Client (wav-files-vad-api)

Responsibility:
    - Send one VAD job (input file, output directory, optional model) to
      one endpoint as a JSON POST
    - Treat HTTP 200 as success and everything else as failure
    - Surface network errors (timeout, refused, DNS) with their text

One attempt per file: there is no retry or back-off here. The VAD
service reads the input and writes its output itself; the response body
is ignored.

This module does NOT:
    - Validate WAV files
    - Create output directories
    - Choose endpoints (see wavvad.dispatcher)
"""

import logging

import requests

from wavvad.config import DEFAULT_REQUEST_TIMEOUT
from wavvad.models import ProcessingRequest

logger = logging.getLogger("wavvad.api.client")


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class VadApiError(Exception):
    """
    Raised when a VAD request does not succeed.

    ``status_code`` is set for non-200 responses and None for
    network-level failures.
    """

    def __init__(self, endpoint: str, message: str, status_code: int | None = None):
        self.endpoint = endpoint
        self.message = message
        self.status_code = status_code
        super().__init__(message)


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


class VadApiClient:
    """
    Client bound to a single VAD endpoint.

    Each dispatcher worker owns one client, so the underlying
    ``requests.Session`` is never shared between threads.
    """

    def __init__(
        self,
        endpoint: str,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        self.endpoint = endpoint
        self.timeout = timeout
        self._session = session or requests.Session()
        self._owns_session = session is None

    def submit(self, request: ProcessingRequest) -> None:
        """
        POST one job to the endpoint.

        Raises:
            VadApiError: On a non-200 status or any requests exception.
        """
        try:
            resp = self._session.post(
                self.endpoint,
                json=request.to_payload(),
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise VadApiError(self.endpoint, f"Request to {self.endpoint} failed: {exc}") from exc

        if resp.status_code != 200:
            raise VadApiError(
                self.endpoint,
                f"API returned status {resp.status_code}",
                status_code=resp.status_code,
            )

        logger.debug("VAD job accepted by %s for %s", self.endpoint, request.input_file)

    def close(self) -> None:
        if self._owns_session:
            self._session.close()

    def __enter__(self) -> "VadApiClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
