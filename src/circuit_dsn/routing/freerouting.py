"""Client for the Freerouting web API.

Routes a DSN design remotely and returns the Specctra session (``.ses``)
text. The job lifecycle is:

1. ``POST sessions/create``
2. ``POST jobs/enqueue`` with the session id
3. ``POST jobs/{id}/input`` with the DSN text as base64
4. ``PUT jobs/{id}/start``
5. ``GET jobs/{id}`` until ``COMPLETED`` (``FAILED``/``CANCELLED`` abort)
6. ``GET jobs/{id}/output`` and decode the base64 payload
"""

from __future__ import annotations

import base64
import logging
import time
import uuid
from collections.abc import Callable
from typing import Any

import requests

from ..config import FreeroutingConfig

logger = logging.getLogger(__name__)

JOB_NAME = "circuit-json-to-dsn"
INPUT_FILENAME = "input.dsn"
REQUEST_TIMEOUT_SEC = 60.0

STATE_COMPLETED = "COMPLETED"
FAILED_STATES = frozenset({"FAILED", "CANCELLED"})


class FreeroutingError(RuntimeError):
    """Raised when the Freerouting API rejects a request or a job fails."""


class FreeroutingTimeoutError(FreeroutingError):
    """Raised when a routing job does not complete within the timeout."""


class FreeroutingClient:
    """Synchronous Freerouting API client.

    Args:
        config: Endpoint, profile and polling settings.
        session: HTTP session to use; a new ``requests.Session`` by default.
        sleep: Sleep function used between polls.
        clock: Monotonic clock used for the timeout.
    """

    def __init__(
        self,
        config: FreeroutingConfig | None = None,
        *,
        session: requests.Session | None = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.config = config or FreeroutingConfig()
        self.profile_id = self.config.profile_id or str(uuid.uuid4())
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Freerouting-Profile-ID": self.profile_id,
                "Freerouting-Environment-Host": self.config.environment_host,
            }
        )
        self._sleep = sleep
        self._clock = clock

    def _url(self, path: str) -> str:
        return f"{self.config.base_url.rstrip('/')}/{path}"

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            response = self.session.request(method, self._url(path), timeout=REQUEST_TIMEOUT_SEC, **kwargs)
            response.raise_for_status()
        except requests.RequestException as e:
            raise FreeroutingError(f"{method} {path} failed: {e}") from e
        if not response.content:
            return None
        return response.json()

    def create_session(self) -> str:
        payload = self._request("POST", "sessions/create")
        return str(payload["id"])

    def enqueue_job(self, session_id: str, *, name: str = JOB_NAME) -> str:
        payload = self._request(
            "POST",
            "jobs/enqueue",
            json={"session_id": session_id, "name": name, "priority": "NORMAL"},
        )
        return str(payload["id"])

    def upload_input(self, job_id: str, dsn_text: str) -> None:
        data = base64.b64encode(dsn_text.encode("utf-8")).decode("ascii")
        self._request("POST", f"jobs/{job_id}/input", json={"filename": INPUT_FILENAME, "data": data})

    def start_job(self, job_id: str) -> None:
        self._request("PUT", f"jobs/{job_id}/start")

    def job_state(self, job_id: str) -> str:
        payload = self._request("GET", f"jobs/{job_id}")
        return str(payload.get("state", ""))

    def wait_for_job(self, job_id: str) -> None:
        """Poll until the job completes.

        Raises:
            FreeroutingError: If the job fails or is cancelled.
            FreeroutingTimeoutError: If ``timeout_sec`` elapses first.
        """
        deadline = self._clock() + self.config.timeout_sec
        while self._clock() < deadline:
            state = self.job_state(job_id)
            if state == STATE_COMPLETED:
                return
            if state in FAILED_STATES:
                raise FreeroutingError(f"Job {state.lower()}: {job_id}")
            logger.debug("Job %s state %s", job_id, state or "<unknown>")
            self._sleep(self.config.poll_interval_sec)
        raise FreeroutingTimeoutError(f"Job {job_id} timed out after {self.config.timeout_sec:g}s")

    def download_output(self, job_id: str) -> str:
        payload = self._request("GET", f"jobs/{job_id}/output")
        return base64.b64decode(payload["data"]).decode("utf-8")

    def route(self, dsn_text: str) -> str:
        """Route a DSN design and return the session file text."""
        session_id = self.create_session()
        job_id = self.enqueue_job(session_id)
        logger.info("Freerouting job %s enqueued (session %s)", job_id, session_id)
        self.upload_input(job_id, dsn_text)
        self.start_job(job_id)
        self.wait_for_job(job_id)
        ses_text = self.download_output(job_id)
        logger.info("Freerouting job %s completed (%d bytes)", job_id, len(ses_text))
        return ses_text
