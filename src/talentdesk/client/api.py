from __future__ import annotations

import logging
from typing import Any, Protocol

import requests

from talentdesk.client.errors import ApiError, NetworkError
from talentdesk.config import Settings, get_settings

logger = logging.getLogger(__name__)

Record = dict[str, Any]


class InterviewsApi(Protocol):
    def list_interviews(self) -> list[Record]: ...

    def get_interview(self, interview_id: str) -> Record: ...

    def list_for_applicant(self, applicant_id: str) -> list[Record]: ...

    def create_interview(self, data: Record) -> Record: ...

    def update_interview(self, interview_id: str, data: Record, *, timeout: float | None = None) -> Record: ...

    def update_interview_status(self, interview_id: str, status: str) -> Record: ...

    def submit_feedback(self, interview_id: str, feedback: Record) -> Record: ...

    def delete_interview(self, interview_id: str) -> None: ...


class ApiClient:
    """Blocking REST client for the ``/api`` surface."""

    def __init__(
        self,
        *,
        base_url: str | None = None,
        token: str = "",
        settings: Settings | None = None,
        http: requests.Session | None = None,
    ):
        self.settings = settings or get_settings()
        self.base_url = (base_url or self.settings.api_base_url).rstrip("/")
        self.token = token
        self.timeout_sec = float(self.settings.client_request_timeout_sec)
        self.http = http or requests.Session()

    def _request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: dict[str, Any] | None = None,
        timeout: float | None = None,
    ) -> Any:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        url = f"{self.base_url}{path}"
        try:
            response = self.http.request(
                method,
                url,
                json=json,
                params={key: value for key, value in (params or {}).items() if value not in (None, "")},
                headers=headers,
                timeout=timeout or self.timeout_sec,
            )
        except (requests.ConnectionError, requests.Timeout) as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise NetworkError("Could not connect to server") from exc
        except requests.RequestException as exc:
            logger.warning("%s %s got no response: %s", method, url, exc)
            raise NetworkError(str(exc) or "No response from server") from exc

        if response.status_code >= 400:
            raise ApiError(response.status_code, self._error_message(response))
        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            logger.warning("%s %s returned a body that is not JSON", method, url)
            raise ApiError(response.status_code, "Invalid response from server") from exc

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        try:
            payload = response.json()
        except ValueError:
            payload = None
        if isinstance(payload, dict):
            message = payload.get("message") or payload.get("detail")
            if message:
                return str(message)
        return response.reason or f"Request failed with status {response.status_code}"

    # auth

    def login(self, email: str, password: str) -> Record:
        return self._request("POST", "/users/login", json={"email": email, "password": password})

    def google_login(self, token: str) -> Record:
        return self._request("POST", "/users/google", json={"token": token})

    def health_check(self) -> Record:
        return self._request("GET", "/health-check")

    # jobs and applicants

    def list_jobs(self, status: str | None = None) -> list[Record]:
        return self._request("GET", "/jobs", params={"status": status}) or []

    def list_applicants(self, **filters: Any) -> Record:
        params = {
            "page": filters.get("page"),
            "status": filters.get("status"),
            "jobId": filters.get("job_id"),
            "source": filters.get("source"),
            "search": filters.get("search"),
        }
        return self._request("GET", "/applicants", params=params)

    # interviews

    def list_interviews(self) -> list[Record]:
        return self._request("GET", "/interviews") or []

    def get_interview(self, interview_id: str) -> Record:
        return self._request("GET", f"/interviews/{interview_id}")

    def list_for_applicant(self, applicant_id: str) -> list[Record]:
        return self._request("GET", f"/interviews/applicant/{applicant_id}") or []

    def create_interview(self, data: Record) -> Record:
        return self._request("POST", "/interviews", json=data)

    def update_interview(self, interview_id: str, data: Record, *, timeout: float | None = None) -> Record:
        return self._request("PATCH", f"/interviews/{interview_id}", json=data, timeout=timeout)

    def update_interview_status(self, interview_id: str, status: str) -> Record:
        return self._request("PUT", f"/interviews/{interview_id}/status", json={"status": status})

    def submit_feedback(self, interview_id: str, feedback: Record) -> Record:
        return self._request("PUT", f"/interviews/{interview_id}/feedback", json=feedback)

    def delete_interview(self, interview_id: str) -> None:
        self._request("DELETE", f"/interviews/{interview_id}")
