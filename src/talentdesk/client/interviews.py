from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Literal

from pydantic import ValidationError

from talentdesk.client.api import InterviewsApi
from talentdesk.client.errors import (
    ApiError,
    ClientError,
    InterviewNotFound,
    InvalidInterviewData,
    NetworkError,
)
from talentdesk.client.notices import NoticeBoard
from talentdesk.client.session import ClientState, StoragePolicy
from talentdesk.client.storage import InterviewStore, Record
from talentdesk.config import Settings, get_settings
from talentdesk.core.dates import format_timestamp, normalize_timestamp, utcnow
from talentdesk.core.ids import ids_equal, is_synthetic_id, normalize_id, synthetic_id
from talentdesk.types import INTERVIEW_STATUSES, Feedback

logger = logging.getLogger(__name__)

Outcome = Literal["persisted", "local_only", "failed"]

OFFLINE_NOTICE = "Could not connect to server. Changes saved locally."
DEFAULT_LOCAL_JOB_ID = "default_job_id"

# fields the server's PATCH endpoint writes; status and feedback have their own calls
EDITABLE_FIELDS = frozenset({"date", "time", "duration", "type", "location", "notes", "interviewers"})


@dataclass(slots=True)
class MutationResult:
    """What happened to a status change or edit, plus the record to show."""

    outcome: Outcome
    record: Record
    reason: str = ""

    @property
    def persisted(self) -> bool:
        return self.outcome == "persisted"


def merge_by_id(remote: list[Record], local: list[Record]) -> list[Record]:
    """Remote records first, then local records whose id the server did not return."""
    seen = {normalize_id(record) for record in remote}
    return [*remote, *(record for record in local if normalize_id(record) not in seen)]


class InterviewManager:
    """Owns interview reads and writes across the REST API and the local store.

    Which side is authoritative is decided per call from the signed-in user:
    Google and demo accounts keep their interviews in the local store and only
    borrow from the server, every other account goes through the API.
    """

    def __init__(
        self,
        api: InterviewsApi,
        store: InterviewStore,
        state: ClientState,
        *,
        notices: NoticeBoard | None = None,
        settings: Settings | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self.api = api
        self.store = store
        self.state = state
        self.notices = notices or NoticeBoard()
        self.settings = settings or get_settings()
        self.clock = clock or utcnow

    def _policy(self) -> StoragePolicy:
        return self.state.policy()

    def _now(self) -> str:
        return format_timestamp(self.clock())

    def _keeps_locally(self, policy: StoragePolicy, interview_id: Any) -> bool:
        return policy.local_backed or is_synthetic_id(interview_id)

    def _show(self, records: list[Record]) -> list[Record]:
        self.state.interviews = [dict(record) for record in records]
        return records

    def _remember(self, record: Record) -> Record:
        for index, existing in enumerate(self.state.interviews):
            if ids_equal(existing, record):
                self.state.interviews[index] = dict(record)
                break
        else:
            self.state.interviews.append(dict(record))
        return record

    def _forget(self, interview_id: Any) -> None:
        self.state.interviews = [record for record in self.state.interviews if not ids_equal(record, interview_id)]

    def _placeholder(self, interview_id: Any) -> Record:
        now = self._now()
        return {
            "id": normalize_id(interview_id),
            "applicant_id": "",
            "applicant_name": "New Applicant",
            "job_id": "",
            "job_title": "Position",
            "interviewers": [],
            "date": now,
            "time": "",
            "duration": 60,
            "type": "video",
            "location": "Zoom",
            "status": "scheduled",
            "feedback": None,
            "notes": "",
            "created_at": now,
            "updated_at": now,
        }

    def _resolve_current(self, interview_id: Any, policy: StoragePolicy) -> Record | None:
        if self._keeps_locally(policy, interview_id):
            found = self.store.find(interview_id)
            if found is not None:
                return found
        for record in self.state.interviews:
            if ids_equal(record, interview_id):
                return dict(record)
        if self._keeps_locally(policy, interview_id):
            return None
        try:
            return self.api.get_interview(normalize_id(interview_id))
        except NetworkError:
            logger.info("Server unreachable while resolving interview %s", interview_id)
            return None
        except ApiError as exc:
            if exc.is_not_found:
                raise InterviewNotFound(f"Interview {normalize_id(interview_id)} not found") from exc
            raise

    # reads

    def list_interviews(self) -> list[Record]:
        policy = self._policy()
        if policy.local_backed:
            stored = self.store.load()
            if stored:
                return self._show(stored)

        try:
            remote = self.api.list_interviews()
        except ClientError as exc:
            if not policy.local_backed:
                raise
            logger.warning("Falling back to local interviews: %s", exc.message)
            return self._show(self.store.load())

        if policy.local_backed:
            merged = merge_by_id(remote, self.store.load())
            self.store.save(merged)
            return self._show(merged)
        return self._show(remote)

    def sync_interviews(self) -> list[Record]:
        """Pull the server list and fold it into the local store, keeping local-only records."""
        policy = self._policy()
        if not policy.local_backed:
            return self.list_interviews()
        try:
            remote = self.api.list_interviews()
        except ClientError as exc:
            logger.warning("Sync skipped, server unavailable: %s", exc.message)
            return self._show(self.store.load())
        merged = merge_by_id(remote, self.store.load())
        self.store.save(merged)
        return self._show(merged)

    def get_interview(self, interview_id: Any) -> Record:
        policy = self._policy()
        key = normalize_id(interview_id)
        if not key:
            raise InvalidInterviewData("Interview ID is required")

        if self._keeps_locally(policy, key):
            found = self.store.find(key)
            if found is not None:
                return self._remember(found)

        if policy.remote_backed:
            if is_synthetic_id(key):
                raise InterviewNotFound(f"Interview {key} not found")
            try:
                return self._remember(self.api.get_interview(key))
            except ApiError as exc:
                if exc.is_not_found:
                    raise InterviewNotFound(f"Interview {key} not found") from exc
                raise

        try:
            record = self.api.get_interview(key)
        except ClientError as exc:
            logger.info("Interview %s unknown to the server (%s), creating a placeholder", key, exc.message)
            record = self._placeholder(key)
            self.notices.info("Created a new placeholder interview. This is saved on this machine.")
        self.store.upsert(record)
        return self._remember(record)

    def list_for_applicant(self, applicant_id: Any) -> list[Record]:
        key = normalize_id(applicant_id)
        policy = self._policy()
        if policy.local_backed or is_synthetic_id(key):
            return [record for record in self.list_interviews() if ids_equal(record.get("applicant_id"), key)]
        return self.api.list_for_applicant(key)

    # writes

    def schedule_interview(self, data: Record) -> Record:
        policy = self._policy()
        applicant_id = normalize_id(data.get("applicant_id"))
        job_id = normalize_id(data.get("job_id"))
        if not applicant_id:
            raise InvalidInterviewData("Applicant is required")
        if not data.get("date"):
            raise InvalidInterviewData("Interview date is required")
        if policy.remote_backed and not job_id:
            raise InvalidInterviewData("Job is required")
        date = normalize_timestamp(data["date"])
        if date is None:
            raise InvalidInterviewData("Invalid date format. Please select a valid date.")

        payload = {**data, "applicant_id": applicant_id, "job_id": job_id, "date": date}

        if policy.local_backed:
            now = self._now()
            applicant = next((item for item in self.state.applicants if ids_equal(item, applicant_id)), None)
            record: Record = {
                "interviewers": [],
                "time": "",
                "duration": 60,
                "type": "video",
                "location": "",
                "notes": "",
                **payload,
                "id": synthetic_id("local"),
                "job_id": job_id or DEFAULT_LOCAL_JOB_ID,
                "status": "scheduled",
                "feedback": None,
                "applicant_name": applicant.get("name", "") if applicant else "Unknown Applicant",
                "job_title": (applicant.get("job_title") if applicant else "") or "Unknown Position",
                "created_at": now,
                "updated_at": now,
            }
            self.store.append(record)
            self.notices.success("Interview scheduled successfully!")
            return self._remember(record)

        if is_synthetic_id(applicant_id) or is_synthetic_id(job_id):
            raise InvalidInterviewData("Locally stored applicants or jobs cannot be scheduled on the server")
        record = self.api.create_interview(payload)
        self.notices.success("Interview scheduled successfully!")
        return self._remember(record)

    def update_status(self, interview_id: Any, status: str) -> MutationResult:
        if status not in INTERVIEW_STATUSES:
            raise InvalidInterviewData(f"Status must be one of {list(INTERVIEW_STATUSES)}")
        policy = self._policy()
        key = normalize_id(interview_id)
        current = self._resolve_current(key, policy)

        if self._keeps_locally(policy, key):
            record = {**(current or {"id": key}), "status": status, "updated_at": self._now()}
            self.store.upsert(record)
            self._remember(record)
            if policy.local_backed:
                return MutationResult("persisted", record)
            return MutationResult("local_only", record, reason="record exists only on this machine")

        try:
            server = self.api.update_interview_status(key, status)
        except NetworkError as exc:
            record = {**(current or {"id": key}), "status": status, "updated_at": self._now()}
            self.notices.info(OFFLINE_NOTICE)
            return MutationResult("local_only", self._remember(record), reason=exc.message)
        except ApiError as exc:
            self.notices.error(exc.message)
            raise

        record = {**(current or {}), **(server or {})}
        return MutationResult("persisted", self._remember(record))

    def edit_interview(self, interview_id: Any, changes: Record) -> MutationResult:
        key = normalize_id(interview_id)
        requested = {name: value for name, value in changes.items() if name != "id"}
        base: Record = {"id": key}
        try:
            policy = self._policy()
            try:
                base = self._resolve_current(key, policy) or base
            except ClientError as exc:
                return self._failed_edit(base, requested, exc.message)

            if "date" in requested:
                date = normalize_timestamp(requested["date"])
                if date is None:
                    return self._failed_edit(base, requested, "Invalid date format")
                requested["date"] = date

            if self._keeps_locally(policy, key):
                record = {**base, **requested, "id": base.get("id", key), "updated_at": self._now()}
                self.store.upsert(record)
                self._remember(record)
                if policy.local_backed:
                    return MutationResult("persisted", record)
                return MutationResult("local_only", record, reason="record exists only on this machine")

            unsupported = sorted(set(requested) - EDITABLE_FIELDS)
            if unsupported:
                return self._failed_edit(base, requested, f"Cannot edit {', '.join(unsupported)} here")

            try:
                server = self.api.update_interview(
                    key, requested, timeout=float(self.settings.client_edit_timeout_sec)
                )
            except NetworkError as exc:
                record = {**base, **requested, "updated_at": self._now()}
                self.notices.info(OFFLINE_NOTICE)
                return MutationResult("local_only", self._remember(record), reason=exc.message)
            except ApiError as exc:
                return self._failed_edit(base, requested, exc.message)

            record = {**base, **requested, **(server or {})}
            return MutationResult("persisted", self._remember(record))
        except Exception as exc:
            logger.exception("Edit of interview %s failed", key)
            return self._failed_edit(base, requested, str(exc) or type(exc).__name__)

    def _failed_edit(self, base: Record, requested: Record, reason: str) -> MutationResult:
        self.notices.error(reason)
        return MutationResult("failed", {**base, **requested}, reason=reason)

    def submit_feedback(self, interview_id: Any, feedback: Record) -> Record:
        try:
            submitted = Feedback.model_validate(feedback).model_dump(exclude_unset=True)
        except ValidationError as exc:
            raise InvalidInterviewData(f"Invalid feedback: {exc.errors()[0]['msg']}") from exc

        policy = self._policy()
        key = normalize_id(interview_id)

        if self._keeps_locally(policy, key):
            current = self.store.find(key)
            if current is None:
                raise InterviewNotFound(f"Interview {key} not found in local storage")
            if policy.remote_backed:
                raise InvalidInterviewData(
                    "This interview exists only on this machine and cannot be sent to the server"
                )
            record = {
                **current,
                "feedback": {**(current.get("feedback") or {}), **submitted},
                "status": "completed",
                "updated_at": self._now(),
            }
            self.store.upsert(record)
            self.notices.success("Feedback saved")
            return self._remember(record)

        current = self._resolve_current(key, policy) or {"id": key}
        held_status = "completed"
        server = self.api.submit_feedback(key, submitted)
        record = {
            **current,
            "feedback": {**(current.get("feedback") or {}), **submitted},
            **(server or {}),
        }
        if record.get("status") != held_status:
            try:
                record.update(self.api.update_interview_status(key, held_status) or {})
            except NetworkError as exc:
                logger.info("Could not mark interview %s %s on the server: %s", key, held_status, exc.message)
                self.notices.info(OFFLINE_NOTICE)
            except ApiError as exc:
                self.notices.error(exc.message)
                raise
        if record.get("status") != held_status:
            logger.info(
                "Keeping status %r for interview %s instead of server value %r",
                held_status,
                key,
                record.get("status"),
            )
            record["status"] = held_status
        self.notices.success("Feedback saved")
        return self._remember(record)

    def delete_interview(self, interview_id: Any) -> bool:
        """Delete remotely first; returns whether a local copy was removed."""
        policy = self._policy()
        key = normalize_id(interview_id)
        try:
            self.api.delete_interview(key)
        except ClientError as exc:
            not_found = isinstance(exc, ApiError) and exc.is_not_found
            if not (policy.local_backed or not_found or is_synthetic_id(key)):
                self.notices.error(exc.message)
                raise
            logger.info("Remote delete of %s failed (%s), removing local copy", key, exc.message)
            removed = self.store.remove(key)
            self._forget(key)
            return removed

        removed = self.store.remove(key) if policy.local_backed else False
        self._forget(key)
        self.notices.success("Interview deleted")
        return removed
