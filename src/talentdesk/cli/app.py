from __future__ import annotations

import json
import logging
from typing import Any

import typer
import uvicorn

from talentdesk.api.app import create_app
from talentdesk.client.api import ApiClient
from talentdesk.client.errors import ClientError
from talentdesk.client.interviews import InterviewManager
from talentdesk.client.reporting import build_dashboard
from talentdesk.client.selectors import DATE_BUCKETS, filter_interviews, sort_by_date
from talentdesk.client.session import ClientState, SessionUser
from talentdesk.client.storage import InterviewStore, JsonFileStorage, RecordCache, SessionStore
from talentdesk.config import get_settings
from talentdesk.core.dates import utcnow
from talentdesk.db.init import init_database
from talentdesk.db.seed import create_admin, seed_sample_data
from talentdesk.db.session import SessionLocal
from talentdesk.logging_config import configure_logging

logger = logging.getLogger(__name__)

app = typer.Typer(help="TalentDesk CLI")
client_app = typer.Typer(help="Work with a running TalentDesk server")

app.add_typer(client_app, name="client")

_INITIALIZED = False


def ensure_initialized() -> None:
    global _INITIALIZED
    if _INITIALIZED:
        return
    init_database()
    _INITIALIZED = True


def _echo(payload: Any) -> None:
    typer.echo(json.dumps(payload, indent=2, default=str))


@app.command("init")
def init_cmd() -> None:
    """Create data directories and database tables."""
    configure_logging()
    init_database()
    _echo({"ok": True})


@app.command("seed")
def seed_cmd() -> None:
    """Create the default admin and sample jobs on an empty database."""
    configure_logging()
    ensure_initialized()
    with SessionLocal() as db:
        result = seed_sample_data(db)
    _echo({"ok": True, **result})


@app.command("create-admin")
def create_admin_cmd(
    email: str = typer.Option("admin@example.com", "--email"),
    password: str = typer.Option("password123", "--password"),
    name: str = typer.Option("Admin User", "--name"),
) -> None:
    configure_logging()
    ensure_initialized()
    with SessionLocal() as db:
        user, created = create_admin(db, email=email, password=password, name=name)
        _echo({"id": user.id, "email": user.email, "role": user.role, "created": created})


@app.command("serve")
def serve(
    host: str | None = typer.Option(None, "--host"),
    port: int | None = typer.Option(None, "--port"),
) -> None:
    configure_logging()
    ensure_initialized()
    settings = get_settings()
    app_instance = create_app()
    uvicorn.run(app_instance, host=host or settings.app_host, port=port or settings.app_port)


# client


def _storage() -> JsonFileStorage:
    return JsonFileStorage(get_settings().client_storage_dir)


def _signed_in() -> SessionUser:
    saved = SessionStore(_storage()).load()
    if not saved:
        typer.echo("Not signed in. Run `talentdesk client login` first.", err=True)
        raise typer.Exit(code=1)
    return SessionUser.from_dict(saved)


def _manager(user: SessionUser) -> InterviewManager:
    storage = _storage()
    api = ApiClient(token=user.token)
    applicants = RecordCache(storage, "applicants", user.id).load()
    state = ClientState(user=user, applicants=applicants)
    return InterviewManager(api, InterviewStore(storage, user.id), state)


def _backing(user: SessionUser) -> str:
    return ClientState(user=user).policy().backing


def _fail(exc: ClientError) -> typer.Exit:
    typer.echo(f"Error: {exc.message}", err=True)
    return typer.Exit(code=1)


@client_app.command("login")
def client_login(
    email: str = typer.Option(..., "--email"),
    password: str = typer.Option(..., "--password", prompt=True, hide_input=True),
) -> None:
    configure_logging()
    try:
        payload = ApiClient().login(email, password)
    except ClientError as exc:
        raise _fail(exc) from exc
    user = SessionUser.from_login(payload)
    SessionStore(_storage()).save(user.to_dict())
    _echo({"id": user.id, "email": user.email, "storage": _backing(user)})


@client_app.command("google-login")
def client_google_login(token: str = typer.Option(..., "--token")) -> None:
    configure_logging()
    try:
        payload = ApiClient().google_login(token)
    except ClientError as exc:
        raise _fail(exc) from exc
    user = SessionUser.from_login(payload, provider="google")
    SessionStore(_storage()).save(user.to_dict())
    _echo({"id": user.id, "email": user.email, "storage": _backing(user)})


@client_app.command("logout")
def client_logout() -> None:
    configure_logging()
    SessionStore(_storage()).clear()
    _echo({"ok": True})


@client_app.command("interviews")
def client_interviews(
    status: str | None = typer.Option(None, "--status"),
    type: str | None = typer.Option(None, "--type"),
    date: str | None = typer.Option(
        None, "--date", help=f"{', '.join(DATE_BUCKETS)} or YYYY-MM-DD"
    ),
    search: str | None = typer.Option(None, "--search"),
) -> None:
    configure_logging()
    manager = _manager(_signed_in())
    try:
        records = manager.list_interviews()
        selected = filter_interviews(records, now=utcnow(), status=status, type=type, date=date, search=search)
    except ClientError as exc:
        raise _fail(exc) from exc
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    _echo(sort_by_date(selected))


@client_app.command("set-status")
def client_set_status(interview_id: str, status: str) -> None:
    configure_logging()
    manager = _manager(_signed_in())
    try:
        result = manager.update_status(interview_id, status)
    except ClientError as exc:
        raise _fail(exc) from exc
    _echo({"outcome": result.outcome, "reason": result.reason, "record": result.record})


@client_app.command("delete")
def client_delete(interview_id: str) -> None:
    configure_logging()
    manager = _manager(_signed_in())
    try:
        removed_locally = manager.delete_interview(interview_id)
    except ClientError as exc:
        raise _fail(exc) from exc
    _echo({"deleted": interview_id, "removed_locally": removed_locally})


def _all_applicants(api: ApiClient) -> list[dict[str, Any]]:
    page, pages = 1, 1
    applicants: list[dict[str, Any]] = []
    while page <= pages:
        data = api.list_applicants(page=page) or {}
        applicants.extend(data.get("applicants", []))
        pages = int(data.get("pages") or 0)
        page += 1
    return applicants


@client_app.command("dashboard")
def client_dashboard() -> None:
    configure_logging()
    user = _signed_in()
    storage = _storage()
    api = ApiClient(token=user.token)
    job_cache = RecordCache(storage, "jobs", user.id)
    applicant_cache = RecordCache(storage, "applicants", user.id)

    try:
        jobs = api.list_jobs()
        applicants = _all_applicants(api)
    except ClientError as exc:
        logger.warning("Using cached jobs and applicants: %s", exc.message)
        jobs, applicants = job_cache.load(), applicant_cache.load()
    else:
        job_cache.save(jobs)
        applicant_cache.save(applicants)

    try:
        interviews = _manager(user).list_interviews()
    except ClientError as exc:
        raise _fail(exc) from exc
    _echo(build_dashboard(jobs, applicants, interviews, utcnow()).model_dump())
