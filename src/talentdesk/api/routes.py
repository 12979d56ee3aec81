from __future__ import annotations

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status
from pydantic import ValidationError
from sqlalchemy.orm import Session

from talentdesk.api.deps import get_current_user, get_db, require_admin
from talentdesk.api.errors import validation_message
from talentdesk.api.schemas import (
    ApplicantCreate,
    ApplicantDetailResponse,
    ApplicantNoteRequest,
    ApplicantPageResponse,
    ApplicantResponse,
    ApplicantStatusRequest,
    AuthResponse,
    FeedbackRequest,
    GoogleLoginRequest,
    InterviewCreateRequest,
    InterviewResponse,
    InterviewStatusRequest,
    InterviewUpdateRequest,
    JobCreateRequest,
    JobDetailResponse,
    JobResponse,
    JobUpdateRequest,
    LoginRequest,
    MessageResponse,
    ProfileUpdateRequest,
    RegisterRequest,
    UserResponse,
)
from talentdesk.core.accounts import AccountService
from talentdesk.core.errors import ServiceError
from talentdesk.core.interviews import InterviewService
from talentdesk.core.recruiting import ApplicantService, JobService
from talentdesk.db.models import User

router = APIRouter(prefix="/api", tags=["api"])


def _http_error(exc: ServiceError) -> HTTPException:
    return HTTPException(status_code=exc.status_code, detail=exc.message)


# users


@router.post("/users", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register_user(payload: RegisterRequest, db: Session = Depends(get_db)) -> AuthResponse:
    try:
        return AccountService(db).register(name=payload.name, email=payload.email, password=payload.password)
    except ServiceError as exc:
        raise _http_error(exc) from exc


@router.post("/users/login", response_model=AuthResponse)
def login_user(payload: LoginRequest, db: Session = Depends(get_db)) -> AuthResponse:
    try:
        return AccountService(db).login(email=payload.email, password=payload.password)
    except ServiceError as exc:
        raise _http_error(exc) from exc


@router.post("/users/google", response_model=AuthResponse)
def google_login(payload: GoogleLoginRequest, db: Session = Depends(get_db)) -> AuthResponse:
    try:
        return AccountService(db).google_login(payload.token)
    except ServiceError as exc:
        raise _http_error(exc) from exc


@router.get("/users/profile", response_model=UserResponse)
def get_profile(current_user: User = Depends(get_current_user)) -> UserResponse:
    return UserResponse.from_model(current_user)


@router.put("/users/profile", response_model=AuthResponse)
def update_profile(
    payload: ProfileUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> AuthResponse:
    try:
        return AccountService(db).update_profile(current_user.id, payload.changes())
    except ServiceError as exc:
        raise _http_error(exc) from exc


@router.get("/users", response_model=list[UserResponse])
def list_users(_: User = Depends(require_admin), db: Session = Depends(get_db)) -> list[UserResponse]:
    return AccountService(db).list_users()


# jobs


@router.get("/jobs", response_model=list[JobResponse])
def list_jobs(
    status_filter: str | None = Query(default=None, alias="status"),
    db: Session = Depends(get_db),
) -> list[JobResponse]:
    return JobService(db).list_jobs(status_filter)


@router.get("/jobs/{job_id}", response_model=JobDetailResponse)
def get_job(job_id: str, db: Session = Depends(get_db)) -> JobDetailResponse:
    try:
        return JobService(db).get_job(job_id)
    except ServiceError as exc:
        raise _http_error(exc) from exc


@router.post("/jobs", response_model=JobResponse, status_code=status.HTTP_201_CREATED)
def create_job(
    payload: JobCreateRequest,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> JobResponse:
    return JobService(db).create_job(payload, created_by=current_user.id)


@router.put("/jobs/{job_id}", response_model=JobResponse)
def update_job(
    job_id: str,
    payload: JobUpdateRequest,
    _: User = Depends(require_admin),
    db: Session = Depends(get_db),
) -> JobResponse:
    try:
        return JobService(db).update_job(job_id, payload.changes())
    except ServiceError as exc:
        raise _http_error(exc) from exc


@router.delete("/jobs/{job_id}", response_model=MessageResponse)
def delete_job(job_id: str, _: User = Depends(require_admin), db: Session = Depends(get_db)) -> MessageResponse:
    try:
        JobService(db).delete_job(job_id)
    except ServiceError as exc:
        raise _http_error(exc) from exc
    return MessageResponse(message="Job removed")


# applicants


@router.get("/applicants", response_model=ApplicantPageResponse)
def list_applicants(
    page: int = Query(default=1, ge=1),
    status_filter: str | None = Query(default=None, alias="status"),
    job_id: str | None = Query(default=None, alias="jobId"),
    source: str | None = None,
    search: str | None = None,
    _: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ApplicantPageResponse:
    return ApplicantService(db).list_applicants(
        page=page, status=status_filter, job_id=job_id, source=source, search=search
    )


@router.get("/applicants/job/{job_id}", response_model=list[ApplicantResponse])
def list_applicants_for_job(
    job_id: str, _: User = Depends(get_current_user), db: Session = Depends(get_db)
) -> list[ApplicantResponse]:
    try:
        return ApplicantService(db).list_for_job(job_id)
    except ServiceError as exc:
        raise _http_error(exc) from exc


@router.get("/applicants/{applicant_id}", response_model=ApplicantDetailResponse)
def get_applicant(
    applicant_id: str, _: User = Depends(get_current_user), db: Session = Depends(get_db)
) -> ApplicantDetailResponse:
    try:
        return ApplicantService(db).get_applicant(applicant_id)
    except ServiceError as exc:
        raise _http_error(exc) from exc


@router.post("/applicants", response_model=ApplicantResponse, status_code=status.HTTP_201_CREATED)
def create_applicant(
    name: str = Form(...),
    email: str = Form(...),
    phone: str = Form(...),
    job_id: str = Form(...),
    source: str = Form(...),
    notes: str = Form(""),
    resume: UploadFile | None = File(default=None),
    db: Session = Depends(get_db),
) -> ApplicantResponse:
    try:
        payload = ApplicantCreate(name=name, email=email, phone=phone, job_id=job_id, source=source, notes=notes)
    except ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=validation_message(exc)) from exc

    try:
        return ApplicantService(db).create_applicant(
            payload,
            resume_filename=resume.filename if resume else None,
            resume_content=resume.file.read() if resume else None,
        )
    except ServiceError as exc:
        raise _http_error(exc) from exc


@router.put("/applicants/{applicant_id}/status", response_model=ApplicantResponse)
def update_applicant_status(
    applicant_id: str,
    payload: ApplicantStatusRequest,
    _: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ApplicantResponse:
    try:
        return ApplicantService(db).update_status(applicant_id, payload.status, payload.notes)
    except ServiceError as exc:
        raise _http_error(exc) from exc


@router.put("/applicants/{applicant_id}/notes", response_model=ApplicantResponse)
def add_applicant_note(
    applicant_id: str,
    payload: ApplicantNoteRequest,
    _: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ApplicantResponse:
    try:
        return ApplicantService(db).add_note(applicant_id, payload.note)
    except ServiceError as exc:
        raise _http_error(exc) from exc


@router.delete("/applicants/{applicant_id}", response_model=MessageResponse)
def delete_applicant(
    applicant_id: str, _: User = Depends(require_admin), db: Session = Depends(get_db)
) -> MessageResponse:
    try:
        ApplicantService(db).delete_applicant(applicant_id)
    except ServiceError as exc:
        raise _http_error(exc) from exc
    return MessageResponse(message="Applicant removed")


# interviews


@router.get("/interviews", response_model=list[InterviewResponse])
def list_interviews(_: User = Depends(get_current_user), db: Session = Depends(get_db)) -> list[InterviewResponse]:
    return InterviewService(db).list_interviews()


@router.get("/interviews/applicant/{applicant_id}", response_model=list[InterviewResponse])
def list_interviews_for_applicant(
    applicant_id: str, _: User = Depends(get_current_user), db: Session = Depends(get_db)
) -> list[InterviewResponse]:
    try:
        return InterviewService(db).list_for_applicant(applicant_id)
    except ServiceError as exc:
        raise _http_error(exc) from exc


@router.get("/interviews/{interview_id}", response_model=InterviewResponse)
def get_interview(
    interview_id: str, _: User = Depends(get_current_user), db: Session = Depends(get_db)
) -> InterviewResponse:
    try:
        return InterviewService(db).get_interview(interview_id)
    except ServiceError as exc:
        raise _http_error(exc) from exc


@router.post("/interviews", response_model=InterviewResponse, status_code=status.HTTP_201_CREATED)
def schedule_interview(
    payload: InterviewCreateRequest,
    _: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> InterviewResponse:
    try:
        return InterviewService(db).schedule(payload)
    except ServiceError as exc:
        raise _http_error(exc) from exc


@router.patch("/interviews/{interview_id}", response_model=InterviewResponse)
def update_interview(
    interview_id: str,
    payload: InterviewUpdateRequest,
    _: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> InterviewResponse:
    try:
        return InterviewService(db).update(interview_id, payload.changes())
    except ServiceError as exc:
        raise _http_error(exc) from exc


@router.put("/interviews/{interview_id}/status", response_model=InterviewResponse)
def update_interview_status(
    interview_id: str,
    payload: InterviewStatusRequest,
    _: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> InterviewResponse:
    try:
        return InterviewService(db).update_status(interview_id, payload.status)
    except ServiceError as exc:
        raise _http_error(exc) from exc


@router.put("/interviews/{interview_id}/feedback", response_model=InterviewResponse)
def submit_interview_feedback(
    interview_id: str,
    payload: FeedbackRequest,
    _: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> InterviewResponse:
    try:
        return InterviewService(db).submit_feedback(interview_id, payload)
    except ServiceError as exc:
        raise _http_error(exc) from exc


@router.delete("/interviews/{interview_id}", response_model=MessageResponse)
def delete_interview(
    interview_id: str, _: User = Depends(require_admin), db: Session = Depends(get_db)
) -> MessageResponse:
    try:
        InterviewService(db).delete(interview_id)
    except ServiceError as exc:
        raise _http_error(exc) from exc
    return MessageResponse(message="Interview removed")
