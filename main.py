"""FastAPI application for uploading résumés and asking questions about them."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from html import escape
from pathlib import Path
from typing import Dict, Optional

from fastapi import Depends, FastAPI, File, Form, HTTPException, Request, Response, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel, EmailStr, Field, field_validator

from resume_chat.clients.llm import (
    LLMClient,
    MisconfiguredCredentialsError,
    UpstreamEmptyResponseError,
    UpstreamUnavailableError,
)
from resume_chat.clients.mailer import Mailer, MailerError
from resume_chat.config import get_settings
from resume_chat.documents import DocumentUnreadableError, PdfTextExtractor, render_thumbnail
from resume_chat.logging_config import configure_logging
from resume_chat.prompts import build_resume_prompt
from resume_chat.rate_limit import Decision, RateLimiter
from resume_chat.store import ResumeStore
from resume_chat.utils import client_identity, sanitize_cv_id

settings = get_settings()
configure_logging(settings.log_level)
LOGGER = logging.getLogger(__name__)

store = ResumeStore(settings.cv_dir)
extractor = PdfTextExtractor()
llm_client = LLMClient(settings)
mailer = Mailer(settings)


def build_limiters() -> Dict[str, RateLimiter]:
    """One independent limiter per endpoint."""

    window = settings.rate_limit_window_seconds
    max_clients = settings.rate_limit_max_clients
    return {
        "chat": RateLimiter(settings.rate_limit_chat, window, max_clients=max_clients),
        "email": RateLimiter(settings.rate_limit_email, window, max_clients=max_clients),
        "cv_list": RateLimiter(settings.rate_limit_cv_list, window, max_clients=max_clients),
        "cv_upload": RateLimiter(settings.rate_limit_cv_upload, window, max_clients=max_clients),
    }


app = FastAPI(title="Resume Chat")
app.state.limiters = build_limiters()
app.mount("/cvs", StaticFiles(directory=settings.cv_dir, check_dir=False), name="cvs")
templates = Jinja2Templates(directory=str(Path(__file__).with_name("templates")))


RATE_LIMITED_ROUTES = {
    ("POST", "/api/chat"): "chat",
    ("POST", "/api/email"): "email",
    ("GET", "/api/cv/list"): "cv_list",
    ("POST", "/api/cv/upload"): "cv_upload",
}


@app.middleware("http")
async def apply_rate_limiting(request: Request, call_next):  # type: ignore[override]
    client_ip = client_identity(request.headers)
    endpoint = RATE_LIMITED_ROUTES.get((request.method, request.url.path))
    if endpoint is not None:
        limiter: RateLimiter = request.app.state.limiters[endpoint]
        if limiter.check_and_record(client_ip) is Decision.REJECT:
            LOGGER.warning("Rate limit exceeded", extra={"client_ip": client_ip, "endpoint": endpoint})
            return JSONResponse(status_code=429, content={"detail": "Rate limit exceeded"})
    try:
        return await call_next(request)
    except Exception:  # noqa: BLE001
        LOGGER.exception(
            "Unhandled exception", extra={"client_ip": client_ip, "detail": request.url.path}
        )
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})


# Added after the middleware above so CORS headers also reach 429 responses.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def invalid_input(request: Request, exc: RequestValidationError) -> JSONResponse:
    LOGGER.info(
        "Invalid input",
        extra={"client_ip": client_identity(request.headers), "detail": str(exc.errors())[:500]},
    )
    return JSONResponse(status_code=400, content={"detail": "Invalid input"})


def no_store(response: Response) -> None:
    response.headers["Cache-Control"] = "no-store"
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["Referrer-Policy"] = "no-referrer"


def get_store() -> ResumeStore:
    return store


def get_extractor() -> PdfTextExtractor:
    return extractor


def get_llm_client() -> LLMClient:
    return llm_client


def get_mailer() -> Mailer:
    return mailer


class ChatRequest(BaseModel):
    question: str = Field(min_length=1, max_length=500)
    resume_id: Optional[str] = Field(None, alias="resumeId")


class EmailRequest(BaseModel):
    recipient: EmailStr
    subject: str = Field(min_length=1, max_length=120)
    body: str = Field(min_length=1, max_length=10_000)

    @field_validator("recipient")
    @classmethod
    def recipient_length(cls, value: str) -> str:
        if len(value) > 255:
            raise ValueError("recipient is too long")
        return value


@app.get("/", response_class=HTMLResponse)
async def index(request: Request) -> HTMLResponse:
    """Serve the upload and chat page."""

    return templates.TemplateResponse("index.html", {"request": request})


@app.get("/cv", response_class=HTMLResponse)
def cv_page(request: Request, cv_store: ResumeStore = Depends(get_store)) -> HTMLResponse:
    """Serve the page listing uploaded résumés."""

    return templates.TemplateResponse(
        "cv.html", {"request": request, "items": [item.to_dict() for item in cv_store.list()]}
    )


@app.post("/api/chat")
def chat(
    payload: ChatRequest,
    response: Response,
    cv_store: ResumeStore = Depends(get_store),
    text_extractor: PdfTextExtractor = Depends(get_extractor),
    client: LLMClient = Depends(get_llm_client),
) -> dict:
    """Answer a question about an uploaded résumé or the default one."""

    resolved = cv_store.resolve(payload.resume_id) if payload.resume_id else None
    resume_path = resolved or Path(settings.resume_path)

    try:
        resume_text = text_extractor.extract(resume_path)
    except DocumentUnreadableError as exc:
        LOGGER.info("Resume unavailable", extra={"resume_id": payload.resume_id, "detail": str(exc)})
        raise HTTPException(
            status_code=400,
            detail=(
                "Resume not found or unreadable. Upload a CV at /cv "
                "or set RESUME_PATH to an existing PDF."
            ),
        ) from exc

    prompt = build_resume_prompt(resume_text, payload.question)
    try:
        answer = client.answer(prompt)
    except MisconfiguredCredentialsError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    except UpstreamEmptyResponseError as exc:
        raise HTTPException(status_code=502, detail="No answer from model") from exc
    except UpstreamUnavailableError as exc:
        LOGGER.warning("Inference API unavailable", extra={"detail": str(exc)})
        raise HTTPException(status_code=502, detail="Inference service unavailable") from exc

    no_store(response)
    return {"answer": answer}


@app.post("/api/email")
def send_email(
    payload: EmailRequest,
    response: Response,
    email_client: Mailer = Depends(get_mailer),
) -> dict:
    """Send an arbitrary e-mail through the configured SMTP account."""

    try:
        email_client.send(
            payload.recipient,
            payload.subject,
            payload.body,
            html=f"<p>{escape(payload.body)}</p>",
        )
    except MailerError as exc:
        LOGGER.error("Email error", extra={"recipient": payload.recipient, "detail": str(exc)})
        raise HTTPException(status_code=500, detail="Failed to send email") from exc

    no_store(response)
    return {"message": "Email sent successfully"}


@app.get("/api/cv/list")
def list_cvs(cv_store: ResumeStore = Depends(get_store)) -> dict:
    """List stored résumés, newest first."""

    return {"items": [item.to_dict() for item in cv_store.list()]}


@app.post("/api/cv/upload", status_code=201)
async def upload_cv(
    response: Response,
    file: Optional[UploadFile] = File(None),
    name: str = Form(""),
    email: str = Form(""),
    cv_store: ResumeStore = Depends(get_store),
    email_client: Mailer = Depends(get_mailer),
) -> dict:
    """Store an uploaded PDF, render its preview, and notify the uploader."""

    if file is None:
        raise HTTPException(status_code=400, detail="Missing file")
    if not name.strip():
        raise HTTPException(status_code=400, detail="Missing name")
    if not email.strip():
        raise HTTPException(status_code=400, detail="Missing email address")
    if file.content_type != "application/pdf":
        raise HTTPException(status_code=415, detail="Only PDF files are allowed")

    data = await file.read()
    if len(data) > settings.max_upload_bytes:
        raise HTTPException(status_code=413, detail="File too large")

    cv_id = sanitize_cv_id(name) or "cv"
    try:
        pdf_path = cv_store.save(cv_id, data)
        has_thumbnail = False
        if not settings.disable_thumbnail:
            has_thumbnail = render_thumbnail(pdf_path, cv_store.thumbnail_path(cv_id))
        cv_store.write_metadata(
            cv_id,
            {
                "email": email,
                "uploadedAt": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
                "hasThumbnail": has_thumbnail,
            },
        )
    except OSError as exc:
        LOGGER.exception("Upload error", extra={"resume_id": cv_id})
        raise HTTPException(status_code=500, detail="Upload failed") from exc

    email_client.notify_upload(email, pdf_path.name)

    no_store(response)
    return {"id": cv_id, "name": pdf_path.name, "hasThumbnail": has_thumbnail}
