from __future__ import annotations

from typing import Optional, Dict, Deque, List
from collections import deque
from datetime import datetime, timedelta, timezone
from pathlib import Path
import logging, os

from fastapi import FastAPI, Request, HTTPException, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel, Field

from pwcheck import entropy
from pwcheck.policy import EMPTY_VERDICT, evaluate
from pwcheck.pwned import check_breach
from pwcheck.render import breach_message, strength_text
from pwcheck.session import SessionRegistry

# ---------------- Config ----------------
ALLOWED_ORIGINS = [
    o.strip() for o in os.getenv(
        "ALLOWED_ORIGINS", "http://localhost:8000,http://127.0.0.1:8000"
    ).split(",") if o.strip()
]
VERSION = os.getenv("APP_VERSION", "1.0.0")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

RATE_LIMIT_WINDOW_SEC = int(os.getenv("RATE_LIMIT_WINDOW_SEC", "60"))
RATE_LIMIT_BREACH_MAX = int(os.getenv("RATE_LIMIT_BREACH_MAX", "20"))

CSP = os.getenv("CSP",
    "default-src 'self'; "
    "connect-src 'self'; "
    "img-src 'self' data:; "
    "style-src 'self' 'unsafe-inline'; "
    "script-src 'self'; "
)
HSTS = os.getenv("HSTS", "max-age=31536000; includeSubDomains")

STATIC_DIR = Path(__file__).resolve().parent / "static"

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger("pwcheck.api")

# ---------------- App ----------------
app = FastAPI(title="pwcheck", version=VERSION)

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=False,
    allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

@app.middleware("http")
async def security_headers(request: Request, call_next):
    resp: Response = await call_next(request)
    resp.headers["Content-Security-Policy"] = CSP
    resp.headers["Strict-Transport-Security"] = HSTS
    resp.headers["X-Content-Type-Options"] = "nosniff"
    resp.headers["Referrer-Policy"] = "no-referrer"
    resp.headers["Cache-Control"] = "no-store"
    return resp

app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")

# ---------------- Models ----------------
class StrengthIn(BaseModel):
    password: str = ""
    user_inputs: List[str] = Field(default_factory=list)

class StrengthOut(BaseModel):
    label: str
    color: str
    width: int
    suggestions: List[str]
    score: Optional[int] = None
    guesses: Optional[float] = None
    text: str

class BreachIn(BaseModel):
    password: str = ""
    client_id: Optional[str] = Field(default=None, max_length=64)
    token: Optional[int] = Field(default=None, ge=0)

class BreachOut(BaseModel):
    status: str
    count: int = 0
    breached: bool = False
    message: Optional[str] = None
    color: Optional[str] = None
    token: Optional[int] = None
    stale: bool = False

# ---------------- Rate limits ----------------
recent_breach: Dict[str, Deque[datetime]] = {}

def client_ip(req: Request) -> str:
    return req.headers.get("x-forwarded-for", "").split(",")[0].strip() or (req.client.host if req.client else "unknown")

def check_rate(ip: str) -> None:
    now = datetime.now(timezone.utc)
    dq = recent_breach.setdefault(ip, deque())
    cutoff = now - timedelta(seconds=RATE_LIMIT_WINDOW_SEC)
    while dq and dq[0] < cutoff:
        dq.popleft()
    if len(dq) >= RATE_LIMIT_BREACH_MAX:
        raise HTTPException(status_code=429, detail="Too many requests, try again shortly.")
    dq.append(now)

sessions = SessionRegistry()

# ---------------- Routes ----------------
@app.get("/", include_in_schema=False)
def index():
    return FileResponse(STATIC_DIR / "index.html")

@app.get("/health")
def health():
    return {"status": "ok", "service": "pwcheck", "version": app.version}

@app.post("/strength", response_model=StrengthOut)
def strength(payload: StrengthIn):
    if not payload.password:
        verdict = EMPTY_VERDICT
        return StrengthOut(label=verdict.label, color=verdict.color, width=verdict.width,
                           suggestions=[], text="")
    est = entropy.estimate(payload.password, payload.user_inputs)
    verdict = evaluate(payload.password, est)
    return StrengthOut(
        label=verdict.label,
        color=verdict.color,
        width=verdict.width,
        suggestions=list(verdict.suggestions),
        score=est.score,
        guesses=est.guesses,
        text=strength_text(verdict, est),
    )

@app.post("/breach", response_model=BreachOut)
async def breach(req: Request, payload: BreachIn):
    check_rate(client_ip(req))

    if payload.client_id:
        sess = sessions.get(payload.client_id)
        token = payload.token if payload.token is not None else sess.begin()
        result = await sess.run(payload.password, check_breach, token=token)
        if result is None:
            logger.debug("dropping stale breach result for token %s", token)
            return BreachOut(status="stale", token=token, stale=True)
    else:
        token = payload.token
        result = await check_breach(payload.password)

    msg = breach_message(result)
    return BreachOut(
        status=result.status.value,
        count=result.count,
        breached=result.breached,
        message=msg.text,
        color=msg.color,
        token=token,
    )

@app.delete("/breach/session/{client_id}", status_code=204)
def close_session(client_id: str):
    sessions.close(client_id)
    return Response(status_code=204)
