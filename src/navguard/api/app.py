"""FastAPI entrypoint for shells that talk to the engine over localhost."""

from __future__ import annotations

import threading

from fastapi import FastAPI, HTTPException

from navguard.core.errors import UnknownProfileError
from navguard.orchestrator.build import create_engine
from navguard.orchestrator.engine import PolicyEngine

app = FastAPI(title="navguard")

_engine: PolicyEngine | None = None
_engine_lock = threading.Lock()


def get_engine() -> PolicyEngine:
    global _engine
    with _engine_lock:
        if _engine is None:
            _engine, _ = create_engine()
        return _engine


def set_engine(engine: PolicyEngine | None) -> None:
    global _engine
    with _engine_lock:
        _engine = engine


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/evaluate")
def evaluate(payload: dict[str, object]) -> dict[str, object]:
    url = payload.get("url")
    return get_engine().evaluate(str(url) if isinstance(url, str) else "").model_dump(mode="json")


@app.post("/downloads/classify")
def classify_download(payload: dict[str, object]) -> dict[str, object]:
    filename = payload.get("filename")
    verdict = get_engine().classify_download(filename if isinstance(filename, str) else None)
    return verdict.model_dump(mode="json")


@app.post("/phishing/check")
def check_phishing(payload: dict[str, object]) -> dict[str, object]:
    url = payload.get("url")
    return get_engine().check_phishing(url if isinstance(url, str) else None).model_dump(mode="json")


@app.post("/profile")
def switch_profile(payload: dict[str, object]) -> dict[str, object]:
    engine = get_engine()
    try:
        settings = engine.switch_profile(str(payload.get("profile", "")))
    except UnknownProfileError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return {
        "profile": engine.active_profile.value,
        "display_name": settings.display_name,
        "description": settings.description,
    }


@app.get("/state")
def state() -> dict[str, object]:
    engine = get_engine()
    return {
        "state": engine.state.to_dict(),
        "stats": engine.stats(),
        "referrer_policy": engine.referrer_policy(),
        "blocked_domains": len(engine.blocked_domains()),
    }
