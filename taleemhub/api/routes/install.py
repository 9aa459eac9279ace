"""Install prompt routes — deferred "install app" offer lifecycle."""

from typing import Literal

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from ...dependencies import get_install_prompt_store

router = APIRouter(prefix="/pwa/install", tags=["pwa"])


class PromptRequest(BaseModel):
    platforms: list[str] = []


class OutcomeRequest(BaseModel):
    outcome: Literal["accepted", "dismissed"]


class DismissRequest(BaseModel):
    permanent: bool = False


def _status() -> dict:
    store = get_install_prompt_store()
    return {
        "offer": store.should_offer(),
        "pending": store.current is not None,
        "permanentlyDismissed": store.permanently_dismissed,
        "lastOutcome": store.last_outcome,
    }


@router.get("/")
async def install_status():
    return _status()


@router.post("/prompt", status_code=201)
async def stash_prompt(body: PromptRequest):
    """Remember the most recent deferred install offer."""
    get_install_prompt_store().stash({"platforms": body.platforms})
    return _status()


@router.post("/take")
async def take_prompt():
    """Consume the deferred offer."""
    prompt = get_install_prompt_store().take()
    if prompt is None:
        raise HTTPException(status_code=404, detail="No install prompt pending")
    return {"prompt": prompt, **_status()}


@router.post("/outcome")
async def record_outcome(body: OutcomeRequest):
    get_install_prompt_store().record_outcome(body.outcome)
    return _status()


@router.post("/dismiss")
async def dismiss(body: DismissRequest):
    get_install_prompt_store().dismiss(permanent=body.permanent)
    return _status()
