"""FastAPI entrypoint — exposes the registration wizard sessions via REST."""

import logging
from dataclasses import asdict
from typing import Any, Dict, Literal, Optional

from fastapi import Depends, FastAPI, File, Form, HTTPException, Request, UploadFile
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from config import HOST, PORT
from langsmith_tracing import flow_trace, continue_flow_trace, clear_flow_trace
from registry_client import AsyncRegistryClient, RegistryAPIError
from wizard.errors import (
    AgreementRequiredError,
    HydrationError,
    SessionNotReadyError,
    SubmissionError,
    SubmissionInProgressError,
    ValidationError,
)
from wizard.requirement_catalog import suggest_requirement
from wizard.session import WizardSession
from wizard.state import SourceFile, WizardMode

# ── App + sessions ──────────────────────────────────────────────────────
app = FastAPI(title="Business Permit Wizard", version="1.0.0")
registry = AsyncRegistryClient()
sessions: Dict[str, WizardSession] = {}


def get_registry() -> AsyncRegistryClient:
    return registry


# ── Request models ──────────────────────────────────────────────────────
class StartRequest(BaseModel):
    user_id: Optional[str] = None
    business_id: Optional[str] = None   # set → edit an existing business


class FieldsRequest(BaseModel):
    fields: Dict[str, Any]


class AddressRequest(BaseModel):
    level: Literal["province", "city"]
    value: str
    scope: Literal["business", "representative"] = "business"


class AgreementRequest(BaseModel):
    agreed: bool


class RequirementPatch(BaseModel):
    type: Optional[str] = None
    description: Optional[str] = None


# ── Error mapping ───────────────────────────────────────────────────────
@app.exception_handler(ValidationError)
async def _validation_error(request: Request, exc: ValidationError):
    return JSONResponse(status_code=422, content={"message": str(exc), "errors": exc.errors})


@app.exception_handler(AgreementRequiredError)
async def _agreement_required(request: Request, exc: AgreementRequiredError):
    return JSONResponse(status_code=400, content={"message": str(exc)})


@app.exception_handler(SubmissionInProgressError)
async def _submission_in_progress(request: Request, exc: SubmissionInProgressError):
    return JSONResponse(status_code=409, content={"message": str(exc)})


@app.exception_handler(SubmissionError)
async def _submission_failed(request: Request, exc: SubmissionError):
    return JSONResponse(status_code=502, content={"message": str(exc), "status_code": exc.status_code})


@app.exception_handler(SessionNotReadyError)
async def _session_not_ready(request: Request, exc: SessionNotReadyError):
    return JSONResponse(status_code=409, content={"message": str(exc)})


@app.exception_handler(HydrationError)
async def _hydration_failed(request: Request, exc: HydrationError):
    return JSONResponse(status_code=502, content={"message": str(exc), "business_id": exc.business_id})


# ── Helpers ─────────────────────────────────────────────────────────────
def _session(session_id: str) -> WizardSession:
    session = sessions.get(session_id)
    if session is None:
        raise HTTPException(404, "Session not found.")
    return session


def _not_found_requirement(requirement_id: str):
    return HTTPException(404, f"Requirement {requirement_id} not found.")


async def _source_file(upload: UploadFile) -> SourceFile:
    return SourceFile(
        name=upload.filename or "",
        content=await upload.read(),
        content_type=upload.content_type,
    )


def _state(session: WizardSession) -> dict:
    return {"session_id": session.session_id, "state": session.snapshot()}


# ── Session lifecycle ───────────────────────────────────────────────────

@app.post("/wizard/start")
async def start_wizard(req: StartRequest, client: AsyncRegistryClient = Depends(get_registry)):
    """Open a session in Create mode, or in Edit mode for an existing business."""
    mode = WizardMode.edit(req.business_id) if req.business_id else WizardMode.create()
    session = WizardSession(client, user_id=req.user_id or "current-user")
    sessions[session.session_id] = session

    try:
        with flow_trace(session.session_id, session.user_id, mode.kind):
            await session.init(mode)
    except HydrationError:
        sessions.pop(session.session_id, None)
        clear_flow_trace(session.session_id)
        raise

    return _state(session)


@app.get("/wizard/{session_id}")
async def get_wizard_state(session_id: str):
    return _state(_session(session_id))


@app.delete("/wizard/{session_id}")
async def cancel_wizard(session_id: str):
    """Discard the session and everything staged in it."""
    session = sessions.pop(session_id, None)
    if session is None:
        raise HTTPException(404, "Session not found.")
    session.reset()
    clear_flow_trace(session_id)
    return {"session_id": session_id, "cancelled": True}


# ── Field edits ─────────────────────────────────────────────────────────

@app.patch("/wizard/{session_id}/fields")
async def update_fields(session_id: str, req: FieldsRequest):
    session = _session(session_id)
    session.update_fields(req.fields)
    return _state(session)


@app.post("/wizard/{session_id}/address")
async def change_address(session_id: str, req: AddressRequest):
    """Province/city change with its dependent fields cleared."""
    session = _session(session_id)
    if req.level == "province":
        session.change_province(req.value, req.scope)
    else:
        session.change_city(req.value, req.scope)
    return _state(session)


@app.post("/wizard/{session_id}/agreement")
async def set_agreement(session_id: str, req: AgreementRequest):
    session = _session(session_id)
    session.set_agreement(req.agreed)
    return _state(session)


# ── Navigation / submission ─────────────────────────────────────────────

@app.post("/wizard/{session_id}/next")
async def next_step(session_id: str):
    session = _session(session_id)
    with continue_flow_trace(session_id, "next"):
        transition, result = await session.next()

    if result is not None:
        clear_flow_trace(session_id)
    return {
        **_state(session),
        "transition": asdict(transition),
        "result": asdict(result) if result else None,
    }


@app.post("/wizard/{session_id}/prev")
async def prev_step(session_id: str):
    session = _session(session_id)
    session.prev()
    return _state(session)


@app.post("/wizard/{session_id}/submit")
async def submit_wizard(session_id: str):
    session = _session(session_id)
    with continue_flow_trace(session_id, "submit"):
        result = await session.submit()
    clear_flow_trace(session_id)
    return {**_state(session), "result": asdict(result)}


# ── Requirements ────────────────────────────────────────────────────────

@app.post("/wizard/{session_id}/requirements")
async def add_requirement(
    session_id: str,
    type: str = Form(""),
    description: str = Form(""),
    file: Optional[UploadFile] = File(None),
):
    """Add a requirement; its file is encoded in the background."""
    session = _session(session_id)
    source = await _source_file(file) if file is not None else None
    requirement = session.add_requirement(type, description, source)
    return {**_state(session), "requirement": requirement.model_dump(mode="json")}


@app.patch("/wizard/{session_id}/requirements/{requirement_id}")
async def update_requirement(session_id: str, requirement_id: str, req: RequirementPatch):
    session = _session(session_id)
    updated = session.update_requirement(requirement_id, req.model_dump(exclude_none=True))
    if updated is None:
        raise _not_found_requirement(requirement_id)
    return {**_state(session), "requirement": updated.model_dump(mode="json")}


@app.put("/wizard/{session_id}/requirements/{requirement_id}/file")
async def attach_requirement_file(session_id: str, requirement_id: str, file: UploadFile = File(...)):
    session = _session(session_id)
    updated = session.attach_file(requirement_id, await _source_file(file))
    if updated is None:
        raise _not_found_requirement(requirement_id)
    return {**_state(session), "requirement": updated.model_dump(mode="json")}


@app.delete("/wizard/{session_id}/requirements/{requirement_id}")
async def delete_requirement(session_id: str, requirement_id: str):
    session = _session(session_id)
    if not session.delete_requirement(requirement_id):
        raise _not_found_requirement(requirement_id)
    return _state(session)


@app.get("/wizard/{session_id}/requirements/{requirement_id}/view")
async def view_requirement(session_id: str, requirement_id: str):
    """A data: URI or stored path for the requirement's file."""
    session = _session(session_id)
    requirement = session.stager.get_requirement(requirement_id)
    if requirement is None:
        raise _not_found_requirement(requirement_id)
    url = await session.stager.view_document(requirement)
    if url is None:
        raise HTTPException(404, "No file available for this requirement.")
    return {"requirement_id": requirement_id, "url": url}


@app.get("/requirements/suggest")
async def suggest(filename: str):
    req_type, description = suggest_requirement(filename)
    return {"type": req_type, "description": description}


# ── Lookups ─────────────────────────────────────────────────────────────

@app.get("/lookup/{lookup_type}")
async def lookup_options(lookup_type: str, client: AsyncRegistryClient = Depends(get_registry)):
    """Proxy the registry's option lists for the dropdowns."""
    try:
        options = await client.get_lookup_options(lookup_type)
    except RegistryAPIError as e:
        raise HTTPException(502, e.server_message or f"Could not load {lookup_type} options.")
    return {"type": lookup_type, "options": options}


# ── Run ─────────────────────────────────────────────────────────────────
if __name__ == "__main__":
    import uvicorn
    logging.basicConfig(level=logging.INFO)
    uvicorn.run("main:app", host=HOST, port=PORT, reload=True)
