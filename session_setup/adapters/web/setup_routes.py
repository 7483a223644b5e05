"""Session setup API routes — drive a SessionCreationFlow over HTTP."""

import sys
import uuid
from collections import OrderedDict
from dataclasses import dataclass
from typing import Iterable, List, Optional, Union

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from session_setup.adapters.api import ActionLibraryClient, SessionClient
from session_setup.adapters.ui import InMemoryNavigator, NoticeBoard
from session_setup.domain.flow import CANCELLED, SUBMITTING, FlowClosed, SessionCreationFlow
from session_setup.domain.classifier import classify_action
from session_setup.domain.models import CustomActionDraft

setup_router = APIRouter(prefix="/setup", tags=["Setup"])
handoff_router = APIRouter(prefix="/sessions", tags=["Sessions"])

library_client = ActionLibraryClient()
session_client = SessionClient()

_MAX_FLOWS = 100
_MAX_PENDING_HANDOFFS = 100


def _log(msg: str):
    print(msg, file=sys.stderr)


@dataclass
class _SetupEntry:
    flow: SessionCreationFlow
    notices: NoticeBoard
    navigator: InMemoryNavigator


# flow_id -> entry, oldest first
_flows: "OrderedDict[str, _SetupEntry]" = OrderedDict()
# session_id -> navigator holding the unclaimed handoff, oldest first
_handoffs: "OrderedDict[str, InMemoryNavigator]" = OrderedDict()

Identifier = Union[int, str]
MovementInput = Optional[Union[int, float, str]]


class SetupStartRequest(BaseModel):
    session_name: Optional[str] = None


class ToggleRequest(BaseModel):
    library_id: Identifier


class DraftRequest(BaseModel):
    description: str = ""
    user_movement: MovementInput = 0
    llm_movement: MovementInput = 0


class ActionView(BaseModel):
    id: Identifier
    action_description: str
    default_user_movement: int
    default_llm_movement: int
    category: str
    selected: Optional[bool] = None


class NoticeView(BaseModel):
    notice_id: int
    message: str
    level: str


class SetupView(BaseModel):
    flow_id: str
    state: str
    session_name: str
    library_loaded: bool
    library: List[ActionView]
    selected_action_ids: List[Identifier]
    custom_actions: List[ActionView]
    total: int
    remaining: int
    can_add_more: bool
    can_submit: bool
    session_id: Optional[Identifier] = None
    notices: List[NoticeView] = []


class ToggleResponse(BaseModel):
    changed: bool
    setup: SetupView


class HandoffResponse(BaseModel):
    session_id: Identifier
    initial_custom_actions: List[ActionView]


class SubmitResponse(BaseModel):
    session_id: Identifier
    route: Optional[str] = None


def _get(flow_id: str) -> _SetupEntry:
    entry = _flows.get(flow_id)
    if entry is None:
        raise HTTPException(status_code=404, detail=f"Unknown setup flow: {flow_id}")
    return entry


def _evict_flows() -> None:
    """Drop closed flows, then the oldest open ones beyond the cap."""
    for flow_id in [fid for fid, e in _flows.items() if not e.flow.is_open]:
        del _flows[flow_id]
    while len(_flows) >= _MAX_FLOWS:
        evicted_id, entry = _flows.popitem(last=False)
        entry.flow.cancel()
        _log(f"Evicted abandoned setup flow: {evicted_id}")


def _park_handoff(session_id: Identifier, navigator: InMemoryNavigator) -> None:
    _handoffs[str(session_id)] = navigator
    while len(_handoffs) > _MAX_PENDING_HANDOFFS:
        evicted_id, _ = _handoffs.popitem(last=False)
        _log(f"Dropped unclaimed handoff for session {evicted_id}")


def _view(flow_id: str) -> SetupView:
    entry = _get(flow_id)
    return SetupView(
        flow_id=flow_id,
        notices=[
            NoticeView(notice_id=n.notice_id, message=n.message, level=n.level)
            for n in entry.notices.active()
        ],
        **entry.flow.snapshot(),
    )


def _draft_views(drafts: Iterable[CustomActionDraft]) -> List[ActionView]:
    return [ActionView(category=classify_action(d), **d.to_dict()) for d in drafts]


def _closed(e: FlowClosed):
    return HTTPException(status_code=409, detail=str(e))


@setup_router.post("", response_model=SetupView)
async def start_setup(req: SetupStartRequest):
    _evict_flows()
    notices = NoticeBoard()
    navigator = InMemoryNavigator()
    flow = SessionCreationFlow(
        library=library_client,
        sessions=session_client,
        notices=notices,
        navigator=navigator,
        session_name=req.session_name,
    )
    flow_id = uuid.uuid4().hex[:8]
    _flows[flow_id] = _SetupEntry(flow=flow, notices=notices, navigator=navigator)
    await flow.load_library()
    return _view(flow_id)


@setup_router.get("/{flow_id}", response_model=SetupView)
async def get_setup(flow_id: str):
    return _view(flow_id)


@setup_router.post("/{flow_id}/toggle", response_model=ToggleResponse)
async def toggle_action(flow_id: str, req: ToggleRequest):
    flow = _get(flow_id).flow
    try:
        changed = flow.toggle(req.library_id)
    except FlowClosed as e:
        raise _closed(e)
    return ToggleResponse(changed=changed, setup=_view(flow_id))


@setup_router.post("/{flow_id}/drafts", response_model=SetupView)
async def create_draft(flow_id: str, req: DraftRequest):
    flow = _get(flow_id).flow
    try:
        draft = flow.create_draft(req.description, req.user_movement, req.llm_movement)
    except FlowClosed as e:
        raise _closed(e)
    if draft is None:
        if flow.last_rejection is not None:
            raise HTTPException(status_code=422, detail=flow.last_rejection.message)
        raise HTTPException(status_code=409, detail="Session creation in progress")
    return _view(flow_id)


@setup_router.delete("/{flow_id}/drafts/{draft_id}", response_model=SetupView)
async def remove_draft(flow_id: str, draft_id: str):
    flow = _get(flow_id).flow
    try:
        flow.remove_draft(draft_id)
    except FlowClosed as e:
        raise _closed(e)
    return _view(flow_id)


@setup_router.post("/{flow_id}/submit", response_model=SubmitResponse)
async def submit_setup(flow_id: str):
    """Create the session. Drafts are delivered only through the handoff claim."""
    entry = _get(flow_id)
    flow = entry.flow
    if flow.state == SUBMITTING:
        raise HTTPException(status_code=409, detail="Session creation in progress")
    if not flow.library_loaded:
        raise HTTPException(status_code=409, detail="Action library still loading")
    try:
        handoff = await flow.submit()
    except FlowClosed as e:
        raise _closed(e)
    if handoff is None:
        if flow.state == CANCELLED:
            raise _closed(FlowClosed(f"Setup flow is {flow.state}"))
        if flow.last_rejection is not None:
            raise HTTPException(status_code=422, detail=flow.last_rejection.message)
        raise HTTPException(status_code=502, detail=flow.last_error or "Failed to create session")
    _flows.pop(flow_id, None)
    _park_handoff(handoff.session_id, entry.navigator)
    return SubmitResponse(session_id=handoff.session_id, route=entry.navigator.route)


@setup_router.post("/{flow_id}/cancel")
async def cancel_setup(flow_id: str):
    entry = _get(flow_id)
    entry.flow.cancel()
    _flows.pop(flow_id, None)
    return {"cancelled": True, "route": entry.navigator.route}


@setup_router.post("/{flow_id}/notices/{notice_id}/dismiss", response_model=SetupView)
async def dismiss_notice(flow_id: str, notice_id: int):
    notices = _get(flow_id).notices
    if not notices.dismiss(notice_id):
        raise HTTPException(status_code=404, detail=f"No active notice {notice_id}")
    return _view(flow_id)


@handoff_router.post("/{session_id}/handoff", response_model=HandoffResponse)
async def claim_handoff(session_id: str):
    """Session screen initializer: claim the custom drafts once."""
    navigator = _handoffs.pop(session_id, None)
    drafts = navigator.claim_handoff(session_id) if navigator is not None else ()
    return HandoffResponse(session_id=session_id, initial_custom_actions=_draft_views(drafts))
