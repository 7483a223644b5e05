"""Tests for SessionCreationFlow with mock ports.

These tests drive the flow through fake library/session backends and the
in-memory notice board and navigator.
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from session_setup.adapters.ui import InMemoryNavigator, NoticeBoard
from session_setup.domain.flow import (
    CANCELLED,
    IDLE,
    SESSION_READY,
    SUBMISSION_FAILED_MESSAGE,
    SUBMITTING,
    FlowClosed,
    SessionCreationFlow,
)
from session_setup.domain.models import LibraryAction
from session_setup.domain.selection import CAPACITY_MESSAGE, MINIMUM_MESSAGE, draft_id_factory
from session_setup.ports.inbound import CustomActionForm
from session_setup.ports.outbound import LibraryFetchResult, SessionCreateResult


def _library(*actions):
    port = MagicMock()
    port.fetch_library = AsyncMock(
        return_value=LibraryFetchResult(success=True, actions=list(actions))
    )
    return port


def _sessions(*results):
    port = MagicMock()
    port.create_session = AsyncMock(side_effect=list(results))
    return port


def _make_flow(library=None, sessions=None, session_name="Morning block"):
    notices = NoticeBoard()
    navigator = InMemoryNavigator()
    flow = SessionCreationFlow(
        library=library or _library(),
        sessions=sessions or _sessions(SessionCreateResult(success=True, session_id=42)),
        notices=notices,
        navigator=navigator,
        session_name=session_name,
    )
    return flow, notices, navigator


ACTION_A = LibraryAction(id=1, description="A", user_movement=3, llm_movement=0)


class TestLoadLibrary:
    @pytest.mark.asyncio
    async def test_loads_actions(self):
        flow, _, _ = _make_flow(library=_library(ACTION_A))
        actions = await flow.load_library()
        assert actions == [ACTION_A]
        assert flow.library_loaded is True

    @pytest.mark.asyncio
    async def test_failure_degrades_to_empty(self):
        library = MagicMock()
        library.fetch_library = AsyncMock(
            return_value=LibraryFetchResult(success=False, error="HTTP 500")
        )
        flow, notices, _ = _make_flow(library=library)
        assert await flow.load_library() == []
        assert flow.library_loaded is True
        assert notices.active() == []

    @pytest.mark.asyncio
    async def test_raising_port_degrades_to_empty(self):
        library = MagicMock()
        library.fetch_library = AsyncMock(side_effect=ConnectionError("down"))
        flow, _, _ = _make_flow(library=library)
        assert await flow.load_library() == []
        assert flow.library_loaded is True

    @pytest.mark.asyncio
    async def test_fetched_once(self):
        library = _library(ACTION_A)
        flow, _, _ = _make_flow(library=library)
        await flow.load_library()
        await flow.load_library()
        assert library.fetch_library.await_count == 1

    @pytest.mark.asyncio
    async def test_drafts_usable_after_fetch_failure(self):
        library = MagicMock()
        library.fetch_library = AsyncMock(return_value=LibraryFetchResult(success=False, error="x"))
        flow, _, _ = _make_flow(library=library)
        await flow.load_library()
        for name in ("a", "b", "c"):
            assert flow.create_draft(name) is not None
        assert await flow.submit() is not None

    @pytest.mark.asyncio
    async def test_toggle_while_fetch_outstanding(self):
        release = asyncio.Event()

        class SlowLibrary:
            async def fetch_library(self):
                await release.wait()
                return LibraryFetchResult(success=True, actions=[ACTION_A])

        flow, _, _ = _make_flow(library=SlowLibrary())
        pending = asyncio.create_task(flow.load_library())
        await asyncio.sleep(0)

        assert flow.toggle(1) is True
        flow.create_draft("a")
        flow.create_draft("b")
        assert flow.gate.can_submit is True
        assert flow.can_submit is False
        assert await flow.submit() is None

        release.set()
        await pending
        assert flow.can_submit is True


class TestDrafts:
    def test_empty_description_reports_rejection(self):
        flow, notices, _ = _make_flow()
        assert flow.create_draft("", 1, 1) is None
        assert flow.last_rejection.reason == "empty_description"
        assert len(flow.selection.drafts) == 0
        assert notices.active() == []

    def test_capacity_raises_notice(self):
        flow, notices, _ = _make_flow()
        for name in "abcde":
            flow.create_draft(name)
        assert flow.create_draft("f") is None
        assert flow.last_rejection.reason == "capacity"
        assert [n.message for n in notices.active()] == [CAPACITY_MESSAGE]
        assert len(flow.selection.drafts) == 5

    def test_success_clears_last_rejection(self):
        flow, _, _ = _make_flow()
        flow.create_draft("")
        assert flow.create_draft("ok") is not None
        assert flow.last_rejection is None

    def test_form_reset_on_success(self):
        flow, _, _ = _make_flow()
        flow.form.description = "Asked LLM to refactor"
        flow.form.user_movement = "1"
        flow.form.llm_movement = "4"
        draft = flow.create_draft_from_form()
        assert (draft.user_movement, draft.llm_movement) == (1, 4)
        assert flow.form == CustomActionForm()

    def test_form_kept_on_rejection(self):
        flow, _, _ = _make_flow()
        form = CustomActionForm(description="  ", user_movement=3)
        assert flow.create_draft_from_form(form) is None
        assert form.user_movement == 3

    def test_remove_draft(self):
        flow, _, _ = _make_flow()
        draft = flow.create_draft("x")
        assert flow.remove_draft(draft.id) is True
        assert flow.gate.total == 0


class TestSubmit:
    @pytest.mark.asyncio
    async def test_happy_path_hands_off_drafts(self):
        sessions = _sessions(SessionCreateResult(success=True, session_id=42))
        flow, _, navigator = _make_flow(library=_library(ACTION_A), sessions=sessions)
        await flow.load_library()

        flow.toggle(1)
        d1 = flow.create_draft("Wrote the parser myself", 4, 0)
        d2 = flow.create_draft("Pasted LLM output", 0, 4)
        assert flow.gate.total == 3
        assert flow.can_submit is True

        handoff = await flow.submit()

        sessions.create_session.assert_awaited_once_with("Morning block", [1])
        assert handoff.session_id == 42
        assert handoff.initial_custom_actions == (d1, d2)
        assert flow.state == SESSION_READY
        assert navigator.route == "/session/42"
        assert navigator.claim_handoff(42) == (d1, d2)

    @pytest.mark.asyncio
    async def test_drafts_never_sent(self):
        sessions = _sessions(SessionCreateResult(success=True, session_id="s1"))
        flow, _, _ = _make_flow(sessions=sessions)
        await flow.load_library()
        for name in "abc":
            flow.create_draft(name)
        await flow.submit()
        sessions.create_session.assert_awaited_once_with("Morning block", [])

    @pytest.mark.asyncio
    async def test_empty_name_sent_as_none(self):
        sessions = _sessions(SessionCreateResult(success=True, session_id=1))
        flow, _, _ = _make_flow(sessions=sessions, session_name="")
        await flow.load_library()
        for name in "abc":
            flow.create_draft(name)
        await flow.submit()
        assert sessions.create_session.await_args.args[0] is None

    @pytest.mark.asyncio
    async def test_below_minimum_never_reaches_network(self):
        sessions = _sessions()
        flow, notices, _ = _make_flow(sessions=sessions)
        await flow.load_library()
        flow.create_draft("only one")
        assert await flow.submit() is None
        assert flow.last_rejection.reason == "below_minimum"
        assert [n.message for n in notices.active()] == [MINIMUM_MESSAGE]
        sessions.create_session.assert_not_awaited()
        assert flow.state == IDLE

    @pytest.mark.asyncio
    async def test_failure_preserves_state_and_retry_succeeds(self):
        sessions = _sessions(
            SessionCreateResult(success=False, error="Connection reset"),
            SessionCreateResult(success=True, session_id=7),
        )
        flow, notices, navigator = _make_flow(library=_library(ACTION_A), sessions=sessions)
        await flow.load_library()
        flow.toggle(1)
        flow.create_draft("a")
        flow.create_draft("b")
        drafts_before = flow.selection.drafts.snapshot()

        assert await flow.submit() is None
        assert flow.state == IDLE
        assert flow.last_error == "Connection reset"
        assert [n.message for n in notices.active()] == [SUBMISSION_FAILED_MESSAGE]
        assert flow.selection.selected.ids() == [1]
        assert flow.selection.drafts.snapshot() == drafts_before
        assert navigator.route is None

        handoff = await flow.submit()
        assert handoff.session_id == 7
        assert handoff.initial_custom_actions == drafts_before
        assert sessions.create_session.await_count == 2

    @pytest.mark.asyncio
    async def test_raising_port_treated_as_failure(self):
        sessions = MagicMock()
        sessions.create_session = AsyncMock(side_effect=TimeoutError("slow"))
        flow, notices, _ = _make_flow(sessions=sessions)
        await flow.load_library()
        for name in "abc":
            flow.create_draft(name)
        assert await flow.submit() is None
        assert flow.state == IDLE
        assert len(notices.active()) == 1

    @pytest.mark.asyncio
    async def test_missing_session_id_is_failure(self):
        sessions = _sessions(SessionCreateResult(success=True, session_id=None))
        flow, _, _ = _make_flow(sessions=sessions)
        await flow.load_library()
        for name in "abc":
            flow.create_draft(name)
        assert await flow.submit() is None
        assert flow.state == IDLE

    @pytest.mark.asyncio
    async def test_not_before_library_loaded(self):
        sessions = _sessions()
        flow, _, _ = _make_flow(sessions=sessions)
        for name in "abc":
            flow.create_draft(name)
        assert await flow.submit() is None
        sessions.create_session.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_single_request_in_flight(self):
        release = asyncio.Event()
        calls = []

        class SlowSessions:
            async def create_session(self, session_name, selected_library_ids):
                calls.append(list(selected_library_ids))
                await release.wait()
                return SessionCreateResult(success=True, session_id=9)

        flow, _, _ = _make_flow(library=_library(ACTION_A), sessions=SlowSessions())
        await flow.load_library()
        flow.toggle(1)
        draft = flow.create_draft("a")
        flow.create_draft("b")

        first = asyncio.create_task(flow.submit())
        await asyncio.sleep(0)
        assert flow.state == SUBMITTING
        assert flow.can_submit is False
        assert await flow.submit() is None
        assert flow.toggle(1) is False
        assert flow.create_draft("c") is None
        assert flow.remove_draft(draft.id) is False

        release.set()
        handoff = await first
        assert calls == [[1]]
        assert len(handoff.initial_custom_actions) == 2

    @pytest.mark.asyncio
    async def test_closed_after_handoff(self):
        flow, _, _ = _make_flow()
        await flow.load_library()
        for name in "abc":
            flow.create_draft(name)
        await flow.submit()
        assert flow.gate.total == 0
        with pytest.raises(FlowClosed):
            flow.toggle(1)
        with pytest.raises(FlowClosed):
            await flow.submit()


class TestCancel:
    def test_cancel_navigates_to_dashboard(self):
        flow, _, navigator = _make_flow()
        flow.create_draft("a")
        flow.cancel()
        assert flow.state == CANCELLED
        assert navigator.route == "/dashboard"
        assert flow.gate.total == 0
        with pytest.raises(FlowClosed):
            flow.create_draft("b")

    def test_cancel_twice_is_noop(self):
        flow, _, _ = _make_flow()
        flow.cancel()
        flow.cancel()
        assert flow.state == CANCELLED

    def test_reset_selection_keeps_id_factory(self):
        flow = SessionCreationFlow(
            library=_library(),
            sessions=_sessions(),
            notices=NoticeBoard(),
            navigator=InMemoryNavigator(),
            id_factory=draft_id_factory("tmp-"),
        )
        assert flow.create_draft("a").id == "tmp-1"
        flow.cancel()
        assert flow.selection.create_draft("b").id == "tmp-2"

    @pytest.mark.asyncio
    async def test_late_session_response_disregarded(self):
        release = asyncio.Event()

        class SlowSessions:
            async def create_session(self, session_name, selected_library_ids):
                await release.wait()
                return SessionCreateResult(success=True, session_id=9)

        flow, _, navigator = _make_flow(sessions=SlowSessions())
        await flow.load_library()
        for name in "abc":
            flow.create_draft(name)

        pending = asyncio.create_task(flow.submit())
        await asyncio.sleep(0)
        flow.cancel()
        release.set()

        assert await pending is None
        assert flow.state == CANCELLED
        assert flow.handoff is None
        assert navigator.route == "/dashboard"

    @pytest.mark.asyncio
    async def test_late_library_response_disregarded(self):
        release = asyncio.Event()

        class SlowLibrary:
            async def fetch_library(self):
                await release.wait()
                return LibraryFetchResult(success=True, actions=[ACTION_A])

        flow, _, _ = _make_flow(library=SlowLibrary())
        pending = asyncio.create_task(flow.load_library())
        await asyncio.sleep(0)
        flow.cancel()
        release.set()
        assert await pending == []
        assert flow.library_loaded is False


class TestSnapshot:
    @pytest.mark.asyncio
    async def test_annotates_candidates(self):
        flow, _, _ = _make_flow(library=_library(ACTION_A))
        await flow.load_library()
        flow.toggle(1)
        flow.create_draft("Let LLM drive", 0, 3)
        view = flow.snapshot()
        assert view["library"][0]["category"] == "Human Advance"
        assert view["library"][0]["selected"] is True
        assert view["custom_actions"][0]["category"] == "AI Advance"
        assert view["total"] == 2
        assert view["remaining"] == 1
        assert view["can_submit"] is False
