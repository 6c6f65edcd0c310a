"""
Tests for the request manager composition
"""

import pytest

from change_desk.components import ApprovalList, RequestDetail, RequestManager
from change_desk.components.approval_list import OPEN_ACTION
from change_desk.errors import RemoteCallError
from change_desk.signals import ACTION_COMPLETED, REQUEST_SELECTED


@pytest.fixture
def manager(recording_backend, bus, notifier):
    approval_list = ApprovalList(recording_backend, bus=bus, notifier=notifier)
    detail = RequestDetail(recording_backend, bus=bus, notifier=notifier)
    return RequestManager(approval_list, detail)


class TestRequestManager:
    """Tests for RequestManager."""

    @pytest.mark.asyncio
    async def test_load(self, manager):
        """Test loading fills the list and leaves nothing selected."""
        await manager.load()
        assert len(manager.approval_list.requests) == 2
        assert manager.selected_request_id is None
        assert manager.detail.request is None

    @pytest.mark.asyncio
    async def test_open_row_binds_detail(self, manager):
        """Test opening a row selects it and loads the detail."""
        await manager.load()
        row = manager.approval_list.get_row("r2")

        await manager.approval_list.handle_row_action(OPEN_ACTION, row)

        assert manager.selected_request_id == "r2"
        assert manager.detail.record_id == "r2"
        assert manager.detail.request.student_name == "Alan Turing"

    @pytest.mark.asyncio
    async def test_approve_flow(self, manager, recording_backend):
        """Test completion clears the selection and refreshes exactly once."""
        await manager.load()
        await manager.approval_list.handle_row_action(OPEN_ACTION, manager.approval_list.get_row("r1"))

        await manager.detail.approve()

        assert manager.selected_request_id is None
        assert manager.detail.record_id is None
        assert manager.detail.request is None
        assert recording_backend.count("get_pending_requests") == 2
        assert [row.id for row in manager.approval_list.requests] == ["r2"]

    @pytest.mark.asyncio
    async def test_reject_flow(self, manager, recording_backend):
        """Test a completed rejection clears the selection and refreshes once."""
        await manager.load()
        await manager.approval_list.handle_row_action(OPEN_ACTION, manager.approval_list.get_row("r2"))
        manager.detail.set_reason("Not a school address")

        assert await manager.detail.reject() is True

        assert ("reject_request", "r2", "Not a school address") in recording_backend.calls
        assert manager.selected_request_id is None
        assert manager.detail.record_id is None
        assert manager.detail.reason is None
        assert recording_backend.count("get_pending_requests") == 2
        assert [row.id for row in manager.approval_list.requests] == ["r1"]

    @pytest.mark.asyncio
    async def test_failed_action_keeps_selection(self, manager, recording_backend):
        """Test nothing is refreshed when the action fails."""
        recording_backend.failures["reject_request"] = RemoteCallError("nope")
        await manager.load()
        await manager.bus.emit(REQUEST_SELECTED, "r1")

        await manager.detail.reject()

        assert manager.selected_request_id == "r1"
        assert recording_backend.count("get_pending_requests") == 1

    @pytest.mark.asyncio
    async def test_selection_change_callbacks(self, manager):
        """Test views hear about selection changes."""
        seen = []
        manager.on_change(lambda: seen.append(manager.selected_request_id))
        await manager.bus.emit(REQUEST_SELECTED, "r1")
        await manager.bus.emit(ACTION_COMPLETED)
        assert seen == ["r1", None]

    @pytest.mark.asyncio
    async def test_close_disconnects(self, manager):
        """Test a closed manager ignores signals."""
        manager.close()
        await manager.bus.emit(REQUEST_SELECTED, "r1")
        assert manager.selected_request_id is None
