"""
Change Request Manager Widget

Approval list and review panel side by side. The panel is hidden until a
request is selected.
"""

import logging
from typing import Optional

from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.widgets import DataTable, Input

from change_desk.backends import ChangeRequestBackend
from change_desk.components import ApprovalList, RequestDetail, RequestManager
from change_desk.notifications import Notifier
from change_desk.signals import SignalBus
from change_desk_cli.widgets.approval_list import ApprovalListView
from change_desk_cli.widgets.detail import RequestDetailPanel

logger = logging.getLogger(__name__)


class ChangeRequestManager(Horizontal):
    """Composes ApprovalListView and RequestDetailPanel on one scoped bus."""

    DEFAULT_CSS = """
    ChangeRequestManager {
        height: 1fr;
    }

    ChangeRequestManager ApprovalListView {
        width: 3fr;
    }

    ChangeRequestManager RequestDetailPanel {
        width: 2fr;
    }
    """

    def __init__(
        self,
        backend: ChangeRequestBackend,
        notifier: Optional[Notifier] = None,
        guard_in_flight: bool = False,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.bus = SignalBus()
        notifier = notifier or Notifier()
        self.manager = RequestManager(
            ApprovalList(backend, bus=self.bus, notifier=notifier),
            RequestDetail(
                backend,
                bus=self.bus,
                notifier=notifier,
                guard_in_flight=guard_in_flight,
            ),
            bus=self.bus,
        )

    @property
    def selected_request_id(self) -> Optional[str]:
        return self.manager.selected_request_id

    def compose(self) -> ComposeResult:
        yield ApprovalListView(self.manager.approval_list, id="approval-list")
        yield RequestDetailPanel(self.manager.detail, id="request-detail")

    def on_mount(self) -> None:
        self.manager.on_change(self._sync_selection)
        self._sync_selection()

    def on_unmount(self) -> None:
        self.manager.close()

    def _sync_selection(self) -> None:
        panel = self.query_one("#request-detail", RequestDetailPanel)
        panel.display = self.manager.selected_request_id is not None

    def on_approval_list_view_request_selected(self, event: ApprovalListView.RequestSelected) -> None:
        """Move focus to the reason input of the opened request."""
        logger.debug(f"Opened {event.request_id}")
        self.query_one("#reason", Input).focus()

    def on_request_detail_panel_action_completed(self, event: RequestDetailPanel.ActionCompleted) -> None:
        """Return focus to the list once the request is resolved."""
        self.query_one("#requests-table", DataTable).focus()

    def refresh_list(self) -> None:
        """Ask the list to re-fetch the pending set."""
        self.query_one("#approval-list", ApprovalListView).refresh_list()
