"""
Approval List Widget

Table of pending change requests. Selecting a row opens it for review.
"""

from textual.app import ComposeResult
from textual.containers import Vertical
from textual.message import Message
from textual.widgets import DataTable, Static

from change_desk.components import ApprovalList
from change_desk.components.approval_list import OPEN_ACTION
from change_desk.signals import REQUEST_SELECTED


class ApprovalListView(Vertical):
    """Pending request table bound to an ApprovalList view model."""

    DEFAULT_CSS = """
    ApprovalListView {
        height: 1fr;
        border: round $primary-darken-2;
        padding: 0 1;
    }

    ApprovalListView DataTable {
        height: 1fr;
    }

    ApprovalListView .empty-state {
        color: $text-muted;
        padding: 1;
        display: none;
    }

    ApprovalListView .empty-state.visible {
        display: block;
    }
    """

    class RequestSelected(Message):
        """Message sent when a row is opened."""

        def __init__(self, request_id: str):
            self.request_id = request_id
            super().__init__()

    def __init__(self, approval_list: ApprovalList, **kwargs):
        super().__init__(**kwargs)
        self.approval_list = approval_list

    def compose(self) -> ComposeResult:
        yield DataTable(id="requests-table", cursor_type="row", zebra_stripes=True)
        yield Static("No pending requests.", id="empty-state", classes="empty-state")

    def on_mount(self) -> None:
        table = self.query_one("#requests-table", DataTable)
        labels = [c["label"] for c in self.approval_list.columns if "label" in c]
        table.add_columns(*labels, "")

        self.approval_list.on_change(self._render_rows)
        self._disconnect = self.approval_list.bus.connect(REQUEST_SELECTED, self._on_request_selected)
        self.run_worker(self.approval_list.load(), group="list")

    def on_unmount(self) -> None:
        self._disconnect()

    def _on_request_selected(self, request_id: str) -> None:
        self.post_message(self.RequestSelected(request_id))

    def _render_rows(self) -> None:
        table = self.query_one("#requests-table", DataTable)
        table.clear()
        for row in self.approval_list.requests:
            table.add_row(
                row.student_name,
                row.request_type,
                row.new_value_preview or "",
                "Open",
                key=row.id,
            )
        empty = self.query_one("#empty-state", Static)
        empty.set_class(self.approval_list.is_empty, "visible")

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        """Open the selected row."""
        row = self.approval_list.get_row(str(event.row_key.value))
        if row is not None:
            self.run_worker(
                self.approval_list.handle_row_action(OPEN_ACTION, row),
                group="list",
            )

    def refresh_list(self) -> None:
        """Re-fetch the pending set."""
        self.run_worker(self.approval_list.refresh_list(), group="list")
