"""
Request Detail Widget

Old and new values of one change request with Approve/Reject buttons.
"""

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.message import Message
from textual.widgets import Button, Input, Static

from change_desk.components import RequestDetail
from change_desk.signals import ACTION_COMPLETED


def _field_line(label: str, value: str) -> Text:
    line = Text()
    line.append(f"{label}: ", style="bold")
    line.append(value or "-")
    return line


class RequestDetailPanel(Vertical):
    """Review panel bound to a RequestDetail view model."""

    DEFAULT_CSS = """
    RequestDetailPanel {
        height: 1fr;
        border: round $warning;
        padding: 0 1;
    }

    RequestDetailPanel .detail-title {
        text-style: bold;
        color: $warning;
        padding: 1 0;
    }

    RequestDetailPanel .detail-field {
        margin-bottom: 1;
    }

    RequestDetailPanel Input {
        margin: 1 0;
    }

    RequestDetailPanel Horizontal {
        height: 3;
        align: center middle;
    }

    RequestDetailPanel Button {
        margin: 0 1;
    }
    """

    class ActionCompleted(Message):
        """Message sent after the request was approved or rejected."""

        pass

    def __init__(self, detail: RequestDetail, **kwargs):
        super().__init__(**kwargs)
        self.detail = detail

    def compose(self) -> ComposeResult:
        yield Static("Change Request", classes="detail-title")
        yield Static(id="detail-student", classes="detail-field")
        yield Static(id="detail-type", classes="detail-field")
        yield Static(id="detail-old", classes="detail-field")
        yield Static(id="detail-new", classes="detail-field")
        yield Static(id="detail-status", classes="detail-field")
        yield Input(placeholder="Rejection reason (optional)", id="reason")
        with Horizontal():
            yield Button("Approve", id="approve-btn", variant="success")
            yield Button("Reject", id="reject-btn", variant="error")

    def on_mount(self) -> None:
        self.detail.on_change(self._show_request)
        self._disconnect = self.detail.bus.connect(ACTION_COMPLETED, self._on_action_completed)
        self._show_request()

    def on_unmount(self) -> None:
        self._disconnect()

    def _on_action_completed(self, _payload=None) -> None:
        self.post_message(self.ActionCompleted())

    def _show_request(self) -> None:
        request = self.detail.request
        if request is None:
            values = {"student": "", "type": "", "old": "", "new": "", "status": ""}
        else:
            values = {
                "student": request.student_name,
                "type": request.request_type,
                "old": self.detail.rendered_old_value,
                "new": self.detail.rendered_new_value,
                "status": request.status,
            }

        self.query_one("#detail-student", Static).update(_field_line("Student", values["student"]))
        self.query_one("#detail-type", Static).update(_field_line("Type", values["type"]))
        self.query_one("#detail-old", Static).update(_field_line("Current value", values["old"]))
        self.query_one("#detail-new", Static).update(_field_line("New value", values["new"]))
        self.query_one("#detail-status", Static).update(_field_line("Status", values["status"]))

        reason_input = self.query_one("#reason", Input)
        if self.detail.reason is None and reason_input.value:
            reason_input.value = ""

        busy = self.detail.guard_in_flight and self.detail.in_flight
        self.query_one("#approve-btn", Button).disabled = busy
        self.query_one("#reject-btn", Button).disabled = busy

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id == "reason":
            self.detail.set_reason(event.value)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle button press."""
        if event.button.id == "approve-btn":
            self.run_worker(self.detail.approve(), group="review")
        elif event.button.id == "reject-btn":
            self.run_worker(self.detail.reject(), group="review")
