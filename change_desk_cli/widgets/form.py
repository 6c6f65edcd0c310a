"""
Change Request Form Widget

Lets a student pick a request type, enter the new value and submit it.
"""

from typing import Optional

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.message import Message
from textual.widgets import Button, Select, Static, TextArea

from change_desk.components import SubmissionForm
from change_desk.signals import SUBMITTED


class ChangeRequestForm(Vertical):
    """Submission form bound to a SubmissionForm view model."""

    DEFAULT_CSS = """
    ChangeRequestForm {
        height: auto;
        padding: 1 2;
    }

    ChangeRequestForm .form-title {
        text-style: bold;
        color: $accent;
        margin-bottom: 1;
    }

    ChangeRequestForm Select {
        margin-bottom: 1;
    }

    ChangeRequestForm TextArea {
        height: 6;
        margin-bottom: 1;
    }

    ChangeRequestForm .hint {
        color: $text-muted;
    }

    ChangeRequestForm Horizontal {
        height: 3;
    }

    ChangeRequestForm Button {
        margin: 0 1 0 0;
    }
    """

    class Submitted(Message):
        """Message sent after a request was created."""

        def __init__(self, request_id: str):
            self.request_id = request_id
            super().__init__()

    def __init__(self, form: SubmissionForm, **kwargs):
        super().__init__(**kwargs)
        self.form = form

    def compose(self) -> ComposeResult:
        """Compose the form."""
        yield Static(Text("Request a profile change", style="bold"), classes="form-title")
        yield Select(
            self.form.request_type_options,
            prompt="Request type",
            id="request-type",
        )
        yield TextArea(id="new-value")
        yield Static(
            'Mailing address as JSON, e.g. {"street": "Main St", "city": "Springfield"}',
            classes="hint",
        )
        with Horizontal():
            yield Button("Submit", id="submit-btn", variant="primary")
            yield Button("Clear", id="clear-btn")

    def on_mount(self) -> None:
        self.form.on_change(self._sync_inputs)
        self._disconnect = self.form.bus.connect(SUBMITTED, self._on_submitted)
        self.run_worker(self.form.load(), group="identity")

    def on_unmount(self) -> None:
        self._disconnect()

    def _on_submitted(self, payload: dict) -> None:
        self.post_message(self.Submitted(payload["request_id"]))

    def _sync_inputs(self) -> None:
        """Push view model state back into the inputs."""
        select = self.query_one("#request-type", Select)
        text_area = self.query_one("#new-value", TextArea)

        if self.form.request_type is None and isinstance(select.value, str):
            select.clear()
        if self.form.new_value is None and text_area.text:
            text_area.clear()

        self.query_one("#submit-btn", Button).disabled = self.form.submitting

    def on_select_changed(self, event: Select.Changed) -> None:
        value: Optional[str] = event.value if isinstance(event.value, str) else None
        self.form.set_request_type(value)

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        self.form.set_new_value(event.text_area.text)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle button press."""
        if event.button.id == "submit-btn":
            self.run_worker(self.form.submit(), group="submit")
        elif event.button.id == "clear-btn":
            self.form.clear()
