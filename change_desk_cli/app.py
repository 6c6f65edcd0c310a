"""
Change Desk CLI Application

Main Textual TUI application: a Submit tab for students and a Review tab
for staff.
"""

import logging
from typing import Optional

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Footer, Header, TabbedContent, TabPane

from change_desk.backends import ChangeRequestBackend
from change_desk.components import SubmissionForm
from change_desk.notifications import Notification, Notifier, Severity
from change_desk.signals import SignalBus
from change_desk_cli.config import Config, get_config
from change_desk_cli.widgets.form import ChangeRequestForm
from change_desk_cli.widgets.manager import ChangeRequestManager

logger = logging.getLogger(__name__)

# Textual has no "success" severity
SEVERITY_MAP = {
    Severity.INFO: "information",
    Severity.SUCCESS: "information",
    Severity.WARNING: "warning",
    Severity.ERROR: "error",
}

SUBMIT_TAB = "submit-tab"
REVIEW_TAB = "review-tab"


class ChangeDeskApp(App):
    """Main Change Desk application."""

    TITLE = "Change Desk"

    CSS = """
    Screen {
        layout: vertical;
    }

    TabbedContent {
        height: 1fr;
    }
    """

    BINDINGS = [
        Binding("ctrl+c", "quit", "Quit"),
        Binding("ctrl+r", "refresh", "Refresh list"),
        Binding("f2", "show_tab('submit-tab')", "Submit"),
        Binding("f3", "show_tab('review-tab')", "Review"),
    ]

    ENABLE_COMMAND_PALETTE = False

    def __init__(
        self,
        config: Optional[Config] = None,
        backend: Optional[ChangeRequestBackend] = None,
        initial_tab: str = REVIEW_TAB,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.config = config or get_config()
        self.backend = backend or self.config.create_backend()
        self.initial_tab = initial_tab
        self.notifier = Notifier(sink=self._show_notification)

    def compose(self) -> ComposeResult:
        """Compose the application."""
        yield Header(show_clock=False)
        with TabbedContent(initial=self.initial_tab):
            with TabPane("Submit", id=SUBMIT_TAB):
                yield ChangeRequestForm(
                    SubmissionForm(
                        self.backend,
                        user_id=self.config.user_id,
                        bus=SignalBus(),
                        notifier=self.notifier,
                    ),
                    id="change-request-form",
                )
            with TabPane("Review", id=REVIEW_TAB):
                yield ChangeRequestManager(
                    self.backend,
                    notifier=self.notifier,
                    guard_in_flight=self.config.guard_in_flight,
                    id="change-request-manager",
                )
        yield Footer()

    def _show_notification(self, notification: Notification) -> None:
        self.notify(
            notification.message,
            title=notification.title,
            severity=SEVERITY_MAP.get(notification.severity, "information"),
        )

    def on_change_request_form_submitted(self, event: ChangeRequestForm.Submitted) -> None:
        """A new request exists; the review list is stale."""
        logger.debug(f"Submitted {event.request_id}")
        self.query_one("#change-request-manager", ChangeRequestManager).refresh_list()

    def action_refresh(self) -> None:
        """Refresh the pending list."""
        self.query_one("#change-request-manager", ChangeRequestManager).refresh_list()

    def action_show_tab(self, tab: str) -> None:
        """Switch to a tab."""
        self.query_one(TabbedContent).active = tab

    async def on_unmount(self) -> None:
        close = getattr(self.backend, "aclose", None)
        if close is not None:
            await close()


def run_app(
    config: Optional[Config] = None,
    initial_tab: str = REVIEW_TAB,
    mouse: bool = True,
) -> None:
    """Run the Change Desk application.

    Args:
        config: Application configuration
        initial_tab: Tab shown at startup
        mouse: Enable mouse support
    """
    app = ChangeDeskApp(config=config, initial_tab=initial_tab)
    app.run(mouse=mouse)


if __name__ == "__main__":
    run_app()
