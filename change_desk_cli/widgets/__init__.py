"""
Change Desk CLI Widgets

Textual widgets for the TUI interface.
"""

from change_desk_cli.widgets.approval_list import ApprovalListView
from change_desk_cli.widgets.detail import RequestDetailPanel
from change_desk_cli.widgets.form import ChangeRequestForm
from change_desk_cli.widgets.manager import ChangeRequestManager

__all__ = [
    "ApprovalListView",
    "ChangeRequestForm",
    "ChangeRequestManager",
    "RequestDetailPanel",
]
