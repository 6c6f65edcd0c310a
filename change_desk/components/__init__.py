"""
Workflow Components

View models for the submission form, approval list, review panel and the
manager that composes the last two.
"""

from change_desk.components.approval_list import ApprovalList, RequestRow
from change_desk.components.base import Component
from change_desk.components.detail import RequestDetail, RequestView
from change_desk.components.form import SubmissionForm
from change_desk.components.manager import RequestManager

__all__ = [
    "ApprovalList",
    "Component",
    "RequestDetail",
    "RequestManager",
    "RequestRow",
    "RequestView",
    "SubmissionForm",
]
