"""
Change Desk Backends

Controller implementations the components call into.
"""

from change_desk.backends.http import HttpChangeRequestBackend
from change_desk.backends.memory import InMemoryChangeRequestBackend, Student
from change_desk.backends.protocol import ChangeRequestBackend

__all__ = [
    "ChangeRequestBackend",
    "HttpChangeRequestBackend",
    "InMemoryChangeRequestBackend",
    "Student",
]
