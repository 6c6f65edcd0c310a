"""
Tests for the submission form component
"""

import pytest

from change_desk.components import SubmissionForm
from change_desk.errors import RemoteCallError
from change_desk.notifications import Severity
from change_desk.signals import SUBMITTED


@pytest.fixture
def form(recording_backend, bus, notifier):
    return SubmissionForm(recording_backend, user_id="u-ada", bus=bus, notifier=notifier)


class TestSubmissionForm:
    """Tests for SubmissionForm."""

    def test_request_type_options(self):
        """Test the three selectable request types."""
        values = [value for _, value in SubmissionForm.request_type_options]
        assert values == ["Email", "Phone", "MailingAddress"]

    @pytest.mark.asyncio
    async def test_load_resolves_contact(self, form, recording_backend):
        """Test loading resolves the current user's student record."""
        await form.load()
        assert form.contact_id == "003-ADA"
        assert recording_backend.count("get_current_contact") == 1

    @pytest.mark.asyncio
    async def test_submit_success(self, form, recording_backend, bus, notifier):
        """Test a valid submission creates, clears and emits."""
        submitted = []
        bus.connect(SUBMITTED, submitted.append)
        await form.load()
        form.set_request_type("Email")
        form.set_new_value("countess@example.edu")

        request_id = await form.submit()

        assert request_id == "CR-NEW"
        assert ("create_request", "003-ADA", "Email", "countess@example.edu") in recording_backend.calls
        assert form.request_type is None
        assert form.new_value is None
        assert notifier.last.title == "Submitted"
        assert notifier.last.severity == Severity.SUCCESS
        assert submitted == [{"request_id": "CR-NEW"}]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "request_type,new_value",
        [(None, "a@x.io"), ("Email", None), ("Email", ""), (None, None)],
    )
    async def test_missing_fields(self, form, recording_backend, notifier, request_type, new_value):
        """Test an incomplete form warns and never calls create."""
        await form.load()
        form.set_request_type(request_type)
        form.set_new_value(new_value)

        assert await form.submit() is None

        assert recording_backend.count("create_request") == 0
        assert notifier.last.title == "Attention"
        assert notifier.last.severity == Severity.WARNING

    @pytest.mark.asyncio
    async def test_unknown_user(self, recording_backend, notifier):
        """Test a user without a student record cannot submit."""
        form = SubmissionForm(recording_backend, user_id="stranger", notifier=notifier)
        await form.load()
        form.set_request_type("Phone")
        form.set_new_value("555")

        assert await form.submit() is None

        assert recording_backend.count("create_request") == 0
        assert notifier.last.severity == Severity.ERROR
        assert notifier.last.message == "We could not identify your student record."

    @pytest.mark.asyncio
    async def test_identity_checked_before_fields(self, recording_backend, notifier):
        """Test the identity error wins over missing fields."""
        form = SubmissionForm(recording_backend, user_id=None, notifier=notifier)
        await form.load()

        await form.submit()

        assert recording_backend.count("get_current_contact") == 0
        assert notifier.last.title == "Error"

    @pytest.mark.asyncio
    async def test_create_failure_keeps_inputs(self, form, recording_backend, bus, notifier):
        """Test a server failure shows its message and keeps the inputs."""
        recording_backend.failures["create_request"] = RemoteCallError(
            "Bad request", body={"message": "DUPLICATE"}
        )
        submitted = []
        bus.connect(SUBMITTED, submitted.append)
        await form.load()
        form.set_request_type("Phone")
        form.set_new_value("555-0142")

        assert await form.submit() is None

        assert notifier.last.title == "Error"
        assert notifier.last.message == "DUPLICATE"
        assert form.request_type == "Phone"
        assert form.new_value == "555-0142"
        assert form.submitting is False
        assert submitted == []

    @pytest.mark.asyncio
    async def test_set_user(self, form, recording_backend):
        """Test switching users re-resolves the contact."""
        recording_backend.contacts["u-alan"] = "003-ALAN"
        await form.load()
        await form.set_user("u-alan")
        assert form.contact_id == "003-ALAN"

    def test_change_callbacks(self, form):
        """Test views are told about input changes."""
        changes = []
        form.on_change(lambda: changes.append(True))
        form.set_request_type("Email")
        form.clear()
        assert len(changes) == 2
