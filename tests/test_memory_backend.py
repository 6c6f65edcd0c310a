"""
Tests for change_desk.backends.memory
"""

import json

import pytest

from change_desk.backends import ChangeRequestBackend
from change_desk.backends.memory import InMemoryChangeRequestBackend, Student
from change_desk.errors import ConflictError, NotFoundError, RemoteCallError
from change_desk.models import RequestStatus, RequestType


class TestStudent:
    """Tests for Student profile fields."""

    def test_get_field(self):
        """Test reading profile fields by request type."""
        student = Student(id="s1", name="Ada", email="a@x.io", mailing_address={"city": "London"})
        assert student.get_field(RequestType.EMAIL) == "a@x.io"
        assert json.loads(student.get_field(RequestType.MAILING_ADDRESS)) == {"city": "London"}

    def test_empty_address(self):
        """Test an empty address reads as an empty string."""
        assert Student(id="s1", name="Ada").get_field(RequestType.MAILING_ADDRESS) == ""

    def test_set_address_from_text(self):
        """Test a non-JSON address becomes a street line."""
        student = Student(id="s1", name="Ada")
        student.set_field(RequestType.MAILING_ADDRESS, "1 Main St")
        assert student.mailing_address == {"street": "1 Main St"}


class TestInMemoryBackend:
    """Tests for InMemoryChangeRequestBackend."""

    def test_implements_protocol(self, memory_backend):
        """Test the backend satisfies the controller protocol."""
        assert isinstance(memory_backend, ChangeRequestBackend)

    @pytest.mark.asyncio
    async def test_create_request(self, memory_backend):
        """Test creating a pending request captures the old value."""
        request_id = await memory_backend.create_request("003-ADA", "Email", "countess@x.io")

        request = await memory_backend.get_request_by_id(request_id)
        assert request.status == RequestStatus.PENDING
        assert request.student_name == "Ada Lovelace"
        assert request.old_value == "ada@example.edu"
        assert request.new_value == "countess@x.io"

        pending = await memory_backend.get_pending_requests()
        assert [r.id for r in pending] == [request_id]

    @pytest.mark.asyncio
    async def test_ids_are_unique(self, memory_backend):
        """Test generated ids do not repeat."""
        first = await memory_backend.create_request("003-ADA", "Email", "a@x.io")
        second = await memory_backend.create_request("003-ADA", "Phone", "555")
        assert first != second

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "student_id,request_type,new_value,message",
        [
            ("nobody", "Email", "a@x.io", "Unknown student: nobody"),
            ("003-ADA", "Fax", "a@x.io", "Invalid request type: Fax"),
            ("003-ADA", "Email", "   ", "New value is required"),
        ],
    )
    async def test_create_validation(self, memory_backend, student_id, request_type, new_value, message):
        """Test invalid submissions are rejected with a server message."""
        with pytest.raises(RemoteCallError) as exc_info:
            await memory_backend.create_request(student_id, request_type, new_value)

        assert exc_info.value.status_code == 400
        assert exc_info.value.body == {"message": message}
        assert memory_backend.all_requests() == []

    @pytest.mark.asyncio
    async def test_approve_updates_profile(self, memory_backend):
        """Test approval applies the new value to the student."""
        request_id = await memory_backend.create_request(
            "003-ADA", "MailingAddress", '{"street": "Main St", "city": "Springfield"}'
        )

        await memory_backend.approve_request(request_id)

        request = await memory_backend.get_request_by_id(request_id)
        assert request.status == RequestStatus.APPROVED
        student = memory_backend.get_student("003-ADA")
        assert student.mailing_address == {"street": "Main St", "city": "Springfield"}
        assert await memory_backend.get_pending_requests() == []

    @pytest.mark.asyncio
    async def test_reject_records_reason(self, memory_backend):
        """Test rejection stores the reason and leaves the profile alone."""
        request_id = await memory_backend.create_request("003-ALAN", "Email", "bad@x.io")

        await memory_backend.reject_request(request_id, "Not a school address")

        request = await memory_backend.get_request_by_id(request_id)
        assert request.status == RequestStatus.REJECTED
        assert request.rejection_reason == "Not a school address"
        assert memory_backend.get_student("003-ALAN").email == "alan@example.edu"

    @pytest.mark.asyncio
    async def test_reject_without_reason(self, memory_backend):
        """Test an empty reason is stored as missing."""
        request_id = await memory_backend.create_request("003-ALAN", "Phone", "555")
        await memory_backend.reject_request(request_id, "")
        request = await memory_backend.get_request_by_id(request_id)
        assert request.rejection_reason is None

    @pytest.mark.asyncio
    async def test_resolved_request_cannot_change(self, memory_backend):
        """Test a request leaves Pending exactly once."""
        request_id = await memory_backend.create_request("003-ADA", "Phone", "555-0142")
        await memory_backend.approve_request(request_id)

        with pytest.raises(ConflictError) as exc_info:
            await memory_backend.reject_request(request_id, "late")

        assert "already Approved" in exc_info.value.body["message"]
        request = await memory_backend.get_request_by_id(request_id)
        assert request.status == RequestStatus.APPROVED

    @pytest.mark.asyncio
    async def test_unknown_request(self, memory_backend):
        """Test unknown ids raise NotFoundError."""
        with pytest.raises(NotFoundError):
            await memory_backend.get_request_by_id("missing")
        with pytest.raises(NotFoundError):
            await memory_backend.approve_request("missing")

    @pytest.mark.asyncio
    async def test_current_contact(self, memory_backend):
        """Test user to student resolution."""
        assert await memory_backend.get_current_contact("u-ada") == "003-ADA"
        assert await memory_backend.get_current_contact("stranger") is None


class TestSeedFiles:
    """Tests for seed loading and saving."""

    @pytest.mark.asyncio
    async def test_load_seed(self, tmp_path):
        """Test loading students, users and requests."""
        seed = tmp_path / "seed.json"
        seed.write_text(json.dumps({
            "students": [{"id": "s1", "name": "Grace Hopper", "email": "grace@x.io"}],
            "users": {"grace": "s1"},
            "requests": [
                {"id": "CR-000001", "studentId": "s1", "requestType": "Email",
                 "newValue": "amazing@x.io", "status": "Pending"},
            ],
        }))

        backend = InMemoryChangeRequestBackend()
        assert backend.load_seed(seed) == 1

        request = await backend.get_request_by_id("CR-000001")
        assert request.student_name == "Grace Hopper"
        assert await backend.get_current_contact("grace") == "s1"

        # New ids skip the seeded ones
        new_id = await backend.create_request("s1", "Phone", "555")
        assert new_id != "CR-000001"

    @pytest.mark.asyncio
    async def test_save_and_reload(self, memory_backend, tmp_path):
        """Test saved state loads into a fresh backend."""
        request_id = await memory_backend.create_request("003-ADA", "Email", "new@x.io")
        path = tmp_path / "out" / "seed.json"

        assert memory_backend.save_seed(path) == 1

        reloaded = InMemoryChangeRequestBackend()
        reloaded.load_seed(path)
        request = await reloaded.get_request_by_id(request_id)
        assert request.new_value == "new@x.io"
        assert reloaded.get_student("003-ADA").mailing_address == {"street": "Old Rd", "city": "London"}
