#!/usr/bin/env python3
"""
Change Desk Quickstart

Runs the whole workflow against the in-memory backend without a UI:
a student submits a request, staff open it from the list and approve it.

Usage:
    python examples/quickstart.py
"""

import asyncio
import logging
from pathlib import Path

from change_desk import (
    ApprovalList,
    InMemoryChangeRequestBackend,
    Notifier,
    RequestDetail,
    RequestManager,
    SignalBus,
    SubmissionForm,
)

SEED = Path(__file__).parent / "seed.json"


def print_notification(notification) -> None:
    print(f"[{notification.severity.value}] {notification.title}: {notification.message}")


async def main() -> None:
    backend = InMemoryChangeRequestBackend()
    backend.load_seed(SEED)
    notifier = Notifier(sink=print_notification)

    # Student side
    form = SubmissionForm(backend, user_id="ada", notifier=notifier)
    await form.load()
    form.set_request_type("Phone")
    form.set_new_value("555-0142")
    new_id = await form.submit()

    # Staff side
    bus = SignalBus()
    manager = RequestManager(
        ApprovalList(backend, bus=bus, notifier=notifier),
        RequestDetail(backend, bus=bus, notifier=notifier),
        bus=bus,
    )
    await manager.load()

    print("\nPending:")
    for row in manager.approval_list.requests:
        print(f"  {row.id}  {row.student_name:<14} {row.request_type:<15} {row.new_value_preview}")

    row = manager.approval_list.get_row(new_id)
    await manager.approval_list.handle_row_action("open", row)
    print(f"\nSelected {manager.selected_request_id}: {manager.detail.rendered_new_value}")

    await manager.detail.approve()
    print(f"Selected after approval: {manager.selected_request_id}")
    print(f"Still pending: {[r.id for r in manager.approval_list.requests]}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(main())
