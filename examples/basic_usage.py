#!/usr/bin/env python3
"""
Basic Usage Example - Adaptive Learning Platform dashboard

This script drives the dashboard against the in-memory reference ledger.
It shows how to:
- Connect as the administrator and publish a course
- Fund the contract
- Connect as a participant, register, report progress and claim a reward

Run: python examples/basic_usage.py
"""

import asyncio
from typing import Any, Dict

from alp_app.config.loader import ConfigLoader
from alp_app.dashboard import DashboardApp
from alp_app.ledger.memory import InMemoryConnector, InMemoryLedger, InMemorySigningAgent
from alp_app.logging import configure_from_params
from alp_app.notifications import StdoutNotifier

OWNER = "0x90F79bf6EB2c4f870365E785982E1f101E93b906"
STUDENT = "0x15d34AAf54267DB7D7c367839AAf71A00a2C6A65"


def print_view(rendered: Dict[str, Any]) -> None:
    """Print the rendered role surface."""
    print(f"📋 View: {rendered['view']} ({rendered.get('role', 'n/a')})")
    for course in rendered.get("courses", []):
        label = course["label"] if isinstance(course, dict) else course
        print(f"    • {label}")
    print()


async def run_admin(app: DashboardApp) -> None:
    view = app.view
    view.course_name = "Solidity Basics"
    view.description_uri = "ipfs://solidity-basics"
    view.total_milestones = "5"
    view.reward_per_milestone = "0.1"
    await view.submit_add_course()

    view.fund_amount = "2"
    await view.submit_fund()

    print_view(app.render())


async def run_student(app: DashboardApp) -> None:
    view = app.view
    print_view(app.render())

    await view.submit_register()
    print_view(app.render())

    course_id = app.orchestrator.courses[0].id
    view.select_course(course_id)
    view.milestones_completed = "3"
    await view.submit_progress()
    await view.submit_claim()

    # Nothing left to claim: reported as a failed transaction
    await view.submit_claim()


async def main() -> None:
    """Main demonstration function."""
    print("🚀 Adaptive Learning Platform - Basic Usage Demo")
    print("=" * 60)

    config = ConfigLoader.create().load()
    configure_from_params(config.logging)

    ledger = InMemoryLedger(owner=OWNER)
    connector = InMemoryConnector(ledger)
    notifier = StdoutNotifier()

    print("1. Administrator session")
    admin = DashboardApp.create(InMemorySigningAgent(OWNER), connector, config, notifier)
    if await admin.start():
        await run_admin(admin)

    print("2. Participant session")
    student = DashboardApp.create(InMemorySigningAgent(STUDENT), connector, config, notifier)
    if await student.start():
        await run_student(student)

    print(f"3. Contract balance: {ledger.contract_balance} base units")
    print("✅ Demo completed successfully!")


if __name__ == "__main__":
    asyncio.run(main())
