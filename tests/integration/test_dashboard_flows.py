"""End-to-end scenarios through the dashboard surfaces."""

import asyncio
from decimal import Decimal

import pytest

from alp_app.dashboard import AdminDashboard, DashboardApp, StudentDashboard
from alp_app.ledger.base import TransactionRequest
from alp_app.ledger.memory import InMemorySigningAgent
from alp_app.notifications import StdoutNotifier
from alp_app.notifications.base import NotificationLevel
from alp_app.session.roles import Role
from alp_app.state.models import ActionStatus

from conftest import ETH, STUDENT


@pytest.fixture
def student_app(config, connector, student_agent, notifier) -> DashboardApp:
    app = DashboardApp.create(student_agent, connector, config, notifier)
    assert asyncio.run(app.start())
    return app


@pytest.fixture
def admin_app(config, connector, owner_agent, notifier) -> DashboardApp:
    app = DashboardApp.create(owner_agent, connector, config, notifier)
    assert asyncio.run(app.start())
    return app


class TestConnection:
    """Connecting and choosing the role surface."""

    def test_no_signing_agent_shows_unavailable(self, config, connector, notifier):
        app = DashboardApp.create(None, connector, config, notifier)

        assert asyncio.run(app.start()) is False
        assert app.render()["view"] == "unavailable"

    def test_rejected_connection_can_be_retried(self, config, connector, notifier):
        agent = InMemorySigningAgent(STUDENT, grant_access=False)
        app = DashboardApp.create(agent, connector, config, notifier)

        assert asyncio.run(app.start()) is False
        assert app.render()["view"] == "connect"
        assert notifier.last.title == "Connection rejected"

        agent.grant_access = True
        assert asyncio.run(app.reconnect()) is True
        assert app.render()["view"] == "registration"

    def test_role_resolution_failure_reported(self, config, connector, ledger, student_agent, notifier):
        ledger.fail_read("owner")
        app = DashboardApp.create(student_agent, connector, config, notifier)

        assert asyncio.run(app.start()) is False
        assert notifier.last.title == "Ledger unavailable"

    def test_administrator_gets_admin_surface(self, admin_app):
        assert isinstance(admin_app.view, AdminDashboard)
        rendered = admin_app.render()
        assert rendered["view"] == "administrator"
        assert rendered["role"] == "administrator"

    def test_participant_gets_student_surface(self, student_app):
        assert isinstance(student_app.view, StudentDashboard)
        assert student_app.role == Role.UNREGISTERED_PARTICIPANT

    def test_default_notifier_writes_to_stdout(self, config, connector, student_agent):
        app = DashboardApp.create(student_agent, connector, config)
        assert isinstance(app.notifier, StdoutNotifier)

    def test_disconnect(self, student_app):
        student_app.disconnect()
        assert student_app.render()["view"] == "connect"
        assert student_app.role is None


class TestStudentScenarios:
    """Participant flows."""

    def test_register_then_catalog_loads(self, student_app, notifier):
        view = student_app.view

        status = asyncio.run(view.submit_register())

        assert status == ActionStatus.CONFIRMED
        assert student_app.role == Role.REGISTERED_PARTICIPANT
        rendered = student_app.render()
        assert rendered["view"] == "courses"
        assert [c["id"] for c in rendered["courses"]] == [1, 3]
        assert notifier.titles(NotificationLevel.SUCCESS) == ["Registration complete"]

    def test_select_and_update_progress(self, student_app, ledger):
        view = student_app.view
        asyncio.run(view.submit_register())
        catalog_before = student_app.orchestrator.courses
        ledger.submitted.clear()

        assert view.select_course(3)
        view.milestones_completed = "3"
        status = asyncio.run(view.submit_progress())

        assert status == ActionStatus.CONFIRMED
        assert ledger.submitted == [
            TransactionRequest(function="updateProgress", sender=STUDENT, args=(3, 3)),
        ]
        assert view.milestones_completed == ""
        assert view.selected_course_id == 3
        assert student_app.orchestrator.courses == catalog_before

    def test_failed_progress_preserves_input(self, student_app, notifier):
        view = student_app.view
        asyncio.run(view.submit_register())
        view.select_course(1)
        view.milestones_completed = "42"

        status = asyncio.run(view.submit_progress())

        assert status == ActionStatus.REVERTED
        assert view.milestones_completed == "42"
        assert notifier.last.title == "Transaction failed"
        assert "Invalid milestone count" in notifier.last.description

    def test_progress_without_selection(self, student_app, ledger, notifier):
        view = student_app.view
        asyncio.run(view.submit_register())
        ledger.submitted.clear()
        view.milestones_completed = "1"

        status = asyncio.run(view.submit_progress())

        assert status == ActionStatus.IDLE
        assert ledger.submitted == []
        assert notifier.last.title == "Invalid input"

    def test_selecting_tombstoned_course_refused(self, student_app):
        view = student_app.view
        asyncio.run(view.submit_register())

        assert view.select_course(2) is False
        assert view.selected_course_id is None

    def test_claim_reward(self, student_app, ledger, notifier):
        view = student_app.view
        asyncio.run(view.submit_register())
        view.select_course(1)
        view.milestones_completed = "2"
        asyncio.run(view.submit_progress())

        status = asyncio.run(view.submit_claim())

        assert status == ActionStatus.CONFIRMED
        assert ledger.payouts[STUDENT.lower()] == 2 * ETH // 10
        assert notifier.last.title == "Reward claimed successfully!"

    def test_rejected_claim_leaves_state(self, student_app, student_agent, ledger, notifier):
        view = student_app.view
        asyncio.run(view.submit_register())
        view.select_course(1)
        student_agent.reject_functions = {"claimReward"}
        balance = ledger.contract_balance

        status = asyncio.run(view.submit_claim())

        assert status == ActionStatus.REJECTED
        assert ledger.contract_balance == balance
        assert view.selected_course_id == 1
        assert notifier.last.title == "Transaction rejected"

    def test_refresh_failure_keeps_snapshot(self, student_app, ledger, notifier):
        view = student_app.view
        asyncio.run(view.submit_register())
        snapshot = student_app.orchestrator.courses
        ledger.fail_read("get_course_details:1")

        assert asyncio.run(view.refresh()) is False
        assert student_app.orchestrator.courses == snapshot
        assert notifier.last.title == "Could not load courses"


class TestAdminScenarios:
    """Administrator flows."""

    def test_add_course_scenario(self, admin_app, ledger, notifier):
        view = admin_app.view
        view.course_name = "Intro"
        view.description_uri = "ipfs://intro"
        view.total_milestones = "4"
        view.reward_per_milestone = "0.1"

        status = asyncio.run(view.submit_add_course())

        assert status == ActionStatus.CONFIRMED
        assert (view.course_name, view.description_uri,
                view.total_milestones, view.reward_per_milestone) == ("", "", "", "")
        new_course = admin_app.orchestrator.courses[-1]
        assert new_course.id == ledger.course_counter
        assert new_course.name == "Intro"
        assert new_course.total_milestones == 4
        assert new_course.reward_per_milestone == Decimal("0.1")
        assert "Intro - 4 milestones, 0.1 ETH per milestone" in admin_app.render()["courses"]
        assert notifier.last.title == "Course Added"

    def test_invalid_reward_keeps_form(self, admin_app, ledger, notifier):
        view = admin_app.view
        view.course_name = "Intro"
        view.total_milestones = "4"
        view.reward_per_milestone = "zero point one"

        status = asyncio.run(view.submit_add_course())

        assert status == ActionStatus.IDLE
        assert view.reward_per_milestone == "zero point one"
        assert view.course_name == "Intro"
        assert ledger.submitted == []
        assert notifier.last.title == "Invalid input"

    def test_fund_and_withdraw(self, admin_app, ledger, notifier):
        view = admin_app.view
        view.fund_amount = "2.5"
        view.withdraw_amount = "1"

        assert asyncio.run(view.submit_fund()) == ActionStatus.CONFIRMED
        assert asyncio.run(view.submit_withdraw()) == ActionStatus.CONFIRMED

        assert ledger.contract_balance == 10 * ETH + 25 * ETH // 10 - ETH
        assert view.fund_amount == ""
        assert view.withdraw_amount == ""
        assert notifier.titles(NotificationLevel.SUCCESS) == ["Contract Funded", "Funds Withdrawn"]

    def test_failed_withdraw_keeps_amount(self, admin_app, notifier):
        view = admin_app.view
        view.withdraw_amount = "500"

        status = asyncio.run(view.submit_withdraw())

        assert status == ActionStatus.REVERTED
        assert view.withdraw_amount == "500"
        assert notifier.last.description.endswith("Insufficient contract balance")

    def test_ledger_down_during_fund(self, admin_app, ledger, notifier):
        view = admin_app.view
        view.fund_amount = "1"
        ledger.unavailable = True

        status = asyncio.run(view.submit_fund())

        assert status == ActionStatus.UNAVAILABLE
        assert view.fund_amount == "1"
        assert notifier.last.title == "Ledger unavailable"

    def test_pending_flag_rendered(self, admin_app, ledger):
        view = admin_app.view
        view.fund_amount = "1"
        ledger.auto_mine = False

        async def scenario():
            task = asyncio.ensure_future(view.submit_fund())
            while ledger.pending_count == 0:
                await asyncio.sleep(0)
            pending = admin_app.render()["fund"]["pending"]
            ledger.mine()
            return pending, await task

        pending, status = asyncio.run(scenario())

        assert pending is True
        assert status == ActionStatus.CONFIRMED
        assert admin_app.render()["fund"]["pending"] is False
