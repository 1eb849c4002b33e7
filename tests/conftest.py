"""Pytest configuration and shared fixtures."""

import asyncio

import pytest

from alp_app.config.defaults import DashboardConfig, LedgerParams, get_default_config
from alp_app.ledger.memory import InMemoryConnector, InMemoryLedger, InMemorySigningAgent
from alp_app.notifications.recording import RecordingNotifier
from alp_app.orchestrator import LedgerOrchestrator
from alp_app.session.establisher import Session

OWNER = "0xAbCdEf0123456789aBcDeF0123456789AbCdEf01"
STUDENT = "0x1111111111111111111111111111111111111111"
CONTRACT = "0x5FbDB2315678afecb367f032d93F642f64180aa3"
ETH = 10 ** 18


@pytest.fixture
def config() -> DashboardConfig:
    """Default configuration pointing at the test contract."""
    defaults = get_default_config()
    return DashboardConfig(
        ledger=LedgerParams(contract_address=CONTRACT),
        timeouts=defaults.timeouts,
        catalog=defaults.catalog,
        logging=defaults.logging,
    )


@pytest.fixture
def ledger() -> InMemoryLedger:
    """Ledger with three courses, the second one tombstoned."""
    ledger = InMemoryLedger(owner=OWNER)
    ledger.seed_course("Solidity Basics", 5, ETH // 10)
    ledger.seed_course("Retired Course", 3, ETH)
    ledger.seed_course("DeFi Deep Dive", 8, 25 * ETH // 100)
    ledger.retire_course(2)
    ledger.contract_balance = 10 * ETH
    return ledger


@pytest.fixture
def connector(ledger: InMemoryLedger) -> InMemoryConnector:
    return InMemoryConnector(ledger)


@pytest.fixture
def owner_agent() -> InMemorySigningAgent:
    return InMemorySigningAgent(OWNER)


@pytest.fixture
def student_agent() -> InMemorySigningAgent:
    return InMemorySigningAgent(STUDENT)


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def owner_session(connector, owner_agent) -> Session:
    return Session(caller_address=OWNER, ledger=connector.bind(CONTRACT, owner_agent))


@pytest.fixture
def student_session(connector, student_agent) -> Session:
    return Session(caller_address=STUDENT, ledger=connector.bind(CONTRACT, student_agent))


@pytest.fixture
def student_orchestrator(config, student_session) -> LedgerOrchestrator:
    """Orchestrator attached to an unregistered student session."""
    orchestrator = LedgerOrchestrator(config)
    asyncio.run(orchestrator.attach(student_session))
    return orchestrator


@pytest.fixture
def owner_orchestrator(config, owner_session) -> LedgerOrchestrator:
    """Orchestrator attached to the administrator session."""
    orchestrator = LedgerOrchestrator(config)
    asyncio.run(orchestrator.attach(owner_session))
    return orchestrator
