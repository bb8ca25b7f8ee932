"""The node application: lifecycle plus treasury and governance interfaces."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Protocol, runtime_checkable

from ueempire.chain import Context
from ueempire.tx import Address, CoinAmount


class ProposalStatus(str, Enum):
    ACTIVE = "active"
    PASSED = "passed"
    REJECTED = "rejected"
    EXECUTED = "executed"


class VoteOption(str, Enum):
    YES = "yes"
    NO = "no"
    ABSTAIN = "abstain"


@dataclass
class GovernanceProposal:
    """A proposal put to a network vote."""

    id: int
    title: str
    description: str = ""
    proposer: Address = field(default_factory=Address)
    status: ProposalStatus = ProposalStatus.ACTIVE
    votes: dict[VoteOption, int] = field(default_factory=dict)
    created_at: datetime | None = None
    end_time: datetime | None = None


@runtime_checkable
class TreasuryManager(Protocol):
    """Balance queries and token movements."""

    def get_balance(self, ctx: Context, address: Address) -> CoinAmount:
        """Return the balance held at an address."""

    def transfer(
        self, ctx: Context, sender: Address, recipient: Address, amount: CoinAmount
    ) -> None:
        """Move coins between two addresses."""

    def mint_tokens(self, ctx: Context, recipient: Address, amount: CoinAmount) -> None:
        """Create new coins at an address."""

    def burn_tokens(self, ctx: Context, sender: Address, amount: CoinAmount) -> None:
        """Destroy coins held at an address."""


@runtime_checkable
class GovernanceSystem(Protocol):
    """Proposal submission, voting and execution."""

    def submit_proposal(self, ctx: Context, proposal: GovernanceProposal) -> None:
        """Record a new proposal."""

    def vote(
        self, ctx: Context, proposal_id: int, voter: Address, option: VoteOption
    ) -> None:
        """Cast a vote on a proposal."""

    def get_proposal(self, ctx: Context, proposal_id: int) -> GovernanceProposal:
        """Return the proposal with the given id."""

    def execute_proposal(self, ctx: Context, proposal_id: int) -> None:
        """Carry out a passed proposal."""


class UEApp:
    """The node application and its running state."""

    def __init__(self, version: str) -> None:
        self._version = version
        self.start_time = datetime.now()
        self._started = time.monotonic()
        self._running = False
        self._chain_initialized = False

    @property
    def version(self) -> str:
        return self._version

    @property
    def uptime(self) -> timedelta:
        return timedelta(seconds=time.monotonic() - self._started)

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def chain_initialized(self) -> bool:
        return self._chain_initialized

    def initialize_chain(self) -> None:
        """Prepare the chain state and mark it initialized."""
        print("Initializing Underground Empire blockchain...")
        self._chain_initialized = True
        print("Blockchain initialization complete")

    def start(self) -> None:
        """Start the application; raises RuntimeError if it is already running."""
        if self._running:
            raise RuntimeError("application is already running")
        print("Starting Underground Empire application...")
        self._running = True
        print("Application started successfully")

    def stop(self) -> None:
        """Stop the application; raises RuntimeError if it is not running."""
        if not self._running:
            raise RuntimeError("application is not running")
        print("Stopping Underground Empire application...")
        self._running = False
        print("Application stopped successfully")