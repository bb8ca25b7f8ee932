"""Chain context, protocol parameters, consensus records and blocks."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from ueempire.tx import Transaction

MIN_VALIDATOR_STAKE = 28846
CONSENSUS_THRESHOLD = 67
BLOCK_TIME = 5
EPOCH_DURATION = 100
DEFAULT_GAS_LIMIT = 200000
DEFAULT_GAS_PRICE = 1000000000
DEFAULT_CHAIN_ID = "underground-empire-1"
ADDRESS_LENGTH = 20
HASH_LENGTH = 32

_U64_MASK = (1 << 64) - 1


class UEError(Exception):
    """An error carrying a machine-readable code."""

    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class Context:
    """The chain position an operation runs at."""

    height: int = 0
    timestamp: datetime | None = None
    chain_id: str = ""

    def with_height(self, height: int) -> Context:
        return dataclasses.replace(self, height=height)

    def with_timestamp(self, timestamp: datetime) -> Context:
        return dataclasses.replace(self, timestamp=timestamp)


def is_validator_eligible(stake_amount: int) -> bool:
    """Return True if the stake meets the validator minimum."""
    return stake_amount >= MIN_VALIDATOR_STAKE


def calculate_validator_reward(stake_amount: int, total_stake: int, block_reward: int) -> int:
    """Return the share of the block reward proportional to the stake."""
    if total_stake == 0:
        return 0
    return ((stake_amount * block_reward) & _U64_MASK) // total_stake


def is_consensus_reached(votes: int, total_validators: int) -> bool:
    """Return True if the votes reach the consensus threshold percentage."""
    if total_validators == 0:
        return False
    percentage = ((votes * 100) & _U64_MASK) // total_validators
    return percentage >= CONSENSUS_THRESHOLD


def calculate_epoch_number(block_height: int) -> int:
    return block_height // EPOCH_DURATION


def is_epoch_boundary(block_height: int) -> bool:
    return block_height % EPOCH_DURATION == 0


def calculate_next_epoch_height(current_height: int) -> int:
    return (calculate_epoch_number(current_height) + 1) * EPOCH_DURATION


class VoteType(str, Enum):
    PRE_VOTE = "pre_vote"
    PRE_COMMIT = "pre_commit"


@dataclass
class Vote:
    """A validator's vote for a block."""

    validator_id: str
    block_hash: str
    timestamp: datetime
    vote_type: VoteType


@dataclass
class ConsensusData:
    """Consensus metadata attached to a block."""

    pre_votes: list[Vote] = field(default_factory=list)
    pre_commits: list[Vote] = field(default_factory=list)
    finalized: bool = False
    finality_time: datetime | None = None


@dataclass
class ConsensusState:
    """A snapshot of consensus progress."""

    current_height: int = 0
    current_block_hash: str = ""
    validators: list[str] = field(default_factory=list)
    consensus_round: int = 0
    votes: list[Vote] = field(default_factory=list)


@dataclass
class FinalityData:
    """The finality record of a block."""

    block_height: int = 0
    block_hash: str = ""
    finalized: bool = False
    finality_votes: list[Vote] = field(default_factory=list)
    finality_time: datetime | None = None


@dataclass
class BlockData:
    """A block and its consensus metadata."""

    height: int = 0
    hash: str = ""
    timestamp: datetime | None = None
    proposer: str = ""
    transactions: list[Transaction] = field(default_factory=list)
    consensus: ConsensusData = field(default_factory=ConsensusData)