"""Validator registration, rewards and slashing."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from ueempire.chain import (
    MIN_VALIDATOR_STAKE,
    Context,
    calculate_validator_reward,
    is_validator_eligible,
)
from ueempire.tx import Address

BLOCK_REWARD = 1000


class ValidatorError(Exception):
    """Raised when a validator operation cannot be carried out."""


class ValidatorStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    SLASHED = "slashed"
    JAILED = "jailed"


class SlashReason(str, Enum):
    DOUBLE_SIGNING = "double_signing"
    DOWNTIME = "downtime"
    INVALID_BLOCK = "invalid_block"
    EQUIVOCATION = "equivocation"


# Divisor applied to the stake for each reason; anything else loses a tenth.
_SLASH_DIVISORS = {
    SlashReason.DOUBLE_SIGNING: 2,
    SlashReason.DOWNTIME: 10,
    SlashReason.INVALID_BLOCK: 4,
    SlashReason.EQUIVOCATION: 2,
}
_DEFAULT_SLASH_DIVISOR = 10


@dataclass
class SlashRecord:
    """A record of a penalty applied to a validator."""

    validator_id: str
    reason: SlashReason
    amount: int
    timestamp: datetime
    height: int


@dataclass
class ValidatorNode:
    """A validator taking part in the network."""

    id: str
    address: Address = field(default_factory=Address)
    stake_amount: int = 0
    status: ValidatorStatus | None = None
    commission: int = 0  # basis points, 0-10000
    created_at: datetime | None = None
    updated_at: datetime | None = None
    description: str = ""
    website: str = ""


def _slash_amount(stake_amount: int, reason: SlashReason | str) -> int:
    try:
        divisor = _SLASH_DIVISORS.get(SlashReason(reason), _DEFAULT_SLASH_DIVISOR)
    except ValueError:
        divisor = _DEFAULT_SLASH_DIVISOR
    return stake_amount // divisor


class ValidatorManager:
    """Keeps the set of validators in memory."""

    def __init__(self) -> None:
        self._validators: dict[str, ValidatorNode] = {}

    def register_node(self, ctx: Context, node: ValidatorNode) -> None:
        """Register a new validator, which becomes active."""
        if not is_validator_eligible(node.stake_amount):
            raise ValidatorError(
                f"insufficient stake: minimum required is {MIN_VALIDATOR_STAKE} UE, "
                f"got {node.stake_amount}"
            )
        if node.id in self._validators:
            raise ValidatorError(f"validator with ID {node.id} already exists")
        now = datetime.now()
        self._validators[node.id] = dataclasses.replace(
            node, created_at=now, updated_at=now, status=ValidatorStatus.ACTIVE
        )

    def deregister_node(self, ctx: Context, node_id: str) -> None:
        """Mark a validator inactive."""
        stored = self._stored(node_id)
        stored.status = ValidatorStatus.INACTIVE
        stored.updated_at = datetime.now()

    def get_active_validators(self, ctx: Context) -> list[ValidatorNode]:
        """Return copies of all active validators."""
        return [
            dataclasses.replace(v)
            for v in self._validators.values()
            if v.status == ValidatorStatus.ACTIVE
        ]

    def get_validator(self, ctx: Context, node_id: str) -> ValidatorNode:
        """Return a copy of the validator with the given id."""
        return dataclasses.replace(self._stored(node_id))

    def update_validator(self, ctx: Context, node: ValidatorNode) -> None:
        """Replace the stored record of an existing validator."""
        if node.id not in self._validators:
            raise ValidatorError(f"validator with ID {node.id} not found")
        self._validators[node.id] = dataclasses.replace(node, updated_at=datetime.now())

    def calculate_rewards(self, ctx: Context, node_id: str) -> int:
        """Return the validator's stake-weighted share of the block reward, or 0."""
        try:
            node = self._stored(node_id)
        except ValidatorError:
            return 0
        return calculate_validator_reward(
            node.stake_amount, self.total_stake(ctx), BLOCK_REWARD
        )

    def slash_node(self, ctx: Context, node_id: str, reason: SlashReason | str) -> None:
        """Penalise a validator; a stake left below the minimum drops to zero."""
        stored = self._stored(node_id)
        stored.stake_amount -= _slash_amount(stored.stake_amount, reason)
        stored.status = ValidatorStatus.SLASHED
        stored.updated_at = datetime.now()
        if stored.stake_amount < MIN_VALIDATOR_STAKE:
            stored.stake_amount = 0

    def total_stake(self, ctx: Context) -> int:
        """Return the combined stake of all active validators."""
        return sum(v.stake_amount for v in self.get_active_validators(ctx))

    def validator_count(self, ctx: Context) -> int:
        """Return the number of active validators."""
        return len(self.get_active_validators(ctx))

    def _stored(self, node_id: str) -> ValidatorNode:
        try:
            return self._validators[node_id]
        except KeyError:
            raise ValidatorError(f"validator with ID {node_id} not found") from None