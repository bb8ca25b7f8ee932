"""A single-process consensus engine with no networking or persistence."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from datetime import datetime

from ueempire.chain import CONSENSUS_THRESHOLD, BlockData, Vote, VoteType
from ueempire.tx import Address, Transaction, ue_coins
from ueempire.validator import ValidatorManager, ValidatorNode


class ConsensusError(Exception):
    """Raised when a consensus step cannot be completed."""


@dataclass
class EngineState:
    """The engine's in-memory consensus progress."""

    current_height: int = 1
    current_round: int = 0
    validators: list[ValidatorNode] = field(default_factory=list)
    proposer_index: int = 0
    votes: list[Vote] = field(default_factory=list)
    finalized_blocks: list[BlockData] = field(default_factory=list)


class InMemoryConsensusEngine:
    """Round-robin proposer selection with pre-vote, pre-commit and finality."""

    def __init__(
        self,
        validator_manager: ValidatorManager,
        initial_validators: list[ValidatorNode],
    ) -> None:
        self.state = EngineState(validators=list(initial_validators))
        self._validator_manager = validator_manager
        self._lock = threading.Lock()

    def propose_block(self) -> BlockData:
        """Create a block at the current height from the next proposer."""
        with self._lock:
            if not self.state.validators:
                raise ConsensusError("no validators available")
            proposer = self.state.validators[self.state.proposer_index]
            tx = Transaction(
                sender=Address(),
                recipient=Address(),
                amount=ue_coins(1),
                gas=21000,
                gas_price=1,
                nonce=1,
                hash="tx1",
                timestamp=int(time.time()),
            )
            height = self.state.current_height
            block = BlockData(
                height=height,
                hash=f"block_{height}",
                timestamp=datetime.now().astimezone(),
                proposer=proposer.id,
                transactions=[tx],
            )
            print(f"[Consensus] Proposer for block {height}: {proposer.id}")
            return block

    def pre_vote(self, block: BlockData) -> None:
        """Record a pre-vote from every validator."""
        self._vote_all(block, VoteType.PRE_VOTE, "PreVote")

    def pre_commit(self, block: BlockData) -> None:
        """Record a pre-commit from every validator."""
        self._vote_all(block, VoteType.PRE_COMMIT, "PreCommit")

    def finalize_block(self, block: BlockData) -> None:
        """Finalize the block if enough validators pre-committed to it."""
        with self._lock:
            total = len(self.state.validators)
            pre_commits = sum(
                1
                for vote in self.state.votes
                if vote.block_hash == block.hash and vote.vote_type == VoteType.PRE_COMMIT
            )
            if total == 0:
                raise ConsensusError("no validators available")
            if pre_commits * 100 // total < CONSENSUS_THRESHOLD:
                raise ConsensusError(
                    f"not enough pre-commits to finalize block: {pre_commits}/{total}"
                )
            block.consensus.finalized = True
            block.consensus.finality_time = datetime.now().astimezone()
            self.state.finalized_blocks.append(block)
            print(
                f"[Consensus] Block {block.height} finalized with "
                f"{pre_commits}/{total} pre-commits (>=67%)"
            )
            self.state.current_height += 1
            self.state.proposer_index = (self.state.proposer_index + 1) % total
            self.state.votes = []

    def _vote_all(self, block: BlockData, vote_type: VoteType, label: str) -> None:
        with self._lock:
            for validator in self.state.validators:
                self.state.votes.append(
                    Vote(
                        validator_id=validator.id,
                        block_hash=block.hash,
                        timestamp=datetime.now().astimezone(),
                        vote_type=vote_type,
                    )
                )
                print(f"[Consensus] {label} by {validator.id} for block {block.hash}")