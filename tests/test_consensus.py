from datetime import datetime

import pytest

from ueempire.chain import BlockData, Context, Vote, VoteType
from ueempire.consensus import ConsensusError, InMemoryConsensusEngine
from ueempire.validator import ValidatorManager, ValidatorNode

IDS = ["val1", "val2", "val3"]


@pytest.fixture
def engine():
    mgr = ValidatorManager()
    nodes = [ValidatorNode(id=i, stake_amount=30000) for i in IDS]
    for node in nodes:
        mgr.register_node(Context(), node)
    return InMemoryConsensusEngine(mgr, nodes)


def _round(engine):
    block = engine.propose_block()
    engine.pre_vote(block)
    engine.pre_commit(block)
    engine.finalize_block(block)
    return block


def test_initial_state(engine):
    assert engine.state.current_height == 1
    assert engine.state.proposer_index == 0
    assert engine.state.votes == []
    assert engine.state.finalized_blocks == []


def test_propose_block_contents(engine):
    block = engine.propose_block()
    assert block.height == 1
    assert block.hash == "block_1"
    assert block.proposer == "val1"
    assert len(block.transactions) == 1
    tx = block.transactions[0]
    assert tx.hash == "tx1"
    assert tx.gas == 21000
    assert str(tx.amount) == "1ue"
    assert block.consensus.finalized is False


def test_propose_prints_proposer(engine, capsys):
    engine.propose_block()
    assert "[Consensus] Proposer for block 1: val1" in capsys.readouterr().out


def test_propose_without_validators():
    engine = InMemoryConsensusEngine(ValidatorManager(), [])
    with pytest.raises(ConsensusError, match="no validators available"):
        engine.propose_block()


def test_votes_recorded(engine):
    block = engine.propose_block()
    engine.pre_vote(block)
    assert [v.validator_id for v in engine.state.votes] == IDS
    assert {v.vote_type for v in engine.state.votes} == {VoteType.PRE_VOTE}
    engine.pre_commit(block)
    assert len(engine.state.votes) == 2 * len(IDS)


def test_finalize_without_precommits_fails(engine):
    block = engine.propose_block()
    engine.pre_vote(block)
    with pytest.raises(ConsensusError, match="not enough pre-commits"):
        engine.finalize_block(block)
    assert engine.state.current_height == 1
    assert block.consensus.finalized is False


def test_finalize_advances_state(engine):
    block = _round(engine)
    assert block.consensus.finalized is True
    assert block.consensus.finality_time is not None
    assert engine.state.current_height == 2
    assert engine.state.proposer_index == 1
    assert engine.state.votes == []
    assert engine.state.finalized_blocks == [block]


def test_round_robin_proposers(engine):
    proposers = [_round(engine).proposer for _ in range(4)]
    assert proposers == IDS + ["val1"]
    assert [b.height for b in engine.state.finalized_blocks] == [1, 2, 3, 4]


def test_two_of_three_is_below_threshold(engine):
    block = engine.propose_block()
    now = datetime.now()
    engine.state.votes = [
        Vote(vid, block.hash, now, VoteType.PRE_COMMIT) for vid in IDS[:2]
    ]
    with pytest.raises(ConsensusError, match="2/3"):
        engine.finalize_block(block)


def test_precommits_for_other_block_ignored(engine):
    block = engine.propose_block()
    other = BlockData(height=9, hash="other")
    engine.pre_commit(other)
    with pytest.raises(ConsensusError):
        engine.finalize_block(block)


def test_finalize_with_no_validators():
    engine = InMemoryConsensusEngine(ValidatorManager(), [])
    with pytest.raises(ConsensusError, match="no validators available"):
        engine.finalize_block(BlockData(height=1, hash="block_1"))