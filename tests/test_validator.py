import pytest

from ueempire.chain import MIN_VALIDATOR_STAKE, Context
from ueempire.validator import (
    BLOCK_REWARD,
    SlashReason,
    ValidatorError,
    ValidatorManager,
    ValidatorNode,
    ValidatorStatus,
)

CTX = Context()


@pytest.fixture
def manager():
    mgr = ValidatorManager()
    for node_id in ("val1", "val2", "val3"):
        mgr.register_node(CTX, ValidatorNode(id=node_id, stake_amount=30000))
    return mgr


def test_register_rejects_low_stake():
    mgr = ValidatorManager()
    with pytest.raises(ValidatorError, match="insufficient stake"):
        mgr.register_node(CTX, ValidatorNode(id="x", stake_amount=MIN_VALIDATOR_STAKE - 1))
    assert mgr.validator_count(CTX) == 0


def test_register_accepts_exact_minimum():
    mgr = ValidatorManager()
    mgr.register_node(CTX, ValidatorNode(id="x", stake_amount=MIN_VALIDATOR_STAKE))
    assert mgr.get_validator(CTX, "x").stake_amount == MIN_VALIDATOR_STAKE


def test_register_rejects_duplicate(manager):
    with pytest.raises(ValidatorError, match="already exists"):
        manager.register_node(CTX, ValidatorNode(id="val1", stake_amount=40000))


def test_register_sets_status_and_timestamps_without_touching_input():
    mgr = ValidatorManager()
    node = ValidatorNode(id="v", stake_amount=30000)
    mgr.register_node(CTX, node)
    stored = mgr.get_validator(CTX, "v")
    assert stored.status == ValidatorStatus.ACTIVE
    assert stored.created_at is not None and stored.updated_at is not None
    assert node.status is None


def test_deregister_makes_inactive(manager):
    manager.deregister_node(CTX, "val2")
    assert manager.get_validator(CTX, "val2").status == ValidatorStatus.INACTIVE
    assert [v.id for v in manager.get_active_validators(CTX)] == ["val1", "val3"]
    assert manager.validator_count(CTX) == 2


def test_deregister_unknown_raises(manager):
    with pytest.raises(ValidatorError, match="not found"):
        manager.deregister_node(CTX, "nobody")


def test_get_unknown_raises(manager):
    with pytest.raises(ValidatorError, match="validator with ID ghost not found"):
        manager.get_validator(CTX, "ghost")


def test_update_validator(manager):
    node = manager.get_validator(CTX, "val1")
    node.description = "main node"
    manager.update_validator(CTX, node)
    assert manager.get_validator(CTX, "val1").description == "main node"


def test_update_unknown_raises(manager):
    with pytest.raises(ValidatorError):
        manager.update_validator(CTX, ValidatorNode(id="ghost", stake_amount=30000))


def test_returned_copy_does_not_change_store(manager):
    node = manager.get_validator(CTX, "val1")
    node.stake_amount = 1
    assert manager.get_validator(CTX, "val1").stake_amount == 30000


def test_rewards_equal_for_equal_stakes(manager):
    rewards = [manager.calculate_rewards(CTX, v) for v in ("val1", "val2", "val3")]
    assert len(set(rewards)) == 1
    assert 0 < sum(rewards) <= BLOCK_REWARD


def test_rewards_single_validator_gets_whole_reward():
    mgr = ValidatorManager()
    mgr.register_node(CTX, ValidatorNode(id="solo", stake_amount=50000))
    assert mgr.calculate_rewards(CTX, "solo") == BLOCK_REWARD


def test_rewards_unknown_is_zero(manager):
    assert manager.calculate_rewards(CTX, "ghost") == 0


def test_slash_double_signing_halves():
    mgr = ValidatorManager()
    mgr.register_node(CTX, ValidatorNode(id="v", stake_amount=60000))
    mgr.slash_node(CTX, "v", SlashReason.DOUBLE_SIGNING)
    node = mgr.get_validator(CTX, "v")
    assert node.stake_amount == 30000
    assert node.status == ValidatorStatus.SLASHED


def test_slash_invalid_block_quarter():
    mgr = ValidatorManager()
    mgr.register_node(CTX, ValidatorNode(id="v", stake_amount=40000))
    mgr.slash_node(CTX, "v", SlashReason.INVALID_BLOCK)
    assert mgr.get_validator(CTX, "v").stake_amount == 30000


def test_slash_below_minimum_drops_to_zero(manager):
    manager.slash_node(CTX, "val1", SlashReason.DOWNTIME)
    assert manager.get_validator(CTX, "val1").stake_amount == 0


def test_equivocation_matches_double_signing():
    mgr = ValidatorManager()
    mgr.register_node(CTX, ValidatorNode(id="a", stake_amount=80000))
    mgr.register_node(CTX, ValidatorNode(id="b", stake_amount=80000))
    mgr.slash_node(CTX, "a", SlashReason.DOUBLE_SIGNING)
    mgr.slash_node(CTX, "b", SlashReason.EQUIVOCATION)
    assert mgr.get_validator(CTX, "a").stake_amount == mgr.get_validator(CTX, "b").stake_amount


def test_unknown_reason_matches_downtime():
    mgr = ValidatorManager()
    mgr.register_node(CTX, ValidatorNode(id="a", stake_amount=90000))
    mgr.register_node(CTX, ValidatorNode(id="b", stake_amount=90000))
    mgr.slash_node(CTX, "a", SlashReason.DOWNTIME)
    mgr.slash_node(CTX, "b", "something_else")
    assert mgr.get_validator(CTX, "a").stake_amount == mgr.get_validator(CTX, "b").stake_amount
    assert mgr.get_validator(CTX, "b").stake_amount < 90000


def test_slash_unknown_raises(manager):
    with pytest.raises(ValidatorError):
        manager.slash_node(CTX, "ghost", SlashReason.DOWNTIME)


def test_slashed_validator_not_active(manager):
    manager.slash_node(CTX, "val3", SlashReason.DOUBLE_SIGNING)
    assert "val3" not in [v.id for v in manager.get_active_validators(CTX)]


def test_total_stake_counts_only_active():
    mgr = ValidatorManager()
    stakes = {"a": 30000, "b": 40000, "c": 50000}
    for node_id, stake in stakes.items():
        mgr.register_node(CTX, ValidatorNode(id=node_id, stake_amount=stake))
    assert mgr.total_stake(CTX) == sum(stakes.values())
    mgr.deregister_node(CTX, "b")
    assert mgr.total_stake(CTX) == stakes["a"] + stakes["c"]


def test_empty_manager():
    mgr = ValidatorManager()
    assert mgr.total_stake(CTX) == 0
    assert mgr.get_active_validators(CTX) == []