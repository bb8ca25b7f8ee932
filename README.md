# ueempire

`ueempire` is a small, self-contained proof-of-stake node. Everything runs in
memory, in a single process.

## What it provides

### Chain primitives (`ueempire.tx`)

- `Address` is a 20-byte address. `str()` gives `0x`-prefixed hex. It also has
  `to_bytes()` and `is_zero()`.
- `new_address(hex_str)` builds an address from hex text, with or without `0x`.
- `CoinAmount` holds an amount and a denomination. It supports:
  - `add` and `sub`, which reject mismatched denominations;
  - `sub`, which also rejects going negative;
  - `mul` and `div`, where dividing by zero gives zero;
  - `is_zero` and `is_positive`.
- `ue_coins(amount)` returns an amount in the `ue` denomination.
- `parse_coin_amount("100ue")` parses the text form of an amount.
- `Transaction` has:
  - `calculate_hash()`, which returns a `0x`-prefixed SHA-256 hex digest;
  - `validate()`, which rejects zero addresses, a zero amount, zero gas and a
    zero gas price;
  - `gas_cost()`.

### Chain parameters and records (`ueempire.chain`)

The module defines these constants:

- `MIN_VALIDATOR_STAKE` is 28846.
- `CONSENSUS_THRESHOLD` is 67 (a percentage).
- `EPOCH_DURATION` is 100 blocks.
- `BLOCK_TIME` is 5.
- There are also gas and chain-id defaults.

It also defines these helpers:

- `is_validator_eligible`
- `calculate_validator_reward`
- `is_consensus_reached`
- `calculate_epoch_number`
- `is_epoch_boundary`
- `calculate_next_epoch_height`

`Context` is an immutable record of height, timestamp and chain id. It has
`with_height` and `with_timestamp`, which return changed copies.

The data classes are `Vote`, `VoteType`, `ConsensusData`, `ConsensusState`,
`FinalityData` and `BlockData`. `UEError` is an exception that carries a code.

### Validators (`ueempire.validator`)

`ValidatorManager` keeps validators in a dictionary. Its methods are:

- `register_node`: requires the minimum stake and a new id. It sets the status
  to `ValidatorStatus.ACTIVE`.
- `deregister_node`: sets the status to inactive.
- `get_validator` and `get_active_validators`: return copies.
- `update_validator`.
- `calculate_rewards`: returns the validator's stake-weighted share of a block
  reward of 1000. It returns 0 for an unknown id.
- `slash_node`: applies the penalty described below.
- `total_stake` and `validator_count`: count only active validators.

`slash_node` removes part of the stake, depending on the `SlashReason`:

| Reason | Stake removed |
| --- | --- |
| double signing | 1/2 |
| equivocation | 1/2 |
| invalid block | 1/4 |
| downtime | 1/10 |
| any other reason | 1/10 |

A slashed validator whose remaining stake falls below the minimum is left with
zero.

### Consensus (`ueempire.consensus`)

`InMemoryConsensusEngine` picks proposers round-robin. A round goes like this:

1. `propose_block()` returns a block at the current height. The block is named
   `block_<height>` and carries one sample transaction.
2. `pre_vote(block)` records a vote from every validator.
3. `pre_commit(block)` records a pre-commit from every validator.
4. `finalize_block(block)` marks the block finalized once at least 67% of
   validators have pre-committed to it. It then moves to the next height and
   the next proposer.

The engine's progress is available as `engine.state`, an `EngineState`. Each
step prints a line describing what it did.

### Application shell (`ueempire.node`)

`UEApp(version)` has:

- `initialize_chain()`, `start()` and `stop()`. Starting twice raises
  `RuntimeError`, and so does stopping when not running.
- The properties `version`, `uptime`, `is_running` and `chain_initialized`.

The module also defines:

- the governance types `GovernanceProposal`, `ProposalStatus` and `VoteOption`;
- the `TreasuryManager` and `GovernanceSystem` protocols.

## Installation

```
pip install .
```

## Command line

```
ued version
ued start
ued demo-consensus [--blocks N] [--delay SECONDS]
```

- `ued version` prints the version and the network parameters. `ued --version`
  prints a one-line version.
- `ued start` prints the node start-up messages.
- `ued demo-consensus` registers three validators, each with a stake of 30000.
  It then proposes, votes on and finalizes blocks, printing every step.
  - `--blocks` sets the number of blocks; the default is 200.
  - `--delay` sets the pause between blocks; the default is 2 seconds.
- `ued validator`, `ued treasury` and `ued governance` print their help text.

## Library use

```python
from ueempire.chain import Context
from ueempire.validator import ValidatorManager, ValidatorNode
from ueempire.consensus import InMemoryConsensusEngine

ctx = Context()
manager = ValidatorManager()
validators = [ValidatorNode(id=f"val{i}", stake_amount=30000) for i in (1, 2, 3)]
for node in validators:
    manager.register_node(ctx, node)

engine = InMemoryConsensusEngine(manager, validators)
block = engine.propose_block()
engine.pre_vote(block)
engine.pre_commit(block)
engine.finalize_block(block)
assert block.consensus.finalized
```

`ueempire.cli.run_demo(block_count, delay)` runs the same simulation as
`ued demo-consensus`. It returns the finalized blocks.

Errors are raised as exceptions:

- `ValidatorError` covers unknown validators, duplicate ids and insufficient
  stake.
- `ConsensusError` covers a round with no validators or too few pre-commits.
- `ValueError` covers malformed addresses, coin amounts and transactions.

## What it does not do

- There is no networking and no peer discovery. State is not persisted.
  `ued start` only prints start-up messages; it does not run a node.
- `TreasuryManager` and `GovernanceSystem` are interfaces only. The package has
  no implementation of balances, transfers, proposals or voting.
- The `validator`, `treasury` and `governance` commands have no subcommands.

## Tests

```
pip install .[test]
pytest
```