"""The ``ued`` command line."""

from __future__ import annotations

import argparse
import sys
import time
from collections.abc import Iterable, Sequence
from datetime import datetime

from ueempire.chain import BlockData, Context
from ueempire.consensus import ConsensusError, InMemoryConsensusEngine
from ueempire.validator import ValidatorManager, ValidatorNode

VERSION = "dev"

_ROOT_LONG = """\
Underground Empire (UE) is a fully decentralized Layer 1 blockchain
designed for high scalability, security, and long-term adaptability.

The UE daemon provides a complete node implementation with advanced Proof of Stake
consensus, Byzantine Fault Tolerance finalization, and smart contract execution capabilities.

Key Features:
- Advanced PoS consensus with 28,846 UE minimum stake requirement
- BFT finalization with 67% threshold for block immutability
- High-performance smart contract execution environment
- Modular architecture for scalability and upgrades
- Enhanced security with custom slashing mechanisms"""

_START_LONG = """\
Start the Underground Empire blockchain node. This command initializes
the node, connects to the network, and begins participating in consensus.

The node will:
- Initialize the blockchain state
- Connect to peer nodes in the network
- Begin participating in block validation
- Start the consensus mechanism
- Enable smart contract execution"""

_VALIDATOR_LONG = """\
Manage validator operations for the Underground Empire network.

Validators are responsible for:
- Proposing and validating blocks
- Participating in consensus
- Maintaining network security
- Earning rewards for honest participation

Minimum requirements:
- 28,846 UE stake
- Reliable network connection
- Consistent uptime"""

_TREASURY_LONG = """\
Manage treasury operations including token transfers, balance queries,
and account management for the Underground Empire network."""

_GOVERNANCE_LONG = """\
Participate in the governance of the Underground Empire network.

Governance features include:
- Submitting proposals for protocol upgrades
- Voting on proposals
- Parameter change proposals
- Emergency proposals for critical issues"""

_START_MESSAGES = (
    "Starting Underground Empire node...",
    "Node initialization complete",
    "Connecting to network...",
    "Node is now running and participating in consensus",
    "Press Ctrl+C to stop the node",
)

_VERSION_FIELDS = (
    ("Consensus", "Advanced PoS with BFT Finalization"),
    ("Minimum Validator Stake", "28,846 UE"),
    ("Consensus Threshold", "67%"),
    ("Block Time", "5 seconds"),
    ("Epoch Duration", "100 blocks"),
)


def _rfc3339(moment: datetime | None) -> str:
    if moment is None:
        return ""
    text = moment.isoformat(timespec="seconds")
    return text[:-6] + "Z" if text.endswith("+00:00") else text


def _write_lines(lines: Iterable[str]) -> None:
    sys.stdout.write("".join(f"{line}\n" for line in lines))


def _version_lines(version: str) -> list[str]:
    fields = (("Version", version), *_VERSION_FIELDS)
    return ["Underground Empire (UE) Daemon", *(f"{key}: {value}" for key, value in fields)]


def run_demo(block_count: int = 200, delay: float = 2.0) -> list[BlockData]:
    """Simulate consensus over three validators; return the finalized blocks."""
    print("[Demo] Starting in-memory consensus demo with 3 validators...")
    manager = ValidatorManager()
    validators = [ValidatorNode(id=f"val{n}", stake_amount=30000) for n in (1, 2, 3)]
    for node in validators:
        manager.register_node(Context(), node)
    engine = InMemoryConsensusEngine(manager, validators)

    for index in range(block_count):
        print(f"\n[Demo] === Block {index + 1} ===")
        block = engine.propose_block()
        print(f"[Demo] Proposer: {block.proposer}")
        engine.pre_vote(block)
        engine.pre_commit(block)
        try:
            engine.finalize_block(block)
        except ConsensusError as err:
            print("[Demo] Finalization error:", err)
        else:
            print(f"[Demo] Block {block.height} finalized/mined!")
            print(f"[Demo] Timestamp: {_rfc3339(block.timestamp)}")
        print("[Demo] ----------------------")
        if index < block_count - 1:
            time.sleep(delay)
    print("[Demo] Consensus demo complete.")
    return list(engine.state.finalized_blocks)


def _cmd_start(args: argparse.Namespace) -> None:
    _write_lines(_START_MESSAGES)


def _cmd_version(args: argparse.Namespace) -> None:
    _write_lines(_version_lines(VERSION))


def _cmd_demo(args: argparse.Namespace) -> None:
    run_demo(args.blocks, args.delay)


def _build_parser() -> argparse.ArgumentParser:
    raw = argparse.RawDescriptionHelpFormatter
    parser = argparse.ArgumentParser(
        prog="ued",
        description=_ROOT_LONG,
        formatter_class=raw,
    )
    parser.add_argument("-v", "--version", action="version", version=f"ued version {VERSION}")
    parser.set_defaults(handler=lambda args: parser.print_help())
    commands = parser.add_subparsers(dest="command", metavar="command")

    start = commands.add_parser(
        "start", help="Start the Underground Empire node",
        description=_START_LONG, formatter_class=raw,
    )
    start.set_defaults(handler=_cmd_start)

    version = commands.add_parser("version", help="Display version information")
    version.set_defaults(handler=_cmd_version)

    groups = (
        ("validator", "Manage validator operations", _VALIDATOR_LONG),
        ("treasury", "Manage treasury operations", _TREASURY_LONG),
        ("governance", "Participate in network governance", _GOVERNANCE_LONG),
    )
    for name, short, long in groups:
        group = commands.add_parser(name, help=short, description=long, formatter_class=raw)
        group.set_defaults(handler=lambda args, group=group: group.print_help())

    demo = commands.add_parser(
        "demo-consensus",
        help="Run a simulated in-memory consensus round with multiple validators",
    )
    demo.add_argument("--blocks", type=int, default=200, help="number of blocks to simulate")
    demo.add_argument("--delay", type=float, default=2.0, help="seconds to wait between blocks")
    demo.set_defaults(handler=_cmd_demo)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command line and return the exit status."""
    args = _build_parser().parse_args(argv)
    args.handler(args)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())