#!/usr/bin/env python3
"""
Unified CLI for the Trie Proof Toolkit.

Examples:
  - Storage proof (TOML on stdout)
    trie-proofs storage-proof --address 0x... --key 0x... --max-depth 8 --block-number 14194126

  - State proof saved as JSON
    trie-proofs state-proof --address 0x... --max-depth 10 --format json --output state.json

  - Verify a saved JSON proof
    trie-proofs verify --input output/state.json

The RPC URL comes from --rpc-url, or from the variable of the --chain-id
chain (ETHEREUM_MAINNET_RPC_URL, ETHEREUM_SEPOLIA_RPC_URL or
ETHEREUM_HOLESKY_RPC_URL; a .env file is read as well). verify
--strict-padding rejects proofs whose padding slots are not all zero.
"""

import argparse
import json
import sys
from typing import List, Optional

from trie_proof_toolkit.commands.helpers import handle_command_error
from trie_proof_toolkit.commands.validation import (
    validate_block_number,
    validate_eth_address,
    validate_max_depth,
    validate_storage_key,
)
from trie_proof_toolkit.proofs import TrieProofManager
from trie_proof_toolkit.proofs.serialization import (
    bundle_from_dict,
    bundle_to_dict,
    bundle_to_toml,
)
from trie_proof_toolkit.proofs.types import ProofBundle
from trie_proof_toolkit.shared.constants import GlobalConstants
from trie_proof_toolkit.shared.results import ErrorSeverity
from trie_proof_toolkit.utils.formatters import (
    console,
    create_proof_table,
    format_hex_preview,
    load_json,
    save_json_output,
    save_text_output,
    status_console,
)


def _make_manager(args: argparse.Namespace) -> TrieProofManager:
    return TrieProofManager(chain_id=args.chain_id, rpc_url=args.rpc_url)


def _verify_and_report(
    bundle: ProofBundle, strict_padding: bool = False
) -> bool:
    result = TrieProofManager.verify_bundle(bundle, strict_padding)
    if result.has_warnings():
        for error in result.errors:
            if error.severity is ErrorSeverity.WARNING:
                status_console.print(f"[yellow]⚠ {error.message}[/yellow]")

    verified = result.unwrap()
    _print_summary(bundle, verified)
    return verified


def _print_summary(bundle: ProofBundle, verified: bool) -> None:
    proof = bundle["proof"]
    table = create_proof_table("Trie proof")
    table.add_row("Block", str(bundle["block_number"]))
    table.add_row("Address", bundle["address"])
    if bundle["key"]:
        table.add_row("Key", bundle["key"])
    table.add_row("Root", format_hex_preview(bundle["root"], 32))
    table.add_row("Depth", f"{proof.depth}/{proof.max_depth}")
    table.add_row("Value", format_hex_preview(proof.value.lstrip(b"\0"), 16))
    table.add_row(
        "Verified",
        "[green]✓ yes[/green]" if verified else "[red]✗ no[/red]",
    )
    status_console.print(table)


def _emit_bundle(
    args: argparse.Namespace,
    bundle: ProofBundle,
    default_root_name: str,
    default_proof_name: str,
) -> None:
    if args.format == "json":
        data = bundle_to_dict(bundle)
        if args.output:
            save_json_output(data, args.output)
        else:
            console.out(json.dumps(data, indent=2), highlight=False)
    else:
        text = bundle_to_toml(
            bundle,
            args.root_name or default_root_name,
            args.proof_name or default_proof_name,
        )
        if args.output:
            save_text_output(text, args.output)
        else:
            console.out(text, highlight=False)

    # The proof is written out even when it turns out malformed
    _verify_and_report(bundle)


def cmd_storage_proof(args: argparse.Namespace) -> None:
    address = validate_eth_address(args.address, "address")
    key = validate_storage_key(args.key)
    max_depth = validate_max_depth(args.max_depth)
    block_number = validate_block_number(args.block_number)

    manager = _make_manager(args)
    bundle = manager.get_storage_proof(
        address, key, max_depth, block_number
    ).unwrap()

    _emit_bundle(
        args,
        bundle,
        GlobalConstants.DEFAULT_STORAGE_ROOT_NAME,
        GlobalConstants.DEFAULT_STORAGE_PROOF_NAME,
    )


def cmd_state_proof(args: argparse.Namespace) -> None:
    address = validate_eth_address(args.address, "address")
    max_depth = validate_max_depth(args.max_depth)
    block_number = validate_block_number(args.block_number)

    manager = _make_manager(args)
    bundle = manager.get_state_proof(
        address, max_depth, block_number
    ).unwrap()

    _emit_bundle(
        args,
        bundle,
        GlobalConstants.DEFAULT_STATE_ROOT_NAME,
        GlobalConstants.DEFAULT_STATE_PROOF_NAME,
    )


def cmd_verify(args: argparse.Namespace) -> None:
    bundle = bundle_from_dict(load_json(args.input))
    if not _verify_and_report(bundle, args.strict_padding):
        sys.exit(1)


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--rpc-url", "-r", type=str, help="URL of an Ethereum JSON-RPC node"
    )
    common.add_argument(
        "--chain-id",
        "-c",
        type=int,
        default=GlobalConstants.MAINNET_CHAIN_ID,
        help="Chain whose RPC URL is read from the environment",
    )
    common.add_argument(
        "--max-depth", "-m", type=int, help="Maximum allowable proof depth"
    )
    common.add_argument(
        "--block-number",
        "-b",
        type=int,
        help="Block number (latest if omitted)",
    )
    common.add_argument(
        "--root-name", type=str, help="Name of the trie root in TOML output"
    )
    common.add_argument(
        "--proof-name", type=str, help="Name of the proof in TOML output"
    )
    common.add_argument(
        "--format", choices=["toml", "json"], default="toml"
    )
    common.add_argument("--output", type=str, help="Output filename")

    parser = argparse.ArgumentParser(
        prog="trie-proofs",
        description="Fetch, pad and verify Ethereum trie proofs",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    # storage-proof
    p_sp = sub.add_parser(
        "storage-proof", parents=[common], help="Fetch storage proof"
    )
    p_sp.add_argument("--address", "-a", type=str, required=True)
    p_sp.add_argument("--key", "-k", type=str, required=True)
    p_sp.set_defaults(func=cmd_storage_proof)

    # state-proof
    p_st = sub.add_parser(
        "state-proof", parents=[common], help="Fetch state proof"
    )
    p_st.add_argument("--address", "-a", type=str, required=True)
    p_st.set_defaults(func=cmd_state_proof)

    # verify
    p_v = sub.add_parser("verify", help="Verify a proof saved as JSON")
    p_v.add_argument("--input", "-i", type=str, required=True)
    p_v.add_argument(
        "--strict-padding",
        action="store_true",
        help="Reject proofs whose padding slots are not all zero",
    )
    p_v.set_defaults(func=cmd_verify)

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        args.func(args)
    except Exception as e:
        handle_command_error(e)


if __name__ == "__main__":
    main()
