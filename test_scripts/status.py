#!/usr/bin/env python3
"""
Sheltering Status Checker
Show node balance, next penalty and open challenges / transfers

Usage:
    python test_scripts/status.py [challenge_or_transfer_id]

Environment Variables:
    ATLAS_PRIVATE_KEY: Private key of the Atlas node (optional, read-only without it)
    ATLAS_ADDRESS: Address to inspect when no key is given
    SHELTERING_NETWORK: mainnet | testnet | local (default: testnet)
    RPC_URL: Override the network's RPC URL
    HEAD_CONTRACT_ADDRESS: Override the head contract address
"""

import asyncio
import os
import sys
from dotenv import load_dotenv

# Load .env file
load_dotenv()

# Import SDK
from sheltering_sdk import (
    ClientConfig,
    IneligibleOperationError,
    Network,
    ShelteringClient,
    ShelteringError,
    configure_logging,
    get_network_config,
)

ATLAS_PRIVATE_KEY = os.getenv("ATLAS_PRIVATE_KEY") or None
ATLAS_ADDRESS = os.getenv("ATLAS_ADDRESS") or None
NETWORK = Network(os.getenv("SHELTERING_NETWORK", "testnet"))


def format_amb(amount_wei: int) -> str:
    """Format AMB amount from wei (18 decimals)."""
    return f"{amount_wei / 1e18:.6f}"


async def main() -> None:
    item_id = sys.argv[1] if len(sys.argv) > 1 else None
    configure_logging(os.getenv("LOG_LEVEL", "WARNING"))

    config = ClientConfig(
        network=get_network_config(NETWORK, os.getenv("RPC_URL"), os.getenv("HEAD_CONTRACT_ADDRESS")),
        default_sender=ATLAS_ADDRESS,
        send_transactions=ATLAS_PRIVATE_KEY is not None,
    )
    client = await ShelteringClient.create(config, private_key=ATLAS_PRIVATE_KEY)

    print("Sheltering Status Check\n")
    print("=" * 43)
    print("NODE")
    print("=" * 43 + "\n")
    print(f"Network:           {config.network.name.value} ({config.network.rpc_url})")
    print(f"Contracts version: {await client.registry.contracts_version()}")

    if client.address:
        balance = await client.w3.eth.get_balance(client.address)
        print(f"Address:           {client.address}")
        print(f"  AMB:             {format_amb(balance)} AMB")
        try:
            penalty = await client.challenges.next_penalty(client.address)
            print(f"  Next penalty:    {format_amb(penalty)} AMB")
        except IneligibleOperationError:
            print("  Next penalty:    n/a (not onboarded)")
    print()

    print("=" * 43)
    print("OPEN CHALLENGES")
    print("=" * 43 + "\n")
    for listing in await client.challenges.list():
        print(f"  {listing.challenge_id}  shelterer={listing.shelterer_id}  block={listing.block_number}")
    print()

    print("=" * 43)
    print("PENDING TRANSFERS")
    print("=" * 43 + "\n")
    for listing in await client.transfers.list(pending_only=True):
        print(f"  {listing.transfer_id}  donor={listing.donor_id}  block={listing.block_number}")
    print()

    # If an id was provided, show its status under both state machines
    if item_id and client.address:
        print("=" * 43)
        print("DETAILS")
        print("=" * 43 + "\n")
        challenge = await client.challenges.status(item_id)
        transfer = await client.transfers.status(item_id)
        if challenge.is_in_progress:
            print(f"Challenge {item_id}")
            print(f"  Can resolve: {challenge.can_resolve}")
            print(f"  Timed out:   {challenge.is_timed_out}")
        elif transfer.is_in_progress:
            print(f"Transfer {item_id}")
            print(f"  Can resolve: {transfer.can_resolve}")
            print(f"  Timed out:   {transfer.is_timed_out}")
        else:
            print(f"{item_id} is not in progress")


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except ShelteringError as e:
        print(f"\nError: {e}")
        sys.exit(1)
