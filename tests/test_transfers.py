import pytest
from web3 import Web3

from sheltering_sdk.errors import InvalidArgumentError
from sheltering_sdk.models import TransferListing
from sheltering_sdk.submitter import TransactionSubmitter
from sheltering_sdk.transfers import TransferActions

from .conftest import BUNDLE_ID, SENDER, SHELTERER, TRANSFER_ID, TRANSFERS, TRANSFERS_EMITTER, log

OTHER_BUNDLE = "0x" + "22" * 32
DONOR = Web3.to_checksum_address(SENDER)


def started(transfer_id, bundle_id, block, index=0):
    return log(
        {
            "transferId": bytes.fromhex(transfer_id[2:]),
            "donorId": SENDER,
            "bundleId": bytes.fromhex(bundle_id[2:]),
        },
        block,
        index,
    )


def finished(bundle_id, block, index=0):
    return log({"donorId": SENDER, "bundleId": bytes.fromhex(bundle_id[2:])}, block, index)


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_start_returns_transfer_id(self, transfers, ledger):
        result = await transfers.start(BUNDLE_ID)

        assert result.transfer_id == TRANSFER_ID
        assert result.transaction_hash == "0x" + "12" * 32
        assert ledger.sent[0][:3] == (TRANSFERS, "start", (BUNDLE_ID,))

    @pytest.mark.asyncio
    async def test_start_uses_override_sender_as_donor(self, transfers, ledger):
        other = "0x" + "99" * 20
        await transfers.start(BUNDLE_ID, sender=other)

        id_lookup = next(call for call in ledger.calls if call[1] == "getTransferId")
        assert id_lookup[2] == (Web3.to_checksum_address(other), BUNDLE_ID)
        assert ledger.sent[0][3] == {"from": Web3.to_checksum_address(other)}

    @pytest.mark.asyncio
    async def test_start_rejects_malformed_bundle(self, transfers, ledger):
        with pytest.raises(InvalidArgumentError):
            await transfers.start("0xnothex")
        assert ledger.network_calls() == 0

    @pytest.mark.asyncio
    async def test_malformed_sender_override(self, transfers, ledger):
        with pytest.raises(InvalidArgumentError):
            await transfers.start(BUNDLE_ID, sender="notanaddress")
        with pytest.raises(InvalidArgumentError):
            await transfers.cancel(TRANSFER_ID, sender="0x1234")
        assert ledger.network_calls() == 0

    @pytest.mark.asyncio
    async def test_resolve_and_cancel(self, transfers, ledger):
        await transfers.resolve(TRANSFER_ID)
        await transfers.cancel(TRANSFER_ID, gas=250_000)

        assert [sent[1] for sent in ledger.sent] == ["resolve", "cancel"]
        assert ledger.sent[1][3] == {"gas": 250_000}

    @pytest.mark.asyncio
    async def test_read_only_mode_returns_payload(self, transfers, submitter, ledger):
        submitter.send_transactions = False

        submission = await transfers.cancel(TRANSFER_ID)

        assert submission.payload == "0x" + b"cancel".hex()
        assert submission.transaction_hash is None
        assert ledger.sent == []


class TestStatus:
    @pytest.mark.asyncio
    async def test_in_progress_not_timed_out(self, transfers):
        status = await transfers.status(TRANSFER_ID)
        assert status.is_in_progress
        assert status.can_resolve
        # created an hour ago with a two-hour lifetime
        assert status.is_timed_out is False

    @pytest.mark.asyncio
    async def test_timed_out_after_duration(self, transfers, ledger):
        ledger.set(TRANSFERS, getCreationTime=ledger.timestamp - 7200)
        assert (await transfers.status(TRANSFER_ID)).is_timed_out

    @pytest.mark.asyncio
    async def test_unknown_transfer(self, transfers, ledger):
        ledger.set(TRANSFERS, isInProgress=False, canResolve=False, getCreationTime=0)
        status = await transfers.status(TRANSFER_ID)
        assert not status.is_in_progress
        assert not status.is_timed_out

    @pytest.mark.asyncio
    async def test_missing_default_sender_fails_before_any_call(self, w3, bindings, ledger):
        actions = TransferActions(w3, bindings, TransactionSubmitter(w3, default_sender=None), min_block_time=5)
        with pytest.raises(InvalidArgumentError):
            await actions.status(TRANSFER_ID)
        assert ledger.network_calls() == 0


class TestQueries:
    @pytest.mark.asyncio
    async def test_donor_and_bundle(self, transfers):
        assert await transfers.donor(TRANSFER_ID) == DONOR
        assert await transfers.bundle(TRANSFER_ID) == BUNDLE_ID

    @pytest.mark.asyncio
    async def test_designated_shelterer(self, transfers):
        assert await transfers.designated_shelterer(TRANSFER_ID) == Web3.to_checksum_address(SHELTERER)

    @pytest.mark.asyncio
    async def test_list_started_transfers(self, transfers, ledger):
        ledger.block_number = 5000
        ledger.add_events(TRANSFERS_EMITTER, "TransferStarted", [started(TRANSFER_ID, BUNDLE_ID, 4000)])
        ledger.add_events(TRANSFERS_EMITTER, "TransferResolved", [finished(BUNDLE_ID, 4100)])

        listings = await transfers.list()

        assert listings == [TransferListing(TRANSFER_ID, DONOR, BUNDLE_ID, 4000)]
        # 7200 seconds at 5 seconds per block
        assert ledger.log_queries == [("TransferStarted", 3560, "latest")]

    @pytest.mark.asyncio
    async def test_list_pending_only(self, transfers, ledger):
        resolved_id = "0x" + "cc" * 32
        ledger.add_events(
            TRANSFERS_EMITTER,
            "TransferStarted",
            [started(TRANSFER_ID, BUNDLE_ID, 900), started(resolved_id, OTHER_BUNDLE, 901)],
        )
        ledger.add_events(TRANSFERS_EMITTER, "TransferResolved", [finished(OTHER_BUNDLE, 950)])
        ledger.add_events(TRANSFERS_EMITTER, "TransferCancelled", [])

        listings = await transfers.list(from_block=0, pending_only=True)

        assert [listing.transfer_id for listing in listings] == [TRANSFER_ID]

    @pytest.mark.asyncio
    async def test_restarted_transfer_is_pending_again(self, transfers, ledger):
        ledger.add_events(
            TRANSFERS_EMITTER,
            "TransferStarted",
            [started(TRANSFER_ID, BUNDLE_ID, 900), started(TRANSFER_ID, BUNDLE_ID, 990)],
        )
        ledger.add_events(TRANSFERS_EMITTER, "TransferCancelled", [finished(BUNDLE_ID, 950)])

        listings = await transfers.list(from_block=0, pending_only=True)

        assert len(listings) == 1
        assert listings[0].block_number == 990
