import pytest
from web3 import Web3

from sheltering_sdk.errors import ContractNotDeployedError, NetworkError
from sheltering_sdk.models import LogicalContract

from .conftest import ATLAS_STAKE_STORE, CATALOGUE, CHALLENGES, CONTEXT, HEAD, ZERO


class TestResolve:
    @pytest.mark.asyncio
    async def test_resolves_through_catalogue(self, registry):
        address = await registry.resolve("challenges")
        assert address == Web3.to_checksum_address(CHALLENGES)

    @pytest.mark.asyncio
    async def test_resolves_through_storage_catalogue(self, registry):
        address = await registry.resolve(LogicalContract.ATLAS_STAKE_STORE)
        assert address == Web3.to_checksum_address(ATLAS_STAKE_STORE)

    @pytest.mark.asyncio
    async def test_each_resolve_reads_the_chain(self, registry, ledger):
        await registry.resolve("challenges")
        reads = len(ledger.calls)
        await registry.resolve("challenges")
        assert len(ledger.calls) == 2 * reads

    @pytest.mark.asyncio
    async def test_follows_context_redeployment(self, registry, ledger):
        new_context = "0x" + "c9" * 20
        ledger.set(new_context, catalogue=CATALOGUE, storageCatalogue=ZERO)
        ledger.set(HEAD, context=new_context)

        assert await registry.resolve("challenges") == Web3.to_checksum_address(CHALLENGES)
        assert ledger.calls[-2][0] == new_context

    @pytest.mark.asyncio
    async def test_unknown_name(self, registry, ledger):
        with pytest.raises(ContractNotDeployedError) as exc_info:
            await registry.resolve("nonexistent")
        assert "does not exist" in str(exc_info.value)
        assert ledger.calls == []

    @pytest.mark.asyncio
    async def test_zero_address_is_not_deployed(self, registry):
        with pytest.raises(ContractNotDeployedError) as exc_info:
            await registry.resolve("payouts")
        assert exc_info.value.contract_name == "payouts"

    @pytest.mark.asyncio
    async def test_zero_context(self, registry, ledger):
        ledger.set(HEAD, context=ZERO)
        with pytest.raises(ContractNotDeployedError) as exc_info:
            await registry.resolve("challenges")
        assert exc_info.value.contract_name == "context"

    @pytest.mark.asyncio
    async def test_transport_failure(self, registry, ledger):
        ledger.set(CONTEXT, catalogue=ConnectionError("node unreachable"))
        with pytest.raises(NetworkError):
            await registry.resolve("challenges")


class TestContext:
    @pytest.mark.asyncio
    async def test_context_address(self, registry):
        assert await registry.context_address() == Web3.to_checksum_address(CONTEXT)

    @pytest.mark.asyncio
    async def test_contracts_version(self, registry):
        assert await registry.contracts_version() == "0.3.0"
