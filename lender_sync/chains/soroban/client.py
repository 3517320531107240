"""Contract gateway JSON-RPC client with read failover."""
from __future__ import annotations

import logging
import ssl
from collections.abc import Mapping
from typing import Any

import aiohttp
import certifi

from ...config import GatewayConfig, PoolConfig

logger = logging.getLogger(__name__)


def _error_message(error: Any) -> str:
    if isinstance(error, Mapping) and error.get("message"):
        return str(error["message"])
    return str(error)


class PoolGatewayClient:
    """Lending pool client speaking JSON-RPC to a contract gateway.

    The gateway simulates reads and signs/submits invocations for
    ``source_account``. Results are returned undecoded: reads typically come
    back as ``{"result": {"retval": ...}}`` simulation envelopes.
    """

    def __init__(
        self,
        config: GatewayConfig,
        source_account: str,
        pool_config: PoolConfig | None = None,
    ) -> None:
        pool_config = pool_config or PoolConfig()
        self.endpoints = list(config.rpc_endpoints)
        self.timeout = config.rpc_timeout
        self.source_account = source_account
        self.pool_contract_id = pool_config.contract_id
        self.token_contract_id = pool_config.token_contract_id
        self.current_rpc_index = 0

    async def _post(self, rpc_url: str, payload: dict[str, Any]) -> Any:
        ssl_context = ssl.create_default_context(cafile=certifi.where())
        connector = aiohttp.TCPConnector(ssl=ssl_context)
        async with aiohttp.ClientSession(connector=connector) as session:
            async with session.post(
                rpc_url,
                json=payload,
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            ) as response:
                result = await response.json()
                if "error" in result:
                    raise RuntimeError(f"RPC Error: {_error_message(result['error'])}")
                return result.get("result")

    async def rpc_call(
        self, method: str, params: dict[str, Any], *, failover: bool = True
    ) -> Any:
        """Make an RPC call.

        With ``failover`` the call moves on to the next endpoint when one
        fails. Without it (state-changing calls) exactly one attempt is made
        on the current endpoint and its error propagates unchanged.
        """
        if not self.endpoints:
            raise RuntimeError("No gateway RPC endpoints configured")

        payload = {"jsonrpc": "2.0", "id": 1, "method": method, "params": params}

        if not failover:
            return await self._post(self.endpoints[self.current_rpc_index], payload)

        last_error: Exception | None = None
        for attempt in range(len(self.endpoints)):
            rpc_index = (self.current_rpc_index + attempt) % len(self.endpoints)
            rpc_url = self.endpoints[rpc_index]

            try:
                result = await self._post(rpc_url, payload)
            except Exception as e:
                last_error = e
                logger.warning("RPC endpoint %s failed: %s", rpc_url, e)
                if attempt < len(self.endpoints) - 1:
                    logger.info("Trying next endpoint...")
                continue

            if rpc_index != self.current_rpc_index:
                logger.info("Switched to RPC endpoint: %s", rpc_url)
                self.current_rpc_index = rpc_index
            return result

        raise RuntimeError(f"All RPC endpoints failed. Last error: {last_error}")

    def _pool_params(self, **params: Any) -> dict[str, Any]:
        return {"contract": self.pool_contract_id, **params}

    def _token_params(self, **params: Any) -> dict[str, Any]:
        return {"contract": self.token_contract_id, **params}

    # ------------------------------------------------------------------
    # Reads (simulated)
    # ------------------------------------------------------------------

    async def get_lender_info(self, account: str) -> Any:
        return await self.rpc_call("pool_getLenderInfo", self._pool_params(lender=account))

    async def get_available_liquidity(self) -> Any:
        return await self.rpc_call("pool_getAvailableLiquidity", self._pool_params())

    async def get_utilization_rate(self) -> Any:
        return await self.rpc_call("pool_getUtilizationRate", self._pool_params())

    async def get_allowance(self, account: str) -> Any:
        return await self.rpc_call(
            "token_getAllowance",
            self._token_params(owner=account, spender=self.pool_contract_id),
        )

    # ------------------------------------------------------------------
    # Invocations (signed by the gateway for source_account)
    # ------------------------------------------------------------------

    async def grant_allowance(self, account: str) -> Any:
        return await self.rpc_call(
            "token_approvePool",
            self._token_params(owner=account, spender=self.pool_contract_id),
            failover=False,
        )

    async def deposit(self, amount: int) -> Any:
        return await self.rpc_call(
            "pool_deposit",
            self._pool_params(lender=self.source_account, amount=str(amount)),
            failover=False,
        )

    async def withdraw(self, amount: int) -> Any:
        return await self.rpc_call(
            "pool_withdraw",
            self._pool_params(lender=self.source_account, amount=str(amount)),
            failover=False,
        )

    async def mint_test_asset(self, amount: int) -> Any:
        return await self.rpc_call(
            "token_mintTest",
            self._token_params(to=self.source_account, amount=str(amount)),
            failover=False,
        )
