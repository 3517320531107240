"""Pool contract protocol — the contract-interaction service.

Every method returns the raw response of the underlying simulate/invoke
call. Callers must unwrap it before use.
"""
from typing import Any, Protocol


class PoolContract(Protocol):
    """Abstract interface for reading from and invoking the lending pool."""

    async def get_lender_info(self, account: str) -> Any: ...

    async def get_available_liquidity(self) -> Any: ...

    async def get_utilization_rate(self) -> Any: ...

    async def get_allowance(self, account: str) -> Any: ...

    async def grant_allowance(self, account: str) -> Any: ...

    async def deposit(self, amount: int) -> Any: ...

    async def withdraw(self, amount: int) -> Any: ...

    async def mint_test_asset(self, amount: int) -> Any: ...
