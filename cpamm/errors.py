"""Pool error classes.

Every failure a pool operation can report maps to exactly one of these
classes, so callers can tell the kinds apart without parsing messages.
All of them are raised before any reserve or ledger mutation is committed.
"""


class PoolError(Exception):
    """Base error for pool operations."""

    pass


class Unauthorized(PoolError):
    """Caller is not the pool owner on an owner-restricted operation."""

    def __init__(self, caller: str, owner: str) -> None:
        super().__init__(f"Caller {caller} is not the pool owner {owner}")
        self.caller = caller
        self.owner = owner


class InvalidAmount(PoolError):
    """A supplied amount is zero or negative."""

    pass


class InsufficientLiquidity(PoolError):
    """Swap or quote attempted while either reserve is zero."""

    pass


class InsufficientReserves(PoolError):
    """Removal requests more than the pool currently holds."""

    pass


class SlippageExceeded(PoolError):
    """Computed swap output is below the caller's minimum."""

    def __init__(self, amount_out: int, min_out: int) -> None:
        super().__init__(f"Output {amount_out} is below the minimum {min_out}")
        self.amount_out = amount_out
        self.min_out = min_out


class ReserveWouldDrainToZero(PoolError):
    """Swap output would leave the output reserve below the minimum."""

    pass


class InvalidTokenQuery(PoolError):
    """Asset identity is not one of the pool's pair."""

    pass


class DivisionByZero(PoolError, ArithmeticError):
    """Division by a zero reserve or other zero divisor."""

    pass


class ReentrancyDetected(PoolError):
    """A mutating call arrived while another one is still in flight."""

    pass


class LedgerError(PoolError):
    """Base error for asset ledger transfers."""

    pass


class InsufficientAllowance(LedgerError):
    """Spender was not authorised to move the requested amount."""

    def __init__(self, asset: str, owner: str, spender: str, allowance: int, amount: int) -> None:
        super().__init__(
            f"Allowance {allowance} of {spender} over {owner}'s {asset} is below {amount}"
        )
        self.asset = asset
        self.owner = owner
        self.spender = spender
        self.allowance = allowance
        self.amount = amount


class InsufficientBalance(LedgerError):
    """Account does not hold enough of the asset for the transfer."""

    def __init__(self, asset: str, account: str, balance: int, amount: int) -> None:
        super().__init__(f"Balance {balance} of {account} in {asset} is below {amount}")
        self.asset = asset
        self.account = account
        self.balance = balance
        self.amount = amount
