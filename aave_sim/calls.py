# aave_sim/calls.py

"""
Requests the agents send through the Environment, the typed values that
come back, and small helpers that build transactions or read state.

Requests are frozen dataclasses. `function` names the contract entry point
and the dataclass fields are passed to it as keyword arguments.
"""

from dataclasses import dataclass, fields
from typing import ClassVar, NamedTuple, Optional

from . import config
from .core.accounts import ZERO_ADDRESS
from .core.environment import RevertError
from .core.fixed_point import MAX_UINT256
from .processing.transaction import Transaction


def call_arguments(request) -> dict:
    """Keyword arguments for the contract function named by `request`."""
    return {f.name: getattr(request, f.name) for f in fields(request)}


# --- Lending pool ---

@dataclass(frozen=True)
class Supply:
    function: ClassVar[str] = "supply"
    asset: str
    amount: int
    on_behalf_of: str
    referral_code: int = 0


@dataclass(frozen=True)
class Borrow:
    function: ClassVar[str] = "borrow"
    asset: str
    amount: int
    interest_rate_mode: int
    referral_code: int
    on_behalf_of: str


@dataclass(frozen=True)
class LiquidationCall:
    function: ClassVar[str] = "liquidation_call"
    collateral_asset: str
    debt_asset: str
    user: str
    debt_to_cover: int
    receive_a_token: bool = False


@dataclass(frozen=True)
class GetUserAccountData:
    function: ClassVar[str] = "get_user_account_data"
    user: str


@dataclass(frozen=True)
class GetAssetPrice:
    function: ClassVar[str] = "get_asset_price"
    asset: str


@dataclass(frozen=True)
class GetReserveConfigurationData:
    function: ClassVar[str] = "get_reserve_configuration_data"
    asset: str


# --- ERC20 tokens and faucet ---

@dataclass(frozen=True)
class BalanceOf:
    function: ClassVar[str] = "balance_of"
    account: str


@dataclass(frozen=True)
class Decimals:
    function: ClassVar[str] = "decimals"


@dataclass(frozen=True)
class Approve:
    function: ClassVar[str] = "approve"
    spender: str
    amount: int


@dataclass(frozen=True)
class FaucetMint:
    function: ClassVar[str] = "mint"
    token: str
    to: str
    amount: int


# --- Uniswap pool, router and quoter ---

@dataclass(frozen=True)
class GetSlot0:
    function: ClassVar[str] = "slot0"


@dataclass(frozen=True)
class GetLiquidity:
    function: ClassVar[str] = "liquidity"


@dataclass(frozen=True)
class Token0:
    function: ClassVar[str] = "token0"


@dataclass(frozen=True)
class Token1:
    function: ClassVar[str] = "token1"


@dataclass(frozen=True)
class ExactInputSingle:
    function: ClassVar[str] = "exact_input_single"
    token_in: str
    token_out: str
    fee: int
    recipient: str
    amount_in: int
    amount_out_minimum: int = 0
    sqrt_price_limit_x96: int = 0
    deadline: int = MAX_UINT256


@dataclass(frozen=True)
class ExactOutputSingle:
    function: ClassVar[str] = "exact_output_single"
    token_in: str
    token_out: str
    fee: int
    recipient: str
    amount_out: int
    amount_in_maximum: int = MAX_UINT256
    sqrt_price_limit_x96: int = 0
    deadline: int = MAX_UINT256


@dataclass(frozen=True)
class QuoteExactOutputSingle:
    function: ClassVar[str] = "quote_exact_output_single"
    token_in: str
    token_out: str
    amount: int
    fee: int
    sqrt_price_limit_x96: int = 0


# --- Return values and events ---

class UserAccountData(NamedTuple):
    total_collateral_base: int
    total_debt_base: int
    available_borrows_base: int
    current_liquidation_threshold: int
    ltv: int
    health_factor: int


class ReserveConfigurationData(NamedTuple):
    decimals: int
    ltv: int
    liquidation_threshold: int
    liquidation_bonus: int
    reserve_factor: int
    usage_as_collateral_enabled: bool
    borrowing_enabled: bool
    stable_borrow_rate_enabled: bool
    is_active: bool
    is_frozen: bool


class Slot0(NamedTuple):
    sqrt_price_x96: int
    tick: int


class QuoteExactOutput(NamedTuple):
    amount_in: int
    sqrt_price_x96_after: int
    initialized_ticks_crossed: int
    gas_estimate: int


class LiquidationCallEvent(NamedTuple):
    collateral_asset: str
    debt_asset: str
    user: str
    debt_to_cover: int
    liquidated_collateral_amount: int
    liquidator: str
    receive_a_token: bool


# --- Transaction builders ---
# Swaps and supplies are checked: a revert means the scenario is broken.
# Liquidations may legitimately fail once another liquidator got there first.

def supply_call(sender: str, pool: str, asset: str, amount: int) -> Transaction:
    return Transaction(
        sender=sender, target=pool,
        call=Supply(asset=asset, amount=amount, on_behalf_of=sender),
        checked=True,
    )


def borrow_call(sender: str, pool: str, asset: str, amount: int) -> Transaction:
    return Transaction(
        sender=sender, target=pool,
        call=Borrow(asset=asset, amount=amount, interest_rate_mode=config.BORROW_INTEREST_RATE_MODE,
                    referral_code=0, on_behalf_of=sender),
        checked=True,
    )


def liquidation_call(sender: str, pool: str, collateral_asset: str, debt_asset: str,
                     user: str, debt_to_cover: int = MAX_UINT256) -> Transaction:
    return Transaction(
        sender=sender, target=pool,
        call=LiquidationCall(collateral_asset=collateral_asset, debt_asset=debt_asset,
                             user=user, debt_to_cover=debt_to_cover),
        checked=False,
    )


def exact_input_swap_call(sender: str, router: str, params: ExactInputSingle,
                          gas_price: float = config.BASE_GAS_PRICE) -> Transaction:
    return Transaction(sender=sender, target=router, call=params, checked=True, gas_price=gas_price)


def exact_output_swap_call(sender: str, router: str, params: ExactOutputSingle,
                           gas_price: float = config.BASE_GAS_PRICE) -> Transaction:
    return Transaction(sender=sender, target=router, call=params, checked=True, gas_price=gas_price)


# --- Read helpers ---
# A revert on any of these is unexpected and propagates, except for quotes.

def get_user_data(env, pool: str, user: str, caller: str = ZERO_ADDRESS) -> UserAccountData:
    output, _ = env.query(caller, pool, GetUserAccountData(user=user))
    return output


def get_asset_price(env, oracle: str, asset: str, caller: str = ZERO_ADDRESS) -> int:
    output, _ = env.query(caller, oracle, GetAssetPrice(asset=asset))
    return output


def get_reserve_configuration_data(env, data_provider: str, asset: str,
                                   caller: str = ZERO_ADDRESS) -> ReserveConfigurationData:
    output, _ = env.query(caller, data_provider, GetReserveConfigurationData(asset=asset))
    return output


def balance_of(env, caller: str, token: str) -> int:
    output, _ = env.query(caller, token, BalanceOf(account=caller))
    return output


def get_decimals(env, caller: str, token: str) -> int:
    output, _ = env.query(caller, token, Decimals())
    return output


def get_slot0(env, caller: str, pool: str) -> Slot0:
    output, _ = env.query(caller, pool, GetSlot0())
    return output


def get_liquidity(env, caller: str, pool: str) -> int:
    output, _ = env.query(caller, pool, GetLiquidity())
    return output


def get_token0(env, caller: str, pool: str) -> str:
    output, _ = env.query(caller, pool, Token0())
    return output


def get_token1(env, caller: str, pool: str) -> str:
    output, _ = env.query(caller, pool, Token1())
    return output


def quote_exact_output_swap(env, caller: str, quoter: str, token_in: str, token_out: str,
                            fee: int, amount: int) -> Optional[QuoteExactOutput]:
    """Quote for buying `amount` of `token_out`, or None if the quote reverts."""
    try:
        output, _ = env.query(caller, quoter, QuoteExactOutputSingle(
            token_in=token_in, token_out=token_out, amount=amount, fee=fee,
        ))
    except RevertError as e:
        if config.VERBOSE_LOGGING:
            print(f"      Quote reverted for {amount} of {token_out}: {e.reason}")
        return None
    return output
