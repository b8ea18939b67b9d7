# aave_sim/core/user_data.py

from typing import NamedTuple

from .fixed_point import scale_data_value


class AccountSnapshot(NamedTuple):
    """Lending market position of one account, as observed at one step."""
    total_collateral_base: float
    total_debt_base: float
    available_borrows_base: float
    current_liquidation_threshold: float
    ltv: float
    health_factor: float  # 1.0 is the liquidation boundary

    @classmethod
    def from_account_data(cls, data) -> "AccountSnapshot":
        """Scales raw `get_user_account_data` output."""
        return cls(
            scale_data_value(data.total_collateral_base, 0, 0),
            scale_data_value(data.total_debt_base, 0, 0),
            scale_data_value(data.available_borrows_base, 0, 0),
            scale_data_value(data.current_liquidation_threshold, 0, 0),
            scale_data_value(data.ltv, 0, 0),
            scale_data_value(data.health_factor, 18, 12),
        )
