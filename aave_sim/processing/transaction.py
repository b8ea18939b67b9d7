# aave_sim/processing/transaction.py

from .. import config


class Transaction:
    """
    A call an agent wants applied to the environment, plus its outcome once
    the block producer has processed it.
    """
    def __init__(self, sender: str, target: str, call, value: int = 0,
                 checked: bool = True, gas_price: float = config.BASE_GAS_PRICE,
                 submission_step: int = -1):
        self.sender = sender
        self.target = target
        self.call = call  # Request dataclass from aave_sim.calls
        self.value = int(value)
        self.checked = checked  # A revert of a checked transaction aborts the run
        self.gas_price = float(gas_price)
        self.submission_step = submission_step

        self.status = "Pending"  # Possible statuses: "Pending", "Executed", "Failed"
        self.execution_step = -1
        self.output = None
        self.events = []
        self.details = ""

    @property
    def function(self) -> str:
        return self.call.function

    def __lt__(self, other):
        """
        Block ordering: higher gas price comes first. `sorted` is stable, so
        transactions with equal gas keep their submission order.
        """
        if not isinstance(other, Transaction):
            return NotImplemented
        return self.gas_price > other.gas_price

    def __repr__(self):
        return (f"Tx(function='{self.function}', sender={self.sender}, gas={self.gas_price:.1f}, "
                f"status='{self.status}', submit_step={self.submission_step})")
