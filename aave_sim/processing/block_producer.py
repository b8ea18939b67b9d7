# aave_sim/processing/block_producer.py

from .transaction import Transaction
from ..core.environment import RevertError
from .. import config


class TransactionRevertedError(Exception):
    """A checked transaction reverted, which means the scenario is misconfigured."""
    def __init__(self, tx: Transaction, reason: str):
        super().__init__(f"Checked transaction {tx!r} reverted: {reason}")
        self.tx = tx
        self.reason = reason


class BlockProducer:
    """Applies the transactions of a block to the environment, in order."""
    def __init__(self, model):
        self.model = model

    def process_transactions(self, transactions: list[Transaction]) -> list[Transaction]:
        """
        Executes `transactions` in order and appends each one to the model's
        transaction log as it is processed, so a block aborted by a checked
        revert still logs what ran before it.
        """
        executed_txs_info = []

        if not transactions:
            return executed_txs_info

        if config.VERBOSE_LOGGING:
            print(f"  [BlockProducer] Processing {len(transactions)} transactions for block at step {self.model.steps}...")

        for tx in transactions:
            if not isinstance(tx, Transaction):
                print(f"    Warning: Found non-Transaction object in processing queue: {tx}. Skipping.")
                continue

            if config.VERBOSE_LOGGING:
                print(f"    Processing Tx: Function={tx.function}, Sender={tx.sender}, Gas={tx.gas_price:.1f}, Submitted={tx.submission_step}")

            tx.execution_step = self.model.steps
            self.model.transaction_log.append(tx)
            try:
                tx.output, tx.events = self.model.env.execute(tx.sender, tx.target, tx.call, tx.value)
            except RevertError as e:
                if tx.checked:
                    tx.status = "Failed"
                    tx.details = e.reason
                    raise TransactionRevertedError(tx, e.reason) from e
                tx.status = "Failed"
                tx.details = f"Reverted: {e.reason}"
            else:
                tx.status = "Executed"
                tx.details = f"{len(tx.events)} events"
            executed_txs_info.append(tx)

            if config.VERBOSE_LOGGING:
                print(f"      Tx Result: {tx.status}. Details: {tx.details}")

        return executed_txs_info
