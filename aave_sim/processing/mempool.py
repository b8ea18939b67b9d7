# aave_sim/processing/mempool.py

from .transaction import Transaction


class Mempool:
    """Transactions submitted by agents during a step, waiting for the next block."""
    def __init__(self):
        self.pending_txs = []

    def add_transaction(self, tx: Transaction):
        if not isinstance(tx, Transaction):
            print(f"Warning: Ignoring non-Transaction submission to the mempool: {tx}")
            return
        self.pending_txs.append(tx)

    def get_transactions_for_block(self, max_txs: int = -1) -> list[Transaction]:
        """
        Takes the next block out of the mempool, highest gas price first.
        Transactions paying the same gas keep their submission order.

        Args:
            max_txs (int): Block size limit. Anything beyond it stays pending
                           for a later block. -1 takes everything.
        """
        ordered = sorted(self.pending_txs)
        cut = max_txs if max_txs > 0 else len(ordered)
        block, self.pending_txs = ordered[:cut], ordered[cut:]
        return block

    def view_transactions(self) -> list[Transaction]:
        """Copy of the pending transactions."""
        return list(self.pending_txs)

    def __len__(self):
        return len(self.pending_txs)
