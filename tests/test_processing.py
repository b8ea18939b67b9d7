"""Mempool ordering and block execution."""

from types import SimpleNamespace

import pytest

from aave_sim import calls
from aave_sim.core.environment import RevertError
from aave_sim.processing import BlockProducer, Mempool, Transaction, TransactionRevertedError


def make_tx(sender, gas_price=20, checked=True):
    return Transaction(sender=sender, target="0xpool", call=calls.Decimals(), checked=checked, gas_price=gas_price)


class ScriptedEnv:
    """Reverts every call whose sender is listed in `reverting`."""
    def __init__(self, reverting=()):
        self.reverting = set(reverting)
        self.executed = []

    def execute(self, caller, target, request, value=0):
        if caller in self.reverting:
            raise RevertError("scripted revert")
        self.executed.append(caller)
        return 18, ["event"]


def make_producer(env, steps=7):
    return BlockProducer(SimpleNamespace(env=env, steps=steps, transaction_log=[]))


class TestMempool:

    def test_orders_by_gas_price_descending(self):
        mempool = Mempool()
        for sender, gas in (("a", 20), ("b", 22), ("c", 10), ("d", 21)):
            mempool.add_transaction(make_tx(sender, gas))

        block = mempool.get_transactions_for_block()

        assert [tx.sender for tx in block] == ["b", "d", "a", "c"]
        assert len(mempool) == 0

    def test_equal_gas_keeps_submission_order(self):
        mempool = Mempool()
        senders = [f"s{i}" for i in range(10)]
        for sender in senders:
            mempool.add_transaction(make_tx(sender))
        mempool.add_transaction(make_tx("boosted", gas_price=22))

        block = mempool.get_transactions_for_block()

        assert [tx.sender for tx in block] == ["boosted", *senders]

    def test_max_txs_leaves_the_rest_pending(self):
        mempool = Mempool()
        for sender, gas in (("a", 20), ("b", 30), ("c", 25)):
            mempool.add_transaction(make_tx(sender, gas))

        block = mempool.get_transactions_for_block(max_txs=2)

        assert [tx.sender for tx in block] == ["b", "c"]
        assert [tx.sender for tx in mempool.view_transactions()] == ["a"]

    def test_rejects_non_transactions(self, capsys):
        mempool = Mempool()
        mempool.add_transaction("not a tx")
        assert len(mempool) == 0
        assert "Warning" in capsys.readouterr().out


class TestBlockProducer:

    def test_executes_in_order_and_marks_outcome(self):
        env = ScriptedEnv()
        txs = [make_tx("a"), make_tx("b")]

        producer = make_producer(env)
        processed = producer.process_transactions(txs)

        assert env.executed == ["a", "b"]
        assert processed == txs
        assert producer.model.transaction_log == txs
        for tx in processed:
            assert tx.status == "Executed"
            assert tx.execution_step == 7
            assert tx.output == 18
            assert tx.events == ["event"]

    def test_unchecked_revert_is_recorded_and_skipped(self):
        env = ScriptedEnv(reverting={"liquidator"})
        txs = [make_tx("liquidator", checked=False), make_tx("b")]

        processed = make_producer(env).process_transactions(txs)

        assert processed[0].status == "Failed"
        assert "scripted revert" in processed[0].details
        assert processed[1].status == "Executed"
        assert env.executed == ["b"]

    def test_checked_revert_aborts_the_block(self):
        env = ScriptedEnv(reverting={"borrower"})
        failing = make_tx("borrower")

        with pytest.raises(TransactionRevertedError) as excinfo:
            make_producer(env).process_transactions([failing, make_tx("b")])

        assert excinfo.value.tx is failing
        assert excinfo.value.reason == "scripted revert"
        assert failing.status == "Failed"
        assert env.executed == []

    def test_aborted_block_keeps_already_executed_transactions_in_the_log(self):
        env = ScriptedEnv(reverting={"borrower"})
        producer = make_producer(env)
        first, failing, never_run = make_tx("a"), make_tx("borrower"), make_tx("c")

        with pytest.raises(TransactionRevertedError):
            producer.process_transactions([first, failing, never_run])

        assert producer.model.transaction_log == [first, failing]
        assert first.status == "Executed"
        assert never_run.status == "Pending"

    def test_empty_block(self):
        assert make_producer(ScriptedEnv()).process_transactions([]) == []
