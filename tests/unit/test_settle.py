from __future__ import annotations

import time

from ipintel.common.settle import settle_all


def test_settle_all_keeps_call_order_and_captures_errors():
    def slow():
        time.sleep(0.05)
        return "slow"

    def boom():
        raise ValueError("boom")

    outcomes = settle_all([slow, boom, lambda: 3])

    assert [o.ok for o in outcomes] == [True, False, True]
    assert outcomes[0].value == "slow"
    assert isinstance(outcomes[1].error, ValueError)
    assert outcomes[2].value == 3


def test_failure_does_not_cancel_siblings():
    finished = []

    def fail_fast():
        raise RuntimeError("down")

    def finish_later():
        time.sleep(0.05)
        finished.append(True)
        return "done"

    outcomes = settle_all([fail_fast, finish_later])

    assert finished == [True]
    assert outcomes[1].value == "done"


def test_settle_all_with_no_calls():
    assert settle_all([]) == []


def test_settle_all_single_worker_still_settles_everything():
    outcomes = settle_all([lambda: 1, lambda: 1 / 0, lambda: 3], max_workers=1)
    assert [o.value for o in outcomes] == [1, None, 3]
    assert isinstance(outcomes[1].error, ZeroDivisionError)
