import pytest

from barbershop.core.exceptions import CheckoutError, ValidationError
from barbershop.services.checkout.checkout_saga import CheckoutSaga


def test_all_steps_run_in_order():
    calls = []
    saga = CheckoutSaga("sale")
    saga.add_step("one", lambda: calls.append("one") or 1)
    saga.add_step("two", lambda: calls.append("two") or 2)

    results = saga.run()

    assert calls == ["one", "two"]
    assert results == {"one": 1, "two": 2}
    assert saga.compensated == []


def test_failure_compensates_completed_steps_in_reverse():
    undone = []

    def fail():
        raise ValidationError("Estoque insuficiente")

    saga = (
        CheckoutSaga("sale")
        .add_step("insert", lambda: "rows", lambda result: undone.append(("insert", result)))
        .add_step("stock", lambda: "stock", lambda result: undone.append(("stock", result)))
        .add_step("cash", fail, lambda result: undone.append(("cash", result)))
    )

    with pytest.raises(CheckoutError) as exc_info:
        saga.run()

    assert exc_info.value.failed_step == "cash"
    assert exc_info.value.message == "Estoque insuficiente"
    assert undone == [("stock", "stock"), ("insert", "rows")]
    assert saga.compensated == ["stock", "insert"]


def test_failed_compensation_does_not_stop_the_others():
    undone = []

    def broken(_):
        raise RuntimeError("db down")

    saga = (
        CheckoutSaga("sale")
        .add_step("insert", lambda: 1, lambda _: undone.append("insert"))
        .add_step("stock", lambda: 2, broken)
        .add_step("cash", lambda: 1 / 0)
    )

    with pytest.raises(CheckoutError):
        saga.run()

    assert undone == ["insert"]
    assert saga.compensated == ["insert"]
