"""Unit tests for handler routing."""

from __future__ import annotations

from unittest.mock import Mock

import pytest

from circleci_status.dispatch import Classification, HandlerSet, Outcome, dispatch


def _recorder(calls: list[str], name: str):
    def handler(_outcome: Outcome) -> None:
        calls.append(name)

    return handler


def _boom(_outcome: Outcome) -> None:
    raise RuntimeError("handler bug")


def test_success_without_handlers_is_a_noop() -> None:
    outcome = Outcome(classification=Classification.SUCCESS, status_code=200, payload=[1])

    dispatch(outcome, HandlerSet())


@pytest.mark.parametrize(
    ("classification", "status_code", "expected"),
    [
        (Classification.SUCCESS, 200, ["success", "complete"]),
        (Classification.ERROR, 500, ["error", "complete"]),
        (Classification.TRANSPORT_ERROR, None, ["error", "complete"]),
    ],
)
def test_primary_handler_follows_classification(
    classification: Classification, status_code: int | None, expected: list[str]
) -> None:
    calls: list[str] = []
    handlers = HandlerSet(
        on_success=_recorder(calls, "success"),
        on_error=_recorder(calls, "error"),
        on_complete=_recorder(calls, "complete"),
    )

    dispatch(Outcome(classification=classification, status_code=status_code), handlers)

    assert calls == expected


def test_status_handler_fires_in_addition_to_primary_and_before_complete() -> None:
    calls: list[str] = []
    handlers = HandlerSet(
        on_error=_recorder(calls, "error"),
        on_complete=_recorder(calls, "complete"),
        by_status={401: _recorder(calls, "401"), 404: _recorder(calls, "404")},
    )

    dispatch(Outcome(classification=Classification.ERROR, status_code=401), handlers)

    assert calls == ["error", "401", "complete"]


def test_status_handler_requires_exact_match() -> None:
    calls: list[str] = []
    handlers = HandlerSet(by_status={400: _recorder(calls, "400"), 404: _recorder(calls, "404")})

    dispatch(Outcome(classification=Classification.ERROR, status_code=403), handlers)

    assert calls == []


def test_status_handler_can_match_success_codes() -> None:
    calls: list[str] = []
    handlers = HandlerSet(by_status={200: _recorder(calls, "200")})

    dispatch(Outcome(classification=Classification.SUCCESS, status_code=200), handlers)

    assert calls == ["200"]


def test_no_status_handler_without_status_code() -> None:
    handler = Mock()
    handlers = HandlerSet(by_status={0: handler, 500: handler})

    dispatch(Outcome(classification=Classification.TRANSPORT_ERROR), handlers)

    handler.assert_not_called()


def test_every_handler_sees_the_same_outcome() -> None:
    on_success, by_status, on_complete = Mock(), Mock(), Mock()
    outcome = Outcome(
        classification=Classification.SUCCESS,
        status_code=200,
        payload={"ok": True},
        context={"url": "https://example.invalid"},
    )

    dispatch(
        outcome,
        HandlerSet(on_success=on_success, on_complete=on_complete, by_status={200: by_status}),
    )

    on_success.assert_called_once_with(outcome)
    by_status.assert_called_once_with(outcome)
    on_complete.assert_called_once_with(outcome)


def test_raising_primary_handler_does_not_stop_later_handlers() -> None:
    completed: list[Outcome] = []
    handlers = HandlerSet(on_success=_boom, on_complete=completed.append)

    dispatch(Outcome(classification=Classification.SUCCESS, status_code=200), handlers)

    assert len(completed) == 1


def test_raising_status_handler_is_contained() -> None:
    calls: list[str] = []
    handlers = HandlerSet(
        on_error=_boom,
        on_complete=_recorder(calls, "complete"),
        by_status={502: _boom},
    )

    dispatch(Outcome(classification=Classification.ERROR, status_code=502), handlers)

    assert calls == ["complete"]


def test_raising_complete_handler_is_contained() -> None:
    dispatch(
        Outcome(classification=Classification.ERROR, status_code=500),
        HandlerSet(on_complete=_boom),
    )


def test_plain_string_classification_is_coerced() -> None:
    on_success, on_error = Mock(), Mock()

    outcome = Outcome(classification="success", status_code=200)
    dispatch(outcome, HandlerSet(on_success=on_success, on_error=on_error))

    assert outcome.classification is Classification.SUCCESS
    on_success.assert_called_once_with(outcome)
    on_error.assert_not_called()


def test_unknown_classification_is_rejected() -> None:
    with pytest.raises(ValueError):
        Outcome(classification="maybe")
