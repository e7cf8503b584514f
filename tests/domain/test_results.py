from __future__ import annotations

import pytest

from catalogmerge.domain.results import Err, Ok, Result, UnwrapError


def _describe(result: Result[int, str]) -> str:
    match result:
        case Ok(value):
            return f"ok:{value}"
        case Err(error):
            return f"err:{error}"


def test_results_support_pattern_matching() -> None:
    assert _describe(Ok(3)) == "ok:3"
    assert _describe(Err("boom")) == "err:boom"


def test_ok_and_err_flags() -> None:
    assert Ok(1).ok is True
    assert Err("x").ok is False
    assert Ok(1).unwrap() == 1


def test_unwrap_on_err_raises_with_error_attached() -> None:
    with pytest.raises(UnwrapError) as excinfo:
        Err("boom").unwrap()

    assert excinfo.value.error == "boom"
