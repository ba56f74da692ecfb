"""Acceso tolerante a campos JSON."""

from __future__ import annotations

import logging

from core.domain.fields import FieldState, get_bool, get_int, get_nested_int, get_str, lookup


def test_present_field() -> None:
    result = lookup({"Title": "Trip"}, "Title", "str")
    assert result.state is FieldState.PRESENT
    assert result.value == "Trip"
    assert result.present


def test_absent_and_null_are_the_same() -> None:
    assert lookup({}, "Title", "str").state is FieldState.ABSENT
    assert lookup({"Title": None}, "Title", "str").state is FieldState.ABSENT
    assert lookup(None, "Title", "str").state is FieldState.ABSENT


def test_type_mismatch_is_reported_and_logged(caplog) -> None:
    with caplog.at_level(logging.WARNING, logger="core.domain.fields"):
        result = lookup({"ImageCount": "many"}, "ImageCount", "int")
    assert result.state is FieldState.MISMATCH
    assert result.value is None
    assert "ImageCount" in caplog.text


def test_getters_never_raise() -> None:
    obj = {"id": "12", "Public": 1, "Hidden": "false", "Template": {"id": 3}, "Key": 55}
    assert get_int(obj, "id") == 12
    assert get_bool(obj, "Public") is True
    assert get_bool(obj, "Hidden") is False
    assert get_nested_int(obj, "Template") == 3
    assert get_str(obj, "Key") == "55"
    assert get_int(obj, "Template") is None
    assert get_bool({"Public": 2}, "Public") is None


def test_non_object_container() -> None:
    assert lookup(["not", "a", "dict"], "id", "int").state is FieldState.MISMATCH  # type: ignore[arg-type]
