"""Tests for strict JSON decoding."""

import pytest

from jsonexpand.contracts import DecodeErr, DecodeFailureKind, DecodeOk
from jsonexpand.core.codec import decode_json


class TestDecodeJson:
    def test_object(self) -> None:
        result = decode_json('{"a": [1, 2.5, "x", true, null]}')

        assert isinstance(result, DecodeOk)
        assert result.ok
        assert result.value == {"a": [1, 2.5, "x", True, None]}

    @pytest.mark.parametrize(("text", "expected"), [("[]", []), ('"s"', "s"), ("0", 0), ("null", None)])
    def test_non_object_values_decode(self, text: str, expected: object) -> None:
        result = decode_json(text)

        assert isinstance(result, DecodeOk)
        assert result.value == expected

    def test_malformed(self) -> None:
        result = decode_json('{"a": ')

        assert isinstance(result, DecodeErr)
        assert not result.ok
        assert result.kind == DecodeFailureKind.MALFORMED_JSON
        assert result.detail.startswith("JSON parse error at line 1")

    @pytest.mark.parametrize("constant", ["NaN", "Infinity", "-Infinity"])
    def test_non_finite_constants_rejected(self, constant: str) -> None:
        result = decode_json(f'{{"a": {constant}}}')

        assert isinstance(result, DecodeErr)
        assert result.kind == DecodeFailureKind.MALFORMED_JSON
        assert constant in result.detail

    @pytest.mark.parametrize("value", [None, 1, b'{"a": 1}', {"a": 1}])
    def test_non_string_input(self, value: object) -> None:
        result = decode_json(value)

        assert isinstance(result, DecodeErr)
        assert result.kind == DecodeFailureKind.NOT_A_STRING

    def test_deeply_nested_input_does_not_raise(self) -> None:
        result = decode_json("[" * 100_000 + "]" * 100_000)

        assert isinstance(result, DecodeErr | DecodeOk)

    def test_decoding_twice_is_structurally_equal(self) -> None:
        text = '{"a": {"b": [1, {"c": null}]}}'

        first = decode_json(text)
        second = decode_json(text)

        assert first == second
        assert isinstance(first, DecodeOk)
        assert isinstance(second, DecodeOk)
        assert first.value is not second.value
