"""Tests for the fixed-layout event payload codec."""

from __future__ import annotations

import pytest

from mini_solcov_py.core.errors import DecodeFailure
from mini_solcov_py.instrumentation.abi import (
    Payload,
    decode_params,
    decode_payload,
    encode_params,
    encode_payload,
)
from mini_solcov_py.instrumentation.topics import EventKind


def _word(value: int) -> bytes:
    return value.to_bytes(32, "big")


def test_decode_known_layout_string_uint() -> None:
    text = b"contracts/A.sol"
    data = _word(0x40) + _word(7) + _word(len(text)) + text.ljust(32, b"\x00")

    assert decode_params(["string", "uint256"], data) == ["contracts/A.sol", 7]
    assert encode_params(["string", "uint256"], ["contracts/A.sol", 7]) == data


def test_decode_accepts_hex_text() -> None:
    data = encode_params(["string", "uint256", "uint256"], ["x.sol", 2, 1])

    assert decode_params(["string", "uint256", "uint256"], "0x" + data.hex()) == ["x.sol", 2, 1]


def test_decode_long_path_spanning_words() -> None:
    path = "contracts/" + "nested/" * 10 + "Token.sol"
    data = encode_payload(EventKind.LINE, path, 123)

    assert decode_payload(EventKind.LINE, data) == Payload(path=path, index=123)


def test_decode_branch_payload() -> None:
    data = encode_payload(EventKind.BRANCH, "b.sol", 2, 1)

    assert decode_payload(EventKind.BRANCH, data) == Payload(path="b.sol", index=2, arm=1)


def test_branch_arm_outside_pair_is_fatal() -> None:
    data = encode_params(["string", "uint256", "uint256"], ["b.sol", 2, 2])

    with pytest.raises(DecodeFailure):
        decode_payload(EventKind.BRANCH, data)


@pytest.mark.parametrize(
    "data",
    [
        b"",
        b"\x00" * 31,
        _word(0x40),
        _word(0x40) + _word(1) + b"\x01",
        # 偏移指回 head 内部
        _word(0x20) + _word(1) + _word(3) + b"abc".ljust(32, b"\x00"),
        # 偏移未对齐
        _word(0x41) + _word(1) + _word(3) + b"abc".ljust(32, b"\x00"),
        # 偏移越界
        _word(0x400) + _word(1),
        # 长度超出 payload
        _word(0x40) + _word(1) + _word(999) + b"abc".ljust(32, b"\x00"),
        # 非法 UTF-8
        _word(0x40) + _word(1) + _word(2) + b"\xff\xfe".ljust(32, b"\x00"),
        # 字符串填充字节非零
        _word(0x40) + _word(1) + _word(3) + b"abc" + b"\x01" * 29,
    ],
)
def test_malformed_payloads_raise(data: bytes) -> None:
    with pytest.raises(DecodeFailure):
        decode_params(["string", "uint256"], data)


def test_bad_hex_raises_decode_failure() -> None:
    with pytest.raises(DecodeFailure):
        decode_params(["string", "uint256"], "0xzz")


def test_branch_layout_needs_three_words() -> None:
    two_field = encode_params(["string", "uint256"], ["b.sol", 1])
    # 两字段 payload 的字符串偏移落在三字段 head 内部
    with pytest.raises(DecodeFailure):
        decode_payload(EventKind.BRANCH, two_field)
