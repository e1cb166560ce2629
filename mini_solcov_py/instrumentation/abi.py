"""事件 data 的定长二进制编解码。

布局与合约事件的 ABI 编码一致，按 32 字节字（word）对齐：

    head:  每个参数一个字。uint256 直接存值（大端）；string 存其内容相对
           data 起点的字节偏移。
    tail:  string 内容 = 长度字 + UTF-8 字节（右侧补零到 32 的倍数）。

编解码交给 eth-abi（严格模式，非零填充等也视为损坏）；本模块只负责把库的异常
统一为 `DecodeFailure`（致命），并把结果映射为覆盖事件字段。
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Union

import eth_abi
from eth_abi.exceptions import DecodingError

from ..core.errors import DecodeFailure
from .topics import EventKind

WORD = 32


def hex_to_bytes(text: str) -> bytes:
    """把 `0x...` 形式的十六进制文本转换为 bytes。"""
    s = text.strip()
    if s[:2] in ("0x", "0X"):
        s = s[2:]
    try:
        return bytes.fromhex(s)
    except ValueError as e:
        raise DecodeFailure(f"payload is not valid hex: {e}") from e


def decode_params(types: Sequence[str], data: Union[bytes, bytearray, str]) -> List[object]:
    """按 types 顺序解码 data，返回 Python 值列表（str / int）。"""
    if isinstance(data, str):
        data = hex_to_bytes(data)
    data = bytes(data)
    # 生产端总是输出整字；半个字说明 payload 被截断或拼接
    if len(data) % WORD != 0:
        raise DecodeFailure(f"payload length {len(data)} is not a multiple of {WORD}")
    try:
        return list(eth_abi.decode(list(types), data))
    except (DecodingError, UnicodeDecodeError) as e:
        raise DecodeFailure(f"cannot decode ({','.join(types)}) payload: {e}") from e


def encode_params(types: Sequence[str], values: Sequence[object]) -> bytes:
    """decode_params 的逆操作（事件生产端的编码方式）。"""
    if len(types) != len(values):
        raise ValueError("types and values differ in length")
    return eth_abi.encode(list(types), list(values))


@dataclass(frozen=True)
class Payload:
    """解码后的覆盖事件字段。

    - path: 合约规范路径
    - index: 行号 / 函数序号 / 分支序号 / 语句序号
    - arm: 仅分支事件有值（0 或 1）
    """

    path: str
    index: int
    arm: Optional[int] = None


def decode_payload(kind: EventKind, data: Union[bytes, bytearray, str]) -> Payload:
    values = decode_params(kind.types, data)
    if kind is EventKind.BRANCH:
        path, index, arm = values
        if arm not in (0, 1):
            raise DecodeFailure(f"{path}: branch {index} arm index must be 0 or 1, got {arm}")
        return Payload(path=path, index=index, arm=arm)
    path, index = values
    return Payload(path=path, index=index)


def encode_payload(kind: EventKind, path: str, index: int, arm: Optional[int] = None) -> bytes:
    if kind is EventKind.BRANCH:
        return encode_params(kind.types, [path, index, arm if arm is not None else 0])
    return encode_params(kind.types, [path, index])


__all__ = [
    "WORD",
    "hex_to_bytes",
    "decode_params",
    "encode_params",
    "Payload",
    "decode_payload",
    "encode_payload",
]
