"""
覆盖会话的错误类型。

除 `UnknownEvent` / 歧义分类（只计数，不抛出）外，以下错误都视为致命：
一旦抛出，本次覆盖运行整体作废，不输出部分结果。
"""
from __future__ import annotations

from typing import Optional


class CoverageMapError(Exception):
    """所有覆盖映射错误的基类。"""


class InvalidContract(CoverageMapError):
    """合约元数据本身不可用（例如合约名为空）。"""


class DuplicateContract(CoverageMapError):
    def __init__(self, path: str) -> None:
        super().__init__(f"contract already registered: {path}")
        self.path = path


class DenseIndexViolation(CoverageMapError):
    """fnMap / branchMap / statementMap 的键不是从 1 开始的连续整数。"""

    def __init__(self, path: str, map_name: str, key: object) -> None:
        super().__init__(f"{path}: {map_name} keys must be contiguous integers 1..N "
                         f"(offending key: {key!r})")
        self.path = path
        self.map_name = map_name
        self.key = key


class DecodeFailure(CoverageMapError):
    """事件 data 无法按定长布局解码。"""


class UnregisteredContract(CoverageMapError):
    def __init__(self, path: str) -> None:
        super().__init__(f"event references unregistered contract: {path}")
        self.path = path


class UnknownIndex(CoverageMapError):
    """事件指向的计数器在已注册条目中不存在（行号不可运行或序号越界）。"""

    def __init__(self, path: str, counter: str, index: int, arm: Optional[int] = None) -> None:
        where = f"{counter}[{index}]" if arm is None else f"{counter}[{index}][{arm}]"
        super().__init__(f"{path}: no counter at {where}")
        self.path = path
        self.counter = counter
        self.index = index
        self.arm = arm


class SessionFinalized(CoverageMapError):
    """会话已完成 assert 重解释，不再接受合约或事件。"""


__all__ = [
    "CoverageMapError",
    "InvalidContract",
    "DuplicateContract",
    "DenseIndexViolation",
    "DecodeFailure",
    "UnregisteredContract",
    "UnknownIndex",
    "SessionFinalized",
]
