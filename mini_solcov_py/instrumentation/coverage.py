"""插装元数据与覆盖条目。

覆盖条目的形状与 istanbul 的 file coverage 一致，供下游报告渲染器直接使用：

    {
      "path": ..., "l": {line: hits}, "f": {fn: hits},
      "b": {branch: [armA, armB]}, "s": {stmt: hits},
      "fnMap": ..., "branchMap": ..., "statementMap": ...
    }

fnMap / branchMap / statementMap 的键必须是从 1 开始的连续整数。
"""
from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping

from ..core.errors import DenseIndexViolation


@dataclass
class InstrumentationInfo:
    """单个合约的插装元数据（由外部插装步骤提供，只读）。"""

    contract_name: str
    runnable_lines: List[int] = field(default_factory=list)
    fn_map: Dict[int, Any] = field(default_factory=dict)
    branch_map: Dict[int, Any] = field(default_factory=dict)
    statement_map: Dict[int, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, obj: Mapping[str, Any]) -> "InstrumentationInfo":
        """从插装器输出的 JSON 对象构建（camelCase 键）。

        JSON 对象的键总是字符串，这里保持原样，校验时再转为整数。
        """
        return cls(
            contract_name=obj.get("contractName", ""),
            runnable_lines=[int(x) for x in obj.get("runnableLines", [])],
            fn_map=dict(obj.get("fnMap", {})),
            branch_map=dict(obj.get("branchMap", {})),
            statement_map=dict(obj.get("statementMap", {})),
        )


@dataclass
class AssertCounter:
    """assert 守护分支的前/后事件计数（仅在会话内存在）。"""

    pre_events: int = 0
    post_events: int = 0


def dense_keys(path: str, map_name: str, mapping: Mapping[Any, Any]) -> Dict[int, Any]:
    """校验并返回以 int 为键的映射副本；键必须恰好是 1..N。"""
    out: Dict[int, Any] = {}
    for key, value in mapping.items():
        # 只接受 int（bool 除外）或纯数字字符串（JSON 对象的键）
        if isinstance(key, int) and not isinstance(key, bool):
            ikey = key
        elif isinstance(key, str) and key.isascii() and key.isdigit():
            ikey = int(key)
        else:
            raise DenseIndexViolation(path, map_name, key)
        if ikey in out:
            raise DenseIndexViolation(path, map_name, key)
        out[ikey] = value
    for expected in range(1, len(out) + 1):
        if expected not in out:
            # 找到第一个越界的键用于报错
            bad = min(k for k in out if k < 1 or k > len(out))
            raise DenseIndexViolation(path, map_name, bad)
    return dict(sorted(out.items()))


def build_entry(info: InstrumentationInfo, canonical_path: str):
    """构建全零覆盖条目与 assert 计数表。

    返回 (entry, assert_counters)。校验失败时抛出 DenseIndexViolation，
    不产生任何部分状态。
    """
    fn_map = dense_keys(canonical_path, "fnMap", info.fn_map)
    branch_map = dense_keys(canonical_path, "branchMap", info.branch_map)
    statement_map = dense_keys(canonical_path, "statementMap", info.statement_map)

    entry = {
        "path": canonical_path,
        "l": {int(line): 0 for line in info.runnable_lines},
        "f": {i: 0 for i in fn_map},
        "b": {i: [0, 0] for i in branch_map},
        "s": {i: 0 for i in statement_map},
        "fnMap": copy.deepcopy(fn_map),
        "branchMap": copy.deepcopy(branch_map),
        "statementMap": copy.deepcopy(statement_map),
    }
    asserts = {i: AssertCounter() for i in branch_map}
    return entry, asserts


__all__ = ["InstrumentationInfo", "AssertCounter", "dense_keys", "build_entry"]
