"""
覆盖会话

一次覆盖运行对应一个 `CoverageSession`，会话自己持有 topic 注册表、覆盖映射与
assert 计数表，不使用任何进程级全局状态。

流程：
1. `add_contract()`：每个合约一次，在任何事件之前；
2. `process_event()` / `consume()`：逐条事件分类、解码、累加（顺序无关）；
3. `finalize()`：全部事件消费完后执行一次 assert 重解释，返回最终映射的深拷贝。

`generate(events)` 把 2、3 两步合在一起。
"""
from __future__ import annotations

import copy
import json
from dataclasses import dataclass, asdict, field
from typing import Any, Dict, Iterable, Optional

from .classifier import EventRecord, classify
from .errors import DuplicateContract, SessionFinalized, UnknownIndex, UnregisteredContract
from ..instrumentation.abi import decode_payload
from ..instrumentation.coverage import AssertCounter, InstrumentationInfo, build_entry
from ..instrumentation.topics import EventKind, MemoryTopicSink, TopicRegistry

_COUNTER_KEY = {
    EventKind.LINE: "l",
    EventKind.FUNCTION: "f",
    EventKind.STATEMENT: "s",
}


@dataclass
class SessionStats:
    """会话诊断计数。

    - processed: 成功累加的事件数
    - unknown: topic 未命中任何种类而被丢弃的事件数
    - ambiguous: 命中多个种类、按优先级取第一个的事件数
    - reinterpreted: 被重解释为 assert 分支的分支数
    - by_kind: 各种类事件数
    """

    processed: int = 0
    unknown: int = 0
    ambiguous: int = 0
    reinterpreted: int = 0
    by_kind: Dict[str, int] = field(default_factory=lambda: {k.name.lower(): 0 for k in EventKind})


class CoverageSession:
    """单次覆盖运行。

    参数：
    - sink: topic 旁路通道，需提供 `append(data: bytes)`；默认写入内存
    """

    def __init__(self, sink=None) -> None:
        self.registry = TopicRegistry(sink if sink is not None else MemoryTopicSink())
        self.coverage: Dict[str, Dict[str, Any]] = {}
        self.assert_coverage: Dict[str, Dict[int, AssertCounter]] = {}
        self.stats = SessionStats()
        self._final: Optional[Dict[str, Dict[str, Any]]] = None

    @property
    def finalized(self) -> bool:
        return self._final is not None

    def _check_open(self) -> None:
        if self.finalized:
            raise SessionFinalized("coverage session already finalized")

    def add_contract(self, info: InstrumentationInfo, canonical_path: str) -> Dict[EventKind, str]:
        """初始化合约的全零覆盖条目并注册其 topic，返回六个 topic。"""
        self._check_open()
        if self.registry.is_registered(canonical_path):
            raise DuplicateContract(canonical_path)
        # 先完成全部校验再改动状态：build_entry 失败时会话保持原样
        entry, asserts = build_entry(info, canonical_path)
        topics = self.registry.register(info.contract_name, canonical_path)
        self.coverage[canonical_path] = entry
        self.assert_coverage[canonical_path] = asserts
        return topics

    def process_event(self, record: EventRecord) -> Optional[EventKind]:
        """处理一条事件，返回其种类；未知事件返回 None。"""
        self._check_open()
        result = classify(record, self.registry)
        if result.kind is None:
            self.stats.unknown += 1
            return None
        if result.ambiguous:
            self.stats.ambiguous += 1

        kind = result.kind
        payload = decode_payload(kind, record.data)
        entry = self.coverage.get(payload.path)
        if entry is None:
            raise UnregisteredContract(payload.path)

        if kind is EventKind.BRANCH:
            counters = entry["b"]
            if payload.index not in counters:
                raise UnknownIndex(payload.path, "b", payload.index, payload.arm)
            counters[payload.index][payload.arm] += 1
        elif kind in (EventKind.ASSERT_PRE, EventKind.ASSERT_POST):
            asserts = self.assert_coverage[payload.path]
            counter = asserts.get(payload.index)
            if counter is None:
                raise UnknownIndex(payload.path, "b", payload.index)
            if kind is EventKind.ASSERT_PRE:
                counter.pre_events += 1
            else:
                counter.post_events += 1
        else:
            key = _COUNTER_KEY[kind]
            counters = entry[key]
            if payload.index not in counters:
                raise UnknownIndex(payload.path, key, payload.index)
            counters[payload.index] += 1

        self.stats.processed += 1
        self.stats.by_kind[kind.name.lower()] += 1
        return kind

    def consume(self, events: Iterable[EventRecord]) -> int:
        """依次处理 events，返回处理的记录条数（含未知事件）。"""
        n = 0
        for record in events:
            self.process_event(record)
            n += 1
        return n

    def finalize(self) -> Dict[str, Dict[str, Any]]:
        """执行 assert 重解释（仅一次）并返回最终覆盖映射的深拷贝。

        对 pre_events > 0 的分支，b[i] 改写为
        [post_events, pre_events - post_events]，即 “assert 成立次数” 与
        “求值但未成立次数”。其余分支保持累加结果。
        """
        if not self.finalized:
            for path, asserts in self.assert_coverage.items():
                branches = self.coverage[path]["b"]
                for idx, counter in asserts.items():
                    if counter.pre_events > 0:
                        branches[idx] = [counter.post_events,
                                         counter.pre_events - counter.post_events]
                        self.stats.reinterpreted += 1
            # assert 计数只在会话内使用，重解释后丢弃
            self.assert_coverage = {}
            self._final = self.coverage
        return copy.deepcopy(self._final)

    def generate(self, events: Iterable[EventRecord]) -> Dict[str, Dict[str, Any]]:
        """消费全部事件并返回最终覆盖映射。"""
        self.consume(events)
        return self.finalize()

    def export_stats(self, path: str) -> str:
        """把诊断计数导出为 JSON 文件，返回文件路径。"""
        with open(path, "w", encoding="utf-8") as f:
            json.dump(asdict(self.stats), f, ensure_ascii=False, indent=2)
        return path


__all__ = ["CoverageSession", "SessionStats"]
