"""
事件分类器

把一条原始事件记录映射到六种覆盖事件之一。分类只看 topic：
- 没有任何 topic 命中注册表：未知事件，返回 kind=None（调用方丢弃，不是错误）；
- 多个种类同时命中：按 EventKind 声明顺序取第一个，并标记 ambiguous。
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple, Union

from ..instrumentation.abi import hex_to_bytes
from ..instrumentation.topics import EventKind, TopicRegistry


@dataclass(frozen=True)
class EventRecord:
    """一条运行期事件：topic 哈希集合 + 编码后的 data。"""

    topics: Tuple[str, ...]
    data: bytes

    @classmethod
    def from_obj(cls, obj: Mapping[str, Any]) -> "EventRecord":
        """从 `{"topics": [...], "data": "0x..."}` 形式的对象构建。

        data 可以是十六进制文本、bytes 或字节值列表；形状不符抛出 ValueError。
        """
        if not isinstance(obj, Mapping):
            raise ValueError(f"event record must be a JSON object, got {type(obj).__name__}")
        topics = obj.get("topics", [])
        if topics is None:
            topics = []
        if not isinstance(topics, (list, tuple)):
            raise ValueError(f"event topics must be a list, got {type(topics).__name__}")
        raw: Union[str, bytes, list, None] = obj.get("data", b"")
        if raw is None:
            data = b""
        elif isinstance(raw, str):
            data = hex_to_bytes(raw)
        elif isinstance(raw, (bytes, bytearray, list, tuple)):
            data = bytes(raw)
        else:
            raise ValueError(f"event data must be hex text or bytes, got {type(raw).__name__}")
        return cls(topics=tuple(str(t) for t in topics), data=data)


@dataclass(frozen=True)
class ClassifyResult:
    kind: Optional[EventKind]
    ambiguous: bool = False


def classify(record: EventRecord, registry: TopicRegistry) -> ClassifyResult:
    matched = set()
    for topic in record.topics:
        kind = registry.kind_of(topic)
        if kind is not None:
            matched.add(kind)
    if not matched:
        return ClassifyResult(kind=None)
    first = min(matched, key=lambda k: k.order)
    return ClassifyResult(kind=first, ambiguous=len(matched) > 1)


__all__ = ["EventRecord", "ClassifyResult", "classify"]
