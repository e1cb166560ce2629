"""事件与合约元数据文件的加载。

事件文件支持两种形式：
- JSON lines：每行一个 `{"topics": [...], "data": "0x..."}`，空行跳过；
- 单个 JSON 数组。
合约文件为 JSON 对象：规范路径 -> 插装元数据。
"""
from __future__ import annotations

import json
from typing import Dict, Iterator, List

from ..core.classifier import EventRecord
from ..instrumentation.coverage import InstrumentationInfo


def parse_events(text: str) -> List[EventRecord]:
    stripped = text.lstrip()
    if stripped.startswith("["):
        return [EventRecord.from_obj(obj) for obj in json.loads(stripped)]
    return list(iter_event_lines(text.splitlines()))


def iter_event_lines(lines) -> Iterator[EventRecord]:
    for lineno, line in enumerate(lines, 1):
        line = line.strip()
        if not line:
            continue
        try:
            obj = json.loads(line)
        except json.JSONDecodeError as e:
            raise ValueError(f"line {lineno}: invalid JSON event record: {e}") from e
        yield EventRecord.from_obj(obj)


def load_events(path: str) -> List[EventRecord]:
    with open(path, "r", encoding="utf-8") as f:
        return parse_events(f.read())


def load_contracts(path: str) -> Dict[str, InstrumentationInfo]:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"contracts file must map canonical paths to instrumentation info: {path}")
    return {p: InstrumentationInfo.from_dict(info) for p, info in data.items()}


__all__ = ["parse_events", "iter_event_lines", "load_events", "load_contracts"]
