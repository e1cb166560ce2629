"""事件 topic 注册表。

每个被插装的合约会发出六种覆盖事件（行/函数/分支/语句/assert 前/assert 后），
事件的第一个 topic 是事件签名的 Keccak-256 哈希：

    keccak256("__Coverage" + contractName + "(string,uint256)")

注册表负责：
- 为合约推导六个 topic 并登记到 `hash -> EventKind` 查找表（分类时 O(1) 查询）；
- 按种类保存有序的 topic 列表；
- 把六个 topic（每个一行）追加写入旁路通道（sink），供外部事件生产者核对。

写入是同步、只追加的，不做回滚。
"""
from __future__ import annotations

import enum
import os
from typing import Dict, List, Set

from Crypto.Hash import keccak

from ..core.errors import DuplicateContract, InvalidContract


class EventKind(enum.Enum):
    """六种覆盖事件。声明顺序即歧义分类时的优先级。"""

    LINE = ("__Coverage", ("string", "uint256"))
    FUNCTION = ("__FunctionCoverage", ("string", "uint256"))
    BRANCH = ("__BranchCoverage", ("string", "uint256", "uint256"))
    STATEMENT = ("__StatementCoverage", ("string", "uint256"))
    ASSERT_PRE = ("__AssertPreCoverage", ("string", "uint256"))
    ASSERT_POST = ("__AssertPostCoverage", ("string", "uint256"))

    def __init__(self, prefix: str, types: tuple) -> None:
        self.prefix = prefix
        self.types = types

    def signature(self, contract_name: str) -> str:
        return f"{self.prefix}{contract_name}({','.join(self.types)})"

    @property
    def order(self) -> int:
        return _KIND_ORDER[self]


_KIND_ORDER = {kind: i for i, kind in enumerate(EventKind)}


def keccak_hex(text: str) -> str:
    """返回 text（UTF-8）的 Keccak-256 十六进制摘要（小写，无 0x 前缀）。"""
    h = keccak.new(digest_bits=256)
    h.update(text.encode("utf-8"))
    return h.hexdigest()


def normalize_topic(topic: str) -> str:
    """统一 topic 表示：去掉 0x 前缀并转小写。"""
    t = str(topic).strip().lower()
    if t.startswith("0x"):
        t = t[2:]
    return t


class FileTopicSink:
    """把 topic 追加写入文件的 sink（每次 append 都同步落盘）。"""

    def __init__(self, path: str) -> None:
        self.path = path

    def append(self, data: bytes) -> None:
        parent = os.path.dirname(self.path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        with open(self.path, "ab") as f:
            f.write(data)
            f.flush()


class MemoryTopicSink:
    """内存 sink，测试时替代文件。"""

    def __init__(self) -> None:
        self.buffer = bytearray()

    def append(self, data: bytes) -> None:
        self.buffer.extend(data)

    def getvalue(self) -> bytes:
        return bytes(self.buffer)


class TopicRegistry:
    """会话级 topic 注册表。

    参数：
    - sink: 任何提供 `append(data: bytes)` 的对象
    """

    def __init__(self, sink) -> None:
        self.sink = sink
        self.topics: Dict[EventKind, List[str]] = {kind: [] for kind in EventKind}
        self._lookup: Dict[str, EventKind] = {}
        self._paths: Set[str] = set()

    def register(self, contract_name: str, canonical_path: str) -> Dict[EventKind, str]:
        """为合约推导并发布六个 topic，返回 {EventKind: topic}。"""
        if not contract_name:
            raise InvalidContract(f"{canonical_path}: contract name must not be empty")
        if canonical_path in self._paths:
            raise DuplicateContract(canonical_path)

        hashes = {kind: keccak_hex(kind.signature(contract_name)) for kind in EventKind}
        self._paths.add(canonical_path)
        for kind, topic in hashes.items():
            self.topics[kind].append(topic)
            self._lookup[topic] = kind

        # 与事件生产者约定的格式：六行，按种类声明顺序
        payload = "".join(f"{hashes[kind]}\n" for kind in EventKind)
        self.sink.append(payload.encode("ascii"))
        return hashes

    def kind_of(self, topic: str):
        """查找 topic 对应的事件种类，未登记则返回 None。"""
        return self._lookup.get(normalize_topic(topic))

    def is_registered(self, canonical_path: str) -> bool:
        return canonical_path in self._paths

    def __len__(self) -> int:
        return len(self._paths)


__all__ = [
    "EventKind",
    "keccak_hex",
    "normalize_topic",
    "FileTopicSink",
    "MemoryTopicSink",
    "TopicRegistry",
]
