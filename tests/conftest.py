"""Shared fixtures for the coverage map tests."""

from __future__ import annotations

import pytest

from mini_solcov_py.core.classifier import EventRecord
from mini_solcov_py.core.session import CoverageSession
from mini_solcov_py.instrumentation.abi import encode_payload
from mini_solcov_py.instrumentation.coverage import InstrumentationInfo
from mini_solcov_py.instrumentation.topics import EventKind, MemoryTopicSink, keccak_hex


def make_info(name: str = "Simple", lines=(3, 5, 7), fns: int = 2, branches: int = 3,
              statements: int = 4) -> InstrumentationInfo:
    return InstrumentationInfo(
        contract_name=name,
        runnable_lines=list(lines),
        fn_map={i: {"name": f"fn{i}", "line": i} for i in range(1, fns + 1)},
        branch_map={i: {"line": 10 + i, "type": "if"} for i in range(1, branches + 1)},
        statement_map={i: {"start": {"line": i}, "end": {"line": i}} for i in range(1, statements + 1)},
    )


def make_event(kind: EventKind, contract_name: str, path: str, index: int, arm=None,
               extra_topics=()) -> EventRecord:
    topic = "0x" + keccak_hex(kind.signature(contract_name))
    return EventRecord(topics=(topic,) + tuple(extra_topics),
                       data=encode_payload(kind, path, index, arm))


@pytest.fixture
def sink() -> MemoryTopicSink:
    return MemoryTopicSink()


@pytest.fixture
def session(sink) -> CoverageSession:
    s = CoverageSession(sink=sink)
    s.add_contract(make_info("Simple"), "contracts/Simple.sol")
    return s
