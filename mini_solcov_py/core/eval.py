"""
评估组件：覆盖率汇总

把最终覆盖映射汇总为每个合约的 命中数/总数/百分比，并导出为 CSV 以便绘图或进一步分析。
分支按“臂”计数：每个分支贡献两个臂，命中次数 > 0 的臂计为已覆盖。
"""
from __future__ import annotations

import csv
from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Mapping, Tuple


@dataclass
class SummaryRow:
    path: str
    lines_covered: int
    lines_total: int
    functions_covered: int
    functions_total: int
    statements_covered: int
    statements_total: int
    branches_covered: int
    branches_total: int

    @staticmethod
    def pct(covered: int, total: int) -> float:
        # 没有可统计实体时视为全覆盖，与 istanbul 一致
        return 100.0 if total == 0 else 100.0 * covered / total

    @property
    def lines_pct(self) -> float:
        return self.pct(self.lines_covered, self.lines_total)

    @property
    def functions_pct(self) -> float:
        return self.pct(self.functions_covered, self.functions_total)

    @property
    def statements_pct(self) -> float:
        return self.pct(self.statements_covered, self.statements_total)

    @property
    def branches_pct(self) -> float:
        return self.pct(self.branches_covered, self.branches_total)


def _hits(counters: Mapping[Any, int]) -> Tuple[int, int]:
    return sum(1 for v in counters.values() if v > 0), len(counters)


def coverage_summary(coverage: Mapping[str, Mapping[str, Any]]) -> List[SummaryRow]:
    """按路径排序返回每个合约的汇总行。"""
    rows: List[SummaryRow] = []
    for path in sorted(coverage):
        entry = coverage[path]
        lc, lt = _hits(entry["l"])
        fc, ft = _hits(entry["f"])
        sc, st = _hits(entry["s"])
        arms = [hits for pair in entry["b"].values() for hits in pair]
        bc = sum(1 for v in arms if v > 0)
        rows.append(SummaryRow(path=path,
                               lines_covered=lc, lines_total=lt,
                               functions_covered=fc, functions_total=ft,
                               statements_covered=sc, statements_total=st,
                               branches_covered=bc, branches_total=len(arms)))
    return rows


def totals(rows: List[SummaryRow]) -> SummaryRow:
    """把多行汇总合并为一行（path 为 "All files"）。"""
    acc: Dict[str, int] = {}
    for r in rows:
        for k, v in asdict(r).items():
            if k != "path":
                acc[k] = acc.get(k, 0) + v
    if not acc:
        acc = {k: 0 for k in asdict(SummaryRow("", 0, 0, 0, 0, 0, 0, 0, 0)) if k != "path"}
    return SummaryRow(path="All files", **acc)


SUMMARY_COLUMNS = ["path", "lines_pct", "functions_pct", "statements_pct", "branches_pct",
                   "lines", "functions", "statements", "branches"]


def export_summary_csv(rows: List[SummaryRow], path: str) -> None:
    """导出汇总 CSV；计数列格式为 `covered/total`。"""
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(SUMMARY_COLUMNS)
        for r in rows:
            writer.writerow([r.path,
                             f"{r.lines_pct:.2f}", f"{r.functions_pct:.2f}",
                             f"{r.statements_pct:.2f}", f"{r.branches_pct:.2f}",
                             f"{r.lines_covered}/{r.lines_total}",
                             f"{r.functions_covered}/{r.functions_total}",
                             f"{r.statements_covered}/{r.statements_total}",
                             f"{r.branches_covered}/{r.branches_total}"])


__all__ = ["SummaryRow", "coverage_summary", "totals", "export_summary_csv", "SUMMARY_COLUMNS"]
