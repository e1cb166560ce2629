"""mini_solcov_py - 覆盖映射构建入口模块。
"""
from __future__ import annotations

import sys
import argparse
import json
from typing import Optional
from pathlib import Path

from .core.session import CoverageSession
from .core.errors import CoverageMapError
from .core.eval import coverage_summary, export_summary_csv, totals
from .instrumentation.topics import FileTopicSink
from .utils.config import load_config
from .utils.events_io import load_contracts, load_events


def parse_args(argv: Optional[list] = None) -> argparse.Namespace:
	parser = argparse.ArgumentParser(description="mini_solcov_py - build an istanbul coverage map from coverage events")
	parser.add_argument("--contracts", required=True, help="JSON file mapping canonical contract paths to instrumentation info")
	parser.add_argument("--events", required=True, help="event records file (JSON lines or a JSON array)")
	parser.add_argument("--config", help="JSON config file (see utils/config.py DEFAULTS)")
	parser.add_argument("--topics-file", help="append-only topic side-channel file")
	parser.add_argument("--out", help="coverage JSON output path")
	parser.add_argument("--summary-csv", help="optional per-contract summary CSV output path")
	parser.add_argument("--stats-out", help="optional session diagnostics JSON output path")
	return parser.parse_args(argv)


def run(contracts_path: Path, events_path: Path, cfg: dict) -> int:
	"""构建覆盖映射：注册合约 -> 消费事件 -> assert 重解释 -> 写出结果。

	任何 CoverageMapError 都会终止本次运行且不写出覆盖文件。
	"""
	contracts = load_contracts(str(contracts_path))
	events = load_events(str(events_path))
	print(f"loaded {len(contracts)} contracts, {len(events)} event records")

	session = CoverageSession(sink=FileTopicSink(cfg["topics_file"]))
	for path, info in contracts.items():
		session.add_contract(info, path)
	print(f"topics published to: {cfg['topics_file']}")

	coverage = session.generate(events)

	out_path = Path(cfg["coverage_out"])
	if out_path.parent and not out_path.parent.exists():
		out_path.parent.mkdir(parents=True, exist_ok=True)
	with open(out_path, "w", encoding="utf-8") as f:
		json.dump(coverage, f, ensure_ascii=False, indent=2)
	print(f"coverage map written to: {out_path}")

	rows = coverage_summary(coverage)
	if cfg.get("summary_csv"):
		export_summary_csv(rows, cfg["summary_csv"])
		print(f"coverage summary exported to: {cfg['summary_csv']}")
	if cfg.get("stats_out"):
		session.export_stats(cfg["stats_out"])
		print(f"session stats exported to: {cfg['stats_out']}")

	# 打印简要汇总信息
	st = session.stats
	all_rows = totals(rows)
	print("======== coverage summary ========")
	print(f"  events processed: {st.processed}, unknown: {st.unknown}, ambiguous: {st.ambiguous}")
	print(f"  assert branches: {st.reinterpreted}")
	print(f"  lines: {all_rows.lines_pct:.2f}% ({all_rows.lines_covered}/{all_rows.lines_total})")
	print(f"  functions: {all_rows.functions_pct:.2f}% ({all_rows.functions_covered}/{all_rows.functions_total})")
	print(f"  statements: {all_rows.statements_pct:.2f}% ({all_rows.statements_covered}/{all_rows.statements_total})")
	print(f"  branches: {all_rows.branches_pct:.2f}% ({all_rows.branches_covered}/{all_rows.branches_total})")
	print("==================================")
	return 0


def main(argv: Optional[list] = None) -> int:
	"""解析命令行参数、做基本校验后构建覆盖映射。"""
	args = parse_args(argv)

	contracts_path = Path(args.contracts)
	events_path = Path(args.events)

	if not contracts_path.is_file():
		print(f"error: contracts file not found: {contracts_path}", file=sys.stderr)
		return 2
	if not events_path.is_file():
		print(f"error: events file not found: {events_path}", file=sys.stderr)
		return 3

	try:
		cfg = load_config(args.config)
	except (OSError, ValueError) as e:
		print(f"error: cannot load config {args.config}: {e}", file=sys.stderr)
		return 4

	# 命令行参数覆盖配置文件
	for key in ("topics_file", "summary_csv", "stats_out"):
		val = getattr(args, key)
		if val:
			cfg[key] = val
	if args.out:
		cfg["coverage_out"] = args.out

	try:
		return run(contracts_path, events_path, cfg)
	except CoverageMapError as e:
		print(f"error: coverage run aborted: {e}", file=sys.stderr)
		return 1
	except ValueError as e:
		print(f"error: malformed input: {e}", file=sys.stderr)
		return 5


if __name__ == "__main__":
	sys.exit(main())
