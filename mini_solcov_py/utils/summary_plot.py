#!/usr/bin/env python3
"""
summary_plot.py

小工具：把覆盖汇总 CSV（`export_summary_csv` 的输出）画成分组柱状图。

用法示例:
  python -m mini_solcov_py.utils.summary_plot summary.csv -o coverage.png

每个合约一组柱子，分别为 lines / functions / statements / branches 的覆盖百分比。
"""
from __future__ import annotations
import argparse
import csv
import sys
from typing import Dict, List, Optional, Tuple

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

METRICS = ['lines_pct', 'functions_pct', 'statements_pct', 'branches_pct']


def parse_args(argv: Optional[list] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description='coverage summary CSV -> bar chart')
    p.add_argument('csvfile', help='输入汇总 CSV 文件路径')
    p.add_argument('-o', '--output', default='coverage_summary.png', help='输出文件，例如 out.png 或 out.pdf')
    p.add_argument('--metrics', default=','.join(METRICS), help='要绘制的列，多列用逗号分隔')
    p.add_argument('--title', default='Coverage by contract', help='图标题')
    p.add_argument('--dpi', type=int, default=150, help='输出分辨率 DPI')
    p.add_argument('--style', default=None, help='matplotlib style (例如 ggplot)')
    return p.parse_args(argv)


def read_summary(path: str, metrics: List[str]) -> Tuple[List[str], Dict[str, List[float]]]:
    with open(path, newline='', encoding='utf-8') as f:
        reader = csv.DictReader(f)
        rows = list(reader)
        fields = reader.fieldnames or []
    for m in metrics:
        if m not in fields:
            raise KeyError(f'找不到列: {m}')
    labels = [r['path'] for r in rows]
    series = {m: [float(r[m]) for r in rows] for m in metrics}
    return labels, series


def plot_summary(labels: List[str], series: Dict[str, List[float]], output: str,
                 title: str = '', dpi: int = 150, style: Optional[str] = None) -> None:
    if style:
        plt.style.use(style)
    fig, ax = plt.subplots(figsize=(max(6.0, 1.2 * len(labels) + 2), 4.5))
    n = max(1, len(series))
    width = 0.8 / n
    xs = list(range(len(labels)))
    for i, (name, values) in enumerate(series.items()):
        offs = [x - 0.4 + width * (i + 0.5) for x in xs]
        ax.bar(offs, values, width=width, label=name.replace('_pct', ''))
    ax.set_xticks(xs)
    ax.set_xticklabels(labels, rotation=30, ha='right')
    ax.set_ylim(0, 100)
    ax.set_ylabel('Coverage (%)')
    if title:
        ax.set_title(title)
    ax.grid(True, axis='y')
    ax.legend()
    fig.tight_layout()
    fig.savefig(output, dpi=dpi)
    plt.close(fig)


def main(argv: Optional[list] = None) -> int:
    args = parse_args(argv)
    metrics = [m.strip() for m in args.metrics.split(',') if m.strip()]
    try:
        labels, series = read_summary(args.csvfile, metrics)
    except (OSError, KeyError, ValueError) as e:
        print(f'error: {e}', file=sys.stderr)
        return 2
    if not labels:
        print('CSV 内容为空或无法读取', file=sys.stderr)
        return 2
    plot_summary(labels, series, args.output, title=args.title, dpi=args.dpi, style=args.style)
    print(f'plot written to: {args.output}')
    return 0


if __name__ == '__main__':
    sys.exit(main())
