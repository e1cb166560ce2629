"""
配置模块

提供默认配置与基于 JSON 文件的加载接口；命令行参数优先于配置文件。
"""
from __future__ import annotations

import json

DEFAULTS = {
    # 与事件生产者共享的 topic 旁路文件（只追加）
    "topics_file": "scTopics",
    # 输出给报告渲染器的覆盖映射
    "coverage_out": "coverage.json",
    # 可选：汇总 CSV 与会话诊断计数的输出路径（None 表示不输出）
    "summary_csv": None,
    "stats_out": None,
}


def load_config(path: str | None = None) -> dict:
    """返回 DEFAULTS 的副本，并用 JSON 文件中的值覆盖。

    未知配置项视为错误（ValueError），避免拼写错误被静默忽略。
    """
    cfg = DEFAULTS.copy()
    if not path:
        return cfg
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"config file must contain a JSON object: {path}")
    unknown = sorted(set(data) - set(DEFAULTS))
    if unknown:
        raise ValueError(f"unknown config keys in {path}: {', '.join(unknown)}")
    cfg.update(data)
    return cfg
