"""
mini_solcov_py

Solidity 覆盖映射（coverage map）构建包入口。

实现分散在子模块中：
- instrumentation: 事件 topic 注册、事件数据解码、覆盖条目初始化
- core: 错误类型、事件分类器、覆盖会话（累加 + assert 重解释）与评估
- utils: 配置、事件文件加载与汇总绘图
- cli: 命令行入口
"""

__all__ = [
    "core",
    "instrumentation",
    "utils",
    "cli",
]

__version__ = "0.1.0"
