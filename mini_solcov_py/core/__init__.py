"""
core 子模块

覆盖会话核心：错误类型、事件分类、计数累加与 assert 事件重解释。
"""

__all__ = [
    "errors",
    "classifier",
    "session",
    "eval",
]
