"""
instrumentation 子模块

与插装产物对接的一层：事件 topic 的推导与发布、事件 data 的定长二进制解码、
以及根据插装元数据构建全零覆盖条目。
"""

__all__ = [
    "topics",
    "abi",
    "coverage",
]
