"""utils 子模块：配置、事件加载与绘图工具。"""

__all__ = [
    "config",
    "events_io",
    "summary_plot",
]
