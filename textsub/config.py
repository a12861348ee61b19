"""textsub 默认配置与日志设置。

非交互模式下的参数要么来自命令行，要么直接构造 ReplaceConfig::

    from textsub.config import ReplaceConfig
    from textsub.pipeline import ReplacePipeline

    cfg = ReplaceConfig(root="src", pattern=r"Constants\\.c(\\d+)\\.rawValue", replacement="Constants.c$1")
    ReplacePipeline().run(cfg)
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable

# ===================================================================
# 默认值
# ===================================================================

DEFAULT_ROOT = "src"
DEFAULT_INCLUDED_EXTENSIONS: FrozenSet[str] = frozenset({"swift", "txt"})
DEFAULT_EXCLUDED_NAMES: FrozenSet[str] = frozenset({"private"})
DEFAULT_PATTERN = r"Constants\.c(\d+)\.rawValue"
DEFAULT_REPLACEMENT = "Constants.c$1"

LOG_FORMAT = "%(asctime)s  %(levelname)-5s  %(message)s"
LOG_DATEFMT = "%H:%M:%S"


@dataclass(frozen=True)
class ReplaceConfig:
    """一次批量替换所需的全部参数。"""

    root: str = DEFAULT_ROOT
    included_extensions: FrozenSet[str] = field(default_factory=lambda: DEFAULT_INCLUDED_EXTENSIONS)
    excluded_names: FrozenSet[str] = field(default_factory=lambda: DEFAULT_EXCLUDED_NAMES)
    pattern: str = DEFAULT_PATTERN
    replacement: str = DEFAULT_REPLACEMENT
    atomic_write: bool = True      # 先写临时文件再 os.replace
    print_paths: bool = False      # 处理前按顺序打印选中的路径

    def __post_init__(self) -> None:
        # 允许传入 list/set，统一冻结
        object.__setattr__(self, "included_extensions", frozenset(self.included_extensions))
        object.__setattr__(self, "excluded_names", frozenset(self.excluded_names))


def split_names(raw: str) -> FrozenSet[str]:
    """把 ``"a, b c"`` 这类输入按逗号拆成名称集合（``{"a", "b c"}``），去掉首尾空白并忽略空项。"""
    parts = (p.strip() for p in raw.split(","))
    return frozenset(p for p in parts if p)


def split_extensions(raw: str) -> FrozenSet[str]:
    """同 split_names，但去掉每项开头的一个 ``.``（``.swift`` 与 ``swift`` 等价）。"""
    return normalize_extensions(split_names(raw))


def normalize_extensions(exts: Iterable[str]) -> FrozenSet[str]:
    return frozenset(e[1:] if e.startswith(".") else e for e in exts)


def setup_logging(verbose: bool = False) -> None:
    """配置简洁的控制台日志（输出到 stderr），若根 logger 已有 handler 则只调整级别。"""
    root = logging.getLogger()
    level = logging.DEBUG if verbose else logging.INFO
    if root.handlers:
        root.setLevel(level)
        return
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT))
    root.addHandler(handler)
    root.setLevel(level)
