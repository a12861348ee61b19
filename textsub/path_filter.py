"""路径过滤器：判断单个目录项是否可遍历（目录）或可选中（文件）。

规则
----
- 排除只看最后一级名称（文件名或目录名），与深度无关；被排除的目录整棵子树都被剪掉。
- 扩展名取最后一个 ``.`` 之后的部分，区分大小写，精确匹配，不做通配。
- 既不是目录也不是普通文件的条目（符号链接、套接字等）一律跳过。
- 无法判定类型的条目（权限错误、竞争删除）也直接跳过，这是刻意保留的策略。
"""

from __future__ import annotations

import enum
import logging
import os
from dataclasses import dataclass
from typing import AbstractSet, FrozenSet, Iterable, Optional

logger = logging.getLogger(__name__)


class EntryKind(enum.Enum):
    DIRECTORY = "directory"
    FILE = "file"
    OTHER = "other"


@dataclass(frozen=True)
class FilterSpec:
    """一次遍历使用的过滤条件，遍历期间不可变。"""

    included_extensions: FrozenSet[str] = frozenset()
    excluded_names: FrozenSet[str] = frozenset()

    @classmethod
    def of(cls, included_extensions: Iterable[str], excluded_names: Iterable[str] = ()) -> "FilterSpec":
        return cls(frozenset(included_extensions), frozenset(excluded_names))


@dataclass(frozen=True)
class FileEntry:
    """带缓存类型的路径，仅在遍历过程中临时存在。"""

    path: str
    name: str
    kind: EntryKind

    @property
    def is_dir(self) -> bool:
        return self.kind is EntryKind.DIRECTORY

    @property
    def is_file(self) -> bool:
        return self.kind is EntryKind.FILE


def is_excluded(name: str, excluded_names: AbstractSet[str]) -> bool:
    return name in excluded_names


def extension_of(name: str) -> Optional[str]:
    """返回最后一个 ``.`` 之后的子串；没有 ``.`` 时返回 None。

    以 ``.`` 开头且只有这一个点的名称（如 ``.bashrc``）视为没有扩展名。
    """
    base = os.path.basename(name)
    idx = base.rfind(".")
    if idx <= 0:
        return None
    return base[idx + 1:]


def classify(dir_entry: os.DirEntry) -> Optional[EntryKind]:
    """不跟随符号链接地判定目录项类型；判定失败返回 None。"""
    try:
        if dir_entry.is_symlink():
            return EntryKind.OTHER
        if dir_entry.is_dir(follow_symlinks=False):
            return EntryKind.DIRECTORY
        if dir_entry.is_file(follow_symlinks=False):
            return EntryKind.FILE
        return EntryKind.OTHER
    except OSError as e:
        logger.debug(f"无法判定类型，跳过: {dir_entry.path} ({e})")
        return None


def to_entry(dir_entry: os.DirEntry) -> Optional[FileEntry]:
    kind = classify(dir_entry)
    if kind is None:
        return None
    return FileEntry(path=dir_entry.path, name=dir_entry.name, kind=kind)


def is_selectable(entry: FileEntry, included_extensions: AbstractSet[str]) -> bool:
    if not entry.is_file:
        return False
    ext = extension_of(entry.name)
    return ext is not None and ext in included_extensions


def is_traversable(entry: FileEntry, spec: FilterSpec) -> bool:
    return entry.is_dir and not is_excluded(entry.name, spec.excluded_names)


def accepts(entry: FileEntry, spec: FilterSpec) -> bool:
    """文件在 PathList 中出现的完整条件：未被排除且扩展名命中。"""
    return not is_excluded(entry.name, spec.excluded_names) and is_selectable(entry, spec.included_extensions)
