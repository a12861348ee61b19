"""递归目录遍历：按 FilterSpec 列出根目录下全部可选中的文件路径。"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterator, List, Optional, Union

from .errors import DirectoryEnumerationError
from .path_filter import FileEntry, FilterSpec, accepts, is_excluded, to_entry


class TreeWalker:
    """深度优先遍历目录树。

    - 每个目录只读取一次（``os.scandir``），子项按文件系统返回的顺序处理，不做全局排序。
    - 被排除的名称直接跳过：不递归、不选中，也不会列出其子项。
    - 只递归真实目录，不跟随指向目录的符号链接，因此无需环检测，也没有深度上限。
    - 目录无法列出时视为空子树，遍历继续。

    用显式栈保存各层目录的迭代器代替递归调用，顺序与递归版本完全一致。
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)
        if not self.logger.handlers and not logging.getLogger().handlers:
            self.logger.addHandler(logging.StreamHandler())
            self.logger.setLevel(logging.INFO)

    def _list_dir(self, path: str) -> List[FileEntry]:
        try:
            with os.scandir(path) as it:
                raw = list(it)
        except OSError as e:
            raise DirectoryEnumerationError(path, e) from e
        entries = []
        for d in raw:
            entry = to_entry(d)
            if entry is not None:
                entries.append(entry)
        return entries

    def _children(self, path: str) -> Iterator[FileEntry]:
        try:
            return iter(self._list_dir(path))
        except DirectoryEnumerationError as e:
            self.logger.debug(f"{e}，按空目录处理")
            return iter(())

    def iter_paths(self, root: Union[str, Path], spec: FilterSpec) -> Iterator[str]:
        """逐个产出选中的文件路径（根路径字符串与子项名称拼接而成）。"""
        stack = [self._children(os.fspath(root))]
        while stack:
            entry = next(stack[-1], None)
            if entry is None:
                stack.pop()
                continue
            if is_excluded(entry.name, spec.excluded_names):
                self.logger.debug(f"已排除: {entry.path}")
                continue
            if entry.is_dir:
                stack.append(self._children(entry.path))
            elif accepts(entry, spec):
                yield entry.path

    def walk(self, root: Union[str, Path], spec: FilterSpec) -> List[str]:
        paths = list(self.iter_paths(root, spec))
        self.logger.debug(f"遍历完成: {root}，选中 {len(paths)} 个文件")
        return paths


def walk(root: Union[str, Path], spec: FilterSpec) -> List[str]:
    return TreeWalker().walk(root, spec)
