"""替换引擎：对选中的文件逐个执行正则替换，内容有变化时才写回。

替换模板语法
------------
- ``$N`` / ``${N}``：第 N 个捕获分组的文本（``$0`` 为整个匹配）；未参与匹配的分组替换为空串。
- ``${N}`` 用于与后面的数字分隔，例如 ``${1}0``。
- ``$$``：字面量 ``$``。
- 其他情况下 ``$`` 与反斜杠都按字面量处理。

分组编号在构造 SubstitutionRule 时就与表达式的分组数核对，越界直接抛 PatternCompileError，
此时还没有碰任何文件。
"""

from __future__ import annotations

import enum
import logging
import os
import re
import shutil
import tempfile
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from .errors import FileReadError, FileWriteError, PatternCompileError

_GROUP_REF = re.compile(r"\$(?:(\$)|(\d+)|\{(\d+)\})")

Segment = Union[str, int]


def parse_template(template: str) -> Tuple[Segment, ...]:
    """把模板拆成字面量字符串与分组编号交替的片段。"""
    segments: List[Segment] = []
    literal: List[str] = []
    pos = 0
    for m in _GROUP_REF.finditer(template):
        literal.append(template[pos:m.start()])
        pos = m.end()
        if m.group(1):
            literal.append("$")
            continue
        if literal:
            text = "".join(literal)
            if text:
                segments.append(text)
            literal = []
        segments.append(int(m.group(2) or m.group(3)))
    literal.append(template[pos:])
    text = "".join(literal)
    if text:
        segments.append(text)
    return tuple(segments)


class SubstitutionRule:
    """编译后的搜索表达式 + 替换模板，创建后不可变。"""

    __slots__ = ("_pattern", "_template", "_segments")

    def __init__(self, pattern: Union[str, "re.Pattern[str]"], template: str):
        source = pattern if isinstance(pattern, str) else pattern.pattern
        try:
            compiled = re.compile(pattern) if isinstance(pattern, str) else pattern
        except re.error as e:
            raise PatternCompileError(f"无效的搜索表达式 {source!r}: {e}", source, template) from e
        segments = parse_template(template)
        for seg in segments:
            if isinstance(seg, int) and seg > compiled.groups:
                raise PatternCompileError(
                    f"替换模板引用了不存在的分组 ${seg}（表达式只有 {compiled.groups} 个分组）",
                    source,
                    template,
                )
        self._pattern = compiled
        self._template = template
        self._segments = segments

    @property
    def pattern(self) -> "re.Pattern[str]":
        return self._pattern

    @property
    def template(self) -> str:
        return self._template

    def expand(self, match: "re.Match[str]") -> str:
        out = []
        for seg in self._segments:
            if isinstance(seg, int):
                out.append(match.group(seg) or "")
            else:
                out.append(seg)
        return "".join(out)

    def apply(self, content: str) -> Tuple[str, int]:
        """返回 (替换后的文本, 替换次数)。"""
        return self._pattern.subn(self.expand, content)

    def __repr__(self) -> str:
        return f"SubstitutionRule({self._pattern.pattern!r}, {self._template!r})"


class FileStatus(enum.Enum):
    CHANGED = "changed"
    UNCHANGED = "unchanged"
    ERROR = "error"


@dataclass
class FileResult:
    """单个文件的处理结果。"""

    path: str
    status: FileStatus
    replacements: int = 0
    error: str = ""

    def __str__(self) -> str:
        if self.status is FileStatus.CHANGED:
            return f"[OK]   {self.path}  repl={self.replacements}"
        if self.status is FileStatus.UNCHANGED:
            return f"[SAME] {self.path}"
        return f"[ERR]  {self.path}  {self.error}"


@dataclass
class Summary:
    """一次批量替换的结果，按处理顺序保存。"""

    results: List[FileResult] = field(default_factory=list)

    def _count(self, status: FileStatus) -> int:
        return sum(1 for r in self.results if r.status is status)

    @property
    def count_changed(self) -> int:
        return self._count(FileStatus.CHANGED)

    @property
    def count_unchanged(self) -> int:
        return self._count(FileStatus.UNCHANGED)

    @property
    def count_errors(self) -> int:
        return self._count(FileStatus.ERROR)

    @property
    def total_replacements(self) -> int:
        return sum(r.replacements for r in self.results)

    @property
    def errors(self) -> List[FileResult]:
        return [r for r in self.results if r.status is FileStatus.ERROR]

    def as_dict(self) -> Dict[str, Any]:
        return {
            "changed": [r.path for r in self.results if r.status is FileStatus.CHANGED],
            "unchanged": [r.path for r in self.results if r.status is FileStatus.UNCHANGED],
            "errors": [{"path": r.path, "error": r.error} for r in self.errors],
            "count_changed": self.count_changed,
            "count_unchanged": self.count_unchanged,
            "count_errors": self.count_errors,
            "total_replacements": self.total_replacements,
        }


class SubstitutionEngine:
    """按 PathList 顺序逐个处理文件。

    每个文件独立：读取失败或写入失败只记录在该文件的结果里，不影响后续文件，
    也不会回滚已经写入的文件。替换结果与原内容完全相同时不写回（幂等，不改动修改时间）。
    """

    def __init__(self, atomic_write: bool = True, logger: Optional[logging.Logger] = None):
        self.atomic_write = atomic_write
        self.logger = logger or logging.getLogger(__name__)
        if not self.logger.handlers and not logging.getLogger().handlers:
            self.logger.addHandler(logging.StreamHandler())
            self.logger.setLevel(logging.INFO)

    # 读取：严格 UTF-8，不做换行转换
    def read_text(self, path: str) -> str:
        try:
            with open(path, "r", encoding="utf-8", newline="") as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise FileReadError(path, e) from e

    # 写入：整体替换文件内容
    def write_text(self, path: str, text: str) -> None:
        try:
            if self.atomic_write:
                self._write_atomic(path, text)
            else:
                with open(path, "w", encoding="utf-8", newline="") as f:
                    f.write(text)
        except (OSError, UnicodeError) as e:
            raise FileWriteError(path, e) from e

    def _write_atomic(self, path: str, text: str) -> None:
        directory = os.path.dirname(path) or "."
        fd, tmp = tempfile.mkstemp(prefix=".textsub-", suffix=".tmp", dir=directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
                f.write(text)
            shutil.copymode(path, tmp)
            os.replace(tmp, path)
        except BaseException:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise

    def process_file(self, path: str, rule: SubstitutionRule) -> FileResult:
        try:
            content = self.read_text(path)
        except FileReadError as e:
            self.logger.error(str(e))
            return FileResult(path, FileStatus.ERROR, error=str(e))

        output, count = rule.apply(content)
        if output == content:
            self.logger.debug(f"内容未变化，跳过写入: {path}")
            return FileResult(path, FileStatus.UNCHANGED)

        try:
            self.write_text(path, output)
        except FileWriteError as e:
            self.logger.error(str(e))
            return FileResult(path, FileStatus.ERROR, replacements=0, error=str(e))
        self.logger.info(f"已替换: {path} ({count} 处)")
        return FileResult(path, FileStatus.CHANGED, replacements=count)

    def apply(self, paths: Iterable[str], rule: SubstitutionRule) -> Summary:
        summary = Summary()
        for path in paths:
            summary.results.append(self.process_file(path, rule))
        return summary
