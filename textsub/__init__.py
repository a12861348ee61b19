"""textsub - 递归正则批量替换工具

按扩展名与排除名称筛选目录树中的文件，对文件内容执行正则替换，内容变化时写回。
"""

__version__ = "0.1.0"
__author__ = "textsub Team"
__description__ = "递归正则批量替换工具"

from .errors import (
    DirectoryEnumerationError,
    FileReadError,
    FileWriteError,
    FormCancelled,
    PatternCompileError,
    TextSubError,
)
from .path_filter import EntryKind, FileEntry, FilterSpec
from .tree_walker import TreeWalker
from .substitution import FileResult, FileStatus, SubstitutionEngine, SubstitutionRule, Summary
from .form import FormState, ParameterForm, Parameters
from .config import ReplaceConfig
from .pipeline import ReplacePipeline

__all__ = [
    "TextSubError", "PatternCompileError", "DirectoryEnumerationError",
    "FileReadError", "FileWriteError", "FormCancelled",
    "EntryKind", "FileEntry", "FilterSpec", "TreeWalker",
    "FileResult", "FileStatus", "SubstitutionEngine", "SubstitutionRule", "Summary",
    "FormState", "ParameterForm", "Parameters",
    "ReplaceConfig", "ReplacePipeline",
]
