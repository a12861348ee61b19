"""textsub 异常类型。

只有 PatternCompileError 会中止整次运行；其余文件系统错误都在单个文件/目录范围内被捕获并记录。
"""

from typing import Optional


class TextSubError(Exception):
    """textsub 所有异常的基类。"""


class PatternCompileError(TextSubError, ValueError):
    """搜索表达式无法编译，或替换模板引用了不存在的分组。"""

    def __init__(self, message: str, pattern: str = "", template: Optional[str] = None):
        super().__init__(message)
        self.pattern = pattern
        self.template = template


class DirectoryEnumerationError(TextSubError):
    """目录无法列出（权限不足、不存在、不是目录等），遍历时按空子树处理。"""

    def __init__(self, path: str, cause: OSError):
        super().__init__(f"无法列出目录: {path} ({cause})")
        self.path = path
        self.cause = cause


class FileReadError(TextSubError):
    """读取或 UTF-8 解码失败。"""

    def __init__(self, path: str, cause: Exception):
        super().__init__(f"读取失败: {path} ({cause})")
        self.path = path
        self.cause = cause


class FileWriteError(TextSubError):
    """写回文件失败。"""

    def __init__(self, path: str, cause: Exception):
        super().__init__(f"写入失败: {path} ({cause})")
        self.path = path
        self.cause = cause


class FormCancelled(TextSubError):
    """用户在表单中取消输入。不是错误，只是提前退出的信号。"""
