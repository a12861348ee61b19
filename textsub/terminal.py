"""终端表单驱动：从终端逐键读取输入，映射为表单事件，并用 rich 绘制表单。

按键
----
- 可打印字符：追加到当前输入框
- Backspace：删除最后一个字符
- Enter / Tab / ↓：下一个输入框（最后一个输入框上为提交）
- Shift-Tab / ↑：上一个输入框
- Esc / Ctrl-C / Ctrl-D：取消
"""

from __future__ import annotations

import codecs
import os
import select
import sys
from typing import IO, Optional, Sequence

from rich.console import Console
from rich.live import Live
from rich.table import Table
from rich.text import Text

from .form import (
    BACKSPACE,
    CANCEL,
    FIELD_LABELS,
    NEXT,
    PREVIOUS,
    FormEvent,
    FormState,
    FormStatus,
    ParameterForm,
    Parameters,
)

_ESCAPE_SEQUENCES = {
    "\x1b[A": PREVIOUS,
    "\x1b[B": NEXT,
    "\x1b[Z": PREVIOUS,
    "\x1bOA": PREVIOUS,
    "\x1bOB": NEXT,
}


def decode_key(seq: str) -> Optional[FormEvent]:
    """把一次按键产生的字符序列转换成表单事件；无关按键返回 None。"""
    if seq in ("\r", "\n", "\t"):
        return NEXT
    if seq in ("\x7f", "\x08"):
        return BACKSPACE
    if seq in ("\x1b", "\x03", "\x04"):
        return CANCEL
    if seq in _ESCAPE_SEQUENCES:
        return _ESCAPE_SEQUENCES[seq]
    if len(seq) == 1 and seq.isprintable():
        return FormEvent.char_input(seq)
    return None


class TerminalKeyReader:
    """以 cbreak 模式读取按键（关闭回显与行缓冲），退出时恢复终端设置。"""

    def __init__(self, stream: Optional[IO[str]] = None, escape_timeout: float = 0.05):
        self.stream = stream or sys.stdin
        self.escape_timeout = escape_timeout
        self._fd = self.stream.fileno()
        self._saved = None
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")

    def __enter__(self) -> "TerminalKeyReader":
        import termios
        import tty

        if not os.isatty(self._fd):
            raise RuntimeError("交互式表单需要在终端中运行")
        self._saved = termios.tcgetattr(self._fd)
        tty.setcbreak(self._fd)
        return self

    def __exit__(self, *exc) -> None:
        import termios

        if self._saved is not None:
            termios.tcsetattr(self._fd, termios.TCSADRAIN, self._saved)
            self._saved = None

    def _pending(self) -> bool:
        ready, _, _ = select.select([self._fd], [], [], self.escape_timeout)
        return bool(ready)

    def _read_char(self) -> str:
        while True:
            data = os.read(self._fd, 1)
            if not data:
                return "\x04"
            ch = self._decoder.decode(data)
            if ch:
                return ch

    def read_key(self) -> str:
        ch = self._read_char()
        if ch != "\x1b":
            return ch
        seq = ch
        while self._pending() and len(seq) < 8:
            seq += self._read_char()
            # "\x1b[" 与 "\x1bO" 只是前缀，至少读到第三个字符
            if len(seq) > 2 and (seq[-1].isalpha() or seq[-1] == "~"):
                break
        return seq

    def read_event(self) -> FormEvent:
        while True:
            try:
                event = decode_key(self.read_key())
            except KeyboardInterrupt:
                return CANCEL
            if event is not None:
                return event


def build_table(state: FormState) -> Table:
    table = Table(title="textsub 批量替换", show_header=False, box=None, padding=(0, 1))
    table.add_column(justify="right", style="cyan")
    table.add_column()
    for i, (label, value) in enumerate(zip(FIELD_LABELS, state.fields)):
        focused = i == state.focus and state.status is FormStatus.EDITING
        text = Text(value, style="bold" if focused else "")
        if focused:
            text.append("▏", style="blink")
        table.add_row(("> " if focused else "  ") + label, text)
    table.caption = "Enter/Tab 下一项 · Shift-Tab 上一项 · Esc 取消"
    return table


def run_terminal_form(defaults: Optional[Sequence[str]] = None,
                      console: Optional[Console] = None) -> Optional[Parameters]:
    """在终端中显示表单，返回提交的参数；取消时返回 None。"""
    console = console or Console()
    form = ParameterForm(defaults)
    with TerminalKeyReader() as keys:
        with Live(build_table(form.state), console=console, auto_refresh=False) as live:
            form.render = lambda s: live.update(build_table(s), refresh=True)
            return form.run(keys.read_event)
