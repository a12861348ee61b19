"""参数表单状态机。

五个输入框依次为：根目录、包含的扩展名、排除的名称、搜索表达式、替换模板。
状态迁移是 (state, event) -> new_state 的纯函数，不依赖任何终端绘制，可以单独测试。

状态
----
- ``EDITING``：正在编辑 ``focus`` 指向的输入框
- ``SUBMITTED``：在最后一个输入框上执行“下一个”
- ``CANCELLED``：任意状态下取消

终止状态下收到的事件一律忽略。
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, replace
from typing import Callable, FrozenSet, NamedTuple, Optional, Sequence, Tuple

from .config import split_extensions, split_names

FIELD_LABELS: Tuple[str, ...] = (
    "根目录",
    "包含的扩展名",
    "排除的名称",
    "搜索表达式",
    "替换模板",
)
FIELD_COUNT = len(FIELD_LABELS)
LAST_FIELD = FIELD_COUNT - 1


class FormStatus(enum.Enum):
    EDITING = "editing"
    SUBMITTED = "submitted"
    CANCELLED = "cancelled"


class EventKind(enum.Enum):
    CHAR = "char"
    BACKSPACE = "backspace"
    NEXT = "next"
    PREVIOUS = "previous"
    CANCEL = "cancel"


class FormEvent(NamedTuple):
    kind: EventKind
    char: str = ""

    @classmethod
    def char_input(cls, ch: str) -> "FormEvent":
        return cls(EventKind.CHAR, ch)


BACKSPACE = FormEvent(EventKind.BACKSPACE)
NEXT = FormEvent(EventKind.NEXT)
PREVIOUS = FormEvent(EventKind.PREVIOUS)
CANCEL = FormEvent(EventKind.CANCEL)


class Parameters(NamedTuple):
    root: str
    included_extensions: FrozenSet[str]
    excluded_names: FrozenSet[str]
    pattern: str
    replacement: str


@dataclass(frozen=True)
class FormState:
    fields: Tuple[str, ...] = ("",) * FIELD_COUNT
    focus: int = 0
    status: FormStatus = FormStatus.EDITING

    @classmethod
    def initial(cls, defaults: Optional[Sequence[str]] = None) -> "FormState":
        if defaults is None:
            return cls()
        if len(defaults) != FIELD_COUNT:
            raise ValueError(f"需要 {FIELD_COUNT} 个默认值，实际 {len(defaults)} 个")
        return cls(fields=tuple(defaults))

    @property
    def current(self) -> str:
        return self.fields[self.focus]

    @property
    def done(self) -> bool:
        return self.status is not FormStatus.EDITING

    def _with_current(self, text: str) -> "FormState":
        fields = list(self.fields)
        fields[self.focus] = text
        return replace(self, fields=tuple(fields))


def step(state: FormState, event: FormEvent) -> FormState:
    """根据一个输入事件计算下一个状态。"""
    if state.done:
        return state
    kind = event.kind
    if kind is EventKind.CANCEL:
        return replace(state, status=FormStatus.CANCELLED)
    if kind is EventKind.CHAR:
        return state._with_current(state.current + event.char)
    if kind is EventKind.BACKSPACE:
        if not state.current:
            return state
        return state._with_current(state.current[:-1])
    if kind is EventKind.NEXT:
        if state.focus == LAST_FIELD:
            return replace(state, status=FormStatus.SUBMITTED)
        return replace(state, focus=min(state.focus + 1, LAST_FIELD))
    if kind is EventKind.PREVIOUS:
        return replace(state, focus=max(state.focus - 1, 0))
    raise ValueError(f"未知事件: {event!r}")


def parse_fields(fields: Sequence[str]) -> Parameters:
    """把五个输入框的原始文本转换成 Parameters。搜索表达式与替换模板原样保留。"""
    root, exts, excluded, pattern, replacement = fields
    return Parameters(
        root=root.strip() or ".",
        included_extensions=split_extensions(exts),
        excluded_names=split_names(excluded),
        pattern=pattern,
        replacement=replacement,
    )


class ParameterForm:
    """阻塞式表单：不断读取事件直到提交或取消。

    ``read_event`` 每次调用阻塞等待一个事件；``render`` 在每次状态变化后被调用（可选）。
    """

    def __init__(self, defaults: Optional[Sequence[str]] = None,
                 render: Optional[Callable[[FormState], None]] = None):
        self.state = FormState.initial(defaults)
        self.render = render

    def feed(self, event: FormEvent) -> FormState:
        self.state = step(self.state, event)
        return self.state

    def run(self, read_event: Callable[[], FormEvent]) -> Optional[Parameters]:
        if self.render:
            self.render(self.state)
        while not self.state.done:
            self.feed(read_event())
            if self.render:
                self.render(self.state)
        if self.state.status is FormStatus.CANCELLED:
            return None
        return parse_fields(self.state.fields)
