"""批量替换流水线：编译规则 → 遍历目录 → 逐个替换 → 输出完成信息。

Example::

    from textsub.config import ReplaceConfig
    from textsub.pipeline import ReplacePipeline

    cfg = ReplaceConfig(
        root="src",
        included_extensions={"swift"},
        excluded_names={"private"},
        pattern=r"Constants\\.c(\\d+)\\.rawValue",
        replacement="Constants.c$1",
    )
    summary = ReplacePipeline().run(cfg)
    print(summary.as_dict())

CLI::

    textsub run --root src --ext swift --exclude private \\
        --pattern 'Constants\\.c(\\d+)\\.rawValue' --replacement 'Constants.c$1'
"""

from __future__ import annotations

import logging
import sys
from typing import IO, List, Optional

from .config import ReplaceConfig
from .form import Parameters
from .path_filter import FilterSpec
from .substitution import SubstitutionEngine, SubstitutionRule, Summary
from .tree_walker import TreeWalker


def config_from_parameters(params: Parameters, **options) -> ReplaceConfig:
    """表单结果 → ReplaceConfig，其余选项（atomic_write 等）通过关键字参数传入。"""
    return ReplaceConfig(
        root=params.root,
        included_extensions=params.included_extensions,
        excluded_names=params.excluded_names,
        pattern=params.pattern,
        replacement=params.replacement,
        **options,
    )


class ReplacePipeline:
    """把 TreeWalker 与 SubstitutionEngine 串起来。

    规则在遍历前编译，表达式或模板有误时抛出 PatternCompileError，此时不会读写任何文件。
    文件级错误只记录在 Summary 中，不会中断批处理。
    """

    def __init__(
        self,
        walker: Optional[TreeWalker] = None,
        *,
        out: Optional[IO[str]] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._log = logger or logging.getLogger(__name__)
        self._walker = walker or TreeWalker(logger=logger)
        self._out = out

    def _print(self, text: str) -> None:
        print(text, file=self._out or sys.stdout)

    @staticmethod
    def filter_spec(config: ReplaceConfig) -> FilterSpec:
        return FilterSpec(config.included_extensions, config.excluded_names)

    def list_paths(self, config: ReplaceConfig) -> List[str]:
        """只遍历，不读写文件。"""
        return self._walker.walk(config.root, self.filter_spec(config))

    def run(self, config: ReplaceConfig) -> Summary:
        rule = SubstitutionRule(config.pattern, config.replacement)
        self._log.info(f"根目录: {config.root}  扩展名: {sorted(config.included_extensions)}"
                       f"  排除: {sorted(config.excluded_names)}")
        self._log.info(f"规则: {rule.pattern.pattern!r} -> {rule.template!r}")

        paths = self.list_paths(config)
        self._log.info(f"选中 {len(paths)} 个文件")
        if config.print_paths:
            for p in paths:
                self._print(p)

        engine = SubstitutionEngine(atomic_write=config.atomic_write, logger=self._log)
        summary = engine.apply(paths, rule)

        self._print(
            f"完成: 修改 {summary.count_changed} 个，未变化 {summary.count_unchanged} 个，"
            f"失败 {summary.count_errors} 个，共替换 {summary.total_replacements} 处"
        )
        return summary
