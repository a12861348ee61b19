#!/usr/bin/env python3
"""textsub - 命令行入口

子命令：
  run   非交互模式，参数来自命令行
  list  只列出会被处理的文件
  form  终端交互表单
  gui   Tkinter 窗口
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import List, Optional

from . import config as cfg
from .config import ReplaceConfig, setup_logging, split_extensions, split_names
from .errors import FormCancelled, PatternCompileError
from .pipeline import ReplacePipeline, config_from_parameters

EXIT_OK = 0
EXIT_FILE_ERRORS = 1
EXIT_USAGE = 2
EXIT_CANCELLED = 130


def _add_filter_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--root", default=cfg.DEFAULT_ROOT, help=f"起始目录（默认 {cfg.DEFAULT_ROOT}）")
    p.add_argument("--ext", default=",".join(sorted(cfg.DEFAULT_INCLUDED_EXTENSIONS)),
                   help="包含的扩展名，逗号分隔，如 swift,txt")
    p.add_argument("--exclude", default=",".join(sorted(cfg.DEFAULT_EXCLUDED_NAMES)),
                   help="排除的文件名/目录名，逗号分隔（名称中可以包含空格）")


def _add_write_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--no-atomic", dest="atomic", action="store_false",
                   help="直接覆盖写入，不经过临时文件")
    p.add_argument("--json", action="store_true", help="以 JSON 输出结果")
    p.add_argument("--strict", action="store_true", help="有文件处理失败时返回退出码 1")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="textsub", description="递归正则批量替换文件内容")
    parser.add_argument("-v", "--verbose", action="store_true", help="输出调试日志")
    sub = parser.add_subparsers(dest="cmd", required=True)

    # run
    run = sub.add_parser("run", help="非交互模式执行批量替换")
    _add_filter_args(run)
    run.add_argument("--pattern", default=cfg.DEFAULT_PATTERN, help="搜索正则表达式")
    run.add_argument("--replacement", default=cfg.DEFAULT_REPLACEMENT,
                     help="替换模板，$1 / ${1} 引用分组，$$ 表示 $")
    run.add_argument("--print-paths", action="store_true", help="处理前打印选中的文件路径")
    _add_write_args(run)

    # list
    ls = sub.add_parser("list", help="列出会被处理的文件（不读写）")
    _add_filter_args(ls)

    # form
    form = sub.add_parser("form", help="终端交互表单")
    form.add_argument("--prefill", action="store_true", help="用默认值预填表单")
    _add_write_args(form)

    # gui
    sub.add_parser("gui", help="打开 Tkinter 窗口")
    return parser


def _report(summary, as_json: bool, strict: bool) -> int:
    if as_json:
        print(json.dumps(summary.as_dict(), ensure_ascii=False, indent=2))
    if strict and summary.count_errors:
        return EXIT_FILE_ERRORS
    return EXIT_OK


def _prefill_values() -> List[str]:
    return [
        cfg.DEFAULT_ROOT,
        ",".join(sorted(cfg.DEFAULT_INCLUDED_EXTENSIONS)),
        ",".join(sorted(cfg.DEFAULT_EXCLUDED_NAMES)),
        cfg.DEFAULT_PATTERN,
        cfg.DEFAULT_REPLACEMENT,
    ]


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)
    pipeline = ReplacePipeline()

    try:
        if args.cmd == "run":
            conf = ReplaceConfig(
                root=args.root,
                included_extensions=split_extensions(args.ext),
                excluded_names=split_names(args.exclude),
                pattern=args.pattern,
                replacement=args.replacement,
                atomic_write=args.atomic,
                print_paths=args.print_paths,
            )
            return _report(pipeline.run(conf), args.json, args.strict)
        elif args.cmd == "list":
            conf = ReplaceConfig(
                root=args.root,
                included_extensions=split_extensions(args.ext),
                excluded_names=split_names(args.exclude),
            )
            for p in pipeline.list_paths(conf):
                print(p)
        elif args.cmd == "form":
            from .terminal import run_terminal_form

            params = run_terminal_form(_prefill_values() if args.prefill else None)
            if params is None:
                raise FormCancelled()
            conf = config_from_parameters(params, atomic_write=args.atomic)
            return _report(pipeline.run(conf), args.json, args.strict)
        elif args.cmd == "gui":
            from .ui.replace_gui import main as gui_main

            gui_main()
        else:
            parser.print_help()
            return EXIT_USAGE
    except FormCancelled:
        print("已取消，未修改任何文件")
        return EXIT_CANCELLED
    except PatternCompileError as e:
        print(f"错误: {e}", file=sys.stderr)
        return EXIT_USAGE
    except Exception as e:
        print(f"错误: {e}", file=sys.stderr)
        return EXIT_FILE_ERRORS
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
