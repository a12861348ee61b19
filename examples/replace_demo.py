#!/usr/bin/env python3
"""textsub - 演示：在临时目录中执行一次批量替换，并演示第二次运行不会再写文件。"""

from __future__ import annotations

import shutil
import tempfile
from pathlib import Path

from textsub import ReplaceConfig, ReplacePipeline


def _print_header(title: str):
    print("\n=== {} ===".format(title))


def main() -> int:
    demo_root = Path(tempfile.mkdtemp(prefix="textsub_demo_"))
    src = demo_root / "src"

    _print_header("1. 准备演示目录")
    (src / "private").mkdir(parents=True)
    (src / "a.swift").write_text("let x = Constants.c1.rawValue\n", encoding="utf-8")
    (src / "private" / "b.swift").write_text("let y = Constants.c2.rawValue\n", encoding="utf-8")
    (src / "notes.md").write_text("Constants.c3.rawValue\n", encoding="utf-8")

    conf = ReplaceConfig(
        root=str(src),
        included_extensions={"swift"},
        excluded_names={"private"},
        pattern=r"Constants\.c(\d+)\.rawValue",
        replacement="Constants.c$1",
        print_paths=True,
    )
    pipeline = ReplacePipeline()

    _print_header("2. 第一次运行")
    print(pipeline.run(conf).as_dict())
    print((src / "a.swift").read_text(encoding="utf-8"))

    _print_header("3. 第二次运行（内容已无匹配，不写文件）")
    print(pipeline.run(conf).as_dict())

    shutil.rmtree(demo_root, ignore_errors=True)
    print("演示已清理演示目录")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
