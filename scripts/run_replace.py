"""
批量替换脚本 — 右键 Run 直接执行。

使用步骤：
  1. 修改下面 ===== 配置区 ===== 里的参数
  2. 先把 PRINT_PATHS 设为 True，确认选中的文件列表无误
  3. 运行后会直接写回内容有变化的文件（没有撤销，请先提交或备份）
"""

import sys
from pathlib import Path

# 把项目根目录加入 sys.path，使脚本在任意位置都能 import textsub
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from textsub.config import ReplaceConfig, setup_logging
from textsub.pipeline import ReplacePipeline

# ===================================================================
# ★ 配置区 — 按需修改
# ===================================================================

# 起始目录
ROOT = "src"

# 包含的扩展名（不带点，区分大小写）
INCLUDED_EXTENSIONS = {"swift", "txt"}

# 排除的文件名/目录名（任意深度，按名称匹配）
EXCLUDED_NAMES = {"private"}

# 搜索表达式与替换模板（$1 引用第 1 个分组）
PATTERN = r"Constants\.c(\d+)\.rawValue"
REPLACEMENT = "Constants.c$1"

# 处理前打印选中的文件
PRINT_PATHS = True

# ===================================================================

if __name__ == "__main__":
    setup_logging()
    ReplacePipeline().run(
        ReplaceConfig(
            root=ROOT,
            included_extensions=INCLUDED_EXTENSIONS,
            excluded_names=EXCLUDED_NAMES,
            pattern=PATTERN,
            replacement=REPLACEMENT,
            print_paths=PRINT_PATHS,
        )
    )
