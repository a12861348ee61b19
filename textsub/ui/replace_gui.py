#!/usr/bin/env python3
"""textsub 的 Tkinter 界面。

五个输入框与终端表单相同：目录、扩展名、排除名称、搜索表达式、替换模板，
点击“运行”后执行一次批量替换，结果输出在下方文本框。
"""

from __future__ import annotations

import tkinter as tk
from tkinter import messagebox, ttk
from typing import List

from textsub import config as cfg
from textsub.errors import PatternCompileError
from textsub.form import FIELD_LABELS, parse_fields
from textsub.pipeline import ReplacePipeline, config_from_parameters


class ReplaceApp:
    def __init__(self, master: tk.Tk | tk.Toplevel):
        self.master = master
        master.title("textsub - 批量替换")

        frm = ttk.Frame(master, padding=12)
        frm.grid(row=0, column=0, sticky="nsew")

        defaults = [
            cfg.DEFAULT_ROOT,
            ",".join(sorted(cfg.DEFAULT_INCLUDED_EXTENSIONS)),
            ",".join(sorted(cfg.DEFAULT_EXCLUDED_NAMES)),
            cfg.DEFAULT_PATTERN,
            cfg.DEFAULT_REPLACEMENT,
        ]
        self.vars: List[tk.StringVar] = []
        for row, (label, value) in enumerate(zip(FIELD_LABELS, defaults)):
            ttk.Label(frm, text=f"{label}:").grid(row=row, column=0, sticky="w")
            var = tk.StringVar(value=value)
            ttk.Entry(frm, textvariable=var, width=60).grid(row=row, column=1, sticky="ew")
            self.vars.append(var)

        self.atomic_var = tk.BooleanVar(value=True)
        ttk.Checkbutton(frm, text="经临时文件原子写入", variable=self.atomic_var).grid(row=5, column=0, sticky="w")

        self.run_btn = ttk.Button(frm, text="运行", command=self.run_replace)
        self.run_btn.grid(row=6, column=0, columnspan=2, pady=8)

        self.output = tk.Text(frm, height=12, width=80, wrap="word")
        self.output.grid(row=7, column=0, columnspan=2, pady=8, sticky="nsew")
        frm.rowconfigure(7, weight=1)
        frm.columnconfigure(1, weight=1)

    def log(self, text: str):
        self.output.insert(tk.END, text + "\n")
        self.output.see(tk.END)

    def run_replace(self) -> None:
        params = parse_fields([v.get() for v in self.vars])
        if not params.pattern:
            messagebox.showerror("输入错误", "请填写搜索表达式。")
            return

        self.log("# 运行参数 #")
        for label, value in zip(FIELD_LABELS, params):
            self.log(f"{label}: {value}")
        self.log("------------------------------")

        conf = config_from_parameters(params, atomic_write=self.atomic_var.get())
        try:
            summary = ReplacePipeline().run(conf)
        except PatternCompileError as e:
            messagebox.showerror("表达式错误", str(e))
            return
        except Exception as e:
            self.log(f"错误: {e}")
            return
        for r in summary.results:
            self.log(str(r))
        self.log(f"完成: {summary.count_changed} 个文件已修改")


def main():
    root = tk.Tk()
    ReplaceApp(root)
    root.mainloop()


if __name__ == "__main__":
    main()
