import io
import os
import shutil
import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest

from textsub.config import ReplaceConfig
from textsub.errors import PatternCompileError
from textsub.form import Parameters
from textsub.pipeline import ReplacePipeline, config_from_parameters
from textsub.substitution import SubstitutionEngine


class TestReplacePipeline:
    @pytest.fixture
    def tmpdir(self):
        d = Path(tempfile.mkdtemp())
        yield d
        shutil.rmtree(d)

    @pytest.fixture
    def src(self, tmpdir: Path) -> Path:
        src = tmpdir / "src"
        (src / "private").mkdir(parents=True)
        (src / "a.swift").write_text("Constants.c1.rawValue", encoding="utf-8")
        (src / "private" / "b.swift").write_text("Constants.c2.rawValue", encoding="utf-8")
        (src / "notes.md").write_text("Constants.c3.rawValue", encoding="utf-8")
        return src

    def _config(self, root: Path, **kw) -> ReplaceConfig:
        base = dict(
            root=str(root),
            included_extensions={"swift"},
            excluded_names={"private"},
            pattern=r"Constants\.c(\d+)\.rawValue",
            replacement="Constants.c$1",
        )
        base.update(kw)
        return ReplaceConfig(**base)

    def test_scenario(self, src: Path):
        out = io.StringIO()
        pipeline = ReplacePipeline(out=out)
        conf = self._config(src, print_paths=True)
        assert pipeline.list_paths(conf) == [str(src / "a.swift")]
        summary = pipeline.run(conf)
        assert summary.count_changed == 1
        assert (src / "a.swift").read_text(encoding="utf-8") == "Constants.c1"
        assert (src / "private" / "b.swift").read_text(encoding="utf-8") == "Constants.c2.rawValue"
        assert (src / "notes.md").read_text(encoding="utf-8") == "Constants.c3.rawValue"
        lines = out.getvalue().splitlines()
        assert lines[0] == str(src / "a.swift")
        assert lines[-1].startswith("完成")

    def test_empty_tree_still_reports_completion(self, tmpdir: Path):
        out = io.StringIO()
        with patch.object(SubstitutionEngine, "read_text") as read, \
                patch.object(SubstitutionEngine, "write_text") as write:
            summary = ReplacePipeline(out=out).run(self._config(tmpdir))
        read.assert_not_called()
        write.assert_not_called()
        assert summary.results == []
        assert "完成" in out.getvalue()

    def test_bad_pattern_aborts_before_walking(self, src: Path):
        pipeline = ReplacePipeline(out=io.StringIO())
        with patch.object(pipeline, "list_paths") as list_paths:
            with pytest.raises(PatternCompileError):
                pipeline.run(self._config(src, pattern="(unclosed"))
        list_paths.assert_not_called()
        assert (src / "a.swift").read_text(encoding="utf-8") == "Constants.c1.rawValue"

    def test_bad_group_reference_aborts(self, src: Path):
        with pytest.raises(PatternCompileError):
            ReplacePipeline(out=io.StringIO()).run(self._config(src, replacement="$3"))
        assert (src / "a.swift").read_text(encoding="utf-8") == "Constants.c1.rawValue"

    def test_second_run_writes_nothing(self, src: Path):
        pipeline = ReplacePipeline(out=io.StringIO())
        pipeline.run(self._config(src))
        summary = pipeline.run(self._config(src))
        assert summary.count_changed == 0
        assert summary.count_unchanged == 1

    def test_config_from_parameters(self):
        params = Parameters("src", frozenset({"txt"}), frozenset({"build"}), "a", "b")
        conf = config_from_parameters(params, atomic_write=False)
        assert conf.root == "src"
        assert conf.included_extensions == frozenset({"txt"})
        assert conf.excluded_names == frozenset({"build"})
        assert conf.atomic_write is False

    def test_config_freezes_sets(self):
        conf = ReplaceConfig(included_extensions=["a", "a"], excluded_names={"x"})
        assert conf.included_extensions == frozenset({"a"})
        assert isinstance(conf.excluded_names, frozenset)
