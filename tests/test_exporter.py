"""
测试统计汇总与导出
"""

import json
import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from graph_composer.analyzer import aggregate
from graph_composer.exceptions import InvalidExportFileError, UnsupportedFormatError
from graph_composer.exporter import ExportWriter, JSONExporter, get_exporter, register_exporter
from graph_composer.graph import GraphComposer
from graph_composer.model import DependencyModel
from graph_composer.rules import ChainedPackageRule, NamePackageRule
from graph_composer.versions import VersionStatus

REPORT = """\
a 1.0.0 ~ 1.0.1
b 2.0.0 ~ 2.3.0
d 1.0.0 ! 3.0.0
e 0.1.0 = 0.1.0 abandoned
"""


class TestAggregate:
    """测试统计汇总"""

    def setup_method(self):
        """app 直接依赖 a、b、c，间接依赖 d、e"""
        self.model = DependencyModel("app")
        for name in ("a", "b", "c"):
            self.model.add_dependency("app", name, "^1.0")
        self.model.add_dependency("a", "d", "^1.0")
        self.model.add_dependency("b", "e", "^1.0")
        self.model.add_dependency("c", "a", "^1.0")

    def test_dependency_counts(self):
        """测试直接、间接和总数"""
        _, drawn = GraphComposer(model=self.model).compose()

        stats = aggregate(drawn, {}, self.model.root_package().get_out_edges())

        assert (stats.direct, stats.indirect, stats.total) == (3, 2, 5)
        assert stats.latest == 5

    def test_status_counts(self):
        """测试版本状态统计"""
        composer = GraphComposer(model=self.model, report_source=lambda: REPORT)
        _, drawn = composer.compose()

        data = composer.get_export_data(drawn).to_dict()

        assert data == {
            "dependencies": {"direct": 3, "indirect": 2, "total": 5},
            "dependencyStatus": {
                "latest": 1,
                "patchAvailable": 1,
                "minorAvailable": 1,
                "majorAvailable": 1,
                "abandoned": 1,
            },
        }

    def test_excluded_packages_not_counted(self):
        """测试被排除的包不计入统计"""
        rule = ChainedPackageRule([NamePackageRule(["d"])])
        composer = GraphComposer(model=self.model, package_rule=rule, report_source=lambda: REPORT)
        _, drawn = composer.compose()

        stats = composer.get_export_data(drawn)

        assert stats.total == 4
        assert stats.major_available == 0
        assert stats.latest == 1

    def test_unknown_statuses_ignored(self):
        """测试不在图中的包被忽略"""
        drawn = {"app": {}, "a": {}}
        statuses = {"a": VersionStatus.PATCH_AVAILABLE, "zzz": VersionStatus.ABANDONED}

        stats = aggregate(drawn, statuses, self.model.root_package().get_out_edges())

        assert stats.direct == 1
        assert stats.patch_available == 1
        assert stats.abandoned == 0
        assert stats.latest == 0

    def test_latest_entries_count_as_latest(self):
        """测试报告中的最新版本条目计为最新"""
        drawn = {"app": {}, "a": {}, "b": {}}
        statuses = {"a": VersionStatus.LATEST, "b": VersionStatus.MINOR_AVAILABLE}

        stats = aggregate(drawn, statuses, self.model.root_package().get_out_edges())

        assert stats.latest == 1
        assert stats.minor_available == 1


class TestExportWriter:
    """测试导出"""

    def setup_method(self):
        model = DependencyModel("app")
        model.add_dependency("app", "a", "^1.0")
        composer = GraphComposer(model=model)
        _, drawn = composer.compose()
        self.stats = composer.get_export_data(drawn)
        self.writer = ExportWriter()

    def test_write_json(self, tmp_path):
        """测试写入 JSON"""
        path = str(tmp_path / "stats.json")

        assert self.writer.write(self.stats, path) == path

        with open(path, encoding="utf-8") as f:
            content = f.read()
        assert json.loads(content)["dependencies"]["direct"] == 1
        assert '\n    "dependencies"' in content

    def test_extension_case_insensitive(self, tmp_path):
        """测试扩展名不区分大小写"""
        path = str(tmp_path / "stats.JSON")

        self.writer.write(self.stats, path)

        assert os.path.exists(path)

    def test_invalid_file_name(self, tmp_path):
        """测试缺少扩展名"""
        with pytest.raises(InvalidExportFileError):
            self.writer.write(self.stats, str(tmp_path / "stats"))

    def test_unsupported_format(self, tmp_path):
        """测试未注册的格式"""
        with pytest.raises(UnsupportedFormatError, match="xml"):
            self.writer.write(self.stats, str(tmp_path / "stats.xml"))

        assert not (tmp_path / "stats.xml").exists()

    def test_get_exporter(self):
        """测试导出器注册表"""
        assert isinstance(get_exporter("JSON"), JSONExporter)

    def test_register_exporter(self, tmp_path, monkeypatch):
        """测试注册新格式"""
        class TextExporter:
            def export_graph(self, data):
                return str(data["dependencies"]["total"])

        monkeypatch.setattr("graph_composer.exporter.EXPORTERS", {"json": JSONExporter})
        register_exporter("TXT", TextExporter)
        path = tmp_path / "stats.txt"

        self.writer.write(self.stats, str(path))

        assert path.read_text(encoding="utf-8") == "1"
