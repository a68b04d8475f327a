"""
测试依赖模型
"""

import json
import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from graph_composer.exceptions import ModelError
from graph_composer.model import MODEL_FILENAME, DependencyModel

SNAPSHOT = {
    "root": "acme/app",
    "packages": {
        "acme/app": {
            "version": "1.0.0",
            "require": {"monolog/monolog": "^2.9", "psr/log": "^1.1"},
            "require-dev": {"phpunit/phpunit": "^9.5"},
        },
        "monolog/monolog": {"version": "2.9.1", "require": {"psr/log": "^1.0 || ^2.0"}},
        "psr/log": {"version": "1.1.4"},
    },
}


class TestDependencyModel:
    """测试依赖模型"""

    def test_from_dict(self):
        """测试从快照构建"""
        model = DependencyModel.from_dict(SNAPSHOT)
        root = model.root_package()

        assert root.name == "acme/app"
        assert root.version == "1.0.0"
        assert [e.dest.name for e in root.get_out_edges()] == [
            "monolog/monolog",
            "psr/log",
            "phpunit/phpunit",
        ]
        assert [e.dev for e in root.get_out_edges()] == [False, False, True]
        assert root.get_out_edges()[0].version_constraint == "^2.9"

    def test_shared_nodes(self):
        """测试同名依赖共享同一个节点"""
        model = DependencyModel.from_dict(SNAPSHOT)
        monolog = model.get("monolog/monolog")

        assert monolog.get_out_edges()[0].dest is model.get("psr/log")
        assert model.get("psr/log").version == "1.1.4"

    def test_unlisted_dependency_created(self):
        """测试未列出的依赖自动创建"""
        model = DependencyModel.from_dict(SNAPSHOT)

        assert "phpunit/phpunit" in model
        assert model.get("phpunit/phpunit").version is None
        assert len(model) == 4

    def test_add_package_fills_version(self):
        """测试补全缺失的版本"""
        model = DependencyModel("app")
        node = model.add_package("lib")

        assert model.add_package("lib", "1.0.0") is node
        assert node.version == "1.0.0"
        assert model.add_package("lib", "2.0.0").version == "1.0.0"

    def test_cyclic_repr(self):
        """测试循环模型可以打印"""
        model = DependencyModel("a")
        model.add_dependency("a", "b")
        edge = model.add_dependency("b", "a", "^1.0")

        assert "b -> a" in repr(edge)
        assert "a" in repr(model.root_package())

    @pytest.mark.parametrize(
        "data",
        [
            [],
            {"packages": {}},
            {"root": "app", "packages": []},
            {"root": "app", "packages": {"other": {}}},
            {"root": "app", "packages": {"app": "1.0.0"}},
            {"root": "app", "packages": {"app": {"require": []}}},
            {"root": "app", "packages": {"app": {"require-dev": ["phpunit/phpunit"]}}},
        ],
    )
    def test_invalid_snapshot(self, data):
        """测试无效快照"""
        with pytest.raises(ModelError):
            DependencyModel.from_dict(data)

    def test_save_and_load_directory(self, tmp_path):
        """测试保存后从目录加载"""
        DependencyModel.from_dict(SNAPSHOT).save(str(tmp_path / MODEL_FILENAME))

        model = DependencyModel.load(str(tmp_path))

        assert model.to_dict()["packages"]["acme/app"] == SNAPSHOT["packages"]["acme/app"]

    def test_load_missing(self, tmp_path):
        """测试快照不存在"""
        with pytest.raises(ModelError, match="not found"):
            DependencyModel.load(str(tmp_path))

    def test_load_invalid_json(self, tmp_path):
        """测试无效 JSON"""
        path = tmp_path / "model.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(ModelError):
            DependencyModel.load(str(path))

    def test_load_file(self, tmp_path):
        """测试直接加载文件"""
        path = tmp_path / "snapshot.json"
        path.write_text(json.dumps(SNAPSHOT), encoding="utf-8")

        assert DependencyModel.load(str(path)).root == "acme/app"
