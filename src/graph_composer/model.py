"""
依赖模型

描述已解析的软件包依赖关系：软件包节点、依赖边，以及从 JSON 快照加载的依赖模型。
模型在遍历期间只读，可能包含循环和菱形依赖。
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

from .exceptions import ModelError

logger = logging.getLogger(__name__)

# 项目目录下默认的依赖模型快照文件名
MODEL_FILENAME = "dependency-model.json"


@dataclass(eq=False)
class PackageNode:
    """软件包节点（以名称作为唯一标识）"""

    name: str
    version: Optional[str] = None
    out_edges: List["DependencyEdge"] = field(default_factory=list, repr=False)

    def get_out_edges(self) -> List["DependencyEdge"]:
        """按声明顺序返回依赖边"""
        return self.out_edges


@dataclass(eq=False)
class DependencyEdge:
    """依赖边：source 依赖 dest"""

    source: PackageNode = field(repr=False)
    dest: PackageNode = field(repr=False)
    version_constraint: str = ""
    dev: bool = False

    def __repr__(self) -> str:
        kind = " dev" if self.dev else ""
        return (
            f"DependencyEdge({self.source.name} -> {self.dest.name} "
            f"{self.version_constraint!r}{kind})"
        )


class DependencyModel:
    """依赖模型：名称到节点的映射，加上根软件包"""

    def __init__(self, root: str, root_version: Optional[str] = None):
        """
        初始化依赖模型

        Args:
            root: 根软件包名称
            root_version: 根软件包版本
        """
        self._packages: Dict[str, PackageNode] = {}
        self.root = root
        self.add_package(root, root_version)

    def __contains__(self, name: str) -> bool:
        return name in self._packages

    def __iter__(self) -> Iterator[PackageNode]:
        return iter(self._packages.values())

    def __len__(self) -> int:
        return len(self._packages)

    def root_package(self) -> PackageNode:
        """获取根软件包"""
        return self._packages[self.root]

    def get(self, name: str) -> Optional[PackageNode]:
        """获取软件包节点"""
        return self._packages.get(name)

    def add_package(self, name: str, version: Optional[str] = None) -> PackageNode:
        """添加软件包；已存在时返回原节点，并补全缺失的版本"""
        node = self._packages.get(name)
        if node is None:
            node = self._packages[name] = PackageNode(name, version)
        elif version and not node.version:
            node.version = version
        return node

    def add_dependency(
        self,
        source: str,
        dest: str,
        version_constraint: str = "",
        dev: bool = False,
    ) -> DependencyEdge:
        """添加依赖边，未知的软件包会被自动创建"""
        source_node = self.add_package(source)
        dest_node = self.add_package(dest)
        edge = DependencyEdge(source_node, dest_node, version_constraint, dev)
        source_node.out_edges.append(edge)
        return edge

    @classmethod
    def from_dict(cls, data: Any) -> "DependencyModel":
        """从快照字典构建模型"""
        if not isinstance(data, dict):
            raise ModelError("Dependency model must be a JSON object")

        root = data.get("root")
        packages = data.get("packages", {})
        if not root:
            raise ModelError("Dependency model has no root package")
        if not isinstance(packages, dict):
            raise ModelError("'packages' must be an object keyed by package name")
        if root not in packages:
            raise ModelError(f"Root package '{root}' is not listed in 'packages'")
        for name, pkg in packages.items():
            if not isinstance(pkg, dict):
                raise ModelError(f"Package entry for '{name}' must be an object")
            for key in ("require", "require-dev"):
                if not isinstance(pkg.get(key, {}), dict):
                    raise ModelError(
                        f"'{key}' of '{name}' must be an object keyed by package name"
                    )

        model = cls(root, packages[root].get("version"))

        # 先创建全部节点，再按声明顺序连边
        for name, pkg in packages.items():
            model.add_package(name, pkg.get("version"))

        for name, pkg in packages.items():
            for dep, constraint in pkg.get("require", {}).items():
                model.add_dependency(name, dep, constraint)
            for dep, constraint in pkg.get("require-dev", {}).items():
                model.add_dependency(name, dep, constraint, dev=True)

        logger.debug("Loaded dependency model for %s with %d packages", root, len(model))
        return model

    def to_dict(self) -> Dict[str, Any]:
        """导出为快照字典"""
        packages: Dict[str, Any] = {}
        for node in self:
            entry: Dict[str, Any] = {}
            if node.version:
                entry["version"] = node.version

            require = {e.dest.name: e.version_constraint for e in node.out_edges if not e.dev}
            require_dev = {e.dest.name: e.version_constraint for e in node.out_edges if e.dev}
            if require:
                entry["require"] = require
            if require_dev:
                entry["require-dev"] = require_dev

            packages[node.name] = entry

        return {"root": self.root, "packages": packages}

    @classmethod
    def load(cls, path: str) -> "DependencyModel":
        """
        从 JSON 快照加载模型

        Args:
            path: 快照文件路径，或包含 dependency-model.json 的项目目录

        Returns:
            依赖模型
        """
        filepath = Path(path)
        if filepath.is_dir():
            filepath = filepath / MODEL_FILENAME

        try:
            with open(filepath, encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            raise ModelError(f"Dependency model not found: {filepath}") from None
        except json.JSONDecodeError as e:
            raise ModelError(f"Invalid dependency model {filepath}: {e}") from e

        return cls.from_dict(data)

    def save(self, filepath: str):
        """保存模型到 JSON 快照"""
        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, ensure_ascii=False, indent=2)
