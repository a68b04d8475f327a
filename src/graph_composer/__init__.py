"""
依赖关系图与版本状态报告工具

将项目的依赖树渲染为去重、带样式的关系图，并统计各依赖的版本过期情况。
"""

from .analyzer import ExportStatistics, aggregate
from .config import ComposerConfig
from .exporter import ExportWriter, JSONExporter, get_exporter, register_exporter
from .graph import GraphComposer
from .model import DependencyEdge, DependencyModel, PackageNode
from .rules import (
    ChainedDependencyRule,
    ChainedPackageRule,
    ConstraintDependencyRule,
    DevDependencyRule,
    NamePackageRule,
    RegexPackageRule,
)
from .versions import SavedReportSource, VersionStatus, VersionStatusClassifier
from .visualizer import Visualizer

__version__ = "0.1.0"
__all__ = [
    "GraphComposer",
    "ComposerConfig",
    "DependencyModel",
    "PackageNode",
    "DependencyEdge",
    "ChainedPackageRule",
    "ChainedDependencyRule",
    "RegexPackageRule",
    "NamePackageRule",
    "DevDependencyRule",
    "ConstraintDependencyRule",
    "VersionStatus",
    "VersionStatusClassifier",
    "SavedReportSource",
    "ExportStatistics",
    "aggregate",
    "ExportWriter",
    "JSONExporter",
    "get_exporter",
    "register_exporter",
    "Visualizer",
]
