"""
配置

GraphComposer 的配置项，以及根据配置构建排除规则和报告来源。
"""

from dataclasses import dataclass, field
from typing import List, Optional

from .model import DependencyModel
from .rules import (
    ChainedDependencyRule,
    ChainedPackageRule,
    DevDependencyRule,
    RegexPackageRule,
)
from .versions import ReportSource, SavedReportSource


@dataclass
class ComposerConfig:
    """图构建配置"""

    directory: str = "."
    model_path: Optional[str] = None      # 默认读取项目目录下的快照
    max_depth: Optional[int] = None       # None 表示无限制
    colorize: bool = False
    export_file: Optional[str] = None
    exclude_patterns: List[str] = field(default_factory=list)
    exclude_dev: bool = False
    outdated_report: Optional[str] = None
    format: str = "html"

    def load_model(self) -> DependencyModel:
        return DependencyModel.load(self.model_path or self.directory)

    def build_package_rule(self) -> ChainedPackageRule:
        """构建软件包排除规则链，无效的正则表达式在此处报错"""
        return ChainedPackageRule(RegexPackageRule(p) for p in self.exclude_patterns)

    def build_dependency_rule(self) -> ChainedDependencyRule:
        rules = ChainedDependencyRule()
        if self.exclude_dev:
            rules.add(DevDependencyRule())
        return rules

    def build_report_source(self) -> Optional[ReportSource]:
        if not self.outdated_report:
            return None
        return SavedReportSource(self.outdated_report)
