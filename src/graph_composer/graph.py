"""
依赖关系图构建器

从根软件包开始深度优先遍历依赖模型，生成去重的、带样式属性的 NetworkX 有向多重图（同一对包之间可以有多条依赖边）。
"""

import logging
import sys
from typing import Any, Dict, Optional, Tuple

import networkx as nx

from .analyzer import ExportStatistics, aggregate
from .exporter import ExportWriter
from .model import DependencyModel, PackageNode
from .rules import ChainedDependencyRule, ChainedPackageRule, DependencyRule, PackageRule
from .versions import ReportSource, VersionStatus, VersionStatusClassifier
from .visualizer import Visualizer

logger = logging.getLogger(__name__)

# 已绘制的软件包：名称 -> 节点属性
DrawnPackages = Dict[str, Dict[str, Any]]

# 样式属性所在的命名空间，与业务属性分开
LAYOUT_NAMESPACE = "graphviz"


class GraphComposer:
    """依赖关系图构建器"""

    # 节点颜色配置（按版本状态）
    VERTEX_COLORS = {
        VersionStatus.ABANDONED: "#FF5A52",
        VersionStatus.MAJOR_AVAILABLE: "#FF7e0d",
        VersionStatus.MINOR_AVAILABLE: "#FFFA5C",
        VersionStatus.PATCH_AVAILABLE: "#90DB27",
        VersionStatus.LATEST: "#3ABA4D",
    }

    DEFAULT_FILLCOLOR = "#eeeeee"

    LAYOUT_VERTEX = {
        "style": "filled, rounded",
        "shape": "box",
        "fontcolor": "#314B5F",
    }

    LAYOUT_VERTEX_ROOT = {
        "style": "filled, rounded, bold",
    }

    LAYOUT_EDGE = {
        "fontcolor": "#767676",
        "fontsize": 10,
        "color": "#1A2833",
    }

    LAYOUT_EDGE_DEV = {
        "style": "dashed",
        "fontcolor": "#767676",
        "fontsize": 10,
        "color": "#1A2833",
    }

    def __init__(
        self,
        directory: str = ".",
        model: Optional[DependencyModel] = None,
        visualizer: Optional[Visualizer] = None,
        package_rule: Optional[PackageRule] = None,
        dependency_rule: Optional[DependencyRule] = None,
        max_depth: Optional[int] = None,
        colorize: bool = False,
        export_file: Optional[str] = None,
        report_source: Optional[ReportSource] = None,
    ):
        """
        初始化图构建器

        Args:
            directory: 项目目录
            model: 依赖模型，默认从项目目录的快照加载
            visualizer: 渲染后端
            package_rule: 软件包排除规则
            dependency_rule: 依赖排除规则
            max_depth: 最大深度，None 表示无限制
            colorize: 是否按版本状态着色
            export_file: 统计导出文件路径
            report_source: outdated 报告来源
        """
        if max_depth is not None and max_depth < 0:
            raise ValueError(f"max_depth must be a non-negative integer, got {max_depth}")

        self.directory = directory
        self.model = model if model is not None else DependencyModel.load(directory)
        self.visualizer = visualizer or Visualizer()
        self.package_rule = package_rule or ChainedPackageRule()
        self.dependency_rule = dependency_rule or ChainedDependencyRule()
        self.max_depth = max_depth if max_depth is not None else sys.maxsize
        self.colorize = colorize
        self.export_file = export_file
        self.classifier = VersionStatusClassifier(report_source)
        self._composed_root: Optional[PackageNode] = None

    @classmethod
    def from_config(cls, config, model: Optional[DependencyModel] = None) -> "GraphComposer":
        """根据 ComposerConfig 创建"""
        return cls(
            config.directory,
            model=model if model is not None else config.load_model(),
            visualizer=Visualizer(config.format),
            package_rule=config.build_package_rule(),
            dependency_rule=config.build_dependency_rule(),
            max_depth=config.max_depth,
            colorize=config.colorize,
            export_file=config.export_file,
            report_source=config.build_report_source(),
        )

    def compose(self, root: Optional[PackageNode] = None) -> Tuple[nx.MultiDiGraph, DrawnPackages]:
        """
        构建依赖图

        Args:
            root: 起始软件包，默认为模型的根软件包

        Returns:
            (图, 已绘制的软件包)
        """
        graph = nx.MultiDiGraph()
        drawn: DrawnPackages = {}
        root = root or self.model.root_package()
        self._composed_root = root

        self._draw_package(graph, root, drawn, self.LAYOUT_VERTEX_ROOT)

        logger.debug(
            "Composed graph with %d packages and %d dependencies",
            graph.number_of_nodes(),
            graph.number_of_edges(),
        )
        return graph, drawn

    def create_graph(self) -> nx.MultiDiGraph:
        """构建依赖图，并在配置了导出文件时写入统计"""
        graph, drawn = self.compose()

        if self.export_file:
            ExportWriter().write(self.get_export_data(drawn), self.export_file)

        return graph

    def display_graph(self) -> str:
        """构建并显示依赖图，返回渲染文件路径"""
        return self.visualizer.display(self.create_graph())

    def get_image_path(self, output_path: Optional[str] = None) -> str:
        """构建依赖图并写入文件，返回文件路径"""
        return self.visualizer.create_image_file(self.create_graph(), output_path)

    def set_format(self, fmt: str) -> "GraphComposer":
        self.visualizer.set_format(fmt)
        return self

    def version_status(self, name: str) -> VersionStatus:
        """获取软件包的版本状态"""
        return self.classifier.status(name)

    def get_export_data(self, drawn: DrawnPackages) -> ExportStatistics:
        """汇总已绘制软件包的统计信息，直接依赖以最近一次构建的根软件包为准"""
        root = self._composed_root or self.model.root_package()
        return aggregate(drawn, self.classifier.statuses(), root.get_out_edges())

    def _draw_package(
        self,
        graph: nx.MultiDiGraph,
        package: PackageNode,
        drawn: DrawnPackages,
        layout_vertex: Optional[dict] = None,
        depth: int = 0,
    ) -> Optional[str]:
        """递归绘制软件包，返回节点名称；不绘制时返回 None"""
        # 根软件包不参与排除，从第一层依赖开始应用排除规则
        if depth > 0 and self.package_rule.is_excluded(package):
            logger.debug("Excluded package %s", package.name)
            return None

        name = package.name
        # 同一个包只绘制一次，被多个包依赖时直接返回已有节点以便连边
        if name in drawn:
            return name

        if depth > self.max_depth:
            return None

        label = name
        if package.version:
            label += f": {package.version}"

        graph.add_node(name, version=package.version)
        drawn[name] = graph.nodes[name]

        fillcolor = (
            self.VERTEX_COLORS[self.version_status(name)]
            if self.colorize
            else self.DEFAULT_FILLCOLOR
        )
        self._set_layout(
            graph.nodes[name],
            {
                **self.LAYOUT_VERTEX,
                **(layout_vertex or {}),
                "fillcolor": fillcolor,
                "label": label,
            },
        )

        for dependency in package.get_out_edges():
            if self.dependency_rule.is_excluded(dependency):
                continue

            # 依赖的开发依赖不会被安装，只显示根软件包的开发依赖
            if depth > 0 and dependency.dev:
                continue

            target = self._draw_package(graph, dependency.dest, drawn, None, depth + 1)

            # 仍在深度范围内时才连边，超出深度的节点不会有依赖边
            if target is not None and depth < self.max_depth:
                key = graph.add_edge(
                    name,
                    target,
                    constraint=dependency.version_constraint,
                    dev=dependency.dev,
                )
                layout_edge = self.LAYOUT_EDGE_DEV if dependency.dev else self.LAYOUT_EDGE
                self._set_layout(
                    graph.edges[name, target, key],
                    {"label": dependency.version_constraint, **layout_edge},
                )

        return name

    @staticmethod
    def _set_layout(attributes: dict, layout: dict) -> dict:
        bag = attributes.setdefault(LAYOUT_NAMESPACE, {})
        bag.update(layout)
        return attributes
