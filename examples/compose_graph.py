#!/usr/bin/env python3
"""
示例脚本：构建依赖图并导出统计

使用方法:
    python examples/compose_graph.py [outdated_report]
"""

import sys
import os

# 添加 src 目录到路径
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from graph_composer import (
    ChainedPackageRule,
    DependencyModel,
    GraphComposer,
    RegexPackageRule,
    SavedReportSource,
    Visualizer,
)


def build_model() -> DependencyModel:
    """构建一个小型示例模型"""
    model = DependencyModel("acme/shop", "1.4.0")
    model.add_package("symfony/console", "5.4.2")
    model.add_package("monolog/monolog", "2.9.1")
    model.add_package("psr/log", "1.1.4")
    model.add_package("phpunit/phpunit", "9.6.0")

    model.add_dependency("acme/shop", "symfony/console", "^5.4")
    model.add_dependency("acme/shop", "monolog/monolog", "^2.9")
    model.add_dependency("acme/shop", "ext-json", "*")
    model.add_dependency("acme/shop", "phpunit/phpunit", "^9.6", dev=True)
    model.add_dependency("symfony/console", "psr/log", "^1.0")
    model.add_dependency("monolog/monolog", "psr/log", "^1.0 || ^2.0")
    return model


def main():
    report = sys.argv[1] if len(sys.argv) > 1 else None

    composer = GraphComposer(
        model=build_model(),
        visualizer=Visualizer("dot"),
        # 平台扩展不是真正的软件包
        package_rule=ChainedPackageRule([RegexPackageRule(r"^ext-")]),
        colorize=True,
        export_file="dependency-stats.json",
        report_source=SavedReportSource(report) if report else None,
    )

    path = composer.get_image_path("dependency-graph.dot")
    print(f"✓ Graph written to {path}")
    print("✓ Statistics written to dependency-stats.json")
    print("\nRender with: dot -Tsvg dependency-graph.dot -o dependency-graph.svg")


if __name__ == "__main__":
    main()
