"""
依赖关系可视化模块

将构建好的依赖图渲染为 Graphviz DOT 源文件或交互式 vis.js HTML 页面。
"""

import json
import logging
import os
import tempfile
from typing import Dict, List, Optional

import click
import networkx as nx

from .exceptions import UnsupportedFormatError

logger = logging.getLogger(__name__)


def _dot_quote(value) -> str:
    if isinstance(value, (int, float)):
        return str(value)
    escaped = str(value).replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _dot_attributes(layout: dict) -> str:
    if not layout:
        return ""
    attrs = ", ".join(f"{key}={_dot_quote(value)}" for key, value in layout.items())
    return f" [{attrs}]"


class Visualizer:
    """依赖关系图渲染器"""

    FORMATS = ("html", "dot")

    def __init__(self, fmt: str = "html"):
        """
        初始化渲染器

        Args:
            fmt: 输出格式（html 或 dot）
        """
        self.format = "html"
        self.set_format(fmt)

    def set_format(self, fmt: str) -> "Visualizer":
        fmt = fmt.lower()
        if fmt not in self.FORMATS:
            raise UnsupportedFormatError(fmt)
        self.format = fmt
        return self

    def render_source(self, graph: nx.MultiDiGraph, title: str = "Dependency Graph") -> str:
        """按当前格式生成文件内容"""
        if self.format == "dot":
            return self.to_dot(graph)
        return self._generate_visjs_html(*self._collect_visjs_data(graph), title=title)

    def create_image_file(self, graph: nx.MultiDiGraph, output_path: Optional[str] = None) -> str:
        """
        写入渲染结果

        Args:
            graph: 依赖图
            output_path: 输出文件路径，默认写入临时文件

        Returns:
            文件路径
        """
        if output_path is None:
            fd, output_path = tempfile.mkstemp(prefix="graph-composer-", suffix=f".{self.format}")
            os.close(fd)

        with open(output_path, "w", encoding="utf-8") as f:
            f.write(self.render_source(graph))

        logger.info("Rendered dependency graph to %s", output_path)
        return output_path

    def display(self, graph: nx.MultiDiGraph) -> str:
        """写入临时文件并用系统默认程序打开"""
        path = self.create_image_file(graph)
        click.launch(path)
        return path

    def to_dot(self, graph: nx.MultiDiGraph) -> str:
        """生成 Graphviz DOT 源"""
        lines = ["digraph G {"]

        for node, data in graph.nodes(data=True):
            lines.append(f"  {_dot_quote(node)}{_dot_attributes(data.get('graphviz', {}))};")

        for source, target, data in graph.edges(data=True):
            lines.append(
                f"  {_dot_quote(source)} -> {_dot_quote(target)}"
                f"{_dot_attributes(data.get('graphviz', {}))};"
            )

        lines.append("}")
        return "\n".join(lines) + "\n"

    def _collect_visjs_data(self, graph: nx.MultiDiGraph) -> tuple:
        """将图属性转换为 vis.js 的节点和边数据"""
        nodes_data: List[Dict] = []
        edges_data: List[Dict] = []

        for node, data in graph.nodes(data=True):
            layout = data.get("graphviz", {})
            nodes_data.append({
                "id": node,
                "label": layout.get("label", node),
                "color": {"background": layout.get("fillcolor", "#eeeeee"), "border": "#314B5F"},
                "font": {"color": layout.get("fontcolor", "#314B5F")},
                "borderWidth": 3 if "bold" in layout.get("style", "") else 1,
                "title": f"{node} {data.get('version') or ''}".strip(),
            })

        for source, target, data in graph.edges(data=True):
            layout = data.get("graphviz", {})
            edges_data.append({
                "from": source,
                "to": target,
                "label": layout.get("label", ""),
                "arrows": "to",
                "dashes": layout.get("style") == "dashed",
                "color": {"color": layout.get("color", "#1A2833")},
                "font": {"size": layout.get("fontsize", 10), "color": layout.get("fontcolor", "#767676")},
            })

        return nodes_data, edges_data

    def _generate_visjs_html(self, nodes: List[dict], edges: List[dict], title: str) -> str:
        """生成 vis.js HTML 内容"""
        return f'''<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <title>{title}</title>
    <script src="https://unpkg.com/vis-network/standalone/umd/vis-network.min.js"></script>
    <style>
        * {{
            margin: 0;
            padding: 0;
            box-sizing: border-box;
        }}
        body {{
            font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, "Helvetica Neue", Arial, sans-serif;
            background: #ffffff;
        }}
        #header {{
            padding: 15px 20px;
            border-bottom: 1px solid #dddddd;
        }}
        #network {{
            height: calc(100vh - 60px);
        }}
    </style>
</head>
<body>
    <div id="header">
        <h1>{title}</h1>
    </div>
    <div id="network"></div>

    <script>
        const nodes = new vis.DataSet({json.dumps(nodes)});
        const edges = new vis.DataSet({json.dumps(edges)});

        const container = document.getElementById('network');
        const data = {{ nodes: nodes, edges: edges }};

        const options = {{
            nodes: {{
                shape: 'box',
                shapeProperties: {{ borderRadius: 6 }}
            }},
            layout: {{
                hierarchical: {{
                    direction: 'UD',
                    sortMethod: 'directed'
                }}
            }},
            physics: {{
                enabled: false
            }},
            interaction: {{
                hover: true,
                tooltipDelay: 200
            }}
        }};

        const network = new vis.Network(container, data, options);
    </script>
</body>
</html>'''
