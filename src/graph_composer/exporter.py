"""
统计导出

按导出文件扩展名选择编码器，将统计结果写入文件。
"""

import json
import logging
import re
from typing import Callable, Dict, Protocol

from .analyzer import ExportStatistics
from .exceptions import InvalidExportFileError, UnsupportedFormatError

logger = logging.getLogger(__name__)

EXPORT_FILE_PATTERN = re.compile(r"^.+\.\w+$")


class Exporter(Protocol):
    """导出编码器"""

    def export_graph(self, data: dict) -> str: ...


class JSONExporter:
    """格式化的 JSON 导出"""

    def export_graph(self, data: dict) -> str:
        return json.dumps(data, indent=4)


# 格式名（小写）-> 导出器工厂
EXPORTERS: Dict[str, Callable[[], Exporter]] = {
    "json": JSONExporter,
}


def register_exporter(fmt: str, factory: Callable[[], Exporter]):
    """注册导出格式"""
    EXPORTERS[fmt.lower()] = factory


def get_exporter(fmt: str) -> Exporter:
    """获取导出器，格式名不区分大小写"""
    factory = EXPORTERS.get(fmt.lower())
    if factory is None:
        raise UnsupportedFormatError(fmt)
    return factory()


class ExportWriter:
    """将统计结果写入导出文件"""

    def write(self, stats: ExportStatistics, filepath: str) -> str:
        """
        写入导出文件

        Args:
            stats: 统计结果
            filepath: 导出文件路径，扩展名决定格式

        Returns:
            写入的文件路径
        """
        if not EXPORT_FILE_PATTERN.match(filepath):
            raise InvalidExportFileError(f"Invalid export file name {filepath}")

        extension = filepath.rsplit(".", 1)[-1]
        content = get_exporter(extension).export_graph(stats.to_dict())

        with open(filepath, "w", encoding="utf-8") as f:
            f.write(content)

        logger.info("Exported dependency statistics to %s", filepath)
        return filepath
