"""
导出统计

根据已绘制的软件包和版本状态汇总依赖统计信息。
"""

from dataclasses import dataclass
from typing import Iterable, Mapping

from .model import DependencyEdge
from .versions import VersionStatus


@dataclass
class ExportStatistics:
    """导出统计结果"""

    # 依赖数量（不含根软件包）
    direct: int
    indirect: int
    total: int

    # 版本状态
    latest: int
    patch_available: int
    minor_available: int
    major_available: int
    abandoned: int

    def to_dict(self) -> dict:
        return {
            "dependencies": {
                "direct": self.direct,
                "indirect": self.indirect,
                "total": self.total,
            },
            "dependencyStatus": {
                "latest": self.latest,
                "patchAvailable": self.patch_available,
                "minorAvailable": self.minor_available,
                "majorAvailable": self.major_available,
                "abandoned": self.abandoned,
            },
        }


def aggregate(
    drawn_packages: Mapping[str, object],
    version_statuses: Mapping[str, VersionStatus],
    root_out_edges: Iterable[DependencyEdge],
) -> ExportStatistics:
    """
    汇总导出统计

    Args:
        drawn_packages: 已绘制的软件包（包含根软件包）
        version_statuses: 版本状态，未出现在图中的包会被忽略
        root_out_edges: 根软件包的依赖边

    Returns:
        统计结果
    """
    # 被排除的包不计入统计；最新版本的包隐式计数
    statuses = [
        status
        for name, status in version_statuses.items()
        if name in drawn_packages and status != VersionStatus.LATEST
    ]

    direct = sum(1 for edge in root_out_edges if edge.dest.name in drawn_packages)
    total = max(len(drawn_packages) - 1, 0)

    return ExportStatistics(
        direct=direct,
        indirect=total - direct,
        total=total,
        latest=total - len(statuses),
        patch_available=statuses.count(VersionStatus.PATCH_AVAILABLE),
        minor_available=statuses.count(VersionStatus.MINOR_AVAILABLE),
        major_available=statuses.count(VersionStatus.MAJOR_AVAILABLE),
        abandoned=statuses.count(VersionStatus.ABANDONED),
    )
