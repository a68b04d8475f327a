"""
版本状态分类

解析依赖管理器 "outdated" 命令输出的报告，判断每个软件包相对最新版本落后的程度。
"""

import logging
import re
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, Optional, Tuple

from .exceptions import ReportUnavailableError

logger = logging.getLogger(__name__)

ReportSource = Callable[[], str]

# 形如 1.2.3 / v1.2.3 / 1.2.3-beta 的版本号
VERSION_PATTERN = re.compile(r"^v?\d+(\.\d+){2}")


class VersionStatus(Enum):
    """版本状态"""
    ABANDONED = -1         # 已废弃
    LATEST = 0             # 已是最新
    PATCH_AVAILABLE = 1    # 有补丁版本
    MINOR_AVAILABLE = 2    # 有次版本
    MAJOR_AVAILABLE = 3    # 有主版本


class SavedReportSource:
    """读取事先保存的 outdated 报告文件"""

    def __init__(self, path: str):
        self.path = Path(path)

    def __call__(self) -> str:
        try:
            return self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise ReportUnavailableError(f"Outdated report not found: {self.path}") from None


def compare_versions(installed: str, latest: str) -> VersionStatus:
    """
    逐段比较两个版本号（主版本.次版本.补丁）

    Args:
        installed: 当前安装版本
        latest: 最新版本

    Returns:
        版本状态
    """
    current = installed.lstrip("v").split(".")
    newest = latest.lstrip("v").split(".")

    statuses = (
        VersionStatus.MAJOR_AVAILABLE,
        VersionStatus.MINOR_AVAILABLE,
        VersionStatus.PATCH_AVAILABLE,
    )
    for index, status in enumerate(statuses):
        a = current[index] if index < len(current) else ""
        b = newest[index] if index < len(newest) else ""
        if a != b:
            return status

    return VersionStatus.LATEST


def parse_report_line(line: str) -> Optional[Tuple[str, VersionStatus]]:
    """
    解析报告中的一行

    Returns:
        (软件包名称, 状态)；无法识别的行返回 None
    """
    parts = line.split()
    if not parts:
        return None

    if "abandoned" in line:
        # "Package foo/bar is abandoned, you should avoid using it."
        if parts[0] == "Package" and len(parts) > 1:
            return parts[1], VersionStatus.ABANDONED
        return parts[0], VersionStatus.ABANDONED

    versions = [p for p in parts[1:] if VERSION_PATTERN.match(p)]
    if len(versions) < 2:
        return None

    return parts[0], compare_versions(versions[0], versions[1])


class VersionStatusClassifier:
    """版本状态分类器，报告只在首次查询时获取一次"""

    def __init__(self, report_source: Optional[ReportSource] = None):
        """
        初始化分类器

        Args:
            report_source: 返回 outdated 报告文本的可调用对象，None 表示没有报告
        """
        self.report_source = report_source
        self._statuses: Optional[Dict[str, VersionStatus]] = None

    def load(self) -> Dict[str, VersionStatus]:
        """执行一次分类，结果缓存到实例上"""
        if self._statuses is not None:
            return self._statuses

        self._statuses = {}
        report = self._fetch_report()

        for line in report.splitlines():
            parsed = parse_report_line(line)
            if parsed is None:
                if line.strip():
                    logger.debug("Skipping report line: %r", line)
                continue

            name, status = parsed
            self._statuses[name] = status

        logger.debug("Classified %d packages", len(self._statuses))
        return self._statuses

    def _fetch_report(self) -> str:
        if self.report_source is None:
            return ""

        # 报告只用于着色和统计，获取失败时所有包视为最新
        try:
            report = self.report_source()
        except Exception as e:
            logger.warning(
                "Outdated report unavailable, assuming latest versions: %s", e, exc_info=True
            )
            return ""

        if not isinstance(report, str):
            logger.warning(
                "Outdated report source returned %s, assuming latest versions",
                type(report).__name__,
            )
            return ""

        return report

    def status(self, name: str) -> VersionStatus:
        """获取软件包的版本状态，报告中没有的包视为最新"""
        return self.load().get(name, VersionStatus.LATEST)

    def statuses(self) -> Dict[str, VersionStatus]:
        """获取所有已记录的状态（副本）"""
        return dict(self.load())
