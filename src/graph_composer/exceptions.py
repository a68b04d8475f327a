"""graph-composer 异常定义"""


class GraphComposerError(Exception):
    """所有 graph-composer 异常的基类"""


class ModelError(GraphComposerError):
    """依赖模型快照无效或无法读取"""


class InvalidRuleError(GraphComposerError):
    """排除规则配置错误（例如无效的正则表达式）"""


class ReportUnavailableError(GraphComposerError):
    """无法获取版本过期报告"""


class ExportError(GraphComposerError):
    """导出失败"""


class InvalidExportFileError(ExportError):
    """导出文件名缺少扩展名"""


class UnsupportedFormatError(ExportError):
    """没有为该格式注册导出器或渲染器"""

    def __init__(self, fmt: str):
        super().__init__(f"Unsupported format: {fmt}")
        self.format = fmt
