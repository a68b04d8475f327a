"""
排除规则

决定哪些软件包节点或依赖边不出现在渲染的图中。
规则链按顺序求值，任意一条规则排除即排除（短路求值）。
"""

import re
from typing import Callable, Iterable, List, Protocol, Union

from .exceptions import InvalidRuleError
from .model import DependencyEdge, PackageNode


class PackageRule(Protocol):
    """软件包排除规则"""

    def is_excluded(self, package: PackageNode) -> bool: ...


class DependencyRule(Protocol):
    """依赖边排除规则"""

    def is_excluded(self, dependency: DependencyEdge) -> bool: ...


PackageRuleLike = Union[PackageRule, Callable[[PackageNode], bool]]
DependencyRuleLike = Union[DependencyRule, Callable[[DependencyEdge], bool]]


def _compile(pattern: str) -> "re.Pattern[str]":
    try:
        return re.compile(pattern)
    except re.error as e:
        raise InvalidRuleError(f"Invalid exclusion pattern {pattern!r}: {e}") from e


def _check(rule, subject) -> bool:
    if hasattr(rule, "is_excluded"):
        return rule.is_excluded(subject)
    return rule(subject)


def _validate(rule):
    if not (hasattr(rule, "is_excluded") or callable(rule)):
        raise InvalidRuleError(f"Not an exclusion rule: {rule!r}")
    return rule


class ChainedPackageRule:
    """软件包规则链，空链不排除任何包"""

    def __init__(self, rules: Iterable[PackageRuleLike] = ()):
        self.rules: List[PackageRuleLike] = [_validate(r) for r in rules]

    def add(self, rule: PackageRuleLike) -> "ChainedPackageRule":
        self.rules.append(_validate(rule))
        return self

    def is_excluded(self, package: PackageNode) -> bool:
        return any(_check(rule, package) for rule in self.rules)


class ChainedDependencyRule:
    """依赖规则链，空链不排除任何依赖"""

    def __init__(self, rules: Iterable[DependencyRuleLike] = ()):
        self.rules: List[DependencyRuleLike] = [_validate(r) for r in rules]

    def add(self, rule: DependencyRuleLike) -> "ChainedDependencyRule":
        self.rules.append(_validate(rule))
        return self

    def is_excluded(self, dependency: DependencyEdge) -> bool:
        return any(_check(rule, dependency) for rule in self.rules)


class RegexPackageRule:
    """排除名称匹配正则表达式的软件包"""

    def __init__(self, pattern: str):
        self.pattern = _compile(pattern)

    def is_excluded(self, package: PackageNode) -> bool:
        return self.pattern.search(package.name) is not None


class NamePackageRule:
    """按名称排除软件包"""

    def __init__(self, names: Iterable[str]):
        self.names = set(names)

    def is_excluded(self, package: PackageNode) -> bool:
        return package.name in self.names


class DevDependencyRule:
    """排除所有开发依赖"""

    def is_excluded(self, dependency: DependencyEdge) -> bool:
        return dependency.dev


class ConstraintDependencyRule:
    """排除版本约束匹配正则表达式的依赖（例如 "dev-" 分支约束）"""

    def __init__(self, pattern: str):
        self.pattern = _compile(pattern)

    def is_excluded(self, dependency: DependencyEdge) -> bool:
        return self.pattern.search(dependency.version_constraint) is not None
