"""Core data structures for the BlockSwift pipeline."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Dict, Tuple, Union


SourceText = str
TranslatedText = str
FileTree = Dict[str, str]

Replacement = Union[str, Callable[["re.Match[str]"], str]]


@dataclass(frozen=True)
class RewriteRule:
    """A single global find-and-replace over the accumulated text."""

    name: str
    pattern: "re.Pattern[str]"
    replacement: Replacement

    def apply(self, text: str) -> str:
        return self.pattern.sub(self.replacement, text)


@dataclass(frozen=True)
class RuleGroup:
    """An ordered set of rules forming one step of the conversion."""

    name: str
    rules: Tuple[RewriteRule, ...] = ()

    def apply(self, text: str) -> str:
        for rule in self.rules:
            text = rule.apply(text)
        return text


@dataclass(frozen=True)
class ProjectDescriptor:
    """Inputs for one project export; built on demand and never stored."""

    project_name: str
    translated_body: TranslatedText


@dataclass(frozen=True)
class ProjectOptions:
    """Settings for the generated Xcode project."""

    bundle_prefix: str = "com.example"
    user_name: str = "user"
    minimum_system_version: str = "10.15"
    version: str = "1.0"
    build: str = "1"

    def bundle_identifier(self, project_name: str) -> str:
        return f"{self.bundle_prefix}.{project_name}"
