# stackshift/core/language_detector.py
"""
Language and framework detection for uploaded projects.

Detection is pure regex heuristics: a language comes from the file extension
(or a crude content sniff), and a framework is reported only when one of its
path patterns AND one of its content patterns match the same file.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Pattern, Sequence, Tuple

from .schema import LanguageStat, SourceFile, TechStackAnalysis

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FrameworkPatterns:
    """Content regexes and file-path regexes for one framework."""
    patterns: Tuple[Pattern[str], ...]
    files: Tuple[Pattern[str], ...]


def _framework(patterns: Sequence[str], files: Sequence[str]) -> FrameworkPatterns:
    return FrameworkPatterns(
        patterns=tuple(re.compile(p) for p in patterns),
        files=tuple(re.compile(f) for f in files),
    )


# Ordered: the first matching extension wins.
LANGUAGE_PATTERNS: Mapping[str, Pattern[str]] = MappingProxyType({
    "javascript": re.compile(r"\.(js|jsx)$"),
    "typescript": re.compile(r"\.(ts|tsx)$"),
    "python": re.compile(r"\.py$"),
    "dart": re.compile(r"\.dart$"),
    "go": re.compile(r"\.go$"),
    "html": re.compile(r"\.(html|htm)$"),
    "css": re.compile(r"\.(css|scss|sass|less)$"),
    "json": re.compile(r"\.json$"),
    "yaml": re.compile(r"\.(yml|yaml)$"),
    "markdown": re.compile(r"\.(md|markdown)$"),
})

FRAMEWORK_PATTERNS: Mapping[str, FrameworkPatterns] = MappingProxyType({
    "react": FrameworkPatterns(
        patterns=(
            re.compile(r"import.*react", re.IGNORECASE),
            re.compile(r"from\s+['\"]react['\"]"),
            re.compile(r"<[A-Z]\w*"),
            re.compile(r"jsx", re.IGNORECASE),
        ),
        files=(re.compile(r"\.jsx?$"), re.compile(r"\.tsx?$")),
    ),
    "nodejs": _framework(
        [r"require\s*\(", r"module\.exports", r"express", r"app\.listen"],
        [r"package\.json$", r"server\.js$", r"index\.js$"],
    ),
    "typescript": _framework(
        [r"interface\s+\w+", r"type\s+\w+\s*=", r":\s*\w+", r"as\s+\w+"],
        [r"\.ts$", r"\.tsx$", r"tsconfig\.json$"],
    ),
    "python": _framework(
        [
            r"from\s+\w+\s+import",
            r"def\s+\w+\(",
            r"class\s+\w+",
            r"if\s+__name__\s*==\s*['\"]__main__['\"]:",
        ],
        [r"\.py$", r"requirements\.txt$", r"setup\.py$"],
    ),
    "flutter": _framework(
        [r"import\s+['\"]flutter", r"StatelessWidget", r"StatefulWidget", r"Widget\s+build"],
        [r"\.dart$", r"pubspec\.yaml$"],
    ),
    "fastapi": _framework(
        [r"from\s+fastapi", r"@app\.(get|post|put|delete)", r"FastAPI\(\)"],
        [r"\.py$"],
    ),
    "express": _framework(
        [r"require\(['\"]express['\"]", r"app\.use\(", r"app\.(get|post|put|delete)"],
        [r"\.js$", r"package\.json$"],
    ),
})

LANGUAGE_DISPLAY_NAMES: Mapping[str, str] = MappingProxyType({
    "javascript": "JavaScript",
    "typescript": "TypeScript",
    "python": "Python",
    "dart": "Dart",
    "go": "Go",
    "html": "HTML",
    "css": "CSS",
    "json": "JSON",
    "yaml": "YAML",
    "markdown": "Markdown",
})

LANGUAGE_ICONS: Mapping[str, str] = MappingProxyType({
    "javascript": "fab fa-js-square",
    "typescript": "fab fa-js-square",
    "python": "fab fa-python",
    "dart": "fas fa-mobile-alt",
    "go": "fas fa-code",
    "html": "fab fa-html5",
    "css": "fab fa-css3-alt",
    "json": "fas fa-file-code",
    "yaml": "fas fa-file-code",
    "markdown": "fab fa-markdown",
})

LANGUAGE_PURPOSES: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "javascript": ("Frontend", "Backend", "Full-stack"),
    "typescript": ("Frontend", "Backend", "Full-stack"),
    "python": ("Backend", "Data Science", "Machine Learning"),
    "dart": ("Mobile Frontend", "Flutter Apps"),
    "go": ("Backend", "Microservices", "System Programming"),
    "html": ("Frontend", "Web UI"),
    "css": ("Frontend", "Styling"),
    "json": ("Configuration", "Data"),
    "yaml": ("Configuration", "DevOps"),
    "markdown": ("Documentation",),
})

FRAMEWORK_DISPLAY_NAMES: Mapping[str, str] = MappingProxyType({
    "react": "React",
    "nodejs": "Node.js",
    "typescript": "TypeScript",
    "python": "Python",
    "flutter": "Flutter",
    "fastapi": "FastAPI",
    "express": "Express.js",
})

DEFAULT_ICON = "fas fa-file-code"
UNKNOWN_LANGUAGE = "unknown"


@dataclass(frozen=True)
class DetectionPatterns:
    """Immutable pattern tables injected into a LanguageDetector."""
    languages: Mapping[str, Pattern[str]] = field(default_factory=lambda: LANGUAGE_PATTERNS)
    frameworks: Mapping[str, FrameworkPatterns] = field(default_factory=lambda: FRAMEWORK_PATTERNS)
    display_names: Mapping[str, str] = field(default_factory=lambda: LANGUAGE_DISPLAY_NAMES)
    icons: Mapping[str, str] = field(default_factory=lambda: LANGUAGE_ICONS)
    purposes: Mapping[str, Tuple[str, ...]] = field(default_factory=lambda: LANGUAGE_PURPOSES)
    framework_names: Mapping[str, str] = field(default_factory=lambda: FRAMEWORK_DISPLAY_NAMES)


DEFAULT_PATTERNS = DetectionPatterns()


def _round_one_decimal(value: float) -> float:
    """Rounds half-up to one decimal place (Math.round semantics for positives)."""
    return float(Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def count_lines(content: str) -> int:
    """Number of lines the way a split on newline counts them ("" is one line)."""
    return len(content.split("\n"))


class LanguageDetector:
    """Classifies files by language and a project by its frameworks."""

    def __init__(self, patterns: DetectionPatterns = DEFAULT_PATTERNS) -> None:
        self.patterns = patterns

    def detect_language(self, filename: str, content: str) -> str:
        for language, pattern in self.patterns.languages.items():
            if pattern.search(filename):
                return language

        # Fallback to content sniffing
        if "def " in content or "import " in content:
            return "python"
        if "function" in content or "const " in content or "let " in content:
            return "javascript"

        return UNKNOWN_LANGUAGE

    def detect_frameworks(self, files: Iterable[SourceFile]) -> List[str]:
        """
        Returns framework keys in table order. A framework counts only if a
        single file matches both one of its path patterns and one of its
        content patterns.
        """
        detected: set[str] = set()

        for file in files:
            for framework, detector in self.patterns.frameworks.items():
                if framework in detected:
                    continue
                matches_file = any(p.search(file["path"]) for p in detector.files)
                if not matches_file:
                    continue
                if any(p.search(file["content"]) for p in detector.patterns):
                    detected.add(framework)

        return [name for name in self.patterns.frameworks if name in detected]

    def analyze_project(self, files: Sequence[SourceFile]) -> TechStackAnalysis:
        counts: Dict[str, Dict[str, int]] = {}
        by_language: Dict[str, List[SourceFile]] = {}
        total_files = 0
        total_lines = 0

        for file in files:
            language = self.detect_language(file["path"], file["content"])
            if language == UNKNOWN_LANGUAGE:
                continue

            lines = count_lines(file["content"])
            stats = counts.setdefault(language, {"files": 0, "lines": 0})
            stats["files"] += 1
            stats["lines"] += lines
            by_language.setdefault(language, []).append(file)

            total_files += 1
            total_lines += lines

        languages: List[LanguageStat] = []
        for language, stats in counts.items():
            languages.append({
                "language": self.patterns.display_names.get(language, language),
                "percentage": _round_one_decimal(stats["lines"] / total_lines * 100),
                "files": stats["files"],
                "icon": self.patterns.icons.get(language, DEFAULT_ICON),
                "purpose": self._language_purpose(language, by_language[language]),
            })
        languages.sort(key=lambda stat: stat["percentage"], reverse=True)

        frameworks = [
            self.patterns.framework_names.get(name, name)
            for name in self.detect_frameworks(files)
        ]

        logger.debug(
            "Analyzed %d files: %d known, %d lines, frameworks=%s",
            len(files), total_files, total_lines, frameworks,
        )

        return {
            "languages": languages,
            "frameworks": frameworks,
            "totalFiles": total_files,
            "totalLines": total_lines,
        }

    def _language_purpose(self, language: str, files: Sequence[SourceFile]) -> str:
        contents = " ".join(f["content"].lower() for f in files)
        paths = " ".join(f["path"].lower() for f in files)

        if language in ("javascript", "typescript"):
            if "server" in paths or "api" in paths or "express" in contents or "app.listen" in contents:
                return "Backend"
            if "react" in contents or "component" in contents or "client" in paths:
                return "Frontend"
            return "Full-stack"

        if language == "python":
            if "fastapi" in contents or "flask" in contents or "django" in contents:
                return "Backend API"
            if "pandas" in contents or "numpy" in contents or "sklearn" in contents:
                return "Data Science"
            return "Backend"

        purposes = self.patterns.purposes.get(language)
        return purposes[0] if purposes else "General"
