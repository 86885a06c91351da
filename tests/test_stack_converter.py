"""Tests for core/stack_converter.py — whole-stack conversion"""

from __future__ import annotations

import json
from unittest.mock import MagicMock

from stackshift.core.stack_converter import (
    TechStackConverter,
    detect_primary_framework,
    kebab_case,
    map_value_to_flutter,
    map_value_to_kotlin,
    map_value_to_typescript,
)

COUNTER = """import React, { useState } from 'react';

const Counter = () => {
  const [count, setCount] = useState(0);
  return <div>{count}</div>;
};

export default Counter;"""

REACT_JS = {"frontend": {"name": "React", "language": "javascript"}}


def _request(target: dict, current: dict = REACT_JS) -> dict:
    return {"projectId": "p1", "currentStack": current, "targetStack": target}


def _files() -> list:
    return [{"path": "src/Counter.jsx", "content": COUNTER}]


def _by_path(result) -> dict:
    return {f["newPath"]: f for f in result["files"]}


class TestHelpers:
    def test_detect_primary_framework(self):
        assert detect_primary_framework(REACT_JS) == "react"
        assert detect_primary_framework({"backend": {"name": "Express", "language": "javascript"}}) == "express"
        assert detect_primary_framework({}) == "unknown"

    def test_kebab_case(self):
        assert kebab_case("UserCard") == "user-card"
        assert kebab_case("App") == "app"

    def test_value_mapping(self):
        assert map_value_to_flutter("x") == "'x'"
        assert map_value_to_flutter(True) == "true"
        assert map_value_to_flutter(None) == "null"
        assert map_value_to_kotlin(3) == "3"
        assert map_value_to_kotlin("x") == '"x"'
        assert map_value_to_typescript([]) == "[]"
        assert map_value_to_typescript(None) == "null"


class TestConvertTechStack:
    def setup_method(self):
        self.converter = TechStackConverter()

    def test_react_to_flutter(self):
        result = self.converter.convert_tech_stack(
            _request({"frontend": {"name": "Flutter", "language": "dart"}}), _files()
        )
        assert result["success"] is True
        files = _by_path(result)
        assert set(files) == {"lib/widgets/counter.dart", "pubspec.yaml"}
        widget = files["lib/widgets/counter.dart"]
        assert widget["originalPath"] == "src/Counter.jsx"
        assert widget["type"] == "widget"
        assert "class Counter extends StatefulWidget {" in widget["content"]
        assert "  int count = 0;" in widget["content"]
        assert widget["lineCount"] == len(widget["content"].split("\n"))
        assert result["convertedProject"]["ui"]["components"][0]["name"] == "Counter"

    def test_react_to_android(self):
        result = self.converter.convert_tech_stack(
            _request({"frontend": {"name": "Android", "language": "kotlin"}}), _files()
        )
        files = _by_path(result)
        composable = files["app/src/main/java/com/example/app/ui/components/Counter.kt"]
        assert "var count by remember { mutableStateOf(0) }" in composable["content"]
        assert "build.gradle.kts" in files

    def test_react_to_typescript_react(self):
        result = self.converter.convert_tech_stack(
            _request({"frontend": {"name": "React", "language": "typescript"}}), _files()
        )
        files = _by_path(result)
        component = files["src/components/Counter.tsx"]["content"]
        assert "import React, { useState } from 'react';" in component
        assert "const Counter: React.FC = () => {" in component
        assert "const [count, setCount] = useState<number>(0);" in component

        package = json.loads(files["package.json"]["content"])
        assert package["dependencies"] == {"react": "^18.0.0", "react-dom": "^18.0.0"}
        assert "typescript" in package["devDependencies"]
        assert package["scripts"]["dev"] == "vite"

    def test_lower_case_target_name(self):
        result = self.converter.convert_tech_stack(
            _request({"frontend": {"name": "react", "language": "TypeScript"}}), _files()
        )
        files = _by_path(result)
        assert "src/components/Counter.tsx" in files
        package = json.loads(files["package.json"]["content"])
        assert package["dependencies"] == {"react": "^18.0.0", "react-dom": "^18.0.0"}
        assert "typescript" in package["devDependencies"]
        assert package["scripts"]["build"] == "vite build"

    def test_vue_target_wins_over_language(self):
        result = self.converter.convert_tech_stack(
            _request({"frontend": {"name": "Vue", "language": "javascript"}}), _files()
        )
        files = _by_path(result)
        vue = files["src/components/Counter.vue"]["content"]
        assert "const count = ref(0)" in vue
        assert '<div class="counter">' in vue
        assert json.loads(files["package.json"]["content"])["dependencies"] == {"vue": "^3.0.0"}

    def test_angular_target(self):
        result = self.converter.convert_tech_stack(
            _request({"frontend": {"name": "Angular", "language": "typescript"}}), _files()
        )
        files = _by_path(result)
        angular = files["src/app/components/counter/counter.component.ts"]["content"]
        assert "selector: 'app-counter'" in angular
        assert "export class CounterComponent {" in angular
        assert "  count: number = 0;" in angular

    def test_unsupported_target_fails_validation(self):
        result = self.converter.convert_tech_stack(
            _request({"frontend": {"name": "Svelte", "language": "svelte"}}), _files()
        )
        assert result["success"] is False
        assert result["files"] == []
        assert result["errors"][0]["message"] == "No files were generated during conversion"

    def test_backend_only_target_generates_nothing(self):
        result = self.converter.convert_tech_stack(
            _request({"backend": {"name": "FastAPI", "language": "python"}}), _files()
        )
        assert result["success"] is False

    def test_summary(self):
        files = _files() + [{"path": "README.md", "content": "# demo\n"}]
        result = self.converter.convert_tech_stack(
            _request({"frontend": {"name": "Flutter", "language": "dart"}}), files
        )
        summary = result["summary"]
        assert summary["totalFiles"] == 2
        assert summary["convertedFiles"] == 2
        assert summary["skippedFiles"] == 0
        assert summary["generatedFiles"] == 1
        assert summary["totalLines"] == 8 + 2
        assert summary["frameworks"]["to"] == {"frontend": {"name": "Flutter", "language": "dart"}}
        assert summary["conversionTime"] >= 0

    def test_skipped_files_never_negative(self):
        result = self.converter.convert_tech_stack(
            _request({"frontend": {"name": "React", "language": "typescript"}}), _files()
        )
        assert len(result["files"]) > 1
        assert result["summary"]["skippedFiles"] == 0

    def test_line_mappings_pair_lines_up_to_shorter_file(self):
        result = self.converter.convert_tech_stack(
            _request({"frontend": {"name": "Flutter", "language": "dart"}}), _files()
        )
        widget = _by_path(result)["lib/widgets/counter.dart"]
        mappings = result["lineMappings"]
        assert len(mappings) == min(8, widget["lineCount"])
        assert mappings[0] == {
            "originalFile": "src/Counter.jsx",
            "originalLine": 1,
            "newFile": "lib/widgets/counter.dart",
            "newLine": 1,
            "type": "transformed",
        }

    def test_parser_diagnostics_become_warnings(self):
        files = _files() + [{"path": "package.json", "content": "{ broken"}]
        result = self.converter.convert_tech_stack(
            _request({"frontend": {"name": "Flutter", "language": "dart"}}), files
        )
        assert result["success"] is True
        assert result["warnings"][0]["file"] == "package.json"
        assert "Invalid package.json" in result["warnings"][0]["message"]

    def test_exception_returns_system_error(self):
        parser = MagicMock()
        parser.parse_project.side_effect = RuntimeError("kaput")
        result = TechStackConverter(line_parser=parser).convert_tech_stack(
            _request({"frontend": {"name": "Flutter", "language": "dart"}}), _files()
        )
        assert result["success"] is False
        assert result["files"] == []
        assert result["errors"] == [{
            "file": "system",
            "line": 0,
            "message": "Conversion failed: kaput",
            "severity": "error",
            "originalCode": "",
        }]
        assert result["convertedProject"]["ui"]["components"] == []
