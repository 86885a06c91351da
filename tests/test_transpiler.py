"""Tests for core/transpiler.py — AST -> UIR -> target templates"""

from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import pytest

from stackshift.core.transpiler import (
    TranspilerService,
    _flutter_test,
    _typescript_test,
    build_flutter_widget,
    build_flutter_widget_tree,
    emit_flutter,
    emit_kotlin,
    emit_typescript,
    format_flutter_value,
    format_kotlin_value,
    format_typescript_value,
    snake_case,
)

FIXED_NOW = datetime(2024, 1, 1, tzinfo=timezone.utc)

COUNTER = "const Counter = () => { const [count, setCount] = useState(0); return <div>{count}</div>; }"


@pytest.fixture()
def service() -> TranspilerService:
    return TranspilerService(clock=lambda: FIXED_NOW)


def _paths(result) -> list:
    return [f["path"] for f in result["files"]]


def _by_path(result, path: str) -> str:
    return next(f["content"] for f in result["files"] if f["path"] == path)


def _component(name="Card", props=None, state=None, children=None) -> dict:
    return {
        "id": f"{name}.jsx:component:{name}",
        "type": "component",
        "name": name,
        "framework": "react",
        "props": props or {},
        "state": state or {},
        "hooks": [],
        "children": children or [],
        "styles": {},
        "metadata": {"originalFile": f"{name}.jsx", "originalFramework": "react", "dependencies": [], "exports": []},
    }


def _element(name, children=None) -> dict:
    return {"id": f"x:element:{name}", "type": "element", "name": name, "framework": "universal",
            "props": {}, "children": children or [], "metadata": {}}


def _text(value) -> dict:
    return {"id": "x:text", "type": "text", "name": value, "framework": "universal", "metadata": {}}


class TestHelpers:
    def test_snake_case(self):
        assert snake_case("UserProfileCard") == "user_profile_card"
        assert snake_case("App2Go") == "app2_go"

    def test_value_formatting(self):
        assert format_flutter_value("hi", "String") == "'hi'"
        assert format_flutter_value(None, "dynamic") == "null"
        assert format_flutter_value(True, "bool") == "true"
        assert format_kotlin_value([], "List<Any>") == "listOf()"
        assert format_kotlin_value({}, "Map<String, Any>") == "mapOf()"
        assert format_kotlin_value("hi", "String") == '"hi"'
        assert format_typescript_value(None, "any") == "undefined"
        assert format_typescript_value(0, "number") == "0"

    def test_flutter_widget_mapping(self):
        assert build_flutter_widget(_element("h1", [_text("Hello")])) == "Text('Hello')"
        tree = _element("div", [_element("p", [_text("a")]), _element("button")])
        assert build_flutter_widget(tree) == "Container(child: Column(children: [Text('a'), ElevatedButton()]))"
        assert build_flutter_widget(_element("span")) == "Container()"
        assert build_flutter_widget_tree([]) == "Container()"


class TestEmitters:
    def test_flutter_stateless_with_props(self):
        node = _component(props={"title": {"name": "title", "type": "any", "required": True}})
        out = emit_flutter(node, {})
        assert out["path"] == "lib/widgets/card_widget.dart"
        assert "class CardWidget extends StatelessWidget {" in out["content"]
        assert "  final dynamic title;" in out["content"]
        assert "required this.title" in out["content"]
        assert out["content"].startswith("// Converted from Card.jsx\n")

    def test_flutter_stateful(self):
        node = _component(state={
            "label": {"name": "label", "type": "string", "initialValue": "it's", "setter": "setLabel"},
        })
        content = emit_flutter(node, {})["content"]
        assert "class CardWidget extends StatefulWidget {" in content
        assert "  String label = 'it\\'s';" in content
        assert "void updateLabel(String newValue) {" in content

    def test_kotlin_component(self):
        node = _component(
            props={"title": {"name": "title", "type": "any", "required": True}},
            state={"label": {"name": "label", "type": "string", "initialValue": "hi", "setter": "setLabel"}},
            children=[_element("h2", [_text("Title")])],
        )
        out = emit_kotlin(node, {})
        assert out["path"] == "app/src/main/java/com/example/app/ui/CardScreen.kt"
        assert "package com.example.app.ui" in out["content"]
        assert "fun CardScreen(title: Any) {" in out["content"]
        assert 'var label by remember { mutableStateOf("hi") }' in out["content"]
        assert 'Text("Title")' in out["content"]

    def test_typescript_component(self):
        node = _component(
            props={"title": {"name": "title", "type": "any", "required": True}},
            state={"count": {"name": "count", "type": "number", "initialValue": 0, "setter": "setCount"}},
        )
        content = emit_typescript(node, {})["content"]
        assert "interface CardProps {\n  title: any;\n}" in content
        assert "const Card: React.FC<CardProps> = (props: CardProps) => {" in content
        assert "const [count, setCount] = useState<number>(0);" in content
        assert content.endswith("export default Card;")

    def test_function_node_stub(self):
        node = {
            "id": "utils.js:function:helper",
            "type": "function",
            "name": "helper",
            "framework": "react",
            "metadata": {"originalFile": "utils.js", "originalFramework": "react", "dependencies": [], "exports": []},
            "implementation": {"code": "{\n  return a;\n}", "language": "javascript"},
        }
        out = emit_flutter(node, {})
        assert out["path"] == "lib/helper.dart"
        assert "// Original implementation (javascript):" in out["content"]
        assert "//   return a;" in out["content"]
        assert out["content"].endswith("// TODO: Implement helper")
        assert emit_typescript(node, {})["path"] == "src/helper.ts"
        assert emit_kotlin(node, {})["path"] == "app/src/main/java/com/example/app/helper.kt"

    def test_preserve_comments_false_drops_header(self):
        out = emit_typescript(_component(), {"preserveComments": False})
        assert not out["content"].startswith("// Converted from")

    def test_emission_is_deterministic(self):
        node = _component(state={"n": {"name": "n", "type": "number", "initialValue": 1, "setter": "setN"}})
        for emit in (emit_flutter, emit_kotlin, emit_typescript):
            assert emit(node, {}) == emit(node, {})

    def test_flutter_test_placeholders(self):
        node = _component(props={
            "title": {"name": "title", "type": "string", "required": True},
            "extra": {"name": "extra", "type": "any", "required": True},
        })
        out = _flutter_test(node)
        assert out["path"] == "test/widgets/card_widget_test.dart"
        assert "CardWidget(title: '', extra: null)" in out["content"]

    def test_typescript_test_renders_with_empty_props(self):
        out = _typescript_test(_component())
        assert out["path"] == "src/components/__tests__/Card.test.tsx"
        assert "import Card from '../Card';" in out["content"]
        assert "    render(<Card {...({} as any)} />);\n" in out["content"]
        assert "describe('Card', () => {" in out["content"]


class TestTranspileProject:
    def test_typescript_output_uses_placeholder_body(self, service):
        files = [{"path": "App.jsx", "content": "const App = () => { return <div>Hi</div>; }"}]
        result = service.transpile_project(files, "react", "typescript")
        assert result["success"] is True
        content = _by_path(result, "src/components/App.tsx")
        assert "const App: React.FC = () => {" in content
        assert "<h1>Converted Component</h1>" in content
        assert "<div>Hi</div>" not in content

    def test_flutter_state_type_from_numeric_default(self, service):
        result = service.transpile_project([{"path": "Counter.jsx", "content": COUNTER}], "react", "flutter")
        content = _by_path(result, "lib/widgets/counter_widget.dart")
        assert "class CounterWidget extends StatefulWidget {" in content
        assert "  int count = 0;" in content
        assert "return Container();" in content

    def test_non_code_files_yield_only_project_files(self, service):
        files = [
            {"path": "logo.png", "content": "[Binary file: logo.png]"},
            {"path": "README.md", "content": "# hi"},
        ]
        result = service.transpile_project(files, "react", "flutter")
        assert result["success"] is True
        assert _paths(result) == ["pubspec.yaml", "lib/main.dart", "README.md"]

    def test_unknown_target_yields_readme_only(self, service):
        result = service.transpile_project([{"path": "Counter.jsx", "content": COUNTER}], "react", "cobol")
        assert result["success"] is True
        assert _paths(result) == ["README.md"]
        assert result["errors"] == []

    def test_project_files_per_target(self, service):
        files = [{"path": "Counter.jsx", "content": COUNTER}]
        kotlin = _paths(service.transpile_project(files, "react", "kotlin"))
        assert kotlin == [
            "app/src/main/java/com/example/app/ui/CounterScreen.kt",
            "build.gradle.kts",
            "app/src/main/java/com/example/app/MainActivity.kt",
            "README.md",
        ]
        typescript = _paths(service.transpile_project(files, "react", "TypeScript"))
        assert "package.json" in typescript
        assert "src/index.tsx" in typescript
        assert _paths(service.transpile_project(files, "react", "dart"))[0] == "lib/widgets/counter_widget.dart"

    def test_generate_tests(self, service):
        files = [{"path": "Counter.jsx", "content": COUNTER}]
        options = {"generateTests": True}
        assert "test/widgets/counter_widget_test.dart" in _paths(
            service.transpile_project(files, "react", "flutter", options)
        )
        assert "app/src/androidTest/java/com/example/app/ui/CounterScreenTest.kt" in _paths(
            service.transpile_project(files, "react", "kotlin", options)
        )
        ts = service.transpile_project(files, "react", "typescript", options)
        assert "src/components/__tests__/Counter.test.tsx" in _paths(ts)
        assert "@testing-library/react" in _by_path(ts, "package.json")

    def test_stylesheets_and_functions_become_stubs(self, service):
        files = [
            {"path": "App.css", "content": ".app { color: red; }"},
            {"path": "utils.js", "content": "export function add(a, b) { return a + b; }"},
        ]
        result = service.transpile_project(files, "react", "flutter")
        assert "// .app { color: red; }" in _by_path(result, "lib/app_css.dart")
        assert "// { return a + b; }" in _by_path(result, "lib/add.dart")

    def test_parse_failure_is_a_warning(self, service):
        files = [{"path": "bad.js", "content": "const = ;"}, {"path": "Counter.jsx", "content": COUNTER}]
        result = service.transpile_project(files, "react", "typescript")
        assert result["success"] is True
        assert len(result["warnings"]) == 1
        assert result["warnings"][0].startswith("Could not process file bad.js")
        assert "src/components/Counter.tsx" in _paths(result)

    def test_per_node_failure_is_an_error(self, service):
        def boom(node, options):
            raise RuntimeError("boom")

        files = [{"path": "Counter.jsx", "content": COUNTER}]
        with patch.dict("stackshift.core.transpiler.EMITTERS", {"flutter": (boom, _flutter_test)}):
            result = service.transpile_project(files, "react", "flutter")
        assert result["errors"] == ["Failed to convert Counter: boom"]
        assert result["success"] is True

    def test_unexpected_failure_fails_whole_conversion(self):
        parser = MagicMock()
        parser.parse_javascript.side_effect = RuntimeError("parser exploded")
        service = TranspilerService(ast_parser=parser)
        result = service.transpile_project([{"path": "a.js", "content": ""}], "react", "flutter")
        assert result == {
            "success": False,
            "files": [],
            "errors": ["Transpilation failed: parser exploded"],
            "warnings": [],
        }

    def test_readme_uses_clock(self, service):
        result = service.transpile_project([{"path": "Counter.jsx", "content": COUNTER}], "react", "flutter")
        readme = _by_path(result, "README.md")
        assert "Conversion date: 2024-01-01T00:00:00+00:00" in readme
        assert "- Files processed: 1" in readme
        assert "- Components converted: 1" in readme

    def test_convert_node(self, service):
        assert service.convert_node(_component(), "cobol") is None
        assert service.convert_node(_component(), "flutter")["path"] == "lib/widgets/card_widget.dart"
