# stackshift/core/transpiler.py
"""
File-by-file conversion: source files -> AST -> UIR -> target templates.

Only component signatures survive (name, props, state and a shallow tag
skeleton of the returned JSX). Function bodies, event handlers and JSX
expressions are not translated; emitted files carry placeholder bodies.
"""

from __future__ import annotations

import json
import logging
import re
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from .ast_parser import ASTParser
from .schema import (
    ASTNode,
    ConversionOptions,
    ConversionResult,
    OutputFile,
    SourceFile,
    UIRNode,
)
from .uir_generator import UIRGenerator

logger = logging.getLogger(__name__)

JS_EXTENSIONS = (".js", ".jsx", ".ts", ".tsx")
CSS_EXTENSIONS = (".css", ".scss")

FLUTTER_TYPES = {
    "string": "String",
    "number": "int",
    "boolean": "bool",
    "array": "List<dynamic>",
    "object": "Map<String, dynamic>",
}
KOTLIN_TYPES = {
    "string": "String",
    "number": "Int",
    "boolean": "Boolean",
    "array": "List<Any>",
    "object": "Map<String, Any>",
}
TYPESCRIPT_TYPES = {
    "string": "string",
    "number": "number",
    "boolean": "boolean",
    "array": "any[]",
    "object": "Record<string, any>",
}

HTML_TO_FLUTTER = {
    "div": "Container",
    "button": "ElevatedButton",
    "input": "TextField",
    "img": "Image",
    "p": "Text",
    "h1": "Text", "h2": "Text", "h3": "Text", "h4": "Text", "h5": "Text", "h6": "Text",
}
HTML_TO_COMPOSE = {
    "div": "Box",
    "button": "Button",
    "input": "TextField",
    "img": "Image",
    "p": "Text",
    "h1": "Text", "h2": "Text", "h3": "Text", "h4": "Text", "h5": "Text", "h6": "Text",
}


# -------------------- Names / values --------------------

def map_type_to_flutter(type_: str) -> str:
    return FLUTTER_TYPES.get(type_, "dynamic")


def map_type_to_kotlin(type_: str) -> str:
    return KOTLIN_TYPES.get(type_, "Any")


def map_type_to_typescript(type_: str) -> str:
    return TYPESCRIPT_TYPES.get(type_, "any")


def snake_case(name: str) -> str:
    snake = re.sub(r"(?<=[a-z0-9])(?=[A-Z])", "_", name).lower()
    return re.sub(r"[^a-z0-9]", "_", snake)


def safe_identifier(name: str) -> str:
    return re.sub(r"[^A-Za-z0-9_]", "_", name)


def capitalize(name: str) -> str:
    return name[:1].upper() + name[1:]


def _literal(value: Any, null: str) -> str:
    if value is None:
        return null
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def format_flutter_value(value: Any, dart_type: str) -> str:
    if dart_type == "String" and isinstance(value, str):
        return "'" + value.replace("'", "\\'") + "'"
    if isinstance(value, list):
        return "[]"
    if isinstance(value, dict):
        return "{}"
    return _literal(value, "null")


def format_kotlin_value(value: Any, kotlin_type: str) -> str:
    if kotlin_type == "String" and isinstance(value, str):
        return '"' + value.replace('"', '\\"') + '"'
    if isinstance(value, list):
        return "listOf()"
    if isinstance(value, dict):
        return "mapOf()"
    return _literal(value, "null")


def format_typescript_value(value: Any, ts_type: str) -> str:
    if ts_type == "string" and isinstance(value, str):
        return "'" + value.replace("'", "\\'") + "'"
    if isinstance(value, list):
        return "[]"
    if isinstance(value, dict):
        return "{}"
    return _literal(value, "undefined")


def _header(node: UIRNode, options: ConversionOptions) -> str:
    if options.get("preserveComments", True) is False:
        return ""
    return f"// Converted from {node['metadata']['originalFile']}\n"


def _stub_body(node: UIRNode) -> str:
    """Commented copy of what a non-component node carried."""
    lines: List[str] = [f"// UIR Node: {node['type']}", ""]
    implementation = node.get("implementation")
    if implementation and implementation.get("code"):
        lines.append(f"// Original implementation ({implementation['language']}):")
        lines.extend(f"// {line}" if line else "//" for line in implementation["code"].split("\n"))
        lines.append("")
    for selector, props in (node.get("styles") or {}).items():
        body = " ".join(f"{k}: {v};" for k, v in props.items())
        lines.append(f"// .{selector} {{ {body} }}")
    if node.get("styles"):
        lines.append("")
    lines.append(f"// TODO: Implement {node['name']}")
    return "\n".join(lines)


# -------------------- Flutter --------------------

def _text_of(node: UIRNode) -> str:
    return " ".join(c["name"] for c in node.get("children") or [] if c["type"] == "text")


def _dart_string(text: str) -> str:
    return "'" + text.replace("\\", "\\\\").replace("'", "\\'") + "'"


def build_flutter_widget(node: UIRNode) -> str:
    if node["type"] == "text":
        return f"Text({_dart_string(node['name'])})"

    if node["type"] == "element":
        widget = HTML_TO_FLUTTER.get(node["name"].lower(), "Container")
        if widget == "Text":
            return f"Text({_dart_string(_text_of(node))})"

        children = node.get("children") or []
        if not children:
            return f"{widget}()"
        child_widgets = ", ".join(build_flutter_widget(c) for c in children)
        if len(children) == 1:
            return f"{widget}(child: {child_widgets})"
        return f"{widget}(child: Column(children: [{child_widgets}]))"

    return "Container()"


def build_flutter_widget_tree(children: Sequence[UIRNode]) -> str:
    if not children:
        return "Container()"
    if len(children) == 1:
        return build_flutter_widget(children[0])
    child_widgets = ",\n        ".join(build_flutter_widget(c) for c in children)
    return f"Column(\n        children: [\n        {child_widgets}\n      ],\n    )"


def _flutter_constructor(class_name: str, props: Dict[str, Any]) -> str:
    if not props:
        return f"  const {class_name}({{Key? key}}) : super(key: key);\n\n"
    fields = "\n".join(f"  final {map_type_to_flutter(p['type'])} {name};" for name, p in props.items())
    required = ", ".join(f"required this.{name}" for name in props)
    return f"{fields}\n\n  const {class_name}({{Key? key, {required}}}) : super(key: key);\n\n"


def emit_flutter(node: UIRNode, options: ConversionOptions) -> OutputFile:
    if node["type"] != "component":
        return {
            "path": f"lib/{snake_case(safe_identifier(node['name']))}.dart",
            "content": _header(node, options) + _stub_body(node),
            "type": "dart",
        }

    name = node["name"]
    class_name = f"{name}Widget"
    props = node.get("props") or {}
    state = node.get("state") or {}

    content = _header(node, options) + "import 'package:flutter/material.dart';\n\n"

    if state:
        content += f"class {class_name} extends StatefulWidget {{\n"
        content += _flutter_constructor(class_name, props)
        content += f"  @override\n  State<{class_name}> createState() => _{class_name}State();\n}}\n\n"
        content += f"class _{class_name}State extends State<{class_name}> {{\n"
        for state_name, info in state.items():
            dart_type = map_type_to_flutter(info["type"])
            content += f"  {dart_type} {state_name} = {format_flutter_value(info['initialValue'], dart_type)};\n"
        content += "\n  @override\n  Widget build(BuildContext context) {\n"
    else:
        content += f"class {class_name} extends StatelessWidget {{\n"
        content += _flutter_constructor(class_name, props)
        content += "  @override\n  Widget build(BuildContext context) {\n"

    content += f"    return {build_flutter_widget_tree(node.get('children') or [])};\n  }}\n"

    for state_name, info in state.items():
        dart_type = map_type_to_flutter(info["type"])
        content += (
            f"\n  void update{capitalize(state_name)}({dart_type} newValue) {{\n"
            f"    setState(() {{\n      {state_name} = newValue;\n    }});\n  }}\n"
        )

    content += "}"

    return {"path": f"lib/widgets/{snake_case(name)}_widget.dart", "content": content, "type": "dart"}


def _flutter_test(node: UIRNode) -> OutputFile:
    name = node["name"]
    placeholders = {"string": "''", "number": "0", "boolean": "false", "array": "[]", "object": "{}"}
    args = ", ".join(
        f"{p}: {placeholders.get(info['type'], 'null')}" for p, info in (node.get("props") or {}).items()
    )
    content = (
        "import 'package:flutter/material.dart';\n"
        "import 'package:flutter_test/flutter_test.dart';\n"
        f"import 'package:converted_flutter_app/widgets/{snake_case(name)}_widget.dart';\n\n"
        "void main() {\n"
        f"  testWidgets('{name}Widget renders', (WidgetTester tester) async {{\n"
        f"    await tester.pumpWidget(MaterialApp(home: {name}Widget({args})));\n"
        f"    expect(find.byType({name}Widget), findsOneWidget);\n"
        "  });\n"
        "}\n"
    )
    return {"path": f"test/widgets/{snake_case(name)}_widget_test.dart", "content": content, "type": "dart"}


# -------------------- Kotlin (Compose) --------------------

def build_kotlin_composable(node: UIRNode) -> str:
    if node["type"] == "text":
        return 'Text("' + node["name"].replace('"', '\\"') + '")'
    if node["type"] == "element":
        composable = HTML_TO_COMPOSE.get(node["name"].lower(), "Box")
        if composable == "Text":
            return 'Text("' + _text_of(node).replace('"', '\\"') + '")'
        return f"{composable} {{}}"
    return "Box {}"


def build_kotlin_composable_tree(children: Sequence[UIRNode]) -> str:
    if not children:
        return "Box {}"
    inner = "\n        ".join(build_kotlin_composable(c) for c in children)
    return f"Column {{\n        {inner}\n    }}"


def emit_kotlin(node: UIRNode, options: ConversionOptions) -> OutputFile:
    name = node["name"]
    if node["type"] != "component":
        return {
            "path": f"app/src/main/java/com/example/app/{safe_identifier(name)}.kt",
            "content": _header(node, options) + _stub_body(node),
            "type": "kotlin",
        }

    props = node.get("props") or {}
    state = node.get("state") or {}

    content = _header(node, options)
    content += (
        "package com.example.app.ui\n\n"
        "import androidx.compose.foundation.layout.*\n"
        "import androidx.compose.material3.*\n"
        "import androidx.compose.runtime.*\n"
        "import androidx.compose.ui.Alignment\n"
        "import androidx.compose.ui.Modifier\n"
        "import androidx.compose.ui.unit.dp\n\n"
    )
    params = ", ".join(f"{p}: {map_type_to_kotlin(info['type'])}" for p, info in props.items())
    content += f"@OptIn(ExperimentalMaterial3Api::class)\n@Composable\nfun {name}Screen({params}) {{\n"

    for state_name, info in state.items():
        kotlin_type = map_type_to_kotlin(info["type"])
        content += f"    var {state_name} by remember {{ mutableStateOf({format_kotlin_value(info['initialValue'], kotlin_type)}) }}\n"
    if state:
        content += "\n"

    content += f"    {build_kotlin_composable_tree(node.get('children') or [])}\n}}"

    return {"path": f"app/src/main/java/com/example/app/ui/{name}Screen.kt", "content": content, "type": "kotlin"}


def _kotlin_test(node: UIRNode) -> OutputFile:
    name = node["name"]
    placeholders = {"string": '""', "number": "0", "boolean": "false", "array": "listOf()", "object": "mapOf()"}
    args = ", ".join(
        f"{p} = {placeholders.get(info['type'], 'Unit')}" for p, info in (node.get("props") or {}).items()
    )
    content = (
        "package com.example.app.ui\n\n"
        "import androidx.compose.ui.test.junit4.createComposeRule\n"
        "import org.junit.Rule\n"
        "import org.junit.Test\n\n"
        f"class {name}ScreenTest {{\n"
        "    @get:Rule\n"
        "    val composeTestRule = createComposeRule()\n\n"
        "    @Test\n"
        "    fun rendersWithoutCrashing() {\n"
        "        composeTestRule.setContent {\n"
        f"            {name}Screen({args})\n"
        "        }\n"
        "    }\n"
        "}\n"
    )
    return {
        "path": f"app/src/androidTest/java/com/example/app/ui/{name}ScreenTest.kt",
        "content": content,
        "type": "kotlin",
    }


# -------------------- TypeScript (React) --------------------

def emit_typescript(node: UIRNode, options: ConversionOptions) -> OutputFile:
    name = node["name"]
    if node["type"] != "component":
        return {
            "path": f"src/{safe_identifier(name)}.ts",
            "content": _header(node, options) + _stub_body(node),
            "type": "typescript",
        }

    props = node.get("props") or {}
    state = node.get("state") or {}

    content = _header(node, options) + "import React, { useState } from 'react';\n\n"

    if props:
        content += f"interface {name}Props {{\n"
        for prop_name, prop in props.items():
            optional = "" if prop.get("required") else "?"
            content += f"  {prop_name}{optional}: {map_type_to_typescript(prop['type'])};\n"
        content += "}\n\n"

    generic = f"<{name}Props>" if props else ""
    param = f"props: {name}Props" if props else ""
    content += f"const {name}: React.FC{generic} = ({param}) => {{\n"

    for state_name, info in state.items():
        ts_type = map_type_to_typescript(info["type"])
        initial = format_typescript_value(info["initialValue"], ts_type)
        content += f"  const [{state_name}, {info['setter']}] = useState<{ts_type}>({initial});\n"
    if state:
        content += "\n"

    content += (
        "  return (\n"
        "    <div>\n"
        "      {/* TODO: Convert JSX from UIR */}\n"
        "      <h1>Converted Component</h1>\n"
        "    </div>\n"
        "  );\n"
        "};\n\n"
        f"export default {name};"
    )

    return {"path": f"src/components/{name}.tsx", "content": content, "type": "typescript"}


def _typescript_test(node: UIRNode) -> OutputFile:
    name = node["name"]
    content = (
        "import React from 'react';\n"
        "import { render } from '@testing-library/react';\n"
        f"import {name} from '../{name}';\n\n"
        f"describe('{name}', () => {{\n"
        "  it('renders without crashing', () => {\n"
        f"    render(<{name} {{...({{}} as any)}} />);\n"
        "  });\n"
        "});\n"
    )
    return {"path": f"src/components/__tests__/{name}.test.tsx", "content": content, "type": "typescript"}


# -------------------- Project files --------------------

PUBSPEC_YAML = """name: converted_flutter_app
description: Converted Flutter application
version: 1.0.0+1

environment:
  sdk: '>=3.0.0 <4.0.0'
  flutter: ">=3.10.0"

dependencies:
  flutter:
    sdk: flutter
  cupertino_icons: ^1.0.6

dev_dependencies:
  flutter_test:
    sdk: flutter
  flutter_lints: ^3.0.0

flutter:
  uses-material-design: true
"""

FLUTTER_MAIN = """import 'package:flutter/material.dart';

void main() {
  runApp(const MyApp());
}

class MyApp extends StatelessWidget {
  const MyApp({Key? key}) : super(key: key);

  @override
  Widget build(BuildContext context) {
    return MaterialApp(
      title: 'Converted Flutter App',
      theme: ThemeData(
        primarySwatch: Colors.blue,
      ),
      home: const ConvertedHomePage(),
    );
  }
}

class ConvertedHomePage extends StatefulWidget {
  const ConvertedHomePage({Key? key}) : super(key: key);

  @override
  State<ConvertedHomePage> createState() => _ConvertedHomePageState();
}

class _ConvertedHomePageState extends State<ConvertedHomePage> {
  @override
  Widget build(BuildContext context) {
    return Scaffold(
      appBar: AppBar(
        title: const Text('Converted App'),
      ),
      body: const Center(
        child: Text('Welcome to your converted Flutter app!'),
      ),
    );
  }
}"""

BUILD_GRADLE_KTS = """plugins {
    id("com.android.application")
    id("org.jetbrains.kotlin.android")
}

android {
    namespace = "com.example.convertedapp"
    compileSdk = 34

    defaultConfig {
        applicationId = "com.example.convertedapp"
        minSdk = 24
        targetSdk = 34
        versionCode = 1
        versionName = "1.0"
    }

    compileOptions {
        sourceCompatibility = JavaVersion.VERSION_1_8
        targetCompatibility = JavaVersion.VERSION_1_8
    }
    kotlinOptions {
        jvmTarget = "1.8"
    }
    buildFeatures {
        compose = true
    }
    composeOptions {
        kotlinCompilerExtensionVersion = "1.5.8"
    }
}

dependencies {
    implementation("androidx.core:core-ktx:1.12.0")
    implementation("androidx.lifecycle:lifecycle-runtime-ktx:2.7.0")
    implementation("androidx.activity:activity-compose:1.8.2")
    implementation("androidx.compose.ui:ui:1.5.8")
    implementation("androidx.compose.material3:material3:1.1.2")
    androidTestImplementation("androidx.compose.ui:ui-test-junit4:1.5.8")
}"""

MAIN_ACTIVITY_KT = """package com.example.app

import android.os.Bundle
import androidx.activity.ComponentActivity
import androidx.activity.compose.setContent
import androidx.compose.foundation.layout.*
import androidx.compose.material3.*
import androidx.compose.runtime.*
import androidx.compose.ui.Alignment
import androidx.compose.ui.Modifier
import androidx.compose.ui.unit.dp

class MainActivity : ComponentActivity() {
    override fun onCreate(savedInstanceState: Bundle?) {
        super.onCreate(savedInstanceState)
        setContent {
            ConvertedApp()
        }
    }
}

@OptIn(ExperimentalMaterial3Api::class)
@Composable
fun ConvertedApp() {
    Scaffold(
        topBar = {
            TopAppBar(
                title = { Text("Converted App") }
            )
        }
    ) { paddingValues ->
        Column(
            modifier = Modifier
                .fillMaxSize()
                .padding(paddingValues)
                .padding(16.dp),
            horizontalAlignment = Alignment.CenterHorizontally,
            verticalArrangement = Arrangement.Center
        ) {
            Text("Welcome to your converted Kotlin Compose app!")
        }
    }
}"""

TYPESCRIPT_INDEX = """import React from 'react';
import { createRoot } from 'react-dom/client';

const ConvertedApp: React.FC = () => (
  <div>
    <h1>Welcome to your converted React app!</h1>
  </div>
);

const root = createRoot(document.getElementById('root') as HTMLElement);
root.render(<ConvertedApp />);
"""


def _build_package_json(with_tests: bool) -> str:
    dev_dependencies = {
        "@types/react": "^18.2.0",
        "@types/react-dom": "^18.2.0",
        "typescript": "^5.0.0",
    }
    if with_tests:
        dev_dependencies["@testing-library/react"] = "^14.0.0"
        dev_dependencies["@testing-library/jest-dom"] = "^6.1.0"

    package = {
        "name": "converted-react-app",
        "version": "1.0.0",
        "private": True,
        "scripts": {
            "start": "react-scripts start",
            "build": "react-scripts build",
            "test": "react-scripts test",
        },
        "dependencies": {
            "react": "^18.2.0",
            "react-dom": "^18.2.0",
            "react-scripts": "5.0.1",
        },
        "devDependencies": dev_dependencies,
    }
    return json.dumps(package, indent=2) + "\n"


def framework_config_files(to_framework: str, options: ConversionOptions) -> List[OutputFile]:
    target = to_framework.lower()
    if target in ("flutter", "dart"):
        return [
            {"path": "pubspec.yaml", "content": PUBSPEC_YAML, "type": "yaml"},
            {"path": "lib/main.dart", "content": FLUTTER_MAIN, "type": "dart"},
        ]
    if target == "kotlin":
        return [
            {"path": "build.gradle.kts", "content": BUILD_GRADLE_KTS, "type": "kotlin"},
            {"path": "app/src/main/java/com/example/app/MainActivity.kt", "content": MAIN_ACTIVITY_KT, "type": "kotlin"},
        ]
    if target == "typescript":
        return [
            {"path": "package.json", "content": _build_package_json(bool(options.get("generateTests"))), "type": "json"},
            {"path": "src/index.tsx", "content": TYPESCRIPT_INDEX, "type": "typescript"},
        ]
    return []


def build_readme(from_framework: str, to_framework: str, processed_files: int, uir_nodes: int, now: datetime) -> str:
    return f"""# Converted Project

This project was automatically converted from **{from_framework}** to **{to_framework}** with file-by-file conversion.

## Conversion Summary
- Files processed: {processed_files}
- Components converted: {uir_nodes}
- Source framework: {from_framework}
- Target framework: {to_framework}
- Conversion date: {now.isoformat()}
- Conversion method: AST → UIR → Target Framework

## Architecture
The conversion process:
1. **AST Parsing**: Each source file parsed into Abstract Syntax Tree
2. **UIR Generation**: AST converted to Universal Intermediate Representation
3. **Target Generation**: UIR converted to {to_framework} templates
4. **Project Structure**: Generated {to_framework} project layout

## Getting Started

### For Flutter:
1. Run `flutter pub get`
2. Run `flutter run`

### For Kotlin Compose:
1. Open in Android Studio
2. Sync project with Gradle
3. Run the app

### For TypeScript:
1. Run `npm install`
2. Run `npm start`

## Notes
- Component names, props and state are carried over; component bodies are placeholders
- Function bodies and event handlers are not translated
- Original file references are preserved in comments

Generated by stackshift
"""


# -------------------- Service --------------------

Emitter = Callable[[UIRNode, ConversionOptions], Optional[OutputFile]]
TestEmitter = Callable[[UIRNode], OutputFile]

EMITTERS: Dict[str, Tuple[Emitter, TestEmitter]] = {
    "flutter": (emit_flutter, _flutter_test),
    "dart": (emit_flutter, _flutter_test),
    "kotlin": (emit_kotlin, _kotlin_test),
    "typescript": (emit_typescript, _typescript_test),
}


class TranspilerService:
    """Runs the AST -> UIR -> template pipeline over a list of source files."""

    def __init__(
        self,
        ast_parser: Optional[ASTParser] = None,
        uir_generator: Optional[UIRGenerator] = None,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        self.ast_parser = ast_parser or ASTParser()
        self.uir_generator = uir_generator or UIRGenerator()
        self.clock = clock

    def transpile_project(
        self,
        files: Sequence[SourceFile],
        from_framework: str,
        to_framework: str,
        options: Optional[ConversionOptions] = None,
    ) -> ConversionResult:
        options = options or {}
        logger.info(
            "Starting file-by-file conversion from %s to %s with %d files",
            from_framework, to_framework, len(files),
        )

        try:
            result: ConversionResult = {"success": False, "files": [], "errors": [], "warnings": []}

            parsed = self.parse_sources(files, result["warnings"])
            uir_nodes = self.generate_uir(parsed, from_framework, result["warnings"])
            result["files"].extend(self.emit_nodes(uir_nodes, to_framework, options, result["errors"]))
            result["files"].extend(self.project_files(from_framework, to_framework, options, len(parsed), len(uir_nodes)))

            result["success"] = len(result["files"]) > 0
            logger.info("Conversion finished: %d files generated", len(result["files"]))
            return result
        except Exception as e:
            logger.exception("Transpilation failed")
            return {"success": False, "files": [], "errors": [f"Transpilation failed: {e}"], "warnings": []}

    def parse_sources(self, files: Sequence[SourceFile], warnings: List[str]) -> List[Tuple[SourceFile, ASTNode]]:
        """AST for every JS/TS/CSS file; other files are skipped."""
        parsed: List[Tuple[SourceFile, ASTNode]] = []

        for file in files:
            path = file["path"]
            if path.endswith(JS_EXTENSIONS):
                ast = self.ast_parser.parse_javascript(file["content"], path)
            elif path.endswith(CSS_EXTENSIONS):
                ast = self.ast_parser.parse_css(file["content"], path)
            else:
                logger.debug("Skipping non-code file: %s", path)
                continue

            if ast.get("type") == "Error":
                warnings.append(f"Could not process file {path}: {ast.get('name', 'parse error')}")
                continue
            parsed.append((file, ast))

        return parsed

    def generate_uir(
        self,
        parsed: Sequence[Tuple[SourceFile, ASTNode]],
        from_framework: str,
        warnings: List[str],
    ) -> List[UIRNode]:
        nodes: List[UIRNode] = []
        for file, ast in parsed:
            try:
                nodes.extend(self.uir_generator.generate_uir(ast, file["path"], from_framework))
            except Exception as e:
                logger.warning("Could not generate UIR for %s: %s", file["path"], e)
                warnings.append(f"Could not process file {file['path']}: {e}")
        logger.info("Generated %d UIR nodes from %d files", len(nodes), len(parsed))
        return nodes

    def emit_nodes(
        self,
        nodes: Sequence[UIRNode],
        to_framework: str,
        options: ConversionOptions,
        errors: List[str],
    ) -> List[OutputFile]:
        emitters = EMITTERS.get(to_framework.lower())
        if emitters is None:
            logger.warning("No emitter for target framework %r; nodes dropped", to_framework)
            return []
        emit, emit_test = emitters

        output: List[OutputFile] = []
        for node in nodes:
            try:
                converted = emit(node, options)
                if converted is None:
                    continue
                output.append(converted)
                if options.get("generateTests") and node["type"] == "component":
                    output.append(emit_test(node))
            except Exception as e:
                logger.warning("Failed to convert %s: %s", node.get("name"), e)
                errors.append(f"Failed to convert {node.get('name')}: {e}")
        return output

    def convert_node(self, node: UIRNode, to_framework: str, options: Optional[ConversionOptions] = None) -> Optional[OutputFile]:
        """Single-node emission; None for an unsupported target."""
        emitters = EMITTERS.get(to_framework.lower())
        if emitters is None:
            return None
        return emitters[0](node, options or {})

    def project_files(
        self,
        from_framework: str,
        to_framework: str,
        options: ConversionOptions,
        processed_files: int,
        uir_nodes: int,
    ) -> List[OutputFile]:
        files = framework_config_files(to_framework, options)
        files.append({
            "path": "README.md",
            "content": build_readme(from_framework, to_framework, processed_files, uir_nodes, self.clock()),
            "type": "markdown",
        })
        return files
