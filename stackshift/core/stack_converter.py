# stackshift/core/stack_converter.py
"""
Whole-stack conversion driven by the line-oriented parser.

The current project is parsed once with the current stack's primary
framework, then each parsed UI component is re-emitted as a skeleton for the
target frontend. Backend services, data models and routes are parsed but not
converted.
"""

from __future__ import annotations

import json
import logging
import re
import time
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .line_parser import LineByLineParser
from .schema import SourceFile
from .stack_schema import (
    ComponentDefinition,
    ConversionError,
    ConversionSummary,
    ConversionWarning,
    ConvertedFile,
    DataStructure,
    FrameworkInfo,
    LineMapping,
    LogicStructure,
    ParsedProjectStructure,
    RouteStructure,
    StackConversionOptions,
    TechStack,
    TechStackConversionRequest,
    TechStackConversionResult,
    UIStructure,
    empty_structure,
)
from .transpiler import BUILD_GRADLE_KTS, PUBSPEC_YAML, map_type_to_flutter, map_type_to_typescript

logger = logging.getLogger(__name__)


def _line_count(content: str) -> int:
    return len(content.split("\n"))


def _converted(original: str, new_path: str, content: str, type_: str, language: str) -> ConvertedFile:
    return {
        "originalPath": original,
        "newPath": new_path,
        "content": content,
        "type": type_,
        "language": language,
        "lineCount": _line_count(content),
    }


def map_value_to_flutter(value: Any) -> str:
    if isinstance(value, str):
        return f"'{value}'"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return "null"


def map_value_to_kotlin(value: Any) -> str:
    if isinstance(value, str):
        return f'"{value}"'
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return "null"


def map_value_to_typescript(value: Any) -> str:
    if isinstance(value, str):
        return f"'{value}'"
    return json.dumps(value)


def kebab_case(name: str) -> str:
    return re.sub(r"([A-Z])", r"-\1", name).lower().lstrip("-")


def detect_primary_framework(stack: TechStack) -> str:
    for layer in ("frontend", "backend", "mobile"):
        info = stack.get(layer)
        if info and info.get("name"):
            return info["name"].lower()
    return "unknown"


# -------------------- Component templates --------------------

def convert_to_flutter(component: ComponentDefinition) -> ConvertedFile:
    name = component["name"]
    state = component.get("state") or []
    body = (
        "  @override\n"
        "  Widget build(BuildContext context) {\n"
        "    return Container(\n"
        f"      child: Text('{name}'),\n"
        "    );\n"
        "  }\n"
        "}\n"
    )

    content = "import 'package:flutter/material.dart';\n\n"
    if state:
        content += (
            f"class {name} extends StatefulWidget {{\n"
            f"  const {name}({{Key? key}}) : super(key: key);\n\n"
            "  @override\n"
            f"  State<{name}> createState() => _{name}State();\n"
            "}\n\n"
            f"class _{name}State extends State<{name}> {{\n"
        )
        for item in state:
            content += f"  {map_type_to_flutter(item['type'])} {item['name']} = {map_value_to_flutter(item.get('initialValue'))};\n"
        content += "\n" + body
    else:
        content += (
            f"class {name} extends StatelessWidget {{\n"
            f"  const {name}({{Key? key}}) : super(key: key);\n\n"
        ) + body

    return _converted(component["filePath"], f"lib/widgets/{name.lower()}.dart", content, "widget", "dart")


def convert_to_kotlin(component: ComponentDefinition) -> ConvertedFile:
    name = component["name"]
    content = (
        "package com.example.app.ui.components\n\n"
        "import androidx.compose.foundation.layout.*\n"
        "import androidx.compose.material3.*\n"
        "import androidx.compose.runtime.*\n"
        "import androidx.compose.ui.Alignment\n"
        "import androidx.compose.ui.Modifier\n"
        "import androidx.compose.ui.unit.dp\n\n"
        "@Composable\n"
        f"fun {name}(\n"
        "    modifier: Modifier = Modifier\n"
        ") {\n"
    )
    for item in component.get("state") or []:
        content += f"    var {item['name']} by remember {{ mutableStateOf({map_value_to_kotlin(item.get('initialValue'))}) }}\n"
    content += (
        "\n    Column(\n"
        "        modifier = modifier.fillMaxWidth(),\n"
        "        horizontalAlignment = Alignment.CenterHorizontally\n"
        "    ) {\n"
        f'        Text("{name}")\n'
        "    }\n"
        "}\n"
    )
    return _converted(
        component["filePath"],
        f"app/src/main/java/com/example/app/ui/components/{name}.kt",
        content,
        "composable",
        "kotlin",
    )


def convert_to_react(component: ComponentDefinition, typescript: bool) -> ConvertedFile:
    name = component["name"]
    props = component.get("props") or []
    state = component.get("state") or []

    content = f"import React{', { useState }' if state else ''} from 'react';\n\n"

    if typescript and props:
        content += f"interface {name}Props {{\n"
        for prop in props:
            optional = "" if prop.get("required") else "?"
            content += f"  {prop['name']}{optional}: {map_type_to_typescript(prop.get('type', 'any'))};\n"
        content += "}\n\n"

    param = ""
    if props:
        param = f"props: {name}Props" if typescript else "props"
    annotation = ""
    if typescript:
        annotation = ": React.FC" + (f"<{name}Props>" if props else "")
    content += f"const {name}{annotation} = ({param}) => {{\n"

    for item in state:
        generic = f"<{map_type_to_typescript(item['type'])}>" if typescript else ""
        setter = f"set{item['name'][:1].upper()}{item['name'][1:]}"
        content += f"  const [{item['name']}, {setter}] = useState{generic}({map_value_to_typescript(item.get('initialValue'))});\n"

    content += (
        "\n  return (\n"
        "    <div>\n"
        f"      <h1>{name}</h1>\n"
        "    </div>\n"
        "  );\n"
        "};\n\n"
        f"export default {name};\n"
    )

    extension = "tsx" if typescript else "jsx"
    return _converted(
        component["filePath"],
        f"src/components/{name}.{extension}",
        content,
        "component",
        "typescript" if typescript else "javascript",
    )


def convert_to_vue(component: ComponentDefinition) -> ConvertedFile:
    name = component["name"]
    css_class = name.lower()
    content = (
        "<template>\n"
        f'  <div class="{css_class}">\n'
        "    <h1>{{ title }}</h1>\n"
        "  </div>\n"
        "</template>\n\n"
        "<script setup>\n"
        "import { ref } from 'vue'\n\n"
        f"const title = ref('{name}')\n"
    )
    for item in component.get("state") or []:
        content += f"const {item['name']} = ref({json.dumps(item.get('initialValue'))})\n"
    content += (
        "</script>\n\n"
        "<style scoped>\n"
        f".{css_class} {{\n"
        "  padding: 20px;\n"
        "}\n"
        "</style>\n"
    )
    return _converted(component["filePath"], f"src/components/{name}.vue", content, "component", "vue")


def convert_to_angular(component: ComponentDefinition) -> ConvertedFile:
    name = component["name"]
    selector = kebab_case(name)
    content = (
        "import { Component } from '@angular/core';\n\n"
        "@Component({\n"
        f"  selector: 'app-{selector}',\n"
        "  template: `\n"
        f'    <div class="{selector}">\n'
        "      <h1>{{ title }}</h1>\n"
        "    </div>\n"
        "  `,\n"
        "  styles: [`\n"
        f"    .{selector} {{\n"
        "      padding: 20px;\n"
        "    }\n"
        "  `]\n"
        "})\n"
        f"export class {name}Component {{\n"
        f"  title = '{name}';\n"
    )
    for item in component.get("state") or []:
        content += f"  {item['name']}: {map_type_to_typescript(item['type'])} = {map_value_to_typescript(item.get('initialValue'))};\n"
    content += "}\n"
    return _converted(
        component["filePath"],
        f"src/app/components/{selector}/{selector}.component.ts",
        content,
        "component",
        "typescript",
    )


# -------------------- Project files --------------------

def _frontend(target: TechStack) -> Tuple[str, str]:
    frontend = target.get("frontend") or {}
    return (frontend.get("name") or "").lower(), (frontend.get("language") or "").lower()


def _dependencies(target: TechStack) -> Dict[str, str]:
    name, _ = _frontend(target)
    if name == "react":
        return {"react": "^18.0.0", "react-dom": "^18.0.0"}
    if name == "vue":
        return {"vue": "^3.0.0"}
    if name == "angular":
        return {"@angular/core": "^17.0.0", "@angular/common": "^17.0.0"}
    return {}


def _dev_dependencies(target: TechStack) -> Dict[str, str]:
    if _frontend(target)[1] == "typescript":
        return {"typescript": "^5.0.0", "@types/react": "^18.0.0"}
    return {}


def _scripts(target: TechStack) -> Dict[str, str]:
    scripts = {"start": "npm run dev", "build": "npm run build", "test": "npm run test"}
    if _frontend(target)[0] == "react":
        scripts["dev"] = "vite"
        scripts["build"] = "vite build"
    return scripts


# -------------------- Converter --------------------

class TechStackConverter:
    """Converts a parsed project to another frontend stack, component by component."""

    def __init__(self, line_parser: Optional[LineByLineParser] = None) -> None:
        self.line_parser = line_parser or LineByLineParser()

    def convert_tech_stack(
        self,
        request: TechStackConversionRequest,
        files: Sequence[SourceFile],
    ) -> TechStackConversionResult:
        start = time.monotonic()
        current = request.get("currentStack") or {}
        target = request.get("targetStack") or {}
        options: StackConversionOptions = request.get("conversionOptions") or {}

        try:
            current_framework = detect_primary_framework(current)
            target_framework = detect_primary_framework(target)
            logger.info("Tech stack conversion: %s -> %s (%d files)", current_framework, target_framework, len(files))

            structure = self.line_parser.parse_project(files, current_framework)
            converted = self._perform_conversion(structure, target, options)
            mappings = self.generate_line_mappings(files, converted)
            errors, warnings = self.validate_conversion(converted)
            for diagnostic in structure["diagnostics"]:
                warnings.append({"file": diagnostic["file"], "line": diagnostic["line"], "message": diagnostic["message"]})

            elapsed_ms = int((time.monotonic() - start) * 1000)
            return {
                "success": not errors,
                "convertedProject": structure,
                "files": converted,
                "lineMappings": mappings,
                "errors": errors,
                "warnings": warnings,
                "summary": self.generate_summary(files, converted, elapsed_ms, current, target),
            }
        except Exception as e:
            logger.exception("Tech stack conversion failed")
            return {
                "success": False,
                "convertedProject": empty_structure(),
                "files": [],
                "lineMappings": [],
                "errors": [{
                    "file": "system",
                    "line": 0,
                    "message": f"Conversion failed: {e}",
                    "severity": "error",
                    "originalCode": "",
                }],
                "warnings": [],
                "summary": {
                    "totalFiles": 0,
                    "convertedFiles": 0,
                    "skippedFiles": 0,
                    "generatedFiles": 0,
                    "totalLines": 0,
                    "convertedLines": 0,
                    "generatedLines": 0,
                    "conversionTime": 0,
                    "frameworks": {"from": current, "to": target},
                },
            }

    def _perform_conversion(
        self,
        structure: ParsedProjectStructure,
        target: TechStack,
        options: StackConversionOptions,
    ) -> List[ConvertedFile]:
        files: List[ConvertedFile] = []

        if target.get("frontend"):
            files.extend(self.convert_ui_components(structure["ui"], target["frontend"]))
        if target.get("backend"):
            files.extend(self.convert_backend_services(structure["logic"], target["backend"]))
        if target.get("database"):
            files.extend(self.convert_data_models(structure["data"], target["database"]))
        files.extend(self.convert_routes(structure["routes"], target))
        files.extend(self.generate_config_files(target))

        package = self.generate_package_json(target)
        if package is not None:
            files.append(package)
        return files

    def convert_ui_components(self, ui: UIStructure, target: FrameworkInfo) -> List[ConvertedFile]:
        files: List[ConvertedFile] = []
        for component in ui["components"]:
            converted = self.convert_component(component, target)
            if converted is not None:
                files.append(converted)
            else:
                logger.debug("No template for %s on %s", component["name"], target.get("name"))
        return files

    @staticmethod
    def convert_component(component: ComponentDefinition, target: FrameworkInfo) -> Optional[ConvertedFile]:
        name = (target.get("name") or "").lower()
        language = (target.get("language") or "").lower()

        if language == "dart" and name == "flutter":
            return convert_to_flutter(component)
        if language == "kotlin" and name == "android":
            return convert_to_kotlin(component)
        if name == "vue":
            return convert_to_vue(component)
        if name == "angular":
            return convert_to_angular(component)
        if language in ("javascript", "typescript"):
            return convert_to_react(component, typescript=language == "typescript")
        return None

    # Parsed but not converted; these layers produce no files.
    def convert_backend_services(self, logic: LogicStructure, target: FrameworkInfo) -> List[ConvertedFile]:
        return []

    def convert_data_models(self, data: DataStructure, target: FrameworkInfo) -> List[ConvertedFile]:
        return []

    def convert_routes(self, routes: RouteStructure, target: TechStack) -> List[ConvertedFile]:
        return []

    @staticmethod
    def generate_config_files(target: TechStack) -> List[ConvertedFile]:
        name, _ = _frontend(target)
        if name == "flutter":
            return [_converted("", "pubspec.yaml", PUBSPEC_YAML, "config", "yaml")]
        if name == "android":
            return [_converted("", "build.gradle.kts", BUILD_GRADLE_KTS + "\n", "config", "kotlin")]
        return []

    @staticmethod
    def generate_package_json(target: TechStack) -> Optional[ConvertedFile]:
        _, language = _frontend(target)
        if language not in ("javascript", "typescript"):
            return None
        package = {
            "name": "converted-app",
            "version": "1.0.0",
            "dependencies": _dependencies(target),
            "devDependencies": _dev_dependencies(target),
            "scripts": _scripts(target),
        }
        return _converted("package.json", "package.json", json.dumps(package, indent=2), "config", "json")

    @staticmethod
    def generate_line_mappings(originals: Sequence[SourceFile], converted: Sequence[ConvertedFile]) -> List[LineMapping]:
        """Pairs line i of the original with line i of the converted file, up to the shorter length."""
        by_path = {f["path"]: f for f in originals}
        mappings: List[LineMapping] = []
        for out in converted:
            original = by_path.get(out["originalPath"])
            if original is None:
                continue
            for i in range(min(_line_count(original["content"]), out["lineCount"])):
                mappings.append({
                    "originalFile": original["path"],
                    "originalLine": i + 1,
                    "newFile": out["newPath"],
                    "newLine": i + 1,
                    "type": "transformed",
                })
        return mappings

    @staticmethod
    def validate_conversion(files: Sequence[ConvertedFile]) -> Tuple[List[ConversionError], List[ConversionWarning]]:
        errors: List[ConversionError] = []
        if not files:
            errors.append({
                "file": "system",
                "line": 0,
                "message": "No files were generated during conversion",
                "severity": "error",
                "originalCode": "",
            })
        return errors, []

    @staticmethod
    def generate_summary(
        originals: Sequence[SourceFile],
        converted: Sequence[ConvertedFile],
        elapsed_ms: int,
        current: TechStack,
        target: TechStack,
    ) -> ConversionSummary:
        generated = [f for f in converted if not f["originalPath"]]
        return {
            "totalFiles": len(originals),
            "convertedFiles": len(converted),
            "skippedFiles": max(0, len(originals) - len(converted)),
            "generatedFiles": len(generated),
            "totalLines": sum(_line_count(f["content"]) for f in originals),
            "convertedLines": sum(f["lineCount"] for f in converted),
            "generatedLines": sum(f["lineCount"] for f in generated),
            "conversionTime": elapsed_ms,
            "frameworks": {"from": current, "to": target},
        }
