# stackshift/core/uir_generator.py
"""
Lowers ASTNode summaries into Universal Intermediate Representation nodes.

One ASTNode yields: one `component` node per component, one `function` node
per function declaration and one `stylesheet` node for a stylesheet. JSX is
flattened into `element` / `text` children; expressions are dropped.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from .line_parser import parse_literal
from .schema import ASTComponent, ASTFunction, ASTNode, UIRNode, UIRProp, UIRState

UNIVERSAL_FRAMEWORK = "universal"


def infer_type_from_value(value: str) -> str:
    """Type name for a useState default captured as literal text ("0", "'x'", "true", "undefined")."""
    if len(value) >= 2 and value.startswith("'") and value.endswith("'"):
        return "string"
    if value in ("true", "false"):
        return "boolean"
    if value.startswith("[") and value.endswith("]"):
        return "array"
    if value.startswith("{") and value.endswith("}"):
        return "object"
    try:
        float(value)
    except ValueError:
        return "any"
    return "number"


def setter_name(state_name: str) -> str:
    return f"set{state_name[:1].upper()}{state_name[1:]}"


class UIRGenerator:
    def generate_uir(self, ast_node: ASTNode, file_path: str, from_framework: str) -> List[UIRNode]:
        if ast_node.get("type") == "Error":
            return []

        dependencies = list(ast_node.get("importSources") or [])
        nodes: List[UIRNode] = []

        for component in ast_node.get("components") or []:
            nodes.append(self._component_to_uir(component, file_path, from_framework, dependencies))

        for func in ast_node.get("functions") or []:
            nodes.append(self._function_to_uir(func, file_path, from_framework, dependencies))

        if ast_node.get("type") == "Stylesheet":
            nodes.append(self._stylesheet_to_uir(ast_node, file_path, from_framework))

        return nodes

    @staticmethod
    def _metadata(file_path: str, framework: str, dependencies: List[str], exports: List[str]):
        return {
            "originalFile": file_path,
            "originalFramework": framework,
            "dependencies": list(dependencies),
            "exports": exports,
        }

    def _component_to_uir(
        self,
        component: ASTComponent,
        file_path: str,
        framework: str,
        dependencies: List[str],
    ) -> UIRNode:
        name = component["name"]
        return {
            "id": f"{file_path}:component:{name}",
            "type": "component",
            "name": name,
            "framework": framework,
            "props": self._props_to_uir(component.get("props") or []),
            "state": self._state_to_uir(component.get("state") or {}),
            "hooks": list(component.get("hooks") or []),
            "children": self._jsx_to_uir(component.get("jsx"), file_path),
            "styles": {},
            "metadata": self._metadata(
                file_path, framework, dependencies,
                ["default"] if component.get("isDefault") else [name],
            ),
        }

    def _function_to_uir(
        self,
        func: ASTFunction,
        file_path: str,
        framework: str,
        dependencies: List[str],
    ) -> UIRNode:
        name = func["name"]
        return {
            "id": f"{file_path}:function:{name}",
            "type": "function",
            "name": name,
            "framework": framework,
            "props": {},
            "state": {},
            "hooks": [],
            "children": [],
            "styles": {},
            "metadata": self._metadata(file_path, framework, dependencies, [name] if func.get("isExported") else []),
            "implementation": {"code": func.get("body", ""), "language": "javascript"},
        }

    def _stylesheet_to_uir(self, ast_node: ASTNode, file_path: str, framework: str) -> UIRNode:
        name = ast_node.get("name") or "styles"
        return {
            "id": f"{file_path}:stylesheet:{name}",
            "type": "stylesheet",
            "name": name,
            "framework": framework,
            "props": {},
            "state": {},
            "hooks": [],
            "children": [],
            "styles": dict(ast_node.get("styles") or {}),
            "metadata": self._metadata(file_path, framework, [], []),
        }

    @staticmethod
    def _props_to_uir(props: List[str]) -> Dict[str, UIRProp]:
        return {name: {"name": name, "type": "any", "required": True} for name in props}

    @staticmethod
    def _state_to_uir(state: Dict[str, str]) -> Dict[str, UIRState]:
        # initialValue is the Python value of the literal ("0" -> 0, "'x'" -> "x", "undefined" -> None)
        return {
            name: {
                "name": name,
                "type": infer_type_from_value(raw),
                "initialValue": parse_literal(raw),
                "setter": setter_name(name),
            }
            for name, raw in state.items()
        }

    def _jsx_to_uir(self, jsx: Optional[ASTNode], file_path: str) -> List[UIRNode]:
        if not jsx:
            return []

        kind = jsx.get("type")
        if kind == "Element":
            name = jsx.get("name") or "div"
            children: List[UIRNode] = []
            for child in jsx.get("children") or []:
                children.extend(self._jsx_to_uir(child, file_path))
            return [{
                "id": f"{file_path}:element:{name}",
                "type": "element",
                "name": name,
                "framework": UNIVERSAL_FRAMEWORK,
                "props": self._jsx_props_to_uir(jsx.get("props") or {}),
                "children": children,
                "metadata": self._metadata("", "jsx", [], []),
            }]

        if kind == "Text":
            text = jsx.get("name") or ""
            return [{
                "id": f"{file_path}:text",
                "type": "text",
                "name": text,
                "framework": UNIVERSAL_FRAMEWORK,
                "metadata": self._metadata("", "jsx", [], []),
            }]

        if kind == "Fragment":
            flattened: List[UIRNode] = []
            for child in jsx.get("children") or []:
                flattened.extend(self._jsx_to_uir(child, file_path))
            return flattened

        return []

    @staticmethod
    def _jsx_props_to_uir(props: Dict[str, Any]) -> Dict[str, UIRProp]:
        return {
            name: {
                "name": name,
                "type": "string" if isinstance(value, str) and not value.startswith("{") else "expression",
                "required": False,
                "defaultValue": value,
            }
            for name, value in props.items()
        }
