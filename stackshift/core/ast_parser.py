# stackshift/core/ast_parser.py
"""
AST extraction for JavaScript/TypeScript sources and CSS stylesheets.

JS/TS is parsed with tree-sitter (TSX grammar for .js/.jsx/.tsx, the plain
TypeScript grammar for .ts). Only a shallow summary is kept: import strings,
export names, top-level function declarations and React-style components
(arrow functions bound to a capitalized name) with their props, useState
defaults, hooks and returned JSX.

CSS is handled by a regex over `.class { prop: value; }` blocks.

A file that fails to parse comes back as an `Error` node instead of raising.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, Iterator, List, Optional

import tree_sitter_typescript as tsts
from tree_sitter import Language, Node, Parser

from .schema import ASTComponent, ASTFunction, ASTNode

logger = logging.getLogger(__name__)

TSX_LANGUAGE = Language(tsts.language_tsx())
TS_LANGUAGE = Language(tsts.language_typescript())

CSS_CLASS_RE = re.compile(r"\.([a-zA-Z_-][a-zA-Z0-9_-]*)\s*\{([^}]*)\}")
CSS_PROP_RE = re.compile(r"([a-zA-Z-]+)\s*:\s*([^;]+)")

JSX_ELEMENT_TYPES = ("jsx_element", "jsx_self_closing_element", "jsx_fragment")
FUNCTION_TYPES = (
    "arrow_function",
    "function",
    "function_expression",
    "function_declaration",
    "generator_function_declaration",
    "method_definition",
)


def _text(node: Optional[Node]) -> str:
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8", errors="replace")


def _string_value(node: Node) -> str:
    """Unquoted value of a string literal node."""
    raw = _text(node)
    if len(raw) >= 2 and raw[0] in "'\"`" and raw[-1] == raw[0]:
        return raw[1:-1]
    return raw


def _pascal(node_type: str) -> str:
    return "".join(part.capitalize() for part in node_type.split("_")) or "Expression"


def _walk(node: Node, skip_functions: bool = False) -> Iterator[Node]:
    """Pre-order traversal. With skip_functions, nested function bodies are not entered."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        children = current.children
        if skip_functions and current is not node:
            children = [c for c in children if c.type not in FUNCTION_TYPES]
        stack.extend(reversed(children))


def _first_error(node: Node) -> Optional[Node]:
    if node.type == "ERROR" or node.is_missing:
        return node
    for child in node.children:
        if child.has_error or child.is_missing:
            found = _first_error(child)
            if found is not None:
                return found
    return None


def _unwrap_parens(node: Optional[Node]) -> Optional[Node]:
    while node is not None and node.type == "parenthesized_expression" and node.named_children:
        node = node.named_children[0]
    return node


class ASTParser:
    """Parses JS/TS/JSX/TSX and CSS into ASTNode summaries."""

    def __init__(self) -> None:
        self._tsx_parser = Parser(TSX_LANGUAGE)
        self._ts_parser = Parser(TS_LANGUAGE)

    def parse_javascript(self, code: str, file_path: str) -> ASTNode:
        try:
            return self._build_program(code, file_path)
        except Exception as e:
            logger.warning("Error parsing %s: %s", file_path, e)
            return {"type": "Error", "name": f"Failed to parse {file_path}: {e}"}

    def parse_css(self, code: str, file_path: str) -> ASTNode:
        classes: Dict[str, Dict[str, str]] = {}

        for match in CSS_CLASS_RE.finditer(code):
            props: Dict[str, str] = {}
            for prop in CSS_PROP_RE.finditer(match.group(2)):
                props[prop.group(1).strip()] = prop.group(2).strip()
            classes[match.group(1)] = props

        return {"type": "Stylesheet", "name": file_path, "styles": classes}

    # -------------------- Program --------------------

    def _parser_for(self, file_path: str) -> Parser:
        return self._ts_parser if file_path.endswith(".ts") else self._tsx_parser

    def _build_program(self, code: str, file_path: str) -> ASTNode:
        tree = self._parser_for(file_path).parse(code.encode("utf-8"))
        root = tree.root_node

        if root.has_error:
            bad = _first_error(root)
            line = bad.start_point[0] + 1 if bad is not None else 1
            raise SyntaxError(f"Unexpected token at line {line}")

        imports: List[str] = []
        import_sources: List[str] = []
        exports: List[str] = []
        functions: List[ASTFunction] = []
        components: List[ASTComponent] = []
        default_export: Optional[str] = None

        for node in _walk(root):
            if node.type == "import_statement":
                source = _string_value(node.child_by_field_name("source"))
                imports.extend(self._import_strings(node, source))
                if source not in import_sources:
                    import_sources.append(source)

            elif node.type == "export_statement":
                names, is_default = self._export_names(node)
                exports.extend(names)
                if is_default and names:
                    default_export = names[0]

            elif node.type in ("function_declaration", "generator_function_declaration"):
                func = self._function(node)
                if func is not None:
                    functions.append(func)

            elif node.type == "variable_declarator":
                component = self._component(node)
                if component is not None:
                    components.append(component)

        for component in components:
            component["isDefault"] = component["name"] == default_export

        logger.debug(
            "Parsed %s: %d imports, %d functions, %d components",
            file_path, len(imports), len(functions), len(components),
        )

        return {
            "type": "Program",
            "imports": imports,
            "importSources": import_sources,
            "exports": exports,
            "functions": functions,
            "components": components,
            "children": [],
        }

    @staticmethod
    def _import_strings(node: Node, source: str) -> List[str]:
        clause = next((c for c in node.named_children if c.type == "import_clause"), None)
        if clause is None:
            return [f"import '{source}'"]

        result: List[str] = []
        for child in clause.named_children:
            if child.type == "identifier":
                result.append(f"import {_text(child)} from '{source}'")
            elif child.type == "namespace_import":
                result.append(f"import {_text(child)} from '{source}'")
            elif child.type == "named_imports":
                for spec in child.named_children:
                    if spec.type == "import_specifier":
                        imported = _text(spec.child_by_field_name("name"))
                        result.append(f"import {{ {imported} }} from '{source}'")
        return result

    @staticmethod
    def _export_names(node: Node):
        is_default = any(c.type == "default" for c in node.children)
        names: List[str] = []

        declaration = node.child_by_field_name("declaration")
        value = node.child_by_field_name("value")

        if declaration is not None:
            name = declaration.child_by_field_name("name")
            if name is not None:
                names.append(_text(name))
            else:
                for declarator in declaration.named_children:
                    if declarator.type == "variable_declarator":
                        names.append(_text(declarator.child_by_field_name("name")))
        elif value is not None and value.type == "identifier":
            names.append(_text(value))

        for clause in node.named_children:
            if clause.type != "export_clause":
                continue
            for spec in clause.named_children:
                if spec.type == "export_specifier":
                    alias = spec.child_by_field_name("alias")
                    names.append(_text(alias or spec.child_by_field_name("name")))

        return names, is_default

    @staticmethod
    def _param_names(params: Optional[Node]) -> List[str]:
        if params is None:
            return []
        if params.type == "identifier":
            return [_text(params)]

        names: List[str] = []
        for param in params.named_children:
            pattern = param.child_by_field_name("pattern") or param
            names.append(_text(pattern) if pattern.type == "identifier" else "param")
        return names

    def _function(self, node: Node) -> Optional[ASTFunction]:
        name = node.child_by_field_name("name")
        if name is None:
            return None
        parent = node.parent
        return {
            "name": _text(name),
            "params": self._param_names(node.child_by_field_name("parameters")),
            "body": _text(node.child_by_field_name("body")),
            "isAsync": any(c.type == "async" for c in node.children),
            "isExported": parent is not None and parent.type == "export_statement",
        }

    # -------------------- Components --------------------

    def _component(self, declarator: Node) -> Optional[ASTComponent]:
        name_node = declarator.child_by_field_name("name")
        value = declarator.child_by_field_name("value")
        if name_node is None or name_node.type != "identifier":
            return None
        if value is None or value.type != "arrow_function":
            return None

        name = _text(name_node)
        if not name[:1].isupper():
            return None

        return {
            "name": name,
            "props": self._extract_props(value),
            "state": self._extract_state(value),
            "hooks": self._extract_hooks(value),
            "jsx": self._extract_jsx(value),
            "isDefault": False,
        }

    @staticmethod
    def _extract_props(func: Node) -> List[str]:
        first = func.child_by_field_name("parameter")
        if first is None:
            params = func.child_by_field_name("parameters")
            if params is None or not params.named_children:
                return []
            param = params.named_children[0]
            first = param.child_by_field_name("pattern") or param

        if first.type == "identifier":
            return [_text(first)]

        props: List[str] = []
        if first.type == "object_pattern":
            for prop in first.named_children:
                if prop.type == "shorthand_property_identifier_pattern":
                    props.append(_text(prop))
                elif prop.type == "pair_pattern":
                    key = prop.child_by_field_name("key")
                    if key is not None and key.type == "property_identifier":
                        props.append(_text(key))
                elif prop.type == "object_assignment_pattern":
                    left = prop.child_by_field_name("left")
                    if left is not None:
                        props.append(_text(left))
        return props

    @staticmethod
    def _callee_name(call: Node) -> str:
        callee = call.child_by_field_name("function")
        return _text(callee) if callee is not None and callee.type == "identifier" else ""

    def _extract_state(self, func: Node) -> Dict[str, str]:
        state: Dict[str, str] = {}

        for node in _walk(func):
            if node.type != "call_expression" or self._callee_name(node) != "useState":
                continue
            parent = node.parent
            if parent is None or parent.type != "variable_declarator":
                continue
            pattern = parent.child_by_field_name("name")
            if pattern is None or pattern.type != "array_pattern" or len(pattern.named_children) < 2:
                continue
            state_var, setter = pattern.named_children[0], pattern.named_children[1]
            if state_var.type != "identifier" or setter.type != "identifier":
                continue

            args = node.child_by_field_name("arguments")
            default = args.named_children[0] if args is not None and args.named_children else None
            state[_text(state_var)] = self._literal_default(default)

        return state

    @staticmethod
    def _literal_default(node: Optional[Node]) -> str:
        if node is None:
            return "undefined"
        if node.type == "string":
            return f"'{_string_value(node)}'"
        if node.type in ("number", "true", "false"):
            return _text(node)
        return "undefined"

    def _extract_hooks(self, func: Node) -> List[str]:
        hooks: List[str] = []
        for node in _walk(func):
            if node.type == "call_expression":
                name = self._callee_name(node)
                if name.startswith("use") and len(name) > 3 and name not in hooks:
                    hooks.append(name)
        return hooks

    def _extract_jsx(self, func: Node) -> ASTNode:
        body = func.child_by_field_name("body")
        returned: Optional[Node] = None

        if body is not None and body.type == "statement_block":
            ret = next((n for n in _walk(body, skip_functions=True) if n.type == "return_statement"), None)
            if ret is not None and ret.named_children:
                returned = _unwrap_parens(ret.named_children[0])
        else:
            returned = _unwrap_parens(body)

        if returned is None or returned.type not in JSX_ELEMENT_TYPES:
            returned = next((n for n in _walk(func) if n.type in JSX_ELEMENT_TYPES), None)

        if returned is None:
            return {"type": "Fragment", "children": []}
        return self._jsx_node(returned)

    # -------------------- JSX --------------------

    def _jsx_node(self, node: Node) -> ASTNode:
        if node.type == "jsx_fragment":
            return {"type": "Fragment", "children": self._jsx_children(node)}

        if node.type == "jsx_self_closing_element":
            return {
                "type": "Element",
                "name": _text(node.child_by_field_name("name")),
                "props": self._jsx_props(node),
                "children": [],
            }

        opening = node.child_by_field_name("open_tag")
        name = opening.child_by_field_name("name") if opening is not None else None
        if name is None:
            # `<>...</>` parses as an element whose opening tag has no name
            return {"type": "Fragment", "children": self._jsx_children(node)}

        return {
            "type": "Element",
            "name": _text(name),
            "props": self._jsx_props(opening),
            "children": self._jsx_children(node),
        }

    @staticmethod
    def _jsx_props(tag: Optional[Node]) -> Dict[str, object]:
        props: Dict[str, object] = {}
        if tag is None:
            return props

        for attr in tag.named_children:
            if attr.type != "jsx_attribute" or not attr.named_children:
                continue
            prop_name = _text(attr.named_children[0])
            value: object = True
            if len(attr.named_children) > 1:
                raw = attr.named_children[1]
                if raw.type == "string":
                    value = _string_value(raw)
                elif raw.type == "jsx_expression":
                    inner = raw.named_children[0].type if raw.named_children else "expression"
                    value = "{" + _pascal(inner) + "}"
                else:
                    value = "{" + _pascal(raw.type) + "}"
            props[prop_name] = value
        return props

    def _jsx_children(self, node: Node) -> List[ASTNode]:
        children: List[ASTNode] = []
        for child in node.named_children:
            if child.type in JSX_ELEMENT_TYPES:
                children.append(self._jsx_node(child))
            elif child.type == "jsx_text":
                text = _text(child).strip()
                if text:
                    children.append({"type": "Text", "name": text})
            elif child.type == "jsx_expression":
                inner = next((c for c in child.named_children if c.type != "comment"), None)
                children.append({"type": "Expression", "name": _pascal(inner.type) if inner else "Empty"})
        return children
