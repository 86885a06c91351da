# stackshift/core/line_parser.py
"""
Line-oriented structural parser.

Walks every file as a list of text lines, looking for syntactic landmarks
(component / class declarations, imports, exports, brace-balanced blocks) and
builds a shallow ParsedProjectStructure. This is a best-effort heuristic:

- block ends are found by counting every `{` and `}` on a line, so braces
  inside strings or comments shift the detected boundaries (a component's
  count starts after its `=>` or parameter list, so destructured props do
  not close it early);
- a block without its closing brace runs to the end of the file;
- Vue sections are located by the first matching start/end tag lines.

Files whose path matches no category are ignored. Nothing here raises: a
file that blows up is recorded as a Diagnostic and skipped.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from .schema import Diagnostic, SourceFile
from .stack_schema import (
    ActionDefinition,
    ComponentDefinition,
    ComponentReference,
    ConfigStructure,
    DataStructure,
    DependencyInfo,
    EventHandler,
    ExportDefinition,
    FieldDefinition,
    HookUsage,
    ImportDefinition,
    LayoutDefinition,
    LogicStructure,
    MethodDefinition,
    ModelDefinition,
    PageDefinition,
    ParameterDefinition,
    ParsedProjectStructure,
    PropertyDefinition,
    RouteDefinition,
    RouteParameter,
    RouteStructure,
    ServiceDefinition,
    StateDefinition,
    StoreDefinition,
    StyleDefinition,
    StylingInfo,
    UIStructure,
    empty_structure,
)

logger = logging.getLogger(__name__)

UI_EXTENSIONS = (".jsx", ".tsx", ".vue", ".svelte")
UI_PATTERNS = ("/components/", "/pages/", "/views/", "/layouts/")
LOGIC_PATTERNS = ("/services/", "/utils/", "/stores/", "/api/", "/lib/")
ROUTE_PATTERNS = ("/routes/", "/router/", "routing")
DATA_PATTERNS = ("/models/", "/schemas/", "/database/", "/db/")
CONFIG_FILES = ("package.json", "webpack.config.js", "vite.config.js", "tsconfig.json")
STYLE_EXTENSIONS = (".css", ".scss", ".sass", ".less")

# -------------------- Patterns --------------------

RE_FUNC_COMPONENT = re.compile(
    r"^(?:export\s+)?(?:default\s+)?(?:const|function)\s+([A-Z][a-zA-Z0-9]*)\b\s*[=:]?\s*(?:\([^)]*\))?\s*(?:=>)?\s*\{?"
)
RE_CLASS_COMPONENT = re.compile(
    r"^(?:export\s+)?(?:default\s+)?class\s+([A-Z][a-zA-Z0-9]*)\s+extends\s+(?:React\.)?(?:Pure)?Component"
)
RE_IMPORT = re.compile(
    r"import\s+(?:\{([^}]+)\}|([^,\s{]+))(?:\s*,\s*\{([^}]+)\})?\s+from\s+['\"]([^'\"]+)['\"]"
)
RE_EXPORT_DEFAULT = re.compile(r"export\s+default\s+([^;]+)")
RE_EXPORT_NAMED = re.compile(r"export\s+(?:const|let|var|function|class)\s+([^=\s(<:]+)")

RE_DESTRUCTURED_PROPS = re.compile(r"\(\s*\{([^}]*)\}")
RE_PROPS_ACCESS = re.compile(r"\b(?:this\.)?props\.(\w+)")
RE_USE_STATE = re.compile(r"const\s+\[\s*(\w+)\s*,\s*(\w+)\s*\]\s*=\s*(?:React\.)?useState(?:<[^>]*>)?\(([^)]*)\)")
RE_HOOK_CALL = re.compile(r"\b(use[A-Z]\w*)\s*\(")
RE_HOOK_DEPS = re.compile(r"\[\s*([^\]]*)\]\s*\)\s*;?\s*$")
RE_HANDLER_DECL = re.compile(
    r"(?:const|let|function)\s+((?:handle|on)[A-Z]\w*)\s*(?:=\s*(?:async\s*)?\(?([^)=]*)\)?\s*=>|\(([^)]*)\))"
)
RE_JSX_EVENT = re.compile(r"\bon([A-Z]\w*)=\{([^}]*)\}")
RE_CHILD_TAG = re.compile(r"<([A-Z][A-Za-z0-9]*(?:\.[A-Z][A-Za-z0-9]*)?)([^>]*)>?")
RE_TAG_ATTR = re.compile(r"(\w+)=[\"']([^\"']*)[\"']")
RE_CLASS_NAME = re.compile(r"\bclass(?:Name)?=[\"']([^\"']+)[\"']")
RE_INLINE_STYLE = re.compile(r"\bstyle=\{\{")
RE_OBJECT_ENTRY = re.compile(r"^\s*['\"]?(\w+)['\"]?\s*:\s*(.+?)\s*,?\s*$")

RE_VUE_NAME = re.compile(r"\bname\s*:\s*['\"]([\w-]+)['\"]")
RE_VUE_PROPS_ARRAY = re.compile(r"\bprops\s*:\s*\[([^\]]*)\]")
RE_VUE_REF = re.compile(r"const\s+(\w+)\s*=\s*(?:ref|reactive)\(([^)]*)\)")
RE_VUE_LIFECYCLE = re.compile(
    r"\b(beforeCreate|created|beforeMount|mounted|beforeUpdate|updated|beforeUnmount|unmounted|"
    r"onBeforeMount|onMounted|onBeforeUpdate|onUpdated|onBeforeUnmount|onUnmounted)\s*\("
)
RE_VUE_EMIT = re.compile(r"\$?emit\(\s*['\"]([\w:-]+)['\"]")
RE_VUE_DEFINE_EMITS = re.compile(r"defineEmits\(\s*\[([^\]]*)\]")
RE_VUE_TEMPLATE_EVENT = re.compile(r"(?:@|v-on:)([\w.-]+)=\"([^\"]*)\"")
RE_VUE_TEMPLATE_CHILD = re.compile(r"<([A-Z][A-Za-z0-9]*|[a-z]+(?:-[a-z0-9]+)+)(\s[^>]*)?/?>")

RE_ANGULAR_CLASS = re.compile(r"class\s+([A-Z][a-zA-Z0-9]*)")
RE_ANGULAR_INPUT = re.compile(r"@Input\([^)]*\)\s*(\w+)\s*[!?]?\s*(?::\s*([^=;]+?))?\s*(?:=\s*([^;]+))?;")
RE_ANGULAR_OUTPUT = re.compile(r"@Output\([^)]*\)\s*(\w+)")
RE_CLASS_FIELD = re.compile(
    r"^\s+(?:(?:public|private|protected|readonly)\s+)*(\w+)\s*[!?]?\s*(?::\s*([^=;]+?))?\s*=\s*([^;]+);"
)
RE_ANGULAR_LIFECYCLE = re.compile(
    r"\b(ngOnInit|ngOnDestroy|ngOnChanges|ngDoCheck|ngAfterContentInit|ngAfterContentChecked|"
    r"ngAfterViewInit|ngAfterViewChecked)\s*\("
)
RE_CONSTRUCTOR = re.compile(r"constructor\s*\(([^)]*)\)")

RE_SERVICE_CLASS = re.compile(r"^(?:export\s+)?(?:default\s+)?class\s+([A-Z][a-zA-Z0-9]*Service)\b")
RE_METHOD = re.compile(
    r"^\s+(?:(public|private|protected)\s+)?(?:static\s+)?(async\s+)?(\w+)\s*\(([^)]*)\)\s*(?::\s*([^{]+?))?\s*\{"
)
RE_STORE_CASE = re.compile(r"case\s+['\"]([\w/:-]+)['\"]\s*:")
RE_STORE_REDUCER = re.compile(r"^\s+(\w+)\s*(?::\s*)?\(\s*state\b")
RE_STORE_THUNK = re.compile(r"(?:export\s+)?const\s+(\w+)\s*=\s*createAsyncThunk")
RE_STORE_ACTION = re.compile(r"(?:export\s+)?const\s+(\w+)\s*=\s*createAction")
RE_INITIAL_STATE = re.compile(r"(?:initialState|state)\s*[:=]\s*\{")

RE_ROUTE_COMPONENT = re.compile(r"<Route\s+path=[\"']([^\"']+)[\"']\s+component=\{([^}]+)\}")
RE_ROUTE_ELEMENT = re.compile(r"<Route\s+path=[\"']([^\"']+)[\"']\s+element=\{\s*<\s*([A-Z]\w*)")
RE_SERVER_ROUTE = re.compile(r"\b(?:app|router)\.(get|post|put|delete|patch)\(\s*[\"'`]([^\"'`]+)[\"'`]")
RE_ROUTE_PARAM = re.compile(r":(\w+)(\?)?")

RE_MODEL = re.compile(r"const\s+([A-Z][a-zA-Z0-9]*)\s*=\s*(?:mongoose\.model|sequelize\.define)")
RE_MODEL_FIELD = re.compile(r"^\s*(\w+)\s*:\s*(?:\{\s*type\s*:\s*)?([\w.]+)")

RE_CSS_RULE = re.compile(r"([^{}]+)\{([^}]*)\}")
RE_CSS_VARIABLE = re.compile(r"(--[\w-]+|\$[\w-]+)\s*:\s*([^;]+);")
RE_ENV_ACCESS = re.compile(r"\b(?:process\.env|import\.meta\.env)\.(\w+)")

REACT_BUILTIN_HOOKS = frozenset({
    "useState", "useEffect", "useContext", "useReducer", "useCallback", "useMemo",
    "useRef", "useLayoutEffect", "useImperativeHandle", "useDebugValue", "useId",
    "useTransition", "useDeferredValue", "useSyncExternalStore",
})

CONTROL_KEYWORDS = frozenset({"if", "for", "while", "switch", "catch", "return", "function"})

FRAMEWORK_ALIASES = {
    "react": "react",
    "next": "react",
    "next.js": "react",
    "nextjs": "react",
    "react native": "react",
    "vue": "vue",
    "vue.js": "vue",
    "nuxt": "vue",
    "angular": "angular",
}


# -------------------- Small helpers --------------------

def _file_stem(path: str) -> str:
    name = path.split("/")[-1]
    return name.split(".")[0] or "unknown"


def _pascal_case(name: str) -> str:
    parts = re.split(r"[^A-Za-z0-9]+", name)
    return "".join(p[:1].upper() + p[1:] for p in parts if p) or "Component"


def _is_constant(name: str, line: str) -> bool:
    """`const MAX = 5;` style declarations: all-caps and not a function."""
    if len(name) < 2 or not name.isupper():
        return False
    return "=>" not in line and not re.search(r"\bfunction\b", line)


def parse_literal(raw: str) -> Any:
    """
    Turns a JS literal snippet into a Python value. Anything that is not a
    plain string/number/boolean/null/empty collection comes back as None.
    """
    text = raw.strip().rstrip(",;").strip()
    if not text:
        return None
    if len(text) >= 2 and text[0] == text[-1] and text[0] in "'\"`":
        return text[1:-1]
    if text in ("true", "false"):
        return text == "true"
    if text in ("null", "undefined"):
        return None
    if text == "[]":
        return []
    if text == "{}":
        return {}
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return float(text)
    except ValueError:
        return None


def infer_type(raw: str) -> str:
    text = raw.strip().rstrip(",;").strip()
    if len(text) >= 2 and text[0] == text[-1] and text[0] in "'\"`":
        return "string"
    if text in ("true", "false"):
        return "boolean"
    if text.startswith("["):
        return "array"
    if text.startswith("{"):
        return "object"
    if parse_literal(text) is not None and not isinstance(parse_literal(text), (str, bool)):
        return "number"
    return "any"


def _split_params(raw: str) -> List[ParameterDefinition]:
    params: List[ParameterDefinition] = []
    for chunk in raw.split(","):
        chunk = chunk.strip()
        if not chunk:
            continue
        default = None
        if "=" in chunk:
            chunk, default = (part.strip() for part in chunk.split("=", 1))
        type_ = "any"
        if ":" in chunk:
            chunk, type_ = (part.strip() for part in chunk.split(":", 1))
        optional = chunk.endswith("?")
        name = chunk.rstrip("?").lstrip(".")
        param: ParameterDefinition = {
            "name": name,
            "type": type_,
            "required": default is None and not optional,
        }
        if default is not None:
            param["defaultValue"] = parse_literal(default)
        params.append(param)
    return params


def count_braces(line: str) -> int:
    return line.count("{") - line.count("}")


def find_block_end(lines: Sequence[str], start: int, column: int = 0) -> int:
    """
    Index of the line where the first brace opened at/after `start` closes,
    scanning the first line from `column` on.
    Counts every brace character, string and comment contents included.
    Returns the last line index when the block never closes.
    """
    brace_count = 0
    opened = False

    for i in range(start, len(lines)):
        text = lines[i][column:] if i == start else lines[i]
        for char in text:
            if char == "{":
                brace_count += 1
                opened = True
            elif char == "}":
                brace_count -= 1
                if brace_count == 0 and opened:
                    return i

    return len(lines) - 1


def body_column(line: str) -> int:
    """
    Column where a component's body can open on its declaration line: past
    the first `=>`, else past the last `)`. Braces of destructured
    parameters sit before it.
    """
    arrow = line.find("=>")
    if arrow != -1:
        return arrow + 2
    paren = line.rfind(")")
    return paren + 1 if paren != -1 else 0


def find_component_end(lines: Sequence[str], start: int) -> int:
    return find_block_end(lines, start, body_column(lines[start]))


def find_class_end(lines: Sequence[str], start: int) -> int:
    return find_block_end(lines, start)


def find_statement_end(lines: Sequence[str], start: int) -> int:
    for i in range(start, len(lines)):
        if ";" in lines[i] or "}" in lines[i]:
            return i
    return start


def find_section_bounds(lines: Sequence[str], start_tag: str, end_tag: str) -> Optional[Tuple[int, int]]:
    """First line containing `start_tag` and the first later line containing `end_tag`."""
    start = next((i for i, line in enumerate(lines) if start_tag in line), -1)
    if start == -1:
        return None
    end = next((i for i in range(start + 1, len(lines)) if end_tag in lines[i]), -1)
    if end == -1:
        return None
    return start, end


def _object_block_entries(lines: Sequence[str], start: int) -> List[Tuple[str, str, int]]:
    """
    (key, raw value, line index) for top-level `key: value` entries of the
    object literal that opens on `lines[start]`.
    """
    entries: List[Tuple[str, str, int]] = []
    end = find_block_end(lines, start)
    depth = 0
    for i in range(start, end + 1):
        line = lines[i]
        if i == start:
            # entries written on the opening line itself: `state = { a: 1, b: 2 }`
            inline = line[line.find("{") + 1:]
            if "}" in inline:
                for part in inline[: inline.rfind("}")].split(","):
                    match = RE_OBJECT_ENTRY.match(part)
                    if match:
                        entries.append((match.group(1), match.group(2), i))
                return entries
            depth = count_braces(line)
            continue
        if depth == 1:
            match = RE_OBJECT_ENTRY.match(line)
            if match and not line.strip().startswith("//"):
                entries.append((match.group(1), match.group(2), i))
        depth += count_braces(line)
    return entries


def _state_from_entries(entries: List[Tuple[str, str, int]], offset: int) -> List[StateDefinition]:
    state: List[StateDefinition] = []
    for key, raw, idx in entries:
        value = raw.rstrip(",").strip()
        state.append({
            "name": key,
            "type": infer_type(value),
            "initialValue": parse_literal(value),
            "lineNumber": offset + idx + 1,
            "scope": "local",
        })
    return state


# -------------------- Parser --------------------

class LineByLineParser:
    """Builds a ParsedProjectStructure from raw file lines."""

    def __init__(self) -> None:
        self._file_lines: Dict[str, List[str]] = {}
        self._framework = ""
        self._diagnostics: List[Diagnostic] = []

    def parse_project(self, files: Sequence[SourceFile], framework: str) -> ParsedProjectStructure:
        self._framework = FRAMEWORK_ALIASES.get(framework.strip().lower(), framework.strip().lower())
        self._file_lines = {f["path"]: f["content"].split("\n") for f in files}
        self._diagnostics = []

        structure = empty_structure()
        structure["ui"] = self._parse_ui_structure(files)
        structure["logic"] = self._parse_logic_structure(files)
        structure["routes"] = self._parse_route_structure(files)
        structure["data"] = self._parse_data_structure(files)
        structure["config"] = self._parse_config_structure(files)
        structure["diagnostics"] = list(self._diagnostics)

        logger.info(
            "Line parser (%s): %d components, %d services, %d routes, %d models, %d diagnostics",
            self._framework,
            len(structure["ui"]["components"]),
            len(structure["logic"]["services"]),
            len(structure["routes"]["routes"]),
            len(structure["data"]["models"]),
            len(structure["diagnostics"]),
        )
        return structure

    # ---------- file routing ----------

    @staticmethod
    def is_ui_file(path: str) -> bool:
        return path.endswith(UI_EXTENSIONS) or any(p in path for p in UI_PATTERNS)

    @staticmethod
    def is_logic_file(path: str) -> bool:
        return any(p in path for p in LOGIC_PATTERNS)

    @staticmethod
    def is_route_file(path: str) -> bool:
        return any(p in path for p in ROUTE_PATTERNS)

    @staticmethod
    def is_data_file(path: str) -> bool:
        return any(p in path for p in DATA_PATTERNS)

    @staticmethod
    def is_config_file(path: str) -> bool:
        return path.endswith(CONFIG_FILES)

    @staticmethod
    def is_style_file(path: str) -> bool:
        return path.endswith(STYLE_EXTENSIONS)

    @staticmethod
    def is_page_file(path: str) -> bool:
        return "/pages/" in path or "/views/" in path

    @staticmethod
    def is_layout_file(path: str) -> bool:
        return "/layouts/" in path or "/templates/" in path

    # ---------- per-file guard ----------

    def _collect(self, files: Sequence[SourceFile], parse: Callable[[SourceFile], List[Any]]) -> List[Any]:
        results: List[Any] = []
        for file in files:
            try:
                results.extend(parse(file))
            except Exception as e:
                logger.warning("Line parser skipped %s: %s", file["path"], e)
                self._diagnostics.append({
                    "file": file["path"],
                    "line": 0,
                    "message": f"{type(e).__name__}: {e}",
                    "severity": "warning",
                })
        return results

    def _lines(self, path: str) -> List[str]:
        return self._file_lines.get(path, [])

    # ---------- sections ----------

    def _parse_ui_structure(self, files: Sequence[SourceFile]) -> UIStructure:
        ui_files = [f for f in files if self.is_ui_file(f["path"])]
        return {
            "components": self._parse_components(ui_files),
            "pages": self._collect([f for f in ui_files if self.is_page_file(f["path"])], self._parse_page),
            "layouts": self._collect([f for f in ui_files if self.is_layout_file(f["path"])], self._parse_layout),
            "styles": self._collect([f for f in files if self.is_style_file(f["path"])], self._parse_style),
        }

    def _parse_logic_structure(self, files: Sequence[SourceFile]) -> LogicStructure:
        logic_files = [f for f in files if self.is_logic_file(f["path"])]
        return {
            "services": self._collect(logic_files, self._parse_services),
            "utilities": [],
            "stores": self._collect(logic_files, self._parse_store),
            "middleware": [],
            "validators": [],
            "constants": [],
        }

    def _parse_route_structure(self, files: Sequence[SourceFile]) -> RouteStructure:
        route_files = [f for f in files if self.is_route_file(f["path"])]
        return {
            "routes": self._collect(route_files, self._parse_routes),
            "guards": [],
            "middleware": [],
            "navigation": {"type": "history", "config": {}},
        }

    def _parse_data_structure(self, files: Sequence[SourceFile]) -> DataStructure:
        data_files = [f for f in files if self.is_data_file(f["path"])]
        return {
            "models": self._collect(data_files, self._parse_models),
            "schemas": [],
            "migrations": [],
            "seeders": [],
            "queries": [],
        }

    def _parse_config_structure(self, files: Sequence[SourceFile]) -> ConfigStructure:
        config_files = [f for f in files if self.is_config_file(f["path"])]
        bundler = ""
        build_file = ""
        for f in config_files:
            if f["path"].endswith("vite.config.js"):
                bundler, build_file = "vite", f["path"]
            elif f["path"].endswith("webpack.config.js") and not bundler:
                bundler, build_file = "webpack", f["path"]
        return {
            "environment": self._collect(files, self._parse_environment),
            "build": {"bundler": bundler, "entry": [], "output": "", "plugins": [], "filePath": build_file},
            "deployment": {"platform": "", "config": {}, "filePath": ""},
            "dependencies": self._collect(
                [f for f in config_files if f["path"].endswith("package.json")],
                self._parse_dependencies,
            ),
        }

    # ---------- components ----------

    def _parse_components(self, files: Sequence[SourceFile]) -> List[ComponentDefinition]:
        if self._framework == "react":
            return self._collect(files, lambda f: self.parse_react_components(f["path"], self._lines(f["path"])))
        if self._framework == "vue":
            return self._collect(files, lambda f: self.parse_vue_components(f["path"], self._lines(f["path"])))
        if self._framework == "angular":
            return self._collect(files, lambda f: self.parse_angular_components(f["path"], self._lines(f["path"])))

        if files:
            self._diagnostics.append({
                "file": "",
                "line": 0,
                "message": f"No component parser for framework '{self._framework}'",
                "severity": "info",
            })
        return []

    def parse_react_components(self, file_path: str, lines: List[str]) -> List[ComponentDefinition]:
        components: List[ComponentDefinition] = []

        for i, raw in enumerate(lines):
            # only declarations that start at column 0 are considered
            if raw[:1].isspace():
                continue
            line = raw.strip()

            func_match = RE_FUNC_COMPONENT.match(line)
            if func_match and not _is_constant(func_match.group(1), line):
                components.append(self._parse_react_component(file_path, lines, i, func_match.group(1), "functional"))
                continue

            class_match = RE_CLASS_COMPONENT.match(line)
            if class_match:
                components.append(self._parse_react_component(file_path, lines, i, class_match.group(1), "class"))

        return components

    def _parse_react_component(
        self,
        file_path: str,
        lines: List[str],
        start: int,
        name: str,
        kind: str,
    ) -> ComponentDefinition:
        end = find_component_end(lines, start)
        body = lines[start: end + 1]
        imports = self.parse_imports(lines[:start])
        state = self._react_state(body, start, kind)

        component_type = kind
        if kind == "functional" and not state:
            component_type = "stateless"

        return {
            "id": f"{file_path}:{name}",
            "name": name,
            "filePath": file_path,
            "lineStart": start + 1,
            "lineEnd": end + 1,
            "type": component_type,
            "props": self._react_props(body, start),
            "state": state,
            "hooks": self._react_hooks(body, start),
            "imports": imports,
            "exports": self.parse_exports(lines[end + 1:], offset=end + 1),
            "events": self._react_events(body, start),
            "children": self._component_children(body, start, exclude=name),
            "styling": self._styling(body, start),
            "dependencies": self._component_dependencies(body, imports),
        }

    def _react_props(self, body: List[str], offset: int) -> List[PropertyDefinition]:
        props: List[PropertyDefinition] = []
        seen: set[str] = set()

        match = RE_DESTRUCTURED_PROPS.search(body[0]) if body else None
        if match:
            for param in _split_params(match.group(1)):
                if param["name"] and param["name"] not in seen:
                    seen.add(param["name"])
                    prop: PropertyDefinition = {
                        "name": param["name"],
                        "type": param.get("type", "any"),
                        "required": param["required"],
                        "lineNumber": offset + 1,
                    }
                    if "defaultValue" in param:
                        prop["defaultValue"] = param["defaultValue"]
                    props.append(prop)

        for idx, line in enumerate(body):
            for access in RE_PROPS_ACCESS.finditer(line):
                name = access.group(1)
                if name not in seen:
                    seen.add(name)
                    props.append({"name": name, "type": "any", "required": False, "lineNumber": offset + idx + 1})

        return props

    def _react_state(self, body: List[str], offset: int, kind: str) -> List[StateDefinition]:
        state: List[StateDefinition] = []
        for idx, line in enumerate(body):
            match = RE_USE_STATE.search(line)
            if match:
                raw = match.group(3)
                state.append({
                    "name": match.group(1),
                    "type": infer_type(raw),
                    "initialValue": parse_literal(raw),
                    "lineNumber": offset + idx + 1,
                    "scope": "local",
                })
            elif kind == "class" and RE_INITIAL_STATE.search(line) and "setState" not in line:
                state.extend(_state_from_entries(_object_block_entries(body, idx), offset))
        return state

    def _react_hooks(self, body: List[str], offset: int) -> List[HookUsage]:
        hooks: List[HookUsage] = []
        for idx, line in enumerate(body):
            for match in RE_HOOK_CALL.finditer(line):
                name = match.group(1)
                dependencies: List[str] = []
                if name in ("useEffect", "useCallback", "useMemo", "useLayoutEffect"):
                    end = find_block_end(body, idx) if "{" in line else idx
                    deps = RE_HOOK_DEPS.search(body[end])
                    if deps:
                        dependencies = [d.strip() for d in deps.group(1).split(",") if d.strip()]
                hooks.append({
                    "name": name,
                    "type": "builtin" if name in REACT_BUILTIN_HOOKS else "custom",
                    "params": [],
                    "lineNumber": offset + idx + 1,
                    "dependencies": dependencies,
                })
        return hooks

    def _react_events(self, body: List[str], offset: int) -> List[EventHandler]:
        events: List[EventHandler] = []
        for idx, line in enumerate(body):
            decl = RE_HANDLER_DECL.search(line)
            if decl:
                raw_params = decl.group(2) if decl.group(2) is not None else (decl.group(3) or "")
                events.append({
                    "name": decl.group(1),
                    "type": "handler",
                    "params": [p["name"] for p in _split_params(raw_params)],
                    "lineNumber": offset + idx + 1,
                })
            for attr in RE_JSX_EVENT.finditer(line):
                events.append({
                    "name": attr.group(2).strip(),
                    "type": attr.group(1).lower(),
                    "params": [],
                    "lineNumber": offset + idx + 1,
                    "target": f"on{attr.group(1)}",
                })
        return events

    def _component_children(self, body: List[str], offset: int, exclude: str) -> List[ComponentReference]:
        children: List[ComponentReference] = []
        seen: set[str] = set()
        for idx, line in enumerate(body):
            for match in RE_CHILD_TAG.finditer(line):
                name = match.group(1)
                if name == exclude or name in seen:
                    continue
                seen.add(name)
                children.append({
                    "name": name,
                    "props": dict(RE_TAG_ATTR.findall(match.group(2) or "")),
                    "lineNumber": offset + idx + 1,
                })
        return children

    def _styling(self, body: List[str], offset: int) -> StylingInfo:
        classes: List[str] = []
        line_numbers: List[int] = []
        inline = False
        styled = False
        for idx, line in enumerate(body):
            found = False
            for match in RE_CLASS_NAME.finditer(line):
                for cls in match.group(1).split():
                    if cls not in classes:
                        classes.append(cls)
                found = True
            if RE_INLINE_STYLE.search(line):
                inline = found = True
            if "styled." in line or "styled(" in line:
                styled = found = True
            if found:
                line_numbers.append(offset + idx + 1)

        style_type = "css"
        if styled:
            style_type = "styled-components"
        elif inline and not classes:
            style_type = "inline"
        elif any(re.match(r"^(?:[a-z]+:)?(?:p|m|px|py|mx|my|w|h|text|bg|flex|grid|gap|rounded)-", c) for c in classes):
            style_type = "tailwind"

        return {"type": style_type, "classes": classes, "styles": {}, "lineNumbers": line_numbers}

    def _component_dependencies(self, body: List[str], imports: List[ImportDefinition]) -> List[str]:
        text = "\n".join(body)
        modules: List[str] = []
        for imp in imports:
            names = [n.split(" as ")[-1].strip() for n in imp["imports"]]
            if any(re.search(rf"\b{re.escape(n)}\b", text) for n in names if n) and imp["module"] not in modules:
                modules.append(imp["module"])
        return modules

    # ---------- vue ----------

    def parse_vue_components(self, file_path: str, lines: List[str]) -> List[ComponentDefinition]:
        script = find_section_bounds(lines, "<script", "</script>")
        if not script:
            return []
        template = find_section_bounds(lines, "<template", "</template>")

        script_start, script_end = script
        script_lines = lines[script_start:script_end]
        template_lines = lines[template[0]:template[1]] if template else []
        template_offset = template[0] if template else 0

        name_match = next((RE_VUE_NAME.search(l) for l in script_lines if RE_VUE_NAME.search(l)), None)
        name = _pascal_case(name_match.group(1)) if name_match else _pascal_case(_file_stem(file_path))

        return [{
            "id": f"{file_path}:{name}",
            "name": name,
            "filePath": file_path,
            "lineStart": script_start + 1,
            "lineEnd": script_end + 1,
            "type": "functional",
            "props": self._vue_props(script_lines, script_start),
            "state": self._vue_data(script_lines, script_start),
            "hooks": self._vue_lifecycle(script_lines, script_start),
            "imports": self.parse_imports(script_lines, offset=script_start),
            "exports": [],
            "events": self._vue_events(script_lines, script_start)
            + self._vue_template_events(template_lines, template_offset),
            "children": self._vue_template_children(template_lines, template_offset),
            "styling": self._styling(lines, 0),
            "dependencies": [],
        }]

    def _vue_props(self, lines: List[str], offset: int) -> List[PropertyDefinition]:
        props: List[PropertyDefinition] = []
        for idx, line in enumerate(lines):
            array = RE_VUE_PROPS_ARRAY.search(line)
            if array:
                for raw in array.group(1).split(","):
                    name = raw.strip().strip("'\"")
                    if name:
                        props.append({"name": name, "type": "any", "required": False, "lineNumber": offset + idx + 1})
                continue
            if re.search(r"\bprops\s*:\s*\{", line) or re.search(r"defineProps(?:<[^>]*>)?\(\s*\{", line):
                for key, raw, entry_idx in _object_block_entries(lines, idx):
                    type_match = re.search(r"type\s*:\s*(\w+)", raw) or re.match(r"(\w+)", raw)
                    props.append({
                        "name": key,
                        "type": type_match.group(1).lower() if type_match else "any",
                        "required": "required: true" in raw,
                        "lineNumber": offset + entry_idx + 1,
                    })
        return props

    def _vue_data(self, lines: List[str], offset: int) -> List[StateDefinition]:
        state: List[StateDefinition] = []
        for idx, line in enumerate(lines):
            if re.search(r"\bdata\s*\(\s*\)\s*\{", line):
                ret = next((j for j in range(idx, len(lines)) if re.search(r"return\s*\{", lines[j])), -1)
                if ret != -1:
                    state.extend(_state_from_entries(_object_block_entries(lines, ret), offset))
            ref = RE_VUE_REF.search(line)
            if ref:
                state.append({
                    "name": ref.group(1),
                    "type": infer_type(ref.group(2)),
                    "initialValue": parse_literal(ref.group(2)),
                    "lineNumber": offset + idx + 1,
                    "scope": "local",
                })
        return state

    def _vue_lifecycle(self, lines: List[str], offset: int) -> List[HookUsage]:
        return [
            {"name": m.group(1), "type": "lifecycle", "params": [], "lineNumber": offset + idx + 1, "dependencies": []}
            for idx, line in enumerate(lines)
            for m in RE_VUE_LIFECYCLE.finditer(line)
        ]

    def _vue_events(self, lines: List[str], offset: int) -> List[EventHandler]:
        events: List[EventHandler] = []
        for idx, line in enumerate(lines):
            for m in RE_VUE_EMIT.finditer(line):
                events.append({"name": m.group(1), "type": "emit", "params": [], "lineNumber": offset + idx + 1})
            emits = RE_VUE_DEFINE_EMITS.search(line)
            if emits:
                for raw in emits.group(1).split(","):
                    name = raw.strip().strip("'\"")
                    if name:
                        events.append({"name": name, "type": "emit", "params": [], "lineNumber": offset + idx + 1})
        return events

    def _vue_template_events(self, lines: List[str], offset: int) -> List[EventHandler]:
        return [
            {"name": m.group(2), "type": m.group(1), "params": [], "lineNumber": offset + idx + 1, "target": m.group(1)}
            for idx, line in enumerate(lines)
            for m in RE_VUE_TEMPLATE_EVENT.finditer(line)
        ]

    def _vue_template_children(self, lines: List[str], offset: int) -> List[ComponentReference]:
        children: List[ComponentReference] = []
        for idx, line in enumerate(lines):
            for m in RE_VUE_TEMPLATE_CHILD.finditer(line):
                children.append({
                    "name": m.group(1),
                    "props": dict(RE_TAG_ATTR.findall(m.group(2) or "")),
                    "lineNumber": offset + idx + 1,
                })
        return children

    # ---------- angular ----------

    def parse_angular_components(self, file_path: str, lines: List[str]) -> List[ComponentDefinition]:
        components: List[ComponentDefinition] = []

        for i, line in enumerate(lines):
            if "@Component" not in line:
                continue

            decorator_end = self._find_decorator_end(lines, i)
            class_start = next((j for j in range(decorator_end, len(lines)) if "class" in lines[j]), -1)
            if class_start == -1:
                continue
            class_match = RE_ANGULAR_CLASS.search(lines[class_start])
            if not class_match:
                continue

            name = class_match.group(1)
            class_end = find_class_end(lines, class_start)
            class_lines = lines[class_start:class_end]

            components.append({
                "id": f"{file_path}:{name}",
                "name": name,
                "filePath": file_path,
                "lineStart": i + 1,
                "lineEnd": class_end + 1,
                "type": "class",
                "props": self._angular_inputs(class_lines, class_start),
                "state": self._angular_properties(class_lines, class_start),
                "hooks": self._angular_lifecycle(class_lines, class_start),
                "imports": self.parse_imports(lines[:i]),
                "exports": [],
                "events": self._angular_events(class_lines, class_start),
                "children": [],
                "styling": self._styling(lines[i:decorator_end + 1], i),
                "dependencies": self._angular_dependencies(class_lines),
            })

        return components

    @staticmethod
    def _find_decorator_end(lines: Sequence[str], start: int) -> int:
        for i in range(start, len(lines)):
            if ")" in lines[i] and "(" not in lines[i]:
                return i
        return start

    def _angular_inputs(self, lines: List[str], offset: int) -> List[PropertyDefinition]:
        props: List[PropertyDefinition] = []
        for idx, line in enumerate(lines):
            m = RE_ANGULAR_INPUT.search(line)
            if m:
                prop: PropertyDefinition = {
                    "name": m.group(1),
                    "type": (m.group(2) or "any").strip(),
                    "required": m.group(3) is None and "?" not in line.split(m.group(1), 1)[1][:1],
                    "lineNumber": offset + idx + 1,
                }
                if m.group(3) is not None:
                    prop["defaultValue"] = parse_literal(m.group(3))
                props.append(prop)
        return props

    def _angular_properties(self, lines: List[str], offset: int) -> List[StateDefinition]:
        state: List[StateDefinition] = []
        depth = 0
        for idx, line in enumerate(lines):
            if depth == 1 and "@Input" not in line and "@Output" not in line:
                m = RE_CLASS_FIELD.match(line)
                if m:
                    raw = m.group(3)
                    state.append({
                        "name": m.group(1),
                        "type": (m.group(2) or infer_type(raw)).strip(),
                        "initialValue": parse_literal(raw),
                        "lineNumber": offset + idx + 1,
                        "scope": "local",
                    })
            depth += count_braces(line)
        return state

    def _angular_lifecycle(self, lines: List[str], offset: int) -> List[HookUsage]:
        return [
            {"name": m.group(1), "type": "lifecycle", "params": [], "lineNumber": offset + idx + 1, "dependencies": []}
            for idx, line in enumerate(lines)
            for m in RE_ANGULAR_LIFECYCLE.finditer(line)
        ]

    def _angular_events(self, lines: List[str], offset: int) -> List[EventHandler]:
        return [
            {"name": m.group(1), "type": "output", "params": [], "lineNumber": offset + idx + 1}
            for idx, line in enumerate(lines)
            for m in RE_ANGULAR_OUTPUT.finditer(line)
        ]

    def _angular_dependencies(self, lines: List[str]) -> List[str]:
        match = RE_CONSTRUCTOR.search("\n".join(lines))
        if not match:
            return []
        return [p["type"] for p in _split_params(match.group(1).replace("\n", " ")) if p["type"] != "any"]

    # ---------- logic ----------

    def _parse_services(self, file: SourceFile) -> List[ServiceDefinition]:
        lines = self._lines(file["path"])
        services: List[ServiceDefinition] = []

        for i, raw in enumerate(lines):
            match = RE_SERVICE_CLASS.match(raw.strip())
            if not match:
                continue
            name = match.group(1)
            end = find_class_end(lines, i)
            services.append({
                "id": f"{file['path']}:{name}",
                "name": name,
                "filePath": file["path"],
                "lineStart": i + 1,
                "lineEnd": end + 1,
                "type": "api",
                "methods": self._parse_methods(lines[i:end + 1], i),
                "dependencies": [imp["module"] for imp in self.parse_imports(lines[:i])],
                "exports": self.parse_exports(lines[i:end + 1], offset=i),
            })

        return services

    def _parse_methods(self, lines: List[str], offset: int) -> List[MethodDefinition]:
        methods: List[MethodDefinition] = []
        for idx, line in enumerate(lines):
            m = RE_METHOD.match(line)
            if not m or m.group(3) in CONTROL_KEYWORDS:
                continue
            name = m.group(3)
            visibility = m.group(1) or ("private" if name.startswith("_") else "public")
            end = find_block_end(lines, idx)
            methods.append({
                "name": name,
                "params": _split_params(m.group(4)),
                "returnType": (m.group(5) or "void").strip(),
                "lineStart": offset + idx + 1,
                "lineEnd": offset + end + 1,
                "isAsync": bool(m.group(2)),
                "visibility": visibility,
            })
        return methods

    def _parse_store(self, file: SourceFile) -> List[StoreDefinition]:
        path = file["path"]
        if "store" not in path and "redux" not in path:
            return []
        lines = self._lines(path)
        text = "\n".join(lines)
        name = _file_stem(path)

        store_type = "redux"
        if "zustand" in text:
            store_type = "zustand"
        elif "mobx" in text:
            store_type = "mobx"
        elif "valtio" in text:
            store_type = "valtio"
        elif "createContext" in text:
            store_type = "context"

        state: List[StateDefinition] = []
        actions: List[ActionDefinition] = []
        for idx, line in enumerate(lines):
            if not state and RE_INITIAL_STATE.search(line):
                state = _state_from_entries(_object_block_entries(lines, idx), 0)
            for pattern, kind in ((RE_STORE_THUNK, "async"), (RE_STORE_ACTION, "sync"), (RE_STORE_CASE, "sync")):
                m = pattern.search(line)
                if m:
                    actions.append({"name": m.group(1), "type": kind, "params": [], "lineNumber": idx + 1})
                    break
            else:
                m = RE_STORE_REDUCER.match(line)
                if m and m.group(1) not in CONTROL_KEYWORDS:
                    actions.append({"name": m.group(1), "type": "sync", "params": [], "lineNumber": idx + 1})

        return [{
            "id": f"{path}:{name}",
            "name": name,
            "filePath": path,
            "lineStart": 1,
            "lineEnd": len(lines),
            "type": store_type,
            "state": state,
            "actions": actions,
            "selectors": [],
            "middleware": [],
        }]

    # ---------- routes / data / config ----------

    def _parse_routes(self, file: SourceFile) -> List[RouteDefinition]:
        routes: List[RouteDefinition] = []
        for i, raw in enumerate(self._lines(file["path"])):
            line = raw.strip()
            found: Optional[Tuple[str, str, str]] = None

            m = RE_ROUTE_COMPONENT.search(line) or RE_ROUTE_ELEMENT.search(line)
            if m:
                found = (m.group(1), m.group(2).strip(), "GET")
            else:
                server = RE_SERVER_ROUTE.search(line)
                if server:
                    found = (server.group(2), "", server.group(1).upper())

            if found:
                path, component, method = found
                routes.append({
                    "id": f"{file['path']}:{i}",
                    "path": path,
                    "filePath": file["path"],
                    "lineStart": i + 1,
                    "lineEnd": i + 1,
                    "component": component,
                    "method": method,
                    "guards": [],
                    "middleware": [],
                    "params": self.extract_route_params(path),
                    "query": [],
                    "meta": {},
                })
        return routes

    @staticmethod
    def extract_route_params(path: str) -> List[RouteParameter]:
        return [
            {"name": m.group(1), "type": "string", "required": not m.group(2)}
            for m in RE_ROUTE_PARAM.finditer(path)
        ]

    def _parse_models(self, file: SourceFile) -> List[ModelDefinition]:
        lines = self._lines(file["path"])
        models: List[ModelDefinition] = []
        for i, raw in enumerate(lines):
            m = RE_MODEL.search(raw.strip())
            if not m:
                continue
            end = find_statement_end(lines, i)
            models.append({
                "id": f"{file['path']}:{m.group(1)}",
                "name": m.group(1),
                "filePath": file["path"],
                "lineStart": i + 1,
                "lineEnd": end + 1,
                "fields": self._model_fields(lines[i + 1:end + 1], i + 1),
                "relations": [],
                "indexes": [],
                "validations": [],
            })
        return models

    @staticmethod
    def _model_fields(lines: List[str], offset: int) -> List[FieldDefinition]:
        fields: List[FieldDefinition] = []
        for idx, line in enumerate(lines):
            m = RE_MODEL_FIELD.match(line)
            if m:
                fields.append({
                    "name": m.group(1),
                    "type": m.group(2).split(".")[-1],
                    "nullable": "required: true" not in line and "allowNull: false" not in line,
                    "unique": "unique: true" in line,
                    "index": "index: true" in line,
                    "lineNumber": offset + idx + 1,
                })
        return fields

    def _parse_page(self, file: SourceFile) -> List[PageDefinition]:
        path = file["path"]
        lines = self._lines(path)
        name = _file_stem(path)
        return [{
            "id": f"{path}:page",
            "name": name,
            "filePath": path,
            "route": self.infer_route_from_path(path),
            "lineStart": 1,
            "lineEnd": len(lines),
            "components": self._component_children(lines, 0, exclude=_pascal_case(name)),
            "layout": None,
            "meta": {"title": name},
            "auth": {"required": False},
        }]

    def _parse_layout(self, file: SourceFile) -> List[LayoutDefinition]:
        path = file["path"]
        lines = self._lines(path)
        name = _file_stem(path)
        slots: List[Dict[str, Any]] = []
        for idx, line in enumerate(lines):
            if "{children}" in line or "<Outlet" in line:
                slots.append({"name": "default", "lineNumber": idx + 1})
            for m in re.finditer(r"<slot(?:\s+name=[\"']([\w-]+)[\"'])?", line):
                slots.append({"name": m.group(1) or "default", "lineNumber": idx + 1})
        return [{
            "id": f"{path}:layout",
            "name": name,
            "filePath": path,
            "lineStart": 1,
            "lineEnd": len(lines),
            "components": self._component_children(lines, 0, exclude=_pascal_case(name)),
            "slots": slots,
        }]

    def _parse_style(self, file: SourceFile) -> List[StyleDefinition]:
        path = file["path"]
        content = file["content"]
        selectors = []
        for m in RE_CSS_RULE.finditer(content):
            selector = m.group(1).strip()
            if not selector or selector.startswith("@"):
                continue
            selectors.append({
                "selector": selector,
                "properties": {
                    k.strip(): v.strip()
                    for k, _, v in (p.partition(":") for p in m.group(2).split(";"))
                    if k.strip() and v.strip()
                },
                "lineNumber": content.count("\n", 0, m.start(1) + len(m.group(1)) - len(m.group(1).lstrip())) + 1,
            })
        variables = [
            {"name": m.group(1), "value": m.group(2).strip(), "lineNumber": content.count("\n", 0, m.start()) + 1}
            for m in RE_CSS_VARIABLE.finditer(content)
        ]
        return [{
            "id": f"{path}:styles",
            "filePath": path,
            "type": self.style_type(path),
            "selectors": selectors,
            "variables": variables,
            "themes": [],
        }]

    @staticmethod
    def style_type(path: str) -> str:
        for ext in ("scss", "sass", "less"):
            if path.endswith(f".{ext}"):
                return ext
        return "css"

    @staticmethod
    def infer_route_from_path(path: str) -> str:
        segments = path.split("/")
        if "pages" in segments:
            route = "/".join(segments[segments.index("pages") + 1:])
            return "/" + re.sub(r"\.(jsx?|tsx?|vue)$", "", route)
        return "/"

    def _parse_environment(self, file: SourceFile) -> List[Dict[str, Any]]:
        found: List[Dict[str, Any]] = []
        for idx, line in enumerate(self._lines(file["path"])):
            for m in RE_ENV_ACCESS.finditer(line):
                found.append({"name": m.group(1), "filePath": file["path"], "lineNumber": idx + 1})
        return found

    def _parse_dependencies(self, file: SourceFile) -> List[DependencyInfo]:
        try:
            pkg = json.loads(file["content"])
        except json.JSONDecodeError as e:
            self._diagnostics.append({
                "file": file["path"],
                "line": e.lineno,
                "message": f"Invalid package.json: {e.msg}",
                "severity": "warning",
            })
            return []
        if not isinstance(pkg, dict):
            return []

        deps: List[DependencyInfo] = []
        for section, kind, required in (("dependencies", "dependency", True), ("devDependencies", "devDependency", False)):
            for name, version in (pkg.get(section) or {}).items():
                deps.append({"name": name, "version": str(version), "type": kind, "required": required})
        return deps

    # ---------- imports / exports ----------

    @staticmethod
    def parse_imports(lines: Sequence[str], offset: int = 0) -> List[ImportDefinition]:
        imports: List[ImportDefinition] = []
        for idx, line in enumerate(lines):
            m = RE_IMPORT.search(line)
            if not m:
                continue
            named, default, extra_named, module = m.groups()
            if default:
                imports.append({
                    "module": module,
                    "imports": [default.strip()],
                    "isDefault": True,
                    "lineNumber": offset + idx + 1,
                })
            names = [n.strip() for n in ",".join(x for x in (named, extra_named) if x).split(",") if n.strip()]
            if names:
                imports.append({
                    "module": module,
                    "imports": names,
                    "isDefault": False,
                    "lineNumber": offset + idx + 1,
                })
        return imports

    @staticmethod
    def parse_exports(lines: Sequence[str], offset: int = 0) -> List[ExportDefinition]:
        exports: List[ExportDefinition] = []
        for idx, line in enumerate(lines):
            if "export default" in line:
                m = RE_EXPORT_DEFAULT.search(line)
                if m:
                    exports.append({"name": m.group(1).strip(), "type": "default", "lineNumber": offset + idx + 1})
            elif "export" in line:
                m = RE_EXPORT_NAMED.search(line)
                if m:
                    exports.append({"name": m.group(1).strip(), "type": "named", "lineNumber": offset + idx + 1})
        return exports
