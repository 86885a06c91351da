# stackshift/core/stack_schema.py
"""
Record shapes used by the line-oriented parser and the whole-stack converter.

Every definition carries `filePath`, `lineStart` and `lineEnd` (1-based)
pointing back into the source file it was found in.
"""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional, TypedDict

from .schema import Diagnostic


# -------------------- Request --------------------

class FrameworkInfo(TypedDict, total=False):
    name: str  # e.g. "React", "Flutter", "Android"
    version: str
    language: str  # e.g. "javascript", "dart", "kotlin"
    features: List[str]


class TechStack(TypedDict, total=False):
    frontend: FrameworkInfo
    backend: FrameworkInfo
    database: FrameworkInfo
    mobile: FrameworkInfo


class StackConversionOptions(TypedDict, total=False):
    preserveStructure: bool
    maintainState: bool
    addTypeAnnotations: bool
    convertApiCalls: bool
    generateTests: bool
    preserveComments: bool


class TechStackConversionRequest(TypedDict, total=False):
    projectId: str
    currentStack: TechStack
    targetStack: TechStack
    conversionOptions: StackConversionOptions


# -------------------- Small building blocks --------------------

class ImportDefinition(TypedDict, total=False):
    module: str
    imports: List[str]
    isDefault: bool
    alias: str
    lineNumber: int


class ExportDefinition(TypedDict):
    name: str
    type: Literal["default", "named"]
    lineNumber: int


class PropertyDefinition(TypedDict, total=False):
    name: str
    type: str
    required: bool
    defaultValue: Any
    description: str
    lineNumber: int


class StateDefinition(TypedDict, total=False):
    name: str
    type: str
    initialValue: Any
    lineNumber: int
    scope: Literal["local", "global", "shared"]


class HookUsage(TypedDict):
    name: str
    type: str
    params: List[Any]
    lineNumber: int
    dependencies: List[str]


class EventHandler(TypedDict, total=False):
    name: str
    type: str
    params: List[str]
    lineNumber: int
    target: str


class ComponentReference(TypedDict):
    name: str
    props: Dict[str, Any]
    lineNumber: int


class StylingInfo(TypedDict):
    type: Literal["inline", "css", "styled-components", "tailwind"]
    classes: List[str]
    styles: Dict[str, Any]
    lineNumbers: List[int]


class ParameterDefinition(TypedDict, total=False):
    name: str
    type: str
    required: bool
    defaultValue: Any


class MethodDefinition(TypedDict):
    name: str
    params: List[ParameterDefinition]
    returnType: str
    lineStart: int
    lineEnd: int
    isAsync: bool
    visibility: Literal["public", "private", "protected"]


class ActionDefinition(TypedDict):
    name: str
    type: Literal["sync", "async"]
    params: List[ParameterDefinition]
    lineNumber: int


class RouteParameter(TypedDict):
    name: str
    type: str
    required: bool


class FieldDefinition(TypedDict, total=False):
    name: str
    type: str
    nullable: bool
    unique: bool
    index: bool
    defaultValue: Any
    lineNumber: int


class DependencyInfo(TypedDict):
    name: str
    version: str
    type: Literal["dependency", "devDependency"]
    required: bool


# -------------------- Definitions --------------------

class ComponentDefinition(TypedDict):
    id: str
    name: str
    filePath: str
    lineStart: int
    lineEnd: int
    type: Literal["functional", "class", "stateless"]
    props: List[PropertyDefinition]
    state: List[StateDefinition]
    hooks: List[HookUsage]
    imports: List[ImportDefinition]
    exports: List[ExportDefinition]
    events: List[EventHandler]
    children: List[ComponentReference]
    styling: StylingInfo
    dependencies: List[str]


class PageDefinition(TypedDict, total=False):
    id: str
    name: str
    filePath: str
    route: str
    lineStart: int
    lineEnd: int
    components: List[ComponentReference]
    layout: Optional[str]
    meta: Dict[str, Any]
    auth: Dict[str, Any]


class LayoutDefinition(TypedDict):
    id: str
    name: str
    filePath: str
    lineStart: int
    lineEnd: int
    components: List[ComponentReference]
    slots: List[Dict[str, Any]]


class StyleDefinition(TypedDict):
    id: str
    filePath: str
    type: str  # css | scss | sass | less
    selectors: List[Dict[str, Any]]
    variables: List[Dict[str, Any]]
    themes: List[Dict[str, Any]]


class ServiceDefinition(TypedDict):
    id: str
    name: str
    filePath: str
    lineStart: int
    lineEnd: int
    type: Literal["api", "business", "data", "utility"]
    methods: List[MethodDefinition]
    dependencies: List[str]
    exports: List[ExportDefinition]


class StoreDefinition(TypedDict):
    id: str
    name: str
    filePath: str
    lineStart: int
    lineEnd: int
    type: Literal["redux", "context", "zustand", "valtio", "mobx"]
    state: List[StateDefinition]
    actions: List[ActionDefinition]
    selectors: List[Dict[str, Any]]
    middleware: List[str]


class RouteDefinition(TypedDict):
    id: str
    path: str
    filePath: str
    lineStart: int
    lineEnd: int
    component: str
    method: Literal["GET", "POST", "PUT", "DELETE", "PATCH"]
    guards: List[str]
    middleware: List[str]
    params: List[RouteParameter]
    query: List[Dict[str, Any]]
    meta: Dict[str, Any]


class ModelDefinition(TypedDict):
    id: str
    name: str
    filePath: str
    lineStart: int
    lineEnd: int
    fields: List[FieldDefinition]
    relations: List[Dict[str, Any]]
    indexes: List[Dict[str, Any]]
    validations: List[Dict[str, Any]]


# -------------------- Structure --------------------

class UIStructure(TypedDict):
    components: List[ComponentDefinition]
    pages: List[PageDefinition]
    layouts: List[LayoutDefinition]
    styles: List[StyleDefinition]


class LogicStructure(TypedDict):
    services: List[ServiceDefinition]
    utilities: List[Dict[str, Any]]
    stores: List[StoreDefinition]
    middleware: List[Dict[str, Any]]
    validators: List[Dict[str, Any]]
    constants: List[Dict[str, Any]]


class RouteStructure(TypedDict):
    routes: List[RouteDefinition]
    guards: List[Dict[str, Any]]
    middleware: List[Dict[str, Any]]
    navigation: Dict[str, Any]


class DataStructure(TypedDict):
    models: List[ModelDefinition]
    schemas: List[Dict[str, Any]]
    migrations: List[Dict[str, Any]]
    seeders: List[Dict[str, Any]]
    queries: List[Dict[str, Any]]


class ConfigStructure(TypedDict):
    environment: List[Dict[str, Any]]
    build: Dict[str, Any]
    deployment: Dict[str, Any]
    dependencies: List[DependencyInfo]


class ParsedProjectStructure(TypedDict):
    ui: UIStructure
    logic: LogicStructure
    routes: RouteStructure
    data: DataStructure
    config: ConfigStructure
    diagnostics: List[Diagnostic]


def empty_structure() -> ParsedProjectStructure:
    """A schema-valid structure with nothing in it."""
    return {
        "ui": {"components": [], "pages": [], "layouts": [], "styles": []},
        "logic": {
            "services": [],
            "utilities": [],
            "stores": [],
            "middleware": [],
            "validators": [],
            "constants": [],
        },
        "routes": {
            "routes": [],
            "guards": [],
            "middleware": [],
            "navigation": {"type": "history", "config": {}},
        },
        "data": {"models": [], "schemas": [], "migrations": [], "seeders": [], "queries": []},
        "config": {
            "environment": [],
            "build": {"bundler": "", "entry": [], "output": "", "plugins": [], "filePath": ""},
            "deployment": {"platform": "", "config": {}, "filePath": ""},
            "dependencies": [],
        },
        "diagnostics": [],
    }


# -------------------- Result --------------------

class ConvertedFile(TypedDict):
    """Represents a single file after conversion."""
    originalPath: str
    newPath: str
    content: str
    type: str
    language: str
    lineCount: int


class LineMapping(TypedDict):
    originalFile: str
    originalLine: int
    newFile: str
    newLine: int
    type: Literal["direct", "transformed", "generated", "removed"]


class ConversionError(TypedDict):
    file: str
    line: int
    message: str
    severity: Literal["error", "critical"]
    originalCode: str


class ConversionWarning(TypedDict, total=False):
    file: str
    line: int
    message: str
    suggestion: str


class ConversionSummary(TypedDict):
    totalFiles: int
    convertedFiles: int
    skippedFiles: int
    generatedFiles: int
    totalLines: int
    convertedLines: int
    generatedLines: int
    conversionTime: int  # milliseconds
    frameworks: Dict[str, TechStack]


class TechStackConversionResult(TypedDict):
    success: bool
    convertedProject: ParsedProjectStructure
    files: List[ConvertedFile]
    lineMappings: List[LineMapping]
    errors: List[ConversionError]
    warnings: List[ConversionWarning]
    summary: ConversionSummary
