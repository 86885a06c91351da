# stackshift/core/schema.py

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional, TypedDict


class SourceFile(TypedDict):
    """Minimal file record accepted by every pipeline stage."""
    path: str
    content: str


class ProjectFile(TypedDict):
    """Represents a single uploaded file of the source project."""
    path: str  # e.g., "src/components/App.jsx"
    content: str  # Full text, or "[Binary file: <name>]"
    size: int
    type: str  # e.g., "javascript", "image", "unknown"


class Diagnostic(TypedDict):
    """A degraded-but-not-fatal finding recorded during parsing."""
    file: str
    line: int
    message: str
    severity: Literal["info", "warning", "error"]


# -------------------- Detection --------------------

class LanguageStat(TypedDict):
    language: str  # display name, e.g. "JavaScript"
    percentage: float
    files: int
    icon: str
    purpose: str


class TechStackAnalysis(TypedDict):
    languages: List[LanguageStat]
    frameworks: List[str]
    totalFiles: int
    totalLines: int


# -------------------- AST --------------------

class ASTFunction(TypedDict, total=False):
    name: str
    params: List[str]
    returnType: str
    body: str
    isAsync: bool
    isExported: bool


class ASTNode(TypedDict, total=False):
    type: str  # Program | Stylesheet | Element | Fragment | Text | Expression | Error
    name: str
    props: Dict[str, Any]
    children: List["ASTNode"]
    imports: List[str]
    importSources: List[str]
    exports: List[str]
    functions: List[ASTFunction]
    components: List["ASTComponent"]
    styles: Dict[str, Dict[str, str]]
    hooks: List[str]


class ASTComponent(TypedDict, total=False):
    name: str
    props: List[str]
    state: Dict[str, str]  # state name -> literal default ("0", "'x'", "undefined")
    hooks: List[str]
    jsx: ASTNode
    isDefault: bool


# -------------------- UIR --------------------

class UIRProp(TypedDict, total=False):
    name: str
    type: str
    required: bool
    defaultValue: Any


class UIRState(TypedDict):
    name: str
    type: str
    initialValue: Any
    setter: str


class UIRMetadata(TypedDict):
    originalFile: str
    originalFramework: str
    dependencies: List[str]
    exports: List[str]


class UIRImplementation(TypedDict):
    code: str
    language: str


class UIRNode(TypedDict, total=False):
    """Generic node of the Universal Intermediate Representation."""
    id: str
    type: Literal["component", "function", "element", "text", "stylesheet"]
    name: str
    framework: str
    props: Dict[str, UIRProp]
    state: Dict[str, UIRState]
    hooks: List[str]
    children: List["UIRNode"]
    styles: Dict[str, Dict[str, str]]
    metadata: UIRMetadata
    implementation: UIRImplementation


# -------------------- Emission --------------------

class OutputFile(TypedDict):
    """A file produced by the template emitter."""
    path: str
    content: str
    type: str


class ConversionOptions(TypedDict, total=False):
    preserveStructure: bool
    maintainState: bool
    addTypeAnnotations: bool
    convertApiCalls: bool
    generateTests: bool
    preserveComments: bool


class ConversionResult(TypedDict):
    """The result of a conversion task, including files and problems."""
    success: bool
    files: List[OutputFile]
    errors: List[str]
    warnings: List[str]


# -------------------- Persistence --------------------

JobStatus = Literal["pending", "processing", "completed", "failed", "cancelled"]


class ConversionJob(TypedDict):
    id: str
    projectId: str
    fromFramework: str
    toFramework: str
    layer: str  # frontend | backend | database
    options: ConversionOptions
    status: JobStatus
    stage: str
    progress: int
    result: Optional[ConversionResult]
    error: Optional[str]
    createdAt: str
    updatedAt: str


class Project(TypedDict):
    id: str
    name: str
    originalTechStack: TechStackAnalysis
    targetTechStack: Optional[Dict[str, Any]]
    files: List[ProjectFile]
    convertedFiles: Optional[List[OutputFile]]
    status: str  # uploaded | analyzing | analyzed | converting | completed | failed
    progress: int
    createdAt: str
    updatedAt: str


class SupportedFramework(TypedDict):
    id: str
    name: str
    category: str
    description: str
    icon: str
    frameworks: List[str]
    maturity: str
    difficulty: str
    bidirectionalSupport: bool
