# stackshift/core/jobs.py
"""
Projects, conversion jobs and the staged job runner.

A job moves through fixed stages, each doing one real step of the
AST -> UIR -> template pipeline:

    analyzing (10) -> parsing (25) -> generating_uir (50)
        -> emitting (75) -> packaging (90) -> completed (100)

Every stage transition is written to the store (job and project rows) and
published as a JobEvent to subscribers. Cancellation is checked between
stages only. Any exception fails the job; there is no retry.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Sequence

from .language_detector import LanguageDetector
from .schema import (
    ConversionJob,
    ConversionOptions,
    ConversionResult,
    Project,
    ProjectFile,
    SupportedFramework,
)
from .transpiler import TranspilerService

logger = logging.getLogger(__name__)

STAGES = (
    ("analyzing", 10),
    ("parsing", 25),
    ("generating_uir", 50),
    ("emitting", 75),
    ("packaging", 90),
)

DEFAULT_OPTIONS: ConversionOptions = {
    "preserveStructure": True,
    "maintainState": True,
    "addTypeAnnotations": True,
    "convertApiCalls": True,
}

SUPPORTED_FRAMEWORKS: List[SupportedFramework] = [
    {
        "id": "react",
        "name": "React",
        "category": "Frontend Web Development",
        "description": "Component-based UI library for building interactive interfaces",
        "icon": "fab fa-react",
        "frameworks": ["JSX", "Hooks", "Virtual DOM"],
        "maturity": "High",
        "difficulty": "Medium",
        "bidirectionalSupport": True,
    },
    {
        "id": "typescript",
        "name": "TypeScript",
        "category": "Frontend Web Development",
        "description": "Statically typed superset of JavaScript for better development",
        "icon": "fab fa-js-square",
        "frameworks": ["Types", "Interfaces", "IntelliSense"],
        "maturity": "High",
        "difficulty": "Medium",
        "bidirectionalSupport": True,
    },
    {
        "id": "nodejs",
        "name": "Node.js",
        "category": "Backend/API Development",
        "description": "JavaScript runtime for server-side development and APIs",
        "icon": "fab fa-node-js",
        "frameworks": ["Express", "NPM", "Async"],
        "maturity": "High",
        "difficulty": "Medium",
        "bidirectionalSupport": True,
    },
    {
        "id": "python",
        "name": "Python",
        "category": "Backend/API Development",
        "description": "High-level programming language for web APIs and data processing",
        "icon": "fab fa-python",
        "frameworks": ["FastAPI", "Django", "Flask"],
        "maturity": "High",
        "difficulty": "Low",
        "bidirectionalSupport": True,
    },
    {
        "id": "flutter",
        "name": "Flutter",
        "category": "Mobile Development",
        "description": "Cross-platform mobile development with Dart language",
        "icon": "fas fa-mobile-alt",
        "frameworks": ["Dart", "Widgets", "Hot Reload"],
        "maturity": "Medium",
        "difficulty": "Medium",
        "bidirectionalSupport": True,
    },
    {
        "id": "kotlin",
        "name": "Kotlin",
        "category": "Mobile Development",
        "description": "Android UI with Jetpack Compose",
        "icon": "fab fa-android",
        "frameworks": ["Compose", "Coroutines", "Gradle"],
        "maturity": "Medium",
        "difficulty": "Medium",
        "bidirectionalSupport": False,
    },
    {
        "id": "go",
        "name": "Go",
        "category": "Systems Programming",
        "description": "Fast, compiled language for microservices and system programming",
        "icon": "fas fa-code",
        "frameworks": ["Goroutines", "Gin", "Fast"],
        "maturity": "High",
        "difficulty": "Medium",
        "bidirectionalSupport": True,
    },
]


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class JobEvent:
    job_id: str
    stage: str
    progress: int
    status: str


JobListener = Callable[[JobEvent], None]


class MemoryStore:
    """In-memory projects, jobs and framework catalogue."""

    def __init__(self, frameworks: Optional[Sequence[SupportedFramework]] = None) -> None:
        self._projects: Dict[str, Project] = {}
        self._jobs: Dict[str, ConversionJob] = {}
        self._frameworks: Dict[str, SupportedFramework] = {
            f["id"]: f for f in (frameworks if frameworks is not None else SUPPORTED_FRAMEWORKS)
        }

    # -------------------- projects --------------------

    def create_project(
        self,
        name: str,
        files: Sequence[ProjectFile],
        detector: Optional[LanguageDetector] = None,
    ) -> Project:
        """Stores the project with its tech-stack analysis computed once."""
        analysis = (detector or LanguageDetector()).analyze_project(files)
        now = _now()
        project: Project = {
            "id": str(uuid.uuid4()),
            "name": name,
            "originalTechStack": analysis,
            "targetTechStack": None,
            "files": list(files),
            "convertedFiles": None,
            "status": "analyzed",
            "progress": 0,
            "createdAt": now,
            "updatedAt": now,
        }
        self._projects[project["id"]] = project
        logger.info("Created project %s (%s) with %d files", project["id"], name, len(files))
        return project

    def get_project(self, project_id: str) -> Optional[Project]:
        return self._projects.get(project_id)

    def update_project(self, project_id: str, **updates) -> Optional[Project]:
        project = self._projects.get(project_id)
        if project is None:
            return None
        updated: Project = {**project, **updates, "updatedAt": _now()}
        self._projects[project_id] = updated
        return updated

    def delete_project(self, project_id: str) -> bool:
        return self._projects.pop(project_id, None) is not None

    def list_projects(self) -> List[Project]:
        return list(self._projects.values())

    # -------------------- jobs --------------------

    def create_job(
        self,
        project_id: str,
        from_framework: str,
        to_framework: str,
        layer: str = "frontend",
        options: Optional[ConversionOptions] = None,
    ) -> ConversionJob:
        if project_id not in self._projects:
            raise ValueError(f"Project not found: {project_id}")
        now = _now()
        job: ConversionJob = {
            "id": str(uuid.uuid4()),
            "projectId": project_id,
            "fromFramework": from_framework,
            "toFramework": to_framework,
            "layer": layer,
            "options": dict(options) if options is not None else dict(DEFAULT_OPTIONS),
            "status": "pending",
            "stage": "pending",
            "progress": 0,
            "result": None,
            "error": None,
            "createdAt": now,
            "updatedAt": now,
        }
        self._jobs[job["id"]] = job
        return job

    def get_job(self, job_id: str) -> Optional[ConversionJob]:
        return self._jobs.get(job_id)

    def update_job(self, job_id: str, **updates) -> Optional[ConversionJob]:
        job = self._jobs.get(job_id)
        if job is None:
            return None
        updated: ConversionJob = {**job, **updates, "updatedAt": _now()}
        self._jobs[job_id] = updated
        return updated

    def jobs_by_project(self, project_id: str) -> List[ConversionJob]:
        return [job for job in self._jobs.values() if job["projectId"] == project_id]

    # -------------------- frameworks --------------------

    def get_supported_frameworks(self) -> List[SupportedFramework]:
        return list(self._frameworks.values())

    def get_frameworks_by_category(self, category: str) -> List[SupportedFramework]:
        return [f for f in self._frameworks.values() if f["category"] == category]

    def add_framework(self, framework: SupportedFramework) -> SupportedFramework:
        self._frameworks[framework["id"]] = framework
        return framework


class JobCancelled(Exception):
    """Raised between stages when a job was cancelled."""


class ConversionJobRunner:
    """Runs a stored ConversionJob through the staged pipeline."""

    def __init__(
        self,
        store: MemoryStore,
        transpiler: Optional[TranspilerService] = None,
        detector: Optional[LanguageDetector] = None,
    ) -> None:
        self.store = store
        self.transpiler = transpiler or TranspilerService()
        self.detector = detector or LanguageDetector()
        self._listeners: List[JobListener] = []
        self._cancelled: set[str] = set()

    def subscribe(self, listener: JobListener) -> Callable[[], None]:
        """Registers a listener; returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def cancel(self, job_id: str) -> bool:
        job = self.store.get_job(job_id)
        if job is None or job["status"] not in ("pending", "processing"):
            return False
        self._cancelled.add(job_id)
        return True

    def _publish(self, job: ConversionJob) -> None:
        event = JobEvent(job_id=job["id"], stage=job["stage"], progress=job["progress"], status=job["status"])
        for listener in list(self._listeners):
            listener(event)

    def _enter_stage(self, job_id: str, project_id: str, stage: str, progress: int) -> None:
        if job_id in self._cancelled:
            raise JobCancelled(job_id)
        job = self.store.update_job(job_id, status="processing", stage=stage, progress=progress)
        self.store.update_project(project_id, status="converting", progress=progress)
        logger.info("Job %s: %s (%d%%)", job_id, stage, progress)
        self._publish(job)

    def run(self, job_id: str) -> ConversionJob:
        job = self.store.get_job(job_id)
        if job is None:
            raise ValueError(f"Conversion job not found: {job_id}")
        project = self.store.get_project(job["projectId"])
        if project is None:
            raise ValueError(f"Project not found: {job['projectId']}")

        project_id = project["id"]
        files = project["files"]
        options = job["options"]
        warnings: List[str] = []
        errors: List[str] = []

        try:
            self._enter_stage(job_id, project_id, *STAGES[0])
            analysis = self.detector.analyze_project(files)
            self.store.update_project(project_id, originalTechStack=analysis)

            self._enter_stage(job_id, project_id, *STAGES[1])
            parsed = self.transpiler.parse_sources(files, warnings)

            self._enter_stage(job_id, project_id, *STAGES[2])
            nodes = self.transpiler.generate_uir(parsed, job["fromFramework"], warnings)

            self._enter_stage(job_id, project_id, *STAGES[3])
            output = self.transpiler.emit_nodes(nodes, job["toFramework"], options, errors)

            self._enter_stage(job_id, project_id, *STAGES[4])
            output.extend(self.transpiler.project_files(
                job["fromFramework"], job["toFramework"], options, len(parsed), len(nodes),
            ))
            result: ConversionResult = {
                "success": len(output) > 0,
                "files": output,
                "errors": errors,
                "warnings": warnings,
            }
        except JobCancelled:
            self._cancelled.discard(job_id)
            logger.info("Job %s cancelled", job_id)
            job = self.store.update_job(job_id, status="cancelled", stage="cancelled")
            self.store.update_project(project_id, status="analyzed")
            self._publish(job)
            return job
        except Exception as e:
            return self._fail(job_id, project_id, str(e))

        if not result["success"]:
            return self._fail(job_id, project_id, ", ".join(result["errors"]) or "Conversion failed", result)

        job = self.store.update_job(job_id, status="completed", stage="completed", progress=100, result=result)
        self.store.update_project(
            project_id,
            status="completed",
            progress=100,
            convertedFiles=result["files"],
            targetTechStack={"framework": job["toFramework"], "convertedAt": _now()},
        )
        logger.info("Job %s completed with %d files", job_id, len(result["files"]))
        self._publish(job)
        return job

    def _fail(
        self,
        job_id: str,
        project_id: str,
        message: str,
        result: Optional[ConversionResult] = None,
    ) -> ConversionJob:
        logger.error("Job %s failed: %s", job_id, message)
        job = self.store.update_job(job_id, status="failed", stage="failed", error=message, result=result)
        self.store.update_project(project_id, status="failed")
        self._publish(job)
        return job
