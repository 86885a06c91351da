"""Tests for core/language_detector.py"""

from __future__ import annotations

import json

from stackshift.core.language_detector import LanguageDetector, count_lines


def _file(path: str, content: str) -> dict:
    return {"path": path, "content": content}


class TestDetectLanguage:
    def setup_method(self):
        self.detector = LanguageDetector()

    def test_extension_wins(self):
        assert self.detector.detect_language("src/App.jsx", "") == "javascript"
        assert self.detector.detect_language("main.tsx", "") == "typescript"
        assert self.detector.detect_language("styles/site.scss", "") == "css"
        assert self.detector.detect_language("README.markdown", "") == "markdown"

    def test_content_sniff_python(self):
        assert self.detector.detect_language("script", "import os\n") == "python"

    def test_content_sniff_javascript(self):
        assert self.detector.detect_language("script", "const x = 1;") == "javascript"

    def test_unknown(self):
        assert self.detector.detect_language("blob.bin", "zzzz") == "unknown"


class TestDetectFrameworks:
    def setup_method(self):
        self.detector = LanguageDetector()

    def test_express_server(self):
        files = [_file("server.js", "require('express'); app.listen(3000)")]
        result = self.detector.detect_frameworks(files)
        assert "express" in result
        assert "nodejs" in result

    def test_table_order(self):
        files = [_file("server.js", "require('express'); app.listen(3000)")]
        result = self.detector.detect_frameworks(files)
        assert result.index("nodejs") < result.index("express")

    def test_content_without_matching_path_is_ignored(self):
        # FastAPI content, but only .py paths count
        files = [_file("notes.txt", "from fastapi import FastAPI\napp = FastAPI()")]
        assert "fastapi" not in self.detector.detect_frameworks(files)

    def test_path_and_content_must_hold_on_same_file(self):
        files = [
            _file("main.py", "print('hi')"),
            _file("notes.txt", "from fastapi import FastAPI"),
        ]
        assert "fastapi" not in self.detector.detect_frameworks(files)

    def test_react_component(self):
        files = [_file("App.jsx", "import React from 'react';\nexport const App = () => <Main />;")]
        assert "react" in self.detector.detect_frameworks(files)

    def test_each_framework_once(self):
        files = [_file("a.py", "def f(): pass"), _file("b.py", "def g(): pass")]
        assert self.detector.detect_frameworks(files).count("python") == 1

    def test_content_patterns_are_case_sensitive(self):
        assert "flutter" not in self.detector.detect_frameworks([_file("lib/a.dart", "class A extends statelesswidget")])
        assert "flutter" in self.detector.detect_frameworks([_file("lib/a.dart", "class A extends StatelessWidget")])


class TestAnalyzeProject:
    def setup_method(self):
        self.detector = LanguageDetector()

    def test_single_language_is_100_percent(self):
        files = [_file("a.js", "a\nb"), _file("b.js", "c"), _file("c.jsx", "d\ne\nf")]
        result = self.detector.analyze_project(files)
        assert len(result["languages"]) == 1
        assert result["languages"][0]["language"] == "JavaScript"
        assert result["languages"][0]["percentage"] == 100.0
        assert result["languages"][0]["files"] == 3
        assert result["totalFiles"] == 3
        assert result["totalLines"] == 6

    def test_unknown_files_do_not_change_percentages(self):
        files = [_file("a.js", "x\ny\nz"), _file("b.py", "def f():\n    pass")]
        before = self.detector.analyze_project(files)
        after = self.detector.analyze_project(files + [_file("blob.xyz", "qqqq\nwwww")])
        assert before["languages"] == after["languages"]
        assert before["totalFiles"] == after["totalFiles"]

    def test_sorted_by_percentage_desc(self):
        files = [_file("a.py", "1"), _file("b.js", "1\n2\n3")]
        result = self.detector.analyze_project(files)
        percentages = [s["percentage"] for s in result["languages"]]
        assert percentages == sorted(percentages, reverse=True)
        assert result["languages"][0]["language"] == "JavaScript"
        assert result["languages"][0]["percentage"] == 75.0

    def test_percentage_rounded_to_one_decimal(self):
        files = [_file("a.py", "1"), _file("b.js", "1\n2")]
        result = self.detector.analyze_project(files)
        by_name = {s["language"]: s["percentage"] for s in result["languages"]}
        assert by_name["JavaScript"] == 66.7
        assert by_name["Python"] == 33.3

    def test_deterministic(self):
        files = [
            _file("server.js", "const express = require('express');\napp.listen(3000)"),
            _file("ui/App.tsx", "import React from 'react';\ninterface Props {}"),
            _file("api/main.py", "from fastapi import FastAPI\napp = FastAPI()"),
        ]
        first = json.dumps(self.detector.analyze_project(files), sort_keys=True)
        second = json.dumps(self.detector.analyze_project(files), sort_keys=True)
        assert first == second

    def test_framework_display_names(self):
        files = [_file("server.js", "require('express'); app.listen(3000)")]
        result = self.detector.analyze_project(files)
        assert "Express.js" in result["frameworks"]
        assert "Node.js" in result["frameworks"]

    def test_purpose_backend_for_server_paths(self):
        files = [_file("server/index.js", "app.listen(3000)")]
        result = self.detector.analyze_project(files)
        assert result["languages"][0]["purpose"] == "Backend"

    def test_empty_project(self):
        result = self.detector.analyze_project([])
        assert result == {"languages": [], "frameworks": [], "totalFiles": 0, "totalLines": 0}


class TestCountLines:
    def test_empty_is_one_line(self):
        assert count_lines("") == 1

    def test_trailing_newline_counts(self):
        assert count_lines("a\nb\n") == 3
