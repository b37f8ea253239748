"""
Tests for the documentation metrics.
"""

from oss_health_analyzer.metrics.base import BooleanValue, NumberValue
from oss_health_analyzer.metrics.changelog import METRIC as CHANGELOG
from oss_health_analyzer.metrics.changelog import has_changelog
from oss_health_analyzer.metrics.documentation_directory import METRIC as DOCS_DIR
from oss_health_analyzer.metrics.readme_quality import calculate_readme_quality
from oss_health_analyzer.metrics.wiki_presence import METRIC as WIKI

FULL_README = """# Project

[![CI](https://img.shields.io/badge/ci-passing-green.svg)](https://example.com)

## Table of Contents

## Installation

pip install project

## Usage

import project
""" + "Lorem ipsum dolor sit amet. " * 20


class TestReadmeQuality:
    def test_missing_readme_scores_zero(self):
        assert calculate_readme_quality(None) == NumberValue(0)
        assert calculate_readme_quality("") == NumberValue(0)

    def test_complete_readme_scores_five(self):
        assert calculate_readme_quality(FULL_README) == NumberValue(5)

    def test_short_readme_with_usage_only(self):
        assert calculate_readme_quality("# Tool\n\n## Example\nrun it") == NumberValue(1)

    def test_headings_are_case_insensitive(self):
        readme = "## GETTING STARTED\n## Quick Start\n"
        assert calculate_readme_quality(readme) == NumberValue(2)


def test_documentation_directory(make_snapshot, context):
    with_docs = make_snapshot(root_contents=[{"name": "Docs", "type": "dir"}])
    file_named_docs = make_snapshot(root_contents=[{"name": "docs", "type": "file"}])
    assert DOCS_DIR.compute(with_docs, context) == BooleanValue(True)
    assert DOCS_DIR.compute(file_named_docs, context) == BooleanValue(False)


def test_wiki_presence(make_snapshot, context):
    assert WIKI.compute(make_snapshot(repository={"has_wiki": True}), context).value
    assert not WIKI.compute(make_snapshot(repository={}), context).value


def test_has_changelog_any_extension():
    assert has_changelog(["README.md", "CHANGELOG.md"])
    assert has_changelog(["changes.rst"])
    assert has_changelog(["HISTORY"])
    assert has_changelog(["NEWS.txt"])
    assert not has_changelog(["README.md", "LICENSE"])


def test_changelog_ignores_directories(make_snapshot, context):
    snapshot = make_snapshot(root_contents=[{"name": "changes", "type": "dir"}])
    assert CHANGELOG.compute(snapshot, context) == BooleanValue(False)
