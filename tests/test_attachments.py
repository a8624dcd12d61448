from __future__ import annotations

import os
from pathlib import Path

import pytest

from report_mailer.attachments import build_attachments
from report_mailer.errors import NoAttachmentsError


@pytest.mark.parametrize("paths", [None, []])
def test_missing_attachments_raise(paths):
    with pytest.raises(NoAttachmentsError):
        build_attachments(paths)


def test_builds_absolute_path_and_name(tmp_path: Path):
    report = tmp_path / "report.csv"
    attachments = build_attachments([str(report)])
    assert len(attachments) == 1
    attachment = attachments[0]
    assert attachment.path == report
    assert attachment.name == "report.csv"
    assert attachment.disposition == "attachment"
    assert attachment.description == "The generated report"


def test_relative_paths_become_absolute(tmp_path: Path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    attachment = build_attachments([Path("out") / "summary.html"])[0]
    assert attachment.path.is_absolute()
    assert attachment.path == Path(os.path.abspath(tmp_path / "out" / "summary.html"))
    assert attachment.name == "summary.html"


def test_missing_file_is_not_checked(tmp_path: Path):
    attachments = build_attachments([tmp_path / "does-not-exist.pdf"])
    assert attachments[0].name == "does-not-exist.pdf"


def test_empty_generator_raises():
    with pytest.raises(NoAttachmentsError):
        build_attachments(p for p in [])


def test_generator_of_paths_is_accepted(tmp_path: Path):
    attachments = build_attachments(tmp_path / name for name in ("a.csv", "b.csv"))
    assert [a.name for a in attachments] == ["a.csv", "b.csv"]


@pytest.mark.parametrize("single", ["report.csv", Path("report.csv")])
def test_single_path_instead_of_sequence_is_rejected(single):
    with pytest.raises(TypeError):
        build_attachments(single)
