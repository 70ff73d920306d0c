"""Tests for the talk-threads CLI."""

import json
from collections.abc import Iterator
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from talk_threads.cli import app
from talk_threads.errors import ApiError
from tests.unit.fakes import PAGE, FakeTopicsSource, item, make_topic_tree

runner = CliRunner()


@pytest.fixture
def fake_source() -> Iterator[FakeTopicsSource]:
    """Route the CLI's API client to an in-memory fake."""
    fake = FakeTopicsSource()
    fake.add_page(PAGE, make_topic_tree())
    with patch("talk_threads.cli._make_api", return_value=fake):
        yield fake


def test_topics_lists_subjects_and_ids(fake_source: FakeTopicsSource) -> None:
    result = runner.invoke(app, ["topics", PAGE])
    assert result.exit_code == 0, result.output
    assert "2 topics" in result.output
    assert "First topic" in result.output
    assert "id=h2  replies=1" in result.output


def test_topics_json_outputs_valid_json(fake_source: FakeTopicsSource) -> None:
    result = runner.invoke(app, ["topics", PAGE, "--json"])
    assert result.exit_code == 0, result.output
    parsed = json.loads(result.output)
    assert parsed["count"] == 2
    assert parsed["topics"][0] == {
        "id": "h1",
        "subject": "First topic",
        "replies": 2,
        "placeholder": False,
    }


def test_show_prints_collapsed_thread(fake_source: FakeTopicsSource) -> None:
    result = runner.invoke(app, ["show", PAGE, "h1"])
    assert result.exit_code == 0, result.output
    assert "== First topic ==" in result.output
    assert "- [+2] Comment A  (id=A)" in result.output
    assert "Comment B" not in result.output


def test_show_expands_requested_items(fake_source: FakeTopicsSource) -> None:
    result = runner.invoke(app, ["show", PAGE, "h1", "-e", "A", "-e", "C", "--json"])
    assert result.exit_code == 0, result.output
    parsed = json.loads(result.output)
    assert [r["id"] for r in parsed["rows"]] == ["A", "B", "C", "D", "E"]
    assert parsed["rows"][0]["expanded"] is True
    assert parsed["rows"][1]["expanded"] is False


def test_show_expand_all(fake_source: FakeTopicsSource) -> None:
    result = runner.invoke(app, ["show", PAGE, "h1", "--expand-all", "--json"])
    assert result.exit_code == 0, result.output
    assert json.loads(result.output)["count"] == 5


def test_show_lists_mentions(fake_source: FakeTopicsSource) -> None:
    fake_source.add_page(
        PAGE, [item("h1", item("c1", html='<a title="User:Alice">Alice</a>'))]
    )
    result = runner.invoke(app, ["show", PAGE, "h1", "--mentions"])
    assert result.exit_code == 0, result.output
    assert "Mentioned users: Alice" in result.output


def test_show_unknown_topic_exits_with_error(fake_source: FakeTopicsSource) -> None:
    result = runner.invoke(app, ["show", PAGE, "missing"])
    assert result.exit_code == 1


def test_topics_api_failure_exits_with_error(fake_source: FakeTopicsSource) -> None:
    fake_source.fail_page(PAGE, ApiError("down"))
    result = runner.invoke(app, ["topics", PAGE])
    assert result.exit_code == 1


def test_show_expand_does_not_collapse_after_expand_all(fake_source: FakeTopicsSource) -> None:
    result = runner.invoke(app, ["show", PAGE, "h1", "--expand-all", "-e", "A", "--json"])
    assert result.exit_code == 0, result.output
    parsed = json.loads(result.output)
    assert [r["id"] for r in parsed["rows"]] == ["A", "B", "C", "D", "E"]


def test_show_expand_order_does_not_matter(fake_source: FakeTopicsSource) -> None:
    result = runner.invoke(app, ["show", PAGE, "h1", "-e", "C", "-e", "A"])
    assert result.exit_code == 0, result.output
    assert "nothing to expand" not in result.output
    assert "Comment D" in result.output


def test_show_warns_about_unknown_item(fake_source: FakeTopicsSource) -> None:
    result = runner.invoke(app, ["show", PAGE, "h1", "-e", "zzz"])
    assert result.exit_code == 0, result.output
    assert "zzz is not in this topic" in result.output
