"""Tests for the project value model and the built-in templates."""

from datetime import date

import pytest

from timeline.calendar_math import FormatError, Granularity
from timeline.models import (
    DEFAULT_TASK_COLOR,
    ProjectWindow,
    add_item,
    create_project,
    create_task,
    find_item,
    new_task_range,
    remove_item,
    to_visual_item,
    update_item,
    with_granularity,
    with_template,
)
from timeline.templates import (
    BUILTIN_TEMPLATES,
    get_default_template,
    get_template_by_id,
    template_to_style_vars,
)


@pytest.fixture
def project():
    window = ProjectWindow(date(2026, 3, 1), date(2026, 4, 30))
    return create_project("Launch", window, "clean-default")


class TestProjectWindow:
    def test_from_strings(self) -> None:
        w = ProjectWindow.from_strings("2026-03-01", "2026-04-30", "month")
        assert w.start_date == date(2026, 3, 1)
        assert w.granularity is Granularity.MONTH

    def test_from_strings_rejects_bad_dates(self) -> None:
        with pytest.raises(FormatError):
            ProjectWindow.from_strings("03/01/2026", "2026-04-30", "week")

    def test_unknown_granularity(self) -> None:
        with pytest.raises(ValueError):
            ProjectWindow.from_strings("2026-03-01", "2026-04-30", "year")

    @pytest.mark.parametrize("end", [date(2026, 3, 1), date(2026, 2, 1)])
    def test_validate_requires_start_before_end(self, end: date) -> None:
        with pytest.raises(ValueError):
            ProjectWindow(date(2026, 3, 1), end).validate()


class TestProjectEdits:
    def test_create_task_defaults(self) -> None:
        a = create_task("Design", "2026-03-02", "2026-03-06")
        b = create_task("Design", "2026-03-02", "2026-03-06")
        assert a.id != b.id
        assert a.color == DEFAULT_TASK_COLOR
        assert a.category == ""

    def test_add_update_remove(self, project) -> None:
        task = create_task("Design", "2026-03-02", "2026-03-06", category="UX")
        p1 = add_item(project, task)
        assert project.items == ()
        assert find_item(p1, task.id) == task

        p2 = update_item(p1, task.id, content="Build", end="2026-03-09", id="other")
        moved = find_item(p2, task.id)
        assert (moved.content, moved.end, moved.category) == ("Build", "2026-03-09", "UX")
        assert find_item(p1, task.id).content == "Design"

        p3 = remove_item(p2, task.id)
        assert p3.items == ()

    def test_unknown_ids_are_noops(self, project) -> None:
        p1 = add_item(project, create_task("Design", "2026-03-02", "2026-03-06"))
        assert update_item(p1, "missing", content="x") == p1
        assert remove_item(p1, "missing") == p1

    def test_granularity_and_template(self, project) -> None:
        assert with_granularity(project, "day").window.granularity is Granularity.DAY
        assert with_template(project, "minimal-dark").template_id == "minimal-dark"

    def test_new_task_range(self, project) -> None:
        assert new_task_range(project.window) == ("2026-03-01", "2026-03-08")

    def test_visual_item_projection(self) -> None:
        task = create_task("Short", "2026-03-02", "2026-03-06", color="#10B981")
        item = to_visual_item(task, 3)
        assert (item.id, item.lane, item.color) == (task.id, 3, "#10B981")
        assert item.title == item.content == "Short"
        assert item.class_name == "timeline-item"
        assert not item.is_long
        assert to_visual_item(create_task("x" * 20, "2026-03-02", "2026-03-06"), 0).is_long is False


class TestTemplates:
    def test_builtins(self) -> None:
        assert [t.id for t in BUILTIN_TEMPLATES] == ["clean-default", "corporate-blue", "minimal-dark"]
        assert get_default_template().id == "clean-default"
        assert get_template_by_id("nope") is None

    def test_style_vars(self) -> None:
        vars_ = template_to_style_vars(get_template_by_id("minimal-dark"))
        assert vars_["--tl-bg"] == "#1A1A2E"
        assert vars_["--tl-bar-radius"] == "6px"
        assert vars_["--tl-font-size"] == "13px"
        assert set(vars_) == {
            "--tl-bg", "--tl-text", "--tl-axis", "--tl-grid",
            "--tl-bar-radius", "--tl-font-family", "--tl-font-size",
        }

    def test_every_template_has_a_palette(self) -> None:
        for t in BUILTIN_TEMPLATES:
            assert len(t.palette) >= 1
            assert all(c.startswith("#") and len(c) == 7 for c in t.palette)
