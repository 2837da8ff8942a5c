from __future__ import annotations
import uuid
from dataclasses import dataclass, field, replace
from datetime import date, timedelta
from typing import Tuple

from timeline.calendar_math import Granularity, as_date, format_date

DEFAULT_TASK_COLOR = "#6B7280"
DEFAULT_TASK_CONTENT = "New Task"
LONG_CONTENT_THRESHOLD = 20
SIDEBAR_TASK_DAYS = 7


@dataclass(frozen=True)
class Task:
    id: str
    content: str
    start: str   # YYYY-MM-DD
    end: str     # YYYY-MM-DD
    category: str = ""
    color: str = DEFAULT_TASK_COLOR


@dataclass(frozen=True)
class ProjectWindow:
    start_date: date
    end_date: date
    granularity: Granularity = Granularity.WEEK

    @classmethod
    def from_strings(cls, start: str, end: str, granularity: Granularity | str) -> "ProjectWindow":
        return cls(as_date(start), as_date(end), Granularity(granularity))

    def validate(self) -> None:
        if self.start_date >= self.end_date:
            raise ValueError(
                f"project start {format_date(self.start_date)} must be before end {format_date(self.end_date)}"
            )


@dataclass(frozen=True)
class VisualItem:
    """Renderer-side projection of a Task; never edited by hand."""
    id: str
    content: str
    title: str
    start: date
    end: date
    lane: int
    color: str
    class_name: str
    is_long: bool = False


@dataclass(frozen=True)
class Lane:
    id: int
    content: str = ""


@dataclass(frozen=True)
class Project:
    name: str
    window: ProjectWindow
    template_id: str
    items: Tuple[Task, ...] = field(default_factory=tuple)


# ---------------------------------------------------------------------
# Constructors
# ---------------------------------------------------------------------
def create_project(name: str, window: ProjectWindow, template_id: str) -> Project:
    return Project(name=name, window=window, template_id=template_id)


def create_task(content: str, start: str, end: str,
                category: str = "", color: str | None = None) -> Task:
    return Task(
        id=str(uuid.uuid4()),
        content=content,
        start=start,
        end=end,
        category=category or "",
        color=color or DEFAULT_TASK_COLOR,
    )


def new_task_range(window: ProjectWindow) -> tuple[str, str]:
    """Range used by the sidebar "Add New Task" action."""
    start = window.start_date
    return format_date(start), format_date(start + timedelta(days=SIDEBAR_TASK_DAYS))


# ---------------------------------------------------------------------
# Value updates (every edit returns a new Project)
# ---------------------------------------------------------------------
def add_item(project: Project, task: Task) -> Project:
    return replace(project, items=project.items + (task,))


def update_item(project: Project, item_id: str, **changes) -> Project:
    changes.pop("id", None)
    items = tuple(replace(t, **changes) if t.id == item_id else t for t in project.items)
    return replace(project, items=items)


def remove_item(project: Project, item_id: str) -> Project:
    return replace(project, items=tuple(t for t in project.items if t.id != item_id))


def with_granularity(project: Project, granularity: Granularity | str) -> Project:
    return replace(project, window=replace(project.window, granularity=Granularity(granularity)))


def with_template(project: Project, template_id: str) -> Project:
    return replace(project, template_id=template_id)


def find_item(project: Project, item_id: str | None) -> Task | None:
    for t in project.items:
        if t.id == item_id:
            return t
    return None


# ---------------------------------------------------------------------
# Projection
# ---------------------------------------------------------------------
def to_visual_item(task: Task, lane: int) -> VisualItem:
    is_long = len(task.content) > LONG_CONTENT_THRESHOLD
    return VisualItem(
        id=task.id,
        content=task.content,
        title=task.content,
        start=as_date(task.start),
        end=as_date(task.end),
        lane=lane,
        color=task.color,
        class_name="timeline-item timeline-item-long" if is_long else "timeline-item",
        is_long=is_long,
    )
