from datetime import date

from src.teamschedule.grouping import CANONICAL_PERIODS
from src.teamschedule.views import TeamView, filter_occurrences, week_days, weekday_label


def _view(make_schedule, make_class) -> TeamView:
    zhang = make_schedule(
        days={
            "09-02": [
                make_class("第一大节", "高等数学"),
                make_class("第一大节", "大学物理", teacher="李老师", location="B202"),
            ],
            "09-04": [make_class("晚间", "选修课", location=None)],
        }
    )
    li = make_schedule(
        student="李四",
        uploaded_by="bob",
        days={
            "09-02": [make_class("第一大节", "高等数学")],
            "09-10": [make_class("第二大节", "英语")],
        },
    )
    return TeamView.from_schedules([zhang, li])


def test_week_days_start_on_monday() -> None:
    days = week_days(date(2024, 9, 5))

    assert days[0] == date(2024, 9, 2)
    assert days[-1] == date(2024, 9, 8)
    assert len(days) == 7
    assert week_days(date(2024, 9, 8))[0] == date(2024, 9, 2)


def test_weekday_labels() -> None:
    assert weekday_label(date(2024, 9, 2)) == "一"
    assert weekday_label(date(2024, 9, 8)) == "日"


def test_view_bundles_one_snapshot(make_schedule, make_class) -> None:
    view = _view(make_schedule, make_class)

    assert view.has_schedules
    assert len(view.occurrences) == 5
    assert view.conflicts == {"张三-2024-09-02-第一大节"}
    assert view.periods == ("第一大节", "第二大节", "晚间")


def test_empty_view_has_canonical_rows() -> None:
    view = TeamView.from_schedules([])

    assert not view.has_schedules
    assert view.periods == CANONICAL_PERIODS
    assert all(not cell.groups for cell in view.day_cells(date(2024, 9, 2)))


def test_day_cells_group_shared_sessions(make_schedule, make_class) -> None:
    view = _view(make_schedule, make_class)

    cells = view.day_cells(date(2024, 9, 2))

    assert [c.period for c in cells] == list(view.periods)
    first = cells[0].groups
    assert [(g.course_name, g.students) for g in first] == [
        ("高等数学", ("张三", "李四")),
        ("大学物理", ("张三",)),
    ]
    assert first[0].conflicted_students == {"张三"}
    assert not cells[1].groups


def test_week_grid_covers_monday_to_sunday(make_schedule, make_class) -> None:
    view = _view(make_schedule, make_class)

    grid = view.week_grid(date(2024, 9, 4))

    assert [c.date for c in grid] == week_days(date(2024, 9, 2))
    assert grid[0].weekday == "一"
    wednesday = grid[2]
    assert [g.course_name for c in wednesday.cells for g in c.groups] == ["选修课"]
    # 09-10 belongs to the following week
    assert all(g.course_name != "英语" for c in grid for cell in c.cells for g in cell.groups)


def test_search_filters_cards_but_not_conflicts(make_schedule, make_class) -> None:
    view = _view(make_schedule, make_class)

    cells = view.day_cells(date(2024, 9, 2), query="李老师")

    groups = [g for c in cells for g in c.groups]
    assert [g.course_name for g in groups] == ["大学物理"]
    assert groups[0].conflicted_students == {"张三"}


def test_filter_matches_each_field(make_schedule, make_class) -> None:
    occurrences = _view(make_schedule, make_class).occurrences

    assert len(filter_occurrences(occurrences, "  ")) == 5
    assert {o.course_name for o in filter_occurrences(occurrences, "b202")} == {"大学物理"}
    assert {o.student_name for o in filter_occurrences(occurrences, "李四")} == {"李四"}
    assert {o.course_name for o in filter_occurrences(occurrences, "选修")} == {"选修课"}
