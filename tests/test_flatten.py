from datetime import date

from src.teamschedule.flatten import flatten


def test_flattens_in_nesting_order(make_schedule, make_class) -> None:
    zhang = make_schedule(
        days={
            "09-03": [make_class("第二大节", "线性代数")],
            "09-02": [
                make_class("第一大节", "高等数学"),
                make_class("第三大节", "英语"),
            ],
        }
    )
    li = make_schedule(student="李四", days={"09-02": [make_class("第一大节", "物理")]})

    occurrences = flatten([zhang, li])

    assert [(o.student_name, o.course_name) for o in occurrences] == [
        ("张三", "线性代数"),
        ("张三", "高等数学"),
        ("张三", "英语"),
        ("李四", "物理"),
    ]
    first = occurrences[0]
    assert first.date == date(2024, 9, 3)
    assert first.day_of_week == "星期一"
    assert first.teacher == "王老师"
    assert first.location == "A101"
    assert first.type == "理论"


def test_schedule_without_academic_year_yields_nothing(make_schedule) -> None:
    assert flatten([make_schedule(academic_year=None)]) == []
    assert flatten([make_schedule(academic_year="")]) == []


def test_unresolvable_days_are_skipped(make_schedule, make_class) -> None:
    schedule = make_schedule(
        days={
            "": [make_class("第一大节", "无日期")],
            "02-30": [make_class("第一大节", "不存在")],
            "bad": [make_class("第一大节", "坏日期")],
            "09-04": [make_class("第一大节", "保留")],
        }
    )

    assert [o.course_name for o in flatten([schedule])] == ["保留"]


def test_unparseable_year_yields_nothing(make_schedule) -> None:
    assert flatten([make_schedule(academic_year="秋季学期")]) == []


def test_empty_input() -> None:
    assert flatten([]) == []
