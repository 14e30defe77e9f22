import pytest

from sched_data import schedule_from_dict
from sched_summary import decode_events, sched_to_table, summary_rows


@pytest.mark.parametrize("events, sleeps, wakeups", [
    ([3, 2, 4, 1], [3, 7], [2, 1]),
    ([5], [5], []),
    ([2, 1, 2, 1, 2, 1], [2, 4, 4], [1, 1, 1]),
    ([], [], []),
])
def test_decode_events(events, sleeps, wakeups):
    assert decode_events(events) == (sleeps, wakeups)


def test_rows_follow_plan_order(annotated_schedule):
    rows = summary_rows(annotated_schedule)
    assert len(rows) == len(annotated_schedule.plan.tasks)
    assert [row.name for row in rows] == ["A", "B"]
    assert [row.number for row in rows] == [1, 2]


def test_simulated_fields(annotated_schedule):
    a, b = summary_rows(annotated_schedule)

    assert (a.arrival, a.computation, a.start) == (0, 4, 0)
    assert a.completion is None
    assert a.turnaround is None
    assert a.waiting == 2

    assert (b.start, b.completion, b.waiting, b.turnaround) == (2, 4, 2, 4)
    assert b.sleeps is None and b.wakeups is None


def test_blank_rows_keep_static_fields(annotated_schedule):
    for row in summary_rows(annotated_schedule, blank=True):
        assert row.arrival == 0
        assert row.computation is not None
        assert row.start is None
        assert row.completion is None
        assert row.waiting is None
        assert row.turnaround is None


def test_task_that_never_ran(single_task_schedule):
    single_task_schedule.timeline = []
    row = summary_rows(single_task_schedule)[0]
    assert row.start is None
    assert row.waiting == 0


def test_cfs_rows_use_vrt_and_decode_events(simulator_output):
    t0, t1 = summary_rows(schedule_from_dict(simulator_output))
    assert t0.computation == 3
    assert (t0.start, t0.completion, t0.waiting, t0.turnaround) == (0, 4, 1, 4)
    assert (t0.sleeps, t0.wakeups) == ([3, 7], [2, 1])
    assert t1.computation == 2
    assert t1.start == 1


def test_plan_only_rows(simulator_output):
    plan = schedule_from_dict(simulator_output).plan
    t0, t1 = summary_rows(plan)
    assert t0.computation == 1
    assert t1.computation == 2
    assert (t0.sleeps, t0.wakeups) == ([3, 7], [2, 1])
    for row in (t0, t1):
        assert row.start is None and row.completion is None
        assert row.waiting is None and row.turnaround is None


def test_plain_table(annotated_schedule):
    table = sched_to_table(annotated_schedule)
    lines = table.split("\n")

    assert lines[0] == "\\begin{table}[h]"
    assert "\\begin{tabular}{|c|l|c|c|c|c|c|c|}" in lines
    assert "\\# & Task & Arrival & Computation & Start & Completion & Waiting & Turnaround \\\\" in lines
    assert "1 & A & 0 & 4 & 0 &  & 2 &  \\\\" in lines
    assert "2 & B & 0 & 2 & 2 & 4 & 2 & 4 \\\\" in lines
    assert "Sleeps at" not in table
    assert "\\footnotesize" not in table
    assert table.endswith("\\caption{Task summary}\n\\label{tab:task-summary}\n\\end{table}\n")


def test_blank_table_has_empty_dynamic_cells(annotated_schedule):
    table = sched_to_table(annotated_schedule, blank=True, averages=True)
    assert "1 & A & 0 & 4 &  &  &  &  \\\\" in table
    assert "2 & B & 0 & 2 &  &  &  &  \\\\" in table
    assert "Avg." not in table


def test_sleep_wakeup_table(simulator_output):
    table = sched_to_table(schedule_from_dict(simulator_output))
    assert "& Final VRT &" in table
    assert "Sleeps at & Wakeups after \\\\" in table
    assert "1 & T0 & 0 & 3 & 0 & 4 & 1 & 4 & 3, 7 & 2, 1 \\\\" in table
    assert "2 & T1 & 1 & 2 & 1 &  & 0 &  &  &  \\\\" in table
    assert "\\footnotesize{" in table
    assert table.index("\\end{tabular}") < table.index("\\footnotesize{") < table.index("\\caption")


def test_averages_row(annotated_schedule):
    table = sched_to_table(annotated_schedule, averages=True)
    assert "\\multicolumn{2}{|l|}{Avg.} &  &  &  &  & 2 & 4 \\\\" in table
    assert "Avg." not in sched_to_table(annotated_schedule)


def test_table_is_deterministic(simulator_output):
    schedule = schedule_from_dict(simulator_output)
    assert sched_to_table(schedule) == sched_to_table(schedule)
