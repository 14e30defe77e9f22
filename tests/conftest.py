import sys
from pathlib import Path

# Ensure the flat modules import for tests
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest

from sched_data import AboveSlot, Graphics, Plan, SchedMeta, Schedule, Task, TaskSlot


@pytest.fixture
def single_task_schedule() -> Schedule:
    plan = Plan(1, 10, [Task(0, "A", arrival=0)], graphics=Graphics(1, 1, 0.5))
    return Schedule(plan, [TaskSlot(0, 5, 0, "RAN")], SchedMeta("Round robin", ""))


@pytest.fixture
def annotated_schedule() -> Schedule:
    """Two tasks, quantum 2, horizon 12. The last slot starts past the horizon."""

    tasks = [
        Task(0, "A", arrival=0, description=("C=4", "blocks"), computation=4),
        Task(1, "B", arrival=0, exited=4, description=("C=2", ""), computation=2),
    ]
    timeline = [
        TaskSlot(0, 2, 0, "RAN", in_slot="1", below_slot="a0", above_slot=AboveSlot("start", "red")),
        TaskSlot(0, 2, 1, "RUNNABLE", above_slot=AboveSlot("waits", "blue")),
        TaskSlot(2, 4, 1, "RAN", in_slot="1", below_slot="b0"),
        TaskSlot(2, 4, 0, "BLOCKED", above_slot=AboveSlot("io", "green")),
        TaskSlot(4, 6, 0, "RUNNABLE", above_slot=AboveSlot("", "red")),
        TaskSlot(4, 6, 1, "EXITED"),
        TaskSlot(12, 14, 0, "RAN", above_slot=AboveSlot("late", "red")),
    ]
    plan = Plan(2, 12, tasks, graphics=Graphics(1, 1, 0.5))
    return Schedule(plan, timeline, SchedMeta("Two tasks", "\\begin{tabular}{c}x\\end{tabular}"))


@pytest.fixture
def simulator_output() -> dict:
    return {
        "schedule": {
            "timer": 1,
            "runfor": 6,
            "graphics": {"hspace": 1, "vspace": 1, "barheight": 0.5},
            "class": {"type": "cfs"},
            "tasks": [
                {"index": 0, "name": "T0", "start": 0, "exited": 4, "vrt": 3,
                 "legendBelowTask1": "nice 0", "legendBelowTask2": "w=1024", "events": [3, 2, 4, 1]},
                {"index": 1, "name": "T1", "start": 1, "vrt": 2},
            ],
        },
        "timeline": [
            {"tstart": 0, "tend": 1, "index": 0, "event": "RAN", "inSlot": "1", "belowSlot": "0.0",
             "aboveSlot": {"message": "wakes", "color": "blue"}},
            {"tstart": 1, "tend": 2, "index": 1, "event": "RAN", "inSlot": "1", "belowSlot": "0.0"},
            {"tstart": 1, "tend": 2, "index": 0, "event": "RUNNABLE"},
        ],
        "scheddata": {"legendAbove": "CFS run", "blankData": "% data"},
    }
