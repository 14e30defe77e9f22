import logging
from typing import List, Optional, Tuple, Union

import numpy

from sched_data import RAN, RUNNABLE, Plan, Schedule, Task, validate_timeline
from tikz_graphics import fmt

logger = logging.getLogger(__name__)

SLEEP_NOTE = ("\\footnotesize{\\emph{Sleeps at}: the task blocks once it has run for the given time. "
              "\\emph{Wakeups after}: the task becomes runnable again the given time after the preceding sleep.}")


class TaskSummaryData:
    def __init__(self, number: int, name: str, arrival: float, computation: Optional[float],
                 start: Optional[float] = None, completion: Optional[float] = None,
                 waiting: Optional[float] = None, turnaround: Optional[float] = None,
                 sleeps: Optional[List[float]] = None, wakeups: Optional[List[float]] = None):
        self.number = number
        self.name = name
        self.arrival = arrival
        self.computation = computation
        self.start = start
        self.completion = completion
        self.waiting = waiting
        self.turnaround = turnaround
        self.sleeps = sleeps
        self.wakeups = wakeups

    def __repr__(self):
        return "TaskSummaryData({}, {!r})".format(self.number, self.name)


"""
events alternates sleep and wakeup durations, starting with a sleep.
Sleeps become "has run for t" times: the value plus a cumulator that is seeded once, by the first event.
Wakeups stay relative to the sleep before them.
[3, 2, 4, 1] -> sleeps [3, 7], wakeups [2, 1]
"""


def decode_events(events: List[float]) -> Tuple[List[float], List[float]]:
    sleeps = []
    wakeups = []
    cumulator = 0
    for i, value in enumerate(events):
        if i % 2 == 0:
            sleeps.append(value + cumulator)
            if i == 0:
                cumulator = value
        else:
            wakeups.append(value)
    return sleeps, wakeups


def _planned_demand(task: Task) -> Optional[float]:
    if task.events:
        return task.events[-1]
    return task.computation if task.computation is not None else task.vrt


def _simulated_demand(task: Task, plan: Plan) -> Optional[float]:
    value = task.vrt if plan.is_cfs() else task.computation
    if value is None and task.events:
        return task.events[-1]
    return value


def _static_row(number: int, task: Task, computation: Optional[float]) -> TaskSummaryData:
    row = TaskSummaryData(number, task.name, task.arrival, computation)
    if task.events is not None:
        row.sleeps, row.wakeups = decode_events(task.events)
    return row


"""
One row per task, in plan order, numbered from 1.
For a bare Plan only static fields are filled in. For a Schedule:
    start = tstart of the first RAN slot inside the horizon
    completion = the task's exited time
    waiting = RUNNABLE slots inside the horizon times timer
    turnaround = completion - arrival
blank drops every dynamic field
"""


def summary_rows(source: Union[Schedule, Plan], blank: bool = False) -> List[TaskSummaryData]:
    if not isinstance(source, Schedule):
        rows = [_static_row(i + 1, task, _planned_demand(task)) for i, task in enumerate(source.tasks)]
        logger.debug("summary from plan: %d rows", len(rows))
        return rows

    validate_timeline(source)
    plan = source.plan
    rows = []
    for i, task in enumerate(plan.tasks):
        row = _static_row(i + 1, task, _simulated_demand(task, plan))
        if not blank:
            slots = [slot for slot in source.slots_for(task.index) if slot.tstart < plan.runfor]
            ran = [slot for slot in slots if slot.event == RAN]
            if len(ran) > 0:
                row.start = ran[0].tstart
            row.completion = task.exited
            row.waiting = len([slot for slot in slots if slot.event == RUNNABLE]) * plan.timer
            if row.completion is not None:
                row.turnaround = row.completion - task.arrival
        rows.append(row)
    logger.debug("summary from schedule: %d rows (blank=%s)", len(rows), blank)
    return rows


def _cell(value) -> str:
    if value is None:
        return ""
    if isinstance(value, list):
        return ", ".join(fmt(v) for v in value)
    return fmt(value)


def _mean(values: List[Optional[float]]) -> Optional[float]:
    defined = [v for v in values if v is not None]
    if len(defined) == 0:
        return None
    return float(numpy.mean(defined))


def _plan_of(source: Union[Schedule, Plan]) -> Plan:
    return source.plan if isinstance(source, Schedule) else source


def summary_header(plan: Plan, with_events: bool) -> List[str]:
    header = ["\\#", "Task", "Arrival", "Final VRT" if plan.is_cfs() else "Computation",
              "Start", "Completion", "Waiting", "Turnaround"]
    if with_events:
        header += ["Sleeps at", "Wakeups after"]
    return header


def sched_to_table(source: Union[Schedule, Plan], blank: bool = False, averages: bool = False) -> str:
    plan = _plan_of(source)
    rows = summary_rows(source, blank)
    with_events = any(task.events is not None for task in plan.tasks)
    header = summary_header(plan, with_events)

    lines = ["\\begin{table}[h]",
             "\\centering",
             "\\begin{tabular}{|" + "|".join(["c", "l"] + ["c"] * (len(header) - 2)) + "|}",
             "\\hline",
             " & ".join(header) + " \\\\",
             "\\hline"]
    for row in rows:
        cells = [str(row.number), row.name, _cell(row.arrival), _cell(row.computation), _cell(row.start),
                 _cell(row.completion), _cell(row.waiting), _cell(row.turnaround)]
        if with_events:
            cells += [_cell(row.sleeps), _cell(row.wakeups)]
        lines.append(" & ".join(cells) + " \\\\")
    lines.append("\\hline")

    if averages and not blank:
        avg_waiting = _mean([row.waiting for row in rows])
        avg_turnaround = _mean([row.turnaround for row in rows])
        if avg_waiting is not None or avg_turnaround is not None:
            cells = ["\\multicolumn{2}{|l|}{Avg.}", "", "", "", "", _cell(avg_waiting), _cell(avg_turnaround)]
            if with_events:
                cells += ["", ""]
            lines.append(" & ".join(cells) + " \\\\")
            lines.append("\\hline")

    lines.append("\\end{tabular}")
    if with_events:
        lines.append("")
        lines.append(SLEEP_NOTE)
    lines += ["\\caption{Task summary}",
              "\\label{tab:task-summary}",
              "\\end{table}"]
    return "\n".join(lines) + "\n"
