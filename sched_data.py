import json
import logging
from typing import Dict, List, Optional, Tuple, Union

logger = logging.getLogger(__name__)

RAN = "RAN"
BLOCKED = "BLOCKED"
RUNNABLE = "RUNNABLE"
EXITED = "EXITED"


class SchedDataError(Exception):
    pass


class ScheduleFormatError(SchedDataError):
    pass


"""
A slot that cannot be drawn. Always attributed to one timeline position and the task row it belongs to
"""


class MalformedSlotError(SchedDataError):
    def __init__(self, slot_position: int, task_index: int, reason: str):
        self.slot_position = slot_position
        self.task_index = task_index
        self.reason = reason
        SchedDataError.__init__(self, "slot {} (task {}): {}".format(slot_position, task_index, reason))


class Graphics:
    def __init__(self, hspace: float = 1.0, vspace: float = 1.0, barheight: float = 0.5):
        self.hspace = hspace
        self.vspace = vspace
        self.barheight = barheight


"""
One simulated process. description is the two-line label drawn left of the row
events alternates sleep and wakeup durations, starting with a sleep
"""


class Task:
    def __init__(self, index_input: int, name_input: str, arrival: float = 0, exited: Optional[float] = None,
                 description: Tuple[str, str] = ("", ""), computation: Optional[float] = None,
                 vrt: Optional[float] = None, events: Optional[List[float]] = None):
        self.index = index_input
        self.name = name_input
        self.arrival = arrival
        self.exited = exited
        self.description = description
        self.computation = computation
        self.vrt = vrt
        self.events = events

    def __repr__(self):
        return "Task({}, {!r})".format(self.index, self.name)


class AboveSlot:
    def __init__(self, message: str, color: str = "black"):
        self.message = message
        self.color = color


class TaskSlot:
    def __init__(self, tstart: float, tend: float, index_input: int, event: str, in_slot: str = "",
                 below_slot: str = "", above_slot: Optional[AboveSlot] = None):
        self.tstart = tstart
        self.tend = tend
        self.index = index_input
        self.event = event
        self.in_slot = in_slot
        self.below_slot = below_slot
        self.above_slot = above_slot

    def has_annotation(self) -> bool:
        return self.above_slot is not None and self.above_slot.message != ""

    def __repr__(self):
        return "TaskSlot({}, [{}, {}), {})".format(self.index, self.tstart, self.tend, self.event)


class Plan:
    def __init__(self, timer: float, runfor: float, tasks: List[Task], graphics: Graphics = None,
                 class_type: Optional[str] = None):
        if timer <= 0:
            raise ScheduleFormatError("timer must be positive, got {}".format(timer))
        self.timer = timer
        self.runfor = runfor
        self.tasks = tasks
        self.graphics = graphics if graphics is not None else Graphics()
        self.class_type = class_type

    def is_cfs(self) -> bool:
        return self.class_type == "cfs"


class SchedMeta:
    def __init__(self, legend_above: str = "", blank_data: str = ""):
        self.legend_above = legend_above
        self.blank_data = blank_data


"""
A plan plus the timeline the simulator produced for it
"""


class Schedule:
    def __init__(self, plan: Plan, timeline: List[TaskSlot], scheddata: SchedMeta = None):
        self.plan = plan
        self.timeline = timeline
        self.scheddata = scheddata if scheddata is not None else SchedMeta()

    def slots_for(self, index: int) -> List[TaskSlot]:
        return [slot for slot in self.timeline if slot.index == index]


def validate_timeline(schedule: Schedule) -> None:
    for pos, slot in enumerate(schedule.timeline):
        if slot.tstart > slot.tend:
            raise MalformedSlotError(pos, slot.index,
                                     "tstart {} is after tend {}".format(slot.tstart, slot.tend))


"""
Loading from the simulator's JSON output
"""


def _require(d: Dict, key: str, where: str):
    if key not in d:
        raise ScheduleFormatError("{}: missing '{}'".format(where, key))
    return d[key]


def task_from_dict(d: Dict, pos: int = 0) -> Task:
    where = "task {}".format(pos)
    if "arrival" in d:
        arrival = d["arrival"]
    else:
        arrival = _require(d, "start", where)

    if "description" in d:
        description_input = d["description"]
        if isinstance(description_input, str):
            description_input = [description_input]
        lines = list(description_input) + ["", ""]
        description = (lines[0], lines[1])
    else:
        description = (d.get("legendBelowTask1", ""), d.get("legendBelowTask2", ""))

    return Task(d.get("index", pos), _require(d, "name", where), arrival,
                exited=d.get("exited"),
                description=description,
                computation=d.get("computation"),
                vrt=d.get("vrt"),
                events=d.get("events"))


def slot_from_dict(d: Dict, pos: int = 0) -> TaskSlot:
    where = "slot {}".format(pos)
    above = d.get("aboveSlot")
    above_slot = None
    if above is not None:
        above_slot = AboveSlot(above.get("message", ""), above.get("color", "black"))
    return TaskSlot(_require(d, "tstart", where), _require(d, "tend", where), _require(d, "index", where),
                    _require(d, "event", where),
                    in_slot=d.get("inSlot", ""),
                    below_slot=d.get("belowSlot", ""),
                    above_slot=above_slot)


def plan_from_dict(d: Dict) -> Plan:
    graphics = d.get("graphics") or {}
    clss = d.get("class") or {}
    tasks = [task_from_dict(t, i) for i, t in enumerate(_require(d, "tasks", "plan"))]
    return Plan(_require(d, "timer", "plan"), _require(d, "runfor", "plan"), tasks,
                graphics=Graphics(graphics.get("hspace", 1.0), graphics.get("vspace", 1.0),
                                  graphics.get("barheight", 0.5)),
                class_type=clss.get("type"))


def _plan_section(d: Dict) -> Dict:
    # the simulator writes the plan under "schedule"
    if "plan" in d:
        return d["plan"]
    return _require(d, "schedule", "input")


def schedule_from_dict(d: Dict) -> Schedule:
    plan = plan_from_dict(_plan_section(d))
    timeline = [slot_from_dict(s, i) for i, s in enumerate(_require(d, "timeline", "input"))]
    meta = d.get("scheddata") or {}
    schedule = Schedule(plan, timeline, SchedMeta(meta.get("legendAbove", ""), meta.get("blankData", "")))
    logger.debug("loaded schedule: %d tasks, %d slots", len(plan.tasks), len(timeline))
    return schedule


def load_input(path: str) -> Union[Schedule, Plan]:
    with open(path) as f:
        try:
            d = json.load(f)
        except json.JSONDecodeError as e:
            raise ScheduleFormatError("{}: {}".format(path, e)) from e
    if "timeline" not in d:
        logger.debug("%s has no timeline, loading as plan", path)
        return plan_from_dict(_plan_section(d) if ("plan" in d or "schedule" in d) else d)
    return schedule_from_dict(d)


def load_schedule(path: str) -> Schedule:
    loaded = load_input(path)
    if not isinstance(loaded, Schedule):
        raise ScheduleFormatError("{}: no timeline".format(path))
    return loaded
