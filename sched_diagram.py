import logging
import math
from typing import List, Optional, Tuple

from sched_data import BLOCKED, RAN, RUNNABLE, Plan, Schedule, TaskSlot, validate_timeline
from tikz_graphics import (CircGraphic, CompositeGraphic, Drawable, GridGraphic, PathEndingStyle, PathGraphic,
                           RectGraphic, TextGraphic, fmt, tikzpicture)

logger = logging.getLogger(__name__)

# spacing constants. columns are scaled by hspace, rows are label rows (see Layout.row)
name_column = -1
description_column = -0.6
description_rows = (-0.4, -0.2)
tick_row = -0.7
below_row = -0.4
above_row = 0.4
in_slot_offset = 0.25
arrow_height = 0.75
annot_tick_height = 0.25
legend_row = -1.5
legend_row_step = 0.4
legend_text_column = 0.3


"""
Maps schedule time and rows onto picture coordinates.
The time axis is scaled by 0.5/timer so one quantum is always half a unit wide, whatever the quantum size
"""


class Layout:
    def __init__(self, plan: Plan):
        self.hs = plan.graphics.hspace
        self.vs = plan.graphics.vspace
        self.hh = plan.graphics.barheight
        self.xscale = 0.5 / plan.timer

    def x(self, t: float) -> float:
        return t * self.xscale * self.hs

    def col(self, c: float) -> float:
        return c * self.hs

    def row(self, r: float) -> float:
        return r * self.hs + 0.5 * self.hh

    def bar_y(self, index: int) -> float:
        return index * self.vs


class LegendEntry:
    def __init__(self, number: int, message: str, color: str):
        self.number = number
        self.message = message
        self.color = color

    def __repr__(self):
        return "LegendEntry({}, {!r})".format(self.number, self.message)


def draw_grid(layout: Layout, plan: Plan) -> List[Drawable]:
    out: List[Drawable] = [GridGraphic(layout.x(plan.timer), layout.x(plan.runfor), len(plan.tasks))]
    last_tick = int(math.floor(plan.runfor / plan.timer + 1e-9))
    for i in range(last_tick + 1):
        t = i * plan.timer
        out.append(TextGraphic(layout.x(t), layout.row(tick_row), "\\emph{" + fmt(t) + "}", options=["text=gray"]))
    return out


def draw_task_names(layout: Layout, plan: Plan) -> List[Drawable]:
    names = [TextGraphic(layout.col(name_column), layout.row(task.index), task.name, size=None)
             for task in plan.tasks]
    descriptions = []
    for task in plan.tasks:
        for line, offset in zip(task.description, description_rows):
            descriptions.append(TextGraphic(layout.col(description_column), layout.row(task.index + offset), line))
    return names + descriptions


def _draw_bar(layout: Layout, slot: TaskSlot, facecolor: Optional[str] = None,
              textcolor: Optional[str] = None) -> RectGraphic:
    return RectGraphic(layout.x(slot.tstart), layout.bar_y(slot.index), layout.x(slot.tend) - layout.x(slot.tstart),
                       layout.hh, facecolor=facecolor, textcolor=textcolor)


"""
Above-slot annotation: the message itself (inline) or a numbered marker pointing at the legend,
plus a colored tick at tstart pointing down into the slot
"""


def _draw_annotation(layout: Layout, slot: TaskSlot, inline: bool, number: int) -> List[Drawable]:
    color = slot.above_slot.color
    x = layout.x(slot.tend)
    y = layout.row(slot.index + above_row)
    if inline:
        mark = TextGraphic(x, y, slot.above_slot.message, options=["anchor=east", "text=" + color])
    else:
        mark = CircGraphic(x, y, number, color, anchor="east")
    tick_x = layout.x(slot.tstart)
    top = layout.bar_y(slot.index) + layout.hh
    tick = PathGraphic([(tick_x, top + annot_tick_height), (tick_x, top)],
                       ending_style=PathEndingStyle.ENDING_ARROW, color=color, thick=True)
    return [mark, tick]


def _draw_slot(layout: Layout, slot: TaskSlot, nobelow: bool) -> List[Drawable]:
    if slot.event == RAN:
        out: List[Drawable] = [_draw_bar(layout, slot)]
        if not nobelow:
            out.append(TextGraphic(layout.x(slot.tend), layout.row(slot.index + below_row), slot.below_slot))
        out.append(TextGraphic(layout.x(slot.tend) - layout.col(in_slot_offset), layout.row(slot.index),
                               slot.in_slot))
        return out
    if slot.event == BLOCKED:
        return [_draw_bar(layout, slot, facecolor="gray", textcolor="white")]
    return []


"""
Single left to right pass over the timeline.
Returns the slot drawables and the legend entries, numbered from 1 in order of occurrence.
Slots starting at or after runfor are never drawn
"""


def scan_timeline(schedule: Schedule, inline: bool = False,
                  nobelow: bool = False) -> Tuple[List[Drawable], List[LegendEntry]]:
    layout = Layout(schedule.plan)
    drawables: List[Drawable] = []
    legend: List[LegendEntry] = []
    skipped = 0
    for slot in schedule.timeline:
        if slot.tstart >= schedule.plan.runfor:
            skipped += 1
            continue
        if slot.event not in (RAN, BLOCKED, RUNNABLE):
            continue
        drawables.extend(_draw_slot(layout, slot, nobelow))
        if slot.has_annotation():
            number = len(legend) + 1
            drawables.extend(_draw_annotation(layout, slot, inline, number))
            if not inline:
                legend.append(LegendEntry(number, slot.above_slot.message, slot.above_slot.color))
    if skipped:
        logger.debug("skipped %d slots past runfor=%s", skipped, fmt(schedule.plan.runfor))
    return drawables, legend


def draw_task_events(layout: Layout, plan: Plan) -> List[Drawable]:
    arrivals = []
    exits = []
    for task in plan.tasks:
        x = layout.x(task.arrival)
        arrivals.append(PathGraphic([(x, task.index + arrow_height), (x, task.index)],
                                    ending_style=PathEndingStyle.ENDING_ARROW))
        if task.exited is not None:
            x = layout.x(task.exited)
            exits.append(PathGraphic([(x, task.index + arrow_height), (x, task.index)],
                                     ending_style=PathEndingStyle.BEGIN_ARROW))
    return arrivals + exits


def draw_legend(layout: Layout, entries: List[LegendEntry]) -> List[Drawable]:
    out: List[Drawable] = [TextGraphic(layout.col(name_column), layout.row(legend_row), "Legend:",
                                       options=["anchor=west"])]
    for k, entry in enumerate(entries):
        y = layout.row(legend_row - legend_row_step * (k + 1))
        out.append(CircGraphic(layout.col(0), y, entry.number, entry.color))
        out.append(TextGraphic(layout.col(legend_text_column), y, entry.message,
                               options=["anchor=west", "text=" + entry.color]))
    return out


"""
Render a given Schedule
INPUT
    blank - keep only grid, task names, arrival/exit arrows and caption
    inline - print annotations above their slots instead of numbering them into a legend
    nobelow - drop the labels under RAN slots
"""


def sched_drawable(schedule: Schedule, blank: bool = False, inline: bool = False,
                   nobelow: bool = False) -> CompositeGraphic:
    validate_timeline(schedule)
    plan = schedule.plan
    layout = Layout(plan)
    out = CompositeGraphic()

    out.extend(draw_grid(layout, plan))
    out.extend(draw_task_names(layout, plan))
    legend: List[LegendEntry] = []
    if not blank:
        slot_drawables, legend = scan_timeline(schedule, inline, nobelow)
        out.extend(slot_drawables)
    out.extend(draw_task_events(layout, plan))
    out.add(TextGraphic(layout.col(description_column), layout.row(len(plan.tasks)),
                        schedule.scheddata.legend_above, options=["anchor=west"]))
    if len(legend) > 0:
        out.extend(draw_legend(layout, legend))

    logger.debug("diagram: %d tasks, %d statements, %d legend entries (blank=%s)",
                 len(plan.tasks), len(out.elements), len(legend), blank)
    return out


def sched_to_tikz(schedule: Schedule, blank: bool = False, inline: bool = False, nobelow: bool = False) -> str:
    return tikzpicture(sched_drawable(schedule, blank, inline, nobelow).to_tikz())
