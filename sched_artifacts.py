import logging
import re
from typing import Dict, Optional, Union

from sched_data import Plan, Schedule
from sched_diagram import sched_to_tikz
from sched_summary import sched_to_table

logger = logging.getLogger(__name__)

default_class = "standalone"
default_engine = "pdflatex"
varwidth_options = "-r varwidth"

_word = re.compile(r"[A-Z]+(?![a-z])|[A-Z]?[a-z]+|[0-9]+")


def kebab_case(name: str) -> str:
    return "-".join(word.lower() for word in _word.findall(name))


"""
A piece of LaTeX plus what a build step needs to compile it on its own
"""


class LatexArtifact:
    def __init__(self, code: str, name: str, clss: Optional[str] = None, engine: Optional[str] = None,
                 extra_options: Optional[str] = None):
        self.code = code
        self.name = name
        self.slug = kebab_case(name)
        self.clss = default_class if clss is None else clss
        self.engine = default_engine if engine is None else engine
        self.extra_options = extra_options

    def as_dict(self) -> Dict[str, Optional[str]]:
        return {
            "code": self.code,
            "class": self.clss,
            "name": self.name,
            "slug": self.slug,
            "engine": self.engine,
            "extraOptions": self.extra_options,
        }


def latex_artifact(code: str, name: str, clss: Optional[str] = None, engine: Optional[str] = None,
                   extra_options: Optional[str] = None) -> LatexArtifact:
    return LatexArtifact(code, name, clss, engine, extra_options)


def export_latex(schedule: Schedule, inline: bool = False, nobelow: bool = False) -> Dict[str, LatexArtifact]:
    logger.debug("exporting diagram artifacts (inline=%s, nobelow=%s)", inline, nobelow)
    return {
        "complete": latex_artifact(sched_to_tikz(schedule, blank=False, inline=inline, nobelow=nobelow),
                                   "rt diagram", default_class, default_engine, varwidth_options),
        "blank": latex_artifact(sched_to_tikz(schedule, blank=True, inline=inline, nobelow=nobelow),
                                "rt diagram blank", default_class, default_engine, varwidth_options),
        # rendered by the simulator, passed through as is
        "data": latex_artifact(schedule.scheddata.blank_data, "data table", default_class, default_engine,
                               varwidth_options),
    }


def export_summary(source: Union[Schedule, Plan], averages: bool = False) -> Dict[str, LatexArtifact]:
    logger.debug("exporting summary artifacts")
    return {
        "complete": latex_artifact(sched_to_table(source, blank=False, averages=averages), "task summary",
                                   default_class, default_engine, varwidth_options),
        "blank": latex_artifact(sched_to_table(source, blank=True), "task summary blank", default_class,
                                default_engine, varwidth_options),
    }


def bundle_to_dict(bundle: Dict[str, LatexArtifact]) -> Dict[str, Dict[str, Optional[str]]]:
    return dict((key, artifact.as_dict()) for key, artifact in bundle.items())
