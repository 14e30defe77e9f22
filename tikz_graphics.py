from typing import List, Optional, Tuple

"""
Coordinates are written as plain decimals. Integral values drop the fractional part so output stays stable across int/float inputs
"""


def fmt(value: float) -> str:
    value = round(float(value), 6)
    if value == int(value):
        return str(int(value))
    return "{:.6f}".format(value).rstrip("0")


def _opts(options: List[str], space: bool = True) -> str:
    if len(options) == 0:
        return ""
    return (" [" if space else "[") + ", ".join(options) + "]"


"""
Drawables know how to write themselves as one TikZ statement
"""


class Drawable:
    def to_tikz(self) -> str:
        raise NotImplementedError(type(self).__name__ + " does not implement to_tikz")


class TextGraphic(Drawable):
    def __init__(self, x: float, y: float, text: str, size: Optional[str] = "\\tiny", options: List[str] = None):
        self.x = x
        self.y = y
        self.text = text
        self.size = size
        self.options = [] if options is None else list(options)

    def to_tikz(self) -> str:
        body = self.text if not self.size else self.size + " " + self.text
        return "\\node{} at({}, {}) {{{}}};".format(_opts(self.options), fmt(self.x), fmt(self.y), body)


"""
Numbered marker: a text node with a circle drawn around it in the annotation color
"""


class CircGraphic(TextGraphic):
    def __init__(self, x: float, y: float, number: int, color: str = "black", anchor: Optional[str] = None):
        options = [] if anchor is None else ["anchor=" + anchor]
        options += ["circle", "draw=" + color, "text=" + color, "inner sep=0.5pt"]
        TextGraphic.__init__(self, x, y, str(number), options=options)
        self.number = number
        self.color = color


class RectGraphic(Drawable):
    def __init__(self, x: float, y: float, width: float, height: float, edgecolor: str = "black",
                 facecolor: Optional[str] = None, textcolor: Optional[str] = None):
        assert (width >= 0)
        self.x = x
        self.y = y
        self.width = width
        self.height = height
        self.edgecolor = edgecolor
        self.facecolor = facecolor
        self.textcolor = textcolor

    def to_tikz(self) -> str:
        options = ["draw=" + self.edgecolor]
        if self.facecolor is not None:
            options.append("fill=" + self.facecolor)
        node_options = ["pos=.5"]
        if self.textcolor is not None:
            node_options.append("text=" + self.textcolor)
        return "\\draw{} ({}, {}) rectangle ++({},{}) node{} {{}};".format(
            _opts(options, space=False), fmt(self.x), fmt(self.y), fmt(self.width), fmt(self.height),
            _opts(node_options, space=False))


class PathEndingStyle:
    ENDING_DEFAULT = 0
    ENDING_ARROW = 1
    BEGIN_ARROW = 2


_arrow_tips = {
    PathEndingStyle.ENDING_ARROW: "->",
    PathEndingStyle.BEGIN_ARROW: "<-",
}


class PathGraphic(Drawable):
    def __init__(self, points: List[Tuple[float, float]], ending_style=PathEndingStyle.ENDING_DEFAULT,
                 color: Optional[str] = None, thick: bool = False):
        assert (len(points) > 1)
        self.points = points
        self.ending_style = ending_style
        self.color = color
        self.thick = thick

    def to_tikz(self) -> str:
        options = []
        if self.ending_style in _arrow_tips:
            options.append(_arrow_tips[self.ending_style])
        if self.color is not None:
            options.append("draw=" + self.color)
        if self.thick:
            options.append("thick")
        path = " -- ".join("({}, {})".format(fmt(x), fmt(y)) for (x, y) in self.points)
        return "\\draw{} {};".format(_opts(options), path)


class GridGraphic(Drawable):
    def __init__(self, xstep: float, width: float, height: float, color: str = "gray!20", shift: float = -0.25):
        self.xstep = xstep
        self.width = width
        self.height = height
        self.color = color
        self.shift = shift

    def to_tikz(self) -> str:
        return "\\draw[xstep={},{},thin,shift={{(0,{})}}] (0,0) grid ({},{});".format(
            fmt(self.xstep), self.color, fmt(self.shift), fmt(self.width), fmt(self.height))


"""
Ordered list of drawables. Statement order is emission order
"""


class CompositeGraphic(Drawable):
    def __init__(self):
        self.elements: List[Drawable] = []

    def add(self, draw_src: Drawable) -> None:
        self.elements.append(draw_src)

    def extend(self, draw_srcs: List[Drawable]) -> None:
        self.elements.extend(draw_srcs)

    def of_type(self, kind) -> List[Drawable]:
        return [el for el in self.elements if isinstance(el, kind)]

    def to_tikz(self) -> str:
        return "\n".join(el.to_tikz() for el in self.elements)


def tikzpicture(body: str) -> str:
    return "\n\\begin{tikzpicture}\n" + body + "\n\\end{tikzpicture}\n"
