import logging
import os
import subprocess
from typing import List, Tuple

# used to query pdf page size
import pdfminer.pdfdocument
import pdfminer.pdfpage
import pdfminer.pdfparser

from sched_artifacts import LatexArtifact

logger = logging.getLogger(__name__)

preview_scale = 4.0

preamble = [
    "\\usepackage{amsmath}",
    "\\usepackage{xcolor}",
    "\\usepackage{tikz}",
]

# standalone has no floats. Turn table into a minipage that still accepts \caption
standalone_table = [
    "\\makeatletter",
    "\\renewenvironment{table}[1][]{\\def\\@captype{table}\\par\\noindent\\begin{minipage}{\\linewidth}}"
    "{\\end{minipage}\\par}",
    "\\makeatother",
]


class LatexCompileError(Exception):
    def __init__(self, slug: str, reason: str):
        self.slug = slug
        self.reason = reason
        Exception.__init__(self, "{}: {}".format(slug, reason))


def artifact_to_document(artifact: LatexArtifact) -> str:
    lines: List[str] = []
    if artifact.clss == "standalone":
        lines.append("\\documentclass[varwidth, border=2]{standalone}")
        lines += preamble + standalone_table
    else:
        lines.append("\\documentclass{" + artifact.clss + "}")
        lines += preamble
    lines += ["\\begin{document}", artifact.code, "\\end{document}"]
    return "\n".join(lines) + "\n"


def _run(slug: str, args: List[str]) -> subprocess.CompletedProcess:
    try:
        return subprocess.run(args, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)
    except FileNotFoundError:
        raise LatexCompileError(slug, "'{}' not found".format(args[0]))


"""
Writes the artifact as a complete document into out_dir and runs its engine in batch mode
OUTPUT
    path of the produced pdf
"""


def compile_artifact(artifact: LatexArtifact, out_dir: str) -> str:
    os.makedirs(out_dir, exist_ok=True)
    tex_path = os.path.join(out_dir, artifact.slug + ".tex")
    with open(tex_path, "w") as tex:
        tex.write(artifact_to_document(artifact))

    logger.info("running %s on %s", artifact.engine, tex_path)
    result = _run(artifact.slug, [artifact.engine, "-interaction", "batchmode", "-output-directory", out_dir,
                                  tex_path])
    pdf_path = os.path.join(out_dir, artifact.slug + ".pdf")
    if result.returncode != 0 or not os.path.exists(pdf_path):
        raise LatexCompileError(artifact.slug, "{} failed, see {}".format(
            artifact.engine, os.path.join(out_dir, artifact.slug + ".log")))
    return pdf_path


def get_pdf_page_size(pdf_name: str) -> Tuple[float, float]:
    height = 0
    width = 0
    with open(pdf_name, 'rb') as pdf:
        parser = pdfminer.pdfparser.PDFParser(pdf)
        doc = pdfminer.pdfdocument.PDFDocument(parser)
        for page in pdfminer.pdfpage.PDFPage.create_pages(doc):
            (x0, y0, x1, y1) = page.mediabox
            height = y1 - y0
            width = x1 - x0
            break
    if height == 0 or width == 0:
        logger.warning("%s: 0 height or width", pdf_name)
        return (-1, -1)

    return (height, width)


def _svg_to_png(svg_path: str, png_path: str, height: float, width: float, scale: float) -> None:
    # cairo and Rsvg are only needed here, they come with the "preview" extra
    import cairo
    import gi
    gi.require_version('Rsvg', '2.0')
    from gi.repository import Rsvg

    svg = Rsvg.Handle.new_from_file(svg_path)
    # set the dpi here to prevent scaling when the svg is rendered into cairo
    svg.set_dpi(72)

    surf = cairo.ImageSurface(cairo.Format.ARGB32, int(scale * width), int(scale * height))
    ctx = cairo.Context(surf)
    ctx.set_source_rgb(1, 1, 1)
    ctx.paint()
    ctx.scale(scale, scale)
    svg.render_cairo(ctx)
    surf.write_to_png(png_path)


"""
pdf -> svg with pdf2svg, svg -> png through Rsvg and cairo
OUTPUT
    path of the png
"""


def preview_artifact(artifact: LatexArtifact, out_dir: str, scale: float = preview_scale) -> str:
    pdf_path = compile_artifact(artifact, out_dir)
    (height, width) = get_pdf_page_size(pdf_path)
    if height == -1:
        raise LatexCompileError(artifact.slug, "empty page in " + pdf_path)

    svg_path = os.path.join(out_dir, artifact.slug + ".svg")
    if _run(artifact.slug, ['pdf2svg', pdf_path, svg_path]).returncode != 0:
        raise LatexCompileError(artifact.slug, "pdf2svg failed on " + pdf_path)

    png_path = os.path.join(out_dir, artifact.slug + ".png")
    _svg_to_png(svg_path, png_path, height, width, scale)
    logger.info("wrote %s (%sx%s pt)", png_path, width, height)
    return png_path
