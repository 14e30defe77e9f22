import argparse
import json
import logging
import os
import sys
from typing import Dict, List, Optional

from latex_preview import LatexCompileError, compile_artifact, preview_artifact
from sched_artifacts import LatexArtifact, bundle_to_dict, export_latex, export_summary
from sched_data import SchedDataError, Schedule, load_input

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Render a simulated schedule into LaTeX diagram and summary artifacts")
    parser.add_argument("input", help="simulator output (JSON)")
    parser.add_argument("-o", "--output-path", help="directory to write artifacts to", default="./artifacts")
    parser.add_argument("--inline", help="print annotations above their slots instead of in a legend",
                        action="store_true")
    parser.add_argument("--nobelow", help="drop the labels under RAN slots", action="store_true")
    parser.add_argument("--averages", help="add an average waiting/turnaround row to the summary",
                        action="store_true")
    parser.add_argument("--summary-only", help="only write the summary table", action="store_true")
    parser.add_argument("--compile", help="compile every artifact to pdf", action="store_true")
    parser.add_argument("--preview", help="compile every artifact and render a png", action="store_true")
    parser.add_argument("-v", "--verbose", help="output debug logs", action="store_true")
    return parser.parse_args(argv)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_bundle(loaded, args: argparse.Namespace) -> Dict[str, LatexArtifact]:
    bundle: Dict[str, LatexArtifact] = {}
    if isinstance(loaded, Schedule) and not args.summary_only:
        bundle.update(export_latex(loaded, inline=args.inline, nobelow=args.nobelow))
    for key, artifact in export_summary(loaded, averages=args.averages).items():
        bundle["summary-" + key] = artifact
    return bundle


def write_bundle(bundle: Dict[str, LatexArtifact], out_dir: str) -> List[str]:
    os.makedirs(out_dir, exist_ok=True)
    written = []
    for artifact in bundle.values():
        path = os.path.join(out_dir, artifact.slug + ".tex")
        with open(path, "w") as f:
            f.write(artifact.code)
        written.append(path)
    manifest = os.path.join(out_dir, "bundle.json")
    with open(manifest, "w") as f:
        json.dump(bundle_to_dict(bundle), f, indent=2)
    written.append(manifest)
    return written


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    _configure_logging(args.verbose)
    try:
        loaded = load_input(args.input)
        bundle = build_bundle(loaded, args)
        for path in write_bundle(bundle, args.output_path):
            logger.info("wrote %s", path)
        if args.compile or args.preview:
            build_dir = os.path.join(args.output_path, "build")
            for artifact in bundle.values():
                if artifact.code.strip() == "":
                    logger.info("skipping empty artifact %s", artifact.slug)
                    continue
                if args.preview:
                    preview_artifact(artifact, build_dir)
                else:
                    compile_artifact(artifact, build_dir)
    except (SchedDataError, LatexCompileError) as e:
        logger.error("%s", e)
        return 1
    except OSError as e:
        logger.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
