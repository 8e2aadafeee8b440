#!/usr/bin/env python3
"""
markweave - Markdown and slide-deck text conversion engine

Converts a markdown-like text file, or a slide deck written in the
Title:/Subtitle:/Body:/Notes: dialect, into a standalone HTML rendering or
a JSON description of its blocks, inline spans and slide fields.

As with other ChRIS plugins, the app takes an input directory and an
output directory and reads/writes files relative to them.

Usage:
    markweave inputdir/ outputdir/ --inputFile notes.md

Examples:
    # Markdown to HTML
    markweave . output/ --inputFile chapter.md

    # Slide deck to JSON
    markweave . output/ --inputFile deck.txt --dialect slides --format json

    # Verbose output
    markweave . output/ --inputFile chapter.md -vv
"""

import json
import sys
from pathlib import Path
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter

from chris_plugin import chris_plugin
from .config import appsettings
from .lib import Segmenter, SlideExtractor, StructuralError, dialect_detect, __version__, LOG, state_connectToLogger
from .lib.log import WARN
from .lib.render import (
    HtmlDocumentSink,
    HtmlSlideSink,
    document_render,
    slides_render,
    result_toDict,
)
from .models import ProgramState, pipeline, DeckResult


DISPLAY_TITLE = r"""
   __  __   _   ___ _  ____      _____   ___   _____
  |  \/  | /_\ | _ \ |/ /\ \    / / __| /_\ \ / / __|
  | |\/| |/ _ \|   / ' <  \ \/\/ /| _| / _ \ V /| _|
  |_|  |_/_/ \_\_|_\_|\_\  \_/\_/ |___/_/ \_\_/ |___|

  Markdown and slide-deck conversion engine
"""

# Define CLI arguments
parser = ArgumentParser(
    description="markweave - convert markdown or slide-deck text to HTML or JSON",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument(
    "--inputFile", required=True, type=str, help="Input text file (relative to inputdir)"
)

parser.add_argument(
    "--dialect",
    default="auto",
    choices=["auto", "markdown", "slides"],
    help="Input dialect; 'auto' picks slides when separators and field markers are present",
)

parser.add_argument(
    "--format",
    default="html",
    choices=["html", "json"],
    help="Output format",
)

parser.add_argument(
    "--outputSubdir",
    default=".",
    type=str,
    help="Subdirectory within outputdir for the converted output",
)

parser.add_argument(
    "-v",
    "--verbosity",
    action="count",
    default=1,
    help="Increase output verbosity (can be repeated: -v, -vv, -vvv)",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")


def env_check(inputstate: ProgramState) -> ProgramState:
    """
    Validate environment and resolve all file paths.

    Args:
        inputstate: Initial program state with CLI options

    Returns:
        ProgramState with added fields:
            - inputSourceFile: Resolved path to the input file
            - outputTargetdir: Created output directory path
            - envOK: True if environment is valid

    Exits:
        1 if the input file is not found
    """
    state = inputstate.copy()

    if state.verbosity >= 2:
        LOG(DISPLAY_TITLE, level=2)

    LOG("Checking environment...", level=2)

    input_file = state.inputdir / state.inputFile
    if not input_file.exists():
        print(f"Error: Input file not found: {input_file}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    state.inputSourceFile = input_file
    LOG(f"Input file: {input_file}", level=2)

    state.outputTargetdir = state.outputdir / state.outputSubdir
    state.outputTargetdir.mkdir(parents=True, exist_ok=True)
    LOG(f"Output directory: {state.outputTargetdir}", level=2)

    state.envOK = True
    return state


def source_read(inputstate: ProgramState) -> ProgramState:
    """
    Read the input text file.

    Returns:
        ProgramState with added field:
            - sourceText: File contents

    Exits:
        1 if the file cannot be read
    """
    state = inputstate.copy()

    LOG("Reading source file...", level=1)
    try:
        state.sourceText = state.inputSourceFile.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error reading input file: {e}", file=sys.stderr)
        sys.exit(1)

    LOG(f"Read {len(state.sourceText)} characters from {state.inputSourceFile.name}", level=2)
    return state


def source_convert(inputstate: ProgramState) -> ProgramState:
    """
    Segment the source text into blocks or slides.

    Returns:
        ProgramState with added fields:
            - resolvedDialect: "markdown" or "slides"
            - conversion: DocumentResult or DeckResult

    Exits:
        1 on a structural error, or when nothing usable was found
    """
    state = inputstate.copy()

    state.resolvedDialect = (
        dialect_detect(state.sourceText) if state.dialect == "auto" else state.dialect
    )
    LOG(f"Converting as {state.resolvedDialect}...", level=1)

    if state.resolvedDialect == "slides":
        state.conversion = SlideExtractor(state.sourceText).extract()
    else:
        policy = "error" if appsettings.strict_mode else None
        try:
            state.conversion = Segmenter(state.sourceText, unterminated_fence=policy).document_build()
        except StructuralError as e:
            print(f"Parse error: {e}", file=sys.stderr)
            sys.exit(1)

    if state.conversion.empty:
        if state.resolvedDialect == "slides":
            message = "No valid slides found. Check separators (---)."
        else:
            message = "No content found in input."
        if appsettings.strict_mode or state.resolvedDialect == "slides":
            print(f"Error: {message}", file=sys.stderr)
            sys.exit(1)
        WARN(message)

    LOG(f"Converted {len(state.conversion)} {'slide' if state.resolvedDialect == 'slides' else 'block'}(s)", level=2)
    return state


def output_write(inputstate: ProgramState) -> ProgramState:
    """
    Render the conversion and write it to the output directory.

    Returns:
        ProgramState with added field:
            - outputFile: Path of the written file
    """
    state = inputstate.copy()
    title = state.inputSourceFile.stem

    if state.format == "json":
        output = json.dumps(result_toDict(state.conversion), indent=2, ensure_ascii=False)
        state.outputFile = state.outputTargetdir / f"{title}.json"
    elif isinstance(state.conversion, DeckResult):
        slide_sink = HtmlSlideSink(title=title)
        slides_render(state.conversion, slide_sink)
        output = slide_sink.html_build()
        state.outputFile = state.outputTargetdir / f"{title}.html"
    else:
        document_sink = HtmlDocumentSink(title=title)
        document_render(state.conversion, document_sink)
        output = document_sink.html_build()
        state.outputFile = state.outputTargetdir / f"{title}.html"

    state.outputFile.write_text(output, encoding="utf-8")
    LOG(f"Wrote {state.outputFile}", level=2)
    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """
    Display conversion results to the user (terminal pipeline stage).
    """
    state: ProgramState = inputstate.copy()
    if state.outputFile is None or state.conversion is None:
        print("Error: Conversion failed", file=sys.stderr)
        sys.exit(1)

    unit = "Slides" if state.resolvedDialect == "slides" else "Blocks"
    state.report = {
        "output_file": str(state.outputFile),
        "dialect": state.resolvedDialect,
        "count": len(state.conversion),
    }
    LOG("\n✓ Conversion successful!", level=1)
    LOG(f"  Output: {state.outputFile}", level=1)
    LOG(f"  {unit}: {len(state.conversion)}", level=1)
    return state


@chris_plugin(
    parser=parser,
    title="markweave - Markdown and slide-deck conversion",
    category="Utility",
    min_memory_limit="100Mi",
    min_cpu_limit="500m",
)
def main(options: Namespace, inputdir: Path, outputdir: Path):
    """
    Main entry point - convert one input text file.

    Orchestrates the pipeline:
        1. env_check: Validate paths and environment
        2. source_read: Read the input file
        3. source_convert: Segment into blocks or slides
        4. output_write: Render HTML or JSON
        5. results_report: Display results to user
    """
    state: ProgramState = ProgramState.state_createFromNamespace(
        options=options, inputdir=inputdir, outputdir=outputdir
    )

    state_connectToLogger(state)

    pipeline(state, env_check, source_read, source_convert, output_write, results_report)


if __name__ == "__main__":
    main()  # type: ignore  # @chris_plugin decorator transforms signature
