"""
Program state model and pipeline helper

Defines ProgramState dataclass for the functional pipeline pattern and
the pipeline() helper for composing transformation stages.
"""

import dataclasses
from pathlib import Path
from argparse import Namespace
from typing import Any, Optional, Type, TypeVar, Dict, Callable, Union
from dataclasses import dataclass, field
from functools import reduce

from .blocks import DocumentResult
from .slides import DeckResult


PS = TypeVar("PS", bound="ProgramState")


@dataclass
class ProgramState:
    """
    Central state container for the conversion pipeline (state bus pattern).

    This dataclass carries all program state through the functional pipeline,
    with each stage adding new fields as the conversion progresses.

    Pipeline stages and their state additions:
        - Initial: inputdir, outputdir, verbosity, inputFile, dialect, format, outputSubdir
        - env_check: inputSourceFile, outputTargetdir, envOK
        - source_read: sourceText
        - source_convert: resolvedDialect, conversion
        - output_write: outputFile
        - results_report: (no additions, terminal stage)

    Attributes:
        inputdir: Directory containing the source text file
        outputdir: Base output directory
        verbosity: Logging verbosity level (1-3)
        inputFile: Input filename (relative to inputdir)
        dialect: Requested dialect ("auto", "markdown" or "slides")
        format: Output format ("html" or "json")
        outputSubdir: Subdirectory within outputdir for output
        envOK: Environment validation passed
        inputSourceFile: Resolved path to the input file
        outputTargetdir: Final output directory (outputdir + outputSubdir)
        sourceText: Raw input text
        resolvedDialect: Dialect actually used after auto-detection
        conversion: DocumentResult or DeckResult
        outputFile: Path of the written output file
    """

    # CLI arguments
    inputdir: Optional[Path] = field(default=None)
    outputdir: Optional[Path] = field(default=None)
    verbosity: int = field(default=1)
    inputFile: str = field(default="")
    dialect: str = field(default="auto")
    format: str = field(default="html")
    outputSubdir: str = field(default=".")

    # Pipeline state
    envOK: bool = field(default=False)
    inputSourceFile: Path = field(default=Path("/"))
    outputTargetdir: Path = field(default=Path("/"))
    sourceText: str = field(default="")
    resolvedDialect: str = field(default="")
    conversion: Optional[Union[DocumentResult, DeckResult]] = field(default=None)
    outputFile: Optional[Path] = field(default=None)
    report: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def state_createFromNamespace(
        cls: Type["ProgramState"], options: Namespace, inputdir: Path, outputdir: Path
    ) -> "ProgramState":
        """
        Create ProgramState from argparse Namespace and directory paths.

        Args:
            options: Parsed CLI arguments (inputFile, dialect, etc.)
            inputdir: Directory containing source files
            outputdir: Directory for conversion output

        Returns:
            ProgramState instance with all CLI options as attributes
        """
        options_dict = vars(options)

        # Only keep options that map onto ProgramState fields
        valid_fields = {f.name for f in dataclasses.fields(cls)}
        filtered_options = {k: v for k, v in options_dict.items() if k in valid_fields}

        merged_args = {**filtered_options, "inputdir": inputdir, "outputdir": outputdir}
        return cls(**merged_args)

    def copy(self: PS) -> PS:
        """
        Creates a shallow copy of the ProgramState instance.

        Returns:
            A new ProgramState instance.
        """
        return type(self)(**self.__dict__)


def pipeline(
    initial_state: ProgramState, *stages: Callable[[ProgramState], ProgramState]
) -> ProgramState:
    """
    Execute a functional pipeline of state transformations.

    Each stage is a function (ProgramState) -> ProgramState that receives
    the output of the previous stage and returns a new state.

    Example:
        final_state = pipeline(
            initial_state,
            env_check,
            source_read,
            source_convert,
            output_write,
            results_report
        )

    This is equivalent to:
        results_report(output_write(source_convert(source_read(env_check(initial_state)))))
    """
    return reduce(lambda state, stage: stage(state), stages, initial_state)
