"""Writers module for exporting simulation results."""

from line_sim.writers.base import BaseWriter
from line_sim.writers.results_writer import (
    ResultsWriter,
    sensitivity_frame,
    wait_times_frame,
)

__all__ = ["BaseWriter", "ResultsWriter", "sensitivity_frame", "wait_times_frame"]
