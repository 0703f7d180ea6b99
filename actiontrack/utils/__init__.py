"""Shared utilities for the tracker."""

from actiontrack.utils.io import read_excel_grid, write_output
from actiontrack.utils.transforms import cell_text, parse_day, parse_timestamp, to_day
from actiontrack.utils.validators import validate_dataframe
from actiontrack.utils.types import LabelCount, ResolutionStats, ValidationOutcome
