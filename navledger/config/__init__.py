"""Static configuration: comparison window presets."""

from navledger.config.ranges import DEFAULT_RANGE, TIME_RANGES, start_date_for_range

__all__ = ["DEFAULT_RANGE", "TIME_RANGES", "start_date_for_range"]
