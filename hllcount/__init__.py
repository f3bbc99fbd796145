"""hllcount: approximate distinct counting with HyperLogLog.

The library is silent by default; see hllcount.logging_config to enable
logging.
"""

import logging

logging.getLogger(__name__).addHandler(logging.NullHandler())

from hllcount.logging_config import (
    configure_from_env,
    disable_logging,
    enable_console_logging,
    enable_file_logging,
    enable_json_logging,
    set_level,
    set_module_level,
)
from hllcount.sketching import EstimateRegime, HyperLogLog, RegisterArray, one_at_a_time_hash
from hllcount.sources import count_distinct, read_lines

__version__ = "0.1.0"

__all__ = [
    "EstimateRegime",
    "HyperLogLog",
    "RegisterArray",
    "configure_from_env",
    "count_distinct",
    "disable_logging",
    "enable_console_logging",
    "enable_file_logging",
    "enable_json_logging",
    "one_at_a_time_hash",
    "read_lines",
    "set_level",
    "set_module_level",
]
