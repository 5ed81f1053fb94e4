"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time

# Check-ins strictly after this wall-clock minute are LATE.
LATE_CUTOFF = time(9, 30)

DEFAULT_HISTORY_LIMIT = 30
DEFAULT_LEAVE_PAGE_SIZE = 10
DEFAULT_PAYROLL_PAGE_SIZE = 12
DEFAULT_EMPLOYEE_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100

MAX_REASON_LENGTH = 1000
