"""Exit codes for the junitwatch CLI.

- 0: All tests passed
- 1: The run completed with test failures or errors
- 2: The run was aborted (runner crashed or report unreadable)
- 3: Invalid usage (bad arguments, broken config)
"""

from __future__ import annotations

EXIT_SUCCESS = 0
EXIT_TEST_FAILURES = 1
EXIT_RUN_ABORTED = 2
EXIT_INVALID_USAGE = 3
