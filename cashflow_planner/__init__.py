"""Top-level package for the Cash Flow Planner.

The planner takes a month's starting checking balance plus dated income
and expense entries and works out the running balance and the savings
transfers needed to keep it from going negative.  The primary modules are:

* ``ledger`` - the timeline / transfer computation
* ``entries`` - creating and validating entries
* ``plan_storage`` - saving each month's plan to disk
* ``dashboard`` - a Streamlit app that ties everything together

To run the dashboard from the command line you can execute:

```bash
streamlit run cashflow_planner/dashboard.py
```
"""

from .ledger import compute_timeline  # noqa: F401  # re-exported for convenience
from .models import (  # noqa: F401
    Entry,
    EventKind,
    LedgerResult,
    MonthPlan,
    Stats,
    TimelineRow,
    TransferRecommendation,
)
from .period import Period  # noqa: F401

__all__ = [
    "compute_timeline",
    "Entry",
    "EventKind",
    "LedgerResult",
    "MonthPlan",
    "Period",
    "Stats",
    "TimelineRow",
    "TransferRecommendation",
]
