#!/usr/bin/env python3
"""Direct launcher for the Cash Flow Planner dashboard."""

import subprocess
import sys
from pathlib import Path

project_root = Path(__file__).parent.resolve()
dashboard_path = project_root / "cashflow_planner" / "dashboard.py"

if __name__ == "__main__":
    raise SystemExit(
        subprocess.run([sys.executable, "-m", "streamlit", "run", str(dashboard_path)]).returncode
    )
