"""Console entry point that starts the capacity dashboard under Streamlit."""

import logging
import subprocess
import sys
from pathlib import Path
from typing import List, Optional

from ..utils import setup_logging

logger = logging.getLogger(__name__)

DASHBOARD_PATH = Path(__file__).parent / "simple_dashboard.py"


def build_command(extra_args: Optional[List[str]] = None) -> List[str]:
    """Streamlit command line for the dashboard; extra_args go to streamlit (e.g. --server.port 8600)."""
    return [sys.executable, "-m", "streamlit", "run", str(DASHBOARD_PATH), *(extra_args or [])]


def main(argv: Optional[List[str]] = None) -> int:
    """Run the dashboard until Streamlit exits; returns a process exit code."""
    setup_logging(log_level="INFO")
    cmd = build_command(sys.argv[1:] if argv is None else argv)
    
    logger.info(f"Starting capacity dashboard from {DASHBOARD_PATH}")
    try:
        subprocess.run(cmd, check=True)
    except FileNotFoundError:
        logger.error("Python interpreter not found while starting Streamlit")
        return 1
    except subprocess.CalledProcessError as e:
        logger.error(f"Dashboard exited with status {e.returncode}; is streamlit installed?")
        return e.returncode or 1
    except KeyboardInterrupt:
        logger.info("Dashboard stopped by operator")
    return 0


if __name__ == "__main__":
    sys.exit(main())
