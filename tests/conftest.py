"""Pytest configuration shared by all test suites"""

import os
import sys
import tempfile
from pathlib import Path

# Add project root to path for storyrank imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# storyrank.main configures file logging on import; keep test logs out of the repo
os.environ.setdefault("LOG_FILE", str(Path(tempfile.gettempdir()) / "storyrank-tests" / "storyrank.log"))
