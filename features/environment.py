"""
Behave environment configuration

This file is run before and after test scenarios to set up and tear down
the test environment.
"""

import os
import sys

# Add project root to Python path so we can import the anchoring package
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from anchoring.logging_config import GlobalIndent  # noqa: E402


def before_scenario(context, scenario):
    """Run before each scenario"""
    GlobalIndent.reset()
    for name in ("linearized", "selector", "result", "error"):
        if hasattr(context, name):
            delattr(context, name)
