"""
Shared test configuration.

Adds both the project root and src/ to sys.path so that flat modules
(insight_engine, stats_calculator, api, ...) and the analytics/, pipeline/
and routes/ packages import the same way they do at runtime.
"""

import os
import sys

_project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
_src_dir = os.path.join(_project_root, "src")

if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

# src/ first for module resolution of the flat layout
if _src_dir not in sys.path:
    sys.path.insert(0, _src_dir)
