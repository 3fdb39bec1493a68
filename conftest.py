"""
Root pytest configuration.

Puts the project root on sys.path and turns off the simulated House View
latency before any application module reads its settings.
"""

import os
import sys
from pathlib import Path

root_str = str(Path(__file__).parent.absolute())
if root_str in sys.path:
    sys.path.remove(root_str)
sys.path.insert(0, root_str)

os.environ["DORA_RAG_LATENCY_MS"] = "0"
