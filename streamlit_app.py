"""
Entry point for Streamlit Cloud deployment.

Lives in the root directory so Streamlit Cloud finds it; it runs the
actual app from order_intake/ui/streamlit_app.py.
"""

import sys
import os
from pathlib import Path

os.environ["STREAMLIT_SERVER_HEADLESS"] = "true"

# Make the order_intake package importable without installation
sys.path.insert(0, str(Path(__file__).parent))

from order_intake.ui.streamlit_app import *  # noqa: F401, F403
