"""Top-level pytest configuration.

Forces Qt onto the offscreen platform before any test module imports
PySide6. The QApplication fixture lives in ``tests/conftest.py``.
"""

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
