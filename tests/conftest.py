import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PyQt6 import QtWidgets


@pytest.fixture(scope="session", autouse=True)
def qapp():
    """One QApplication for the whole run; QObject signals and QTimer need it."""
    app = QtWidgets.QApplication.instance() or QtWidgets.QApplication([])
    yield app
