# main.py
import argparse
import logging
import sys
import traceback

from PyQt6 import QtCore, QtGui, QtWidgets

from windows.main_window import MainWindow
from timeline.calendar_math import FormatError, Granularity
from timeline.models import ProjectWindow, create_project
from timeline.templates import BUILTIN_TEMPLATES, get_default_template
from theme.colors import (
    COLOR_PRIMARY_BG,
    COLOR_SECONDARY_BG,
    COLOR_TEXT,
    COLOR_TEXT_MUTED,
)

logger = logging.getLogger("timeline")


# -------------------------------------------------------------------
# High-DPI
# -------------------------------------------------------------------
def set_qt_attributes():
    QtGui.QGuiApplication.setHighDpiScaleFactorRoundingPolicy(
        QtCore.Qt.HighDpiScaleFactorRoundingPolicy.PassThrough
    )


def set_app_identity():
    QtCore.QCoreApplication.setOrganizationName("Timeline")
    QtCore.QCoreApplication.setApplicationName("Project Timeline")
    QtCore.QCoreApplication.setApplicationVersion("0.1.0")


# -------------------------------------------------------------------
# Dark theme: palette roles plus sidebar tooltips
# -------------------------------------------------------------------
_PALETTE_ROLES = {
    QtGui.QPalette.ColorRole.Window:          COLOR_PRIMARY_BG,
    QtGui.QPalette.ColorRole.Base:            COLOR_PRIMARY_BG,
    QtGui.QPalette.ColorRole.Text:            COLOR_TEXT,
    QtGui.QPalette.ColorRole.WindowText:      COLOR_TEXT,
    QtGui.QPalette.ColorRole.PlaceholderText: COLOR_TEXT_MUTED,
    QtGui.QPalette.ColorRole.Button:          COLOR_SECONDARY_BG,
    QtGui.QPalette.ColorRole.ButtonText:      COLOR_TEXT,
}


def apply_theme(app: QtWidgets.QApplication):
    pal = app.palette()
    for role, color in _PALETTE_ROLES.items():
        pal.setColor(role, QtGui.QColor(color))
    app.setPalette(pal)
    app.setStyleSheet(
        f"QToolTip {{ background: {COLOR_SECONDARY_BG}; color: {COLOR_TEXT}; padding: 4px 6px; }}"
    )


# -------------------------------------------------------------------
# Error reporting
# -------------------------------------------------------------------
def install_exception_hook():
    def _hook(exc_type, exc, tb):
        msg = "".join(traceback.format_exception(exc_type, exc, tb))
        logger.critical("unhandled exception\n%s", msg)
        if QtWidgets.QApplication.instance() is not None:
            QtWidgets.QMessageBox.critical(None, "Unexpected Error", msg[:2000])
    sys.excepthook = _hook


# -------------------------------------------------------------------
# Arguments
# -------------------------------------------------------------------
def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Project timeline editor")
    p.add_argument("--name", default="Untitled Project", help="Project name")
    p.add_argument("--start", required=True, help="Project start date (YYYY-MM-DD)")
    p.add_argument("--end", required=True, help="Project end date (YYYY-MM-DD)")
    p.add_argument("--granularity", default=Granularity.WEEK.value,
                   choices=[g.value for g in Granularity], help="Initial zoom level")
    p.add_argument("--template", default=get_default_template().id,
                   choices=[t.id for t in BUILTIN_TEMPLATES], help="Visual template id")
    p.add_argument("--log-level", default="WARNING",
                   choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Logging level")
    return p.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        window = ProjectWindow.from_strings(args.start, args.end, args.granularity)
        window.validate()
    except (FormatError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    set_qt_attributes()
    set_app_identity()
    install_exception_hook()

    app = QtWidgets.QApplication(sys.argv[:1])
    app.setStyle("Fusion")
    apply_theme(app)

    project = create_project(args.name, window, args.template)
    logger.info("opening %r: %s..%s", project.name, window.start_date, window.end_date)

    win = MainWindow(project)
    win.resize(1400, 900)
    win.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
