# main.py

from PyQt5.QtWidgets import QApplication
from engine import LayoutEngine
from logsetup import configure_logging, logger
from mainwindow import MainWindow
import sys

# Graph shown on startup
INITIAL_COLLECTIONS = 100
INITIAL_MEMBERS = 5


def main():
    configure_logging()
    app = QApplication(sys.argv)
    engine = LayoutEngine()
    window = MainWindow(engine)
    window.graphWidget.generateRandomGraph(INITIAL_COLLECTIONS, INITIAL_MEMBERS)
    window.resize(1200, 900)
    window.show()
    logger.info("Viewer started")
    sys.exit(app.exec_())


if __name__ == '__main__':
    main()
