# mainwindow.py
from PyQt5.QtWidgets import (
    QMainWindow, QStatusBar, QAction, QMessageBox, QDockWidget, QWidget,
    QVBoxLayout, QPushButton, QSpinBox, QLabel, QGroupBox, QShortcut
)
from PyQt5.QtCore import Qt
from PyQt5.QtGui import QKeySequence
from graphwidget import GraphWidget


class MainWindow(QMainWindow):
    def __init__(self, engine=None):
        super().__init__()
        self.setWindowTitle("Collection Graph Explorer")

        self.graphWidget = GraphWidget(self, engine=engine)
        self.setCentralWidget(self.graphWidget)

        self.setStatusBar(QStatusBar(self))

        self.createActions()
        self.createMenuBar()
        self.createControlsDock()
        self.createShortcuts()

    def createActions(self):
        self.generateAction = QAction("&Generate Random Graph", self, triggered=self.generateGraph)
        self.resetAction = QAction("&Reset Graph", self, triggered=self.graphWidget.resetGraph)
        self.pauseAction = QAction("&Pause Simulation", self, triggered=self.togglePause)
        self.pauseAction.setCheckable(True)

        self.graphInfoAction = QAction("&Graph Info", self, triggered=self.showGraphInfo)

        self.zoomInAction = QAction("Zoom &In", self, triggered=self.graphWidget.zoomIn)
        self.zoomOutAction = QAction("Zoom &Out", self, triggered=self.graphWidget.zoomOut)
        self.centerAction = QAction("&Center Graph", self, triggered=self.graphWidget.centerGraph)

        self.aboutAction = QAction("&About", self, triggered=self.showAbout)

    def createMenuBar(self):
        menuBar = self.menuBar()

        graphMenu = menuBar.addMenu("&Graph")
        graphMenu.addAction(self.generateAction)
        graphMenu.addAction(self.resetAction)
        graphMenu.addSeparator()
        graphMenu.addAction(self.pauseAction)
        graphMenu.addAction(self.graphInfoAction)

        viewMenu = menuBar.addMenu("&View")
        viewMenu.addAction(self.zoomInAction)
        viewMenu.addAction(self.zoomOutAction)
        viewMenu.addAction(self.centerAction)
        aboutMenu = menuBar.addMenu("&About")
        aboutMenu.addAction(self.aboutAction)

    def createControlsDock(self):
        dock = QDockWidget("Controls", self)
        dock.setAllowedAreas(Qt.RightDockWidgetArea)

        mainControlsWidget = QWidget()
        mainLayout = QVBoxLayout(mainControlsWidget)
        mainLayout.setAlignment(Qt.AlignTop)

        genGroup = QGroupBox("Random Graph")
        genLayout = QVBoxLayout()
        self.spinCollections = QSpinBox()
        self.spinCollections.setRange(0, 100000)
        self.spinCollections.setValue(100)
        self.spinCollections.setToolTip("Collections to generate")
        self.spinMembers = QSpinBox()
        self.spinMembers.setRange(0, 10000)
        self.spinMembers.setValue(5)
        self.spinMembers.setToolTip("Members to generate")
        btn_generate = QPushButton("Generate (G)")
        btn_reset = QPushButton("Reset (R)")
        genLayout.addWidget(QLabel("Collections:"))
        genLayout.addWidget(self.spinCollections)
        genLayout.addWidget(QLabel("Members:"))
        genLayout.addWidget(self.spinMembers)
        genLayout.addWidget(btn_generate)
        genLayout.addWidget(btn_reset)
        genGroup.setLayout(genLayout)

        simGroup = QGroupBox("Simulation")
        simLayout = QVBoxLayout()
        self.btnPause = QPushButton("Pause (P)")
        btn_info = QPushButton("Graph Info (I)")
        simLayout.addWidget(self.btnPause)
        simLayout.addWidget(btn_info)
        simGroup.setLayout(simLayout)

        viewGroup = QGroupBox("View")
        viewLayout = QVBoxLayout()
        btn_center = QPushButton("Center Graph (C)")
        btn_zoom_in = QPushButton("Zoom In (+)")
        btn_zoom_out = QPushButton("Zoom Out (-)")
        viewLayout.addWidget(btn_center)
        viewLayout.addWidget(btn_zoom_in)
        viewLayout.addWidget(btn_zoom_out)
        viewGroup.setLayout(viewLayout)

        mainLayout.addWidget(genGroup)
        mainLayout.addWidget(simGroup)
        mainLayout.addWidget(viewGroup)
        mainLayout.addSpacing(15)
        mainLayout.addWidget(QLabel("Click a node to queue it for discovery.\n"
                                    "Drag nodes to hold them; drag empty space to pan."))

        dock.setWidget(mainControlsWidget)
        self.addDockWidget(Qt.RightDockWidgetArea, dock)

        btn_generate.clicked.connect(self.generateAction.trigger)
        btn_reset.clicked.connect(self.resetAction.trigger)
        self.btnPause.clicked.connect(self.pauseAction.trigger)
        btn_info.clicked.connect(self.graphInfoAction.trigger)
        btn_center.clicked.connect(self.centerAction.trigger)
        btn_zoom_in.clicked.connect(self.zoomInAction.trigger)
        btn_zoom_out.clicked.connect(self.zoomOutAction.trigger)

    def createShortcuts(self):
        QShortcut(QKeySequence("G"), self, self.generateAction.trigger)
        QShortcut(QKeySequence("R"), self, self.resetAction.trigger)
        QShortcut(QKeySequence("P"), self, self.pauseAction.trigger)
        QShortcut(QKeySequence("Space"), self, self.pauseAction.trigger)
        QShortcut(QKeySequence("I"), self, self.graphInfoAction.trigger)
        QShortcut(QKeySequence("C"), self, self.centerAction.trigger)
        QShortcut(QKeySequence(Qt.Key_Plus), self, self.zoomInAction.trigger)
        QShortcut(QKeySequence(Qt.Key_Equal), self, self.zoomInAction.trigger)
        QShortcut(QKeySequence(Qt.Key_Minus), self, self.zoomOutAction.trigger)
        QShortcut(QKeySequence("F1"), self, self.aboutAction.trigger)

    def closeEvent(self, event):
        # Child widgets get no close event when the main window closes
        self.graphWidget.shutdown()
        super().closeEvent(event)

    def generateGraph(self):
        self.graphWidget.generateRandomGraph(self.spinCollections.value(), self.spinMembers.value())

    def togglePause(self):
        paused = self.graphWidget.togglePause()
        # Keep action and button in sync whichever one fired
        self.pauseAction.setChecked(paused)
        self.btnPause.setText("Resume (P)" if paused else "Pause (P)")

    def showGraphInfo(self):
        store = self.graphWidget.store
        stats = store.get_stats()
        ok = store.validate_invariants(verbose=True)
        self.statusBar().showMessage(
            f"Entities: {stats['entities']} (collections={stats['collections']}, members={stats['members']}), "
            f"Edges: {stats['edges']}, Scraped: {stats['scraped']}, "
            f"Pending requests: {self.graphWidget.engine.requests.qsize()}",
            6000
        )
        if not ok:
            QMessageBox.warning(self, "Graph Invariants", "The graph store is inconsistent; see the log for details.")

    def showAbout(self):
        text = """
        <div style='min-width:380px'>
        <h3 style='margin:0 0 6px 0'>Collection Graph Explorer</h3>
        <div style='margin-top:4px; line-height:1.55; color:#333'>
            A live force-directed view of a bipartite graph of collections and their members.<br>
            Nodes repel each other, membership links pull together, and newly discovered links
            stream in while the layout keeps running.
        </div>
        <div style='margin-top:12px; line-height:1.45'>
            Circles are collections, squares are members. Blue nodes have been scraped.<br>
            Click a node to request its discovery; drag to hold it in place.
        </div>
        </div>
        """
        dlg = QMessageBox(self)
        dlg.setWindowTitle("About")
        dlg.setTextFormat(Qt.RichText)
        dlg.setText(text)
        dlg.setStandardButtons(QMessageBox.Ok)
        dlg.setTextInteractionFlags(Qt.TextBrowserInteraction | Qt.LinksAccessibleByMouse)
        dlg.exec_()
