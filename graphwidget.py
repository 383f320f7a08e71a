# graphwidget.py

from PyQt5.QtWidgets import QGraphicsView, QGraphicsScene, QMenu
from PyQt5.QtWidgets import QGraphicsScene as QGS
from PyQt5.QtCore import Qt, QPointF, QRectF, QTimer, QElapsedTimer
from PyQt5.QtGui import QPen, QColor, QPainter, QPainterPath
from typing import Optional

from engine import LayoutEngine, RateCounter
from interaction import Interaction
from logsetup import logger
from phys import Position

# Zoom behavior constants (stabilized)
ZOOM_FACTOR = 1.5
ZOOM_MAX = 5000.0
MIN_ABS_SCALE = 1e-3

# Render cadence; the simulation runs at its own fixed tick rate underneath
ANIM_FPS = 60

# Node glyphs (scene units)
NODE_HALF = 5.0
EDGE_WIDTH = 0.5

# Fixed scene rect so panning is never clamped by the content bounds
SCENE_EXTENT = 1.0e6


class GraphWidget(QGraphicsView):
    def __init__(self, parent=None, engine: Optional[LayoutEngine] = None):
        super().__init__(parent)
        self.engine = engine if engine is not None else LayoutEngine()
        self.interaction = Interaction(self.engine.store, self.engine.config.interaction)

        scene = QGraphicsScene(self)
        scene.setItemIndexMethod(QGS.NoIndex)
        self.setScene(scene)
        scene.setSceneRect(QRectF(-SCENE_EXTENT, -SCENE_EXTENT, 2 * SCENE_EXTENT, 2 * SCENE_EXTENT))

        self.setRenderHint(QPainter.Antialiasing)
        self.setDragMode(QGraphicsView.NoDrag)
        self.setTransformationAnchor(QGraphicsView.AnchorUnderMouse)
        self.setViewportUpdateMode(QGraphicsView.FullViewportUpdate)
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        self.setVerticalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        self.setMouseTracking(True)

        self.currentZoom = 1.0
        self.panning = False
        self.lastPanPoint = None
        self.lastMouseScene: Optional[QPointF] = None

        self.background = QColor(255, 255, 255)
        self.nodeColor = QColor(0, 0, 0)
        self.hoverColor = QColor("#e74c3c")
        self.scrapedColor = QColor("#3498db")
        self.edgeColor = QColor(255, 0, 0, 51)

        self.fps = RateCounter(self.engine.config.engine.rate_samples)
        self._frameClock = QElapsedTimer()
        self._frameClock.start()
        self._timer = QTimer(self)
        self._timer.timeout.connect(self._onFrame)
        self.setAnimationFps(ANIM_FPS)
        self._timer.start()

    @property
    def store(self):
        return self.engine.store

    # --------------------------
    # Frame loop
    # --------------------------
    def setAnimationFps(self, fps: int):
        self._timer.setInterval(max(1, int(round(1000.0 / max(1, int(fps))))))

    def _onFrame(self):
        elapsed = self._frameClock.restart() / 1000.0
        try:
            self.engine.update(elapsed)
            if self.lastMouseScene is not None and not self.panning:
                self.interaction.update_under_mouse(self._toPosition(self.lastMouseScene))
        except Exception:
            logger.exception("Simulation tick failed")
            self._timer.stop()
            self._status("Simulation stopped after an error (see log).")
            return
        self.fps.tick()
        self.updateGraphScene()

    def _status(self, msg: str, timeout_ms: int = 0):
        main_window = self.parent()
        if main_window is not None and hasattr(main_window, "statusBar"):
            main_window.statusBar().showMessage(msg, timeout_ms)

    # --------------------------
    # Graph lifecycle
    # --------------------------
    def _rebindStore(self):
        self.interaction = Interaction(self.engine.store, self.engine.config.interaction)

    def generateRandomGraph(self, collections: int, members: int):
        calls = self.engine.generate_random_graph(collections, members)
        self.updateGraphScene()
        self.centerGraph()
        stats = self.store.get_stats()
        self._status(f"Generated {calls} links. Total: {stats['collections']} collections, "
                     f"{stats['members']} members, {stats['edges']} edges", 4000)

    def resetGraph(self):
        self.engine.reset()
        self._rebindStore()
        self.resetTransform()
        self.currentZoom = 1.0
        self.updateGraphScene()

    def togglePause(self) -> bool:
        paused = self.engine.toggle_pause()
        self._status("Paused" if paused else "Running", 2000)
        return paused

    # --------------------------
    # Drawing
    # --------------------------
    def drawBackground(self, painter, rect):
        painter.fillRect(rect, self.background)

    def _visibleRect(self) -> QRectF:
        return self.mapToScene(self.viewport().rect()).boundingRect()

    def updateGraphScene(self):
        self.scene().clear()
        store = self.store
        visible = self._visibleRect()

        positions = [self.engine.render_position(i) for i in store.arena.ids()]

        edge_pen = QPen(self.edgeColor)
        edge_pen.setWidthF(EDGE_WIDTH)
        edge_pen.setCapStyle(Qt.RoundCap)

        lines = 0
        edges_path = QPainterPath()
        for edge in store.getEdges():
            c_id, m_id = edge.key()
            p1, p2 = positions[c_id], positions[m_id]
            if (p1 - p2).chebyshev() <= 1.0:
                continue
            q1, q2 = QPointF(p1.x, p1.y), QPointF(p2.x, p2.y)
            if not (visible.contains(q1) or visible.contains(q2)):
                continue
            edges_path.moveTo(q1)
            edges_path.lineTo(q2)
            lines += 1
        if lines:
            item = self.scene().addPath(edges_path, edge_pen)
            item.setZValue(-10)

        # Collections are circles, members squares; hovered / scraped get their own path
        paths = {key: QPainterPath() for key in ("plain", "hover", "scraped")}
        nodes = 0
        d = 2 * NODE_HALF
        for entity, pos in zip(store.arena, positions):
            if not visible.contains(QPointF(pos.x, pos.y)):
                continue
            key = "hover" if entity.is_under_mouse else ("scraped" if entity.is_scraped else "plain")
            if entity.isCollection():
                paths[key].addEllipse(pos.x - NODE_HALF, pos.y - NODE_HALF, d, d)
            else:
                paths[key].addRect(pos.x - NODE_HALF, pos.y - NODE_HALF, d, d)
            nodes += 1

        no_pen = QPen(Qt.NoPen)
        for key, color in (("plain", self.nodeColor), ("scraped", self.scrapedColor),
                           ("hover", self.hoverColor)):
            if not paths[key].isEmpty():
                item = self.scene().addPath(paths[key], no_pen, color)
                item.setZValue(10 if key != "hover" else 20)

        self._showStatusLine(nodes, lines)
        self.viewport().update()

    def _showStatusLine(self, nodes: int, lines: int):
        stats = self.store.get_stats()
        text = (f"tps: {self.engine.tps.value():.2f}  fps: {self.fps.value():.2f}  "
                f"collections, members, links: {stats['collections']} {stats['members']} {stats['edges']}  "
                f"drawn: {nodes}/{stats['entities']} {lines}/{stats['edges']}")
        if self.engine.paused:
            text += "  [paused]"
        for entity_id in self.interaction.hovered():
            e = self.store.arena[entity_id]
            text += f"  {e.getKind().value}: {e.getUrl()}"
        self._status(text)

    # --------------------------
    # Camera
    # --------------------------
    def _scaleNow(self):
        return max(1e-9, self.transform().m11())

    def zoomIn(self):
        scale_now = self._scaleNow()
        target = min(ZOOM_MAX, scale_now * ZOOM_FACTOR)
        if target <= scale_now + 1e-12:
            return
        factor = target / scale_now
        self.scale(factor, factor)
        self.currentZoom = self.transform().m11()

    def zoomOut(self):
        scale_now = self._scaleNow()
        target = scale_now / ZOOM_FACTOR
        if target <= MIN_ABS_SCALE:
            return
        factor = target / scale_now
        self.scale(factor, factor)
        self.currentZoom = self.transform().m11()

    def centerGraph(self):
        if len(self.store) == 0:
            return
        xs = [e.position.x for e in self.store.arena]
        ys = [e.position.y for e in self.store.arena]
        rect = QRectF(min(xs), min(ys), max(xs) - min(xs), max(ys) - min(ys))
        adjust = max(50, len(self.store) / 100)
        safe_rect = rect.adjusted(-adjust, -adjust, adjust, adjust)
        if safe_rect.width() < 1e-6 or safe_rect.height() < 1e-6:
            return
        self.fitInView(safe_rect, Qt.KeepAspectRatio)
        self.currentZoom = self.transform().m11()

    # --------------------------
    # Input
    # --------------------------
    def _toPosition(self, scenePos: QPointF) -> Position:
        return Position(scenePos.x(), scenePos.y())

    def wheelEvent(self, event):
        if event.angleDelta().y() > 0:
            self.zoomIn()
        else:
            self.zoomOut()
        event.accept()

    def mousePressEvent(self, event):
        if event.button() == Qt.LeftButton:
            scenePos = self.mapToScene(event.pos())
            self.interaction.update_under_mouse(self._toPosition(scenePos))
            if not self.interaction.start_drag():
                self.panning = True
                self.lastPanPoint = event.pos()
                self.setCursor(Qt.ClosedHandCursor)
        super().mousePressEvent(event)

    def mouseMoveEvent(self, event):
        scenePos = self.mapToScene(event.pos())
        self.lastMouseScene = scenePos
        if self.panning:
            delta = event.pos() - self.lastPanPoint
            self.lastPanPoint = event.pos()
            self.horizontalScrollBar().setValue(self.horizontalScrollBar().value() - delta.x())
            self.verticalScrollBar().setValue(self.verticalScrollBar().value() - delta.y())
        elif event.buttons() & Qt.LeftButton:
            self.interaction.update_drag(self._toPosition(scenePos))
        super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event):
        if event.button() == Qt.LeftButton:
            if self.panning:
                self.panning = False
                self.setCursor(Qt.ArrowCursor)
            clicked = self.interaction.stop_drag()
            if clicked is not None:
                req = self.engine.request_discovery(clicked)
                if req is None:
                    self._status("Discovery queue is full, click ignored", 3000)
                else:
                    self._status(f"Queued {req.kind.value} {req.url} for discovery", 3000)
        super().mouseReleaseEvent(event)

    def contextMenuEvent(self, event):
        menu = QMenu(self)
        menu.addAction("Pause / Resume (P)", self.togglePause)
        menu.addAction("Center Graph (C)", self.centerGraph)
        menu.addSeparator()
        menu.addAction("Zoom In (+)", self.zoomIn)
        menu.addAction("Zoom Out (-)", self.zoomOut)
        menu.exec_(event.globalPos())

    def shutdown(self):
        self._timer.stop()
        self.engine.close()

    def closeEvent(self, event):
        self.shutdown()
        super().closeEvent(event)
