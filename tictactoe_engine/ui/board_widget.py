from PySide6.QtWidgets import QWidget, QSizePolicy
from PySide6.QtCore import Qt, QSize, Signal, QPointF, QRectF
from PySide6.QtGui import QPainter, QColor, QPen

from ..game_logic import BOARD_SIZE, Player, Position, Win

BACKGROUND_COLOR = QColor("#333")
GRID_COLOR = QColor("#555")
X_COLOR = QColor("#ff5555")
O_COLOR = QColor("#55aaff")
WIN_FILL_COLOR = QColor(255, 255, 255, 20)


class BoardWidget(QWidget):
    """
    custom widget to draw and click on tic-tac-toe board
    """
    cell_clicked = Signal(int)  # emits cell index on click

    def __init__(self, engine, parent=None):
        super().__init__(parent)
        self.engine = engine  # read-only use, moves go through the window
        self.setSizePolicy(QSizePolicy.Ignored, QSizePolicy.Ignored)
        self.setMinimumSize(QSize(150, 150))
        self._accept_clicks = True      # toggle click handling

    def set_accept_clicks(self, accept):
        # enable/disable user input
        self._accept_clicks = accept

    def heightForWidth(self, width):
        # keep square shape
        return width

    def hasHeightForWidth(self):
        return True

    def _geometry(self):
        # square board centered in the widget
        w, h = self.width(), self.height()
        side = min(w, h)
        return (w - side) / 2, (h - side) / 2, side

    def cell_at(self, x, y):
        """
        map widget coords to a board Position, None outside the grid
        """
        ox, oy, side = self._geometry()
        if side <= 0 or not (ox <= x < ox + side and oy <= y < oy + side):
            return None
        cell = side / BOARD_SIZE
        col = int((x - ox) // cell); row = int((y - oy) // cell)
        # clamp to valid range
        row = max(0, min(row, BOARD_SIZE - 1)); col = max(0, min(col, BOARD_SIZE - 1))
        return Position.from_row_col(row, col)

    def paintEvent(self, event):
        """
        draw grid, X/O marks, and highlight winning line
        """
        painter = QPainter(self)
        try:
            painter.setRenderHint(QPainter.Antialiasing, True)
            offset_x, offset_y, side = self._geometry()
            painter.fillRect(self.rect(), BACKGROUND_COLOR)
            cell_size = side / BOARD_SIZE

            # winning cells get a faint fill
            status = self.engine.status
            if isinstance(status, Win):
                for idx in status.line:
                    pos = Position(idx)
                    painter.fillRect(QRectF(offset_x + pos.col * cell_size,
                                            offset_y + pos.row * cell_size,
                                            cell_size, cell_size), WIN_FILL_COLOR)

            # grid lines
            painter.setPen(QPen(GRID_COLOR, 2))
            for i in range(1, BOARD_SIZE):
                x = offset_x + i * cell_size
                painter.drawLine(int(x), int(offset_y), int(x), int(offset_y + side))
                y = offset_y + i * cell_size
                painter.drawLine(int(offset_x), int(y), int(offset_x + side), int(y))

            # draw marks
            for idx, sym in enumerate(self.engine.board):
                if sym is None: continue
                pos = Position(idx)
                cx = offset_x + pos.col * cell_size + cell_size / 2
                cy = offset_y + pos.row * cell_size + cell_size / 2
                rad = cell_size / 2 * 0.6
                if sym is Player.X:
                    painter.setPen(QPen(X_COLOR, 4))
                    # two crossing lines
                    painter.drawLine(QPointF(cx - rad, cy - rad), QPointF(cx + rad, cy + rad))
                    painter.drawLine(QPointF(cx + rad, cy - rad), QPointF(cx - rad, cy + rad))
                else:
                    painter.setPen(QPen(O_COLOR, 4))
                    painter.drawEllipse(QPointF(cx, cy), rad, rad)

            # thick stroke through the winning line
            if isinstance(status, Win):
                first, last = Position(status.line[0]), Position(status.line[-1])
                color = X_COLOR if status.player is Player.X else O_COLOR
                painter.setPen(QPen(color, 6, Qt.SolidLine, Qt.RoundCap, Qt.RoundJoin))
                painter.drawLine(
                    QPointF(offset_x + (first.col + 0.5) * cell_size, offset_y + (first.row + 0.5) * cell_size),
                    QPointF(offset_x + (last.col + 0.5) * cell_size, offset_y + (last.row + 0.5) * cell_size),
                )
        finally:
            painter.end()

    def mouseReleaseEvent(self, event):
        """
        handle clicks: map coords to board cell and emit
        """
        if not self._accept_clicks:
            return
        pos = self.cell_at(event.position().x(), event.position().y())
        # illegal cells never reach the engine
        if pos is None or not self.engine.is_valid_move(pos):
            return
        self.cell_clicked.emit(pos.index)  # notify main window
