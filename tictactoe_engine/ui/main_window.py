import logging

from ..game_logic import GameEngine, InvalidGameMoveError, PlayMove, Position, Reset, Win
from ..ui.board_widget import BoardWidget

from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout,
    QPushButton, QLabel, QMenuBar, QMenu, QSizePolicy
)
from PySide6.QtGui import QAction, QFont
from PySide6.QtCore import Qt, QSize, Slot

logger = logging.getLogger(__name__)

WINDOW_TITLE = "Tic-Tac-Toe"
MIN_WINDOW_SIZE = QSize(400, 480)


class TicTacToeWindow(QMainWindow):
    """
    main window UI and game flow
    """
    def __init__(self, engine=None):
        """
        init state, ui widgets, signals
        """
        super().__init__()
        self.engine = engine or GameEngine()
        self.board_widget = BoardWidget(self.engine, parent=self)
        self._setup_ui()
        self._refresh()

    def _setup_ui(self):
        '''window look + layout'''
        self.setWindowTitle(WINDOW_TITLE)
        self.setMinimumSize(MIN_WINDOW_SIZE)
        self.setStyleSheet("""
            QMainWindow { background-color: #222; }
            QPushButton { padding: 6px 14px; }
        """)
        self.central_widget = QWidget()
        self.setCentralWidget(self.central_widget)
        self.main_layout = QVBoxLayout(self.central_widget)

        self._create_menu_bar()            # top menu
        self.main_layout.addWidget(self.board_widget, 1)
        self.board_widget.cell_clicked.connect(self._on_cell_clicked)

        self._create_bottom_controls()     # status + buttons
        self.main_layout.addWidget(self.controls_bottom_widget)

    def _create_menu_bar(self):
        '''game menu actions'''
        menu_bar = QMenuBar()
        game_menu = QMenu("Game", self)
        new_action = QAction("New Game", self)
        new_action.triggered.connect(self.reset_game)
        quit_action = QAction("Quit", self)
        quit_action.triggered.connect(self.close)
        game_menu.addAction(new_action)
        game_menu.addSeparator(); game_menu.addAction(quit_action)
        menu_bar.addMenu(game_menu)
        self.setMenuBar(menu_bar)

    def _create_bottom_controls(self):
        # status label + new game button
        self.controls_bottom_widget = QWidget()
        hl = QHBoxLayout(self.controls_bottom_widget)
        self.controls_bottom_widget.setStyleSheet("background: transparent;")
        self.message_label = QLabel("")
        f = QFont(); f.setPointSize(12); self.message_label.setFont(f)
        self.message_label.setAlignment(Qt.AlignLeft | Qt.AlignVCenter)
        self.message_label.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Preferred)
        self.message_label.setWordWrap(True)
        self.reset_button = QPushButton("New Game"); self.reset_button.clicked.connect(self.reset_game)
        hl.addWidget(self.message_label); hl.addStretch(1); hl.addWidget(self.reset_button)

    def _update_message(self, text, is_error=False,
                        is_success=False, is_turn=False):
        # set message text + style
        style = "color: #eee;"
        if is_error:     style = "color: #ff8a8a; font-weight: bold;"
        elif is_success: style = "color: lime; font-weight: bold;"
        elif is_turn:    style = "color: #8acaff; font-weight: bold;"
        self.message_label.setStyleSheet(style)
        self.message_label.setText(text)

    def _refresh(self):
        # redraw board + status from engine state
        status = self.engine.status
        self.board_widget.set_accept_clicks(not status.is_over)
        self.board_widget.update()
        if isinstance(status, Win):
            self._update_message(f"player {status.player.value} wins!", is_success=True)
        elif status.is_over:
            self._update_message("it's a draw!", is_success=True)
        else:
            self._update_message(f"player {self.engine.current_player.value}'s turn", is_turn=True)

    @Slot(int)
    def _on_cell_clicked(self, index):
        try:
            self.engine.handle_event(PlayMove(Position(index)))
        except InvalidGameMoveError as e:
            logger.debug("rejected move at %d: %s", index, e)
            self._update_message(str(e), is_error=True)
            return
        self._refresh()

    @Slot()
    def reset_game(self):
        # fresh game, X to move
        self.engine.handle_event(Reset())
        self._refresh()
