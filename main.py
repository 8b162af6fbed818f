import argparse
import logging
import sys

from tictactoe_engine import console

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# COLOR CONSTANTS
# -----------------------------------------------------------------------------

WINDOW_COLOR = (53, 53, 53)
BASE_COLOR = (35, 35, 35)
ALT_BASE_COLOR = (53, 53, 53)
BUTTON_COLOR = (66, 66, 66)
HIGHLIGHT_COLOR = (42, 130, 218)
PLACEHOLDER_TEXT_COLOR = (160, 160, 160)
DISABLED_TEXT_COLOR = (127, 127, 127)

# -----------------------------------------------------------------------------
# PALETTE SETUP
# -----------------------------------------------------------------------------

def apply_default_palette(app):
    """
    Apply the default dark theme palette using predefined constants.
    """
    from PySide6.QtCore import Qt
    from PySide6.QtGui import QColor, QPalette

    palette = QPalette()
    # Standard roles
    palette.setColor(QPalette.Window, QColor(*WINDOW_COLOR))
    palette.setColor(QPalette.WindowText, Qt.white)
    palette.setColor(QPalette.Base, QColor(*BASE_COLOR))
    palette.setColor(QPalette.AlternateBase, QColor(*ALT_BASE_COLOR))
    palette.setColor(QPalette.ToolTipBase, Qt.white)
    palette.setColor(QPalette.ToolTipText, Qt.black)
    palette.setColor(QPalette.Text, Qt.white)
    palette.setColor(QPalette.Button, QColor(*BUTTON_COLOR))
    palette.setColor(QPalette.ButtonText, Qt.white)
    palette.setColor(QPalette.BrightText, Qt.red)
    palette.setColor(QPalette.Highlight, QColor(*HIGHLIGHT_COLOR))
    palette.setColor(QPalette.HighlightedText, Qt.white)
    palette.setColor(QPalette.PlaceholderText, QColor(*PLACEHOLDER_TEXT_COLOR))
    # Disabled roles
    for role in (QPalette.Text, QPalette.ButtonText, QPalette.WindowText):
        palette.setColor(QPalette.Disabled, role, QColor(*DISABLED_TEXT_COLOR))
    app.setPalette(palette)

# -----------------------------------------------------------------------------
# FRONT ENDS
# -----------------------------------------------------------------------------

def run_gui(argv):
    """
    Start the Qt front end. Raises ImportError when PySide6 is unavailable.
    """
    from PySide6.QtWidgets import QApplication
    from tictactoe_engine.ui.main_window import TicTacToeWindow

    app = QApplication(argv)
    app.setStyle('Fusion')

    # Apply default dark theme
    apply_default_palette(app)

    window = TicTacToeWindow()
    window.show()
    app.exec()


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Play tic-tac-toe in the terminal or a window.")
    parser.add_argument("-g", "--gui", action="store_true", help="use the desktop GUI instead of the console")
    return parser.parse_args(argv)


def main(argv=None):
    logging.basicConfig(level=logging.WARNING)
    args = parse_args(argv)

    if args.gui:
        try:
            run_gui(sys.argv[:1])
            return 0
        except ImportError as e:
            logger.debug("GUI import failed", exc_info=True)
            print(f"Warning: GUI not available ({e}); falling back to console.", file=sys.stderr)

    console.run()
    return 0

# -----------------------------------------------------------------------------
# ENTRY POINT
# -----------------------------------------------------------------------------

if __name__ == '__main__':
    sys.exit(main())
