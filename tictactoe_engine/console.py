"""
Console front end: draws the board as text and reads moves 0-8 from stdin.
"""

from .game_logic import (
    GameAlreadyWonError, GameEngine, Player, Position,
    PositionOutOfRangeError, SpaceOccupiedError, Win,
)

RESET_KEY = "r"
MOVE_PROMPT = f"Enter your move (0-8) or '{RESET_KEY}' to reset: "
NEW_GAME_PROMPT = f"Press '{RESET_KEY}' to reset the game or any other key to exit: "
ROW_DIVIDER = "-----------"


def board_as_string(engine):
    """
    three rows of ' X | O |   ' with dividers between them
    """
    marks = [cell.value if isinstance(cell, Player) else " " for cell in engine.board]
    rows = []
    for i in range(0, 9, 3):
        rows.append(f" {marks[i]} | {marks[i + 1]} | {marks[i + 2]} \n")
    return (ROW_DIVIDER + "\n").join(rows)


def handle_input(engine, text):
    """
    apply one line of user input
    returns True when the input was applied (move played or reset)
    """
    text = text.strip()
    if text == RESET_KEY:
        engine.reset()
        return True

    try:
        pos = Position(int(text))
    except ValueError as e:
        # PositionOutOfRangeError is a ValueError too
        if isinstance(e, PositionOutOfRangeError):
            print("!! Invalid position. Please enter a number between 0 and 8.")
        else:
            print(f"!! Invalid input. Please enter a number between 0 and 8 or '{RESET_KEY}' to reset.")
        return False

    try:
        engine.play_move(pos)
    except GameAlreadyWonError:
        print(f"!! The game is already over! Press '{RESET_KEY}' to reset.")
        return False
    except SpaceOccupiedError:
        print("!! That space is already occupied. Try another.")
        return False
    return True


def start_new_game(engine, input_func=input):
    """ask to play again; True if the board was reset"""
    answer = input_func(NEW_GAME_PROMPT)
    if answer.strip() != RESET_KEY:
        return False
    engine.reset()
    return True


def game_loop(engine, input_func=input):
    """keep asking until one input is accepted"""
    while not handle_input(engine, input_func(MOVE_PROMPT)):
        pass


def run(engine=None, input_func=input):
    """
    main console loop; returns when the player quits, at EOF or on Ctrl+C
    """
    engine = engine or GameEngine()
    print("--- Welcome to Tic-Tac-Toe ---")
    try:
        while True:
            print()
            print(board_as_string(engine))
            status = engine.status
            if isinstance(status, Win):
                print(f"Game over! Winner: {status.player.value}")
                if not start_new_game(engine, input_func):
                    break
            elif status.is_over:
                print("Game over! It's a draw!")
                if not start_new_game(engine, input_func):
                    break
            else:
                print(f"Current player: {engine.current_player.value}")
                game_loop(engine, input_func)
    except (EOFError, KeyboardInterrupt):
        print()
    print("Exiting.")
    return engine
