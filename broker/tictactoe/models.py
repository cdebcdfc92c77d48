from __future__ import annotations

from dataclasses import dataclass, field

from broker.tictactoe.errors import CellOccupied, InvalidMoveFormat, InvalidPosition, WrongTurn
from broker.tictactoe.fsm import GameFSM
from broker.tictactoe.status import GameStatus

EMPTY = "-"
MARKS = ("X", "O")
UNDECIDED = "?"
TIE = "T"

WIN_PATTERNS: tuple[tuple[int, int, int], ...] = (
    (0, 1, 2), (3, 4, 5), (6, 7, 8),
    (0, 3, 6), (1, 4, 7), (2, 5, 8),
    (0, 4, 8), (2, 4, 6),
)


def _empty_board() -> list[str]:
    return [EMPTY] * 9


@dataclass(slots=True)
class Game:
    game_id: str
    board: list[str] = field(default_factory=_empty_board)
    current_player: str = "X"
    winner: str = UNDECIDED
    status: GameStatus = GameStatus.not_started

    def reset(self) -> str:
        """Full reset into a fresh, in-progress game. Returns the formatted state."""

        fsm = GameFSM(self)
        self.board = _empty_board()
        self.current_player = "X"
        self.winner = UNDECIDED
        fsm.restart()
        fsm.sync_status_to_model()
        return self.format_state()

    def make_move(self, move: str) -> bool:
        """Apply a two-character move token such as "X5".

        Returns False without touching anything when the game is not in
        progress. Raises a `GameError` subclass for an illegal move.
        """

        if self.status != GameStatus.in_progress:
            return False

        if len(move) != 2:
            raise InvalidMoveFormat(move)

        mark, position = move[0], move[1]
        if mark != self.current_player:
            raise WrongTurn(mark)

        # 1-based on the wire.
        index = ord(position) - ord("1")
        if index < 0 or index >= 9:
            raise InvalidPosition(position)
        if self.board[index] != EMPTY:
            raise CellOccupied(index)

        self.board[index] = mark

        if self.check_win(mark):
            self._finish(winner=mark)
        elif self.is_draw():
            self._finish(winner=TIE)
        else:
            self.current_player = "O" if self.current_player == "X" else "X"
        return True

    def check_win(self, mark: str) -> bool:
        return any(all(self.board[i] == mark for i in pattern) for pattern in WIN_PATTERNS)

    def is_draw(self) -> bool:
        return EMPTY not in self.board

    def format_state(self) -> str:
        # 1,2,3,4,5,6,7,8,9,player,winner,state
        return ",".join([*self.board, self.current_player, self.winner, str(int(self.status))])

    def _finish(self, *, winner: str) -> None:
        fsm = GameFSM(self)
        self.winner = winner
        fsm.finish()
        fsm.sync_status_to_model()
