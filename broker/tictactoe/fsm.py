from __future__ import annotations

from typing import TYPE_CHECKING

from statemachine import State, StateMachine

from broker.tictactoe.status import GameStatus

if TYPE_CHECKING:
    from broker.tictactoe.models import Game


class GameFSM(StateMachine):
    """Lifecycle guard around a `Game`.

    not_started -> in_progress -> done. `restart` is the only way out of done.
    Board mutation lives on the model; the FSM only decides which lifecycle
    transitions are legal.
    """

    not_started = State("Not started", value="not_started", initial=True)
    in_progress = State("In progress", value="in_progress")
    done = State("Done", value="done")

    restart = not_started.to(in_progress) | in_progress.to.itself() | done.to(in_progress)
    finish = in_progress.to(done)

    def __init__(self, game: Game):
        self.game = game
        super().__init__(start_value=game.status.name)

    def sync_status_to_model(self) -> None:
        self.game.status = GameStatus[str(self.current_state.value)]
