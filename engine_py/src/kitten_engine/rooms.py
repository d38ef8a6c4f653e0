"""Registry of running games, keyed by room id"""

import logging
import threading
import uuid
from collections import defaultdict
from typing import Callable, Dict, List, Optional, Tuple, TypeVar

from .engine import GameEngine
from .errors import GAME_IN_PROGRESS, NOT_STARTED, ROOM_NOT_FOUND
from .models import ActionResult
from .rules import GameOptions

logger = logging.getLogger(__name__)

T = TypeVar("T")


class GameRegistry:
    """
    Owns the games of one server process.

    Construct one and pass it to whatever handles sessions; every call that
    touches a game should go through ``execute`` so it runs under that
    room's lock.
    """

    def __init__(self):
        self.games: Dict[str, GameEngine] = {}
        self.room_locks = defaultdict(threading.Lock)
        self.restarts: Dict[str, int] = defaultdict(int)
        self.base_options: Dict[str, GameOptions] = {}
        self._registry_lock = threading.Lock()

    def create_game(self, options: GameOptions, room_id: Optional[str] = None) -> Tuple[str, GameEngine]:
        with self._registry_lock:
            if room_id is None:
                room_id = str(uuid.uuid4())[:6]
                while room_id in self.games:
                    room_id = str(uuid.uuid4())[:6]
            elif room_id in self.games:
                raise ValueError(f"Room {room_id} already exists")
            engine = GameEngine(options, game_id=room_id)
            self.games[room_id] = engine
            self.base_options[room_id] = options
        logger.info(f"Created room {room_id}")
        return room_id, engine

    def get(self, room_id: str) -> Optional[GameEngine]:
        return self.games.get(room_id)

    def room_ids(self) -> List[str]:
        return list(self.games.keys())

    def remove(self, room_id: str) -> bool:
        with self._registry_lock:
            engine = self.games.pop(room_id, None)
            self.room_locks.pop(room_id, None)
            self.restarts.pop(room_id, None)
            self.base_options.pop(room_id, None)
        if engine:
            logger.info(f"Removed room {room_id}")
        return engine is not None

    def execute(self, room_id: str, operation: Callable[[GameEngine], T]):
        """Run ``operation(engine)`` under the room lock."""
        if room_id not in self.games:
            return ActionResult.fail(ROOM_NOT_FOUND, "Room not found")
        with self.room_locks[room_id]:
            engine = self.get(room_id)
            if not engine:
                return ActionResult.fail(ROOM_NOT_FOUND, "Room not found")
            return operation(engine)

    def restart(self, room_id: str) -> ActionResult:
        """Start a fresh game with the same players once the current one is over."""
        if room_id not in self.games:
            return ActionResult.fail(ROOM_NOT_FOUND, "Room not found")
        with self.room_locks[room_id]:
            engine = self.get(room_id)
            if not engine:
                return ActionResult.fail(ROOM_NOT_FOUND, "Room not found")
            if not engine.state.started:
                return ActionResult.fail(NOT_STARTED, "Game has not been played yet")
            if not engine.state.finished:
                return ActionResult.fail(GAME_IN_PROGRESS, "Game is still running")

            self.restarts[room_id] += 1
            options = self.base_options[room_id]
            if options.seed is not None:
                options = options.model_copy(update={"seed": f"{options.seed}#{self.restarts[room_id]}"})
            fresh = GameEngine(options, game_id=room_id)
            for player in engine.state.players:
                fresh.add_player(player.id, player.name)
            result = fresh.start()
            if result.success:
                with self._registry_lock:
                    # The room may have been removed while the new game was dealt
                    if room_id in self.games:
                        self.games[room_id] = fresh
                logger.info(f"Restarted room {room_id}")
            return result
