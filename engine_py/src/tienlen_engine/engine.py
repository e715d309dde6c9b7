"""Main game engine: room state machine, turn flow and AI turn driver"""

import copy
import logging
import random
from collections import namedtuple
from typing import Any, Callable, Dict, List, Optional

from .bots.analyzer import analyze_hand
from .bots.base import choose_play
from .bots.roster import ai_delay, get_persona, is_known_persona
from .constants import (
    DISCONNECTED, NUM_SEATS, PASS, STAGE_ACTIVE, STAGE_FINISHED, STAGE_SEATING,
    ai_identity, ai_persona_of, format_cards, is_ai_seat, is_reserved_identity, sort_cards
)
from .errors import (
    ACTION_NOT_ALLOWED, INVALID_IDENTITY, INVALID_SEAT, NOT_ENOUGH_PLAYERS, NOT_SEATED, ROOM_ERRORED,
    SEAT_TAKEN, UNKNOWN_PERSONA, GameError, InvalidPlayError, StateInvariantViolation
)
from .models import Category, PlayerStats, RoomState
from .ranking import (
    assign_rank_to_seat, clear_board, count_remaining_players, find_highest_available_rank,
    find_lowest_available_rank, find_next_turn, find_orphaned_seat, is_active_seat,
    is_unranked_seat, should_clear_board
)
from .registry import RoomRegistry
from .rules import GameConfig, default_config
from .scheduler import Scheduler, TimerScheduler
from .serialization import snapshot
from .shuffle import deal_hands, determine_first_player
from .validate import get_last_play, validate_play, validate_turn

logger = logging.getLogger(__name__)

Publisher = Callable[[str, Dict[str, Any]], None]

# Identifies the exact turn an AI timer was scheduled for
AiTurnKey = namedtuple('AiTurnKey', 'room_id game_id turn_index occupant stage version')

ORDINALS = {1: '1st', 2: '2nd', 3: '3rd', 4: '4th'}


def find_seat(state: RoomState, identity: str) -> Optional[int]:
    for seat, occupant in enumerate(state.seats):
        if occupant == identity:
            return seat
    return None


def display_name(state: RoomState, occupant: Optional[str]) -> str:
    if occupant is None:
        return 'Empty seat'
    return state.names.get(occupant, occupant)


class TienLenEngine:
    """
    Owns every room and applies player and AI actions to them.

    Every mutating operation runs on a deep copy of the room under the room's
    lock and replaces the stored state only when it completes, so a rejected
    action leaves the room untouched. Each public operation returns the new
    snapshot and also hands it to the publisher.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        scheduler: Optional[Scheduler] = None,
        publisher: Optional[Publisher] = None,
        rng: Optional[random.Random] = None,
        registry: Optional[RoomRegistry] = None
    ):
        self.config = config or default_config
        self.scheduler = scheduler or TimerScheduler()
        self.publisher = publisher
        self.rng = rng or random.Random()
        self.registry = registry or RoomRegistry()

    # Room access

    def get_room(self, room_id: str) -> Optional[RoomState]:
        handle = self.registry.get(room_id)
        return handle.state if handle else None

    def get_snapshot(self, room_id: str) -> Dict[str, Any]:
        with self.registry.locked(room_id) as handle:
            return snapshot(handle.state)

    def reap_idle_rooms(self, now: Optional[float] = None) -> List[str]:
        return self.registry.reap_idle(now, self.config.room_timeout)

    def _mutate(self, room_id: str, action: Callable[[RoomState], None], create: bool = False) -> Dict[str, Any]:
        with self.registry.locked(room_id, create=create) as handle:
            if handle.state.errored:
                raise GameError(ROOM_ERRORED, f"Room {room_id} is in an error state")

            previous_stage = handle.state.stage
            draft = copy.deepcopy(handle.state)
            try:
                action(draft)
            except StateInvariantViolation as e:
                logger.error(f"Room {room_id} flagged errored: {e.message}")
                handle.state.errored = True
                handle.state.touch()
                self._publish(handle.state)
                raise

            draft.touch()
            handle.state = draft
            result = self._publish(draft)

            if draft.stage == STAGE_FINISHED and previous_stage != STAGE_FINISHED:
                self._schedule_settle(draft)
            self._schedule_ai_turn(draft)
            return result

    def _publish(self, state: RoomState) -> Dict[str, Any]:
        snap = snapshot(state)
        if self.publisher is not None:
            self.publisher(state.id, snap)
        return snap

    # Seating

    def join(self, room_id: str, identity: str, name: Optional[str] = None) -> Dict[str, Any]:
        """Register an identity in a room, creating the room if needed."""
        self._require_player_identity(identity)

        def action(state: RoomState):
            state.names[identity] = name or state.names.get(identity, identity)
            state.stats.setdefault(identity, PlayerStats())
        return self._mutate(room_id, action, create=True)

    def choose_seat(self, room_id: str, identity: str, seat_index: int) -> Dict[str, Any]:
        """
        Toggle a seat for a player.

        Taking a free seat moves the player there (vacating any seat they
        held); choosing their own seat stands them up.
        """
        self._require_player_identity(identity)

        def action(state: RoomState):
            self._require_seat_index(seat_index)
            self._require_stage(state, STAGE_SEATING, "Seats can only change before the game starts")

            current = find_seat(state, identity)
            if current == seat_index:
                state.seats[seat_index] = None
                return

            if state.seats[seat_index] is not None:
                raise GameError(SEAT_TAKEN, f"Seat {seat_index} is taken")

            if current is not None:
                state.seats[current] = None
            state.seats[seat_index] = identity
            state.names.setdefault(identity, identity)
            state.stats.setdefault(identity, PlayerStats())
        return self._mutate(room_id, action)

    def add_ai(self, room_id: str, persona: str, seat_index: int) -> Dict[str, Any]:
        """Seat an AI opponent in an empty seat."""
        if not is_known_persona(persona):
            raise GameError(UNKNOWN_PERSONA, f"Unknown AI persona: {persona}")

        def action(state: RoomState):
            self._require_seat_index(seat_index)
            self._require_stage(state, STAGE_SEATING, "AI players can only join before the game starts")
            if state.seats[seat_index] is not None:
                raise GameError(SEAT_TAKEN, f"Seat {seat_index} is taken")

            identity = ai_identity(persona, seat_index)
            state.seats[seat_index] = identity
            state.names[identity] = get_persona(persona).display_name
            state.stats.setdefault(identity, PlayerStats())
        return self._mutate(room_id, action)

    def remove_seat(self, room_id: str, seat_index: int) -> Dict[str, Any]:
        """Vacate a seat before the game starts (used to remove AI players)."""
        def action(state: RoomState):
            self._require_seat_index(seat_index)
            self._require_stage(state, STAGE_SEATING, "Seats can only change before the game starts")
            state.seats[seat_index] = None
        return self._mutate(room_id, action)

    # Stage transitions

    def set_stage(self, room_id: str, target: str) -> Dict[str, Any]:
        """
        Move a room between stages.

        seating -> active deals a new game; finished -> seating starts over
        without waiting for the settle delay. Anything else is rejected.
        """
        def action(state: RoomState):
            if state.stage == STAGE_SEATING and target == STAGE_ACTIVE:
                self._start_game(state)
            elif state.stage == STAGE_FINISHED and target == STAGE_SEATING:
                self._reset_to_seating(state)
            else:
                raise GameError(ACTION_NOT_ALLOWED, f"Cannot move from {state.stage} to {target}")
        return self._mutate(room_id, action)

    def _start_game(self, state: RoomState):
        occupied = [seat for seat, occupant in enumerate(state.seats) if occupant is not None]
        if not self.config.validate_player_count(len(occupied)):
            raise GameError(
                NOT_ENOUGH_PLAYERS,
                f"Need at least {self.config.min_players} players (have {len(occupied)})"
            )

        state.hands = deal_hands(state.seats, self.rng, self.config.cards_per_hand)
        first_seat, lowest = determine_first_player(state.hands)

        state.stage = STAGE_ACTIVE
        state.turn_index = first_seat
        state.lowest_dealt_card = lowest
        state.initial_play_pending = True
        state.starting_players = len(occupied)
        state.board = []
        state.discard = []
        state.ranks = [None] * NUM_SEATS
        state.last_by_seat = [None] * NUM_SEATS
        state.game_id += 1
        state.game_log = [f"Game started with {len(occupied)} players"]

        logger.info(
            f"Room {state.id}: game {state.game_id} started with {len(occupied)} players, "
            f"seat {first_seat} leads with {lowest}"
        )

    def _reset_to_seating(self, state: RoomState):
        state.stage = STAGE_SEATING
        state.hands = [None] * NUM_SEATS
        state.board = []
        state.discard = []
        state.ranks = [None] * NUM_SEATS
        state.last_by_seat = [None] * NUM_SEATS
        state.turn_index = 0
        state.initial_play_pending = True
        state.lowest_dealt_card = None
        state.starting_players = 0
        state.seats = [None if occupant == DISCONNECTED else occupant for occupant in state.seats]
        logger.info(f"Room {state.id}: reset to seating")

    def _schedule_settle(self, state: RoomState):
        room_id, game_id = state.id, state.game_id
        self.scheduler.after(self.config.settle_delay_ms, lambda: self._settle(room_id, game_id))

    def _settle(self, room_id: str, game_id: int):
        """Settle timer: return a finished room to seating if nothing moved it since."""
        handle = self.registry.get(room_id)
        if handle is None:
            return
        with handle.lock:
            state = handle.state
            if state.stage != STAGE_FINISHED or state.game_id != game_id or state.errored:
                return
            self._mutate(room_id, self._reset_to_seating)

    # Turn actions

    def submit_play(self, room_id: str, identity: str, cards: List[str]) -> Dict[str, Any]:
        """
        Play cards from a player's hand.

        Raises:
            InvalidPlayError: If the play is rejected; the room is unchanged
        """
        def action(state: RoomState):
            self._play(state, self._seat_of(state, identity), cards)
        return self._mutate(room_id, action)

    def pass_turn(self, room_id: str, identity: str) -> Dict[str, Any]:
        def action(state: RoomState):
            self._pass(state, self._seat_of(state, identity))
        return self._mutate(room_id, action)

    def forfeit(self, room_id: str, identity: str) -> Dict[str, Any]:
        """Give up the current game; the player takes the worst remaining place."""
        def action(state: RoomState):
            seat = self._seat_of(state, identity)
            self._require_stage(state, STAGE_ACTIVE, "No game in progress")
            if state.ranks[seat] is not None:
                raise GameError(ACTION_NOT_ALLOWED, "You have already finished")

            name = display_name(state, identity)
            state.discard.extend(state.hands[seat] or [])
            state.hands[seat] = []
            state.game_log.append(f"{name} forfeited")
            logger.info(f"Room {state.id}: seat {seat} forfeited")

            self._finish_seat(state, seat, find_highest_available_rank(state))
            self._resolve_turn(state, seat, advance=state.turn_index == seat)
        return self._mutate(room_id, action)

    def disconnect(self, room_id: str, identity: str) -> Dict[str, Any]:
        """
        Handle a player leaving.

        Outside a game the seat is vacated. During a game the seat keeps a
        placeholder that is skipped by the turn order.
        """
        self._require_player_identity(identity)

        def action(state: RoomState):
            seat = find_seat(state, identity)
            if seat is None:
                return

            if state.stage != STAGE_ACTIVE:
                state.seats[seat] = None
                return

            state.seats[seat] = DISCONNECTED
            logger.info(f"Room {state.id}: seat {seat} disconnected mid-game")
            if state.ranks[seat] is None:
                self._resolve_turn(state, seat, advance=state.turn_index == seat)
        return self._mutate(room_id, action)

    def _play(self, state: RoomState, seat: int, cards: List[str]):
        result = validate_play(state, seat, cards)
        if not result.valid:
            raise InvalidPlayError(result.error_code, result.error_message)

        play = result.play
        occupant = state.seats[seat]

        state.discard.extend(state.board)
        state.board = sort_cards(cards)
        state.last_by_seat = [play if i == seat else None for i in range(NUM_SEATS)]
        state.initial_play_pending = False
        state.hands[seat] = [card for card in state.hands[seat] if card not in cards]

        if play.category == Category.BOMB:
            state.stats.setdefault(occupant, PlayerStats()).bombs += 1

        state.game_log.append(
            f"{display_name(state, occupant)} played {play.name} ({format_cards(state.board)})"
        )
        logger.debug(f"Room {state.id}: seat {seat} played {play.name}")

        if not state.hands[seat]:
            self._finish_seat(state, seat, find_lowest_available_rank(state))

        self._resolve_turn(state, seat)

    def _pass(self, state: RoomState, seat: int):
        turn = validate_turn(state, seat)
        if not turn.valid:
            raise InvalidPlayError(turn.error_code, turn.error_message)
        if get_last_play(state, seat).category == Category.FREE_PLAY:
            raise InvalidPlayError(ACTION_NOT_ALLOWED, "Nothing to pass on; you lead this round")

        state.last_by_seat[seat] = PASS
        state.game_log.append(f"{display_name(state, state.seats[seat])} passed")
        logger.debug(f"Room {state.id}: seat {seat} passed")

        self._resolve_turn(state, seat)

    def _finish_seat(self, state: RoomState, seat: int, rank: int):
        assign_rank_to_seat(state, seat, rank)
        occupant = state.seats[seat]
        if occupant != DISCONNECTED:
            state.game_log.append(f"{display_name(state, occupant)} finished in {ORDINALS.get(rank, rank)} place!")
        logger.info(f"Room {state.id}: seat {seat} finished with rank {rank}")

    def _resolve_turn(self, state: RoomState, from_seat: int, advance: bool = True):
        """
        Settle the room after a seat acted or left.

        Ranks an orphaned seat, ranks seats abandoned by disconnection,
        ends the game when nobody is left, clears the board when everyone
        passed, then moves the turn on.
        """
        count, orphan = find_orphaned_seat(state)
        if count == 1:
            self._finish_seat(state, orphan, find_highest_available_rank(state))

        if count_remaining_players(state) and not any(is_active_seat(state, s) for s in range(NUM_SEATS)):
            # only disconnected seats are left in the game
            for seat in range(NUM_SEATS):
                if is_unranked_seat(state, seat):
                    self._finish_seat(state, seat, find_highest_available_rank(state))

        if count_remaining_players(state) == 0:
            self._finish_game(state)
            return

        if should_clear_board(state):
            clear_board(state)
            state.game_log.append("All passed - board cleared")
            logger.info(f"Room {state.id}: board cleared")

        if advance or not is_active_seat(state, state.turn_index):
            state.turn_index = find_next_turn(state, from_seat)

    def _finish_game(self, state: RoomState):
        state.stage = STAGE_FINISHED
        state.discard.extend(state.board)
        state.board = []
        state.game_log.append("Game over")
        logger.info(f"Room {state.id}: game {state.game_id} over, ranks {state.ranks}")

    # AI turns

    def _schedule_ai_turn(self, state: RoomState):
        if state.stage != STAGE_ACTIVE:
            return
        occupant = state.seats[state.turn_index]
        if not is_ai_seat(occupant):
            return

        persona = get_persona(ai_persona_of(occupant), self.config.default_persona)
        delay = ai_delay(persona, self.rng, self.config.ai_delay_scale)
        key = AiTurnKey(state.id, state.game_id, state.turn_index, occupant, state.stage, state.version)
        logger.debug(f"Room {state.id}: {persona.name} to act at seat {state.turn_index} in {delay:.0f}ms")
        self.scheduler.after(delay, lambda: self.run_ai_turn(key))

    def run_ai_turn(self, key: AiTurnKey):
        """
        Timer callback for an AI turn.

        Does nothing if the room moved on since the turn was scheduled.
        """
        handle = self.registry.get(key.room_id)
        if handle is None:
            return

        with handle.lock:
            state = handle.state
            current = AiTurnKey(
                state.id, state.game_id, state.turn_index,
                state.seats[state.turn_index], state.stage, state.version
            )
            if current != key or state.errored:
                logger.warning(f"Room {key.room_id}: stale AI timer for seat {key.turn_index} ignored")
                return

            seat = key.turn_index
            occupant = state.seats[seat]
            hand = state.hands[seat]
            if not is_ai_seat(occupant) or not hand:
                return

            persona = get_persona(ai_persona_of(occupant), self.config.default_persona)
            analysis = analyze_hand(hand, state, seat)
            choice = choose_play(persona, analysis, state, seat, self.rng)

            try:
                if choice is None:
                    logger.debug(f"Room {state.id}: {persona.name} passes")
                    self._mutate(key.room_id, lambda draft: self._pass(draft, seat))
                else:
                    logger.debug(f"Room {state.id}: {persona.name} plays {choice.cards}")
                    self._mutate(key.room_id, lambda draft: self._play(draft, seat, choice.cards))
            except GameError as e:
                logger.error(f"Room {key.room_id}: AI turn for seat {seat} failed: {e}")

    # Helpers

    @staticmethod
    def _require_seat_index(seat_index: int):
        if not isinstance(seat_index, int) or not 0 <= seat_index < NUM_SEATS:
            raise GameError(INVALID_SEAT, f"Seat must be between 0 and {NUM_SEATS - 1}")

    @staticmethod
    def _require_stage(state: RoomState, stage: str, message: str):
        if state.stage != stage:
            raise GameError(ACTION_NOT_ALLOWED, message)

    @staticmethod
    def _require_player_identity(identity: str):
        if is_reserved_identity(identity):
            raise GameError(INVALID_IDENTITY, f"Identity {identity!r} is reserved")

    @staticmethod
    def _seat_of(state: RoomState, identity: str) -> int:
        TienLenEngine._require_player_identity(identity)
        seat = find_seat(state, identity)
        if seat is None:
            raise GameError(NOT_SEATED, "You are not seated")
        return seat
