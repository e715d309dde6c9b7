"""
Play validation: turn, ownership, initial-play and board-beat checks.
"""

from typing import List, Optional

from .classifier import classify
from .constants import NUM_SEATS, PASS, STAGE_ACTIVE
from .errors import (
    ACTION_NOT_ALLOWED, MISSING_LOWEST_CARD, NOT_SEATED, NOT_YOUR_TURN,
    OWNERSHIP_MISMATCH, PATTERN_MISMATCH, RANK_TOO_LOW
)
from .models import FREE_PLAY, Category, Play, RoomState


class ValidationResult:
    """Result of play validation."""

    def __init__(
        self,
        valid: bool,
        error_code: Optional[str] = None,
        error_message: Optional[str] = None,
        play: Optional[Play] = None
    ):
        self.valid = valid
        self.error_code = error_code
        self.error_message = error_message
        self.play = play

    @classmethod
    def success(cls, play: Optional[Play] = None) -> 'ValidationResult':
        """Create a successful validation result."""
        return cls(valid=True, play=play)

    @classmethod
    def error(cls, error_code: str, error_message: str) -> 'ValidationResult':
        """Create an error validation result."""
        return cls(valid=False, error_code=error_code, error_message=error_message)


def validate_turn(state: RoomState, seat: int) -> ValidationResult:
    """Check that the game is running and it is this seat's turn."""
    if state.stage != STAGE_ACTIVE:
        return ValidationResult.error(
            ACTION_NOT_ALLOWED,
            f"Game is not active (current stage: {state.stage})"
        )
    if seat is None or not 0 <= seat < NUM_SEATS:
        return ValidationResult.error(NOT_SEATED, "You are not seated")
    if state.turn_index != seat:
        return ValidationResult.error(
            NOT_YOUR_TURN,
            f"It's not your turn (current turn: seat {state.turn_index})"
        )
    return ValidationResult.success()


def validate_ownership(hand: List[str], card_ids: List[str]) -> bool:
    """Every card is in the hand and none is listed twice."""
    if len(set(card_ids)) != len(card_ids):
        return False
    return all(card_id in hand for card_id in card_ids)


def validate_initial_play(state: RoomState, card_ids: List[str]) -> bool:
    """The first play of a game must include the lowest dealt card."""
    if not state.initial_play_pending:
        return True
    return state.lowest_dealt_card in card_ids


def get_last_play(state: RoomState, seat: int) -> Play:
    """
    Find the play currently controlling the board.

    Scans backward from the seat through the three other seats (wrapping),
    skipping empty entries and passes. Returns FREE_PLAY when nothing is found.
    """
    for offset in range(1, NUM_SEATS):
        entry = state.last_by_seat[(seat - offset) % NUM_SEATS]
        if entry is None or entry == PASS:
            continue
        return entry
    return FREE_PLAY


def play_beats_board(play: Play, last_play: Play) -> bool:
    """
    Board-beat rule.

    A play beats the board when the board is free, when it has the same
    shape and a higher rank, when it is a bomb of higher rank, or when it is
    a straight flush of higher rank over a same-length straight or a flush.
    Bomb ranks start above every other rank so a bomb beats any non-bomb.
    """
    if not play.is_valid:
        return False
    if last_play.category == Category.FREE_PLAY:
        return True
    if play.category == Category.BOMB:
        return play.rank > last_play.rank
    if play.same_shape(last_play):
        return play.rank > last_play.rank
    if play.category == Category.STRAIGHT_FLUSH:
        if last_play.category == Category.FLUSH:
            return play.rank > last_play.rank
        if last_play.category == Category.STRAIGHT and last_play.size == play.size:
            return play.rank > last_play.rank
    return False


def validate_play(state: RoomState, seat: int, card_ids: List[str]) -> ValidationResult:
    """
    Validate a card play attempt.

    Args:
        state: Current room state
        seat: Seat index of the player attempting the play
        card_ids: List of card IDs being played

    Returns:
        ValidationResult with validation outcome and the classified play
    """
    turn = validate_turn(state, seat)
    if not turn.valid:
        return turn

    if not card_ids:
        return ValidationResult.error(PATTERN_MISMATCH, "No cards selected")

    hand = state.hands[seat] or []
    if not validate_ownership(hand, card_ids):
        return ValidationResult.error(
            OWNERSHIP_MISMATCH,
            "You don't own all of those cards"
        )

    if not validate_initial_play(state, card_ids):
        return ValidationResult.error(
            MISSING_LOWEST_CARD,
            f"The first play must include {state.lowest_dealt_card}"
        )

    play = classify(card_ids)
    if not play.is_valid:
        return ValidationResult.error(
            PATTERN_MISMATCH,
            "Those cards are not a valid combination"
        )

    last_play = get_last_play(state, seat)
    if not play_beats_board(play, last_play):
        return ValidationResult.error(
            RANK_TOO_LOW,
            f"{play.name} doesn't beat {last_play.name}"
        )

    return ValidationResult.success(play)
