"""Game constants and card utilities"""

from typing import Dict, List, Tuple

FACES = ['3', '4', '5', '6', '7', '8', '9', 'T', 'J', 'Q', 'K', 'A', '2']
SUITS = ['c', 'd', 'h', 's']  # club < diamond < hearts < spade

SUIT_SYMBOLS = {'c': '♣', 'd': '♦', 'h': '♥', 's': '♠'}

NUM_SEATS = 4
CARDS_PER_HAND = 13

# Stages
STAGE_SEATING = 'seating'
STAGE_ACTIVE = 'active'
STAGE_FINISHED = 'finished'
STAGES = [STAGE_SEATING, STAGE_ACTIVE, STAGE_FINISHED]

# Seat markers
PASS = 'pass'
DISCONNECTED = 'disconnected'
AI_PREFIX = 'bot:'
AI_SEAT_SEPARATOR = '#'

# Rank offsets for the bonus tiers
STRAIGHT_FLUSH_OFFSET = 100
PAIRS_BOMB_OFFSET = 200
QUAD_BOMB_OFFSET = 300

FACE_RANK: Dict[str, int] = {face: i + 1 for i, face in enumerate(FACES)}
CARD_RANK: Dict[str, int] = {
    f"{face}{suit}": i * len(SUITS) + j + 1
    for i, face in enumerate(FACES)
    for j, suit in enumerate(SUITS)
}

ORDERED_CARDS: List[str] = sorted(CARD_RANK, key=CARD_RANK.get)


def parse_card(card_id: str) -> Tuple[str, str]:
    """Split a card id like '7h' into (face, suit)."""
    if card_id not in CARD_RANK:
        raise ValueError(f"Invalid card ID: {card_id!r}")
    return card_id[0], card_id[1]


def card_rank(card_id: str) -> int:
    parse_card(card_id)
    return CARD_RANK[card_id]


def face_rank(face: str) -> int:
    return FACE_RANK[face]


def sort_cards(cards: List[str], reverse: bool = True) -> List[str]:
    """Sort cards by rank, high to low unless reverse is False."""
    return sorted(cards, key=card_rank, reverse=reverse)


def create_deck() -> List[str]:
    """Return the 52-card deck in ascending rank order."""
    return list(ORDERED_CARDS)


def format_card(card_id: str) -> str:
    face, suit = parse_card(card_id)
    face = '10' if face == 'T' else face
    return f"{face}{SUIT_SYMBOLS[suit]}"


def format_cards(cards: List[str]) -> str:
    return ' '.join(format_card(c) for c in cards)


def is_ai_seat(occupant) -> bool:
    return isinstance(occupant, str) and occupant.startswith(AI_PREFIX) and len(occupant) > len(AI_PREFIX)


def is_reserved_identity(identity) -> bool:
    """True for identities that collide with seat markers or AI occupants."""
    return identity in (DISCONNECTED, PASS) or identity.startswith(AI_PREFIX)


def ai_persona_of(occupant):
    """Persona name for an AI occupant like 'bot:marcus#2', else None."""
    if not is_ai_seat(occupant):
        return None
    return occupant[len(AI_PREFIX):].split(AI_SEAT_SEPARATOR, 1)[0]


def ai_identity(persona: str, seat_index: int) -> str:
    return f"{AI_PREFIX}{persona}{AI_SEAT_SEPARATOR}{seat_index}"
