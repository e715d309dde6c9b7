"""Persona table and lookup"""

import logging
import random
from typing import Dict, Optional

from .base import Persona
from .personas import ada, eddie, frank, grandmaliu, marcus, meilin, sophie, victor

logger = logging.getLogger(__name__)

DEFAULT_PERSONA = 'marcus'

PERSONAS: Dict[str, Persona] = {
    module.PERSONA.name: module.PERSONA
    for module in (marcus, eddie, grandmaliu, victor, sophie, frank, ada, meilin)
}

AI_DISPLAY_NAMES: Dict[str, str] = {name: p.display_name for name, p in PERSONAS.items()}
AI_COLORS: Dict[str, str] = {name: p.color for name, p in PERSONAS.items()}


def is_known_persona(name: str) -> bool:
    return name in PERSONAS


def get_persona(name: Optional[str], default: str = DEFAULT_PERSONA) -> Persona:
    """Look up a persona, falling back to the default for unknown names."""
    persona = PERSONAS.get(name)
    if persona is None:
        logger.warning(f"Unknown AI persona: {name}, defaulting to {default}")
        persona = PERSONAS[default]
    return persona


def ai_delay(persona: Persona, rng: Optional[random.Random] = None, scale: float = 1.0) -> float:
    """Think time in milliseconds, uniform in the persona's range."""
    rng = rng or random
    return rng.uniform(persona.min_delay, persona.max_delay) * scale
