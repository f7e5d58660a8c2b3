"""NPC dialogue generation.

Picks what an NPC says based on the player's relationship score and
builds the responses the player can give back. Responses are ordinary
choices whose effects adjust the relationship.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from legends_engine.core.logging import get_logger
from legends_engine.engine.randomness import RandomnessProvider, choose
from legends_engine.models.effects import EffectDescriptor, RelationshipDelta
from legends_engine.models.enums import Archetype, Disposition
from legends_engine.models.player import Player
from legends_engine.models.scene import NPC, Choice


logger = get_logger(__name__)

GENERIC_GREETING = "Hello there."

_ARCHETYPE_RESPONSES: dict[str, tuple[str, list[str], int]] = {
    Archetype.WARRIOR: ("Ask about local challenges", ["quest", "combat"], 0),
    Archetype.MAGE: ("Inquire about magical curiosities", ["quest", "magic"], 0),
    Archetype.ROGUE: ("Ask about valuable opportunities", ["quest", "loot"], 0),
    Archetype.DIPLOMAT: ("Gather information diplomatically", ["information", "social"], 5),
}


@dataclass
class DialogueExchange:
    """One line of NPC dialogue plus the player's possible responses.

    Attributes:
        npc: Who is speaking.
        disposition: Relationship category the line was picked for.
        line: What the NPC says.
        responses: Choices offered to the player.
    """

    npc: NPC
    disposition: Disposition
    line: str
    responses: list[Choice] = field(default_factory=list)


def _relationship_choice(text: str, tags: list[str], npc_id: str, delta: int) -> Choice:
    effects = None
    if delta:
        effects = EffectDescriptor(effects=[RelationshipDelta(npc_id=npc_id, delta=delta)])
    return Choice(text=text, effects=effects, tags=tags)


class DialogueGenerator:
    """Generates NPC lines and player responses.

    Args:
        patterns: Generic lines per disposition, used when an NPC has no
            authored line for its category. Lines may reference
            ``{npc.name}``, ``{npc.type}``, ``{context.location}`` and
            ``{context.time}``.
        rng: The session's randomness stream.
    """

    def __init__(self, patterns: dict[str, list[str]], rng: RandomnessProvider) -> None:
        self.patterns = patterns
        self.rng = rng

    def generate_dialogue(
        self,
        npc: NPC,
        relationship: int,
        context: dict[str, Any] | None = None,
    ) -> str:
        """Pick what an NPC says.

        Args:
            npc: The speaking NPC.
            relationship: Player's relationship score with the NPC.
            context: Optional ``location`` and ``time`` for generic lines.

        Returns:
            A dialogue line.
        """
        category = Disposition.from_relationship(relationship)
        authored = npc.dialogue.get(category.value)
        if authored:
            return choose(self.rng, authored)
        return self._generic_line(npc, category, context or {})

    def _generic_line(self, npc: NPC, category: Disposition, context: dict[str, Any]) -> str:
        patterns = self.patterns.get(category.value) or self.patterns.get(Disposition.NEUTRAL.value)
        if not patterns:
            return GENERIC_GREETING

        pattern = choose(self.rng, patterns)
        return (
            pattern.replace("{npc.name}", npc.name)
            .replace("{npc.type}", npc.type.value)
            .replace("{context.location}", str(context.get("location") or "this place"))
            .replace("{context.time}", str(context.get("time") or "now"))
        )

    def generate_responses(self, player: Player, npc: NPC, relationship: int) -> list[Choice]:
        """Build the player's response options.

        Args:
            player: The player character.
            npc: The NPC being answered.
            relationship: Player's relationship score with the NPC.

        Returns:
            Relationship-dependent responses, an archetype response,
            merchant and quest-giver responses where relevant, and always
            a way to end the conversation.
        """
        category = Disposition.from_relationship(relationship)
        responses: list[Choice] = []

        if category == Disposition.FRIENDLY:
            responses.append(
                _relationship_choice("Respond positively", ["friendly", "social"], npc.id, 5)
            )
        elif category == Disposition.HOSTILE:
            responses.append(Choice(text="Respond cautiously", tags=["cautious", "social"]))
            responses.append(
                _relationship_choice("Threaten", ["hostile", "intimidate"], npc.id, -10)
            )
        else:
            responses.append(
                _relationship_choice("Respond politely", ["polite", "social"], npc.id, 5)
            )

        archetype_response = _ARCHETYPE_RESPONSES.get(player.archetype)
        if archetype_response is not None:
            text, tags, delta = archetype_response
            responses.append(_relationship_choice(text, list(tags), npc.id, delta))

        if npc.merchant:
            responses.append(Choice(text="Ask to see wares", tags=["shop", "trade"]))
        if npc.quest_giver:
            responses.append(
                Choice(text="Ask about available tasks", tags=["quest", "information"])
            )

        responses.append(Choice(text="End the conversation", tags=["leave", "social"]))
        return responses

    def converse(
        self,
        player: Player,
        npc: NPC,
        relationship: int,
        context: dict[str, Any] | None = None,
    ) -> DialogueExchange:
        """Produce a full exchange: the NPC's line and the player's responses."""
        exchange = DialogueExchange(
            npc=npc,
            disposition=Disposition.from_relationship(relationship),
            line=self.generate_dialogue(npc, relationship, context),
            responses=self.generate_responses(player, npc, relationship),
        )
        logger.debug(
            "Dialogue generated",
            npc_id=npc.id,
            disposition=exchange.disposition.value,
            responses=len(exchange.responses),
        )
        return exchange


__all__ = [
    "GENERIC_GREETING",
    "DialogueExchange",
    "DialogueGenerator",
]
