"""Generic content synthesized when no authored template applies.

The selection engine never fails to produce a scene: when the catalog has
nothing suitable it falls back to the small fixed library in this module,
parameterized by the current location and the player's archetype.
"""

from __future__ import annotations

from legends_engine.core.logging import get_logger
from legends_engine.engine.randomness import RandomnessProvider, choose
from legends_engine.models.effects import EffectDescriptor, FlagSet, StatDelta
from legends_engine.models.enums import Archetype
from legends_engine.models.player import Player
from legends_engine.models.scene import Choice, Location, Scene
from legends_engine.models.templates import TemplateCatalog


logger = get_logger(__name__)


# =============================================================================
# Fallback Libraries
# =============================================================================

STARTING_LOCATIONS: tuple[tuple[Location, str], ...] = (
    (
        Location(
            name="Crossroads Inn",
            type="safe",
            description="A cozy tavern at the crossroads between several towns.",
        ),
        "Your journey begins as you find yourself in the Crossroads Inn. The possibilities "
        "of adventure stretch out before you, waiting to be seized.",
    ),
    (
        Location(
            name="Village Square",
            type="safe",
            description="The central gathering place of a small frontier village.",
        ),
        "The Village Square bustles with activity as you arrive, marking the beginning of "
        "your adventure.",
    ),
    (
        Location(
            name="Harbor Docks",
            type="neutral",
            description="The busy docks of a coastal trading town.",
        ),
        "The salty air of the Harbor Docks fills your lungs as you contemplate the path ahead.",
    ),
    (
        Location(
            name="Forest Edge",
            type="neutral",
            description="The boundary between civilization and the untamed wilds.",
        ),
        "Standing at the Forest Edge, you can feel the call of adventure pulling you forward.",
    ),
)

RANDOM_LOCATION_NAMES: dict[str, tuple[str, ...]] = {
    "village": ("Oakvale", "Rivertown", "Highfield", "Westmarch"),
    "wilderness": ("Dark Forest", "Mountain Pass", "Misty Valley", "Rolling Hills"),
    "dungeon": ("Ancient Ruins", "Forgotten Crypt", "Abandoned Mine", "Mystical Cave"),
    "town": ("Ironforge", "Silverpine", "Goldcrest", "Stormhaven"),
}

RANDOM_LOCATION_DESCRIPTIONS: dict[str, str] = {
    "village": "A small settlement with humble buildings and friendly locals.",
    "wilderness": "Untamed nature surrounds you, full of both beauty and danger.",
    "dungeon": "A foreboding place, dark and mysterious, promising both danger and treasure.",
    "town": "A bustling place filled with various shops, inns, and plenty of potential "
    "opportunities.",
}

# Tags on a choice that move the player somewhere new
LOCATION_CHANGE_TAGS = frozenset({"travel", "explore", "leave"})

_LOCATION_TYPE_CHOICES: dict[str, tuple[tuple[str, list[str]], ...]] = {
    "social": (
        ("Talk to locals", ["social"]),
        ("Visit the market", ["shop", "social"]),
    ),
    "wild": (
        ("Proceed with caution", ["explore", "danger"]),
        ("Look for resources", ["gather"]),
    ),
    "underground": (
        ("Search for treasures", ["loot", "danger"]),
        ("Examine the area carefully", ["investigate"]),
    ),
}

_LOCATION_TYPE_GROUPS: dict[str, str] = {
    "town": "social",
    "village": "social",
    "safe": "social",
    "wilderness": "wild",
    "dangerous": "wild",
    "dungeon": "underground",
    "ruins": "underground",
}

_ARCHETYPE_CHOICES: dict[str, tuple[str, list[str]]] = {
    Archetype.WARRIOR: ("Look for challenges", ["combat"]),
    Archetype.MAGE: ("Study the surroundings for magical properties", ["magic", "investigate"]),
    Archetype.ROGUE: ("Look for something valuable", ["steal", "loot"]),
    Archetype.DIPLOMAT: ("Gather information", ["social", "investigate"]),
}


# =============================================================================
# Builders
# =============================================================================


def default_narrative(location: Location) -> str:
    """One-paragraph narrative describing a location."""
    description = location.description or f"A {location.type or 'mysterious'} place."
    return f"You find yourself at {location.name}. {description}"


def default_choices(location: Location | None, player: Player) -> list[Choice]:
    """Build the default choice list for a location and archetype.

    Args:
        location: Where the scene happens.
        player: The player, for the archetype-specific choice.

    Returns:
        Explore and rest, location-type extras, an archetype extra, and a
        leave option everywhere but the wilderness.
    """
    choices = [
        Choice(text="Explore further", tags=["explore"]),
        Choice(
            text="Rest for a while",
            effects=EffectDescriptor(
                effects=[StatDelta(stat="health", delta=5), StatDelta(stat="mana", delta=5)]
            ),
            tags=["rest"],
        ),
    ]

    if location is not None:
        group = _LOCATION_TYPE_GROUPS.get(location.type, "")
        for text, tags in _LOCATION_TYPE_CHOICES.get(group, ()):
            choices.append(Choice(text=text, tags=list(tags)))

    archetype_choice = _ARCHETYPE_CHOICES.get(player.archetype)
    if archetype_choice is not None:
        text, tags = archetype_choice
        choices.append(Choice(text=text, tags=list(tags)))

    if location is not None and location.type != "wilderness":
        choices.append(Choice(text=f"Leave {location.name}", tags=["leave", "travel"]))

    return choices


def random_location(catalog: TemplateCatalog, rng: RandomnessProvider) -> Location:
    """Pick a location from the catalog, or invent one when it has none.

    Args:
        catalog: Template catalog whose location collection is preferred.
        rng: Randomness source.

    Returns:
        A new Location.
    """
    if catalog.locations:
        return choose(rng, catalog.locations).to_location()

    location_type = choose(rng, list(RANDOM_LOCATION_NAMES))
    name = choose(rng, RANDOM_LOCATION_NAMES[location_type])
    return Location(
        name=name,
        type=location_type,
        description=RANDOM_LOCATION_DESCRIPTIONS[location_type],
    )


def generic_starting_scene(player: Player, rng: RandomnessProvider) -> Scene:
    """Entry scene used when the catalog has no starting template.

    Args:
        player: The new player character.
        rng: Randomness source.

    Returns:
        Scene at one of four starting locations.
    """
    location, narrative = choose(rng, STARTING_LOCATIONS)
    logger.info("Using generic starting scene", location=location.name, archetype=player.archetype)
    return Scene(
        title="The Beginning",
        description="Your adventure begins here.",
        location=location,
        narrative=[narrative],
        choices=[
            Choice(text="Explore the surroundings", tags=["explore"]),
            Choice(text="Talk to locals", tags=["social"]),
            Choice(
                text="Check your belongings",
                effects=EffectDescriptor(effects=[FlagSet(flag="checkedInventory", value=True)]),
                tags=["inventory"],
            ),
        ],
        tags=["starting", "introduction"],
    )


def generic_continuation_scene(
    player: Player,
    current_scene: Scene,
    choice: Choice | None,
    catalog: TemplateCatalog,
    rng: RandomnessProvider,
) -> Scene:
    """Continuation used when no story template applies.

    Travel, explore and leave choices move the player to a random new
    location; anything else continues at the current one.

    Args:
        player: The player character.
        current_scene: Scene the choice was made in.
        choice: The triggering choice, if any.
        catalog: Template catalog for random locations.
        rng: Randomness source.

    Returns:
        Synthesized Scene.
    """
    tags = set(choice.tags) if choice is not None else set()
    moving = bool(tags & LOCATION_CHANGE_TAGS)
    location = random_location(catalog, rng) if moving else current_scene.location

    if moving:
        narrative = [
            f"You make your way to {location.name}. {location.description}",
            "What will you do here?",
        ]
    elif "social" in tags:
        narrative = [
            "After speaking with the locals, you learn more about your surroundings.",
            "There seems to be more to discover in this place.",
        ]
    elif "combat" in tags:
        narrative = [
            "The threat dealt with, you catch your breath and consider your next move.",
            "What path will you choose now?",
        ]
    else:
        narrative = [
            "You continue your adventure, alert for any opportunities or dangers.",
            "What will you do next?",
        ]

    logger.debug("Using generic continuation", moving=moving, location=location.name)
    return Scene(
        title=f"At the {location.name}" if moving else "Continuing On",
        location=location,
        narrative=narrative,
        choices=default_choices(location, player),
        tags=["new_location"] if moving else ["continuation"],
    )


def generic_event_scene(current_scene: Scene, rng: RandomnessProvider) -> Scene:
    """Random event used when no event template applies.

    Args:
        current_scene: Scene the event interrupts; its location continues.
        rng: Randomness source.

    Returns:
        Event Scene tagged ``event`` and ``random``.
    """
    place = current_scene.location.name
    events: tuple[tuple[str, str, list[Choice]], ...] = (
        (
            "A Strange Sound",
            f"As you travel through {place}, you hear a strange sound nearby. It seems to be "
            "coming from just off the path.",
            [
                Choice(text="Investigate the sound", tags=["investigate", "danger"]),
                Choice(text="Ignore it and continue on your way", tags=["ignore", "cautious"]),
            ],
        ),
        (
            "An Unexpected Encounter",
            f"While making your way through {place}, you spot a figure in the distance, "
            "watching you. They don't seem hostile... yet.",
            [
                Choice(text="Approach and greet them", tags=["social", "approach"]),
                Choice(text="Ready yourself for trouble", tags=["combat", "cautious"]),
                Choice(text="Try to avoid them", tags=["stealth", "avoid"]),
            ],
        ),
        (
            "Weather Changes",
            "The weather begins to change suddenly. Dark clouds roll in overhead, and the wind "
            "picks up.",
            [
                Choice(text="Seek shelter immediately", tags=["shelter", "cautious"]),
                Choice(
                    text="Press on despite the weather",
                    effects=EffectDescriptor(effects=[StatDelta(stat="health", delta=-5)]),
                    tags=["brave", "continue"],
                ),
            ],
        ),
    )
    title, narrative, choices = choose(rng, events)
    logger.debug("Using generic event", title=title, location=place)
    return Scene(
        title=title,
        description=title,
        location=current_scene.location,
        narrative=[narrative],
        choices=choices,
        tags=["event", "random"],
    )


__all__ = [
    "STARTING_LOCATIONS",
    "RANDOM_LOCATION_NAMES",
    "RANDOM_LOCATION_DESCRIPTIONS",
    "LOCATION_CHANGE_TAGS",
    "default_narrative",
    "default_choices",
    "random_location",
    "generic_starting_scene",
    "generic_continuation_scene",
    "generic_event_scene",
]
