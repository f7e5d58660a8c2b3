"""Authored sample content.

The catalog is plain data in the same shape as a JSON content file, so
it goes through exactly the same validation as externally loaded
content. Engines never call ``default_catalog`` themselves; callers pass
the catalog in.
"""

from __future__ import annotations

import copy
from typing import Any

from legends_engine.models.templates import TemplateCatalog


# =============================================================================
# Story Templates
# =============================================================================

STORY_TEMPLATES: list[dict[str, Any]] = [
    {
        "id": "intro_tavern",
        "type": "starting",
        "title": "The Crossroads Inn",
        "description": "Your adventure begins at a cozy tavern.",
        "location": {
            "name": "Crossroads Inn",
            "type": "safe",
            "description": "A warm, inviting tavern where travelers from all directions gather.",
        },
        "narrative": [
            "The crackling fire illuminates the rustic interior of the Crossroads Inn. The aroma "
            "of hearty stew and fresh bread fills the air as travelers share tales of their "
            "journeys.",
            "As a {player.archetype}, you find yourself drawn to this place, perhaps by fate or "
            "mere coincidence.",
            "What will your story be?",
        ],
        "choices": [
            {"text": "Approach the innkeeper for information", "tags": ["social", "information"]},
            {"text": "Listen to the conversations around you", "tags": ["observe", "information"]},
            {
                "text": "Check what supplies you have",
                "effects": {"flags": {"checkedInventory": True}},
                "tags": ["inventory"],
                "nextSceneId": "inn_supplies",
            },
            {"text": "Step outside to survey the area", "tags": ["explore"]},
        ],
        "characters": ["innkeeper"],
        "tags": ["starting", "tavern", "peaceful"],
    },
    {
        "id": "inn_supplies",
        "type": "exploration",
        "title": "Taking Stock",
        "description": "A quiet moment to check your belongings.",
        "choiceTags": ["inventory"],
        "requirements": {"flags": {"checkedInventory": True}},
        "location": {"name": "Crossroads Inn", "continuity": True},
        "narrative": [
            "You find an empty corner table and spread your belongings out beside a guttering "
            "candle.",
            "Everything a {player.archetype} needs is still here. Around you, the Crossroads Inn "
            "carries on with its evening.",
        ],
        "choices": [
            {"text": "Approach the innkeeper for information", "tags": ["social", "information"]},
            {"text": "Listen to the conversations around you", "tags": ["observe", "information"]},
            {"text": "Step outside to survey the area", "tags": ["explore"]},
        ],
        "characters": ["innkeeper"],
        "tags": ["tavern", "peaceful"],
    },
    {
        "id": "village_trouble",
        "type": "quest_start",
        "title": "Village in Need",
        "description": "A village faces mysterious troubles.",
        "location": {
            "name": "Troubled Village",
            "type": "safe",
            "description": "A small village where the locals appear anxious and worried.",
        },
        "narrative": [
            "As you arrive in the village, you notice the worried faces of the locals. They speak "
            "in hushed tones, and many doors remain firmly shut.",
            "An elderly villager approaches you, recognizing you as an outsider who might be able "
            "to help.",
            '"Thank the heavens, a {player.archetype}! Perhaps you can help us with our '
            'troubles..."',
        ],
        "choices": [
            {"text": "Offer your assistance", "tags": ["quest", "helpful"]},
            {"text": "Ask for more details before committing", "tags": ["cautious", "information"]},
            {"text": "Politely decline and continue on your journey", "tags": ["decline", "leave"]},
        ],
        "tags": ["quest", "village", "mystery"],
    },
    {
        "id": "forest_path",
        "type": "exploration",
        "title": "The Winding Forest Path",
        "description": "A path through mysterious woods.",
        "location": {
            "name": "Ancient Forest",
            "type": "wilderness",
            "description": (
                "A dense forest with towering trees and dappled sunlight filtering through "
                "the canopy."
            ),
        },
        "narrative": [
            "The forest path winds between ancient trees, their branches creating patterns of "
            "light and shadow on the ground. The air is rich with the scent of earth and "
            "vegetation.",
            "As you walk deeper into the woods, you sense that you're not alone among the trees.",
        ],
        "choices": [
            {"text": "Continue down the path cautiously", "tags": ["explore", "cautious"]},
            {
                "text": "Leave the path to investigate a strange sound",
                "tags": ["investigate", "danger"],
            },
            {
                "text": "Find a good spot to rest",
                "effects": {"stats": {"health": 10, "mana": 10}},
                "tags": ["rest"],
            },
            {"text": "Turn back toward more open ground", "tags": ["retreat", "leave"]},
        ],
        "tags": ["forest", "nature", "mystery"],
    },
    {
        "id": "bandit_clash",
        "type": "encounter",
        "title": "Steel in the Dark",
        "description": "A bandit refuses to let you pass.",
        "choiceTags": ["combat", "brave", "danger"],
        "narrative": [
            "A scarred bandit steps into your path near {location.name}, blade already drawn.",
            '"Nobody passes without paying," they growl, circling you slowly.',
        ],
        "choices": [
            {"text": "Stand your ground", "tags": ["combat"]},
        ],
        "characters": [
            {
                "id": "bandit",
                "name": "Scarred Bandit",
                "type": "hostile",
                "description": "A wiry outlaw with a notched blade and a hungry look.",
                "stats": {"health": 30, "strength": 8, "defense": 3, "resistance": 2},
                "rewards": {"experience": 40, "inventory": {"add": ["bandit's purse"]}},
            },
        ],
        "tags": ["combat_start", "danger", "bandits"],
    },
]


# =============================================================================
# Locations & Events
# =============================================================================

LOCATION_TEMPLATES: list[dict[str, Any]] = [
    {
        "name": "Mistwood Forest",
        "type": "wilderness",
        "description": (
            "A thick forest where mist clings to the ground and sunlight struggles to "
            "penetrate the dense canopy."
        ),
    },
    {
        "name": "Stormhaven City",
        "type": "town",
        "description": (
            "A bustling walled city, known for its strong defenses and skilled craftsmen."
        ),
    },
    {
        "name": "Forgotten Ruins",
        "type": "dungeon",
        "description": (
            "The crumbling remains of an ancient civilization, now home to dangers and "
            "treasures alike."
        ),
    },
    {
        "name": "Riverdale Village",
        "type": "village",
        "description": "A peaceful farming community nestled alongside a gently flowing river.",
    },
    {
        "name": "Dragonspire Mountains",
        "type": "wilderness",
        "description": (
            "Towering peaks shrouded in clouds, rumored to be the home of ancient dragons."
        ),
    },
]

EVENT_TEMPLATES: list[dict[str, Any]] = [
    {
        "id": "traveling_merchant",
        "title": "Traveling Merchant",
        "description": "You encounter a merchant selling unusual wares.",
        "narrative": (
            "As you travel along the path, you spot a colorful wagon parked to the side. A "
            "merchant with an eccentric appearance waves at you. \"Greetings, traveler! Care to "
            "see my wares? I have items you won't find in ordinary shops!\""
        ),
        "locationTypes": ["wilderness", "road", "safe", "neutral", "village", "town"],
        "choices": [
            {"text": "Browse the merchant's wares", "tags": ["shop", "social"]},
            {"text": "Ask about news and rumors", "tags": ["information", "social"]},
            {"text": "Politely decline and move on", "tags": ["leave", "neutral"]},
            {"text": "Be suspicious of the merchant", "tags": ["cautious", "observe"]},
        ],
        "tags": ["merchant", "social", "opportunity"],
    },
    {
        "id": "ambush",
        "title": "Ambush!",
        "description": "Bandits attempt to ambush you on the road.",
        "narrative": (
            "The path ahead narrows between two rocky outcroppings. As you proceed, several "
            "rough-looking figures emerge from hiding, weapons drawn. \"Hand over your "
            "valuables,\" their leader demands, \"and you might walk away from this.\""
        ),
        "locationTypes": ["wilderness", "road", "dangerous"],
        "timeOfDay": "night",
        "choices": [
            {"text": "Prepare to defend yourself", "tags": ["combat", "brave"]},
            {"text": "Try to talk your way out of the situation", "tags": ["social", "persuade"]},
            {"text": "Look for an escape route", "tags": ["flee", "cautious"]},
            {
                "text": "Surrender your valuables",
                "effects": {"inventory": {"remove": ["gold", "valuables"]}},
                "tags": ["surrender", "cautious"],
            },
        ],
        "tags": ["danger", "combat", "bandits"],
    },
    {
        "id": "lost_traveler",
        "title": "Lost Traveler",
        "description": "You encounter someone in need of assistance.",
        "narrative": (
            "You notice a distressed traveler sitting by the roadside. They look tired and "
            "disoriented. \"Excuse me,\" they call out as they spot you. \"I seem to have lost "
            "my way. Could you help me?\""
        ),
        "locationTypes": ["wilderness", "road", "forest", "neutral"],
        "choices": [
            {
                "text": "Offer directions and assistance",
                "effects": {"relationships": {"traveler": 20}},
                "tags": ["helpful", "social"],
            },
            {
                "text": "Share some of your supplies with them",
                "effects": {"relationships": {"traveler": 30}, "stats": {"health": -5}},
                "tags": ["generous", "helpful"],
            },
            {"text": "Be cautious and ask questions first", "tags": ["cautious", "social"]},
            {"text": "Tell them you can't help and continue on", "tags": ["decline", "neutral"]},
        ],
        "tags": ["social", "help", "opportunity"],
    },
    {
        "id": "strange_discovery",
        "title": "Strange Discovery",
        "description": "You find something unusual on your path.",
        "narrative": (
            "Something catches your eye just off the path - a small, unusual object partially "
            "buried in the ground. It seems to emit a faint glow when the light hits it a "
            "certain way."
        ),
        "locationTypes": ["wilderness", "forest", "ruins", "dungeon"],
        "choices": [
            {"text": "Examine it more closely", "tags": ["investigate", "curious"]},
            {"text": "Touch it carefully", "tags": ["interact", "risk"]},
            {"text": "Leave it alone - it could be dangerous", "tags": ["cautious", "leave"]},
            {
                "text": "Try to take it with you",
                "effects": {"inventory": {"add": ["mysterious object"]}},
                "tags": ["loot", "risk"],
            },
        ],
        "tags": ["mystery", "discovery", "magic"],
    },
]


# =============================================================================
# Characters & Dialogue
# =============================================================================

NPC_TEMPLATES: list[dict[str, Any]] = [
    {
        "id": "innkeeper",
        "name": "Galen",
        "type": "friendly",
        "description": "A middle-aged man with a hearty laugh and a well-trimmed beard.",
        "dialogue": {
            "greeting": [
                "Welcome to the Crossroads Inn, traveler! What can I get for you?",
                "Ah, a new face! Always good to see travelers stopping by. What'll it be?",
            ],
            "friendly": [
                "You're always welcome here. What can I help you with?",
                "Good to see you again! Need anything?",
            ],
            "neutral": [
                "What can I do for you?",
                "Need something?",
            ],
            "farewell": [
                "Safe travels, friend!",
                "Come back anytime!",
            ],
        },
        "questGiver": True,
    },
]

DIALOGUE_PATTERNS: dict[str, list[str]] = {
    "friendly": [
        "Greetings, friend! It's good to see a friendly face around {context.location}.",
        "Ah, welcome! I've heard good things about you. How can I help?",
        "Hello there! What brings someone like you to {context.location} at {context.time}?",
        "Well met! Always a pleasure to see you around these parts.",
    ],
    "neutral": [
        "Hello. What brings you to {context.location}?",
        "Greetings, traveler. Can I help you with something?",
        "Yes? What do you need?",
        "Welcome to {context.location}. What's your business here?",
    ],
    "hostile": [
        "I don't have anything to say to you. Move along.",
        "Keep your distance if you know what's good for you.",
        "What do you want? Make it quick.",
        "I'm watching you, so don't try anything foolish.",
    ],
}


def default_dialogue_patterns() -> dict[str, list[str]]:
    """Generic NPC lines per disposition."""
    return copy.deepcopy(DIALOGUE_PATTERNS)


def default_catalog() -> TemplateCatalog:
    """Build the sample catalog.

    Returns:
        A validated TemplateCatalog with stories, locations, events, the
        innkeeper and the generic dialogue patterns.
    """
    return TemplateCatalog.from_data(
        {
            "storyTemplates": copy.deepcopy(STORY_TEMPLATES),
            "locationTemplates": copy.deepcopy(LOCATION_TEMPLATES),
            "eventTemplates": copy.deepcopy(EVENT_TEMPLATES),
            "npcTemplates": copy.deepcopy(NPC_TEMPLATES),
            "dialoguePatterns": default_dialogue_patterns(),
        }
    )


__all__ = [
    "STORY_TEMPLATES",
    "LOCATION_TEMPLATES",
    "EVENT_TEMPLATES",
    "NPC_TEMPLATES",
    "DIALOGUE_PATTERNS",
    "default_dialogue_patterns",
    "default_catalog",
]
