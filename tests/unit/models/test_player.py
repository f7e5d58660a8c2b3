"""Tests for the player model."""

from __future__ import annotations

import pytest
from pydantic import ValidationError as PydanticValidationError

from legends_engine.models.player import Background, Player, PlayerStats, canonical_stat_name


class TestPlayerStats:
    """Tests for the PlayerStats stat block."""

    def test_defaults(self) -> None:
        """Test default stat values."""
        stats = PlayerStats()

        assert (stats.health, stats.max_health) == (100, 100)
        assert (stats.mana, stats.max_mana) == (50, 50)
        assert stats.strength == 10
        assert stats.defense == 5
        assert (stats.level, stats.experience, stats.experience_to_level) == (1, 0, 100)

    def test_camel_case_input(self) -> None:
        """Test that camelCase keys from authored data are accepted."""
        stats = PlayerStats.model_validate({"maxHealth": 80, "health": 80, "experienceToLevel": 50})

        assert stats.max_health == 80
        assert stats.experience_to_level == 50

    def test_pools_clamped_on_construction(self) -> None:
        """Test that health and mana never exceed their ceilings."""
        stats = PlayerStats(health=500, mana=-3)

        assert stats.health == 100
        assert stats.mana == 0

    def test_canonical_stat_name(self) -> None:
        """Test camelCase stat lookup names."""
        assert canonical_stat_name("maxMana") == "max_mana"
        assert canonical_stat_name("strength") == "strength"


class TestPlayer:
    """Tests for Player construction and stat mutation."""

    def test_defaults(self) -> None:
        """Test default player values."""
        player = Player()

        assert player.name == "Adventurer"
        assert player.archetype == "warrior"
        assert player.abilities == ["Powerful Strike", "Shield Block", "Intimidate"]
        assert player.background.hometown == "Unknown"

    def test_archetype_abilities(self) -> None:
        """Test archetype default abilities."""
        assert Player(archetype="mage").abilities == ["Fireball", "Arcane Shield", "Teleport"]
        assert Player(archetype="rogue").abilities == ["Backstab", "Evade", "Pickpocket"]
        assert Player(archetype="bard").abilities == ["Basic Attack"]

    def test_explicit_abilities_kept(self) -> None:
        """Test that provided abilities replace the defaults."""
        player = Player(archetype="mage", abilities=["Frost Nova"])

        assert player.abilities == ["Frost Nova"]

    def test_background_extra_fields(self) -> None:
        """Test that authored background fields are preserved."""
        player = Player.from_data({"background": {"hometown": "Oakvale", "mentor": "Ysolde"}})

        assert isinstance(player.background, Background)
        assert player.background.hometown == "Oakvale"
        assert player.background.model_extra == {"mentor": "Ysolde"}

    def test_from_data_none(self) -> None:
        """Test building a default player from missing data."""
        assert Player.from_data(None).name == "Adventurer"

    def test_get_stat(self, player: Player) -> None:
        """Test stat lookup by snake_case, camelCase and unknown names."""
        assert player.get_stat("strength") == 10
        assert player.get_stat("maxHealth") == 100
        assert player.get_stat("luck") == 0
        assert player.get_stat("luck", 7) == 7

    def test_health_clamped_to_max(self, player: Player) -> None:
        """Test that healing never exceeds max health."""
        assert player.modify_stat("health", 50) is True
        assert player.stats.health == 100

    def test_health_clamped_to_zero(self, player: Player) -> None:
        """Test that damage never drops health below zero."""
        player.modify_stat("health", -500)
        assert player.stats.health == 0

    def test_repeated_damage(self, player: Player) -> None:
        """Test applying the same health delta twice."""
        player.modify_stat("health", -5)
        assert player.stats.health == 95
        player.modify_stat("health", -5)
        assert player.stats.health == 90

    def test_mana_clamped(self, player: Player) -> None:
        """Test mana clamping in both directions."""
        player.modify_stat("mana", 100)
        assert player.stats.mana == 50
        player.modify_stat("mana", -100)
        assert player.stats.mana == 0

    def test_lowering_ceiling_reclamps_pool(self, player: Player) -> None:
        """Test that a lowered max health pulls health down with it."""
        player.modify_stat("maxHealth", -40)

        assert player.stats.max_health == 60
        assert player.stats.health == 60

    def test_ceiling_floor(self, player: Player) -> None:
        """Test that max health never drops below one."""
        player.modify_stat("max_health", -1000)

        assert player.stats.max_health == 1
        assert player.stats.health == 1

    def test_unknown_stat_ignored(self, player: Player) -> None:
        """Test that unknown stats report failure and change nothing."""
        before = player.stats.model_dump()

        assert player.modify_stat("luck", 5) is False
        assert player.stats.model_dump() == before

    def test_add_ability(self, player: Player) -> None:
        """Test learning abilities once."""
        assert player.add_ability("Cleave") is True
        assert player.add_ability("Cleave") is False
        assert player.abilities[-1] == "Cleave"


class TestLevelUp:
    """Tests for experience and level progression."""

    def test_threshold_crossing(self, player: Player) -> None:
        """Test a warrior level-up and its bonuses."""
        player.modify_stat("health", -30)
        player.modify_stat("experience", 100)
        stats = player.stats

        assert stats.level == 2
        assert stats.experience == 0
        assert stats.experience_to_level == 150
        assert stats.max_health == 110
        assert stats.health == 110
        assert stats.max_mana == 55
        assert stats.mana == 55
        assert stats.strength == 13
        assert stats.defense == 7
        assert stats.dexterity == 11

    def test_below_threshold(self, player: Player) -> None:
        """Test that experience below the threshold keeps the level."""
        player.modify_stat("experience", 99)

        assert player.stats.level == 1
        assert player.stats.experience == 99

    def test_multiple_levels_at_once(self, player: Player) -> None:
        """Test that a large gain can cross several thresholds."""
        player.modify_stat("experience", 250)
        stats = player.stats

        assert stats.level == 3
        assert stats.experience == 0
        assert stats.experience_to_level == 225

    def test_threshold_growth_floors(self) -> None:
        """Test that the next threshold is floored."""
        player = Player.from_data({"stats": {"experienceToLevel": 15}})
        player.modify_stat("experience", 15)

        assert player.stats.experience_to_level == 22

    def test_smallest_threshold_still_grows(self) -> None:
        """Test that the lowest threshold rises on every level-up."""
        player = Player.from_data({"stats": {"experienceToLevel": 2}})
        thresholds = [player.stats.experience_to_level]
        for _ in range(4):
            player.modify_stat("experience", player.stats.experience_to_level)
            thresholds.append(player.stats.experience_to_level)

        assert player.stats.level == 5
        assert thresholds == [2, 3, 4, 6, 9]

    def test_threshold_floor(self, player: Player) -> None:
        """Test that the threshold cannot be pushed below two."""
        player.modify_stat("experience_to_level", -1000)
        assert player.stats.experience_to_level == 2

        with pytest.raises(PydanticValidationError):
            PlayerStats(experience_to_level=1)

    def test_mage_bonus(self) -> None:
        """Test the mage level-up bonus on top of the general gains."""
        player = Player(archetype="mage")
        player.modify_stat("experience", 100)
        stats = player.stats

        assert stats.intelligence == 13
        assert stats.resistance == 7
        assert stats.max_mana == 60
        assert stats.mana == 60

    def test_unknown_archetype_balanced_bonus(self) -> None:
        """Test the balanced bonus for archetypes outside the closed set."""
        player = Player(archetype="bard")
        player.modify_stat("experience", 100)
        stats = player.stats

        assert player.archetype == "bard"
        assert (stats.strength, stats.intelligence, stats.dexterity) == (11, 11, 11)
        assert (stats.charisma, stats.defense) == (11, 6)
