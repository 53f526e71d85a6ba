"""Core test fixtures for character builder tests."""

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker

from charbuilder.attributes import (
    AttributeBasedRule,
    AttributeModifier,
    FixedRule,
    FormulaRule,
    MainAttributes,
    Operation,
    SecondaryAttributeRules,
    Skill,
)
from charbuilder.character import Ancestry
from charbuilder.choices import (
    AttributeChoiceConfig,
    LanguageChoiceConfig,
    ProfessionChoiceConfig,
    SkillChoiceConfig,
    SpellChoiceConfig,
    SpellChoiceKind,
    SpellChoiceSlot,
)
from charbuilder.database.models.base import Base
from charbuilder.magic import Spell, SpellRegistry, SpellTradition
from charbuilder.paths import Expert, Master, Novice
from charbuilder.services.content_loader import ContentLibrary
from tests.factories import RecordingHook


@pytest.fixture
def recording_hook() -> RecordingHook:
    return RecordingHook()


# =============================================================================
# Ancestries
# =============================================================================


@pytest.fixture
def human() -> Ancestry:
    """Human: all 10s, +1 strength by default, +5 health at level 4."""
    return Ancestry(
        key="human",
        main_attributes=MainAttributes(),
        secondary_attribute_rules=SecondaryAttributeRules(
            perception=AttributeBasedRule("intellect"),
            defense=AttributeBasedRule("agility"),
            health=AttributeBasedRule("strength"),
            healing_rate=FormulaRule("$health / 4"),
            size=FixedRule(1),
            speed=FixedRule(10),
            languages=FixedRule(["Common"]),
        ),
        ancestry_modifier=AttributeModifier(
            health=5,
            choices=[SkillChoiceConfig(count=1, available_skills=[Skill("Determined")])],
        ),
        initial_choices=[
            AttributeChoiceConfig(count=1, default_attributes=["strength"]),
            ProfessionChoiceConfig(
                count=1,
                available_professions=["Academic", "Artisan", "Commoner", "Military"],
                default_professions=["Commoner"],
            ),
        ],
    )


@pytest.fixture
def languer() -> Ancestry:
    """Languer: strength 9, health is strength - 1, collects languages."""
    return Ancestry(
        key="languer",
        main_attributes=MainAttributes(strength=9, agility=9, intellect=12, will=10),
        secondary_attribute_rules=SecondaryAttributeRules(
            perception=FormulaRule("$intellect + 1"),
            defense=AttributeBasedRule("agility"),
            health=AttributeBasedRule("strength", Operation.SUBTRACT, 1),
            healingRate=FormulaRule("$health / 4", minimum=1),
            languages=FixedRule(["Common", "High Archaic"]),
        ),
        ancestry_modifier=AttributeModifier(
            health=3,
            skills=[Skill("Knowledge Seeker")],
            choices=[LanguageChoiceConfig(count=1, available_languages=["Elvish", "Dwarfish"])],
        ),
        initial_choices=[
            AttributeChoiceConfig(count=1, default_attributes=["intellect"]),
            LanguageChoiceConfig(count=1),
        ],
    )


@pytest.fixture
def plain() -> Ancestry:
    """Ancestry without choices or modifier, for isolating path effects."""
    return Ancestry(
        key="plain",
        main_attributes=MainAttributes(),
        secondary_attribute_rules=SecondaryAttributeRules(
            health=AttributeBasedRule("strength"),
            healing_rate=FormulaRule("$health / 4"),
        ),
    )


# =============================================================================
# Paths
# =============================================================================


@pytest.fixture
def warrior() -> Novice:
    return Novice(
        "warrior",
        {
            1: AttributeModifier(
                health=5,
                languages=["Elvish"],
                professions=["Blacksmith"],
                skills=[Skill("Catch Your Breath"), Skill("Weapon Training")],
                choices=AttributeChoiceConfig(count=2, default_attributes=["strength", "agility"]),
            ),
            2: AttributeModifier(health=5, skills=[Skill("Combat Prowess")]),
            5: AttributeModifier(health=5, defense=1),
            8: AttributeModifier(health=5, skills=[Skill("Grit")]),
        },
    )


@pytest.fixture
def magician() -> Novice:
    return Novice(
        "magician",
        {
            1: AttributeModifier(
                power=1,
                health=2,
                skills=[Skill("Sense Magic"), Skill("Cantrip")],
                choices=[
                    AttributeChoiceConfig(count=2, default_attributes=["intellect", "will"]),
                    SpellChoiceConfig(
                        count=2,
                        choices=[
                            SpellChoiceSlot(SpellChoiceKind.DISCOVER_TRADITION),
                            SpellChoiceSlot(SpellChoiceKind.FLEXIBLE_CHOICE),
                        ],
                    ),
                ],
            ),
            2: AttributeModifier(
                health=2,
                choices=SpellChoiceConfig(count=1, choices=[SpellChoiceSlot(SpellChoiceKind.LEARN_SPELL)]),
            ),
            5: AttributeModifier(power=1, health=2),
        },
    )


@pytest.fixture
def priest() -> Novice:
    return Novice("priest", {1: AttributeModifier(power=1, health=4, skills=[Skill("Shared Recovery")])})


@pytest.fixture
def assassin() -> Expert:
    return Expert(
        "assassin",
        {
            3: AttributeModifier(perception=1, health=3, languages=["Dwarfish"], skills=[Skill("Assassinate")]),
            6: AttributeModifier(health=3),
            9: AttributeModifier(health=3),
        },
    )


@pytest.fixture
def acrobat() -> Master:
    return Master(
        "acrobat",
        {
            7: AttributeModifier(
                health=3,
                choices=AttributeChoiceConfig(count=2, default_attributes=["agility", "strength"]),
            ),
            10: AttributeModifier(health=3),
        },
    )


# =============================================================================
# Spells and content
# =============================================================================


@pytest.fixture
def spell_registry() -> SpellRegistry:
    return SpellRegistry(
        traditions=[
            SpellTradition("fire", "Fire Magic", primary_attribute="will"),
            SpellTradition("air", "Air Magic"),
        ],
        spells=[
            Spell("flame_missile", "Flame Missile", "fire", 0, "attack"),
            Spell("fire_blast", "Fire Blast", "fire", 1, "attack"),
            Spell("fireball", "Fireball", "fire", 3, "attack"),
            Spell("stir_the_air", "Stir the Air", "air", 0),
            Spell("glide", "Glide", "air", 1),
        ],
    )


@pytest.fixture(scope="session")
def library() -> ContentLibrary:
    """The bundled content."""
    return ContentLibrary.from_directory()


# =============================================================================
# Database
# =============================================================================


@pytest.fixture(scope="session")
def engine():
    """Create SQLite in-memory engine for fast tests."""
    engine = create_engine(
        "sqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
    )

    # Enable foreign key constraints in SQLite
    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    # Import all models to ensure they're registered with Base
    from charbuilder.database.models import characters  # noqa: F401

    Base.metadata.create_all(bind=engine)
    return engine


@pytest.fixture(scope="function")
def db_session(engine) -> Session:
    """Create a fresh database session for each test.

    Uses a transaction that rolls back after each test for isolation.
    """
    connection = engine.connect()
    transaction = connection.begin()
    session_factory = sessionmaker(bind=connection)
    session = session_factory()

    yield session

    session.close()
    transaction.rollback()
    connection.close()
