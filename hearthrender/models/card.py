from dataclasses import dataclass, field
from typing import Any

# Enchantments share the spell frame
TYPE_ALIASES: dict[str, str] = {"ENCHANTMENT": "SPELL"}

PLACEHOLDER_TYPE = "SPELL"

# Catalog keys mapped onto named attributes; collectionText is consumed
_NAMED_KEYS = frozenset({"id", "type", "name", "text", "collectionText", "cardClass", "cost"})


@dataclass(frozen=True, slots=True)
class CardRecord:
    """
    A catalog entry normalized for rendering.

    Attributes:
        id: Catalog card id (e.g., "EX1_001"); None for the placeholder card
        type: Render frame type ("MINION", "SPELL", "WEAPON", "HERO", ...)
        name: Localized card name
        text: Localized rules text (collection text preferred)
        card_class: Class tag (e.g., "MAGE", "NEUTRAL")
        cost: Mana cost
        extra: Remaining locale-specific catalog fields (attack, health, rarity, ...)
    """

    id: str | None
    type: str
    name: str | None = None
    text: str | None = None
    card_class: str | None = None
    cost: int | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_catalog_entry(cls, entry: dict[str, Any]) -> "CardRecord":
        """
        Build a record from a raw catalog object.

        ENCHANTMENT is rendered as SPELL. Text is taken from collectionText
        when it is non-empty, otherwise from text. collectionText is dropped.
        """
        raw_type = str(entry.get("type", PLACEHOLDER_TYPE))
        raw_id = entry.get("id")

        return cls(
            id=str(raw_id) if raw_id is not None else None,
            type=TYPE_ALIASES.get(raw_type, raw_type),
            name=entry.get("name"),
            text=entry.get("collectionText") or entry.get("text"),
            card_class=entry.get("cardClass"),
            cost=entry.get("cost"),
            extra={k: v for k, v in entry.items() if k not in _NAMED_KEYS},
        )

    @classmethod
    def placeholder(cls) -> "CardRecord":
        """Blank spell used when no catalog card can be resolved."""
        return cls(id=None, type=PLACEHOLDER_TYPE)
