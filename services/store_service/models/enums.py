"""Enum definitions for store service models."""

import enum


def enum_values(enum_cls):
    """Return persistent DB values for SAEnum mappings."""
    return [member.value for member in enum_cls]


class ProductCategory(str, enum.Enum):
    NECKLACE = "necklace"
    BRACELET = "bracelet"
    EARRING = "earring"
    RING = "ring"
    PENDANT = "pendant"
    WATCH = "watch"
    OTHER = "other"


class Material(str, enum.Enum):
    GOLD = "gold"
    SILVER = "silver"
    PLATINUM = "platinum"
    DIAMOND = "diamond"
    OTHER = "other"
