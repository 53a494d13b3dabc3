"""Editable static menu configuration."""

from __future__ import annotations

BRAND_NAME = "Hanamo Home Cafe"
BRAND_TAGLINE = "Cute drinks. Happy hearts. ♡"

BASE_CATALOG: dict[str, str] = {
    "matcha": "Matcha",
    "viet": "Viet Coffee",
}

BASE_TAGLINES: dict[str, str] = {
    "matcha": "earthy, vibrant",
    "viet": "bold, sweet",
}

MILK_CATALOG: dict[str, str] = {
    "whole": "Whole milk",
    "oat": "Oat milk",
}

# Shorter labels used on the confirmation view and the printed receipt.
MILK_SHORT_LABELS: dict[str, str] = {
    "whole": "Whole",
    "oat": "Oat",
}

TOPPING_CATALOG: dict[str, str] = {
    "strawberry": "Strawberry",
    "ube": "Ube cream",
    "egg": "Egg cream",
    "salted": "Salted cream",
}

# Badge colors for the base choice rows.
BASE_BADGE_STYLES: dict[str, str] = {
    "matcha": "bold #0b1f0f on #a7f3d0",
    "viet": "bold #3b2606 on #f5deb3",
}

NO_TOPPINGS_LABEL = "None"
