"""Default set of emojis with local usage time series."""

from __future__ import annotations

DEFAULT_TRACKED_EMOJIS: tuple[str, ...] = (
    "airplane", "alien_monster", "american_football", "angry", "apple", "baby",
    "balloon", "ballot_box_with_ballot", "banana", "baseball", "basketball", "bear",
    "bee", "beer", "bicycle", "bikini", "bird", "bomb", "books", "brazil", "broken",
    "cactus", "calendar", "candy", "cat", "chart_decr", "chart_incr", "chequered_flag",
    "chicken", "china", "church", "cigarette", "clapper_board", "cookie", "cow",
    "crocodile", "dog", "dragon", "elephant", "envelope", "eritrea", "factory",
    "fallen_leaf", "fish", "football", "four_leaf_clover", "france", "fuel", "game",
    "germany", "ghost", "graduation_cap", "guitar", "hong_kong", "horse",
    "hourglass_done", "india", "ireland", "itlay", "japan", "kitchen_knife", "koala",
    "korea", "lemon", "light_bulb", "lion", "mens_room", "money", "mouse",
    "movie_camera", "musical_note", "palestinian_territories", "panda", "pear",
    "penguin", "pig", "pile_of_poo", "pistol", "pizza", "rabbit", "rainbow", "recycle",
    "reminder_ribbon", "ring", "rocket", "rose", "santa", "scissors", "shooting_star",
    "skis", "snail", "snake", "snowboarder", "snowflake", "soft_ice_cream", "spain",
    "syria", "syringe", "toilet", "tomato", "top_hat", "tree", "trophy", "turtle", "uk",
    "unicorn", "us", "violin", "watermelon", "wheelchair_symbol", "womens_room",
    "wrapped_gift",
)


def get_tracked_emojis() -> list[str]:
    """Return a mutable list of tracked emoji slugs."""

    return list(DEFAULT_TRACKED_EMOJIS)


def display_name(slug: str) -> str:
    """Title-case a slug: "pile_of_poo" -> "Pile Of Poo"."""

    return " ".join(word[:1].upper() + word[1:] for word in slug.split("_") if word)
