# backend/chimera/engine/quantum_templates.py
"""
Ordered keyword table for the Translator.
Each keyword (matched as a lower-case substring) maps to exactly one design fact.
Order here is the order quanta are created when several keywords match.
"""


QUANTUM_TEMPLATES = [
    # 1 — Genre
    ("rpg", "Genre", {"name": "Action RPG"}),

    # 2 — Core mechanic
    ("stealth", "MechanicPillar", {"name": "Stealth"}),

    # 3 — World
    ("cyberpunk", "Setting", {"name": "Cyberpunk Fantasy"}),

    # 4 — Lead character
    ("protagonist", "Character", {"name": "Unit 734"}),

    # 5 — Signature ability
    ("ghostwire", "Ability", {"name": "Ghostwire"}),

    # 6 — Art direction
    ("art style", "ArtStyle", {"name": "Dystopian Baroque"}),

    # 7 — Core loop
    ("gameplay loop", "GameplayLoop", {"description": "Explore, Contract, Takedown, Upgrade"}),
]
