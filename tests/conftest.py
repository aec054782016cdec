"""Shared fixtures for pbs_editor tests."""

import logging
from pathlib import Path
from typing import Callable, Dict, Iterator

import pytest

TYPES_TXT = """\
# See the documentation on the wiki to learn how to edit this file.
#-------------------------------
[NORMAL]
Name = Normal
IconPosition = 0
Weaknesses = FIGHTING
Immunities = GHOST
#-------------------------------
[FIRE]
Name = Fire
IconPosition = 10
IsSpecialType = true
Weaknesses = GROUND,ROCK,WATER
Resistances = BUG,STEEL,FIRE,GRASS,ICE,FAIRY
"""

ITEMS_TXT = """\
[POTION]
Name = Potion
NamePlural = Potions
Pocket = 2
Price = 200
FieldUse = OnPokemon
Description = A spray-type medicine for treating wounds.
#-------------------------------
[REPEL]
Name = Repel
NamePlural = Repels
Pocket = 1
Price = 400
"""

ITEMS_EXTRA_TXT = """\
[CUSTOMGEM]
Name = Custom Gem
NamePlural = Custom Gems
Pocket = 1
Price = 1000
"""

POKEMON_TXT = """\
[PIKACHU]
Name = Pikachu
Types = ELECTRIC
BaseStats = 35,55,40,90,50,50
GenderRatio = Female50Percent
GrowthRate = Medium
Abilities = STATIC
HiddenAbilities = LIGHTNINGROD
WildItemUncommon = ORANBERRY
WildItemRare = LIGHTBALL
Generation = 1
#-------------------------------
[CHARIZARD]
Name = Charizard
Types = FIRE,FLYING
BaseStats = 78,84,78,100,109,85
Abilities = BLAZE
HiddenAbilities = SOLARPOWER
Generation = 1
"""

POKEMON_FORMS_TXT = """\
[PIKACHU,1]
FormName = Cosplay
Types = ELECTRIC
#-------------------------------
[CHARIZARD,1]
FormName = Mega Charizard X
MegaStone = CHARIZARDITEX
Types = FIRE,DRAGON
Abilities = TOUGHCLAWS
GrowthRate = Fast
"""

ENCOUNTERS_TXT = """\
# See the documentation on the wiki to learn how to edit this file.
#-------------------------------
[003] # Route 1
Land,21
    40,PIDGEY,2,4
    30,RATTATA,3
    30,RATTATA_1,3,5
#-------------------------------
[003,1] # Route 1 (night)
Land
    100,HOOTHOOT,3,5
"""

TRAINERS_TXT = """\
[YOUNGSTER,Ben]
Items = POTION
LoseText = Aww, I lost.
Pokemon = RATTATA,5
    Moves = TACKLE,TAILWHIP
Pokemon = EKANS,6
    Gender = male
    Shiny = yes
    IV = 31,31,31,31,31,31
#-------------------------------
[LASS,Ann,1]
Pokemon = PIDGEY,8
    Ability = KEENEYE
"""

DEFAULT_PBS_FILES: Dict[str, str] = {
    "types.txt": TYPES_TXT,
    "items.txt": ITEMS_TXT,
    "items_extra.txt": ITEMS_EXTRA_TXT,
    "pokemon.txt": POKEMON_TXT,
    "pokemon_forms.txt": POKEMON_FORMS_TXT,
    "encounters.txt": ENCOUNTERS_TXT,
    "trainers.txt": TRAINERS_TXT,
}


@pytest.fixture
def make_project(tmp_path: Path) -> Callable[..., Path]:
    """Return a builder for a project folder with a PBS/ directory."""

    def _make(files: Dict[str, str] = DEFAULT_PBS_FILES, name: str = "game") -> Path:
        root = tmp_path / name
        pbs = root / "PBS"
        pbs.mkdir(parents=True)
        for filename, text in files.items():
            (pbs / filename).write_text(text, encoding="utf-8")
        return root

    return _make


@pytest.fixture
def settings_file(tmp_path: Path) -> Path:
    """Path of an INI file used instead of the native settings store."""
    directory = tmp_path / "settings"
    directory.mkdir()
    return directory / "pbs_editor.ini"


@pytest.fixture(autouse=True)
def restore_logging() -> Iterator[None]:
    """Undo root logger changes made by setup_logging."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
