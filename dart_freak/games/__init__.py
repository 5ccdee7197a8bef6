import importlib
import inspect
import pkgutil
from pathlib import Path

from dart_freak.core.rules_base import GameRules
from dart_freak.core.types import GameName

# Dynamically import all modules in this package
for _, module_name, _ in pkgutil.iter_modules([Path(__file__).parent]):
    _ = importlib.import_module(f"{__name__}.{module_name}")


def _concrete_rules(base: type[GameRules]) -> list[type[GameRules]]:
    found: list[type[GameRules]] = []
    for cls in base.__subclasses__():
        if not inspect.isabstract(cls):
            found.append(cls)
        found.extend(_concrete_rules(cls))
    return found


RULES_CLASSES: dict[GameName, type[GameRules]] = {
    cls.name: cls for cls in _concrete_rules(GameRules)
}
