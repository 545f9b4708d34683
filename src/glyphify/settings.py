import dataclasses
from dataclasses import dataclass

from glyphify.charsets import DEFAULT_CHARACTER_SET, resolve_ramp
from glyphify.errors import InvalidInput

# Bounds offered by interactive front ends; the converter itself accepts any positive width
MIN_COLUMNS = 20
MAX_COLUMNS = 200
DEFAULT_COLUMNS = 100


@dataclass(frozen=True)
class ConversionSettings:
    columns: int = DEFAULT_COLUMNS
    character_set: str = DEFAULT_CHARACTER_SET
    custom_ramp: str | None = None
    colored: bool = True
    inverted: bool = False

    def __post_init__(self):
        if self.columns < 1:
            raise InvalidInput(f"Columns must be positive, got {self.columns}")
        resolve_ramp(self.character_set, self.custom_ramp)

    @property
    def ramp(self) -> str:
        return resolve_ramp(self.character_set, self.custom_ramp)

    def replace(self, **changes) -> "ConversionSettings":
        return dataclasses.replace(self, **changes)
