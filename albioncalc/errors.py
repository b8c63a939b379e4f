"""Exceptions raised by the albioncalc engine."""


class EngineError(Exception):
    """Base class for engine errors."""


class UnknownItemError(EngineError, KeyError):
    """An item id is missing from the item index (broken upstream data)."""

    def __init__(self, item_id):
        super().__init__(item_id)
        self.item_id = item_id

    def __str__(self):
        return f"Weapon not found in item index: {self.item_id}"


class UnknownCategoryError(EngineError, KeyError):
    """No focus-cost table entry for a crafting category."""

    def __str__(self):
        return f"No FCE data for {self.args[0]}"


class DataFormatError(EngineError, ValueError):
    """A table or index file does not have the expected shape."""
