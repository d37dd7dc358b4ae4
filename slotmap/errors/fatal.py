# FILE: slotmap/errors/fatal.py
# ------------------------------------------------------------------------------
class SlotMapError(Exception):
    def __init__(self, message, context=None):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)

class ConfigurationError(SlotMapError):
    pass

class AllocationError(SlotMapError):
    pass

class SlotMapOverflowError(SlotMapError):
    pass


class ForeignKeyError(AssertionError):
    """A key that this table never issued (wrong instance or hand-built).

    Only raised while ``__debug__`` is set, like a plain ``assert``.
    """
