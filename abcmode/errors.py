"""Exception types raised by the abcmode core."""


class AbcModeError(Exception):
    """Base class for all abcmode errors."""


class UnknownField(AbcModeError, KeyError):
    """A field name is not part of the tag table."""

    def __init__(self, field_name: str) -> None:
        super().__init__(field_name)
        self.field_name = field_name

    def __str__(self) -> str:
        return f"Unknown field '{self.field_name}'"


class NoRecordFound(AbcModeError):
    """No reference-number line precedes the queried position."""


class NoSymbolAtPosition(AbcModeError):
    """A symbol pad click landed on whitespace or outside the pad."""


class UnknownInstrument(AbcModeError, KeyError):
    """An instrument name is not in the General MIDI table."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Unknown instrument '{self.name}'"


class UnknownCommand(AbcModeError, KeyError):
    """A command id is not registered."""

    def __init__(self, command_id: str) -> None:
        super().__init__(command_id)
        self.command_id = command_id

    def __str__(self) -> str:
        return f"Unknown command '{self.command_id}'"
