class CareflowError(Exception):
    """Base error; every subclass carries a human-readable message."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class GenerationError(CareflowError):
    """The generative text service call itself failed."""


class ParseError(CareflowError):
    """Model output could not be decoded into the expected structure."""

    def __init__(self, message: str, raw_text: str) -> None:
        super().__init__(message)
        self.raw_text = raw_text


class DirectoryError(CareflowError):
    """Practitioner directory or booking store read failed."""


class BookingWriteError(CareflowError):
    pass


class BookingConflictError(CareflowError):
    pass


class InterviewStateError(CareflowError):
    """A transition was requested that the session's current state forbids."""


class PractitionerNotFoundError(DirectoryError):
    pass
