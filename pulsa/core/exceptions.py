class PulsaError(Exception):
    """Base class for errors raised by the CRUD layer."""


class NotFoundError(PulsaError, LookupError):
    """A referenced quiz, lesson, course, badge or user does not exist."""

    def __init__(self, resource: str, identifier):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} with ID {identifier} not found.")


class InvalidInputError(PulsaError, ValueError):
    """The request is well-formed but its content cannot be processed."""


class ConflictError(PulsaError):
    """The write would violate a uniqueness rule (e.g. a duplicate slug)."""
