class LowkeyTypeError(Exception):
    """Base class for errors raised by lowkeytype."""


class LoadError(LowkeyTypeError):
    """A word list could not be loaded."""


class ProfileError(LowkeyTypeError):
    """The user profile file could not be written."""


class SessionError(LowkeyTypeError):
    """A typing session was driven outside its allowed states."""
