class DuelError(Exception):
    """Base class for errors surfaced to the originating connection."""

    message = 'Duel error'

    def __init__(self, message=None):
        super().__init__(message or self.message)


class NameConflictError(DuelError):
    message = 'Name already taken'


class InvalidNameError(DuelError):
    message = 'name is required'


class InvalidChallengerError(DuelError):
    message = 'Invalid challenger session'


class AlreadyBusyError(DuelError):
    message = 'You are already in a game'


class SelfChallengeError(DuelError):
    message = 'You cannot challenge yourself'


class TargetNotFoundError(DuelError):
    message = 'Target player not found'


class TargetBusyError(DuelError):
    message = 'Target player is in game'


class SessionNotFoundError(DuelError):
    message = 'Duel not found'


class QuestionBankError(ValueError):
    pass
