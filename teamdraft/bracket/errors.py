class BracketError(Exception):
    pass


class InsufficientTeamsError(BracketError):
    pass


class BracketAlreadyExistsError(BracketError):
    pass


class BracketAccessError(BracketError):
    pass


class MatchNotFoundError(BracketError):
    pass


class MatchResultError(BracketError):
    pass


class MatchStatusError(BracketError):
    pass
