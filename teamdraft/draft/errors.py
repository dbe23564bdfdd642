class DraftError(Exception):
    pass


class InvalidStateError(DraftError):
    pass


class DraftSessionNotFoundError(DraftError):
    pass


class DraftSessionAlreadyExistsError(DraftError):
    pass


class SessionNotActiveError(DraftError):
    pass


class NotYourTurnError(DraftError):
    pass


class PlayerUnavailableError(DraftError):
    pass


class DraftAccessError(DraftError):
    pass


class TeamNotFoundError(DraftError):
    pass


class CaptainsNotConnectedError(DraftError):
    def __init__(self, missing_captain_ids: list[str]) -> None:
        super().__init__(f"captains not connected: {', '.join(missing_captain_ids)}")
        self.missing_captain_ids = missing_captain_ids
