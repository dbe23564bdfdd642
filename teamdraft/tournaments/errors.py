class TournamentError(Exception):
    pass


class TournamentNotFoundError(TournamentError):
    pass


class TournamentAccessError(TournamentError):
    pass


class TournamentStatusError(TournamentError):
    pass


class TournamentValidationError(TournamentError):
    pass


class RegistrationValidationError(TournamentError):
    pass


class RegistrationNotFoundError(TournamentError):
    pass


class AlreadyRegisteredError(TournamentError):
    pass


class PlayerNotRegisteredError(TournamentError):
    pass


class CaptainRankingError(TournamentError):
    pass
