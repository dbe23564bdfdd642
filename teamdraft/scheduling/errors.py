class ScheduleError(Exception):
    pass


class ScheduleAccessError(ScheduleError):
    pass


class ScheduleValidationError(ScheduleError):
    pass


class ProposalNotFoundError(ScheduleError):
    pass


class ProposalNotPendingError(ScheduleError):
    pass


class ProposalExpiredError(ScheduleError):
    pass


class DuplicatePendingProposalError(ScheduleError):
    pass


class MatchNotSchedulableError(ScheduleError):
    pass
