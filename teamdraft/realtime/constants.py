CHANGE_EVENT_DRAFT_PICK = "draft_pick"
CHANGE_EVENT_DRAFT_SESSION = "draft_session"
CHANGE_EVENT_MATCH = "match"
CHANGE_EVENT_SCHEDULE_PROPOSAL = "schedule_proposal"
CHANGE_EVENT_BRACKET = "bracket"

CHANGE_EVENT_TYPES = frozenset(
    {
        CHANGE_EVENT_DRAFT_PICK,
        CHANGE_EVENT_DRAFT_SESSION,
        CHANGE_EVENT_MATCH,
        CHANGE_EVENT_SCHEDULE_PROPOSAL,
        CHANGE_EVENT_BRACKET,
    }
)
