"""Expected failures of the voting core.

Each error carries the HTTP status and stable error code the API answers
with, so routes can simply let them propagate.
"""


class VotingError(Exception):
    status_code = 500
    code = 'internal_error'
    default_message = 'Internal server error'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self):
        return {'error': self.message, 'code': self.code}


class ValidationError(VotingError):
    """Malformed or missing input. Raised before anything is written."""
    status_code = 400
    code = 'validation_error'
    default_message = 'Invalid request'


class NotFound(VotingError):
    status_code = 404
    code = 'not_found'
    default_message = 'Game not found'


class VotingClosed(VotingError):
    status_code = 403
    code = 'voting_closed'
    default_message = 'This match is closed. Voting has ended.'


class ConflictRetry(VotingError):
    """A concurrent first insert for the same voter won the unique index.

    The vote store retries the write as an amend; this only reaches a
    client once those retries are exhausted.
    """
    status_code = 409
    code = 'conflict'
    default_message = 'Your vote is being saved by another request, please retry'
