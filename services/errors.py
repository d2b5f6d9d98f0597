"""
Error taxonomy for the study planner.

Every error carries the HTTP status it maps to; the application factory
registers a single handler that renders any of them as ``{"error": message}``.
"""


class StudyPlannerError(Exception):
    """Base class for errors that map onto an HTTP response"""
    status_code = 500

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> dict:
        return {'error': self.message}


class CallerInputInvalid(StudyPlannerError):
    """A required request parameter is missing or malformed"""
    status_code = 400


class Unauthenticated(StudyPlannerError):
    status_code = 401


class NotFoundOrUnauthorized(StudyPlannerError):
    """Resource is absent or owned by someone else; the two are never distinguished"""
    status_code = 404


class UpstreamError(StudyPlannerError):
    """The completion provider failed for a reason we don't classify further"""
    status_code = 502


class UpstreamAuthError(UpstreamError):
    status_code = 401


class UpstreamQuotaExceeded(UpstreamError):
    status_code = 402


class ExtractionFailed(StudyPlannerError):
    """No decodable JSON could be recovered from a model response"""
    status_code = 500

    def __init__(self, message: str, raw_response: str = ''):
        super().__init__(message)
        self.raw_response = raw_response

    def to_dict(self) -> dict:
        return {'error': self.message, 'rawResponse': self.raw_response}


class PersistenceError(StudyPlannerError):
    status_code = 500
