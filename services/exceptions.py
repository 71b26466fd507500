from fastapi import status


class CourseServiceError(Exception):
    """Base class for course rule violations, carrying the HTTP status to report."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    default_message: str = "Bad Request"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ForbiddenError(CourseServiceError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class InvalidIdentifierError(CourseServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid ID format"


class CourseNotFoundError(CourseServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Course Not Found"


class AlreadyEnrolledError(CourseServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Already enrolled to this course"


class NotEnrolledError(CourseServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Student is not enrolled to this course"


class InternalServiceError(CourseServiceError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal Server Error"
