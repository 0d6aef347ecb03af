"""Error taxonomy shared by the job board workflows.

Every error carries the ``title`` and ``description`` of the notice shown to
the user when it is caught at a workflow boundary.
"""


class JobBoardError(Exception):
    """Base exception for job board workflow errors."""

    title = "Error"

    def __init__(self, description: str, title: str = None):
        super().__init__(description)
        self.description = description
        if title is not None:
            self.title = title


class ValidationError(JobBoardError):
    """A required field is missing or a value (or file) is invalid."""

    title = "Missing Information"


class UploadError(JobBoardError):
    """The resume could not be uploaded."""

    title = "Upload Error"


class InvalidReferenceError(JobBoardError):
    """A job reference could not be resolved to a stored job."""

    title = "Invalid Job ID"


class PersistenceError(JobBoardError):
    """An insert, update or delete against the data store failed."""

    title = "Database Error"


class AuthError(JobBoardError):
    """There is no valid session for an operation that requires one."""

    title = "Not authenticated"
