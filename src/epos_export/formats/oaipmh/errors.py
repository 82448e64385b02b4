"""
OAI-PMH protocol errors.

Each error carries the OAI-PMH error code it is reported under; the service
turns any ``OaiPmhError`` into an ``<error code="...">`` response.
"""


class OaiPmhError(Exception):
    """Base class of protocol errors reported to the harvester."""

    code = "badArgument"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class BadVerbError(OaiPmhError):
    code = "badVerb"


class BadArgumentError(OaiPmhError):
    code = "badArgument"


class CannotDisseminateFormatError(OaiPmhError):
    code = "cannotDisseminateFormat"


class BadResumptionTokenError(OaiPmhError):
    code = "badResumptionToken"


class NoRecordsMatchError(OaiPmhError):
    code = "noRecordsMatch"


class IdDoesNotExistError(OaiPmhError):
    code = "idDoesNotExist"
