class LectureNotesError(Exception):
    """Base class for errors that map onto an HTTP response.

    ``message`` is what the caller sees; ``detail`` carries upstream or
    internal context that only goes to the log.
    """

    status_code = 500

    def __init__(self, message: str, detail: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail


class InvalidUpload(LectureNotesError):
    status_code = 400


class FileTooLarge(InvalidUpload):
    pass


class MissingTranscription(LectureNotesError):
    status_code = 400

    def __init__(self) -> None:
        super().__init__("No transcription provided")


class TranscriptionFailure(LectureNotesError):
    def __init__(self, detail: str | None = None, status: int | None = None) -> None:
        super().__init__("Failed to transcribe audio", detail)
        self.upstream_status = status


class GenerationFailure(LectureNotesError):
    def __init__(
        self, message: str, detail: str | None = None, status: int | None = None
    ) -> None:
        super().__init__(message, detail)
        self.upstream_status = status


class ExportFailure(LectureNotesError):
    status_code = 400
