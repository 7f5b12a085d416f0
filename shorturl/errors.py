from fastapi import status


class ShortenerError(Exception):
    """Base for failures that end a request with a fixed status and message."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail: str = "Internal server error"

    def __init__(self, detail: str | None = None):
        if detail is not None:
            self.detail = detail
        super().__init__(self.detail)


class BodyReadError(ShortenerError):
    status_code = status.HTTP_302_FOUND
    detail = "Posted data not supported"


class MalformedJSON(ShortenerError):
    status_code = status.HTTP_404_NOT_FOUND
    detail = "Posted URL not supported"


class InvalidURL(ShortenerError):
    status_code = status.HTTP_404_NOT_FOUND
    detail = "An invalid URL found, provide a valid URL"


class NotFound(ShortenerError):
    status_code = status.HTTP_404_NOT_FOUND
    detail = "Not found"


class CodeGenerationFailed(ShortenerError):
    detail = "failed to generate unique code"
