class ReadableException(Exception):
    def __init__(self, message, cause=None):
        self.message = message
        self.cause = cause

    def __str__(self):
        if self.cause is None:
            return repr(self.message)
        else:
            return repr(self.message) + repr(self.cause)


class DataComError(ReadableException):
    pass


class InvalidArgument(DataComError, ValueError):
    """
    A paging argument violated a precondition
    =========================================

    Raised for page numbers of 0 or None and for offsets (or page-like
    values) above the configured ceiling. The offending value and the
    bound are kept on the exception.
    """

    def __init__(self, message, value=None, bound=None):
        self.value = value
        self.bound = bound
        super(InvalidArgument, self).__init__(message)

    def __str__(self):
        return str(self.message)


class ParamError(DataComError, ValueError):
    def __str__(self):
        return str(self.message)


class TokenFailError(DataComError):
    def __str__(self):
        return str(self.message)


class WebserviceError(DataComError):
    """
    An error returned from the remote search service
    ================================================

    Carries the HTTP status code, the reason phrase and whatever
    message the server returned in its body.
    """

    def __init__(self, message, status_code=0, reason=None, server_message=None):
        self.status_code = status_code
        self.reason = reason
        self.server_message = server_message
        super(WebserviceError, self).__init__(message)

    def __str__(self):
        parts = [str(self.message)]
        if self.status_code:
            parts.append("(%s %s)" % (self.status_code, self.reason or ""))
        if self.server_message:
            parts.append(str(self.server_message))
        return " ".join(part.strip() for part in parts if part)
