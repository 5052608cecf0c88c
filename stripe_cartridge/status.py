class Status:
    """Outcome of a payment hook. Only ``Status.OK`` means the authorization went through."""

    OK = 0
    ERROR = 1

    def __init__(self, status: int, message: str | None = None):
        self.status = status
        self.message = message

    def is_error(self) -> bool:
        return self.status == Status.ERROR

    def to_dict(self) -> dict:
        return {
            "status": "ERROR" if self.is_error() else "OK",
            "message": self.message,
        }

    def __eq__(self, other):
        if not isinstance(other, Status):
            return NotImplemented
        return self.status == other.status and self.message == other.message

    def __repr__(self):
        return f"Status({'ERROR' if self.is_error() else 'OK'}, {self.message!r})"
