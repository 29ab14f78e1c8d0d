class ChatError(Exception):
    """Base class for errors raised by the chat core."""


class Unauthorized(ChatError):
    """The caller is not allowed to chat (account not approved)."""

    def __init__(self, message: str = "Your account is pending admin approval.") -> None:
        super().__init__(message)


class InvalidReply(ChatError):
    """A message points at a reply target that is not in the conversation."""

    def __init__(self, target_id: str) -> None:
        super().__init__(f"Reply target {target_id!r} is not in the conversation")
        self.target_id = target_id


class GatewayError(ChatError):
    """The assistant backend could not produce a reply."""
