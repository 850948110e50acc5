from pydantic import BaseModel


class MessageResponse(BaseModel):
    """Plain acknowledgement body, e.g. {"message": "Faculty deleted successfully"}."""

    message: str
