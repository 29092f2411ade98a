from pydantic import BaseModel, Field
from .base_enums import MessageRole


class PromptMessage(BaseModel):
    """One role-tagged block of a prompt sent to the LLM."""

    role : MessageRole = Field(..., description="Who the message is attributed to")
    content : str = Field(..., description="Message text, sent verbatim")
