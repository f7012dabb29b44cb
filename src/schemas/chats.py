from typing import Any, Optional
from pydantic import BaseModel, Field


class ChatCreate(BaseModel):
    text: str = Field(..., description="Opening user message")


class ChatContinue(BaseModel):
    question: Optional[str] = Field(
        default=None, description="User message; omitted when only storing an answer"
    )
    answer: str = Field(..., description="Model answer")
    img: Optional[Any] = Field(
        default=None, description="Image reference attached to the question"
    )


class ErrorResponse(BaseModel):
    error: str
