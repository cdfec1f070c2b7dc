from typing import Optional

from pydantic import BaseModel


class AIChatRequest(BaseModel):
    prompt: Optional[str] = None


class ChatRequest(BaseModel):
    message: Optional[str] = None
    language: str = "ar"


class TranslateRequest(BaseModel):
    text: Optional[str] = None
    targetLanguage: Optional[str] = None
