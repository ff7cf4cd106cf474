from uuid import UUID

from pydantic import BaseModel


class WordItem(BaseModel):
    word: str
    definition: str


class WordRecord(BaseModel):
    id: UUID
    word: str
    definition: str
