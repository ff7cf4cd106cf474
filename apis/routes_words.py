from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request
from loguru import logger

from core.errors import StorageError
from core.word_store import WordStore
from models.schemas import WordItem, WordRecord


router = APIRouter()


def get_store(request: Request) -> WordStore:
    return request.app.state.store


# The user submitted the form: store the word and hand the new row back
@router.put("/words", response_model=WordRecord)
async def add_word(item: WordItem, store: WordStore = Depends(get_store)):
    try:
        return await store.add_word(item.word, item.definition)
    except StorageError as e:
        logger.error(f"we have issues in add word api {e}")
        raise HTTPException(status_code=500, detail="Word store unavailable")


# Called when the page loads and after every successful insert
@router.get("/words", response_model=List[WordRecord])
async def list_words(store: WordStore = Depends(get_store)):
    try:
        return await store.list_words()
    except StorageError as e:
        logger.error(f"Error in list_words: {e}")
        raise HTTPException(status_code=500, detail="Word store unavailable")
