# routers/journal.py
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Response, UploadFile, status

from auth.deps import get_current_user
from config import Settings
from dependencies import get_app_settings, get_store
from schemas.base import utcnow
from schemas.journal import JournalEntry
from services.store import PlantPalStore
from services.uploads import save_attachment

router = APIRouter(
    prefix="/journal",
    tags=["Journal"],
    dependencies=[Depends(get_current_user)],
)


@router.get("", response_model=List[JournalEntry])
def get_journal_entries(store: PlantPalStore = Depends(get_store)):
    return store.journal.list()


@router.post("", response_model=JournalEntry, status_code=status.HTTP_201_CREATED)
def create_journal_entry(
    title: str = Form(...),
    content: str = Form(""),
    file: Optional[UploadFile] = File(None),
    store: PlantPalStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
):
    if not title.strip():
        raise HTTPException(status_code=400, detail="Title is required.")

    attachment = None
    if file is not None and file.filename:
        attachment = save_attachment(settings.upload_dir, file.filename, file.content_type, file.file.read())

    entry = JournalEntry(title=title.strip(), content=content, date=utcnow(), file=attachment)
    return store.journal.put(entry)


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_journal_entry(entry_id: int, store: PlantPalStore = Depends(get_store)):
    if not store.journal.delete(entry_id):
        raise HTTPException(status_code=404, detail="Journal entry not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
