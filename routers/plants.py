import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Response, UploadFile, status

from auth.deps import get_current_user
from config import Settings
from dependencies import get_app_settings, get_store
from schemas.plant import MAX_FREQUENCY_DAYS, ActivityRequest, Plant, PlantDraft, PlantUpdate
from services import plant_service
from services.errors import NotFoundError, ValidationError
from services.store import PlantPalStore
from services.uploads import save_upload

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/plants",
    tags=["Plants"],
    dependencies=[Depends(get_current_user)],
)


@router.get("", response_model=List[Plant])
def get_plants(store: PlantPalStore = Depends(get_store)):
    try:
        return plant_service.list_plants(store)
    except Exception:
        logger.exception("failed to list plants")
        raise HTTPException(status_code=500, detail="Error fetching plants")


@router.post("", response_model=Plant, status_code=status.HTTP_201_CREATED)
def create_plant(
    name: str = Form(...),
    scientific_name: str = Form("", alias="scientificName"),
    location: str = Form(""),
    watering_frequency: int = Form(7, alias="wateringFrequency", gt=0, le=MAX_FREQUENCY_DAYS),
    fertilizing_frequency: int = Form(30, alias="fertilizingFrequency", gt=0, le=MAX_FREQUENCY_DAYS),
    grooming_frequency: int = Form(30, alias="groomingFrequency", gt=0, le=MAX_FREQUENCY_DAYS),
    sunlight: str = Form("Medium Light"),
    humidity: str = Form("Medium Humidity"),
    notes: str = Form(""),
    fertilizer_details: Optional[str] = Form(None, alias="fertilizerDetails"),
    photo: Optional[UploadFile] = File(None),
    store: PlantPalStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
):
    """
    フォーム（multipart）で受け取って登録
    photo があれば保存してその URL を image にする
    """
    draft = PlantDraft(
        name=name,
        scientific_name=scientific_name,
        location=location,
        watering_frequency=watering_frequency,
        fertilizing_frequency=fertilizing_frequency,
        grooming_frequency=grooming_frequency,
        sunlight=sunlight,
        humidity=humidity,
        notes=notes,
        fertilizer_details=fertilizer_details,
    )

    try:
        image_url = None
        if photo is not None and photo.filename:
            image_url = save_upload(settings.upload_dir, "plants", photo.filename, photo.file.read())
        return plant_service.create_plant(store, draft, image_url=image_url)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except Exception:
        logger.exception("failed to add plant")
        raise HTTPException(status_code=500, detail="Error adding plant")


@router.put("/{plant_id}", response_model=Plant)
def update_plant(
    plant_id: int,
    body: PlantUpdate,
    store: PlantPalStore = Depends(get_store),
):
    try:
        return plant_service.update_plant(store, plant_id, body)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except Exception:
        logger.exception("failed to update plant %s", plant_id)
        raise HTTPException(status_code=500, detail="Error updating plant")


@router.delete("/{plant_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_plant(plant_id: int, store: PlantPalStore = Depends(get_store)):
    try:
        plant_service.delete_plant(store, plant_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except Exception:
        logger.exception("failed to delete plant %s", plant_id)
        raise HTTPException(status_code=500, detail="Error deleting plant")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{plant_id}/activity", response_model=Plant)
def log_activity(
    plant_id: int,
    body: ActivityRequest,
    store: PlantPalStore = Depends(get_store),
):
    """水やり / 肥料 / 手入れ を記録（最終実施日時を今にする）"""
    try:
        return plant_service.log_activity(store, plant_id, body.activity)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except Exception:
        logger.exception("failed to log activity for plant %s", plant_id)
        raise HTTPException(status_code=500, detail="Error updating activity")
