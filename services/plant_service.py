from datetime import datetime
from typing import List, Optional

from pydantic import ValidationError as PydanticValidationError

from schemas.base import utcnow
from schemas.plant import ActivityType, Plant, PlantDraft, PlantUpdate
from services.errors import NotFoundError, ValidationError
from services.schedule import CYCLES, derive_light
from services.store import PlantPalStore
from services.uploads import PLACEHOLDER_PLANT_IMAGE


def list_plants(store: PlantPalStore) -> List[Plant]:
    return store.plants.list()


def _get_or_404(store: PlantPalStore, plant_id: int) -> Plant:
    plant = store.plants.get(plant_id)
    if plant is None:
        raise NotFoundError("Plant not found")
    return plant


def create_plant(
    store: PlantPalStore,
    draft: PlantDraft,
    image_url: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Plant:
    """
    新規登録。

    - light は sunlight の先頭の単語から決める
    - 写真が無ければプレースホルダ画像
    - health は healthy、3つの最終実施日時はすべて登録時刻
    """
    if not draft.name or not draft.name.strip():
        raise ValidationError("Plant name is required.")

    ts = now or utcnow()
    plant = Plant(
        name=draft.name.strip(),
        scientific_name=draft.scientific_name,
        image=image_url or PLACEHOLDER_PLANT_IMAGE,
        light=derive_light(draft.sunlight),
        health="healthy",
        location=draft.location,
        watering_frequency=draft.watering_frequency,
        last_watered=ts,
        fertilizing_frequency=draft.fertilizing_frequency,
        last_fertilized=ts,
        grooming_frequency=draft.grooming_frequency,
        last_groomed=ts,
        sunlight=draft.sunlight,
        humidity=draft.humidity,
        notes=draft.notes or None,
        fertilizer_details=draft.fertilizer_details,
    )
    return store.plants.put(plant)


def update_plant(store: PlantPalStore, plant_id: int, update: PlantUpdate) -> Plant:
    """送られたフィールドだけ既存レコードに上書きする（id は変えない）"""
    plant = _get_or_404(store, plant_id)
    changes = update.model_dump(exclude_unset=True)
    try:
        merged = Plant.model_validate({**plant.model_dump(), **changes, "id": plant.id})
    except PydanticValidationError as e:
        # 必須フィールドに null が送られた場合など
        fields = ", ".join(str(err["loc"][0]) for err in e.errors() if err.get("loc"))
        raise ValidationError(f"Invalid value for: {fields}" if fields else "Missing or invalid fields.")
    return store.plants.put(merged)


def delete_plant(store: PlantPalStore, plant_id: int) -> None:
    if not store.plants.delete(plant_id):
        raise NotFoundError("Plant not found")


def log_activity(
    store: PlantPalStore,
    plant_id: int,
    activity: Optional[str],
    now: Optional[datetime] = None,
) -> Plant:
    """water / fertilize / groom の最終実施日時を now に更新（後勝ち）"""
    plant = _get_or_404(store, plant_id)

    try:
        kind = ActivityType(activity)
    except ValueError:
        raise ValidationError("Invalid activity")

    _, last_field = CYCLES[kind.value]
    updated = plant.model_copy(update={last_field: now or utcnow()})
    return store.plants.put(updated)
