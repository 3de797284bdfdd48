import logging
import os
import re
import uuid
from typing import Optional

from schemas.journal import JournalFile

logger = logging.getLogger(__name__)

UPLOAD_URL_PREFIX = "/uploads"

# 写真が無いときの植物画像
PLACEHOLDER_PLANT_IMAGE = "https://picsum.photos/id/1025/500/600"


def _safe_name(filename: str) -> str:
    base = os.path.basename(filename or "upload")
    return re.sub(r"[^A-Za-z0-9._-]", "_", base) or "upload"


def file_kind(content_type: Optional[str]) -> str:
    return "image" if (content_type or "").startswith("image/") else "document"


def save_upload(upload_dir: str, subdir: str, filename: str, data: bytes) -> str:
    """ファイルを保存して公開 URL（/uploads/...）を返す"""
    target_dir = os.path.join(upload_dir, subdir)
    os.makedirs(target_dir, exist_ok=True)

    stored_name = f"{uuid.uuid4().hex}_{_safe_name(filename)}"
    with open(os.path.join(target_dir, stored_name), "wb") as f:
        f.write(data)

    logger.info("stored upload %s/%s (%d bytes)", subdir, stored_name, len(data))
    return f"{UPLOAD_URL_PREFIX}/{subdir}/{stored_name}"


def save_attachment(upload_dir: str, filename: str, content_type: Optional[str], data: bytes) -> JournalFile:
    url = save_upload(upload_dir, "journal", filename, data)
    return JournalFile(name=filename or "attachment", type=file_kind(content_type), url=url)
