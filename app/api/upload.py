from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import JSONResponse
import os
import tempfile
import uuid

from app.api.deps import get_store
from app.core.config import UPLOAD_DIR
from app.core.logger import logger

from app.services.detector import detect_workbook, file_type_label
from app.services.errors import ParseError
from app.services.upload_service import compute_summary, parse_upload
from app.services.validator import validate_upload_form


router = APIRouter()

os.makedirs(UPLOAD_DIR, exist_ok=True)


# ---------------- HELPERS ----------------

def error(message, status_code=400):

    return JSONResponse(
        status_code=status_code,
        content={"status": "error", "message": message}
    )


def log_progress(percent, message):
    logger.info(f"[{percent:>3}%] {message}")


def remove_file(path):

    if not path or not os.path.exists(path):
        return

    try:
        os.remove(path)
        logger.info(f"Removed file: {path}")

    except OSError as e:
        logger.warning(f"Could not remove {path}: {e}")


# ---------------- API ----------------

@router.post("/detect")
async def detect(file: UploadFile = File(...)):

    filename = os.path.basename(file.filename or "")

    suffix = os.path.splitext(filename)[1]

    with tempfile.TemporaryDirectory() as tmpdir:

        path = os.path.join(tmpdir, f"{uuid.uuid4().hex}{suffix}")

        with open(path, "wb") as f:
            f.write(await file.read())

        file_type = detect_workbook(path, filename)


    if file_type is None:

        logger.info(f"Unrecognized file: {filename}")

        return error("Không nhận diện được loại file", status_code=422)


    return {
        "status": "success",
        "type": file_type,
        "label": file_type_label(file_type)
    }


@router.post("/shops/{shop_id}/upload", status_code=201)
async def upload(
    shop_id: str,
    file: UploadFile = File(None),
    data_type: str = Form(None, alias="dataType"),
    month: str = Form(None),
    store=Depends(get_store)
):

    logger.info("Upload started")

    shop = store.get_shop(shop_id)

    if shop is None:
        return error("Shop not found", status_code=404)


    filename = os.path.basename(file.filename or "") if file else ""

    try:
        data_type, month = validate_upload_form(filename, data_type, month)

    except ValueError as e:
        return error(str(e))


    # ---------- Save original file ----------

    shop_dir = os.path.join(UPLOAD_DIR, shop_id)

    os.makedirs(shop_dir, exist_ok=True)

    file_path = os.path.join(shop_dir, f"{month}_{data_type}_{filename}")

    # staged until it parses, so a bad re-upload keeps the previous file
    staged_path = os.path.join(shop_dir, f".{uuid.uuid4().hex}_{filename}")

    content = await file.read()

    with open(staged_path, "wb") as f:
        f.write(content)


    # ---------- Parse ----------

    try:
        parsed = parse_upload(shop.platform, data_type, staged_path, log_progress)

    except ParseError as e:

        logger.warning(f"Parse failed for {filename}: {e}")

        remove_file(staged_path)

        return error(str(e))


    summary = compute_summary(data_type, shop.platform, parsed)


    # ---------- Persist ----------

    previous = store.find_upload(shop_id, data_type, month)

    if previous is not None and previous.file_path != file_path:
        remove_file(previous.file_path)

    os.replace(staged_path, file_path)

    logger.info(f"File saved: {file_path}")

    record = store.upsert(
        shop_id=shop_id,
        data_type=data_type,
        month=month,
        file_name=filename,
        file_size=len(content),
        file_path=file_path,
        raw_data=parsed.model_dump_json(),
        summary=summary
    )


    return {
        "status": "success",
        "id": record.id,
        "summary": summary
    }


@router.delete("/shops/{shop_id}/data/{upload_id}")
def delete_upload(shop_id: str, upload_id: str, store=Depends(get_store)):

    if store.get_shop(shop_id) is None:
        return error("Shop not found", status_code=404)

    removed = store.delete(shop_id, upload_id)

    if removed is None:
        return error("Data not found", status_code=404)

    remove_file(removed.file_path)

    logger.info(f"Deleted upload {upload_id} of shop {shop_id}")

    return {"status": "success"}
