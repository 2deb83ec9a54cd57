from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.api.deps import get_store
from app.api.upload import remove_file
from app.core.logger import logger
from app.models.schema import ShopCreate, ShopUpdate
from app.services.upload_store import ShopLimitReached


router = APIRouter()


def error(message, status_code=400):
    return JSONResponse(status_code=status_code, content={"status": "error", "message": message})


def with_monthly_data(shop, uploads):

    return {
        **shop.model_dump(mode="json"),
        "monthly_data": [
            {
                "id": u.id,
                "month": u.month,
                "data_type": u.data_type,
                "file_name": u.file_name,
                "total_revenue": u.summary.total_revenue,
                "total_orders": u.summary.total_orders,
                "uploaded_at": u.uploaded_at.isoformat()
            }
            for u in uploads if u.shop_id == shop.id
        ]
    }


@router.get("/shops")
def list_shops(store=Depends(get_store)):

    uploads = store.list_uploads()

    return [with_monthly_data(shop, uploads) for shop in store.list_shops()]


@router.post("/shops", status_code=201)
def create_shop(body: ShopCreate, store=Depends(get_store)):

    if not body.name.strip():
        return error("name is required")

    try:
        return store.create_shop(body.name.strip(), body.platform, body.description)

    except ShopLimitReached as e:
        return error(str(e), status_code=403)


@router.get("/shops/{shop_id}")
def get_shop(shop_id: str, store=Depends(get_store)):

    shop = store.get_shop(shop_id)

    if shop is None:
        return error("Shop not found", status_code=404)

    return with_monthly_data(shop, store.list_uploads([shop_id]))


@router.put("/shops/{shop_id}")
def update_shop(shop_id: str, body: ShopUpdate, store=Depends(get_store)):

    name = body.name.strip() if body.name is not None else None

    if name == "":
        return error("name is required")

    shop = store.update_shop(shop_id, name=name, description=body.description)

    if shop is None:
        return error("Shop not found", status_code=404)

    return shop


@router.delete("/shops/{shop_id}")
def delete_shop(shop_id: str, store=Depends(get_store)):

    removed = store.delete_shop(shop_id)

    if removed is None:
        return error("Shop not found", status_code=404)

    for u in removed:
        remove_file(u.file_path)

    logger.info(f"Shop {shop_id} deleted")

    return {"status": "success"}
