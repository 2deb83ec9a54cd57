import uuid
from datetime import datetime

from app.core.config import MAX_SHOPS
from app.core.logger import logger
from app.models.schema import MonthlyUpload, Shop


class ShopLimitReached(Exception):
    pass


class UploadStore:
    """
    In-process stand-in for the relational store.

    Uploads are keyed by (shop_id, data_type, month); writing the same key
    again replaces the earlier blob.
    """

    def __init__(self, max_shops=MAX_SHOPS):

        self.max_shops = max_shops

        self._shops = {}
        self._uploads = {}


    # ---------- Shops ----------

    def create_shop(self, name, platform, description=None) -> Shop:

        if len(self._shops) >= self.max_shops:
            raise ShopLimitReached(f"Đã đạt giới hạn {self.max_shops} gian hàng")

        shop = Shop(
            id=uuid.uuid4().hex,
            name=name,
            platform=platform,
            description=description or None,
            created_at=datetime.now()
        )

        self._shops[shop.id] = shop

        logger.info(f"Created shop {shop.id} ({platform})")

        return shop

    def get_shop(self, shop_id):
        return self._shops.get(shop_id)

    def list_shops(self):
        return sorted(self._shops.values(), key=lambda s: s.created_at, reverse=True)

    def update_shop(self, shop_id, name=None, description=None):

        shop = self._shops.get(shop_id)

        if shop is None:
            return None

        changes = {}

        if name is not None:
            changes["name"] = name

        if description is not None:
            changes["description"] = description or None

        shop = shop.model_copy(update=changes)

        self._shops[shop_id] = shop

        return shop

    def delete_shop(self, shop_id):
        """Remove a shop with all of its uploads; returns the removed uploads or None."""

        if self._shops.pop(shop_id, None) is None:
            return None

        removed = [u for u in self._uploads.values() if u.shop_id == shop_id]

        for u in removed:
            del self._uploads[(u.shop_id, u.data_type, u.month)]

        logger.info(f"Deleted shop {shop_id} with {len(removed)} uploads")

        return removed


    # ---------- Uploads ----------

    def find_upload(self, shop_id, data_type, month):
        return self._uploads.get((shop_id, data_type, month))

    def upsert(self, shop_id, data_type, month, file_name, file_size, file_path, raw_data, summary) -> MonthlyUpload:

        key = (shop_id, data_type, month)

        existing = self._uploads.get(key)

        upload = MonthlyUpload(
            id=existing.id if existing else uuid.uuid4().hex,
            shop_id=shop_id,
            data_type=data_type,
            month=month,
            file_name=file_name,
            file_size=file_size,
            file_path=file_path,
            raw_data=raw_data,
            summary=summary,
            uploaded_at=datetime.now()
        )

        self._uploads[key] = upload

        logger.info(f"{'Replaced' if existing else 'Stored'} {data_type} upload {shop_id}/{month}")

        return upload

    def list_uploads(self, shop_ids=None):

        uploads = [
            u for u in self._uploads.values()
            if shop_ids is None or u.shop_id in shop_ids
        ]

        return sorted(uploads, key=lambda u: u.month, reverse=True)

    def delete(self, shop_id, upload_id):
        """Remove one upload; returns the removed record or None."""

        for key, u in list(self._uploads.items()):

            if u.shop_id == shop_id and u.id == upload_id:

                del self._uploads[key]

                return u

        return None
