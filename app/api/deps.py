import os

from app.core.config import DATA_DIR
from app.services.cost_store import JsonCostPriceRepository
from app.services.upload_store import UploadStore


_store = UploadStore()
_costs = None


def get_store():
    return _store


def get_cost_repo():

    global _costs

    if _costs is None:
        _costs = JsonCostPriceRepository(os.path.join(DATA_DIR, "cost_prices.json"))

    return _costs
