from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse, JSONResponse
import uuid

from app.api.deps import get_cost_repo, get_store
from app.core.logger import logger
from app.models.schema import CostEntry

from app.services.aggregator import aggregate_skus, build_dashboard, load_shop_data
from app.services.cost_store import GLOBAL_SCOPE
from app.services.excel_service import export_pnl_excel
from app.services.pnl_service import classify, filter_platform, pnl_totals, sort_rows
from app.services.report_service import build_revenue_report, list_ads_reports
from app.services.validator import validate_cost


router = APIRouter()


def build_pnl(store, costs, platform=None, scope=GLOBAL_SCOPE):

    shops = store.list_shops()
    uploads = store.list_uploads([s.id for s in shops])

    aggregates = aggregate_skus([load_shop_data(s, uploads) for s in shops])

    aggregates = filter_platform(aggregates, platform)

    return classify(aggregates, costs.get(scope))


# ---------------- Dashboard ----------------

@router.get("/dashboard")
def dashboard(store=Depends(get_store)):

    shops = store.list_shops()

    return build_dashboard(shops, store.list_uploads([s.id for s in shops]))


# ---------------- Reports ----------------

@router.get("/reports/revenue")
def revenue_report(platform: str = "all", shop_id: str = None, store=Depends(get_store)):

    if platform not in ("all", "shopee", "tiktok"):
        return JSONResponse(status_code=400, content={"status": "error", "message": f"Unknown platform: {platform}"})

    shops = store.list_shops()

    return build_revenue_report(shops, store.list_uploads([s.id for s in shops]), platform, shop_id)


@router.get("/ads/report")
def ads_report(store=Depends(get_store)):

    shops = store.list_shops()

    return list_ads_reports(shops, store.list_uploads([s.id for s in shops]))


# ---------------- P&L ----------------

@router.get("/pnl")
def pnl(
    platform: str = "all",
    sort_by: str = "revenue",
    direction: str = "desc",
    scope: str = GLOBAL_SCOPE,
    store=Depends(get_store),
    costs=Depends(get_cost_repo)
):

    rows = build_pnl(store, costs, platform, scope)

    try:
        ordered = sort_rows(rows, sort_by, direction)

    except ValueError as e:
        return JSONResponse(status_code=400, content={"status": "error", "message": str(e)})


    return {
        "rows": ordered,
        "totals": pnl_totals(rows)
    }


@router.get("/pnl/export")
def pnl_export(
    platform: str = "all",
    scope: str = GLOBAL_SCOPE,
    store=Depends(get_store),
    costs=Depends(get_cost_repo)
):

    rows = build_pnl(store, costs, platform, scope)

    path = export_pnl_excel(rows, uuid.uuid4().hex)

    logger.info(f"P&L exported: {path}")

    return FileResponse(
        path,
        filename="ShopFin_PnL.xlsx",
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    )


# ---------------- Cost prices ----------------

@router.get("/costs/{scope}")
def get_costs(scope: str, costs=Depends(get_cost_repo)):
    return costs.get(scope)


@router.put("/costs/{scope}")
def set_cost(scope: str, entry: CostEntry, costs=Depends(get_cost_repo)):

    try:
        value = validate_cost(entry.cost)

    except ValueError as e:
        return JSONResponse(status_code=400, content={"status": "error", "message": str(e)})

    costs.set(scope, entry.sku, value)

    return {"status": "success", "sku": entry.sku, "cost": value}
