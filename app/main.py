from fastapi import FastAPI

from app.api.reports import router as reports_router
from app.api.shops import router as shops_router
from app.api.upload import router as upload_router


app = FastAPI(title="ShopFin Reporting")

app.include_router(shops_router)
app.include_router(upload_router)
app.include_router(reports_router)


@app.get("/health")
def health():
    return {"status": "ok"}
