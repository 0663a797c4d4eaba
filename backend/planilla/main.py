from fastapi import FastAPI
from planilla.routers import adjustments, companies, employees, payrolls, settlement, vacations
from planilla.database import SessionLocal, engine
from planilla.config import settings
from planilla.jobs import build_jobs
from planilla import models
import logging

# Ensure application logs show informative messages
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(levelname)s:%(name)s:%(message)s"
)
logger = logging.getLogger(__name__)

models.Base.metadata.create_all(bind=engine)

app = FastAPI(title="GT3 Planilla API")

app.include_router(companies.router, prefix="/api/empresas", tags=["empresas"])
app.include_router(employees.router, prefix="/api/empleados", tags=["empleados"])
app.include_router(adjustments.increases, prefix="/api/aumentos", tags=["aumentos"])
app.include_router(adjustments.overtime, prefix="/api/extras", tags=["extras"])
app.include_router(adjustments.metric_bonuses, prefix="/api/bonos", tags=["bonos"])
app.include_router(adjustments.deductions, prefix="/api/rebajos", tags=["rebajos"])
app.include_router(vacations.router, prefix="/api/vacaciones", tags=["vacaciones"])
app.include_router(payrolls.router, prefix="/api/planillas", tags=["planillas"])
app.include_router(settlement.router, prefix="/api/liquidaciones", tags=["liquidaciones"])

jobs = []


@app.on_event("startup")
def start_jobs():
    if not settings.ENABLE_JOBS:
        logger.info("background jobs disabled")
        return
    jobs.extend(build_jobs(SessionLocal))
    for job in jobs:
        job.start()


@app.on_event("shutdown")
def stop_jobs():
    for job in jobs:
        job.stop()
    jobs.clear()


@app.get("/")
def read_root():
    return {"message": "GT3 Planilla API"}
