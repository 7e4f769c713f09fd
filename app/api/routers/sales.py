from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.data.database import get_db
from app.domain.schemas import SalesHistoryOut
from app.services.report_service import ReportService

router = APIRouter(prefix="/sales", tags=["sales"])


@router.get("/history", response_model=SalesHistoryOut)
def sales_history(
    start: date = Query(...),
    end: date = Query(...),
    db: Session = Depends(get_db),
):
    try:
        return ReportService(db).get_sales_history(start, end)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
