from fastapi import APIRouter, HTTPException, UploadFile

from debtplan.models.loan import LoanBook
from debtplan.services.loan_sheet import parse_loan_sheet

router = APIRouter(tags=["loans"])


@router.post("/loans/upload", response_model=LoanBook)
async def upload_loan_sheet(file: UploadFile):
    """Upload an Excel or CSV loan sheet and return the parsed loans."""
    if not file.filename:
        raise HTTPException(status_code=400, detail="No filename provided")

    ext = file.filename.rsplit(".", 1)[-1].lower() if "." in file.filename else ""
    if ext not in ("xlsx", "xls", "csv"):
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported file type '.{ext}'. Please upload .xlsx, .xls or .csv",
        )

    try:
        book = parse_loan_sheet(file.file, file.filename)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return book
