"""
CSV Compare
A FastAPI application that loads two CSV files and reports the cell-level differences between their rows.
"""

import logging
from typing import Dict, List

from fastapi import FastAPI, File, UploadFile, HTTPException
from pydantic import BaseModel

from csvcompare.config import settings
from csvcompare.differ import compare
from csvcompare.errors import CompareError, SchemaMismatchError
from csvcompare.models import Table
from csvcompare.table_loader import TableLoader
from utils import row_diff_to_dict

# Configure logging
logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="CSV Compare",
    description="Positional, cell-level comparison of two CSV files",
    version="1.0.0"
)

table_loader = TableLoader()

# Pydantic models
class TableInfo(BaseModel):
    filename: str
    rows: int
    columns: int
    headers: List[str]

class CellDiffModel(BaseModel):
    left: str
    right: str
    is_different: bool
    missing_side: str

class RowDiffModel(BaseModel):
    row_index: int
    line_number: int
    cells: Dict[str, CellDiffModel]

class ComparisonResponse(BaseModel):
    first: TableInfo
    second: TableInfo
    differences: List[RowDiffModel]
    difference_count: int
    identical: bool
    message: str


def table_info(table: Table) -> TableInfo:
    return TableInfo(
        filename=table.source_name,
        rows=table.row_count,
        columns=table.column_count,
        headers=list(table.headers)
    )


async def read_table(file: UploadFile) -> Table:
    """Read an upload and load it, turning load failures into HTTP 400."""
    content = await file.read()
    try:
        return table_loader.load_table(content, file.filename or "")
    except CompareError as e:
        logger.error(f"Error loading {file.filename}: {e}")
        raise HTTPException(status_code=400, detail=str(e))


@app.post("/analyze", response_model=TableInfo)
async def analyze_file(file: UploadFile = File(...)):
    """Load a single file and describe its columns and row count."""
    table = await read_table(file)
    return table_info(table)


@app.post("/compare", response_model=ComparisonResponse)
async def compare_files(file1: UploadFile = File(...), file2: UploadFile = File(...)):
    """Compare two uploaded files row by row."""
    first = await read_table(file1)
    second = await read_table(file2)

    try:
        differences = compare(first, second)
    except SchemaMismatchError as e:
        logger.error(f"Schema mismatch between {first.source_name} and {second.source_name}: {e}")
        raise HTTPException(status_code=409, detail={
            "message": str(e),
            "only_in_first": e.only_in_first,
            "only_in_second": e.only_in_second
        })

    if differences:
        message = f"Found {len(differences)} differences in files"
    else:
        message = "No differences found between the files"

    return ComparisonResponse(
        first=table_info(first),
        second=table_info(second),
        differences=[RowDiffModel(**row_diff_to_dict(row)) for row in differences],
        difference_count=len(differences),
        identical=not differences,
        message=message
    )


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "version": "1.0.0",
        "components": {
            "duplicate_headers": settings.duplicate_headers,
            "csv_encoding": settings.csv_encoding
        }
    }

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
