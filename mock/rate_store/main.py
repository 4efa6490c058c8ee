from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import JSONResponse
from pathlib import Path
import json
import os

app = FastAPI(title="Mock Rate Store", version="1.0.0")
# Support both local development and Docker
DATA_DIR = Path("/rate_store_data") if os.path.exists("/rate_store_data") else Path(__file__).resolve().parent / "data"
TABLES = {"rate_config", "fee_config"}

@app.get("/health")
def health(): return {"status": "ok"}

@app.get("/rest/v1/{table}")
def get_rows(table: str, is_active: str | None = Query(None)):
    if table not in TABLES:
        raise HTTPException(status_code=404, detail="relation not found")
    rows = json.loads((DATA_DIR / f"{table}.json").read_text())
    # PostgREST-style filter: is_active=eq.true
    if is_active == "eq.true":
        rows = [r for r in rows if r.get("is_active")]
    return JSONResponse(content=rows)
