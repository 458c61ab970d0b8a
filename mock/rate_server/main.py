from datetime import datetime
from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import JSONResponse
from pathlib import Path
import json
import os

app = FastAPI(title="Mock SGS Rate Server", version="1.0.0")
# Support both local development and Docker
DATA_DIR = Path("/rate_stub") if os.path.exists("/rate_stub") else Path(__file__).resolve().parents[1] / "rate_stub"

@app.get("/health")
def health(): return {"status": "ok"}

@app.get("/dados/serie/bcdata.sgs.{series_code}/dados")
def get_series(series_code: int, dataInicial: str = Query(...), dataFinal: str = Query(...), formato: str = "json"):
    file = DATA_DIR / f"sgs_{series_code}.json"
    if not file.exists():
        raise HTTPException(status_code=404, detail="series not found")
    start = datetime.strptime(dataInicial, "%d/%m/%Y").date()
    end = datetime.strptime(dataFinal, "%d/%m/%Y").date()
    points = [
        p for p in json.loads(file.read_text())
        if start <= datetime.strptime(p["data"], "%d/%m/%Y").date() <= end
    ]
    return JSONResponse(content=points)
