# backend/gstimport/main.py
from fastapi import Body, FastAPI, UploadFile, File, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import StreamingResponse, JSONResponse, Response
from pydantic import ValidationError

from gstimport.config import settings
from gstimport.exporters import export_csv, export_xlsx
from gstimport.logging_setup import configure_logging, get_logger
from gstimport.share import render_share_page
from gstimport.transform.engine import TransformationEngine
from gstimport.transform.models import ColumnMapping, TransformationResult

import pandas as pd
import io, uuid, os, tempfile

VERSION = "0.1.0"

configure_logging(settings.LOG_LEVEL)
log = get_logger("gstimport.main")

# ---------------------------------------------------------
# Create FastAPI app
# ---------------------------------------------------------
app = FastAPI(title="GST Import API", version=VERSION)

origins = [o.strip() for o in settings.CORS_ORIGINS.split(",")]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# One engine per process; config changes go through the endpoints below
engine = TransformationEngine()

# ---------------------------------------------------------
# Basic endpoints
# ---------------------------------------------------------
@app.get("/")
def root():
    return {"name": "GST Import API", "status": "ok"}

@app.get("/health")
def health():
    return {"ok": True}

@app.get("/version")
def version():
    return {"version": VERSION}

# ---------------------------------------------------------
# Temp tokens for downloads + sharing
# ---------------------------------------------------------
TMP_DIR = tempfile.gettempdir()
TOKENS: dict[str, str] = {}       # token -> absolute file path

def _save_transformed(result: TransformationResult, fmt: str) -> dict:
    token = str(uuid.uuid4())
    ext = "xlsx" if fmt == "xlsx" else "csv"
    out_path = os.path.join(TMP_DIR, f"gstimport_{token}.{ext}")

    try:
        data = export_xlsx(result.data) if ext == "xlsx" else export_csv(result.data)
        with open(out_path, "wb") as f:
            f.write(data)
    except Exception as e:
        raise HTTPException(500, f"Failed to write transformed file: {e}")

    TOKENS[token] = out_path
    body = result.model_dump(mode="json", exclude={"data"})
    body["rows_out"] = len(result.data)
    body["download_token"] = token
    body["share_url"] = f"/share/{token}"
    return body

def _read_upload(name: str, data: bytes) -> pd.DataFrame:
    try:
        if name.endswith(".csv"):
            # raw text; the engine does its own date/number parsing
            return pd.read_csv(io.BytesIO(data), dtype=str, keep_default_na=False)
        return pd.read_excel(io.BytesIO(data))
    except Exception as e:
        raise HTTPException(400, f"Failed to read file: {e}")

# ---------------------------------------------------------
# Transform an import
# ---------------------------------------------------------
@app.post("/api/transform")
async def api_transform(file: UploadFile = File(...), fmt: str = "csv"):
    name = (file.filename or "").lower()
    if not (name.endswith(".csv") or name.endswith(".xlsx")):
        raise HTTPException(400, "Only CSV or XLSX allowed")

    data = await file.read()
    if len(data) > settings.MAX_UPLOAD_MB * 1024 * 1024:
        raise HTTPException(413, f"File too large (max {settings.MAX_UPLOAD_MB}MB)")

    df = _read_upload(name, data)
    if df is None or len(df.columns) == 0:
        raise HTTPException(400, "No columns detected in file.")

    result = engine.transform_frame(df)
    log.info("Upload %s: %d rows in, %d invoices out", file.filename, len(df), len(result.data))
    return JSONResponse(_save_transformed(result, fmt))

# ---------------------------------------------------------
# Download endpoint (shared)
# ---------------------------------------------------------
@app.get("/api/download/{token}")
def api_download(token: str):
    path = TOKENS.get(token)
    if not path or not os.path.exists(path):
        raise HTTPException(404, "Token expired or not found")

    ext = "xlsx" if path.endswith(".xlsx") else "csv"
    mime = (
        "text/csv"
        if ext == "csv"
        else "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    )

    return StreamingResponse(
        open(path, "rb"),
        media_type=mime,
        headers={
            "Content-Disposition": f'attachment; filename="transformed.{ext}"'
        },
    )

# ---------------------------------------------------------
# Public share page
# ---------------------------------------------------------
@app.get("/share/{token}")
def share_preview(token: str):
    path = TOKENS.get(token)
    if not path or not os.path.exists(path):
        raise HTTPException(404, "Token expired or not found")
    html = render_share_page(path, limit=settings.SHARE_LIMIT)
    return Response(content=html, media_type="text/html; charset=utf-8")

# ---------------------------------------------------------
# Engine configuration
# ---------------------------------------------------------
@app.get("/api/config")
def get_config():
    return engine.get_config().model_dump(mode="json")

@app.put("/api/config/year-map")
def put_year_map(year_map: dict[int, str] = Body(...)):
    try:
        engine.update_year_map(year_map)
    except ValidationError as e:
        raise HTTPException(422, str(e))
    return engine.get_config().model_dump(mode="json")

@app.put("/api/config/column-mappings")
def put_column_mappings(mappings: list[ColumnMapping] = Body(...)):
    engine.update_column_mappings(mappings)
    return engine.get_config().model_dump(mode="json")

@app.post("/api/config/preset/{name}")
def post_preset(name: str):
    engine.apply_preset(name)
    return engine.get_config().model_dump(mode="json")

@app.get("/api/config/validate")
def validate_config():
    valid, errors = engine.validate_config()
    return {"valid": valid, "errors": errors}
