from fastapi import FastAPI, UploadFile, File, HTTPException
from .models import NormalizeResponse, HealthResponse
from .normalize import matches_extension, normalize_source_bytes
from .rules import DEFAULT_EXTENSIONS

app = FastAPI(
    title="comment-ascii",
    description="ASCII-only comments for C-family sources",
    version="0.1.0",
)


@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}


@app.post("/normalize", response_model=NormalizeResponse)
async def normalize_source(file: UploadFile = File(...), sniff_encoding: bool = False):
    if not file.filename or not matches_extension(file.filename, DEFAULT_EXTENSIONS):
        raise HTTPException(status_code=422, detail="Only C-family source files are supported")

    raw = await file.read()
    try:
        return normalize_source_bytes(file.filename, raw, sniff_encoding=sniff_encoding)
    except UnicodeDecodeError as e:
        raise HTTPException(status_code=422, detail=f"Could not decode file: {e.reason}")
