# invoicegen/api_main.py
from __future__ import annotations

import logging

from fastapi import Body, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response

from invoicegen.config import get_settings
from invoicegen.document import Document
from invoicegen.errors import ComputationError, ImageDecodeError, ValidationError
from invoicegen.services.document_json import document_from_json
from invoicegen.services.totals import totals_to_json

settings = get_settings()
logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s | %(levelname)s | %(message)s",
)
log = logging.getLogger(__name__)

app = FastAPI(title="Invoice Generator API")

# CORS for local frontend dev (React/Vite/etc.)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _load(payload: dict) -> Document:
    try:
        return document_from_json(payload)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors)


@app.get("/")
def root():
    return {"ok": True, "try": ["/docs", "/api/health", "/api/documents/render", "/api/documents/totals"]}


@app.get("/api/health")
def health():
    return {"ok": True}


@app.post("/api/documents/render")
def render_document(payload: dict = Body(...)):
    doc = _load(payload)

    try:
        pdf = doc.build()
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors)
    except ComputationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except ImageDecodeError as e:
        raise HTTPException(status_code=400, detail=str(e))

    filename = f"{(doc.ref or 'document').strip()}.pdf"
    log.info("Rendered %s %s (%d bytes)", doc.type, doc.ref, len(pdf))
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'inline; filename="{filename}"'},
    )


@app.post("/api/documents/totals")
def document_totals(payload: dict = Body(...)):
    doc = _load(payload)

    try:
        totals = doc.totals()
    except ComputationError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return {"ok": True, "totals": totals_to_json(totals)}
