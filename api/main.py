"""Triplet finder — FastAPI application."""

import logging
from contextlib import asynccontextmanager
from functools import lru_cache
from pathlib import Path

from fastapi import FastAPI, File, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware

from config import get_commonness_provider, get_wordlist_path, is_debug_mode, is_mock_mode
from models import SequencesResponse
from pipeline import find_sequences
from stages.rarity import CommonnessOracle, get_oracle

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s — %(message)s",
)
logger = logging.getLogger(__name__)

# Allowed subtitle formats
ALLOWED_EXTENSIONS = {".srt"}
MAX_UPLOAD_BYTES = 5 * 1024 * 1024


def _require_provider_config() -> None:
    """Fail fast when the selected commonness provider cannot work."""
    provider = get_commonness_provider()

    if provider not in ("wordlist", "wordfreq", "mock"):
        raise HTTPException(
            status_code=501,
            detail=f"Unknown COMMONNESS_PROVIDER '{provider}'. Must be 'wordlist', 'wordfreq', or 'mock'.",
        )

    if provider == "wordlist" and not get_wordlist_path().is_file():
        raise HTTPException(
            status_code=501,
            detail=f"Word list not found at {get_wordlist_path()}. Set WORDLIST_PATH or switch COMMONNESS_PROVIDER.",
        )


@lru_cache(maxsize=8)
def _oracle_for(provider: str, wordlist_path: str) -> CommonnessOracle:
    """One oracle per provider and word list, so the list is read once per process."""
    return get_oracle(provider, wordlist_path)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan — log the effective commonness configuration."""
    provider = get_commonness_provider()

    if is_mock_mode():
        logger.info("MOCK_MODE is ON — every keyword scores 0; no word list required")
    elif provider == "wordlist" and not get_wordlist_path().is_file():
        # Don't hard-fail startup; /sequences will report it.
        logger.warning("Word list %s is missing — /sequences will fail with the wordlist provider", get_wordlist_path())
    else:
        logger.info("Commonness provider: %s", provider)

    yield


app = FastAPI(
    title="Triplet Finder API",
    description="Upload an SRT subtitle file → get keyword-linked triplet sequences as JSON",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS for local dev
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
def health():
    """Health check endpoint with effective runtime configuration."""
    mock = get_commonness_provider() == "mock"
    return {
        "ok": True,
        "mode": "mock" if mock else "real",
        "mock_mode": is_mock_mode(),
        "debug": is_debug_mode(),
        "commonness_provider": get_commonness_provider(),
        "wordlist_path": str(get_wordlist_path()),
        "has_wordlist": get_wordlist_path().is_file(),
    }


@app.post("/sequences", response_model=SequencesResponse)
async def sequences(file: UploadFile = File(...)):
    """Upload an SRT transcript and get back the selected triplet sequences."""
    # Validate filename
    if not file.filename:
        raise HTTPException(status_code=400, detail="No filename provided")

    # Validate extension
    ext = Path(file.filename).suffix.lower()
    if ext not in ALLOWED_EXTENSIONS:
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported format '{ext}'. Allowed: {', '.join(sorted(ALLOWED_EXTENSIONS))}",
        )

    mock = get_commonness_provider() == "mock"
    debug_enabled = is_debug_mode()

    _require_provider_config()

    content = await file.read()
    if not content:
        raise HTTPException(status_code=400, detail="Uploaded file is empty")
    if len(content) > MAX_UPLOAD_BYTES:
        raise HTTPException(status_code=400, detail=f"File is larger than {MAX_UPLOAD_BYTES} bytes")

    try:
        transcript = content.decode("utf-8")
    except UnicodeDecodeError:
        raise HTTPException(status_code=400, detail="Subtitle file must be UTF-8 encoded")

    logger.info(
        "Starting pipeline for %s (%d bytes, mode=%s, debug=%s, provider=%s)",
        file.filename,
        len(content),
        "mock" if mock else "real",
        debug_enabled,
        get_commonness_provider(),
    )

    try:
        oracle = _oracle_for(get_commonness_provider(), str(get_wordlist_path()))
        if debug_enabled:
            found, debug_info = await find_sequences(transcript, oracle=oracle, debug=True)
            return SequencesResponse(sequences=found, mode="mock" if mock else "real", debug=debug_info)

        found = await find_sequences(transcript, oracle=oracle)
        return SequencesResponse(sequences=found, mode="mock" if mock else "real", debug=None)

    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Pipeline error")
        raise HTTPException(status_code=500, detail=f"Sequence search failed: {str(e)}")
