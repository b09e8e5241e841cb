"""
Health and readiness checks – verify the data directories and Bedrock client setup.
"""
import os
from pathlib import Path

from fastapi import APIRouter
from app.core.config import settings
from app.core.logger import logger
from app.services.llm_client import llm_client

router = APIRouter()


def _check_directory(path: Path) -> tuple[str, str]:
    """Returns (status, detail). Status is 'ok' or 'error'."""
    try:
        if not path.exists():
            # created on first write
            ancestor = path.absolute().parent
            while not ancestor.exists():
                ancestor = ancestor.parent
            if os.access(ancestor, os.W_OK):
                return "ok", f"'{path}' will be created on first write"
            return "error", f"'{path}' missing and '{ancestor}' not writable"
        if not path.is_dir():
            return "error", f"'{path}' is not a directory"
        if not os.access(path, os.R_OK | os.W_OK):
            return "error", f"'{path}' not readable/writable"
        count = sum(1 for p in path.iterdir() if p.name.lower().endswith(".json"))
        return "ok", f"'{path}' accessible ({count} documents)"
    except Exception as e:
        logger.exception("Directory check failed for %s", path)
        return "error", str(e)


def _check_bedrock() -> tuple[str, str]:
    """Builds the client only; no model call is made."""
    try:
        client = llm_client.client
        region = client.meta.region_name
        model = settings.LLM_MODEL or settings.LLM_FALLBACK_MODEL
        return "ok", f"Bedrock client ready in {region} (default model {model})"
    except Exception as e:
        logger.exception("Bedrock check failed")
        return "error", f"Bedrock: {str(e)}"


@router.get("")
def health_check():
    return {"status": "healthy"}


@router.get("/ready")
def readiness():
    """
    - templates / sessions: directory exists (or can be created) and is writable
    - bedrock: client can be constructed with the configured region/credentials
    """
    templates_status, templates_detail = _check_directory(settings.templates_dir)
    sessions_status, sessions_detail = _check_directory(settings.sessions_dir)
    bedrock_status, bedrock_detail = _check_bedrock()

    healthy = all(s == "ok" for s in (templates_status, sessions_status, bedrock_status))
    return {
        "status": "healthy" if healthy else "degraded",
        "templates": {"status": templates_status, "detail": templates_detail},
        "sessions": {"status": sessions_status, "detail": sessions_detail},
        "bedrock": {"status": bedrock_status, "detail": bedrock_detail},
    }
