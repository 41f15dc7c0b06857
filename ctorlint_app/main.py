import logging
import time
from contextlib import asynccontextmanager

from fastapi import Body, FastAPI, HTTPException

from ctorlint.config import load_config
from ctorlint.schema import ENGINE_VERSION, PROTOCOL_VERSION
from ctorlint.validation import UnsupportedLanguageError, get_validation_service

from .models import AutofixRequest, AutofixResponse, ValidateRequest, ValidateResponse
from .settings import settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load adapters and rules once at startup."""
    service = get_validation_service()
    service.ensure_adapters_loaded()
    rules = service.get_loaded_rules()
    logger.info(f"[startup] ctorlint {ENGINE_VERSION} ready with rules {rules}")
    yield


app = FastAPI(
    title="ctorlint - C# constructor argument layout",
    debug=settings.debug,
    lifespan=lifespan,
)


def _engine_config():
    return load_config(settings.config_path)


@app.get("/health")
def health():
    """
    Health check endpoint.
    Used by load balancers and orchestrators.
    """
    return {
        "status": "ok",
        "version": ENGINE_VERSION,
        "protocol": PROTOCOL_VERSION,
        "rules": get_validation_service().get_loaded_rules(),
        "timestamp": int(time.time()),
    }


@app.post("/validate", response_model=ValidateResponse)
def validate_code(req: ValidateRequest = Body(...)):
    """Validate files sent inline and return their findings."""
    if len(req.files) > settings.max_request_files:
        raise HTTPException(
            status_code=413,
            detail=f"Too many files: {len(req.files)} (limit {settings.max_request_files})",
        )

    files_data = [
        {'path': f.path, 'content': f.content, 'language': f.language}
        for f in req.files
    ]

    try:
        result = get_validation_service().validate_files_content(files_data, req.rules, _engine_config())
    except UnsupportedLanguageError as e:
        raise HTTPException(status_code=400, detail=str(e))

    logger.info(f"Validated {result['files_scanned']} files: {len(result['findings'])} findings")

    return ValidateResponse(
        verdict="risky" if result["findings"] else "safe",
        files_scanned=result["files_scanned"],
        rules_run=result["rules_run"],
        findings=result["findings"],
        metrics=result["metrics"],
    )


@app.post("/autofix", response_model=AutofixResponse)
def autofix_code(req: AutofixRequest = Body(...)):
    """Apply every available fix to one file and return the fixed content."""
    try:
        result = get_validation_service().autofix_content(
            req.file.path, req.file.content, req.file.language, req.rule_id, _engine_config()
        )
    except UnsupportedLanguageError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return AutofixResponse(
        path=req.file.path,
        content=result.content,
        fixes_applied=result.fixes_applied,
        passes=result.passes,
        remaining_findings=len(result.remaining),
        diff=result.diff(),
    )


def cli():
    import uvicorn
    uvicorn.run("ctorlint_app.main:app", host=settings.host, port=settings.port, reload=settings.debug)
