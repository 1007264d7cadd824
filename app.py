import os
import json
import uuid
import logging
import threading
from typing import Dict, List, Optional, Literal

from fastapi import FastAPI, HTTPException, UploadFile, File, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field, HttpUrl
from starlette.responses import FileResponse
from concurrent.futures import ThreadPoolExecutor

from stringart import config
from stringart.errors import BuildCancelled, StringArtError
from stringart.generate import (
    generate_string_art,
    INSTR_PDF,
    LINES_CSV,
    RESULT_PNG,
    TIMELAPSE_MP4,
)
from stringart.imaging import fetch_image

# -------------------------------------------------------------------
# Basic config
# -------------------------------------------------------------------

config.configure_logging()
logger = logging.getLogger("stringart.api")

PUBLIC_BASE_URL = config.PUBLIC_BASE_URL
JOBS_ROOT = config.JOBS_ROOT
os.makedirs(JOBS_ROOT, exist_ok=True)

PATH_JSON = "path.json"
INPUT_NAME = "input.jpg"  # pillow sniffs the real format


app = FastAPI(title="String Art API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

# A tiny thread pool so jobs run in the background
EXECUTOR = ThreadPoolExecutor(max_workers=2)

# Cancellation flags of queued / running jobs
CANCEL_EVENTS: Dict[str, threading.Event] = {}


# -------------------------------------------------------------------
# Pydantic models
# -------------------------------------------------------------------

class JobParams(BaseModel):
    hooks: int = Field(config.NUM_HOOKS, gt=0, le=2000)
    strings: int = Field(config.NUM_STRINGS, ge=0, le=20000)
    size: int = Field(config.IMAGE_SIZE, ge=3, le=4000)
    snapshotEvery: int = Field(config.SNAPSHOT_EVERY, ge=0)


class RedeemBody(BaseModel):
    imageUrl: HttpUrl
    params: JobParams = JobParams()


class JobStatus(BaseModel):
    jobId: str
    status: Literal["queued", "processing", "done", "error", "cancelled"]
    error: Optional[str] = None
    resultImageUrl: Optional[str] = None
    resultPdfUrl: Optional[str] = None
    resultCsvUrl: Optional[str] = None
    resultTimelapseUrl: Optional[str] = None
    resultPathUrl: Optional[str] = None


class HookPath(BaseModel):
    jobId: str
    hooks: int
    strings: int
    path: List[int]


# -------------------------------------------------------------------
# Helper functions for status JSON per job
# -------------------------------------------------------------------

def job_dir(job_id: str) -> str:
    return os.path.join(JOBS_ROOT, job_id)


def status_path(job_id: str) -> str:
    return os.path.join(job_dir(job_id), "status.json")


def read_status(job_id: str) -> JobStatus:
    path = status_path(job_id)
    if not os.path.exists(path):
        raise HTTPException(status_code=404, detail="Unknown job_id")
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    return JobStatus(**data)


def write_status(status: JobStatus) -> None:
    jd = job_dir(status.jobId)
    os.makedirs(jd, exist_ok=True)
    path = status_path(status.jobId)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(status.model_dump(), f)


def build_file_url(job_id: str, filename: str) -> str:
    if PUBLIC_BASE_URL:
        base = PUBLIC_BASE_URL.rstrip("/")
        return f"{base}/files/{job_id}/{filename}"
    # Fallback: relative path
    return f"/files/{job_id}/{filename}"


def new_job_id() -> str:
    return uuid.uuid4().hex[:12]


# -------------------------------------------------------------------
# Core pipeline: hook path + PNG + CSV/PDF + timelapse
# -------------------------------------------------------------------

def generate_string_art_assets(input_path: str, job_id: str, params: Optional[JobParams] = None) -> None:
    """
    Runs the full pipeline for a given job and records the outcome in
    status.json. Never raises: failures end up as status "error".
    """
    params = params or JobParams()
    jd = job_dir(job_id)
    os.makedirs(jd, exist_ok=True)
    cancel = CANCEL_EVENTS.setdefault(job_id, threading.Event())

    status = JobStatus(jobId=job_id, status="processing")
    write_status(status)
    logger.info("[JOB %s] Starting pipeline, input_path=%s, params=%s", job_id, input_path, params)

    try:
        outputs = generate_string_art(
            input_path, jd,
            num_hooks=params.hooks,
            num_strings=params.strings,
            size=params.size,
            snapshot_every=params.snapshotEvery,
            cancel=cancel,
        )

        with open(os.path.join(jd, PATH_JSON), "w", encoding="utf-8") as f:
            json.dump(
                HookPath(jobId=job_id, hooks=params.hooks, strings=params.strings,
                         path=outputs["path"]).model_dump(),
                f,
            )

        status.status = "done"
        status.resultImageUrl = build_file_url(job_id, RESULT_PNG)
        status.resultCsvUrl = build_file_url(job_id, LINES_CSV)
        status.resultPathUrl = f"/jobs/{job_id}/path"
        if "instr_pdf" in outputs:
            status.resultPdfUrl = build_file_url(job_id, INSTR_PDF)
        if outputs.get("timelapse_mp4"):
            status.resultTimelapseUrl = build_file_url(job_id, TIMELAPSE_MP4)
        write_status(status)
        logger.info("[JOB %s] Finished OK (%d saturated strings)", job_id, outputs["saturated_steps"])

    except BuildCancelled as e:
        status.status = "cancelled"
        status.error = str(e)
        write_status(status)
        logger.info("[JOB %s] Cancelled: %s", job_id, e)

    except Exception as e:
        status.status = "error"
        status.error = str(e)
        write_status(status)
        logger.exception("[JOB %s] ERROR: %r", job_id, e)

    finally:
        CANCEL_EVENTS.pop(job_id, None)


def submit_job(input_path: str, job_id: str, params: JobParams) -> JobStatus:
    status = JobStatus(jobId=job_id, status="queued")
    write_status(status)
    CANCEL_EVENTS[job_id] = threading.Event()
    EXECUTOR.submit(generate_string_art_assets, input_path, job_id, params)
    return status


# -------------------------------------------------------------------
# API endpoints
# -------------------------------------------------------------------

@app.get("/")
def root():
    return {
        "status": "ok",
        "publicBaseUrl": PUBLIC_BASE_URL or "(relative)",
        "filesRoot": JOBS_ROOT,
        "defaults": JobParams().model_dump(),
    }


@app.post("/redeem-upload", response_model=JobStatus)
async def redeem_upload(
    file: UploadFile = File(...),
    hooks: int = Query(config.NUM_HOOKS, gt=0, le=2000),
    strings: int = Query(config.NUM_STRINGS, ge=0, le=20000),
    size: int = Query(config.IMAGE_SIZE, ge=3, le=4000),
    snapshotEvery: int = Query(config.SNAPSHOT_EVERY, ge=0),
):
    """
    Start a job from an uploaded image.
    Always writes a status.json file so /status/{job_id} never 404s.
    """
    if not file.content_type or not file.content_type.startswith("image/"):
        raise HTTPException(status_code=400, detail="Uploaded file must be an image")

    job_id = new_job_id()
    jd = job_dir(job_id)
    os.makedirs(jd, exist_ok=True)

    input_path = os.path.join(jd, INPUT_NAME)
    try:
        contents = await file.read()
        with open(input_path, "wb") as out:
            out.write(contents)
    except OSError as e:
        status = JobStatus(jobId=job_id, status="error", error=f"Failed to save upload: {e}")
        write_status(status)
        return status

    params = JobParams(hooks=hooks, strings=strings, size=size, snapshotEvery=snapshotEvery)
    return submit_job(input_path, job_id, params)


@app.post("/redeem", response_model=JobStatus)
def redeem(body: RedeemBody):
    """
    Start a job from an image URL.
    """
    job_id = new_job_id()
    jd = job_dir(job_id)
    os.makedirs(jd, exist_ok=True)

    input_path = os.path.join(jd, INPUT_NAME)
    try:
        fetch_image(str(body.imageUrl), input_path)
    except StringArtError as e:
        status = JobStatus(jobId=job_id, status="error", error=str(e))
        write_status(status)
        return status

    return submit_job(input_path, job_id, body.params)


@app.get("/status/{job_id}", response_model=JobStatus)
def get_status(job_id: str):
    return read_status(job_id)


@app.post("/jobs/{job_id}/cancel", response_model=JobStatus)
def cancel_job(job_id: str):
    status = read_status(job_id)
    event = CANCEL_EVENTS.get(job_id)
    if event is None or status.status not in ("queued", "processing"):
        raise HTTPException(status_code=409, detail=f"Job is {status.status}")
    event.set()
    return status


@app.get("/jobs/{job_id}/path", response_model=HookPath)
def get_path(job_id: str):
    status = read_status(job_id)
    if status.status != "done":
        raise HTTPException(status_code=409, detail=f"Job is {status.status}")
    with open(os.path.join(job_dir(job_id), PATH_JSON), "r", encoding="utf-8") as f:
        return HookPath(**json.load(f))


@app.get("/files/{job_id}/{filename}")
def get_file(job_id: str, filename: str):
    jd = os.path.realpath(job_dir(job_id))
    path = os.path.realpath(os.path.join(jd, filename))
    if os.path.dirname(path) != jd or not os.path.isfile(path):
        raise HTTPException(status_code=404, detail="File not found")
    return FileResponse(path)
