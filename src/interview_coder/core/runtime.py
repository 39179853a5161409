#!/usr/bin/env python3
"""
Runtime wiring for Interview Coder

Builds one set of connected core components (session, store, capture driver,
OCR engine, credential pool, orchestrator, solution service, event channel
and coordinator) from configuration. The CLI session and the MCP server each
hold one runtime.

Sample input:
- runtime = build_runtime(data_dir="/tmp/interview_coder")

Expected output:
- runtime.store.screenshot_dir == "/tmp/interview_coder/screenshots"
"""

from dataclasses import dataclass
from typing import Optional

import httpx
from loguru import logger

from interview_coder.core import config
from interview_coder.core.capture import CaptureDriver
from interview_coder.core.coordinator import ProcessingCoordinator
from interview_coder.core.credentials import CredentialPool
from interview_coder.core.events import EventChannel
from interview_coder.core.ocr import OcrEngine
from interview_coder.core.orchestrator import RequestOrchestrator
from interview_coder.core.session import Session
from interview_coder.core.solution_service import SolutionService
from interview_coder.core.store import ScreenshotStore


@dataclass
class InterviewCoderRuntime:
    session: Session
    store: ScreenshotStore
    capture: CaptureDriver
    ocr: OcrEngine
    pool: CredentialPool
    orchestrator: RequestOrchestrator
    service: SolutionService
    events: EventChannel
    coordinator: ProcessingCoordinator


def build_runtime(
    data_dir: Optional[str] = None,
    pool: Optional[CredentialPool] = None,
    capture_backend: Optional[str] = None,
    language: Optional[str] = None,
    timeout: Optional[float] = None,
    client: Optional[httpx.AsyncClient] = None
) -> InterviewCoderRuntime:
    """
    Wire the core components from configuration.

    Args:
        data_dir: Base directory for screenshots, defaults to INTERVIEW_CODER_DATA_DIR
        pool: Credential pool, defaults to keys from the environment
        capture_backend: Capture backend, defaults to INTERVIEW_CODER_CAPTURE_BACKEND
        language: Default solution language
        timeout: Request timeout in seconds
        client: Shared HTTP client for the backend

    Returns:
        InterviewCoderRuntime: Connected components
    """
    main_dir, extra_dir = config.get_screenshot_dirs(data_dir)
    timeout = config.REQUEST_TIMEOUT if timeout is None else timeout
    language = language or config.LANGUAGE

    session = Session()
    store = ScreenshotStore(session, main_dir, extra_dir)
    store.restore()
    capture = CaptureDriver(
        store,
        temp_dir=config.get_temp_dir(data_dir),
        backend=capture_backend or config.CAPTURE_BACKEND,
    )
    ocr = OcrEngine(lang=config.OCR_LANG, tesseract_cmd=config.TESSERACT_CMD)
    pool = pool if pool is not None else CredentialPool.from_env()
    orchestrator = RequestOrchestrator(pool, config.GEMINI_API_URL, timeout=timeout, client=client)
    service = SolutionService(orchestrator, ocr, default_language=language)
    events = EventChannel()
    coordinator = ProcessingCoordinator(
        store, service, events, session=session, timeout=timeout, default_language=language
    )

    if not pool.is_configured:
        logger.warning("No Gemini API keys configured; solution generation will fail")
    logger.info(f"Runtime ready: screenshots in {main_dir}, {len(pool)} API key(s), {capture.backend} capture")

    return InterviewCoderRuntime(
        session=session,
        store=store,
        capture=capture,
        ocr=ocr,
        pool=pool,
        orchestrator=orchestrator,
        service=service,
        events=events,
        coordinator=coordinator,
    )
