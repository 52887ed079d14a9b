"""Minimal FastAPI application for the sewer condition engine.

This module exposes the classifier over HTTP without changing its
behaviour.

Usage (from project root, after installing fastapi and uvicorn):

    uvicorn sewer_condition.api.app:app --reload

Reference data is read from SEWER_CONDITION_CONFIG_DIR when set (JSON files
as written by ``ConfigurationManager.save_to_directory``), otherwise the
built-in tables are used. When SEWER_CONDITION_DATABASE_URL is set, sector
thresholds are read from that database.
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel, Field

from ..classifier import SectionClassifier
from ..config.config_manager import ConfigurationManager
from ..config.models import ConfigurationError, ReferenceData
from ..models.classification import OverrideGrades, SectionInput
from ..reporting.report_generator import SectorReportGenerator
from ..serialization import ClassificationSerializer
from ..storage.database import DatabaseManager
from ..storage.threshold_store import SectorThresholdStore

logger = logging.getLogger(__name__)

app = FastAPI(title="Sewer Condition Classification API", version="0.1.0")


class OverrideGradesModel(BaseModel):
    structural: Optional[int] = Field(default=None, ge=0, le=5)
    service: Optional[int] = Field(default=None, ge=0, le=5)
    observation: Optional[int] = Field(default=None, ge=0, le=5)


class ClassifyRequest(BaseModel):
    observations: List[str]
    sector: str
    override_grades: Optional[OverrideGradesModel] = None
    item_number: Optional[str] = None
    section_length: Optional[float] = Field(default=None, ge=0)

    def to_input(self) -> SectionInput:
        overrides = None
        if self.override_grades is not None:
            overrides = OverrideGrades(
                structural=self.override_grades.structural,
                service=self.override_grades.service,
                observation=self.override_grades.observation,
            )
        return SectionInput(
            raw_observations=tuple(self.observations),
            sector=self.sector,
            override_grades=overrides,
            item_number=self.item_number,
            section_length=self.section_length,
        )


class BatchClassifyRequest(BaseModel):
    sections: List[ClassifyRequest]
    max_workers: int = Field(default=1, ge=1, le=32)


class ReportRequest(BatchClassifyRequest):
    sector: str
    title: Optional[str] = None


def load_reference_data() -> ReferenceData:
    """Build reference data from the environment."""
    manager = ConfigurationManager.with_defaults()
    config_dir = os.getenv("SEWER_CONDITION_CONFIG_DIR")
    if config_dir:
        result = manager.load_from_directory(config_dir)
        if not result.is_valid:
            raise ConfigurationError("Invalid configuration directory", validation_result=result)
        logger.info(f"Loaded reference data from {config_dir}")

    thresholds = None
    if os.getenv("SEWER_CONDITION_DATABASE_URL"):
        store = SectorThresholdStore(DatabaseManager())
        thresholds = store.load_table(fallback=manager.configuration.thresholds)

    return manager.build_reference_data(thresholds=thresholds)


@lru_cache(maxsize=1)
def get_classifier() -> SectionClassifier:
    """Classifier shared by all requests; reference data is loaded once."""
    return SectionClassifier(load_reference_data())


@app.get("/api/health")
async def health() -> dict:
    return {"status": "ok"}


@app.get("/api/sectors")
async def list_sectors(classifier: SectionClassifier = Depends(get_classifier)) -> JSONResponse:
    """List configured sectors with their thresholds."""
    reference = classifier.reference_data
    return JSONResponse(content={
        "reference_version": reference.version,
        "sectors": reference.thresholds.to_list(),
    })


@app.post("/api/classify")
async def classify(
    request: ClassifyRequest,
    classifier: SectionClassifier = Depends(get_classifier),
) -> JSONResponse:
    """Classify one section's observations."""
    section = request.to_input()
    result = classifier.classify_section(
        section.raw_observations,
        section.override_grades,
        section.sector,
        item_number=section.item_number,
        section_length=section.section_length,
    )
    return JSONResponse(content=ClassificationSerializer.to_dict(result))


@app.post("/api/classify/batch")
async def classify_batch(
    request: BatchClassifyRequest,
    classifier: SectionClassifier = Depends(get_classifier),
) -> JSONResponse:
    """Classify independent sections; results keep request order."""
    results = classifier.classify_batch(
        [s.to_input() for s in request.sections],
        max_workers=request.max_workers,
    )
    return JSONResponse(content={
        "count": len(results),
        "results": [ClassificationSerializer.to_dict(r) for r in results],
    })


@app.post("/api/report", response_class=PlainTextResponse)
async def sector_report(
    request: ReportRequest,
    classifier: SectionClassifier = Depends(get_classifier),
) -> PlainTextResponse:
    """Classify sections and return the Markdown sector analysis report."""
    if not request.sections:
        raise HTTPException(status_code=422, detail="At least one section is required")
    results = classifier.classify_batch(
        [s.to_input() for s in request.sections],
        max_workers=request.max_workers,
    )
    generator = SectorReportGenerator(classifier.reference_data)
    report = generator.render(results, request.sector, title=request.title)
    return PlainTextResponse(content=report, media_type="text/markdown")
