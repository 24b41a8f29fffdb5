from fastapi import FastAPI, HTTPException
from pydantic import BaseModel
from typing import Any, List, Optional
import uvicorn

from ..errors import StructuralError
from ..validation import SchemaValidator
from ..validation.value_types import declared_type
from ..utils.logger import ValidationLogger


class ValidationServer:
    """HTTP API exposing validation and sanitization of JSON-LD records."""

    def __init__(self, validator: SchemaValidator, host: str = "localhost", port: int = 8010,
                 run_logger: Optional[ValidationLogger] = None):
        """
        Initialize the server.

        Args:
            validator: Engine bound to the loaded ontology
            host: Host to bind
            port: Port to bind
            run_logger: Optional run logger recording every request's outcome. Pass one
                built with record_html=False, a recording logger keeps every request in memory
                until log_summary()
        """
        self.validator = validator
        self.host = host
        self.port = port
        self.run_logger = run_logger
        self.app = FastAPI(
            title="Schema.org Validator",
            description="Validate and sanitize JSON-LD records against the Schema.org vocabulary",
            version="0.1.0"
        )

        self._setup_routes()

    def _setup_routes(self) -> None:
        """Configure the API routes."""

        @self.app.get("/")
        async def root():
            return {"status": "ok", "message": "Schema.org validator is running"}

        @self.app.get("/health")
        async def health_check():
            return {
                "status": "healthy",
                "types": len(self.validator.ontology.type_map),
                "subclass_links": len(self.validator.ontology.subclass_map),
            }

        @self.app.post("/api/validate", response_model=ValidationResponse)
        def validate_record(request: RecordRequest):
            """
            Validate a record.

            Returns:
                Whether the record is valid, and the violations in discovery order
            """
            try:
                violations = self.validator.validate(request.record)
            except StructuralError as e:
                raise HTTPException(500, str(e))

            if self.run_logger is not None:
                self.run_logger.log_validation(
                    request.source or "request", declared_type(request.record), violations
                )

            return ValidationResponse(
                valid=not violations,
                count=len(violations),
                violations=[ViolationModel(**violation.to_dict()) for violation in violations],
            )

        @self.app.post("/api/strip", response_model=StripResponse)
        def strip_record(request: RecordRequest):
            """Return the record with every disallowed property removed."""
            try:
                clean = self.validator.strip_invalid(request.record)
            except StructuralError as e:
                raise HTTPException(500, str(e))

            if self.run_logger is not None:
                self.run_logger.log_sanitization(request.source or "request", request.record, clean)

            return StripResponse(record=clean)

        @self.app.get("/api/types/{type_name}")
        def describe_type(type_name: str):
            """Ancestors and allowed properties of a Schema.org type."""
            try:
                description = self.validator.describe_type(type_name)
            except StructuralError as e:
                raise HTTPException(500, str(e))

            if description is None:
                raise HTTPException(404, f"Type {type_name} not found")
            return description

    def run(self, debug: bool = False) -> None:
        """
        Start the server.

        Args:
            debug: If True, enable debug logging
        """
        uvicorn.run(
            self.app,
            host=self.host,
            port=self.port,
            log_level="debug" if debug else "info"
        )

    def get_app(self) -> FastAPI:
        """Return the FastAPI app for testing or deployment."""
        return self.app


# Pydantic models for request and response bodies

class RecordRequest(BaseModel):
    """A JSON-LD record to validate or sanitize."""
    record: Any
    source: Optional[str] = None


class ViolationModel(BaseModel):
    path: str
    message: str
    kind: str


class ValidationResponse(BaseModel):
    valid: bool
    count: int
    violations: List[ViolationModel]


class StripResponse(BaseModel):
    record: Any
