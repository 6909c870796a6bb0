import logging
import traceback
from datetime import datetime, timezone
from typing import Annotated, Dict, List, Literal

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, FiniteFloat

import solver
from solver import (
    NORMALIZATION_METHODS,
    MathEngineError,
    correlation_matrix,
    describe,
    linear_regression,
    normalize,
    parse_equation,
    solve_linear,
    solve_quadratic,
    solve_system_2x2,
)

from .calculator import FUNCTION_CATALOG, evaluate_expression, validate_expression
from .config import settings

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("symsolver.api")

app = FastAPI(
    title="SymSolver API",
    version=solver.__version__,
    description="Equation solving, equation parsing, statistics and a scientific calculator.",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Request models ──────────────────────────────────────────────────────

class LinearRequest(BaseModel):
    a: FiniteFloat = Field(..., description="Coefficient of x")
    b: FiniteFloat = Field(..., description="Constant term")


class QuadraticRequest(BaseModel):
    a: FiniteFloat
    b: FiniteFloat
    c: FiniteFloat


class SystemRow(BaseModel):
    """One row ``a·x + b·y = c``."""

    a: FiniteFloat
    b: FiniteFloat
    c: FiniteFloat


class SystemRequest(BaseModel):
    eq1: SystemRow
    eq2: SystemRow


class ParseRequest(BaseModel):
    equation: str = Field(..., min_length=1, max_length=settings.MAX_EXPRESSION_LENGTH)


class DataPoint(BaseModel):
    x: FiniteFloat
    y: FiniteFloat


class RegressionRequest(BaseModel):
    data: List[DataPoint] = Field(..., min_length=2, max_length=settings.MAX_DATASET_SIZE)


class DescriptiveRequest(BaseModel):
    values: List[FiniteFloat] = Field(..., min_length=1, max_length=settings.MAX_DATASET_SIZE)


class NormalizeRequest(BaseModel):
    data: List[FiniteFloat] = Field(..., min_length=1, max_length=settings.MAX_DATASET_SIZE)
    method: str = "zscore"


Variable = Annotated[
    List[FiniteFloat], Field(min_length=2, max_length=settings.MAX_DATASET_SIZE)
]


class CorrelationRequest(BaseModel):
    datasets: Dict[str, Variable]
    method: Literal["pearson", "spearman"] = "pearson"


class ExpressionRequest(BaseModel):
    expression: str = Field(..., min_length=1, max_length=settings.MAX_EXPRESSION_LENGTH)


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


# ── Error handling ──────────────────────────────────────────────────────

_ERROR_TITLES = {
    "InvalidCoefficient": "Invalid coefficient",
    "SingularSystem": "System has no unique solution",
    "DegenerateInput": "Degenerate input",
    "MalformedSample": "Malformed sample",
}


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    logger.warning("Invalid input on %s: %s", request.url.path, exc)
    title = "Invalid input"
    if isinstance(exc, MathEngineError):
        title = _ERROR_TITLES.get(type(exc).__name__, title)
    return JSONResponse(status_code=400, content={"error": title, "details": str(exc)})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}\n{traceback.format_exc()}")
    return JSONResponse(
        status_code=500,
        content={"error": "Internal error", "details": str(exc)},
    )


# ── Health ──────────────────────────────────────────────────────────────

@app.get("/health")
def health():
    return {"status": "ok", "version": solver.__version__, "timestamp": _timestamp()}


# ── Equations ───────────────────────────────────────────────────────────

@app.post("/api/equations/linear")
def linear(req: LinearRequest):
    result = solve_linear(req.a, req.b)
    result["timestamp"] = _timestamp()
    return result


@app.post("/api/equations/quadratic")
def quadratic(req: QuadraticRequest):
    result = solve_quadratic(req.a, req.b, req.c)
    result["timestamp"] = _timestamp()
    return result


@app.post("/api/equations/system")
def system(req: SystemRequest):
    eq1 = (req.eq1.a, req.eq1.b, req.eq1.c)
    eq2 = (req.eq2.a, req.eq2.b, req.eq2.c)
    result = solve_system_2x2(eq1, eq2)
    result["timestamp"] = _timestamp()
    return result


@app.post("/api/equations/parse")
def parse(req: ParseRequest):
    result = parse_equation(req.equation)
    if not result["success"]:
        logger.info("Unrecognized equation: %r", req.equation)
        return JSONResponse(
            status_code=400,
            content={
                "error": "Invalid equation format",
                "details": result["error"],
                "suggestions": result["suggestions"],
            },
        )
    return {
        "original": result["original"],
        "type": result["type"],
        "coefficients": result["coefficients"],
        "formatted": result["formatted"],
        "timestamp": _timestamp(),
    }


# ── Statistics ──────────────────────────────────────────────────────────

@app.post("/api/ml/regression/linear")
def regression(req: RegressionRequest):
    result = linear_regression([point.model_dump() for point in req.data])
    result["timestamp"] = _timestamp()
    return result


@app.post("/api/ml/stats/descriptive")
def descriptive(req: DescriptiveRequest):
    stats = describe(req.values)
    distribution = stats.pop("distribution")
    return {
        "original_data": req.values,
        "statistics": stats,
        "distribution": distribution,
        "timestamp": _timestamp(),
    }


@app.post("/api/ml/normalize")
def normalize_data(req: NormalizeRequest):
    if req.method not in NORMALIZATION_METHODS:
        return JSONResponse(
            status_code=400,
            content={
                "error": "Invalid normalization method",
                "available_methods": list(NORMALIZATION_METHODS),
            },
        )
    result = normalize(req.data, req.method)
    return {
        "original_data": req.data,
        "normalized_data": result["normalized"],
        "method": result["method"],
        "parameters": result["parameters"],
        "statistics": result["statistics"],
        "timestamp": _timestamp(),
    }


@app.post("/api/ml/correlation")
def correlation(req: CorrelationRequest):
    result = correlation_matrix(req.datasets, method=req.method)
    result["timestamp"] = _timestamp()
    return result


# ── Calculator ──────────────────────────────────────────────────────────

@app.post("/api/calculate")
def calculate(req: ExpressionRequest):
    result = evaluate_expression(req.expression)
    result["timestamp"] = _timestamp()
    return result


@app.get("/api/calculate/functions")
def calculator_functions():
    return FUNCTION_CATALOG


@app.post("/api/calculate/validate")
def calculator_validate(req: ExpressionRequest):
    return validate_expression(req.expression)
