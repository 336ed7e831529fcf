"""
Farm Advisor - crop, fertilizer and yield recommendations from soil/weather measurements.
FastAPI backend: auth, soil data rows, rule-based predictions, prediction history.
"""
import logging
from datetime import datetime
from typing import Optional, List, Dict

from fastapi import FastAPI, Depends, HTTPException, Header, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

import store
from auth import (
    EmailAlreadyRegistered,
    create_access_token,
    get_user,
    register_user,
    verify_token,
    verify_user,
)
from config import CORS_ORIGINS, LOG_LEVEL
from crop_database import match_crop
from fertilizer_engine import recommend_fertilizer
from yield_engine import estimate_yield

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Farm Advisor API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Anything not already an HTTPException becomes a 500 with the error message."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": str(exc)})


# --- Request/Response models ---
class RegisterRequest(BaseModel):
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=6)
    full_name: Optional[str] = None


class LoginRequest(BaseModel):
    email: str
    password: str


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class UserResponse(BaseModel):
    id: str
    email: str
    full_name: Optional[str] = None
    created_at: datetime


class SoilDataCreate(BaseModel):
    nitrogen: float = Field(..., ge=0, description="Nitrogen (kg/ha)")
    phosphorus: float = Field(..., ge=0, description="Phosphorus (kg/ha)")
    potassium: float = Field(..., ge=0, description="Potassium (kg/ha)")
    ph_level: float = Field(..., ge=0, le=14, description="Soil pH")
    temperature: float = Field(..., description="Temperature (°C)")
    humidity: float = Field(..., ge=0, le=100, description="Relative humidity (%)")
    rainfall: float = Field(..., ge=0, description="Rainfall (mm)")
    location: Optional[str] = None


class SoilDataResponse(SoilDataCreate):
    id: str
    user_id: str
    created_at: datetime


class CropPredictionRequest(BaseModel):
    soil_data_id: str


class CropAdviceRequest(CropPredictionRequest):
    crop: str


class CropPredictionResponse(BaseModel):
    crop: str
    confidence: float
    alternates: List[str]
    reasoning: str


class FertilizerResponse(BaseModel):
    type: str
    dosage: str
    timing: str


class ConfidenceInterval(BaseModel):
    lower: float
    upper: float


class YieldResponse(BaseModel):
    # "yield" is a keyword, so the field is aliased
    predicted_yield: float = Field(..., alias="yield")
    confidenceInterval: ConfidenceInterval
    factors: Dict[str, str]

    model_config = {"populate_by_name": True}


class HistorySoilData(BaseModel):
    nitrogen: float
    phosphorus: float
    potassium: float
    location: Optional[str] = None


class HistoryItem(BaseModel):
    id: str
    created_at: datetime
    soil_data_id: str
    soil_data: Optional[HistorySoilData] = None
    crop: str
    fertilizer: str
    predicted_yield: float = Field(..., alias="yield")

    model_config = {"populate_by_name": True}


MEASUREMENT_FIELDS = ("nitrogen", "phosphorus", "potassium", "ph_level", "temperature", "humidity", "rainfall")


def get_current_user(authorization: Optional[str] = Header(None)) -> dict:
    """Extract and validate Bearer token from Authorization header; returns the user."""
    if not authorization:
        raise HTTPException(status_code=401, detail="Missing token")
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise HTTPException(status_code=401, detail="Invalid authorization header")
    payload = verify_token(parts[1])
    if payload is None:
        logger.warning("Rejected invalid or expired token")
        raise HTTPException(status_code=401, detail="Invalid or expired token")
    user = get_user(payload.get("sub", ""))
    if user is None:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return user


def _load_soil_data(soil_data_id: str, user: dict) -> dict:
    row = store.get_row(store.SOIL_DATA, soil_data_id, user["id"])
    if row is None:
        raise HTTPException(status_code=404, detail="Soil data not found")
    return row


def _measurement(row: dict) -> dict:
    return {name: float(row[name]) for name in MEASUREMENT_FIELDS}


@app.post("/register", response_model=LoginResponse, status_code=201)
def register(req: RegisterRequest):
    """Create an account and return a JWT for it."""
    try:
        user = register_user(req.email, req.password, req.full_name)
    except EmailAlreadyRegistered:
        raise HTTPException(status_code=409, detail="Email already registered")
    return LoginResponse(access_token=create_access_token(data={"sub": user["id"]}))


@app.post("/login", response_model=LoginResponse)
def login(req: LoginRequest):
    """Login with email/password; returns JWT."""
    user = verify_user(req.email, req.password)
    if user is None:
        raise HTTPException(status_code=401, detail="Invalid email or password")
    token = create_access_token(data={"sub": user["id"]})
    return LoginResponse(access_token=token)


@app.get("/me", response_model=UserResponse)
def me(user: dict = Depends(get_current_user)):
    return UserResponse(**user)


@app.post("/soil-data", response_model=SoilDataResponse, status_code=201)
def create_soil_data(data: SoilDataCreate, user: dict = Depends(get_current_user)):
    """Store one soil/weather measurement for the current user."""
    row = store.insert_row(store.SOIL_DATA, {"user_id": user["id"], **data.model_dump()})
    return SoilDataResponse(**row)


@app.get("/soil-data", response_model=List[SoilDataResponse])
def list_soil_data(user: dict = Depends(get_current_user)):
    """The current user's measurements, newest first."""
    return [SoilDataResponse(**row) for row in store.list_rows(store.SOIL_DATA, user["id"])]


@app.get("/soil-data/{soil_data_id}", response_model=SoilDataResponse)
def get_soil_data(soil_data_id: str, user: dict = Depends(get_current_user)):
    return SoilDataResponse(**_load_soil_data(soil_data_id, user))


@app.post("/predict-crop", response_model=CropPredictionResponse)
def predict_crop(req: CropPredictionRequest, user: dict = Depends(get_current_user)):
    """Best crop for a stored measurement; the result is saved to history."""
    soil = _load_soil_data(req.soil_data_id, user)
    prediction = match_crop(**_measurement(soil))
    store.insert_row(store.CROP_RECOMMENDATIONS, {
        "user_id": user["id"],
        "soil_data_id": req.soil_data_id,
        "recommended_crop": prediction["crop"],
        "confidence_score": prediction["confidence"],
        "alternate_crops": prediction["alternates"],
        "reasoning": prediction["reasoning"],
    })
    logger.info("Crop prediction for %s: %s (%.2f)", req.soil_data_id, prediction["crop"], prediction["confidence"])
    return CropPredictionResponse(**prediction)


@app.post("/predict-fertilizer", response_model=FertilizerResponse)
def predict_fertilizer(req: CropAdviceRequest, user: dict = Depends(get_current_user)):
    """Fertilizer plan for a stored measurement and a chosen crop."""
    soil = _load_soil_data(req.soil_data_id, user)
    m = _measurement(soil)
    recommendation = recommend_fertilizer(
        req.crop, m["nitrogen"], m["phosphorus"], m["potassium"], m["ph_level"]
    )
    store.insert_row(store.FERTILIZER_RECOMMENDATIONS, {
        "user_id": user["id"],
        "soil_data_id": req.soil_data_id,
        "crop_type": req.crop,
        "fertilizer_type": recommendation["type"],
        "dosage": recommendation["dosage"],
        "timing": recommendation["timing"],
    })
    logger.info("Fertilizer plan for %s (%s): %s", req.soil_data_id, req.crop, recommendation["type"])
    return FertilizerResponse(**recommendation)


@app.post("/predict-yield", response_model=YieldResponse, response_model_by_alias=True)
def predict_yield(req: CropAdviceRequest, user: dict = Depends(get_current_user)):
    """Yield estimate (t/ha) for a stored measurement and a chosen crop."""
    soil = _load_soil_data(req.soil_data_id, user)
    prediction = estimate_yield(req.crop, **_measurement(soil))
    store.insert_row(store.YIELD_PREDICTIONS, {
        "user_id": user["id"],
        "soil_data_id": req.soil_data_id,
        "crop_type": req.crop,
        "predicted_yield": prediction["yield"],
        "confidence_interval": prediction["confidenceInterval"],
        "factors": prediction["factors"],
    })
    logger.info("Yield estimate for %s (%s): %.2f t/ha", req.soil_data_id, req.crop, prediction["yield"])
    return YieldResponse(**prediction)


@app.get("/history", response_model=List[HistoryItem], response_model_by_alias=True)
def history(user: dict = Depends(get_current_user)):
    """
    Crop recommendations, newest first, each joined with its soil row and the latest
    fertilizer type / yield estimate made for the same soil row.
    """
    fertilizer_by_soil: Dict[str, str] = {}
    for row in store.list_rows(store.FERTILIZER_RECOMMENDATIONS, user["id"]):
        fertilizer_by_soil.setdefault(row["soil_data_id"], row["fertilizer_type"])
    yield_by_soil: Dict[str, float] = {}
    for row in store.list_rows(store.YIELD_PREDICTIONS, user["id"]):
        yield_by_soil.setdefault(row["soil_data_id"], row["predicted_yield"])

    items = []
    for rec in store.list_rows(store.CROP_RECOMMENDATIONS, user["id"]):
        soil = store.get_row(store.SOIL_DATA, rec["soil_data_id"], user["id"])
        items.append(HistoryItem(
            id=rec["id"],
            created_at=rec["created_at"],
            soil_data_id=rec["soil_data_id"],
            soil_data=HistorySoilData(**soil) if soil else None,
            crop=rec["recommended_crop"],
            fertilizer=fertilizer_by_soil.get(rec["soil_data_id"], "N/A"),
            predicted_yield=yield_by_soil.get(rec["soil_data_id"], 0),
        ))
    return items


@app.get("/health")
def health():
    return {
        "status": "active",
        "version": "1.0.0",
        "security_layer": "JWT enabled",
        "features": [
            "crop_prediction",
            "fertilizer_recommendation",
            "yield_prediction",
            "prediction_history",
        ],
    }
