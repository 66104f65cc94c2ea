from pydantic import BaseModel, Field
from datetime import datetime


class BaseResponse(BaseModel):
    """Success acknowledgement for mutations"""
    success: bool = True
    message: str


class ErrorResponse(BaseModel):
    """Error response model"""
    error: str


class HealthCheckResponse(BaseModel):
    """Health check response"""
    status: str
    version: str
    timestamp: datetime = Field(default_factory=datetime.now)
