"""
FastAPI Main Application

This script wires the analytics routes and runs the FastAPI server on port 8000.
"""

from fastapi import FastAPI
from dotenv import load_dotenv
import uvicorn
import logging

from analytics import api as analytics_api
from utils import llm

# Load environment variables from .env file
load_dotenv()

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)-20s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Setup logging with timestamps
logging.basicConfig(
    level=logging.INFO,
    format=LOG_FORMAT,
    datefmt=LOG_DATE_FORMAT
)
logger = logging.getLogger(__name__)

# Create FastAPI app instance
app = FastAPI(
    title="Caregiving Analytics API",
    description="Burnout scoring and beautiful-moment prediction for caregivers",
    version="1.0.0"
)

# Text generator is built once per process and shared by all requests
app.state.text_generator = llm.build_text_generator()

app.include_router(analytics_api.router)


@app.get("/")
async def root():
    """Root endpoint."""
    logger.info("GET / - Root endpoint called")
    return {"message": "Caregiving Analytics API is running"}


@app.get("/health")
async def health():
    """Health check endpoint."""
    logger.info("GET /health - Health check endpoint called")
    return {"status": "healthy"}


if __name__ == "__main__":
    # Run the server on port 8000
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=True
    )
