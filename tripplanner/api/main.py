import logging

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware
from tripplanner.api.auth import router as auth_router
from tripplanner.api.trips import router as trips_router
from tripplanner.utils.config import CORS_ORIGINS
from tripplanner.utils.db import connect_to_mongo, close_mongo_connection
import uvicorn

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)

app = FastAPI(title="Trip Planner API")

origins = [origin.strip() for origin in CORS_ORIGINS.split(",") if origin.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router, prefix="/api/auth")
app.include_router(trips_router, prefix="/api/trips")

@app.get("/")
def read_root():
    return {"message": "Welcome to the Trip Planner API"}

@app.on_event("startup")
async def startup_event():
    # The API still serves /health and the form helpers without a database
    try:
        await connect_to_mongo()
        logger.info("Server initialization complete. MongoDB connection verified.")
    except Exception as e:
        logger.error("Failed to connect to MongoDB: %s", e)

@app.on_event("shutdown")
async def shutdown_event():
    await close_mongo_connection()
    logger.info("Server shutdown complete.")

@app.get("/health")
def health_check():
    return {"status": "ok"}

if __name__ == "__main__":
    uvicorn.run("tripplanner.api.main:app", host="0.0.0.0", port=8000, reload=True)
