from fastapi import FastAPI, Depends, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
import logging

from relief_dashboard import config, crud, models, schemas
from relief_dashboard.auth import utils_auth as auth_utils
from relief_dashboard.auth.dependencies import get_current_user
from relief_dashboard.database import get_db, init_db
from relief_dashboard.endpoints import (
    dashboard, distributions, flood_zones, population, resources, response_teams, weather, weather_alerts,
)

logging.basicConfig(level=config.LOG_LEVEL)
logger = logging.getLogger(__name__)

init_db()

app = FastAPI(title="Flood Relief Coordination API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(dashboard.router, prefix="/api", tags=["dashboard"])
app.include_router(flood_zones.router, prefix="/api/flood-zones", tags=["flood-zones"])
app.include_router(population.router, prefix="/api/population", tags=["population"])
app.include_router(resources.router, prefix="/api/resources", tags=["resources"])
app.include_router(distributions.router, prefix="/api/relief-distribution", tags=["relief-distribution"])
app.include_router(weather_alerts.router, prefix="/api/weather-alerts", tags=["weather-alerts"])
app.include_router(response_teams.router, prefix="/api/response-teams", tags=["response-teams"])
app.include_router(weather.router, prefix="/api/weather", tags=["weather"])


@app.post("/api/auth/signup", response_model=schemas.UserOut, status_code=201)
def signup(user: schemas.UserCreate, db: Session = Depends(get_db)):
    try:
        u = crud.create_user(db, user)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    logger.info(f"Registered {u.role} {u.email}")
    return u


@app.post("/api/auth/login", response_model=schemas.Token)
def login(payload: schemas.LoginSchema, db: Session = Depends(get_db)):
    user = crud.authenticate_user(db, payload.email, payload.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    return {"access_token": auth_utils.create_access_token(user.id, user.role), "token_type": "bearer"}


@app.get("/api/auth/user", response_model=schemas.UserOut)
def current_user(user: models.User = Depends(get_current_user)):
    return user


@app.patch("/api/auth/user", response_model=schemas.UserOut)
def update_current_user(updates: schemas.UserUpdate, db: Session = Depends(get_db),
                        user: models.User = Depends(get_current_user)):
    try:
        return crud.upsert_user(db, user.id, updates.changes())
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error updating user")
        raise HTTPException(status_code=500, detail="Failed to update user")


@app.get("/")
def root():
    return {"message": "Flood Relief Coordination API"}


def run():
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)


if __name__ == "__main__":
    run()
