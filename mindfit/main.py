# mindfit/main.py
import logging

from fastapi import FastAPI
from sqlalchemy import exc as sa_exc

from mindfit.config import settings
from mindfit.database import engine, Base
from mindfit.models import user, checkin, achievement, xp, goal as goal_models, admin as admin_models  # noqa: F401 (register tables)
from mindfit.routers import auth, checkins, dashboard, goal, gamification, admin, insights

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

app = FastAPI(title="MindFit - Fitness Mentorship Tracker", version="1.0")

# Include Routers
app.include_router(auth.router)
app.include_router(checkins.router)
app.include_router(dashboard.router)
app.include_router(goal.router)
app.include_router(gamification.router)
app.include_router(insights.router)
app.include_router(admin.router)

# Create DB Tables (for demo only; use Alembic in prod)
@app.on_event("startup")
async def startup_event():
    # ignore duplicate-object errors from previous partial runs
    async with engine.begin() as conn:
        try:
            await conn.run_sync(Base.metadata.create_all)
        except sa_exc.IntegrityError as e:
            msg = str(getattr(e, "orig", e))
            if "duplicate key value violates unique constraint" in msg or "already exists" in msg:
                logger.warning("Ignored duplicate DDL error during create_all: %s", msg)
            else:
                raise

@app.get("/")
def read_root():
    return {"message": "Welcome to MindFit Backend"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("mindfit.main:app", host="0.0.0.0", port=8000, reload=True)
