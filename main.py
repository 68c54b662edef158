from fastapi import FastAPI, Depends, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import Session
from sqlalchemy import text
from todo_api.core.config import settings
from todo_api.core.exceptions import (
    TodoAppError,
    todo_app_exception_handler,
    unhandled_exception_handler,
)
from todo_api.core.logging_config import logger
from todo_api.database import get_db
from todo_api.routers import auth, todo, user

# Schema is managed by Alembic migrations (see alembic/versions)

app = FastAPI(
    title="Good Todo API",
    version="1.0.0",
    redirect_slashes=False
)

# Configure CORS for the frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Origin", "Content-Type", "Accept", "Authorization"],
)

app.add_exception_handler(TodoAppError, todo_app_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# Include routers
app.include_router(auth.router, prefix=f"{settings.API_PREFIX}/auth", tags=["Authentication"])
app.include_router(user.router, prefix=settings.API_PREFIX, tags=["Users"])
app.include_router(todo.router, prefix=settings.API_PREFIX, tags=["Todos"])


@app.get(f"{settings.API_PREFIX}/health")
def health_check(db: Session = Depends(get_db)):
    try:
        db.execute(text("SELECT 1"))
        return {
            "status": "healthy",
            "database": "connected"
        }
    except Exception as e:
        logger.error(f"Health check failed: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service unhealthy"
        )


def run():
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000)


if __name__ == "__main__":
    run()
