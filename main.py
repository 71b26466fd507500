from fastapi import FastAPI
from scalar_fastapi import get_scalar_api_reference
from contextlib import asynccontextmanager
import logging
import os

from config import settings

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

from api.errors import register_exception_handlers  # noqa: E402
from api.router import router  # noqa: E402
from database.session import create_db_tables  # noqa: E402


@asynccontextmanager
async def lifespan_handler(_app: FastAPI):
    await create_db_tables()
    yield


app = FastAPI(
    title="Course Enrollment API",
    # Server start/stop listener
    lifespan=lifespan_handler,
)

app.include_router(router)
register_exception_handlers(app)


@app.get("/", include_in_schema=False)
def health_check():
    return {"status": "ok", "message": "Service is running"}


# scalar api documentation
@app.get("/scalar", include_in_schema=False)
def get_scalar_docs():
    return get_scalar_api_reference(
        openapi_url=app.openapi_url,
        title="Course Enrollment API"
    )


if __name__ == "__main__":
    # Read PORT from environment variable, default 8000 for local testing
    port = int(os.getenv("PORT", 8000))
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=port)
