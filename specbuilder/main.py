import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from specbuilder.settings import settings

logging.basicConfig(
    level=settings.get_log_level(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# 1. Setup App
app = FastAPI(title="App Spec Builder")

# 2. Setup CORS, allow all in development mode
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["content-disposition"]
)

# 3. Import Models BEFORE create_all to ensure they are registered in Base.metadata
from specbuilder.database import Base, engine, SessionLocal
from specbuilder.models import db_models  # noqa: F401  registers the tables
Base.metadata.create_all(bind=engine)

# 4. Seed the starter templates on an empty database
if settings.should_seed_templates():
    from specbuilder.services.templates import seed_templates
    with SessionLocal() as seed_db:
        seed_templates(seed_db)

# 5. Map service failures to distinct responses
from specbuilder.errors import SpecBuilderError


@app.exception_handler(SpecBuilderError)
async def spec_builder_error_handler(request: Request, exc: SpecBuilderError):
    if exc.status_code >= 500:
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.error_code, "detail": exc.message},
    )


# 6. Include Routers
from specbuilder.routers import conversations, specifications, templates
app.include_router(conversations.router)
app.include_router(specifications.router)
app.include_router(templates.router)


@app.get("/")
def read_root():
    return {"status": "App Spec Builder is running"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
