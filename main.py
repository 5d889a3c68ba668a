import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import settings
from exercises import InvalidConfiguration

# Routers
from routers.explain import router as explain_router
from routers.marking import router as marking_router
from routers.worksheets import router as worksheets_router

logger = logging.getLogger("xmath-worksheets")
logging.basicConfig(level=settings.LOG_LEVEL)

app = FastAPI(title="Xmath – Worksheet API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(InvalidConfiguration)
async def invalid_configuration_handler(request: Request, exc: InvalidConfiguration):
    logger.warning("invalid_configuration path=%s err=%s", request.url.path, exc)
    return JSONResponse(status_code=422, content={"ok": False, "error": str(exc)})


@app.get("/")
def health_root():
    return {"ok": True}


app.include_router(worksheets_router)  # /operations, /worksheets
app.include_router(explain_router)  # /explain
app.include_router(marking_router)  # /mark, /mark-batch
