import logging.config

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from carehub.core.config import settings

logging.config.dictConfig(settings.logging_config)

from carehub.api.v1.auth import router as auth_router
from carehub.api.v1.admin import router as admin_router
from carehub.api.v1.prescriptions import router as prescriptions_router
from carehub.api.v1.verify import router as verify_router


app = FastAPI(title=settings.APP_NAME, version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router)
app.include_router(admin_router)
app.include_router(prescriptions_router)
app.include_router(verify_router)


@app.get("/health")
async def health():
    return {"status": "ok"}
