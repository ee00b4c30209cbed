# Invoice Overlay backend entrypoint: FastAPI app and router registration.

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.app.api import invoices, login, register, template_fields, templates
from backend.app.core.logging_config import configure_logging
from backend.app.core.settings import get_settings
from backend.app.db.base import Base
from backend.app.db.session import engine

configure_logging()
Base.metadata.create_all(bind=engine)

settings = get_settings()
app = FastAPI(title=settings.app_name, version=settings.api_version)

origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(register.router)
app.include_router(login.router)
app.include_router(templates.router)
app.include_router(template_fields.router)
app.include_router(invoices.router)


@app.get("/")
def read_root():
    return {"app": "Invoice Overlay backend", "status": "ok"}


@app.get("/health")
def health_check():
    return {"status": "ok"}
