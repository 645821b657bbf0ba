from pathlib import Path
import logging

from dotenv import load_dotenv

# .env must be loaded before app.config reads the environment
load_dotenv()

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from app import config
from app.routers.survey import router as survey_router

logging.basicConfig(
    level=config.LOG_LEVEL.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

app = FastAPI(title="Public Satisfaction Survey")

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins(),
    allow_credentials=True, allow_methods=["*"], allow_headers=["*"],
)

templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/", response_class=HTMLResponse)
def survey_form(request: Request):
    return templates.TemplateResponse(request, "survey.html", {"endpoint": "/api/survey"})


app.include_router(survey_router)
