from __future__ import annotations

import logging
from datetime import date
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from nfa_form.api.http_setup import register_exception_handlers, register_http_middleware
from nfa_form.api.routes import QuestionnaireRouteDeps, register_questionnaire_routes
from nfa_form.core.config import AppConfig
from nfa_form.core.logging import setup_logging
from nfa_form.documents.generation_service import build_generation_service

load_dotenv()
APP_CONFIG = AppConfig.from_env()
setup_logging(APP_CONFIG.logging.level)
LOGGER = logging.getLogger(__name__)

APP_ROOT = Path(__file__).resolve().parent


def create_app(config: AppConfig = APP_CONFIG) -> FastAPI:
    app = FastAPI(title="NFA Responsible Person Questionnaire API", version="1.0.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.security.cors_allowed_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "X-Request-ID"],
        expose_headers=["Content-Disposition", "X-Request-ID"],
    )
    register_http_middleware(app, config=config, logger=LOGGER)
    register_exception_handlers(app, logger=LOGGER)

    generation_service = build_generation_service(
        config, root=APP_ROOT, today=date.today
    )
    register_questionnaire_routes(
        app,
        deps=QuestionnaireRouteDeps(
            config=config,
            generation_service=generation_service,
            today=date.today,
            on_shutdown=generation_service.shutdown,
        ),
    )

    return app


app = create_app()
