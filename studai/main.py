from fastapi import FastAPI
from .core.config import settings
from .core.cors import setup_cors
from .core.errors import register_error_handlers
from .core.log import setup_logging
from .api.v1.routers import quizzes as quizzes_router


def create_app() -> FastAPI:
    setup_logging(settings.LOG_LEVEL)
    app = FastAPI(title=settings.APP_NAME)
    setup_cors(app)
    register_error_handlers(app)

    app.include_router(quizzes_router.router, prefix=settings.API_V1_PREFIX)

    @app.get("/healthz")
    async def healthz():
        return {"status": "ok"}

    return app


app = create_app()
