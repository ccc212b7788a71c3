import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class StudAIError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidSubmissionError(StudAIError):
    status_code = status.HTTP_400_BAD_REQUEST


class QuizValidationError(StudAIError):
    status_code = status.HTTP_400_BAD_REQUEST


class QuizNotFoundError(StudAIError):
    status_code = status.HTTP_404_NOT_FOUND


class QuestionNotFoundError(StudAIError):
    status_code = status.HTTP_404_NOT_FOUND


class QuizAccessDeniedError(StudAIError):
    status_code = status.HTTP_403_FORBIDDEN


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(StudAIError)
    async def studai_error_handler(request: Request, exc: StudAIError):
        logger.info("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.message)
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})
