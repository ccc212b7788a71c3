from fastapi import APIRouter, HTTPException, Depends, Header, status
from typing import Annotated, Optional
from ....schemas.quiz_schemas import (
    AttemptOut,
    QuestionIn,
    QuizCreateIn,
    QuizListItem,
    QuizUpdateIn,
    ScoredResultOut,
    SubmissionIn,
)
from ....services.quiz_service import QuizService
from ....repositories.quiz_repository import QuizRepository
from ....core.config import settings
from ....core.supabase_client import get_supabase

router = APIRouter(prefix="/quizzes", tags=["quizzes"])

# Service dependency factory

def get_service() -> QuizService:
    repo = QuizRepository(get_supabase())
    return QuizService(repo, settings.quiz_rules())

ServiceDep = Annotated[QuizService, Depends(get_service)]

# The session/JWT layer in front of this service forwards the caller's id

def optional_user(x_user_id: Annotated[Optional[str], Header()] = None) -> Optional[str]:
    return x_user_id or None

def require_user(user_id: Annotated[Optional[str], Depends(optional_user)]) -> str:
    if not user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not logged in")
    return user_id

OptionalUser = Annotated[Optional[str], Depends(optional_user)]
CurrentUser = Annotated[str, Depends(require_user)]

@router.get("/", response_model=list[QuizListItem])
async def list_quizzes(svc: ServiceDep):
    return svc.list_quizzes()

@router.get("/{quiz_id}")
async def get_quiz(quiz_id: int, svc: ServiceDep, user_id: OptionalUser):
    return svc.get_quiz(quiz_id, user_id)

@router.get("/{quiz_id}/questions")
async def get_questions(quiz_id: int, svc: ServiceDep, user_id: OptionalUser):
    return svc.get_questions(quiz_id, user_id)

@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_quiz(payload: QuizCreateIn, svc: ServiceDep, user_id: CurrentUser):
    quiz_id = svc.create_quiz(
        user_id,
        payload.title,
        payload.description,
        payload.isPublic,
        [q.model_dump() for q in payload.questions],
    )
    return {"id": quiz_id}

@router.put("/{quiz_id}")
async def update_quiz(quiz_id: int, payload: QuizUpdateIn, svc: ServiceDep, user_id: CurrentUser):
    if payload.model_dump(exclude_none=True) == {}:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Nothing to update")
    svc.update_quiz(
        quiz_id,
        user_id,
        payload.title,
        payload.description,
        payload.isPublic,
        [q.model_dump() for q in payload.questions] if payload.questions is not None else None,
    )
    return {"status": "ok"}

@router.delete("/{quiz_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_quiz(quiz_id: int, svc: ServiceDep, user_id: CurrentUser):
    svc.delete_quiz(quiz_id, user_id)
    return None

@router.post("/{quiz_id}/questions", status_code=status.HTTP_201_CREATED)
async def add_question(quiz_id: int, payload: QuestionIn, svc: ServiceDep, user_id: CurrentUser):
    return {"id": svc.add_question(quiz_id, user_id, payload.model_dump())}

@router.put("/{quiz_id}/questions/{question_id}")
async def update_question(quiz_id: int, question_id: int, payload: QuestionIn, svc: ServiceDep, user_id: CurrentUser):
    svc.update_question(quiz_id, question_id, user_id, payload.model_dump())
    return {"status": "ok"}

@router.delete("/{quiz_id}/questions/{question_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_question(quiz_id: int, question_id: int, svc: ServiceDep, user_id: CurrentUser):
    svc.delete_question(quiz_id, question_id, user_id)
    return None

@router.post("/{quiz_id}/submit", response_model=ScoredResultOut)
async def submit_attempt(quiz_id: int, payload: SubmissionIn, svc: ServiceDep, user_id: CurrentUser):
    return svc.submit_attempt(quiz_id, user_id, payload.answers, payload.timeSpent)

@router.get("/{quiz_id}/attempts", response_model=list[AttemptOut])
async def list_attempts(quiz_id: int, svc: ServiceDep, user_id: CurrentUser):
    return svc.list_attempts(quiz_id, user_id)

@router.get("/{quiz_id}/leaderboard")
async def leaderboard(quiz_id: int, svc: ServiceDep, user_id: OptionalUser):
    return svc.leaderboard(quiz_id, user_id)
