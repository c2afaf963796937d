from fastapi import APIRouter, HTTPException, Depends, status
from typing import List
from duvidapp.models.QuestionModel import QuestionCreate, QuestionDetail, QuestionUpdate
from duvidapp.config.database import db, now, object_id
from duvidapp.router.UserService import get_current_user, is_admin
import pymongo

question_router = APIRouter()

# Utility: Load a question or fail with 404
def find_question(question_id: str) -> dict:
    oid = object_id(question_id)
    question = db.questions.find_one({"_id": oid}) if oid else None
    if not question:
        raise HTTPException(status_code=404, detail="Dúvida não encontrada")
    return question

# Utility: Shape a stored question for responses
def serialize_question(question: dict) -> dict:
    question = dict(question)
    question["id"] = str(question.pop("_id"))
    return question

# Fetch all questions
@question_router.get("", response_model=List[QuestionDetail])
async def fetch_all_questions(current_user: dict = Depends(get_current_user)):
    questions = db.questions.find().sort([("createdAt", pymongo.DESCENDING), ("_id", pymongo.DESCENDING)])
    return [serialize_question(question) for question in questions]

# Create a question
@question_router.post("", response_model=QuestionDetail, status_code=status.HTTP_201_CREATED)
async def create_question(question: QuestionCreate, current_user: dict = Depends(get_current_user)):
    question_data = question.model_dump()
    question_data["author"] = {
        "id": str(current_user["_id"]),
        "name": current_user["name"],
        "avatar": current_user.get("avatar"),
        "role": current_user.get("role", "user"),
    }
    question_data["createdAt"] = now()
    question_data["updatedAt"] = question_data["createdAt"]
    question_data["viewing"] = 0
    question_data["likes"] = 0

    result = db.questions.insert_one(question_data)
    question_data["_id"] = result.inserted_id
    return serialize_question(question_data)

@question_router.put("/{question_id}", response_model=QuestionDetail)
async def update_question(question_id: str, updated_data: QuestionUpdate, current_user: dict = Depends(get_current_user)):
    question = find_question(question_id)

    update_fields = {key: value for key, value in updated_data.model_dump().items() if value is not None}

    # Any user may sync the like count, only the author or a teacher may edit the text
    edits = set(update_fields) - {"likes"}
    if edits and question["author"]["id"] != str(current_user["_id"]) and not is_admin(current_user):
        raise HTTPException(status_code=403, detail="Apenas o autor pode editar esta dúvida")

    update_fields["updatedAt"] = now()
    result = db.questions.find_one_and_update(
        {"_id": question["_id"]},
        {"$set": update_fields},
        return_document=pymongo.ReturnDocument.AFTER
    )
    return serialize_question(result)

@question_router.delete("/{question_id}", response_model=dict)
async def delete_question(question_id: str, current_user: dict = Depends(get_current_user)):
    question = find_question(question_id)
    if question["author"]["id"] != str(current_user["_id"]) and not is_admin(current_user):
        raise HTTPException(status_code=403, detail="Apenas o autor pode remover esta dúvida")

    # Cascade: answers go with their question
    db.answers.delete_many({"duvidaId": question_id})
    db.questions.delete_one({"_id": question["_id"]})
    return {"message": "Dúvida removida com sucesso", "question_id": question_id}
