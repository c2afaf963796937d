from fastapi import APIRouter, HTTPException, Depends, status
from typing import List, Optional
from duvidapp.models.AnswerModel import AnswerDetail, AnswerPost, AnswerUpdate, AnswerVerify
from duvidapp.config.database import db, now, object_id
from duvidapp.router.QuestionService import find_question
from duvidapp.router.UserService import get_current_user, is_admin
import pymongo

answer_router = APIRouter()

# Utility: Load an answer or fail with 404
def find_answer(answer_id: str) -> dict:
    oid = object_id(answer_id)
    answer = db.answers.find_one({"_id": oid}) if oid else None
    if not answer:
        raise HTTPException(status_code=404, detail="Resposta não encontrada")
    return answer

# Utility: Only the author or a teacher may change an answer
def check_owner(answer: dict, user: dict):
    if answer["authorId"] != str(user["_id"]) and not is_admin(user):
        raise HTTPException(status_code=403, detail="Apenas o autor pode alterar esta resposta")

def serialize_answer(answer: dict) -> dict:
    answer = dict(answer)
    answer["id"] = str(answer.pop("_id"))
    return answer

# Fetch answers by question ID
@answer_router.get("/{question_id}", response_model=List[AnswerDetail])
async def fetch_answers_by_question(question_id: str, current_user: dict = Depends(get_current_user)):
    find_question(question_id)
    answers = db.answers.find({"duvidaId": question_id}).sort([("createdAt", pymongo.ASCENDING), ("_id", pymongo.ASCENDING)])
    return [serialize_answer(answer) for answer in answers]

# Create an answer
@answer_router.post("", response_model=AnswerDetail, status_code=status.HTTP_201_CREATED)
async def create_answer(answer: AnswerPost, current_user: dict = Depends(get_current_user)):
    find_question(answer.duvidaId)

    answer_data = answer.model_dump()
    answer_data["authorId"] = str(current_user["_id"])
    answer_data["authorName"] = current_user["name"]
    answer_data["authorAvatar"] = current_user.get("avatar")
    answer_data["createdAt"] = now()
    answer_data["updatedAt"] = answer_data["createdAt"]
    answer_data["isVerified"] = False
    answer_data["isCorrect"] = False
    answer_data["verificationComment"] = None
    answer_data["likes"] = []
    answer_data["dislikes"] = []

    result = db.answers.insert_one(answer_data)
    answer_data["_id"] = result.inserted_id
    return serialize_answer(answer_data)

# Update an answer
@answer_router.put("/{answer_id}", response_model=AnswerDetail)
async def update_answer(answer_id: str, updated_answer: AnswerUpdate, current_user: dict = Depends(get_current_user)):
    answer = find_answer(answer_id)
    check_owner(answer, current_user)

    result = db.answers.find_one_and_update(
        {"_id": answer["_id"]},
        {"$set": {"content": updated_answer.content, "updatedAt": now()}},
        return_document=pymongo.ReturnDocument.AFTER
    )
    return serialize_answer(result)

# Delete an answer
@answer_router.delete("/{answer_id}", response_model=dict)
async def delete_answer(answer_id: str, current_user: dict = Depends(get_current_user)):
    answer = find_answer(answer_id)
    check_owner(answer, current_user)

    db.answers.delete_one({"_id": answer["_id"]})
    return {"message": "Resposta removida com sucesso", "answer_id": answer_id}

# Set or clear an answer's verification; a correct answer demotes its siblings
@answer_router.patch("/{answer_id}/verify", response_model=AnswerDetail)
async def verify_answer(answer_id: str, body: Optional[AnswerVerify] = None, current_user: dict = Depends(get_current_user)):
    answer = find_answer(answer_id)
    question = find_question(answer["duvidaId"])
    if not is_admin(current_user) and question["author"]["id"] != str(current_user["_id"]):
        raise HTTPException(status_code=403, detail="Apenas professores ou o autor da dúvida podem verificar respostas")

    body = body or AnswerVerify()
    is_correct = body.isVerified if body.isCorrect is None else body.isCorrect

    # At most one correct answer per question
    if is_correct:
        db.answers.update_many(
            {"duvidaId": answer["duvidaId"], "_id": {"$ne": answer["_id"]}},
            {"$set": {"isCorrect": False}}
        )
    update = {"isVerified": body.isVerified, "isCorrect": is_correct, "updatedAt": now()}
    if body.comment is not None:
        update["verificationComment"] = body.comment
    result = db.answers.find_one_and_update(
        {"_id": answer["_id"]},
        {"$set": update},
        return_document=pymongo.ReturnDocument.AFTER
    )
    return serialize_answer(result)

# Utility: Toggle the user in one vote set and drop them from the other
def toggle_vote(answer_id: str, user_id: str, field: str, other: str) -> dict:
    answer = find_answer(answer_id)
    if user_id in answer.get(field, []):
        change = {"$pull": {field: user_id}}
    else:
        change = {"$addToSet": {field: user_id}, "$pull": {other: user_id}}
    return db.answers.find_one_and_update(
        {"_id": answer["_id"]},
        change,
        return_document=pymongo.ReturnDocument.AFTER
    )

@answer_router.patch("/{answer_id}/like", response_model=AnswerDetail)
async def like_answer(answer_id: str, current_user: dict = Depends(get_current_user)):
    return serialize_answer(toggle_vote(answer_id, str(current_user["_id"]), "likes", "dislikes"))

@answer_router.patch("/{answer_id}/dislike", response_model=AnswerDetail)
async def dislike_answer(answer_id: str, current_user: dict = Depends(get_current_user)):
    return serialize_answer(toggle_vote(answer_id, str(current_user["_id"]), "dislikes", "likes"))
