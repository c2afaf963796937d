from duvidapp.router.UserService import auth_router, user_router
from duvidapp.router.QuestionService import question_router
from duvidapp.router.AnswerService import answer_router
