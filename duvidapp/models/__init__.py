from duvidapp.models.VoteModel import Vote, VoteType, apply_vote
from duvidapp.models.AnswerModel import (
    Answer,
    AnswerCreate,
    AnswerDetail,
    AnswerPost,
    AnswerUpdate,
    AnswerVerify,
    set_verification,
)
from duvidapp.models.UserModel import (
    RegisterResult,
    User,
    UserCreate,
    UserLogin,
    UserProfile,
    UserRegister,
    UserUpdate,
)
from duvidapp.models.QuestionModel import (
    Question,
    QuestionAuthor,
    QuestionCreate,
    QuestionDetail,
    QuestionFilters,
    QuestionUpdate,
)
