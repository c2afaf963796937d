from duvidapp.stores.NotificationCenter import NotificationCenter, Toast
from duvidapp.stores.SessionStore import SessionState, SessionStore
from duvidapp.stores.QuestionStore import QuestionStore
from duvidapp.stores.AnswerStore import AnswerStore
from duvidapp.stores.ProfileStore import ProfileStore
from duvidapp.stores.optimistic import run_optimistic
from duvidapp.stores.filtering import apply_filters
