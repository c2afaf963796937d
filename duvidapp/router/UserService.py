from fastapi import APIRouter, HTTPException, Depends, status
from fastapi.security import OAuth2PasswordBearer
from duvidapp.models.UserModel import UserLogin, UserProfile, UserRegister, UserUpdate
from duvidapp.config.auth import create_access_token, hash_password, verify_access_token, verify_password
from duvidapp.config.database import db, now, object_id

auth_router = APIRouter()
user_router = APIRouter()
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")

# Utility: Shape a stored user for responses
def serialize_user(user: dict) -> dict:
    return {
        "id": str(user["_id"]),
        "name": user["name"],
        "email": user["email"],
        "role": user.get("role", "user"),
        "avatar": user.get("avatar"),
        "createdAt": user.get("createdAt"),
    }

# Dependency: Resolve the bearer token to a stored user
def get_current_user(token: str = Depends(oauth2_scheme)) -> dict:
    payload = verify_access_token(token)
    if not payload or "sub" not in payload:
        raise HTTPException(status_code=401, detail="Token inválido ou expirado")

    user_id = object_id(payload["sub"])
    user = db.users.find_one({"_id": user_id}) if user_id else None
    if not user:
        raise HTTPException(status_code=401, detail="Usuário não encontrado")
    return user

def is_admin(user: dict) -> bool:
    return user.get("role") == "admin"

# Register a new user
@auth_router.post("/register", response_model=UserProfile, status_code=status.HTTP_201_CREATED)
async def register(user: UserRegister):
    if db.users.find_one({"email": user.email}):
        raise HTTPException(status_code=409, detail="Este email já está em uso.")

    user_data = user.model_dump(exclude={"password"})
    user_data["passwordHash"] = hash_password(user.password)
    user_data["avatar"] = None
    user_data["createdAt"] = now()

    result = db.users.insert_one(user_data)
    user_data["_id"] = result.inserted_id
    return serialize_user(user_data)

@auth_router.post("/login")
async def login(user: UserLogin):
    user_data = db.users.find_one({"email": user.email})
    if not user_data or not verify_password(user.password, user_data["passwordHash"]):
        raise HTTPException(status_code=401, detail="Email ou senha inválidos")

    # The client builds its session from these claims
    access_token = create_access_token(data={
        "sub": str(user_data["_id"]),
        "name": user_data["name"],
        "email": user_data["email"],
        "role": user_data.get("role", "user"),
    })
    return {"access_token": access_token}

# Update User Profile
@user_router.put("/{user_id}", response_model=UserProfile)
async def update_user(user_id: str, user: UserUpdate, current_user: dict = Depends(get_current_user)):
    if str(current_user["_id"]) != user_id:
        raise HTTPException(status_code=403, detail="Você só pode editar o seu próprio perfil")

    updated_data = user.model_dump(exclude_unset=True, exclude_none=True)
    current_password = updated_data.pop("currentPassword", None)

    if "password" in updated_data:
        if not current_password or not verify_password(current_password, current_user["passwordHash"]):
            raise HTTPException(status_code=401, detail="Senha atual incorreta")
        updated_data["passwordHash"] = hash_password(updated_data.pop("password"))

    if "email" in updated_data and updated_data["email"] != current_user["email"]:
        if db.users.find_one({"email": updated_data["email"]}):
            raise HTTPException(status_code=409, detail="Este email já está em uso.")

    if updated_data:
        db.users.update_one({"_id": current_user["_id"]}, {"$set": updated_data})
    updated_user = db.users.find_one({"_id": current_user["_id"]})
    return serialize_user(updated_user)
