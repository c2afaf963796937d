"""Development backend: the REST surface the client stores talk to.

Run locally with `uvicorn duvidapp.main:app --port 3000`.
"""
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from duvidapp.config.logging_config import configure_logging
from duvidapp.router import answer_router, auth_router, question_router, user_router

logger = configure_logging()

# Initialize FastAPI app and handle Middleware
app = FastAPI(title="DuvidApp development backend")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Errors go out as {"statusCode", "message"}, the shape the client reads
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"statusCode": exc.status_code, "message": exc.detail},
        headers=getattr(exc, "headers", None),
    )

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    messages = []
    for err in exc.errors():
        ctx_error = err.get("ctx", {}).get("error")
        messages.append(str(ctx_error) if ctx_error is not None else err["msg"])
    logger.info("Rejected %s %s: %s", request.method, request.url.path, messages)
    return JSONResponse(status_code=400, content={"statusCode": 400, "message": messages})

# Include routers from each service module
app.include_router(auth_router, prefix="/auth", tags=["Auth"])
app.include_router(user_router, prefix="/user", tags=["User"])
app.include_router(question_router, prefix="/duvida", tags=["Question"])
app.include_router(answer_router, prefix="/resposta", tags=["Answer"])
