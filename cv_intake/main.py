import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

load_dotenv()

from cv_intake.config import settings
from cv_intake.routers import submission

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="CV Intake API",
    description="Accepts CV uploads, extracts candidate details and forwards them downstream.",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[origin.strip() for origin in settings.cors_origin.split(",")],
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

app.include_router(submission.router, tags=["CV Submission"])


@app.get("/")
async def root():
    return {"message": "CV intake API is running. POST applications to /submit."}


# Local development runner
if __name__ == "__main__":
    import uvicorn

    uvicorn.run("cv_intake.main:app", host="0.0.0.0", port=settings.port, reload=True)
