from fastapi import FastAPI

from api.gemini.router import router as gemini_router
from utils import configure_logging


configure_logging()

app = FastAPI(title="Gemini Proxy", version="1.0.0")
app.include_router(gemini_router)


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
