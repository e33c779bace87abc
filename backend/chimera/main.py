# chimera/main.py
import logging

from dotenv import load_dotenv
load_dotenv()

from fastapi import FastAPI

from chimera.config import CONFIG
from chimera.sim_api import router as sim_router

logging.basicConfig(level=logging.INFO)

app = FastAPI(title=CONFIG["PROJECT_NAME"])
app.include_router(sim_router, prefix="/sim", tags=["Simulation"])

print("🎮 Studio simulation ready:", CONFIG["PROJECT_NAME"])
print("🧠 Local agent endpoint:", CONFIG["LLM_BASE_URL"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="127.0.0.1", port=8000)
