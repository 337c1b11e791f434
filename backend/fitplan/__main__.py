import uvicorn

from fitplan.config import PORT

if __name__ == "__main__":
    uvicorn.run("fitplan.main:app", host="0.0.0.0", port=PORT)
