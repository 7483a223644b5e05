"""FastAPI application and uvicorn entry point."""

import uvicorn
from fastapi import FastAPI

from session_setup.adapters.web.setup_routes import handoff_router, setup_router
from session_setup.config import CONFIG, __version__

app = FastAPI(title="Session Setup", version=__version__)
app.include_router(setup_router)
app.include_router(handoff_router)


@app.get("/health")
async def health():
    return {"status": "ok", "version": __version__}


def main():
    uvicorn.run(app, host=CONFIG["host"], port=CONFIG["port"])


if __name__ == "__main__":
    main()
