import uvicorn

from .main import HOST, PORT, app, logger


if __name__ == "__main__":
    logger.info("Server starting on port %s", PORT)
    uvicorn.run(app, host=HOST, port=PORT)
