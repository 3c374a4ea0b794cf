"""Run the API with uvicorn: python -m appointments"""

import uvicorn

from .config import HOST, LOG_LEVEL, PORT

if __name__ == "__main__":
    uvicorn.run(
        "appointments.main:app",
        host=HOST,
        port=PORT,
        log_level=LOG_LEVEL.lower(),
    )
