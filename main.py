# main.py
import logging
import os

import uvicorn

logging.basicConfig(
    level=os.environ.get("HELIX_LOG_LEVEL", "INFO"),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

# Run the server
if __name__ == "__main__":
    uvicorn.run("helix.server:app", host="0.0.0.0", port=int(os.environ.get("PORT", 8080)))
