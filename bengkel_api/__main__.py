import os

import uvicorn

from bengkel_api.logging_config import logger

if __name__ == "__main__":
    port = int(os.environ.get("PORT", "3000"))
    logger.info(f"Server berjalan di http://localhost:{port}")
    uvicorn.run("bengkel_api.app:app", host="0.0.0.0", port=port)
