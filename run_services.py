import os

import uvicorn

if __name__ == "__main__":
    try:
        uvicorn.run(
            "directory_service.app.main:app",
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", 8001)),
            reload=os.getenv("RELOAD", "False").lower() == "true",
        )
    except KeyboardInterrupt:
        print("\nShutting down server...")
