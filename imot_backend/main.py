"""
Punto de entrada del backend
"""
from imot_backend.app_factory import create_app
from imot_backend.config.logging_config import setup_logging

setup_logging()

app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
